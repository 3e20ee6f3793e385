"""Command-line entry point: run either the game server or a playing client."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass

from .client import run_client
from .server import run_server

PROG = "ataxxnet"


class UsageError(ValueError):
    """The command line does not name a mode with all of its required options."""


@dataclass(frozen=True)
class Command:
    """A parsed command line."""

    mode: str
    port: str
    host: str | None = None
    username: str | None = None


def usage(prog: str = PROG) -> str:
    """The usage text shown for a malformed command line."""
    return (
        "Usage:\n"
        f"  {prog} server -p <port>\n"
        f"  {prog} client -i <ip> -p <port> -u <username>\n"
    )


def _options(args: Sequence[str], wanted: frozenset[str]) -> dict[str, str]:
    """Collect '-x value' pairs for the wanted flags; other arguments are ignored."""
    found: dict[str, str] = {}
    items = iter(args)
    for arg in items:
        if arg in wanted:
            value = next(items, None)
            if value is None:
                break
            found[arg] = value
    return found


def parse_args(argv: Sequence[str]) -> Command:
    """Parse the arguments that follow the program name.

    Raises UsageError when the mode is missing or unknown, or when a
    required option is absent.
    """
    if not argv:
        raise UsageError("no mode given")
    mode, rest = argv[0], argv[1:]

    if mode == "server":
        options = _options(rest, frozenset({"-p"}))
        if "-p" not in options:
            raise UsageError("server mode needs -p <port>")
        return Command(mode="server", port=options["-p"])

    if mode == "client":
        options = _options(rest, frozenset({"-i", "-p", "-u"}))
        missing = [flag for flag in ("-i", "-p", "-u") if flag not in options]
        if missing:
            raise UsageError(f"client mode is missing {', '.join(missing)}")
        return Command(
            mode="client",
            port=options["-p"],
            host=options["-i"],
            username=options["-u"],
        )

    raise UsageError(f"unknown mode: {mode!r}")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the program and return its exit status."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        command = parse_args(args)
    except UsageError:
        print(usage(), end="")
        return 1

    if command.mode == "server":
        return run_server(command.port)
    return run_client(command.host, command.port, command.username)


if __name__ == "__main__":
    sys.exit(main())