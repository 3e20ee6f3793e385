"""Newline-delimited JSON messages over a stream socket."""

from __future__ import annotations

import json
import socket
from collections.abc import Iterator
from typing import Any

MAX_LINE = 4095


class ProtocolError(Exception):
    """A message could not be sent, framed or decoded."""


def send_message(sock: socket.socket, message: Any) -> None:
    """Send one message as compact JSON followed by a newline."""
    payload = json.dumps(message, separators=(",", ":"), ensure_ascii=False)
    try:
        sock.sendall(payload.encode("utf-8") + b"\n")
    except OSError as exc:
        raise ProtocolError(f"failed to send message: {exc}") from exc


class MessageReader:
    """Reads newline-delimited JSON messages from a socket, buffering partial lines."""

    def __init__(self, sock: socket.socket):
        self._sock = sock
        self._buffer = bytearray()

    def read(self) -> Any | None:
        """Return the next decoded message, or None once the peer has closed.

        Raises ProtocolError for a line longer than MAX_LINE bytes or one
        that is not valid JSON; the bad line is consumed.
        """
        while True:
            newline = self._buffer.find(b"\n")
            if newline >= 0:
                line = bytes(self._buffer[:newline])
                del self._buffer[: newline + 1]
                try:
                    return json.loads(line.decode("utf-8"))
                except (UnicodeDecodeError, json.JSONDecodeError) as exc:
                    raise ProtocolError(f"malformed message: {line!r}") from exc

            if len(self._buffer) >= MAX_LINE:
                raise ProtocolError("message exceeds the maximum line length")
            chunk = self._sock.recv(MAX_LINE - len(self._buffer))
            if not chunk:
                return None
            self._buffer += chunk

    def __iter__(self) -> Iterator[Any]:
        while (message := self.read()) is not None:
            yield message