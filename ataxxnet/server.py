"""Game server: registers two players and referees a game between them."""

from __future__ import annotations

import socket
import sys
import threading
from dataclasses import dataclass, field
from typing import Any

from .game import BLUE, RED, Board
from .protocol import MessageReader, ProtocolError, send_message

MAX_CLIENTS = 2
TIMEOUT = 5
USERNAME_LIMIT = 31
COLORS = (RED, BLUE)

_POLL_INTERVAL = 0.2


@dataclass
class Player:
    """A registered participant and the connection it plays over."""

    color: str
    username: str = ""
    sock: socket.socket | None = field(default=None, repr=False, compare=False)
    reader: MessageReader | None = field(default=None, repr=False, compare=False)
    registered: bool = False


def _nack(reason: str) -> dict[str, Any]:
    return {"type": "register_nack", "reason": reason}


def _coordinate(value: Any) -> int | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return int(value) - 1


class GameServer:
    """Listens on a TCP port, seats two players and runs one game."""

    def __init__(self, port: int | str, timeout: float = TIMEOUT):
        self.timeout = timeout
        self.board = Board.initial()
        self.players: list[Player] = []
        self.pass_count = 0
        self._stopped = threading.Event()
        self._listener = socket.create_server(("", int(port)), backlog=MAX_CLIENTS)

    @property
    def address(self) -> tuple[str, int]:
        """Host and port the server is listening on."""
        host, port = self._listener.getsockname()[:2]
        return host, port

    def __enter__(self) -> GameServer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Stop accepting connections and close every socket."""
        self._stopped.set()
        for player in self.players:
            if player.sock is not None:
                player.sock.close()
        self._listener.close()

    def register(self, message: Any) -> dict[str, Any]:
        """Handle a registration request and return the reply for the client."""
        if len(self.players) >= MAX_CLIENTS:
            return _nack("game is already running")
        if not isinstance(message, dict):
            return _nack("invalid register")
        username = message.get("username")
        if message.get("type") != "register" or not isinstance(username, str):
            return _nack("invalid register")
        if any(player.username == username for player in self.players):
            return _nack("username exists")
        self.players.append(
            Player(
                color=COLORS[len(self.players)],
                username=username[:USERNAME_LIMIT],
                registered=True,
            )
        )
        return {"type": "register_ack"}

    def _board_reply(self, kind: str, next_turn: int) -> dict[str, Any]:
        return {
            "type": kind,
            "board": self.board.rows(),
            "next_player": self.players[next_turn].username,
        }

    def process_move(self, turn: int, message: Any) -> tuple[dict[str, Any] | None, int]:
        """Apply a request from the player whose turn it is.

        Returns the reply to broadcast (None when the request is ignored)
        and the index of the player who moves next.
        """
        if not isinstance(message, dict) or message.get("type") != "move":
            return None, turn

        self.pass_count = 0
        coords = [_coordinate(message.get(key)) for key in ("sx", "sy", "tx", "ty")]
        color = self.players[turn].color
        other = 1 - turn

        if None in coords:
            return self._board_reply("invalid_move", other), turn
        r1, c1, r2, c2 = coords

        if (r1, c1, r2, c2) == (-1, -1, -1, -1):
            if self.board.has_valid_move(color):
                return self._board_reply("invalid_move", other), turn
            self.pass_count += 1
            return self._board_reply("pass", other), other

        if self.board.is_valid_input(r1, c1, r2, c2) and self.board.is_valid_move(
            color, r1, c1, r2, c2
        ):
            self.board.move(r1, c1, r2, c2)
            return self._board_reply("move_ok", turn), other

        return self._board_reply("invalid_move", other), turn

    def _send(self, player: Player, message: dict[str, Any]) -> None:
        if player.sock is None:
            return
        try:
            send_message(player.sock, message)
        except ProtocolError as exc:
            print(f"send_json: {exc}", file=sys.stderr)

    def _broadcast(self, message: dict[str, Any]) -> None:
        for player in self.players:
            self._send(player, message)

    def _accept_players(self) -> None:
        while len(self.players) < MAX_CLIENTS:
            try:
                conn, _ = self._listener.accept()
            except OSError as exc:
                if self._listener.fileno() < 0:
                    raise
                print(f"accept: {exc}", file=sys.stderr)
                continue
            reader = MessageReader(conn)
            try:
                request = reader.read()
            except (ProtocolError, OSError):
                request = None
            if request is None:
                conn.close()
                continue
            reply = self.register(request)
            try:
                send_message(conn, reply)
            except ProtocolError as exc:
                print(f"send_json: {exc}", file=sys.stderr)
            if reply["type"] == "register_ack":
                self.players[-1].sock = conn
                self.players[-1].reader = reader
            else:
                conn.close()

    def _reject_late_clients(self) -> None:
        self._listener.settimeout(_POLL_INTERVAL)
        while not self._stopped.is_set():
            try:
                conn, _ = self._listener.accept()
            except TimeoutError:
                continue
            except OSError:
                break
            with conn:
                conn.settimeout(None)
                try:
                    send_message(conn, _nack("game is already running"))
                except ProtocolError:
                    pass

    def _timeout_pass(self, turn: int) -> dict[str, Any]:
        self.pass_count += 1
        return self._board_reply("pass", 1 - turn)

    def _game_over_message(self) -> dict[str, Any]:
        first, second = self.players
        return {
            "type": "game_over",
            "board": self.board.rows(),
            "scores": {
                first.username: self.board.count(RED),
                second.username: self.board.count(BLUE),
            },
        }

    def _play(self) -> None:
        self._broadcast(
            {
                "type": "game_start",
                "players": [player.username for player in self.players],
                "first_player": self.players[0].username,
            }
        )
        turn = 0
        self.pass_count = 0
        while not self.board.is_game_over():
            player = self.players[turn]
            self._send(
                player,
                {"type": "your_turn", "board": self.board.rows(), "timeout": self.timeout},
            )
            try:
                player.sock.settimeout(self.timeout)
                request = player.reader.read()
            except TimeoutError:
                self._broadcast(self._timeout_pass(turn))
                if self.pass_count == 2 or self.board.is_game_over():
                    break
                turn = 1 - turn
                continue
            except (ProtocolError, OSError):
                break
            if request is None:
                break

            reply, next_turn = self.process_move(turn, request)
            if reply is None:
                continue
            self._broadcast(reply)
            if reply["type"] == "pass" and (
                self.pass_count == 2 or self.board.is_game_over()
            ):
                break
            turn = next_turn

        self._broadcast(self._game_over_message())

    def serve(self) -> None:
        """Seat two players, play one game, then close every socket."""
        rejecter = threading.Thread(target=self._reject_late_clients, daemon=True)
        try:
            self._accept_players()
            rejecter.start()
            self._play()
        finally:
            self._stopped.set()
            if rejecter.is_alive():
                rejecter.join()
            self.close()


def run_server(port: int | str) -> int:
    """Run one game on the given port; return a process exit status."""
    try:
        server = GameServer(port)
    except (OSError, ValueError):
        print(f"Failed to create listen socket on port {port}", file=sys.stderr)
        return 1
    print(f"Server started on port {port}")
    with server:
        server.serve()
    print("Server stopped.")
    return 0