"""Game client: registers with a server and answers each turn with a greedy move."""

from __future__ import annotations

import socket
import sys
import time
from typing import Any

from .game import BLUE, BOARD_SIZE, DIRECTIONS, EMPTY, RED, Board
from .protocol import MessageReader, ProtocolError, send_message

DEFAULT_THINK_TIME = 2.0

Move = tuple[int, int, int, int]


def _on_board(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


def count_flips(board: Board, row: int, col: int, player: str) -> int:
    """Number of opponent pieces adjacent to (row, col) that a move there would flip."""
    opponent = BLUE if player == RED else RED
    return sum(
        1
        for dr, dc in DIRECTIONS
        if _on_board(row + dr, col + dc) and board[row + dr, col + dc] == opponent
    )


def generate_move(board: Board, player: str) -> Move | None:
    """Pick the clone or jump that flips the most opponent pieces.

    Pieces are scanned row by row; for each, clone targets are tried
    before jump targets, and the first move reaching the best score wins.
    Returns zero-based (r1, c1, r2, c2), or None when there is no move.
    """
    best_score = -1
    best: Move | None = None
    for row, col in ((r, c) for r in range(BOARD_SIZE) for c in range(BOARD_SIZE)):
        if board[row, col] != player:
            continue
        for distance in (1, 2):
            for dr, dc in DIRECTIONS:
                nr, nc = row + distance * dr, col + distance * dc
                if not _on_board(nr, nc) or board[nr, nc] != EMPTY:
                    continue
                flips = count_flips(board, nr, nc, player)
                if flips > best_score:
                    best_score = flips
                    best = (row, col, nr, nc)
    return best


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _row_strings(rows: Any) -> list[str]:
    if not isinstance(rows, list):
        return []
    return [row[:BOARD_SIZE] for row in rows[:BOARD_SIZE] if isinstance(row, str)]


class GameClient:
    """Reacts to server messages; handle() returns the reply to send, if any."""

    def __init__(self, username: str, think_time: float = DEFAULT_THINK_TIME):
        self.username = username
        self.think_time = think_time
        self.color: str | None = None
        self.finished = False
        self._waiting_for_result = False

    def handle(self, message: Any) -> dict[str, Any] | None:
        """Process one server message and return the message to send back, or None."""
        if not isinstance(message, dict):
            return None
        kind = message.get("type")
        if not isinstance(kind, str):
            return None

        if kind == "register_ack":
            print(f"Registered: {self.username}")
        elif kind == "register_nack":
            reason = message.get("reason")
            if isinstance(reason, str):
                print(f"Register failed: {reason}")
            else:
                print("Register failed (unknown reason)")
            self.finished = True
        elif kind == "game_start":
            self._on_game_start(message)
        elif kind == "your_turn":
            return self._on_your_turn(message)
        elif kind in ("move_ok", "invalid_move", "pass"):
            if self._waiting_for_result:
                print(f"Move result: {kind}")
                print("Next player's turn")
                self._waiting_for_result = False
        elif kind == "game_over":
            self._on_game_over(message)
            self.finished = True
        return None

    def _on_game_start(self, message: dict[str, Any]) -> None:
        print("Game started")
        players = message.get("players")
        if isinstance(players, list):
            first = players[0] if players else None
            self.color = RED if first == self.username else BLUE

    def _on_your_turn(self, message: dict[str, Any]) -> dict[str, Any]:
        raw_rows = message.get("board")
        rows = _row_strings(raw_rows)
        if isinstance(raw_rows, list):
            print("Current board:")
            for row in rows:
                print(row)
        if "timeout" in message:
            timeout = message["timeout"]
            seconds = float(timeout) if _is_number(timeout) else 0.0
            print(f"Timeout: {seconds:.1f} s")

        padded = [row.ljust(BOARD_SIZE, EMPTY) for row in rows]
        padded += [EMPTY * BOARD_SIZE] * (BOARD_SIZE - len(padded))
        board = Board(padded)

        print("Your turn")
        if self.think_time > 0:
            time.sleep(self.think_time)
        chosen = generate_move(board, self.color) if self.color else None
        sx, sy, tx, ty = (v + 1 for v in chosen) if chosen else (0, 0, 0, 0)
        self._waiting_for_result = True
        return {
            "type": "move",
            "username": self.username,
            "sx": sx,
            "sy": sy,
            "tx": tx,
            "ty": ty,
        }

    def _on_game_over(self, message: dict[str, Any]) -> None:
        print("Game Over")
        raw_rows = message.get("board")
        if isinstance(raw_rows, list):
            print("Final board:")
            for row in _row_strings(raw_rows):
                print(row)
        scores = message.get("scores")
        if isinstance(scores, dict):
            print("Final scores:")
            for name, score in scores.items():
                points = int(score) if _is_number(score) else 0
                print(f"  {name}: {points}")


def run_client(host: str, port: int | str, username: str) -> int:
    """Connect, register and play until the game ends; return a process exit status."""
    try:
        sock = socket.create_connection((host, int(port)))
    except (OSError, ValueError):
        print(f"Failed to connect to {host}:{port}", file=sys.stderr)
        return 1

    with sock:
        try:
            send_message(sock, {"type": "register", "username": username})
        except ProtocolError:
            print("Failed to send register message", file=sys.stderr)
            return 1

        client = GameClient(username)
        reader = MessageReader(sock)
        while not client.finished:
            try:
                message = reader.read()
            except (ProtocolError, OSError):
                break
            if message is None:
                break
            reply = client.handle(message)
            if reply is not None:
                try:
                    send_message(sock, reply)
                except ProtocolError:
                    print("Failed to send move/pass message", file=sys.stderr)
                    break
    return 0