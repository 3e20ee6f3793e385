import json
import socket
import threading

import pytest

from ataxxnet.client import GameClient, count_flips, generate_move, run_client
from ataxxnet.game import Board


def _board(*cells):
    grid = [["."] * 8 for _ in range(8)]
    for row, col, piece in cells:
        grid[row][col] = piece
    return Board(grid)


def test_count_flips_all_neighbours():
    cells = [(3 + dr, 3 + dc, "B") for dr in (-1, 0, 1) for dc in (-1, 0, 1) if (dr, dc) != (0, 0)]
    board = _board(*cells)
    assert count_flips(board, 3, 3, "R") == 8
    assert count_flips(board, 3, 3, "B") == 0


def test_count_flips_corner_limited_to_board():
    board = _board((0, 1, "R"), (1, 0, "R"), (1, 1, "R"))
    assert count_flips(board, 0, 0, "B") == 3


def test_generate_move_prefers_capture():
    board = _board((0, 0, "R"), (0, 3, "B"))
    move = generate_move(board, "R")
    assert move == (0, 0, 0, 2)
    r1, c1, r2, c2 = move
    assert board.is_valid_move("R", r1, c1, r2, c2)
    assert board.move(r1, c1, r2, c2)
    assert board.count("B") == 0


def test_generate_move_first_move_on_initial_board():
    board = Board.initial()
    move = generate_move(board, "R")
    assert move == (0, 0, 1, 0)


def test_generate_move_none_without_pieces_or_space():
    assert generate_move(_board((0, 0, "B")), "R") is None
    full = Board(["RB" * 4] * 8)
    assert generate_move(full, "R") is None


def test_handle_register_ack(capsys):
    client = GameClient("Alice", 0)
    assert client.handle({"type": "register_ack"}) is None
    assert "Registered: Alice" in capsys.readouterr().out
    assert not client.finished


def test_handle_register_nack_finishes(capsys):
    client = GameClient("Alice", 0)
    client.handle({"type": "register_nack", "reason": "username exists"})
    assert client.finished
    assert "Register failed: username exists" in capsys.readouterr().out


def test_game_start_assigns_colors():
    first = GameClient("Alice", 0)
    second = GameClient("Bob", 0)
    start = {"type": "game_start", "players": ["Alice", "Bob"]}
    first.handle(start)
    second.handle(start)
    assert (first.color, second.color) == ("R", "B")


def test_your_turn_returns_one_based_move(capsys):
    client = GameClient("Alice", 0)
    client.handle({"type": "game_start", "players": ["Alice", "Bob"]})
    board = Board.initial()
    reply = client.handle({"type": "your_turn", "board": board.rows(), "timeout": 5})
    r1, c1, r2, c2 = generate_move(board, "R")
    assert reply == {
        "type": "move", "username": "Alice",
        "sx": r1 + 1, "sy": c1 + 1, "tx": r2 + 1, "ty": c2 + 1,
    }
    out = capsys.readouterr().out
    assert "Timeout: 5.0 s" in out
    assert "Your turn" in out


def test_your_turn_without_move_sends_zeros():
    client = GameClient("Bob", 0)
    client.handle({"type": "game_start", "players": ["Alice", "Bob"]})
    reply = client.handle({"type": "your_turn", "board": ["R......."] + ["."*8] * 7})
    assert (reply["sx"], reply["sy"], reply["tx"], reply["ty"]) == (0, 0, 0, 0)


def test_move_result_printed_only_when_waiting(capsys):
    client = GameClient("Alice", 0)
    client.handle({"type": "move_ok"})
    assert "Move result" not in capsys.readouterr().out
    client.handle({"type": "game_start", "players": ["Alice", "Bob"]})
    client.handle({"type": "your_turn", "board": Board.initial().rows()})
    capsys.readouterr()
    client.handle({"type": "invalid_move"})
    assert "Move result: invalid_move" in capsys.readouterr().out


def test_game_over_prints_scores(capsys):
    client = GameClient("Alice", 0)
    client.handle({"type": "game_over", "board": Board.initial().rows(),
                   "scores": {"Alice": 2, "Bob": 2}})
    out = capsys.readouterr().out
    assert client.finished
    assert "Game Over" in out
    assert "  Alice: 2" in out and "  Bob: 2" in out


def test_ignores_messages_without_type():
    client = GameClient("Alice", 0)
    assert client.handle({"kind": "x"}) is None
    assert client.handle([1, 2]) is None
    assert not client.finished


def test_run_client_registers_and_exits():
    listener = socket.socket()
    listener.bind(("127.0.0.1", 0))
    listener.listen(1)
    port = listener.getsockname()[1]
    received = []

    def serve():
        conn, _ = listener.accept()
        with conn:
            data = b""
            while not data.endswith(b"\n"):
                data += conn.recv(1024)
            received.append(json.loads(data))
            for msg in ({"type": "register_ack"},
                        {"type": "game_start", "players": ["Alice", "Bob"]},
                        {"type": "game_over", "board": Board.initial().rows(),
                         "scores": {"Alice": 2, "Bob": 2}}):
                conn.sendall(json.dumps(msg).encode() + b"\n")

    thread = threading.Thread(target=serve)
    thread.start()
    try:
        status = run_client("127.0.0.1", port, "Alice")
    finally:
        thread.join(5)
        listener.close()
    assert status == 0
    assert received == [{"type": "register", "username": "Alice"}]


def test_run_client_connection_failure():
    probe = socket.socket()
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    assert run_client("127.0.0.1", port, "Alice") == 1