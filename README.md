# ataxxnet

A small networked Ataxx game. One process runs the server, which
accepts two players, keeps the 8×8 board and enforces the rules; each
player runs the client, which registers a username and plays
automatically by choosing the move that flips the most opposing pieces.

Messages are single-line JSON objects terminated by a newline, sent over
TCP. No third-party libraries are needed.

## Installing

```
pip install .
```

## Running

Start the server on a port:

```
ataxxnet server -p 9000
```

Then start two clients, each with its own username:

```
ataxxnet client -i 127.0.0.1 -p 9000 -u Alice
ataxxnet client -i 127.0.0.1 -p 9000 -u Bob
```

If the mode or a required option is missing, the usage text is printed
and the command exits with status 1. Arguments other than `-i`, `-p`
and `-u` are ignored.

## How a game runs

- The server starts with Red (`R`) in the top-left and bottom-right
  corners and Blue (`B`) in the other two.
- The first player to register plays Red, the second plays Blue. A
  repeated username is refused with `register_nack` ("username exists");
  usernames are cut to 31 characters. Connections arriving once both
  seats are taken get `register_nack` ("game is already running").
- The server sends `game_start` with both usernames, then `your_turn`
  to the player to move, with the board and a timeout of 5 seconds.
- The client waits two seconds, then replies with a `move` whose
  coordinates `sx`, `sy`, `tx`, `ty` are 1-based; all zeros means pass.
- The server broadcasts `move_ok`, `invalid_move` or `pass` with the
  board and the next player's name. A pass is accepted only when the
  player has no legal move; a player who does not answer in time passes.
- The game ends when no empty cell is left, when one side has no pieces,
  or when two passes come in a row. The server then broadcasts
  `game_over` with the final board and each player's piece count.

The client prints each board it receives, the results of its moves, and
the final scores.

## Rules in brief

- `.` is an empty cell, `#` an obstacle, `R` and `B` are pieces.
- Moving to an adjacent cell (including diagonals) copies the piece.
- Moving exactly two cells away in a straight or diagonal line jumps:
  the piece leaves its old cell.
- After either move, every opposing piece next to the destination
  turns to the mover's colour.

## Using the library

```python
from ataxxnet.game import Board

board = Board.initial()
board.move(0, 0, 1, 1)
print(board.result_text())
```

- `ataxxnet.game.Board` holds the grid and the rules (`is_valid_move`,
  `move`, `has_valid_move`, `count`, `is_game_over`, `winner`);
  `parse_coordinates` turns a line such as `"1 1 2 2"` into zero-based
  coordinates.
- `ataxxnet.client.generate_move(board, player)` returns the move the
  automatic client would play, or `None` when there is none;
  `GameClient.handle(message)` returns the reply to a server message.
- `ataxxnet.server.GameServer` can be embedded to host a game:
  `register` and `process_move` apply single requests, `serve` runs a
  whole game.
- `ataxxnet.protocol` offers `send_message` and `MessageReader` for the
  newline-delimited JSON framing; lines longer than 4095 bytes or not
  valid JSON raise `ProtocolError`.

## What it does not do

- Boards are shown only as text in the terminal; there is no graphical
  or LED display.
- The client always plays by itself; there is no way for a person to
  enter moves during a networked game.
- A server hosts a single game and stops when it ends.

## Tests

```
pip install .[test]
pytest
```