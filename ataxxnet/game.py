"""Board model and rules for an Ataxx-style game on an 8x8 grid."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

BOARD_SIZE = 8
RED = "R"
BLUE = "B"
EMPTY = "."
OBSTACLE = "#"
VALID_CELLS = frozenset((RED, BLUE, EMPTY, OBSTACLE))

DIRECTIONS = (
    (-1, 0), (1, 0), (0, -1), (0, 1),
    (-1, -1), (-1, 1), (1, -1), (1, 1),
)

_CLONE_STEPS = frozenset({(1, 0), (0, 1), (1, 1)})
_JUMP_STEPS = frozenset({(2, 0), (0, 2), (2, 2)})

_WHITESPACE = " \t\n\r\f\v"
_INTEGER = re.compile(r"[ \t\n\r\f\v]*([+-]?\d+)")


def _on_board(row: int, col: int) -> bool:
    return 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE


class Board:
    """An 8x8 grid of cells: 'R', 'B', '.' (empty) or '#' (obstacle)."""

    def __init__(self, rows: Iterable[Iterable[str]]):
        grid = [list(row) for row in rows]
        if len(grid) != BOARD_SIZE or any(len(row) != BOARD_SIZE for row in grid):
            raise ValueError(f"a board needs {BOARD_SIZE} rows of {BOARD_SIZE} cells")
        self._grid = grid

    @classmethod
    def initial(cls) -> Board:
        """The starting position: red and blue pieces in opposite corners."""
        grid = [[EMPTY] * BOARD_SIZE for _ in range(BOARD_SIZE)]
        last = BOARD_SIZE - 1
        grid[0][0] = RED
        grid[0][last] = BLUE
        grid[last][0] = BLUE
        grid[last][last] = RED
        return cls(grid)

    def rows(self) -> list[str]:
        """The board as a list of row strings."""
        return ["".join(row) for row in self._grid]

    def copy(self) -> Board:
        return Board(self._grid)

    def __getitem__(self, position: tuple[int, int]) -> str:
        row, col = position
        self._check(row, col)
        return self._grid[row][col]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._grid == other._grid

    def __str__(self) -> str:
        return "\n".join(self.rows())

    def __repr__(self) -> str:
        return f"Board({self.rows()!r})"

    @staticmethod
    def _check(row: int, col: int) -> None:
        if not _on_board(row, col):
            raise IndexError(f"cell ({row}, {col}) is off the board")

    def _cells(self) -> Iterator[tuple[int, int, str]]:
        for r, row in enumerate(self._grid):
            for c, cell in enumerate(row):
                yield r, c, cell

    @staticmethod
    def _targets(row: int, col: int, distance: int) -> Iterator[tuple[int, int]]:
        for dr, dc in DIRECTIONS:
            nr, nc = row + distance * dr, col + distance * dc
            if _on_board(nr, nc):
                yield nr, nc

    def is_valid_input(self, r1: int, c1: int, r2: int, c2: int) -> bool:
        """True if every cell is a known symbol and both coordinates are on the board."""
        if any(cell not in VALID_CELLS for _, _, cell in self._cells()):
            return False
        return _on_board(r1, c1) and _on_board(r2, c2)

    def is_valid_move(self, player: str, r1: int, c1: int, r2: int, c2: int) -> bool:
        """True if the source holds the player's piece and the target is free."""
        source = self[r1, c1]
        target = self[r2, c2]
        if source not in (RED, BLUE):
            return False
        if target in (RED, BLUE, OBSTACLE):
            return False
        return source == player

    def move(self, r1: int, c1: int, r2: int, c2: int) -> bool:
        """Clone or jump the piece at (r1, c1) to (r2, c2) and flip neighbours.

        Returns False, leaving the board untouched, when the distance is
        neither a clone step nor a jump.
        """
        self._check(r1, c1)
        self._check(r2, c2)
        step = (abs(r1 - r2), abs(c1 - c2))
        if step in _CLONE_STEPS:
            jump = False
        elif step in _JUMP_STEPS:
            jump = True
        else:
            return False

        piece = self._grid[r1][c1]
        self._grid[r2][c2] = piece
        if jump:
            self._grid[r1][c1] = EMPTY
        for nr, nc in self._targets(r2, c2, 1):
            cell = self._grid[nr][nc]
            if cell not in (EMPTY, OBSTACLE) and cell != piece:
                self._grid[nr][nc] = piece
        return True

    def has_valid_move(self, player: str) -> bool:
        """True if any of the player's pieces can clone or jump to an empty cell."""
        for r, c, cell in self._cells():
            if cell != player:
                continue
            for distance in (1, 2):
                if any(self._grid[nr][nc] == EMPTY
                       for nr, nc in self._targets(r, c, distance)):
                    return True
        return False

    def count(self, cell: str) -> int:
        """Number of cells holding the given symbol."""
        return sum(row.count(cell) for row in self._grid)

    def is_game_over(self) -> bool:
        total = BOARD_SIZE * BOARD_SIZE
        red, blue = self.count(RED), self.count(BLUE)
        return (
            self.count(EMPTY) == 0
            or red == 0
            or blue == 0
            or self.count(OBSTACLE) == total
            or red + blue == total
        )

    def winner(self) -> str | None:
        """'R' or 'B' for the side with more pieces, None for a draw."""
        red, blue = self.count(RED), self.count(BLUE)
        if red > blue:
            return RED
        if blue > red:
            return BLUE
        return None

    def result_text(self) -> str:
        """The board followed by 'Red', 'Blue' or 'Draw', one item per line."""
        verdict = {RED: "Red", BLUE: "Blue", None: "Draw"}[self.winner()]
        return "\n".join([*self.rows(), verdict]) + "\n"


def parse_coordinates(line: str) -> tuple[int, int, int, int]:
    """Parse four 1-based integers 'r1 c1 r2 c2' into zero-based coordinates.

    Raises ValueError unless the line holds exactly four integers and
    nothing but whitespace after them.
    """
    if not line or line.startswith("\n"):
        raise ValueError("empty coordinate line")
    values = []
    pos = 0
    for _ in range(4):
        match = _INTEGER.match(line, pos)
        if match is None:
            raise ValueError(f"expected four integers: {line!r}")
        values.append(int(match.group(1)))
        pos = match.end()
    if line[pos:].strip(_WHITESPACE):
        raise ValueError(f"unexpected text after coordinates: {line!r}")
    r1, c1, r2, c2 = (value - 1 for value in values)
    return r1, c1, r2, c2