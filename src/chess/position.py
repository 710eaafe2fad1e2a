"""
A position (square) on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from src.core.exceptions import MalformedSquareError

# (rows, columns). Row 0 is the 8th rank: the far side for white, black's back rank.
BOARD_DIMENSIONS = (8, 8)
FILES = "abcdefgh"
RANKS = "12345678"


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Position:
        """Algebraic notation: 'a8' - 'h1' get converted to (0,0) - (7,7). File letters are accepted in either case."""
        if len(sq) != 2:
            raise MalformedSquareError(f"Cannot interpret {sq!r} as a square name.")

        file_char, rank_char = sq[0].lower(), sq[1]
        if file_char not in FILES or rank_char not in RANKS:
            raise MalformedSquareError(
                f"Cannot interpret {sq!r} as a square name. Use a file a-h followed by a rank 1-8."
            )
        return cls(row=BOARD_DIMENSIONS[0] - int(rank_char), col=FILES.index(file_char))

    def to_algebraic(self) -> str:
        return f"{self.file}{self.rank}"

    @property
    def file(self) -> str:
        return FILES[self.col]

    @property
    def rank(self) -> int:
        return BOARD_DIMENSIONS[0] - self.row

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def __str__(self) -> str:
        return self.to_algebraic()


def all_positions() -> Iterator[Position]:
    """Every square of the board, row by row starting at the 8th rank."""
    for row in range(BOARD_DIMENSIONS[0]):
        for col in range(BOARD_DIMENSIONS[1]):
            yield Position(row, col)
