"""Defines the chess pieces and the two sides"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self

from src.core.exceptions import GameStateError


class PieceKind(Enum):
    EMPTY = auto()
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Side(Enum):
    NONE = auto()
    WHITE = auto()
    BLACK = auto()

    def opponent(self) -> Side:
        if self == Side.WHITE:
            return Side.BLACK
        if self == Side.BLACK:
            return Side.WHITE
        return Side.NONE


FEN_TO_KIND: dict[str, PieceKind] = {
    "p": PieceKind.PAWN,
    "n": PieceKind.KNIGHT,
    "b": PieceKind.BISHOP,
    "r": PieceKind.ROOK,
    "q": PieceKind.QUEEN,
    "k": PieceKind.KING,
}

KIND_TO_FEN: dict[PieceKind, str] = {value: key for key, value in FEN_TO_KIND.items()}

# Symbols used in algebraic notation. Pawns go without one.
PIECE_SYMBOLS: dict[PieceKind, str] = {
    PieceKind.PAWN: "",
    PieceKind.KNIGHT: "N",
    PieceKind.BISHOP: "B",
    PieceKind.ROOK: "R",
    PieceKind.QUEEN: "Q",
    PieceKind.KING: "K",
}


@dataclass(frozen=True)
class Piece:
    kind: PieceKind
    side: Side

    def __post_init__(self) -> None:
        # an empty square has no side, and a real piece always has one
        if (self.kind == PieceKind.EMPTY) != (self.side == Side.NONE):
            raise GameStateError(f"Invalid piece: {self.kind.name} of side {self.side.name}")

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        side = Side.WHITE if character.isupper() else Side.BLACK
        kind = FEN_TO_KIND[character.lower()]
        return cls(kind, side)

    def to_fen(self) -> str:
        return (
            KIND_TO_FEN[self.kind].upper()
            if self.side == Side.WHITE
            else KIND_TO_FEN[self.kind].lower()
        )

    @property
    def is_empty(self) -> bool:
        return self.kind == PieceKind.EMPTY

    def promoted_to(self, kind: PieceKind) -> Piece:
        return Piece(kind, self.side)


EMPTY = Piece(PieceKind.EMPTY, Side.NONE)
