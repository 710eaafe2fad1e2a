"""The Game board holds the `position` (in chess: the configuration of pieces on the board) and applies moves to it"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Iterable, Self

from src.chess.moves import Move
from src.chess.pieces import EMPTY, Piece, PieceKind, Side
from src.chess.position import BOARD_DIMENSIONS, Position, all_positions
from src.core.exceptions import GameStateError

# Black on top (row 0), white at the bottom.
STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass
class Board:
    grid: list[list[Piece]]

    @classmethod
    def empty(cls) -> Self:
        return cls(
            [[EMPTY for _ in range(BOARD_DIMENSIONS[1])] for _ in range(BOARD_DIMENSIONS[0])]
        )

    @classmethod
    def starting_position(cls) -> Self:
        """The canonical layout every game starts from"""
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def replay(cls, moves: Iterable[Move]) -> Self:
        """The board after playing all moves, in order, from the starting position."""
        board = cls.starting_position()
        board.move_pieces(moves)
        return board

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank (row 7) are the white pieces.
        """
        fen_by_rows = fen_str.split("/")
        if len(fen_by_rows) != BOARD_DIMENSIONS[0]:
            raise GameStateError(f"Expected {BOARD_DIMENSIONS[0]} ranks in {fen_str!r}")

        board = cls.empty()
        for row, fen_one_row in enumerate(fen_by_rows):
            col = 0
            for character in fen_one_row:
                if character.isalpha():
                    # simple case: a letter directly denotes the piece that should be created
                    board.place_piece(Piece.from_fen(character), Position(row, col))
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
            if col != BOARD_DIMENSIONS[1]:
                raise GameStateError(f"Rank {fen_one_row!r} does not describe {BOARD_DIMENSIONS[1]} squares")
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in self.grid)

    @staticmethod
    def _row_to_fen(row: list[Piece]) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece.is_empty:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, position: Position) -> Piece:
        return self.grid[position.row][position.col]

    def place_piece(self, piece: Piece, position: Position) -> None:
        self.grid[position.row][position.col] = piece

    def remove_piece(self, position: Position) -> None:
        self.place_piece(EMPTY, position)

    def move_piece(self, move: Move) -> None:
        """
        Apply the move to the position. No questions asked: legality is the caller's business.

        When the move carries a promotion, the piece that lands is replaced by one of the new kind (same side).
        An empty square is never promoted.
        """
        piece_that_moved = self.piece(move.from_position)
        self.remove_piece(move.from_position)
        promotion = move.promotion
        if promotion is not None and promotion != PieceKind.EMPTY and not piece_that_moved.is_empty:
            piece_that_moved = piece_that_moved.promoted_to(promotion)
        self.place_piece(piece_that_moved, move.to_position)

    def move_pieces(self, moves: Iterable[Move]) -> None:
        """convenience method to apply multiple moves"""
        for move in moves:
            self.move_piece(move)

    def locate_side(self, side: Side) -> list[Position]:
        return [position for position in all_positions() if self.piece(position).side == side]

    def locate_pieces(self, piece: Piece) -> list[Position]:
        return [position for position in all_positions() if self.piece(position) == piece]

    def locate_king(self, side: Side) -> Position:
        kings = self.locate_pieces(Piece(PieceKind.KING, side))
        if len(kings) != 1:
            raise GameStateError(f"Expected exactly one {side.name.lower()} king, found {len(kings)}")
        return kings[0]

    def snapshot(self) -> tuple[tuple[Piece, ...], ...]:
        """Read-only copy of the grid (for renderers)"""
        return tuple(tuple(row) for row in self.grid)

    def copy(self) -> Self:
        return deepcopy(self)
