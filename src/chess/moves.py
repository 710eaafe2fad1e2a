"""
Geometry/Base movement and capturing rules

Key idea: one predicate per piece kind decides if a move has a valid shape for that piece (including pieces standing
in the way). The moving piece's kind selects the predicate.


Whether the move leaves your own king in check is decided later (see check.py)
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Self

from src.chess.pieces import FEN_TO_KIND, KIND_TO_FEN, Piece, PieceKind, Side
from src.chess.position import BOARD_DIMENSIONS, Position
from src.core.exceptions import InvalidRequestError


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, position: Position) -> Piece: ...


Vector = tuple[int, int]

# Guards the path walk against deltas that never reach the destination
MAX_PATH_STEPS = 256


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_position: Position
    to_position: Position
    promotion: Optional[PieceKind] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        One of the standard chess notations for moves

        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        if len(uci) > 5:
            raise InvalidRequestError(f"Cannot interpret {uci!r} as a move.")
        from_position = Position.from_algebraic(uci[:2])
        to_position = Position.from_algebraic(uci[2:4])
        promotion = None
        if len(uci) == 5:
            character = uci[4].lower()
            if character not in FEN_TO_KIND:
                raise InvalidRequestError(
                    f"Cannot interpret {uci[4]!r} as a piece to promote to."
                )
            promotion = FEN_TO_KIND[character]
        return cls(from_position, to_position, promotion)

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = KIND_TO_FEN[self.promotion] if self.is_promotion else ""
        return f"{self.from_position.to_algebraic()}{self.to_position.to_algebraic()}{piece_char}"

    @property
    def is_promotion(self) -> bool:
        return self.promotion is not None and self.promotion != PieceKind.EMPTY

    @property
    def delta(self) -> Vector:
        """(rows moved, columns moved). Negative rows: towards the 8th rank."""
        return (
            self.to_position.row - self.from_position.row,
            self.to_position.col - self.from_position.col,
        )


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


# --- PATH BLOCKING ---
def is_path_clear(move: Move, board: Board) -> bool:
    """
    Walk from the starting square towards the destination, one square at a time.
    ---

    Every axis with a nonzero delta gets a step of +1/-1, so the same walk works for straight lines and diagonals.
    Only the squares strictly between the two endpoints have to be empty.
    """
    d_row, d_col = move.delta
    if d_row == 0 and d_col == 0:
        return True

    step_row, step_col = _sign(d_row), _sign(d_col)
    row = move.from_position.row + step_row
    col = move.from_position.col + step_col
    for _ in range(MAX_PATH_STEPS):
        current = Position(row, col)
        if current == move.to_position:
            return True
        if not current.is_within_bounds():
            return False
        if not board.piece(current).is_empty:
            return False
        row += step_row
        col += step_col
    return False


def is_straight_move(move: Move, board: Board) -> bool:
    """Along a rank or a file, nothing in between"""
    d_row, d_col = move.delta
    return ((d_row == 0) != (d_col == 0)) and is_path_clear(move, board)


def is_diagonal_move(move: Move, board: Board) -> bool:
    """|delta_row| = |delta_col|, nothing in between"""
    d_row, d_col = move.delta
    return (abs(d_row) == abs(d_col) != 0) and is_path_clear(move, board)


# --- MOVEMENT RULES ---
# White moves UP the board (towards row 0), black moves DOWN
PAWN_DIRECTION: dict[Side, int] = {Side.WHITE: -1, Side.BLACK: 1}
PAWN_STARTING_ROW: dict[Side, int] = {
    Side.WHITE: BOARD_DIMENSIONS[0] - 2,
    Side.BLACK: 1,
}


def is_valid_pawn_move(move: Move, board: Board) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting rank), if both squares are empty
    - takes diagonally, and only then moves diagonally

    NOTE: no en passant
    """
    pawn = board.piece(move.from_position)
    target = board.piece(move.to_position)
    direction = PAWN_DIRECTION[pawn.side]
    d_row, d_col = move.delta

    # pawn pushes
    if d_col == 0:
        if not target.is_empty:
            return False
        if d_row == direction:
            return True
        on_starting_row = move.from_position.row == PAWN_STARTING_ROW[pawn.side]
        return d_row == 2 * direction and on_starting_row and is_path_clear(move, board)

    # pawn takes
    if abs(d_col) == 1 and d_row == direction:
        return target.side == pawn.side.opponent()
    return False


def is_valid_knight_move(move: Move, board: Board) -> bool:
    """Knights always move such that (|delta_row|, |delta_col|) is (1, 2) or (2, 1). They jump over everything."""
    d_row, d_col = move.delta
    return sorted((abs(d_row), abs(d_col))) == [1, 2]


def is_valid_bishop_move(move: Move, board: Board) -> bool:
    return is_diagonal_move(move, board)


def is_valid_rook_move(move: Move, board: Board) -> bool:
    return is_straight_move(move, board)


def is_valid_queen_move(move: Move, board: Board) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_straight_move(move, board) or is_diagonal_move(move, board)


def is_valid_king_move(move: Move, board: Board) -> bool:
    """
    The king can move by a single square at the time.
    """
    d_row, d_col = move.delta
    return abs(d_row) <= 1 and abs(d_col) <= 1


def is_valid_shape(move: Move, board: Board) -> bool:
    """
    Does the move fit the way the piece on the starting square moves?
    ---

    * Both squares must be on the board and there must be a piece to move.
    * Landing on a piece of your own side is never allowed (this also rules out not moving at all).
    * Then the rule of the moving piece's kind decides.
    """
    if not (move.from_position.is_within_bounds() and move.to_position.is_within_bounds()):
        return False

    piece = board.piece(move.from_position)
    if piece.is_empty:
        return False
    if board.piece(move.to_position).side == piece.side:
        return False

    match piece.kind:
        case PieceKind.PAWN:
            return is_valid_pawn_move(move, board)
        case PieceKind.KNIGHT:
            return is_valid_knight_move(move, board)
        case PieceKind.BISHOP:
            return is_valid_bishop_move(move, board)
        case PieceKind.ROOK:
            return is_valid_rook_move(move, board)
        case PieceKind.QUEEN:
            return is_valid_queen_move(move, board)
        case PieceKind.KING:
            return is_valid_king_move(move, board)
        case _:
            return False
