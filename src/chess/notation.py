"""
Algebraic notation of the moves played in a game.

Works on a private replay of the move list, so nothing outside is changed.
"""

from typing import Iterable, Optional

from src.chess.board import Board
from src.chess.check import is_checkmate, is_in_check
from src.chess.moves import Move, is_valid_shape
from src.chess.pieces import KIND_TO_FEN, PIECE_SYMBOLS, PieceKind
from src.chess.position import Position

MOVES_PER_LINE = 3
CAPTURE_MARKER = "x"
CHECK_MARKER = "+"
CHECKMATE_MARKER = "#"


def disambiguate(board: Board, move: Move) -> str:
    """
    The extra token needed when another piece of the same kind and side could also move to the destination.
    ---

    * nobody else can get there: nothing
    * the file of the starting square tells them apart: the file
    * otherwise, if the rank does: the rank
    * neither does: the full starting square
    """
    piece = board.piece(move.from_position)
    rivals: list[Position] = [
        position
        for position in board.locate_pieces(piece)
        if position != move.from_position
        and is_valid_shape(Move(position, move.to_position), board)
    ]
    if not rivals:
        return ""

    origin = move.from_position
    if all(rival.col != origin.col for rival in rivals):
        return origin.file
    if all(rival.row != origin.row for rival in rivals):
        return str(origin.rank)
    return origin.to_algebraic()


def format_move(board: Board, move: Move) -> str:
    """Notation of a single move, given the board BEFORE the move is made. The board is not changed."""
    piece = board.piece(move.from_position)
    is_capture = not board.piece(move.to_position).is_empty

    if piece.kind == PieceKind.PAWN:
        # pawns are told apart by the file they capture from
        prefix = move.from_position.file if is_capture else ""
    else:
        prefix = PIECE_SYMBOLS[piece.kind] + disambiguate(board, move)

    token = prefix + (CAPTURE_MARKER if is_capture else "") + move.to_position.to_algebraic()
    promotion = move.promotion
    if promotion is not None and promotion != PieceKind.EMPTY:
        token += "=" + KIND_TO_FEN[promotion].upper()

    after = board.copy()
    after.move_piece(move)
    opponent = piece.side.opponent()
    if is_checkmate(after, opponent):
        token += CHECKMATE_MARKER
    elif is_in_check(after, opponent):
        token += CHECK_MARKER
    return token


def algebraic_notation(moves: Iterable[Move], board: Optional[Board] = None) -> str:
    """
    The move list as text: space separated, with a line break after every third move.

    Replays from the starting position unless another starting board is given.
    """
    board = Board.starting_position() if board is None else board.copy()
    tokens: list[str] = []
    for move in moves:
        tokens.append(format_move(board, move))
        board.move_piece(move)

    lines = [
        " ".join(tokens[i : i + MOVES_PER_LINE])
        for i in range(0, len(tokens), MOVES_PER_LINE)
    ]
    return "\n".join(lines)
