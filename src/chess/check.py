"""
Check and checkmate detection.

A king is in check when any opposing piece could move onto its square under the movement rules.
Candidate moves are tried out on a copy of the board, so the board passed in is never changed.
"""

from typing import Iterator

from src.chess.board import Board
from src.chess.moves import Move, is_valid_shape
from src.chess.pieces import Side
from src.chess.position import Position, all_positions


def is_attacked(board: Board, target: Position, by_side: Side) -> bool:
    """Could any piece of `by_side` move onto the target square?"""
    return any(
        is_valid_shape(Move(attacker, target), board)
        for attacker in board.locate_side(by_side)
    )


def is_in_check(board: Board, side: Side) -> bool:
    king = board.locate_king(side)
    return is_attacked(board, king, side.opponent())


def leaves_king_in_check(board: Board, move: Move) -> bool:
    """Return True if, after the move, the moving side's king is (still) in check

    plan:
    1. Copy the board
    2. make the candidate move
    3. determine if king is in check on the new board
    """
    side = board.piece(move.from_position).side
    speculative = board.copy()
    speculative.move_piece(move)
    return is_in_check(speculative, side)


def is_legal_move(board: Board, move: Move) -> bool:
    """Valid shape for the piece AND your own king is safe afterwards"""
    return is_valid_shape(move, board) and not leaves_king_in_check(board, move)


def iter_legal_moves(board: Board, side: Side) -> Iterator[Move]:
    """
    Every legal move of the side, found by trying each own piece on each of the 64 squares.
    ---

    NOTE: promotions are not expanded. The kind a pawn promotes into does not change whether the move is legal.
    """
    for origin in board.locate_side(side):
        for destination in all_positions():
            move = Move(origin, destination)
            if is_legal_move(board, move):
                yield move


def has_legal_move(board: Board, side: Side) -> bool:
    return next(iter_legal_moves(board, side), None) is not None


def is_checkmate(board: Board, side: Side) -> bool:
    """In check, and nothing gets you out of it"""
    return is_in_check(board, side) and not has_legal_move(board, side)
