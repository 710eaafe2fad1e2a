"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the command layer.

The move list is the single source of truth. The board is always what you get by replaying it.
"""

import random
from dataclasses import dataclass, field
from typing import Optional, Protocol, Self

from loguru import logger

from src.chess.board import Board
from src.chess.check import is_checkmate, iter_legal_moves, leaves_king_in_check
from src.chess.moves import Move, is_valid_shape
from src.chess.notation import algebraic_notation
from src.chess.pieces import PieceKind, Side
from src.core.exceptions import (
    GameOverError,
    GameStateError,
    IllegalMoveError,
    IllegalShapeError,
    NotOwnerError,
    SelfCheckError,
    WrongTurnError,
)
from src.core.models import GameModel, PlayerModel

DEFAULT_PLAYER_COLORS: dict[Side, str] = {Side.WHITE: "#ffffff", Side.BLACK: "#000000"}
# light / dark squares
DEFAULT_BOARD_COLORS: tuple[str, str] = ("#fdd18a", "#893922")
PROMOTION_KINDS = frozenset({PieceKind.KNIGHT, PieceKind.BISHOP, PieceKind.ROOK, PieceKind.QUEEN})


class RandomSource(Protocol):
    def random(self) -> float: ...


def _side_from_name(name: str) -> Side:
    if name.upper() not in (Side.WHITE.name, Side.BLACK.name):
        raise GameStateError(f"Invalid side: {name!r}. \nPick one from white,black")
    return Side[name.upper()]


def game_id(guild_id: str, player_a: str, player_b: str) -> str:
    """Key of the match between two players in a guild. Does not depend on who is white."""
    first, second = sorted((player_a, player_b))
    return f"{guild_id}_{first}_{second}"


@dataclass
class Player:
    identity: str
    side: Side
    color: str


@dataclass(frozen=True)
class MoveOutcome:
    """Result of a move that passed validation. Checkmate is a result, not an error."""

    move: Move
    checkmate: bool = False
    winner: Side = Side.NONE


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    white: Player
    black: Player
    guild_id: str
    moves: list[Move] = field(default_factory=list)
    turn: Side = Side.WHITE
    winner: Side = Side.NONE
    board_colors: tuple[str, str] = DEFAULT_BOARD_COLORS
    board: Board = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.replay()

    @classmethod
    def create(
        cls,
        player_a: str,
        player_b: str,
        guild_id: str,
        colors: Optional[tuple[str, str]] = None,
        rng: Optional[RandomSource] = None,
    ) -> Self:
        """
        Start a new game between two players. A coin flip decides who plays white.

        `colors` are the display colors of (white, black).
        """
        if player_a == player_b:
            raise GameStateError("You cannot play against yourself.")

        rng = rng or random.Random()
        white, black = (player_a, player_b) if rng.random() > 0.5 else (player_b, player_a)
        white_color, black_color = colors or (
            DEFAULT_PLAYER_COLORS[Side.WHITE],
            DEFAULT_PLAYER_COLORS[Side.BLACK],
        )
        game = cls(
            white=Player(white, Side.WHITE, white_color),
            black=Player(black, Side.BLACK, black_color),
            guild_id=guild_id,
        )
        logger.info(f"New game {game.id}: {white} plays white, {black} plays black")
        return game

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""
        players = {_side_from_name(player.side): player for player in model.players}
        if set(players) != {Side.WHITE, Side.BLACK}:
            raise GameStateError(f"Game {model.game_id} needs exactly one white and one black player.")

        # white moves first, so the length of the move list decides whose turn it is
        expected_turn = Side.WHITE if len(model.moves_uci) % 2 == 0 else Side.BLACK
        if _side_from_name(model.turn) != expected_turn:
            raise GameStateError(
                f"Game {model.game_id} has {len(model.moves_uci)} moves, so it is {expected_turn.name.lower()}'s turn, not {model.turn}."
            )

        white, black = players[Side.WHITE], players[Side.BLACK]
        return cls(
            white=Player(white.identity, Side.WHITE, white.color),
            black=Player(black.identity, Side.BLACK, black.color),
            guild_id=model.guild_id,
            moves=[Move.from_uci(uci) for uci in model.moves_uci],
            turn=expected_turn,
            winner=_side_from_name(model.winner) if model.winner else Side.NONE,
            board_colors=(
                tuple(model.board_colors) if model.board_colors else DEFAULT_BOARD_COLORS
            ),
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            game_id=self.id,
            guild_id=self.guild_id,
            players=[
                PlayerModel(player.identity, player.side.name.lower(), player.color)
                for player in (self.white, self.black)
            ],
            moves_uci=[move.to_uci() for move in self.moves],
            turn=self.turn.name.lower(),
            winner=None if self.winner == Side.NONE else self.winner.name.lower(),
            board_colors=list(self.board_colors),
        )

    @property
    def id(self) -> str:
        return game_id(self.guild_id, self.white.identity, self.black.identity)

    @property
    def is_over(self) -> bool:
        return self.winner != Side.NONE

    def player(self, identity: str) -> Player:
        if identity == self.white.identity:
            return self.white
        if identity == self.black.identity:
            return self.black
        raise GameStateError(f"{identity} is not playing in game {self.id}.")

    def opponent(self, identity: str) -> Player:
        player = self.player(identity)
        return self.black if player.side == Side.WHITE else self.white

    def player_of_side(self, side: Side) -> Player:
        return self.white if side == Side.WHITE else self.black

    def replay(self) -> None:
        """Rebuild the board from the move list."""
        self.board = Board.replay(self.moves)

    def validate_move(self, player: str, move: Move) -> MoveOutcome:
        """
        Check a move without making it
        -----

        1. the game must still be going on
        2. it must be your turn
        3. the piece must be yours
        4. the piece must be able to move like that (no king capture, no promotion into a king or pawn)
        5. your own king may not be in check afterwards
        6. finally: does the move checkmate your opponent?

        Raises on the first check that fails. Never changes the game.
        """
        if self.is_over:
            raise GameOverError(
                f"Game {self.id} is over. {self.player_of_side(self.winner).identity} won."
            )

        side = self.player(player).side
        if side != self.turn:
            raise WrongTurnError(
                f"It is not your turn. Waiting for {self.player_of_side(self.turn).identity} to make a move first."
            )

        if not self._on_board(move) or self.board.piece(move.from_position).side != side:
            raise NotOwnerError(f"There is no piece of yours on {move.from_position}.")

        if not is_valid_shape(move, self.board):
            raise IllegalShapeError(f"Move not allowed: {self._describe(move)}")

        promotion = move.promotion
        if promotion is not None and promotion != PieceKind.EMPTY and promotion not in PROMOTION_KINDS:
            raise IllegalShapeError(f"Pawns cannot promote to a {promotion.name.lower()}: {self._describe(move)}")

        if self.board.piece(move.to_position).kind == PieceKind.KING:
            raise IllegalShapeError(f"Kings cannot be captured: {self._describe(move)}")

        if leaves_king_in_check(self.board, move):
            raise SelfCheckError(f"Move not allowed, your king would be in check: {self._describe(move)}")

        after = self.board.copy()
        after.move_piece(move)
        if is_checkmate(after, side.opponent()):
            return MoveOutcome(move, checkmate=True, winner=side)
        return MoveOutcome(move)

    def commit(self, move: Move) -> None:
        """
        Make the move, whether it was validated or not
        -----

        1. update the (history of) moves
        2. update the board
        3. hand the turn to the other side
        """
        if self.is_over:
            raise GameOverError(f"Game {self.id} is over. No more moves.")

        self.moves.append(move)
        self.board.move_piece(move)
        self.turn = self.turn.opponent()
        logger.debug(f"Game {self.id}: committed {move.to_uci()}, {self.turn.name.lower()} to move")

    def make_move(self, player: str, move: Move) -> MoveOutcome:
        """Validate, commit, and record the winner when the move mates."""
        try:
            outcome = self.validate_move(player, move)
        except IllegalMoveError as e:
            logger.warning(f"Game {self.id}: rejected {self._describe(move)} by {player}: {e}")
            raise

        self.commit(move)
        if outcome.checkmate:
            self.winner = outcome.winner
            logger.info(f"Game {self.id}: checkmate, {self.winner.name.lower()} wins")
        return outcome

    def resign(self, player: str) -> Side:
        """The opponent wins. The position on the board does not matter."""
        if self.is_over:
            raise GameOverError(f"Game {self.id} is already over.")

        self.winner = self.opponent(player).side
        logger.info(f"Game {self.id}: {player} resigned, {self.winner.name.lower()} wins")
        return self.winner

    def undo_last_move(self) -> Move:
        """Drop the last move from the history and rebuild the board."""
        if self.is_over:
            raise GameOverError(f"Game {self.id} is over. Moves cannot be taken back.")
        if not self.moves:
            raise GameStateError("There is no move to take back.")

        move = self.moves.pop()
        self.replay()
        self.turn = self.turn.opponent()
        return move

    def legal_moves(self, player: str) -> list[str]:
        """All moves the player could make right now (UCI)."""
        side = self.player(player).side
        if self.is_over or side != self.turn:
            return []
        return [move.to_uci() for move in iter_legal_moves(self.board, side)]

    def board_snapshots(self) -> list[Board]:
        """The board before the first move and after every move (one frame per move for an animation)."""
        board = Board.starting_position()
        snapshots = [board.copy()]
        for move in self.moves:
            board.move_piece(move)
            snapshots.append(board.copy())
        return snapshots

    def notation(self) -> str:
        return algebraic_notation(self.moves)

    # -- PRIVATE HELPERS ---
    @staticmethod
    def _on_board(move: Move) -> bool:
        return move.from_position.is_within_bounds() and move.to_position.is_within_bounds()

    @staticmethod
    def _describe(move: Move) -> str:
        return f"{move.from_position} to {move.to_position}"
