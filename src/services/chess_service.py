"""Orchestration of communication from the command layer to business logic and persistence layers (and the reverse direction)."""

from datetime import timedelta
from typing import Optional

from loguru import logger

from src.api.models import (
    GameResponse,
    GetGameRequest,
    MatchRequest,
    MoveHistoryResponse,
    MoveRequest,
    MoveResponse,
    PlayerResponse,
    ResignRequest,
    StartGameRequest,
)
from src.chess.game import Game, game_id
from src.chess.moves import Move
from src.chess.pieces import PieceKind, Side
from src.chess.position import Position
from src.core.config import Settings
from src.core.exceptions import GameStateError, NoSuchGameError
from src.core.models import GameModel
from src.core.shared_types import Side as SideName
from src.db.repository import GameRepository


class ChessService:
    """Orchestration of layers for chess game."""

    def __init__(
        self, repository: GameRepository, settings: Optional[Settings] = None
    ) -> None:
        self.repo = repository
        self.settings = settings or Settings()

    @property
    def ttl(self) -> timedelta:
        return timedelta(hours=self.settings.game_ttl_hours)

    # -- Command logic ---
    def start_game(self, request: StartGameRequest) -> GameResponse:
        """A player challenged an opponent. Only one game per pair of players per guild."""
        key = self._game_id(request)
        if self.repo.get_game(key) is not None:
            raise GameStateError("You already have a game going with that player.")

        colors = (
            (request.white_color, request.black_color)
            if request.white_color and request.black_color
            else None
        )
        game = Game.create(
            player_a=request.player_id,
            player_b=request.opponent_id,
            guild_id=request.guild_id,
            colors=colors,
        )
        stored = self.repo.save_game(game.to_model(), self.ttl)
        return self._create_game_response(Game.from_model(stored))

    def get_game(self, request: GetGameRequest) -> GameResponse:
        """Current state of the game (board for the renderer included)."""
        game = Game.from_model(self._fetch_game(self._game_id(request)))
        return self._create_game_response(game)

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """
        Make a move attempt.
        ----

        Rejections are raised (and nothing is stored). A mating move ends the game: it is archived and removed from the
        active games. Any other accepted move is stored, which also pushes back the expiry of the game.
        """
        game = Game.from_model(self._fetch_game(self._game_id(request)))

        move = Move(
            from_position=Position.from_algebraic(request.from_square),
            to_position=Position.from_algebraic(request.to_square),
            promotion=PieceKind[request.promote_to.name] if request.promote_to else None,
        )
        outcome = game.make_move(request.player_id, move)

        if outcome.checkmate:
            self._finish(game)
        else:
            self.repo.save_game(game.to_model(), self.ttl)

        return MoveResponse(
            game=self._create_game_response(game),
            move=move.to_uci(),
            checkmate=outcome.checkmate,
            winner=self._side_name(outcome.winner),
        )

    def resign(self, request: ResignRequest) -> GameResponse:
        """The requesting player gives up. Their opponent wins."""
        game = Game.from_model(self._fetch_game(self._game_id(request)))
        game.resign(request.player_id)
        self._finish(game)
        return self._create_game_response(game)

    def move_history(self, request: GetGameRequest) -> MoveHistoryResponse:
        """The moves so far, in algebraic notation, with one board per move for an animation."""
        game = Game.from_model(self._fetch_game(self._game_id(request)))
        return MoveHistoryResponse(
            game_id=game.id,
            notation=game.notation(),
            move_history=[move.to_uci() for move in game.moves],
            snapshots=[board.to_fen() for board in game.board_snapshots()],
        )

    # -- Internal helpers --
    def _finish(self, game: Game) -> None:
        """A finished game moves from the active games to the archive."""
        model = game.to_model()
        self.repo.delete_game(model.game_id)
        archive_id = self.repo.archive_game(model)
        logger.info(f"Game {game.id} finished, archived as {archive_id}")

    def _create_game_response(self, game: Game) -> GameResponse:
        return GameResponse(
            game_id=game.id,
            guild_id=game.guild_id,
            players=[
                PlayerResponse(
                    identity=player.identity,
                    side=self._side_name(player.side),
                    color=player.color,
                )
                for player in (game.white, game.black)
            ],
            turn=self._side_name(game.turn),
            winner=self._side_name(game.winner),
            board=game.board.to_fen(),
            board_colors=list(game.board_colors),
            move_history=[move.to_uci() for move in game.moves],
        )

    def _fetch_game(self, key: str) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(key)
        if game_model is None:
            raise NoSuchGameError("Error getting game, game doesn't exist.")
        return game_model

    @staticmethod
    def _game_id(request: MatchRequest) -> str:
        return game_id(request.guild_id, request.player_id, request.opponent_id)

    @staticmethod
    def _side_name(side: Side) -> Optional[SideName]:
        return None if side == Side.NONE else SideName[side.name]
