"""Implementation of (Game)Repository using SQLAlchemy"""

import gzip
import json
from dataclasses import asdict
from datetime import datetime, timedelta
from typing import Any, Callable

from loguru import logger
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from src.core.models import GameModel, PlayerModel
from src.db.schema import DBArchivedGame, DBGame, utc_now

ARCHIVE_KEY_FORMAT = "%Y:%m:%d-%H:%M:%S"


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(
        self, db_session: Session, clock: Callable[[], datetime] = utc_now
    ) -> None:
        self.db = db_session
        self.clock = clock

    def get_game(self, game_id: str) -> GameModel | None:
        """Get an active game by ID, if the record exists and has not expired."""
        query = select(DBGame).where(
            DBGame.id == game_id, DBGame.expires_at > self.clock()
        )
        game_db = self.db.scalar(query)
        if game_db:
            return self._to_model(game_db)
        return None

    def save_game(self, game: GameModel, ttl: timedelta) -> GameModel:
        """Store the game (new or existing). It expires when not saved again within `ttl`."""
        expires_at = self.clock() + ttl
        game_db = self._fetch_game(game.game_id)
        if game_db is None:
            game_db = DBGame(id=game.game_id, expires_at=expires_at)
            self.db.add(game_db)

        game_db.guild_id = game.guild_id
        game_db.players = [asdict(player) for player in game.players]
        game_db.moves_uci = list(game.moves_uci)
        game_db.turn = game.turn
        game_db.winner = game.winner
        game_db.board_colors = list(game.board_colors)
        game_db.expires_at = expires_at
        self.db.commit()
        self.db.refresh(game_db)
        logger.debug(f"Saved game {game.game_id} ({len(game.moves_uci)} moves), expires at {expires_at}")
        return self._to_model(game_db)

    def delete_game(self, game_id: str) -> GameModel | None:
        """Remove an active game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def archive_game(self, game: GameModel) -> str:
        """Keep a finished game forever. Returns the key of the archived record."""
        now = self.clock()
        archive_id = f"{now.strftime(ARCHIVE_KEY_FORMAT)}_{game.game_id}"
        payload = gzip.compress(json.dumps(asdict(game)).encode("utf-8"))
        self.db.merge(
            DBArchivedGame(
                id=archive_id, game_id=game.game_id, payload=payload, archived_at=now
            )
        )
        self.db.commit()
        logger.info(f"Archived game {game.game_id} as {archive_id}")
        return archive_id

    def get_archived_game(self, archive_id: str) -> GameModel | None:
        """Get an archived game by its archive key."""
        archived = self.db.get(DBArchivedGame, archive_id)
        if archived is None:
            return None
        data = json.loads(gzip.decompress(archived.payload).decode("utf-8"))
        return self._model_from_dict(data)

    def purge_expired(self) -> int:
        """Remove the expired active games. Returns how many were removed."""
        query = (
            delete(DBGame)
            .where(DBGame.expires_at <= self.clock())
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(query)
        self.db.commit()
        if result.rowcount:
            logger.info(f"Purged {result.rowcount} expired game(s)")
        return result.rowcount

    def _fetch_game(self, game_id: str) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            game_id=game_db.id,
            guild_id=game_db.guild_id,
            players=[PlayerModel(**player) for player in game_db.players],
            moves_uci=list(game_db.moves_uci),
            turn=game_db.turn,
            winner=game_db.winner,
            board_colors=list(game_db.board_colors),
        )

    @staticmethod
    def _model_from_dict(data: dict[str, Any]) -> GameModel:
        """Inverse of `asdict(game_model)`"""
        return GameModel(
            game_id=data["game_id"],
            guild_id=data["guild_id"],
            players=[PlayerModel(**player) for player in data["players"]],
            moves_uci=data["moves_uci"],
            turn=data["turn"],
            winner=data["winner"],
            board_colors=data["board_colors"],
        )
