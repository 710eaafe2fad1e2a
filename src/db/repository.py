"""Protocol repository (implemented with SQLAlchemy, but a key-value store would do just as well)"""

from datetime import timedelta
from typing import Protocol

from src.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: str) -> GameModel | None:
        """Get an active game by ID, if the record exists and has not expired."""
        ...

    def save_game(self, game: GameModel, ttl: timedelta) -> GameModel:
        """Store the game (new or existing). It expires when not saved again within `ttl`."""
        ...

    def delete_game(self, game_id: str) -> GameModel | None:
        """Remove an active game's record."""
        ...

    def archive_game(self, game: GameModel) -> str:
        """Keep a finished game forever. Returns the key of the archived record."""
        ...

    def get_archived_game(self, archive_id: str) -> GameModel | None:
        """Get an archived game by its archive key."""
        ...

    def purge_expired(self) -> int:
        """Remove the expired active games. Returns how many were removed."""
        ...
