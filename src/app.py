"""Wire the layers together: settings -> logging -> database -> repository -> service."""

from typing import Optional

from loguru import logger

from src.core.config import Settings, get_settings
from src.core.logging import setup_logging
from src.db.database import create_db_engine, create_session_factory, init_db
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import ChessService


def create_service(settings: Optional[Settings] = None) -> ChessService:
    """Build a ChessService backed by the configured database. The session lives as long as the service."""
    settings = settings or get_settings()
    setup_logging(level=settings.log_level, log_file=settings.log_file)

    engine = create_db_engine(settings)
    init_db(engine)
    session = create_session_factory(engine)()

    repository = SQLGameRepository(session)
    purged = repository.purge_expired()
    logger.info(f"Chess service ready (database: {engine.url.render_as_string(hide_password=True)}, purged {purged} expired games)")
    return ChessService(repository, settings)
