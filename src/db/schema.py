"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, LargeBinary
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    """Games that are still being played"""

    __tablename__ = "games"
    id: Mapped[str] = mapped_column(primary_key=True)
    guild_id: Mapped[str]
    players: Mapped[list[dict[str, str]]] = mapped_column(JSON)
    moves_uci: Mapped[list[str]] = mapped_column(JSON, default=list)
    turn: Mapped[str]
    winner: Mapped[Optional[str]]
    board_colors: Mapped[list[str]] = mapped_column(JSON, default=list)
    expires_at: Mapped[datetime] = mapped_column(index=True)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now, onupdate=utc_now)


class DBArchivedGame(Base):
    """Finished games. The full game is kept as gzip-compressed JSON."""

    __tablename__ = "archived_games"
    id: Mapped[str] = mapped_column(primary_key=True)
    game_id: Mapped[str] = mapped_column(index=True)
    payload: Mapped[bytes] = mapped_column(LargeBinary)
    archived_at: Mapped[datetime] = mapped_column(default=utc_now)
