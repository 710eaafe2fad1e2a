"""Unit tests for src/db/sql_repository.py"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.orm import Session

from src.db.sql_repository import GameModel, PlayerModel, SQLGameRepository

TTL = timedelta(hours=24)
START = datetime(2024, 3, 1, 12, 30, 15, tzinfo=timezone.utc)


class Clock:
    """Time only moves when the test says so."""

    def __init__(self, now: datetime = START) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def repo(db_session_repo: Session, clock: Clock) -> SQLGameRepository:
    return SQLGameRepository(db_session_repo, clock=clock)


def make_model(game_id: str = "guild_alice_bob", moves: list[str] | None = None) -> GameModel:
    guild, white, black = game_id.split("_")
    return GameModel(
        game_id=game_id,
        guild_id=guild,
        players=[PlayerModel(white, "white", "#ffffff"), PlayerModel(black, "black", "#000000")],
        moves_uci=moves or [],
        turn="white",
        board_colors=["#fdd18a", "#893922"],
    )


def test_save_game(repo: SQLGameRepository) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    model = make_model(moves=["e2e4", "e7e5"])
    stored = repo.save_game(model, TTL)
    assert isinstance(stored, GameModel)
    assert stored == model


def test_get_game_by_id(repo: SQLGameRepository) -> None:
    model = make_model()
    repo.save_game(model, TTL)
    assert repo.get_game(model.game_id) == model


def test_get_unknown_game(repo: SQLGameRepository) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    assert repo.get_game("guild_alice_bob") is None

    repo.save_game(make_model(), TTL)
    assert repo.get_game("guild_alice_carol") is None


def test_save_existing_game_updates_it(repo: SQLGameRepository) -> None:
    repo.save_game(make_model(), TTL)

    updated = make_model(moves=["e2e4"])
    updated.turn = "black"
    repo.save_game(updated, TTL)

    found = repo.get_game(updated.game_id)
    assert found is not None
    assert found.moves_uci == ["e2e4"]
    assert found.turn == "black"


def test_game_expires(repo: SQLGameRepository, clock: Clock) -> None:
    model = make_model()
    repo.save_game(model, TTL)

    clock.advance(TTL - timedelta(seconds=1))
    assert repo.get_game(model.game_id) == model

    clock.advance(timedelta(seconds=1))
    assert repo.get_game(model.game_id) is None


def test_saving_resets_the_expiry(repo: SQLGameRepository, clock: Clock) -> None:
    model = make_model()
    repo.save_game(model, TTL)

    clock.advance(timedelta(hours=20))
    repo.save_game(make_model(moves=["e2e4"]), TTL)

    clock.advance(timedelta(hours=20))
    found = repo.get_game(model.game_id)
    assert found is not None
    assert found.moves_uci == ["e2e4"]


def test_delete_game(repo: SQLGameRepository) -> None:
    model = make_model()
    repo.save_game(model, TTL)

    assert repo.delete_game(model.game_id) == model
    assert repo.get_game(model.game_id) is None
    assert repo.delete_game(model.game_id) is None


def test_archive_game(repo: SQLGameRepository) -> None:
    model = make_model(moves=["f2f3", "e7e5", "g2g4", "d8h4"])
    model.winner = "black"

    archive_id = repo.archive_game(model)
    assert archive_id == "2024:03:01-12:30:15_guild_alice_bob"
    assert repo.get_archived_game(archive_id) == model
    # archiving does not touch the active games
    assert repo.get_game(model.game_id) is None


def test_archive_twice_in_the_same_second(repo: SQLGameRepository) -> None:
    model = make_model()
    first = repo.archive_game(model)
    model.winner = "white"
    second = repo.archive_game(model)

    assert first == second
    archived = repo.get_archived_game(second)
    assert archived is not None
    assert archived.winner == "white"


def test_get_unknown_archived_game(repo: SQLGameRepository) -> None:
    assert repo.get_archived_game("2024:03:01-12:30:15_guild_alice_bob") is None


def test_purge_expired(repo: SQLGameRepository, clock: Clock) -> None:
    repo.save_game(make_model("guild_alice_bob"), TTL)
    clock.advance(timedelta(hours=12))
    repo.save_game(make_model("guild_alice_carol"), TTL)

    assert repo.purge_expired() == 0
    clock.advance(timedelta(hours=12))
    assert repo.purge_expired() == 1

    assert repo.get_game("guild_alice_carol") is not None
    assert repo.delete_game("guild_alice_bob") is None
