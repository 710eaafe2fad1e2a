"""Unit tests for src/services/chess_service.py"""

from datetime import timedelta
from typing import Generator

import pytest

from src.api.models import (
    GameResponse,
    GetGameRequest,
    MoveRequest,
    ResignRequest,
    StartGameRequest,
)
from src.chess.board import STARTING_POSITION_FEN
from src.core.config import Settings
from src.core.exceptions import (
    GameError,
    GameStateError,
    IllegalShapeError,
    NoSuchGameError,
    WrongTurnError,
)
from src.core.models import GameModel
from src.core.shared_types import Side
from src.services.chess_service import ChessService

GUILD = "guild"
GAME_ID = "guild_alice_bob"


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[str, GameModel] = {}
        self._archive: dict[str, GameModel] = {}
        self.last_ttl: timedelta | None = None

    def get_game(self, game_id: str) -> GameModel | None:
        return self._games.get(game_id)

    def save_game(self, game: GameModel, ttl: timedelta) -> GameModel:
        self._games[game.game_id] = game
        self.last_ttl = ttl
        return game

    def delete_game(self, game_id: str) -> GameModel | None:
        return self._games.pop(game_id, None)

    def archive_game(self, game: GameModel) -> str:
        archive_id = f"{len(self._archive)}_{game.game_id}"
        self._archive[archive_id] = game
        return archive_id

    def get_archived_game(self, archive_id: str) -> GameModel | None:
        return self._archive.get(archive_id)

    def purge_expired(self) -> int:
        return 0

    def archived(self) -> list[GameModel]:
        return list(self._archive.values())

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()
        self._archive.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ChessService:
    return ChessService(mock_repository, Settings())


def sides(response: GameResponse) -> tuple[str, str]:
    """(white, black) player identities. Who plays white is decided by a coin flip."""
    by_side = {player.side: player.identity for player in response.players}
    return by_side[Side.WHITE], by_side[Side.BLACK]


def move_request(player: str, opponent: str, uci: str) -> MoveRequest:
    return MoveRequest(
        guild_id=GUILD,
        player_id=player,
        opponent_id=opponent,
        from_square=uci[:2],
        to_square=uci[2:4],
    )


# --- SERVICE - START GAME ----
def test_start_game(service: ChessService, mock_repository: MockRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.start_game(
        StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob")
    )
    assert response.game_id == GAME_ID
    assert response.guild_id == GUILD
    assert {player.identity for player in response.players} == {"alice", "bob"}
    assert response.turn == Side.WHITE
    assert response.winner is None
    assert response.board == STARTING_POSITION_FEN
    assert response.move_history == []

    stored = mock_repository.get_game(GAME_ID)
    assert stored is not None
    assert stored.moves_uci == []
    assert mock_repository.last_ttl == timedelta(hours=24)


def test_start_game_with_colors(service: ChessService) -> None:
    response = service.start_game(
        StartGameRequest(
            guild_id=GUILD,
            player_id="alice",
            opponent_id="bob",
            white_color="#FF0000",
            black_color="#00ff00",
        )
    )
    colors = {player.side: player.color for player in response.players}
    assert colors == {Side.WHITE: "#ff0000", Side.BLACK: "#00ff00"}


@pytest.mark.parametrize("challenger, opponent", [("alice", "bob"), ("bob", "alice")])
def test_only_one_game_per_pair(service: ChessService, challenger: str, opponent: str) -> None:
    service.start_game(StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    with pytest.raises(GameStateError):
        service.start_game(
            StartGameRequest(guild_id=GUILD, player_id=challenger, opponent_id=opponent)
        )


def test_same_players_in_another_guild(service: ChessService) -> None:
    service.start_game(StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    response = service.start_game(
        StartGameRequest(guild_id="elsewhere", player_id="alice", opponent_id="bob")
    )
    assert response.game_id == "elsewhere_alice_bob"


# --- SERVICE - GET GAME ----
def test_get_game(service: ChessService) -> None:
    started = service.start_game(
        StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob")
    )
    # either player can ask
    found = service.get_game(GetGameRequest(guild_id=GUILD, player_id="bob", opponent_id="alice"))
    assert found == started


def test_get_unknown_game(service: ChessService) -> None:
    with pytest.raises(NoSuchGameError):
        service.get_game(GetGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))


# --- SERVICE - MOVES ----
def test_make_move(service: ChessService, mock_repository: MockRepository) -> None:
    white, black = sides(
        service.start_game(StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    )
    response = service.make_move(move_request(white, black, "e2e4"))
    assert response.move == "e2e4"
    assert not response.checkmate
    assert response.winner is None
    assert response.game.turn == Side.BLACK
    assert response.game.move_history == ["e2e4"]

    stored = mock_repository.get_game(GAME_ID)
    assert stored is not None
    assert stored.moves_uci == ["e2e4"]
    assert stored.turn == "black"


def test_rejected_move_is_not_stored(service: ChessService, mock_repository: MockRepository) -> None:
    white, black = sides(
        service.start_game(StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    )
    with pytest.raises(WrongTurnError):
        service.make_move(move_request(black, white, "e7e5"))
    with pytest.raises(IllegalShapeError):
        service.make_move(move_request(white, black, "e2e5"))

    stored = mock_repository.get_game(GAME_ID)
    assert stored is not None
    assert stored.moves_uci == []


def test_move_without_game(service: ChessService) -> None:
    with pytest.raises(NoSuchGameError):
        service.make_move(move_request("alice", "bob", "e2e4"))


def test_checkmate_archives_the_game(service: ChessService, mock_repository: MockRepository) -> None:
    white, black = sides(
        service.start_game(StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    )
    service.make_move(move_request(white, black, "f2f3"))
    service.make_move(move_request(black, white, "e7e5"))
    service.make_move(move_request(white, black, "g2g4"))
    response = service.make_move(move_request(black, white, "d8h4"))

    assert response.checkmate
    assert response.winner == Side.BLACK
    assert response.game.winner == Side.BLACK

    assert mock_repository.get_game(GAME_ID) is None
    [archived] = mock_repository.archived()
    assert archived.winner == "black"
    assert archived.moves_uci == ["f2f3", "e7e5", "g2g4", "d8h4"]

    # finished games are gone, a new one can be started
    with pytest.raises(NoSuchGameError):
        service.get_game(GetGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    service.start_game(StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))


def test_resign(service: ChessService, mock_repository: MockRepository) -> None:
    white, black = sides(
        service.start_game(StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    )
    response = service.resign(ResignRequest(guild_id=GUILD, player_id=white, opponent_id=black))
    assert response.winner == Side.BLACK
    assert mock_repository.get_game(GAME_ID) is None
    assert len(mock_repository.archived()) == 1


def test_move_history(service: ChessService) -> None:
    white, black = sides(
        service.start_game(StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    )
    service.make_move(move_request(white, black, "e2e4"))
    service.make_move(move_request(black, white, "e7e5"))

    history = service.move_history(GetGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    assert history.game_id == GAME_ID
    assert history.notation == "e4 e5"
    assert history.move_history == ["e2e4", "e7e5"]
    assert len(history.snapshots) == 3
    assert history.snapshots[0] == STARTING_POSITION_FEN


def test_ttl_from_settings(mock_repository: MockRepository) -> None:
    service = ChessService(mock_repository, Settings(game_ttl_hours=2))
    service.start_game(StartGameRequest(guild_id=GUILD, player_id="alice", opponent_id="bob"))
    assert mock_repository.last_ttl == timedelta(hours=2)


def test_errors_share_a_base_class(service: ChessService) -> None:
    """The command layer can catch everything with one except clause."""
    with pytest.raises(GameError):
        service.make_move(move_request("alice", "bob", "e2e4"))
