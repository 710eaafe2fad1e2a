"""Requests and Response models"""

import re
from typing import Optional, Self

from pydantic import BaseModel, field_validator, model_validator

from src.chess.position import Position
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import PromotionKind, Side

HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


# --- REQUEST MODELS ---
class MatchRequest(BaseModel):
    """Every request is about the match between the player sending it and an opponent, within a guild."""

    guild_id: str
    player_id: str
    opponent_id: str


class StartGameRequest(MatchRequest):
    white_color: Optional[str] = None
    black_color: Optional[str] = None

    @field_validator(*["white_color", "black_color"])
    @classmethod
    def validate_color(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not HEX_COLOR.match(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a color. Use a hex color like #ff00ff."
            )
        return value.lower()

    @model_validator(mode="after")
    def validate_players(self) -> Self:
        if self.player_id == self.opponent_id:
            raise InvalidRequestError("You cannot play against yourself.")
        if (self.white_color is None) != (self.black_color is None):
            raise InvalidRequestError("Supply either both colors or none.")
        return self


class GetGameRequest(MatchRequest):
    pass


class ResignRequest(MatchRequest):
    pass


class MoveRequest(MatchRequest):
    from_square: str
    to_square: str
    promote_to: Optional[PromotionKind] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        # raises MalformedSquareError for anything that is not a square name
        return Position.from_algebraic(value.strip()).to_algebraic()


# --- RESPONSE MODELS ---
class PlayerResponse(BaseModel):
    identity: str
    side: Side
    color: str


class GameResponse(BaseModel):
    game_id: str
    guild_id: str
    players: list[PlayerResponse]
    turn: Side
    winner: Optional[Side]
    # piece placement (FEN) of the current board, for the renderer
    board: str
    board_colors: list[str]
    move_history: list[str]


class MoveResponse(BaseModel):
    game: GameResponse
    move: str
    checkmate: bool
    winner: Optional[Side]


class MoveHistoryResponse(BaseModel):
    game_id: str
    notation: str
    move_history: list[str]
    # piece placement before the first move and after every move
    snapshots: list[str]
