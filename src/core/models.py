"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Both the domain layer (Game) and the db layer (Repository) convert to and from the models defined here.
(Decouples the data model of the DB layer from the one of the domain layer)
"""

from dataclasses import dataclass, field
from typing import Optional

# Type aliases to make GameModel easier to read
SideName = str
HexColor = str


@dataclass
class PlayerModel:
    identity: str
    side: SideName
    color: HexColor


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between Service, DB, and Game layers.

    NOTE: the board itself is never stored. It is rebuilt by replaying `moves_uci` from the starting position.
    """

    game_id: str
    guild_id: str
    players: list[PlayerModel]
    moves_uci: list[str]
    turn: SideName
    winner: Optional[SideName] = None
    board_colors: list[HexColor] = field(default_factory=list)
