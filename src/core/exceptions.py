"""
Custom exceptions.

Every error raised on purpose by the application derives from GameError, so the caller (the command layer) can
catch a single type and show the message to the user.
"""


class GameError(Exception):
    """Top-level exception of the application."""


class ConfigurationError(GameError):
    """Settings could not be read from the environment."""


# --- REQUEST PARSING ---
class InvalidRequestError(GameError):
    """Request data that cannot be turned into something the domain understands."""


class MalformedSquareError(InvalidRequestError):
    """A square name that is not in algebraic notation (a1 - h8)."""


# --- GAME RULES ---
class GameStateError(GameError):
    """The game is not in a state that allows the request."""


class GameOverError(GameStateError):
    """A winner has been decided. No more moves are accepted."""


class IllegalMoveError(GameError):
    """The move was rejected. Subclasses tell why."""


class WrongTurnError(IllegalMoveError):
    """The player asked to move while it is the opponent's turn."""


class NotOwnerError(IllegalMoveError):
    """The piece on the starting square does not belong to the player."""


class IllegalShapeError(IllegalMoveError):
    """The piece cannot move like that (geometry or a piece in the way)."""


class SelfCheckError(IllegalMoveError):
    """The move would leave the player's own king in check."""


# --- PERSISTENCE ---
class RepositoryError(GameError):
    """Something went wrong while talking to the persistence layer."""


class NoSuchGameError(RepositoryError):
    """There is no (active) game stored under the requested key."""
