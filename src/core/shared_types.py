"""
Type definitions used across layers
"""

from enum import StrEnum

# --- The domain layer (src/chess/pieces.py) has its own Side / PieceKind enums that include the empty square.
# --- NOTE: same names on purpose. The imports show which version is used in what part of the code.


class Side(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PromotionKind(StrEnum):
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
