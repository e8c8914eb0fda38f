"""
Type definitions used across layers
"""

from enum import StrEnum


class Status(StrEnum):
    CONTINUE = "continue"
    MATE = "mate"
    STALEMATE = "stalemate"
    DRAW = "draw"
    INVALID_MOVE = "invalid_move"

    @property
    def is_terminal(self) -> bool:
        return self != Status.CONTINUE


class Reason(StrEnum):
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    THREEFOLD_REPETITION = "threefold_repetition"
    INSUFFICIENT_MATERIAL = "insufficient_material"
    FIFTY_MOVE_RULE = "50_move_rule"
    INVALID_MOVE = "invalid_move"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE
