"""Requests and Response models"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from chessbench.core.exceptions import InvalidRequestError
from chessbench.core.models import UNKNOWN_LABEL
from chessbench.core.shared_types import Color, Reason, Status

NO_LAST_MOVE = "-"


class CamelModel(BaseModel):
    """JSON uses camelCase (gameId, sideToMove, ...), Python uses snake_case."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _validate_fen_structure(value: str) -> str:
    """Cheap structural check. Full validation is done by the rules engine."""
    if len(value.split()) != 6:
        raise InvalidRequestError("FEN string must contain 6 space-separated parts.")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(CamelModel):
    """All labels are optional, missing or blank ones become "Unknown"."""

    white_player: str = UNKNOWN_LABEL
    black_player: str = UNKNOWN_LABEL
    test_type: str = UNKNOWN_LABEL
    test_description: str = UNKNOWN_LABEL

    @field_validator(
        *["white_player", "black_player", "test_type", "test_description"],
        mode="before",
    )
    @classmethod
    def default_label(cls, value: Optional[str]) -> Optional[str]:
        if value is None or (isinstance(value, str) and value.strip() == ""):
            return UNKNOWN_LABEL
        return value


class GetGameRequest(CamelModel):
    game_id: UUID


class MoveRequest(CamelModel):
    """Move on a stored game. The move may be missing: that counts as an illegal move."""

    game_id: UUID
    move: Optional[str] = None


class ApplyMoveRequest(CamelModel):
    """Move on a bare position, nothing is stored."""

    fen: str
    move: str

    @field_validator("fen")
    @classmethod
    def validate_fen(cls, value: str) -> str:
        return _validate_fen_structure(value)


class LegalMovesRequest(CamelModel):
    fen: str

    @field_validator("fen")
    @classmethod
    def validate_fen(cls, value: str) -> str:
        return _validate_fen_structure(value)


# --- RESPONSE MODELS ---
class CreateGameResponse(CamelModel):
    game_id: UUID
    fen: str
    side_to_move: Color
    legal_moves: list[str]
    status: Status
    white_player: str
    black_player: str
    test_type: str
    test_description: str


class GameResponse(CamelModel):
    game_id: UUID
    fen: str
    side_to_move: Color
    legal_moves: list[str]
    status: Status
    winner: Optional[Color]
    reason: Optional[Reason]
    move_history: list[str]
    last_move: str = NO_LAST_MOVE
    white_player: str
    black_player: str
    test_type: str
    test_description: str
    created_at: Optional[datetime]
    updated_at: Optional[datetime]


class ApplyMoveResponse(CamelModel):
    ok: bool = True
    status: Status
    fen: str
    side_to_move: Color
    winner: Optional[Color]
    reason: Optional[Reason]
    legal_moves: list[str]


class LegalMovesResponse(CamelModel):
    ok: bool = True
    fen: str
    side_to_move: Color
    legal_moves: list[str]


class StartPositionResponse(CamelModel):
    fen: str


class ErrorResponse(CamelModel):
    ok: bool = False
    error: str
