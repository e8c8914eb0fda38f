"""
Boundary layer data model(s).

These objects can be used to communicate with the Service.
Hence, both the API layer (higher) and domain/db layers (lower) will use model(s) defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

UNKNOWN_LABEL = "Unknown"


@dataclass
class GameModel:
    """Transport-safe representation of a chess game used between API, Service, DB, and Game layers."""

    fen: str
    side_to_move: str
    status: str
    legal_moves: list[str]
    move_history: list[str] = field(default_factory=list)
    winner: Optional[str] = None
    reason: Optional[str] = None
    white_player: str = UNKNOWN_LABEL
    black_player: str = UNKNOWN_LABEL
    test_type: str = UNKNOWN_LABEL
    test_description: str = UNKNOWN_LABEL
    # Set by the repository. `version` is the value read, used for compare-and-swap on update.
    version: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
