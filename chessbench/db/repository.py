"""Protocol repository (SQLAlchemy implementation in sql_repository.py, in-memory one used in the service tests)"""

from typing import Protocol
from uuid import UUID

from chessbench.core.models import GameModel


class GameRepository(Protocol):
    """Persistence layer orchestration. Does not check any chess/game rules."""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """
        Overwrite an existing record with the new state.

        `game.version` must be the version that was read. Raises ConcurrentUpdateError if the record changed since.
        """
        ...
