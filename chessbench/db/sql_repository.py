"""Implementation of (Game)Repository using SQLAlchemy"""

import logging
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from chessbench.core.exceptions import ConcurrentUpdateError
from chessbench.core.models import GameModel
from chessbench.db.schema import DBGame, utc_now

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        now = utc_now()
        game_db = DBGame(
            id=new_id,
            fen=game.fen,
            side_to_move=game.side_to_move,
            status=game.status,
            winner=game.winner,
            reason=game.reason,
            legal_moves=game.legal_moves,
            move_history=game.move_history,
            white_player=game.white_player,
            black_player=game.black_player,
            test_type=game.test_type,
            test_description=game.test_description,
            version=1,
            created_at=now,
            updated_at=now,
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """
        Write the new state of the game, if nobody else did so since it was read.
        ----

        Compare-and-swap on the version column: a single UPDATE ... WHERE id = ? AND version = ?
        Player labels and creation time are never touched.
        """
        query = (
            update(DBGame)
            .where(DBGame.id == game_id, DBGame.version == game.version)
            .values(
                fen=game.fen,
                side_to_move=game.side_to_move,
                status=game.status,
                winner=game.winner,
                reason=game.reason,
                legal_moves=game.legal_moves,
                move_history=game.move_history,
                version=game.version + 1,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(query)
        self.db.commit()

        if result.rowcount == 0:
            if self._fetch_game(game_id) is None:
                return None
            logger.warning("Stale write rejected for game %s (version %d)", game_id, game.version)
            raise ConcurrentUpdateError(
                f"Game {game_id} was modified by another request. Fetch the current state and retry."
            )

        return self.get_game(game_id)

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            fen=game_db.fen,
            side_to_move=game_db.side_to_move,
            status=game_db.status,
            legal_moves=list(game_db.legal_moves),
            move_history=list(game_db.move_history),
            winner=game_db.winner,
            reason=game_db.reason,
            white_player=game_db.white_player,
            black_player=game_db.black_player,
            test_type=game_db.test_type,
            test_description=game_db.test_description,
            version=game_db.version,
            created_at=game_db.created_at,
            updated_at=game_db.updated_at,
        )
