"""Unit tests for chessbench/db/sql_repository.py"""

from dataclasses import replace
from uuid import uuid4

import pytest
from sqlalchemy.orm import Session

from chessbench.core.exceptions import ConcurrentUpdateError
from chessbench.core.shared_types import Status
from chessbench.db.sql_repository import GameModel, SQLGameRepository


def mock_model(**changes) -> GameModel:
    """Mock game data (the repository does not care whether it is valid chess)"""
    model = GameModel(
        fen="FEN string",
        side_to_move="white",
        status=Status.CONTINUE,
        legal_moves=["a3", "a4", "mock"],
        move_history=[],
        white_player="player_white",
        black_player="player_black",
        test_type="format",
        test_description="SAN only, no commentary",
    )
    return replace(model, **changes)


def same_game_data(left: GameModel, right: GameModel) -> bool:
    """Compare everything except the bookkeeping fields set by the repository."""
    ignore = {"version": 0, "created_at": None, "updated_at": None}
    return replace(left, **ignore) == replace(right, **ignore)


def test_create_game(db_session_repo: Session) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    model = mock_model()

    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert same_game_data(record_in_db, model)
    assert record_in_db.version == 1
    assert record_in_db.created_at is not None
    assert record_in_db.updated_at == record_in_db.created_at


def test_get_game_by_id(db_session_repo: Session) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(mock_model())
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game


def test_get_unknown_game(db_session_repo: Session) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    # Now do it with creating a game, but retrieving from the wrong ID
    repo.create_game(mock_model())
    assert repo.get_game(uuid4()) is None


def test_update_game(db_session_repo: Session) -> None:
    """Update an earlier created record."""
    repo = SQLGameRepository(db_session_repo)
    created, game_id = repo.create_game(mock_model())

    after = replace(
        created,
        fen="FEN after",
        side_to_move="black",
        move_history=["a3"],
        legal_moves=["a6"],
    )
    updated_game = repo.update_game(game_id, after)
    assert updated_game is not None
    assert same_game_data(updated_game, after)
    assert updated_game.version == created.version + 1
    assert updated_game.created_at == created.created_at
    assert repo.get_game(game_id) == updated_game


def test_update_finished_game_fields(db_session_repo: Session) -> None:
    """Terminal status, winner, reason and history are written together."""
    repo = SQLGameRepository(db_session_repo)
    created, game_id = repo.create_game(mock_model())

    after = replace(
        created,
        status=Status.INVALID_MOVE,
        winner="black",
        reason="invalid_move",
        move_history=["nf3??"],
    )
    updated_game = repo.update_game(game_id, after)
    assert updated_game is not None
    assert updated_game.status == Status.INVALID_MOVE
    assert updated_game.winner == "black"
    assert updated_game.reason == "invalid_move"
    assert updated_game.move_history == ["nf3??"]


def test_update_does_not_touch_labels(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    created, game_id = repo.create_game(mock_model())

    updated_game = repo.update_game(game_id, replace(created, white_player="someone else"))
    assert updated_game is not None
    assert updated_game.white_player == "player_white"


def test_consecutive_game_updates(db_session_repo: Session) -> None:
    """Tests that we can successfully make multiple updates to the same game, each based on the previous one."""
    repo = SQLGameRepository(db_session_repo)
    current, game_id = repo.create_game(mock_model())

    for ply, move in enumerate(["move_1", "move_2", "move_3"], start=1):
        updated = repo.update_game(
            game_id, replace(current, move_history=current.move_history + [move])
        )
        assert updated is not None
        assert len(updated.move_history) == ply
        current = updated

    after_all_updates = repo.get_game(game_id)
    assert after_all_updates is not None
    assert after_all_updates.move_history == ["move_1", "move_2", "move_3"]
    assert after_all_updates.version == 4


def test_stale_update_is_rejected(db_session_repo: Session) -> None:
    """Two writers read the same version: only the first one gets to write."""
    repo = SQLGameRepository(db_session_repo)
    created, game_id = repo.create_game(mock_model())

    first = replace(created, move_history=["e4"])
    second = replace(created, move_history=["d4"])

    assert repo.update_game(game_id, first) is not None
    with pytest.raises(ConcurrentUpdateError):
        repo.update_game(game_id, second)

    stored = repo.get_game(game_id)
    assert stored is not None
    assert stored.move_history == ["e4"]
    assert stored.version == 2


def test_attempt_updating_unknown_game(db_session_repo: Session) -> None:
    """The update_game() method should return None."""
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), mock_model()) is None
