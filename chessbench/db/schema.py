"""Database tables / schema"""

from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy import JSON
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class DBGame(Base):
    __tablename__ = "games"
    id: Mapped[UUID] = mapped_column(primary_key=True)
    fen: Mapped[str]
    side_to_move: Mapped[str]
    status: Mapped[str] = mapped_column(index=True)
    winner: Mapped[Optional[str]]
    reason: Mapped[Optional[str]]
    legal_moves: Mapped[list[str]] = mapped_column(JSON, default=list)
    move_history: Mapped[list[str]] = mapped_column(JSON, default=list)
    white_player: Mapped[str]
    black_player: Mapped[str]
    test_type: Mapped[str]
    test_description: Mapped[str]
    # bumped on every update, compared on write (see SQLGameRepository.update_game)
    version: Mapped[int] = mapped_column(default=1)
    created_at: Mapped[datetime] = mapped_column(default=utc_now)
    updated_at: Mapped[datetime] = mapped_column(default=utc_now)
