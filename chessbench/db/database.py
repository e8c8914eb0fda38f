"""Generate database session"""

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from chessbench.core.config import get_settings
from chessbench.db.schema import Base

settings = get_settings()
connect_args = (
    {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}
)
engine = create_engine(
    settings.database_url, echo=settings.sql_echo, connect_args=connect_args
)
SessionLocal = sessionmaker(bind=engine)


def init_db() -> None:
    """Ensure all tables are created"""
    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
