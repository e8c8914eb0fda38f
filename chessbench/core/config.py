"""Settings read from the environment, and logging setup."""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Self

ENV_PREFIX = "CHESSBENCH_"
LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _env_flag(name: str) -> bool:
    return (_env(name) or "0").lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///./chessbench.db"
    api_secret: Optional[str] = None
    log_level: str = "INFO"
    sql_echo: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls) -> Self:
        defaults = cls()
        return cls(
            database_url=_env("DATABASE_URL", defaults.database_url),
            api_secret=_env("API_SECRET"),
            log_level=(_env("LOG_LEVEL", defaults.log_level)).upper(),
            sql_echo=_env_flag("SQL_ECHO"),
            host=_env("HOST", defaults.host),
            port=int(_env("PORT", str(defaults.port))),
        )


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
