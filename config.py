# config.py
#
# Description:
# Settings loaded from TODO_-prefixed environment variables. Invalid values
# fall back to the defaults.
#

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    db_path: Path
    create_db: bool
    tick_rate_ms: int
    log_dir: Path
    log_level: str

    @property
    def tick_rate(self) -> float:
        return self.tick_rate_ms / 1000

    @staticmethod
    def from_env() -> "Settings":
        tick_rate_ms = _env_int(_k("TICK_RATE_MS"), 200)
        if tick_rate_ms <= 0:
            tick_rate_ms = 200

        return Settings(
            db_path=_env_path(_k("DB_PATH"), Path("data/db.json")),
            create_db=_env_bool(_k("CREATE_DB"), True),
            tick_rate_ms=tick_rate_ms,
            log_dir=_env_path(_k("LOG_DIR"), Path("data")),
            log_level=_env(_k("LOG_LEVEL"), "INFO").upper(),
        )


def get_settings() -> Settings:
    return Settings.from_env()
