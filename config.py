import os
from functools import lru_cache
from pathlib import Path


class Settings:
    def __init__(
        self,
        database_url: str,
        session_secret: str,
        session_max_age_hours: int,
        log_level: str,
    ) -> None:
        self.database_url = database_url
        self.session_secret = session_secret
        self.session_max_age_hours = session_max_age_hours
        self.log_level = log_level


def _ensure_data_dir() -> Path:
    root = Path(os.getenv("FLUXORA_DATA_DIR", "./data")).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    data_dir = _ensure_data_dir()
    default_db = data_dir / "fluxora.db"
    database_url = os.getenv("FLUXORA_DATABASE_URL", f"sqlite:///{default_db}")
    session_secret = os.getenv(
        "FLUXORA_SESSION_SECRET",
        "5f0c3b9d1e7a4c2f8b6d0e9a3c7f1b5d2e8a6c4f0b9d3e7a1c5f8b2d6e0a4c9f",
    )
    session_max_age_hours = int(os.getenv("FLUXORA_SESSION_MAX_AGE_HOURS", "24"))
    log_level = os.getenv("FLUXORA_LOG_LEVEL", "INFO").upper()
    return Settings(
        database_url=database_url,
        session_secret=session_secret,
        session_max_age_hours=session_max_age_hours,
        log_level=log_level,
    )
