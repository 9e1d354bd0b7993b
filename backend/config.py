from datetime import datetime
from pathlib import Path

from pydantic_settings import BaseSettings


def localnow() -> datetime:
    """Return the current local wall-clock time as a naive datetime.

    Review dates are day-based in the user's own timezone, so everything
    that needs "today" goes through this instead of a UTC clock.
    """
    return datetime.now()


class Settings(BaseSettings):
    app_name: str = "FlashSnap"
    database_url: str = f"sqlite+aiosqlite:///{Path(__file__).resolve().parent.parent / 'data' / 'flashsnap.db'}"
    max_cards_per_session: int = 0  # 0 = no limit
    shuffle_reviews: bool = True
    session_ttl_seconds: int = 7200  # 2 hours
    debug: bool = False

    model_config = {"env_prefix": "FLASHSNAP_", "env_file": ".env"}


settings = Settings()
