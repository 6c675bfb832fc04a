"""Runtime configuration, read from the environment (and an optional .env file)."""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from study_helper.db import DEFAULT_DB_PATH


@dataclass
class Config:
    db_path: str = DEFAULT_DB_PATH
    ai_base_url: Optional[str] = None
    # None leaves timeouts to the network layer
    ai_timeout: Optional[float] = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, env_file: str | None = None) -> "Config":
        load_dotenv(env_file)
        timeout = os.getenv("STUDY_HELPER_AI_TIMEOUT")
        return cls(
            db_path=os.getenv("STUDY_HELPER_DB", DEFAULT_DB_PATH),
            ai_base_url=os.getenv("STUDY_HELPER_AI_URL") or None,
            ai_timeout=float(timeout) if timeout else None,
            log_level=os.getenv("STUDY_HELPER_LOG_LEVEL", "WARNING").upper(),
        )
