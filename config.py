# cashwrap/config.py

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass
class Settings:
    supabase_url: Optional[str]
    supabase_key: Optional[str]
    schema: str
    log_level: str
    seed_demo_data: bool

    @property
    def sync_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


def _env_flag(name: str, default: str = "1") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def get_settings() -> Settings:
    return Settings(
        supabase_url=os.getenv("SUPABASE_URL") or None,
        supabase_key=os.getenv("SUPABASE_KEY") or None,
        schema=os.getenv("SCHEMA") or "public",
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        seed_demo_data=_env_flag("SEED_DEMO_DATA"),
    )


def configure_logging(level: Optional[str] = None) -> None:
    """basicConfig is a no-op once the root logger has handlers, so reruns are safe."""
    level = level or get_settings().log_level
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)
