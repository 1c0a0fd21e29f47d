"""Settings read from the environment (and a local .env file, if any)."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_DEFAULTS_PATH = Path.home() / ".invoice_builder" / "defaults.json"


@dataclass(frozen=True)
class Settings:
    defaults_path: Path
    log_level: int = logging.INFO


def _parse_log_level(value: str) -> int:
    level = logging.getLevelName((value or "").strip().upper())
    if isinstance(level, int):
        return level
    logger.warning("Invalid LOG_LEVEL %r, using INFO", value)
    return logging.INFO


def load_settings() -> Settings:
    load_dotenv(find_dotenv(usecwd=True))
    path = os.getenv("INVOICE_DEFAULTS_PATH")
    return Settings(
        defaults_path=Path(path).expanduser() if path else DEFAULT_DEFAULTS_PATH,
        log_level=_parse_log_level(os.getenv("LOG_LEVEL", "INFO")),
    )
