import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from embedr.core.errors import UsageError

VERSION = "0.1.0"

DEFAULT_TIMEOUT = 10.0
DEFAULT_USER_AGENT = f"embedr/{VERSION}"
DEFAULT_LOG_LEVEL = "WARNING"


@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for the transport and CLI.

    Read from the environment (and a .env file, if present) by load_settings().
    """
    timeout: float = DEFAULT_TIMEOUT
    user_agent: str = DEFAULT_USER_AGENT
    format: Optional[str] = None
    log_level: str = DEFAULT_LOG_LEVEL


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None or raw.strip() == "":
        return DEFAULT_TIMEOUT
    try:
        value = float(raw)
    except ValueError:
        raise UsageError(f"EMBEDR_TIMEOUT must be a number of seconds, got {raw!r}")
    if value <= 0:
        raise UsageError(f"EMBEDR_TIMEOUT must be positive, got {raw!r}")
    return value


def read_settings() -> Settings:
    """Build settings from EMBEDR_* variables already in the environment."""
    return Settings(
        timeout=_parse_timeout(os.environ.get("EMBEDR_TIMEOUT")),
        user_agent=os.environ.get("EMBEDR_USER_AGENT") or DEFAULT_USER_AGENT,
        format=os.environ.get("EMBEDR_FORMAT") or None,
        log_level=(os.environ.get("EMBEDR_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """
    Load a .env file into the environment, then read settings.

    Variables already set in the process environment win over the .env file.
    Meant for the CLI; library code uses read_settings().
    """
    if env_file is not None:
        load_dotenv(env_file, override=False)
    else:
        load_dotenv(override=False)
    return read_settings()

