"""Centralised settings for the urltext service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (two levels up from this file)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Fetcher
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "USER_AGENT", "urltext/1.0 (text extraction service)"
        )
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    max_content_bytes: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTENT_BYTES", str(50 * 1024 * 1024)))
    )
    follow_redirects: bool = field(
        default_factory=lambda: _env_bool("FOLLOW_REDIRECTS", "true")
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO").upper()
    )


# Module-level singleton, import this everywhere:
#   from urltext.config import settings
settings = Settings()
