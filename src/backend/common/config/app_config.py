"""Application configuration.

Values come from the process environment, with `.env` loaded first so local
runs work without exporting anything. Xero credentials are *not* part of the
configuration: they are supplied per request and never stored.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv(override=False)

logger = logging.getLogger(__name__)

_REPO_ROOT = Path(__file__).resolve().parents[4]

_TRUTHY = {"1", "true", "TRUE", "yes", "YES"}


class AppConfig:
    """Read-once view over environment settings."""

    def __init__(self) -> None:
        self.XERO_IDENTITY_URL = os.environ.get(
            "XERO_IDENTITY_URL", "https://identity.xero.com/connect/token"
        )
        self.XERO_CONNECTIONS_URL = os.environ.get(
            "XERO_CONNECTIONS_URL", "https://api.xero.com/connections"
        )
        self.XERO_API_BASE_URL = os.environ.get(
            "XERO_API_BASE_URL", "https://api.xero.com/api.xro/2.0"
        )
        self.XERO_HTTP_TIMEOUT_SECONDS = self._get_float("XERO_HTTP_TIMEOUT_SECONDS", 30.0)
        self.XERO_SCENARIOS_PATH = os.environ.get(
            "XERO_SCENARIOS_PATH", str(_REPO_ROOT / "data" / "scenarios.json")
        )
        self.XERO_CURRENCY_CODE = os.environ.get("XERO_CURRENCY_CODE", "GBP")
        self.XERO_LOCALE = os.environ.get("XERO_LOCALE", "en-GB")
        self.XERO_DEBUG = os.environ.get("XERO_DEBUG", "") in _TRUTHY

        self.BASIC_LOGGING_LEVEL = os.environ.get("BASIC_LOGGING_LEVEL", "INFO")
        self.FRONTEND_SITE_NAME = os.environ.get("FRONTEND_SITE_NAME", "*")

    @staticmethod
    def _get_float(name: str, default: float) -> float:
        raw = os.environ.get(name)
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError:
            logger.warning(f"Ignoring invalid {name}={raw!r}; using {default}")
            return default
        return value if value > 0 else default


config = AppConfig()
