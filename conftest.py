"""Pytest configuration.

Ensures the `src.*` package can be imported consistently during test collection.
"""

import sys
from pathlib import Path

import pytest


def _prepend_sys_path(path: Path) -> None:
    resolved = str(path.resolve())
    if resolved not in sys.path:
        sys.path.insert(0, resolved)


REPO_ROOT = Path(__file__).resolve().parent

# Allow importing `src.*` package explicitly.
_prepend_sys_path(REPO_ROOT)


@pytest.fixture
def xero_env_vars():
    """Common environment variables for configuration tests."""
    return {
        "XERO_IDENTITY_URL": "https://identity.test/connect/token",
        "XERO_CONNECTIONS_URL": "https://api.test/connections",
        "XERO_API_BASE_URL": "https://api.test/api.xro/2.0",
        "XERO_HTTP_TIMEOUT_SECONDS": "12.5",
        "XERO_CURRENCY_CODE": "EUR",
        "XERO_LOCALE": "de-DE",
        "XERO_DEBUG": "1",
        "BASIC_LOGGING_LEVEL": "DEBUG",
    }
