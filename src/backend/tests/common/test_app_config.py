from __future__ import annotations

from src.backend.common.config.app_config import AppConfig, config
from src.backend.integrations.xero_auth import XeroAuthenticator
from src.backend.integrations.xero_client import XeroClient
from src.backend.use_cases.scenario_runner import ScenarioRunner


def test_app_config_reads_environment(monkeypatch, xero_env_vars) -> None:
    for key, value in xero_env_vars.items():
        monkeypatch.setenv(key, value)

    cfg = AppConfig()

    assert cfg.XERO_IDENTITY_URL == "https://identity.test/connect/token"
    assert cfg.XERO_CONNECTIONS_URL == "https://api.test/connections"
    assert cfg.XERO_API_BASE_URL == "https://api.test/api.xro/2.0"
    assert cfg.XERO_HTTP_TIMEOUT_SECONDS == 12.5
    assert cfg.XERO_CURRENCY_CODE == "EUR"
    assert cfg.XERO_LOCALE == "de-DE"
    assert cfg.XERO_DEBUG is True
    assert cfg.BASIC_LOGGING_LEVEL == "DEBUG"


def test_app_config_defaults_and_invalid_timeout(monkeypatch) -> None:
    monkeypatch.delenv("XERO_IDENTITY_URL", raising=False)
    monkeypatch.delenv("XERO_DEBUG", raising=False)
    monkeypatch.setenv("XERO_HTTP_TIMEOUT_SECONDS", "soon")

    cfg = AppConfig()

    assert cfg.XERO_IDENTITY_URL == "https://identity.xero.com/connect/token"
    assert cfg.XERO_HTTP_TIMEOUT_SECONDS == 30.0
    assert cfg.XERO_DEBUG is False
    assert cfg.XERO_SCENARIOS_PATH.endswith("scenarios.json")


def test_from_env_builders(monkeypatch) -> None:
    monkeypatch.setattr(config, "XERO_IDENTITY_URL", "https://identity.test/token")
    monkeypatch.setattr(config, "XERO_API_BASE_URL", "https://api.test/api.xro/2.0")
    auth = XeroAuthenticator.from_env()
    assert auth._identity_url == "https://identity.test/token"
    assert XeroClient.from_env().resolve_endpoint("Invoices") == "https://api.test/api.xro/2.0/Invoices"
    assert isinstance(ScenarioRunner.from_env(), ScenarioRunner)
