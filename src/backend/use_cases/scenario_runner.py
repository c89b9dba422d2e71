"""End-to-end execution of a scenario against Xero.

Each remote query re-authenticates: tokens are never reused across calls.
The reference-accounts fetch and the main query run strictly one after the
other, and any failure aborts the whole run (no partial results).
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from src.backend.common.config.app_config import config
from src.backend.common.models.scenarios import ScenarioDefinition
from src.backend.integrations.xero_auth import XeroAuthenticator, XeroCredentials
from src.backend.integrations.xero_client import XeroClient
from src.backend.integrations.xero_envelope import extract_result_rows
from src.backend.integrations.xero_errors import InvalidCredentials, MissingEndpoint
from src.backend.use_cases.account_aggregation import (
    BANK_ACCOUNTS_FILTER,
    aggregate_by_account,
)
from src.backend.use_cases.query_builder import WHERE_KEY, build_query_params
from src.backend.use_cases.results_table import (
    QueryResult,
    SortState,
    apply_sort,
    discover_columns,
)

logger = logging.getLogger(__name__)


class ScenarioRunner:
    def __init__(
        self,
        *,
        authenticator: XeroAuthenticator,
        client: XeroClient,
        currency_code: str = "GBP",
        locale: str | None = None,
    ) -> None:
        self._authenticator = authenticator
        self._client = client
        self._currency_code = currency_code
        self._locale = locale

    @classmethod
    def from_env(cls) -> "ScenarioRunner":
        return cls(
            authenticator=XeroAuthenticator.from_env(),
            client=XeroClient.from_env(),
            currency_code=config.XERO_CURRENCY_CODE,
            locale=config.XERO_LOCALE,
        )

    def execute_query(
        self,
        credentials: XeroCredentials,
        endpoint: str | None,
        params: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Authenticate and run a single GET; returns the raw envelope."""

        if not credentials.client_id or not credentials.client_secret:
            raise InvalidCredentials()
        if not endpoint:
            raise MissingEndpoint()

        token = self._authenticator.authenticate(
            credentials.client_id, credentials.client_secret
        )
        return self._client.get(endpoint, token=token, params=params)

    def fetch_reference_accounts(
        self,
        scenario: ScenarioDefinition,
        credentials: XeroCredentials,
    ) -> list[dict[str, Any]]:
        if not scenario.fetches_reference_accounts:
            return []
        envelope = self.execute_query(
            credentials,
            scenario.accounts_endpoint,
            {WHERE_KEY: BANK_ACCOUNTS_FILTER},
        )
        return extract_result_rows(envelope)

    def run(
        self,
        scenario: ScenarioDefinition,
        credentials: XeroCredentials,
        user_values: Mapping[str, str] | None = None,
        *,
        sort: SortState | None = None,
    ) -> QueryResult:
        params = build_query_params(scenario, user_values)
        logger.info(f"Running scenario {scenario.id} against {scenario.endpoint}")

        reference_accounts: list[dict[str, Any]] = []
        if scenario.aggregate_by_account:
            reference_accounts = self.fetch_reference_accounts(scenario, credentials)

        envelope = self.execute_query(credentials, scenario.endpoint, params)
        rows = extract_result_rows(envelope)

        if scenario.aggregate_by_account:
            rows = [
                r.to_row()
                for r in aggregate_by_account(
                    rows,
                    reference_accounts,
                    currency_code=self._currency_code,
                    locale=self._locale,
                )
            ]

        fields = discover_columns(rows, scenario.display_fields)
        data = apply_sort(rows, sort or SortState())
        logger.info(f"Scenario {scenario.id} returned {len(data)} rows")
        return QueryResult(data=data, fields=fields)
