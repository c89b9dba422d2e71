"""Immutable state of one interactive query session.

Handlers never mutate a `SessionState`; each transition returns a new one.
The `is_loading` flag rejects a second execution while one is in flight.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Mapping

import requests

from src.backend.common.models.scenarios import ScenarioDefinition
from src.backend.integrations.xero_auth import XeroCredentials
from src.backend.integrations.xero_errors import XeroQueryError
from src.backend.use_cases.csv_export import export_csv, export_filename
from src.backend.use_cases.results_table import SortState, apply_sort, next_sort
from src.backend.use_cases.scenario_runner import ScenarioRunner

logger = logging.getLogger(__name__)


class QueryAlreadyRunning(XeroQueryError):
    status_code = 409

    def __init__(self) -> None:
        super().__init__("A query is already running")


@dataclass(frozen=True)
class SessionState:
    scenario: ScenarioDefinition | None = None
    parameters: Mapping[str, str] = field(default_factory=dict)
    is_loading: bool = False
    error: str | None = None
    results: tuple[dict[str, Any], ...] | None = None
    sort: SortState = SortState()

    @property
    def visible_rows(self) -> list[dict[str, Any]]:
        return apply_sort(self.results or (), self.sort)


def select_scenario(state: SessionState, scenario: ScenarioDefinition | None) -> SessionState:
    return replace(
        state,
        scenario=scenario,
        parameters={},
        error=None,
        results=None,
        sort=SortState(),
    )


def set_parameter(state: SessionState, name: str, value: str) -> SessionState:
    return replace(state, parameters={**state.parameters, name: value})


def begin_query(state: SessionState, credentials: XeroCredentials) -> SessionState:
    if state.is_loading:
        raise QueryAlreadyRunning()
    if not credentials.client_id or not credentials.client_secret:
        return replace(state, error="Please provide both Client ID and Client Secret")
    if state.scenario is None:
        return replace(state, error="Please select a scenario")
    return replace(state, is_loading=True, error=None, results=None)


def complete_query(state: SessionState, rows: list[dict[str, Any]]) -> SessionState:
    return replace(state, is_loading=False, error=None, results=tuple(rows))


def fail_query(state: SessionState, message: str) -> SessionState:
    return replace(state, is_loading=False, error=message, results=None)


def toggle_sort(state: SessionState, column: str) -> SessionState:
    return replace(state, sort=next_sort(state.sort, column))


def execute(
    state: SessionState,
    runner: ScenarioRunner,
    credentials: XeroCredentials,
) -> SessionState:
    """Run the selected scenario and fold the outcome into a new state."""

    started = begin_query(state, credentials)
    if not started.is_loading:
        return started

    try:
        result = runner.run(started.scenario, credentials, started.parameters)
    except XeroQueryError as e:
        logger.warning(f"Scenario {started.scenario.id} failed: {e.message}")
        return fail_query(started, e.message)
    except requests.RequestException as e:
        logger.warning(f"Scenario {started.scenario.id} failed: {e}")
        return fail_query(started, f"Request to Xero failed: {e}")

    return complete_query(started, result.data)


def export_results(state: SessionState, today: date | None = None) -> tuple[str, str]:
    """Return `(filename, csv_text)` for the rows as currently sorted."""

    name = state.scenario.name if state.scenario else None
    preferred = state.scenario.display_fields if state.scenario else None
    return export_filename(name, today), export_csv(state.visible_rows, preferred)
