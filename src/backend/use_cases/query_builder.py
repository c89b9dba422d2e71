"""Translate user-entered scenario parameters into a Xero query string.

Xero filters through a single `where` expression, so the date parameters
(`dateRange`, `fromDate`, `toDate`) all feed one accumulating clause. They
are applied in the scenario's declared parameter order, which fixes the
order of the conjuncts.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Mapping

from src.backend.common.models.scenarios import ParameterSpec, ScenarioDefinition

WHERE_KEY = "where"
DEFAULT_DATE_RANGE_DAYS = 30


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def date_filter(operator: str, value: str) -> str:
    return f'Date {operator} DateTime.Parse("{value}")'


def _append_where(params: dict[str, str], clause: str) -> None:
    existing = params.get(WHERE_KEY)
    params[WHERE_KEY] = f"{existing} AND {clause}" if existing else clause


def parse_day_count(raw: str | None, default: str | None = None) -> int:
    """Day count for a trailing date range; falls back to 30 when unparseable."""

    for candidate in (raw, default):
        if candidate is None or str(candidate).strip() == "":
            continue
        try:
            return int(str(candidate).strip())
        except ValueError:
            return DEFAULT_DATE_RANGE_DAYS
    return DEFAULT_DATE_RANGE_DAYS


def _apply_parameter(
    params: dict[str, str],
    spec: ParameterSpec,
    user_values: Mapping[str, str],
    today: date,
) -> None:
    if spec.type == "hidden":
        params[spec.name] = spec.value or ""
        return

    value = user_values.get(spec.name)

    if spec.type == "select" and spec.name == "dateRange":
        days = parse_day_count(value, spec.default)
        since = today - timedelta(days=days)
        params[WHERE_KEY] = date_filter(">=", since.isoformat())
        return

    if not value:
        return

    if spec.type == "date" and spec.name == "fromDate":
        _append_where(params, date_filter(">=", value))
    elif spec.type == "date" and spec.name == "toDate":
        _append_where(params, date_filter("<=", value))
    else:
        params[spec.name] = value


def build_query_params(
    scenario: ScenarioDefinition,
    user_values: Mapping[str, str] | None = None,
    *,
    today: date | None = None,
) -> dict[str, str]:
    """Build the flat query-string mapping for `scenario`.

    `today` defaults to the current UTC date and exists so callers can pin
    the reference date of `dateRange`.
    """

    params: dict[str, str] = {}
    values = user_values or {}
    reference = today or utc_today()
    for spec in scenario.parameters:
        _apply_parameter(params, spec, values, reference)
    return params
