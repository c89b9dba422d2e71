from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from src.backend.common.models.scenarios import ScenarioDefinition
from src.backend.use_cases.query_builder import build_query_params, parse_day_count


def _scenario(*parameters: dict) -> ScenarioDefinition:
    return ScenarioDefinition.model_validate(
        {
            "id": "s",
            "name": "S",
            "endpoint": "https://api.xero.com/api.xro/2.0/Invoices",
            "parameters": list(parameters),
        }
    )


def test_plain_parameters_emit_non_empty_values_and_hidden_constants() -> None:
    scenario = _scenario(
        {"name": "searchTerm", "type": "text"},
        {"name": "page", "type": "text"},
        {"name": "Statuses", "type": "select", "default": "PAID",
         "options": [{"label": "Paid", "value": "PAID"}]},
        {"name": "ModifiedAfter", "type": "date"},
        {"name": "order", "type": "hidden", "value": "Date DESC"},
    )

    params = build_query_params(
        scenario,
        {"searchTerm": "Acme", "page": "", "ModifiedAfter": "2024-05-01", "order": "ignored"},
    )

    assert params == {
        "searchTerm": "Acme",
        "ModifiedAfter": "2024-05-01",
        "order": "Date DESC",
    }
    assert "where" not in params


def test_date_range_builds_trailing_filter() -> None:
    scenario = _scenario({"name": "dateRange", "type": "select", "default": "30"})

    params = build_query_params(scenario, {"dateRange": "30"}, today=date(2024, 3, 31))

    assert params == {"where": 'Date >= DateTime.Parse("2024-03-01")'}


def test_date_range_defaults_to_utc_today() -> None:
    scenario = _scenario({"name": "dateRange", "type": "select"})
    expected = (datetime.now(timezone.utc).date() - timedelta(days=30)).isoformat()

    params = build_query_params(scenario, {"dateRange": "30"})

    assert params["where"] == f'Date >= DateTime.Parse("{expected}")'


def test_date_range_falls_back_to_default_then_thirty() -> None:
    with_default = _scenario({"name": "dateRange", "type": "select", "default": "7"})
    without_default = _scenario({"name": "dateRange", "type": "select"})
    today = date(2024, 1, 31)

    assert build_query_params(with_default, {}, today=today)["where"] == 'Date >= DateTime.Parse("2024-01-24")'
    assert build_query_params(without_default, {}, today=today)["where"] == 'Date >= DateTime.Parse("2024-01-01")'
    assert build_query_params(without_default, {"dateRange": "soon"}, today=today)["where"] == (
        'Date >= DateTime.Parse("2024-01-01")'
    )


def test_parse_day_count() -> None:
    assert parse_day_count("90") == 90
    assert parse_day_count(None, "7") == 7
    assert parse_day_count("", None) == 30
    assert parse_day_count("abc", "7") == 30


def test_from_and_to_dates_conjoin_in_declared_order() -> None:
    scenario = _scenario(
        {"name": "fromDate", "type": "date"},
        {"name": "toDate", "type": "date"},
    )

    params = build_query_params(scenario, {"fromDate": "2024-01-01", "toDate": "2024-01-31"})

    assert params == {
        "where": 'Date >= DateTime.Parse("2024-01-01") AND Date <= DateTime.Parse("2024-01-31")'
    }


def test_to_date_alone_and_missing_from_date() -> None:
    scenario = _scenario(
        {"name": "fromDate", "type": "date"},
        {"name": "toDate", "type": "date"},
    )

    assert build_query_params(scenario, {"toDate": "2024-02-29"}) == {
        "where": 'Date <= DateTime.Parse("2024-02-29")'
    }
    assert build_query_params(scenario, {"fromDate": ""}) == {}


def test_date_range_then_to_date_appends() -> None:
    scenario = _scenario(
        {"name": "dateRange", "type": "select"},
        {"name": "toDate", "type": "date"},
    )

    params = build_query_params(scenario, {"dateRange": "10", "toDate": "2024-06-30"}, today=date(2024, 6, 30))

    assert params["where"] == (
        'Date >= DateTime.Parse("2024-06-20") AND Date <= DateTime.Parse("2024-06-30")'
    )
