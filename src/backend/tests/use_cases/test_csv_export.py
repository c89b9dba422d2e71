from __future__ import annotations

import csv
import io
from datetime import date

import pytest

from src.backend.integrations.xero_errors import NoDataToExport
from src.backend.use_cases.csv_export import csv_cell, export_csv, export_filename
from src.backend.use_cases.results_table import flatten_row


def test_export_round_trips_through_csv_reader() -> None:
    rows = [
        {"Reference": 'Say "hi", please', "Total": 10.0, "Contact": {"Name": "Acme\nLtd"}},
        {"Reference": "plain", "IsReconciled": False, "LineItems": [{"a": 1}]},
    ]

    text = export_csv(rows)
    parsed = list(csv.reader(io.StringIO(text, newline="")))

    flattened = [flatten_row(r) for r in rows]
    header = parsed[0]
    assert header == ["Reference", "Total", "Contact.Name", "IsReconciled", "LineItems"]
    assert len(parsed) - 1 == len(flattened)
    for source, record in zip(flattened, parsed[1:]):
        assert record == [csv_cell(source.get(h)) for h in header]

    assert parsed[1][0] == 'Say "hi", please'
    assert parsed[1][2] == "Acme\nLtd"
    assert parsed[2][4] == '[{"a": 1}]'


def test_export_quotes_only_when_needed() -> None:
    text = export_csv([{"a": "x,y", "b": "plain", "c": 'q"t'}])
    assert text.splitlines()[1] == '"x,y",plain,"q""t"'


def test_export_empty_rows_is_an_error() -> None:
    with pytest.raises(NoDataToExport):
        export_csv([])


def test_csv_cell() -> None:
    assert csv_cell(None) == ""
    assert csv_cell(True) == "true"
    assert csv_cell(15.0) == "15"
    assert csv_cell(1.5) == "1.5"
    assert csv_cell({"k": "v"}) == '{"k": "v"}'


def test_export_filename() -> None:
    assert export_filename("Invoices", date(2024, 2, 1)) == "Invoices-2024-02-01.csv"
    assert export_filename(None, date(2024, 2, 1)) == "xero-query-2024-02-01.csv"


def test_display_fields_lead_the_header() -> None:
    rows = [
        {
            "Reference": "r1",
            "Status": "PAID",
            "Total": 10,
            "Date": "2024-01-02",
            "Contact": {"Name": "Acme", "ContactID": "c1"},
        },
    ]

    text = export_csv(rows, preferred=["Date", "Contact", "Total", "Missing"])

    header = next(csv.reader(io.StringIO(text, newline="")))
    assert header == ["Date", "Contact.Name", "Contact.ContactID", "Total", "Reference", "Status"]


def test_export_filename_defaults_to_utc_date(monkeypatch) -> None:
    monkeypatch.setattr("src.backend.use_cases.csv_export.utc_today", lambda: date(2024, 12, 31))
    assert export_filename("Contacts") == "Contacts-2024-12-31.csv"


def test_non_dict_rows_export_as_blank_lines() -> None:
    text = export_csv([{"a": 1}, "oops"])
    assert text.splitlines() == ["a", "1", '""']
