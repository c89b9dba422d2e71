"""CSV export of result rows.

Rows are flattened first (nested objects become `parent.child` columns),
then written with RFC4180 quoting. Lists and other non-scalar leftovers are
serialised as JSON text.
"""

from __future__ import annotations

import csv
import io
import json
from datetime import date
from typing import Any, Sequence

from src.backend.integrations.xero_errors import NoDataToExport
from src.backend.use_cases.query_builder import utc_today
from src.backend.use_cases.results_table import discover_columns, flatten_row

DEFAULT_EXPORT_NAME = "xero-query"


def csv_cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)


def _expand_preferred(preferred: Sequence[str] | None, columns: Sequence[str]) -> list[str]:
    """Map display fields onto flattened columns (`BankAccount` -> `BankAccount.*`)."""

    expanded: dict[str, None] = {}
    for field in preferred or []:
        if field in columns:
            expanded.setdefault(field, None)
            continue
        for column in columns:
            if column.startswith(f"{field}."):
                expanded.setdefault(column, None)
    return list(expanded)


def export_csv(rows: Sequence[dict[str, Any]], preferred: Sequence[str] | None = None) -> str:
    """Return CSV text for `rows` (already in display order).

    `preferred` columns (a scenario's display fields) lead the header.
    """

    if not rows:
        raise NoDataToExport()

    flattened = [flatten_row(row) for row in rows]
    columns = discover_columns(flattened)
    headers = discover_columns(flattened, _expand_preferred(preferred, columns))

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\r\n")
    writer.writerow(headers)
    for row in flattened:
        writer.writerow([csv_cell(row.get(h)) for h in headers])
    return buf.getvalue()


def export_filename(scenario_name: str | None, today: date | None = None) -> str:
    day = today or utc_today()
    return f"{scenario_name or DEFAULT_EXPORT_NAME}-{day.isoformat()}.csv"
