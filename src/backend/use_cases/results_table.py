"""Tabular presentation of query results.

Rows are arbitrary (possibly nested) dicts, so everything here is generic:
column discovery, dot-path lookup, tri-state sorting, display formatting and
flattening for export. Nothing mutates the input rows.
"""

from __future__ import annotations

import json
import re
import unicodedata
from dataclasses import dataclass
from datetime import date
from functools import cmp_to_key
from typing import Any, Iterable, Literal, Sequence

from rich.table import Table
from rich.text import Text

SortDirection = Literal["asc", "desc"]

_ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")


@dataclass(frozen=True, slots=True)
class SortState:
    column: str | None = None
    direction: SortDirection | None = None

    @property
    def active(self) -> bool:
        return bool(self.column and self.direction)


@dataclass(frozen=True, slots=True)
class QueryResult:
    data: list[dict[str, Any]]
    fields: list[str]

    @property
    def count(self) -> int:
        return len(self.data)

    def to_payload(self) -> dict[str, Any]:
        return {"data": self.data, "fields": self.fields, "count": self.count}


def discover_columns(
    rows: Iterable[dict[str, Any]],
    preferred: Sequence[str] | None = None,
) -> list[str]:
    """Union of row keys in first-seen order.

    `preferred` columns (a scenario's display fields) that occur in the rows
    are moved to the front, in the given order.
    """

    seen: dict[str, None] = {}
    for row in rows:
        if not isinstance(row, dict):
            continue
        for key in row:
            seen.setdefault(key, None)
    columns = list(seen)
    if not preferred:
        return columns
    front = [c for c in preferred if c in seen]
    return front + [c for c in columns if c not in front]


def get_nested_value(row: dict[str, Any] | None, path: str) -> Any:
    """Look up `path` ("BankAccount.Name") in `row`; `None` if any hop is missing."""

    if not row or not path:
        return None
    value: Any = row
    for part in path.split("."):
        if not isinstance(value, dict) or value.get(part) is None:
            return None
        value = value[part]
    return value


def next_sort(state: SortState, column: str) -> SortState:
    """Header-click transition: ascending, then descending, then unsorted."""

    if state.column != column:
        return SortState(column=column, direction="asc")
    if state.direction == "asc":
        return SortState(column=column, direction="desc")
    return SortState()


def collation_key(text: str) -> str:
    # Accent- and case-insensitive primary strength, similar to a default
    # locale collation.
    decomposed = unicodedata.normalize("NFKD", text)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def _compare_defined(a: Any, b: Any) -> int:
    if isinstance(a, str) and isinstance(b, str):
        ka, kb = collation_key(a), collation_key(b)
        if ka != kb:
            return -1 if ka < kb else 1
        # Lowercase before uppercase on otherwise equal text.
        sa, sb = a.swapcase(), b.swapcase()
        return (sa > sb) - (sa < sb)
    try:
        return (a > b) - (a < b)
    except TypeError:
        sa, sb = str(a), str(b)
        return (sa > sb) - (sa < sb)


def sort_rows(
    rows: Sequence[dict[str, Any]],
    column: str | None,
    direction: SortDirection | None,
) -> list[dict[str, Any]]:
    """Stable sort by `column`; missing values always sort last."""

    if not column or not direction:
        return list(rows)

    sign = 1 if direction == "asc" else -1

    def compare(ra: dict[str, Any], rb: dict[str, Any]) -> int:
        a = get_nested_value(ra, column)
        b = get_nested_value(rb, column)
        if a is None and b is None:
            return 0
        if a is None:
            return 1
        if b is None:
            return -1
        return sign * _compare_defined(a, b)

    return sorted(rows, key=cmp_to_key(compare))


def apply_sort(rows: Sequence[dict[str, Any]], state: SortState) -> list[dict[str, Any]]:
    return sort_rows(rows, state.column, state.direction)


def format_column_name(column: str) -> str:
    """`BankAccount` -> `Bank Account`, `total` -> `Total`."""

    spaced = re.sub(r"([A-Z])", r" \1", column or "")
    return (spaced[:1].upper() + spaced[1:]).strip()


def format_number(value: int | float) -> str:
    if isinstance(value, int) or value.is_integer():
        return str(int(value))
    if abs(value) >= 0.01:
        return f"{value:.2f}"
    return str(value)


def format_cell_value(value: Any) -> str:
    if value is None:
        return "-"
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, dict):
        if value.get("Name"):
            return str(value["Name"])
        return json.dumps(value)
    if isinstance(value, list):
        return json.dumps(value)
    if isinstance(value, str) and _ISO_DATE_PREFIX.match(value):
        try:
            return date.fromisoformat(value[:10]).isoformat()
        except ValueError:
            return value
    if isinstance(value, (int, float)):
        return format_number(value)
    return str(value)


def flatten_row(row: Any, prefix: str = "") -> dict[str, Any]:
    """Flatten nested dicts into `parent.child` keys; lists are kept as-is."""

    flattened: dict[str, Any] = {}
    if not isinstance(row, dict):
        return flattened
    for key, value in row.items():
        new_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flattened.update(flatten_row(value, new_key))
        else:
            flattened[new_key] = value
    return flattened


def summarize(count: int) -> str:
    return f"Showing {count} {'result' if count == 1 else 'results'}"


def build_results_table(
    rows: Sequence[dict[str, Any]],
    columns: Sequence[str],
    *,
    title: str | None = None,
) -> Table:
    """Rich table of display-formatted cells, for terminal output."""

    table = Table(title=title)
    for column in columns:
        table.add_column(format_column_name(column), overflow="fold")
    for row in rows:
        # Text keeps JSON cells like `[{...}]` from being read as console markup.
        table.add_row(*(Text(format_cell_value(get_nested_value(row, c))) for c in columns))
    return table
