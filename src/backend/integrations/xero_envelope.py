"""Helpers for unwrapping Xero response envelopes.

Xero wraps result rows under a type-specific key (`Invoices`,
`BankTransactions`, `Accounts`, ...) next to metadata such as `Id`, `Status`
and `DateTimeUTC`. These helpers are deterministic and never call Xero.
"""

from __future__ import annotations

from typing import Any

ERRORS_KEY = "Errors"


def first_array_property(
    envelope: dict[str, Any] | None,
    exclude_key: str = ERRORS_KEY,
) -> tuple[str, list[Any]] | None:
    """Return the first `(key, value)` whose value is a list, skipping `exclude_key`."""

    if not isinstance(envelope, dict):
        return None
    for key, value in envelope.items():
        if key == exclude_key:
            continue
        if isinstance(value, list):
            return key, value
    return None


def extract_result_rows(envelope: dict[str, Any] | None) -> list[Any]:
    """Result set of an envelope; empty when no array-valued property exists."""

    found = first_array_property(envelope, ERRORS_KEY)
    return found[1] if found else []
