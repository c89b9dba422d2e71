"""Per-bank-account aggregation of transaction rows.

Produces one row per bank account with the number of matching transactions
and their signed total, including accounts that have no matches at all.

Balances are summed as floats. That is fine for display but is not an
auditable ledger total.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Iterable

from src.backend.use_cases.currency_format import format_currency

UNKNOWN_ACCOUNT = "Unknown Account"
BANK_ACCOUNTS_FILTER = 'Type=="BANK"'

ACCOUNT_COLUMN = "Bank Account"
COUNT_COLUMN = "Count of Unreconciled"
BALANCE_COLUMN = "Balance on Xero"


@dataclass(frozen=True, slots=True)
class AggregatedRow:
    account: str
    count: int
    balance: str

    def to_row(self) -> dict[str, Any]:
        return {
            ACCOUNT_COLUMN: self.account,
            COUNT_COLUMN: self.count,
            BALANCE_COLUMN: self.balance,
        }


def reference_account_name(account: Any) -> str:
    if not isinstance(account, dict):
        return UNKNOWN_ACCOUNT
    return account.get("Name") or account.get("Code") or UNKNOWN_ACCOUNT


def transaction_account_name(transaction: Any) -> str:
    if not isinstance(transaction, dict):
        return UNKNOWN_ACCOUNT
    bank_account = transaction.get("BankAccount")
    if isinstance(bank_account, dict):
        return bank_account.get("Name") or UNKNOWN_ACCOUNT
    return UNKNOWN_ACCOUNT


def parse_amount(value: Any) -> float:
    """Parse a transaction total; anything unparseable counts as zero."""

    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return 0.0
    return amount if math.isfinite(amount) else 0.0


def tally_by_account(
    transactions: Iterable[dict[str, Any]],
    reference_accounts: Iterable[dict[str, Any]] | None = None,
) -> dict[str, tuple[int, float]]:
    """Return account name -> (count, balance), reference accounts first."""

    totals: dict[str, tuple[int, float]] = {}
    for account in reference_accounts or []:
        totals[reference_account_name(account)] = (0, 0.0)

    for transaction in transactions:
        name = transaction_account_name(transaction)
        count, balance = totals.get(name, (0, 0.0))
        total = transaction.get("Total") if isinstance(transaction, dict) else None
        totals[name] = (count + 1, balance + parse_amount(total))

    return totals


def aggregate_by_account(
    transactions: Iterable[dict[str, Any]],
    reference_accounts: Iterable[dict[str, Any]] | None = None,
    *,
    currency_code: str = "GBP",
    locale: str | None = None,
) -> list[AggregatedRow]:
    totals = tally_by_account(transactions, reference_accounts)
    return [
        AggregatedRow(
            account=name,
            count=count,
            balance=format_currency(balance, currency_code, locale),
        )
        for name, (count, balance) in totals.items()
    ]
