"""Locale-aware currency formatting.

The single formatting boundary for monetary display values. Aggregation
works on plain numbers and calls `format_currency` only when it emits rows.

Only a small, explicit set of locales is supported; anything else falls
back to `en-GB`.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

DEFAULT_LOCALE = "en-GB"

_CENT = Decimal("0.01")


@dataclass(frozen=True, slots=True)
class LocaleConventions:
    group_separator: str
    decimal_separator: str
    symbol_first: bool
    symbol_spacing: str = ""


_LOCALES: dict[str, LocaleConventions] = {
    "en-GB": LocaleConventions(",", ".", True),
    "en-US": LocaleConventions(",", ".", True),
    "en-AU": LocaleConventions(",", ".", True),
    "en-NZ": LocaleConventions(",", ".", True),
    "en-IE": LocaleConventions(",", ".", True),
    "en-CA": LocaleConventions(",", ".", True),
    "de-DE": LocaleConventions(".", ",", False, "\u00a0"),
    "fr-FR": LocaleConventions("\u202f", ",", False, "\u00a0"),
    "nl-NL": LocaleConventions(".", ",", True, "\u00a0"),
}

_SYMBOLS: dict[str, str] = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
    "AUD": "A$",
    "NZD": "NZ$",
    "CAD": "CA$",
    "JPY": "¥",
    "ZAR": "ZAR",
}

# Currencies written with a bare "$" in their home locale.
_HOME_DOLLARS = {("USD", "en-US"), ("AUD", "en-AU"), ("NZD", "en-NZ"), ("CAD", "en-CA")}


def _resolve_locale(locale: str | None) -> tuple[str, LocaleConventions]:
    tag = (locale or DEFAULT_LOCALE).replace("_", "-")
    if tag in _LOCALES:
        return tag, _LOCALES[tag]
    language = tag.split("-")[0].lower()
    for known, conventions in _LOCALES.items():
        if known.split("-")[0] == language:
            return known, conventions
    return DEFAULT_LOCALE, _LOCALES[DEFAULT_LOCALE]


def _currency_symbol(currency_code: str, locale_tag: str) -> str:
    code = currency_code.upper()
    if (code, locale_tag) in _HOME_DOLLARS:
        return "$"
    return _SYMBOLS.get(code, code)


def _group_digits(integer_part: str, separator: str) -> str:
    groups = []
    while len(integer_part) > 3:
        groups.insert(0, integer_part[-3:])
        integer_part = integer_part[:-3]
    groups.insert(0, integer_part)
    return separator.join(groups)


def format_currency(amount: float | Decimal, currency_code: str = "GBP", locale: str | None = None) -> str:
    """Format `amount` with two decimal places, e.g. `format_currency(-1234.5)` -> `-£1,234.50`."""

    locale_tag, conventions = _resolve_locale(locale)
    symbol = _currency_symbol(currency_code, locale_tag)

    # Shortest decimal form of the float, half-up, so 0.125 shows as 0.13.
    rounded = Decimal(str(amount)).quantize(_CENT, rounding=ROUND_HALF_UP)
    negative = rounded < 0
    integer_part, fraction = f"{abs(rounded):.2f}".split(".")
    number = (
        _group_digits(integer_part, conventions.group_separator)
        + conventions.decimal_separator
        + fraction
    )

    # Multi-letter codes always get a separating space.
    spacing = conventions.symbol_spacing or ("\u00a0" if symbol.isalpha() else "")
    if conventions.symbol_first:
        text = f"{symbol}{spacing}{number}"
    else:
        text = f"{number}{spacing}{symbol}"
    return f"-{text}" if negative else text
