from __future__ import annotations

from src.backend.use_cases.currency_format import format_currency


def test_en_gb_pounds() -> None:
    assert format_currency(1234567.891, "GBP", "en-GB") == "£1,234,567.89"
    assert format_currency(0, "GBP", "en-GB") == "£0.00"
    assert format_currency(-15, "GBP", "en-GB") == "-£15.00"


def test_symbol_follows_locale() -> None:
    assert format_currency(10, "USD", "en-US") == "$10.00"
    assert format_currency(10, "USD", "en-GB") == "$10.00"
    assert format_currency(10, "AUD", "en-AU") == "$10.00"
    assert format_currency(10, "AUD", "en-GB") == "A$10.00"


def test_continental_separators() -> None:
    assert format_currency(1234.5, "EUR", "de-DE") == "1.234,50\u00a0€"
    assert format_currency(1234.5, "EUR", "fr-FR") == "1\u202f234,50\u00a0€"


def test_unknown_locale_and_currency_fall_back() -> None:
    assert format_currency(5, "GBP", "xx-YY") == "£5.00"
    assert format_currency(5, "GBP", "en_US") == "£5.00"
    assert format_currency(5, "CHF", "en-GB") == "CHF\u00a05.00"
    assert format_currency(5, "GBP") == "£5.00"


def test_negative_rounding_to_zero_has_no_sign() -> None:
    assert format_currency(-0.001, "GBP", "en-GB") == "£0.00"


def test_ties_round_half_up() -> None:
    assert format_currency(0.125, "GBP", "en-GB") == "£0.13"
    assert format_currency(1.005, "GBP", "en-GB") == "£1.01"
    assert format_currency(-2.675, "GBP", "en-GB") == "-£2.68"
