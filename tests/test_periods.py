from __future__ import annotations

from invoice_pipeline.periods import (
    MONTH_ABBREVIATIONS,
    MONTH_CODES,
    PeriodKey,
    month_abbreviation,
    parse_period_label,
)


def test_vocabulary_has_twelve_ordered_months() -> None:
    assert list(MONTH_CODES) == [
        "JAN", "FEV", "MAR", "ABR", "MAI", "JUN",
        "JUL", "AGO", "SET", "OUT", "NOV", "DEZ",
    ]
    assert list(MONTH_CODES.values()) == list(range(1, 13))
    assert MONTH_ABBREVIATIONS["FEV"] == "Fev"
    assert MONTH_ABBREVIATIONS["DEZ"] == "Dez"


def test_parse_period_label() -> None:
    key = parse_period_label("SET/2024")
    assert key == PeriodKey(year="2024", month="SET")
    assert key.month_number == 9
    assert parse_period_label(" jan / 2023 ") == PeriodKey(year="2023", month="JAN")


def test_parse_period_label_rejects_malformed() -> None:
    assert parse_period_label("JAN2024") is None
    assert parse_period_label("/2024") is None
    assert parse_period_label("JAN/") is None
    assert parse_period_label("XYZ/2024") is None
    assert parse_period_label("") is None


def test_month_abbreviation_passes_unknown_codes_through() -> None:
    assert month_abbreviation("JAN/2024") == "Jan"
    assert month_abbreviation("fev/2024") == "Fev"
    assert month_abbreviation("XYZ/2024") == "XYZ"
    assert month_abbreviation("JANEIRO") == "JANEIRO"
