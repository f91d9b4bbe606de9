"""Month vocabulary and period-label parsing.

Invoices carry their billing period as a `MONTH/YEAR` label where the month
is one of twelve fixed Portuguese 3-letter codes (`JAN/2024`, `FEV/2024`,
... `DEZ/2024`).
"""

from __future__ import annotations

from dataclasses import dataclass

MONTH_CODES: dict[str, int] = {
    "JAN": 1,
    "FEV": 2,
    "MAR": 3,
    "ABR": 4,
    "MAI": 5,
    "JUN": 6,
    "JUL": 7,
    "AGO": 8,
    "SET": 9,
    "OUT": 10,
    "NOV": 11,
    "DEZ": 12,
}

# Column labels used by the invoice table
MONTH_ABBREVIATIONS: dict[str, str] = {code: code.capitalize() for code in MONTH_CODES}


@dataclass(frozen=True)
class PeriodKey:
    """Composite (year, month-code) key of one aggregate row.

    Attributes:
        year: Four-digit year as text (e.g. "2024").
        month: One of the twelve month codes in `MONTH_CODES`.
    """
    year: str
    month: str

    @property
    def month_number(self) -> int:
        """Calendar month number, JAN=1 ... DEZ=12."""
        return MONTH_CODES[self.month]


def split_period_label(label: str) -> tuple[str, str] | None:
    """Split a `MONTH/YEAR` label into its stripped raw parts.

    Returns:
        `(month, year)` as found in the label, or ``None`` when the label has
        no `/` separator or either side is empty.
    """
    month, sep, year = (label or "").partition("/")
    month, year = month.strip(), year.strip()
    if not sep or not month or not year:
        return None
    return month, year


def parse_period_label(label: str) -> PeriodKey | None:
    """Parse a period label into a `PeriodKey`.

    Month codes are matched case-insensitively.

    Returns:
        The key, or ``None`` when the label is malformed or the month code is
        not one of the twelve recognized codes.
    """
    parts = split_period_label(label)
    if parts is None:
        return None
    month, year = parts
    month = month.upper()
    if month not in MONTH_CODES:
        return None
    return PeriodKey(year=year, month=month)


def month_abbreviation(label: str) -> str:
    """Return the table column label (`Jan`, `Fev`, ...) for a period label.

    Unrecognized month codes pass through as their raw text, and a label
    without a `/` passes through whole, so no invoice is hidden from the
    table.
    """
    month, sep, _ = (label or "").partition("/")
    raw = month.strip() if sep else (label or "").strip()
    return MONTH_ABBREVIATIONS.get(raw.upper(), raw)
