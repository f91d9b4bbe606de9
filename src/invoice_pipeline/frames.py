"""pandas views of aggregates, pivot rows and raw records.

The dashboard charts and tables, and the CLI printouts, consume these
DataFrames rather than the models directly.
"""
from __future__ import annotations

from typing import Sequence

import pandas as pd

from invoice_pipeline.clean.normalize import numeric_column
from invoice_pipeline.models import (
    ConsumerUnitRow,
    InvoiceRecord,
    PeriodAggregate,
    SummaryPoint,
)
from invoice_pipeline.periods import MONTH_ABBREVIATIONS

SERIES_COLUMNS = [
    "label",
    "total_consumption_kwh",
    "total_compensated_kwh",
    "total_financial_value",
    "total_savings_value",
    "spend_exceeds_savings",
]

UNIT_COLUMNS = ["consumer_unit_name", "consumer_unit_number", "distributor_name"]

NUMERIC_RECORD_COLUMNS = [
    "generated_energy_kwh",
    "grid_energy_kwh",
    "compensated_energy_kwh",
    "generated_energy_value",
    "grid_energy_value",
    "compensated_energy_value",
    "public_lighting_value",
]


def aggregates_to_frame(series: Sequence[PeriodAggregate | SummaryPoint]) -> pd.DataFrame:
    """Return the chart series as a DataFrame, one row per period.

    Args:
        series: Local aggregates or server summary points, already ordered.

    Returns:
        DataFrame with `SERIES_COLUMNS`.
    """
    rows = [{col: getattr(point, col) for col in SERIES_COLUMNS} for point in series]
    return pd.DataFrame(rows, columns=SERIES_COLUMNS)


def month_columns(rows: Sequence[ConsumerUnitRow]) -> list[str]:
    """Calendar months (`Jan` ... `Dez`), then raw month keys in first-seen order."""
    calendar = list(MONTH_ABBREVIATIONS.values())
    extra: list[str] = []
    for row in rows:
        for month in row.months_index:
            if month not in calendar and month not in extra:
                extra.append(month)
    return calendar + extra


def units_to_frame(rows: Sequence[ConsumerUnitRow]) -> pd.DataFrame:
    """Return the invoice table: unit columns then one column per month.

    Month columns come from `month_columns`. Missing months are None.
    """
    months = month_columns(rows)
    data = [
        {
            "consumer_unit_name": row.consumer_unit_name,
            "consumer_unit_number": row.consumer_unit_number,
            "distributor_name": row.distributor_name,
            **{m: row.months_index.get(m) for m in months},
        }
        for row in rows
    ]
    return pd.DataFrame(data, columns=UNIT_COLUMNS + months)


def records_to_frame(records: Sequence[InvoiceRecord]) -> pd.DataFrame:
    """Return invoice records as a flat DataFrame with normalized numbers."""
    columns = list(InvoiceRecord.model_fields)
    pdf = pd.DataFrame([r.model_dump() for r in records], columns=columns)
    for col in NUMERIC_RECORD_COLUMNS:
        pdf[col] = numeric_column(pdf[col])
    return pdf
