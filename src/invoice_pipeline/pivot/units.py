"""Group invoice records into one row per consumer unit.

Each row maps month abbreviations (`Jan`, `Fev`, ...) to the locator of that
month's invoice document. Unlike the period aggregator, grouping never drops
an invoice: a month code outside the vocabulary keeps its raw text as the
column key.
"""
from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable

from invoice_pipeline.models import ConsumerUnitRow, InvoiceRecord
from invoice_pipeline.periods import month_abbreviation

log = logging.getLogger(__name__)

_UNSAFE_FILENAME_CHARS = re.compile(r"[^\w.-]+")


class DuplicatePolicy(str, Enum):
    """Which invoice wins when a unit has two invoices for the same month."""
    LAST_WINS = "last_wins"
    FIRST_WINS = "first_wins"


def filter_records(
    records: Iterable[InvoiceRecord],
    unit_query: str = "",
    distributor_query: str = "",
) -> list[InvoiceRecord]:
    """Keep records whose unit and distributor names contain the queries.

    Matching is case-insensitive; a blank query matches everything.
    """
    unit_q = unit_query.strip().casefold()
    dist_q = distributor_query.strip().casefold()
    return [
        r
        for r in records
        if unit_q in r.consumer_unit_name.casefold()
        and dist_q in r.distributor_name.casefold()
    ]


def group_by_unit(
    records: Iterable[InvoiceRecord],
    policy: DuplicatePolicy = DuplicatePolicy.LAST_WINS,
) -> list[ConsumerUnitRow]:
    """Pivot invoices into one row per consumer-unit name.

    Rows come out in the order their unit name is first seen. Display fields
    (unit number, distributor) are taken from the first invoice of the unit.

    Args:
        records: Invoice records, already filtered by year/unit/distributor.
        policy: Resolution for two invoices of the same unit and month.

    Returns:
        List of `ConsumerUnitRow`.
    """
    rows: dict[str, ConsumerUnitRow] = {}

    for record in records:
        month = month_abbreviation(record.period_label)
        row = rows.get(record.consumer_unit_name)
        if row is None:
            row = ConsumerUnitRow(
                consumer_unit_name=record.consumer_unit_name,
                consumer_unit_number=record.consumer_unit_number,
                distributor_name=record.distributor_name,
            )
            rows[record.consumer_unit_name] = row

        if month in row.months_index:
            if policy is DuplicatePolicy.FIRST_WINS:
                log.debug(
                    "Keeping first %s invoice of %s", month, record.consumer_unit_name
                )
                continue
            log.debug(
                "Replacing %s invoice of %s with a later one",
                month,
                record.consumer_unit_name,
            )
        row.months_index[month] = record.pdf_locator

    return list(rows.values())


def document_name(row: ConsumerUnitRow, month: str) -> str:
    """Suggested file name for a unit's invoice document of one month."""
    stem = _UNSAFE_FILENAME_CHARS.sub("_", f"{row.consumer_unit_name}_{month}").strip("_")
    return f"{stem or 'invoice'}.pdf"
