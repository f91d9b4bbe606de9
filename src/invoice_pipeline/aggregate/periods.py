"""Monthly aggregation of invoice records.

`aggregate` folds every invoice of one selected year into one
`PeriodAggregate` per (year, month). The dashboard draws two series from the
result:

- energy: `total_consumption_kwh` vs `total_compensated_kwh`
- financial: `total_financial_value` vs `total_savings_value`

Expectations:
- Input: validated `InvoiceRecord`s in any order, possibly spanning years.
- Output: aggregates sorted by calendar month (JAN first). Records with a
  malformed period label or an unknown month code are skipped.
"""
from __future__ import annotations

import logging
from typing import Iterable

from invoice_pipeline.clean.normalize import to_number
from invoice_pipeline.models import InvoiceRecord, PeriodAggregate
from invoice_pipeline.periods import PeriodKey, parse_period_label

log = logging.getLogger(__name__)

DECIMALS = 2


def _fold(agg: PeriodAggregate, record: InvoiceRecord) -> None:
    """Add one invoice's normalized quantities to a period aggregate.

    Totals are rounded after every fold so the running values never carry
    float noise beyond two decimals.
    """
    compensated_value = to_number(record.compensated_energy_value)

    agg.total_consumption_kwh = round(
        agg.total_consumption_kwh
        + to_number(record.generated_energy_kwh)
        + to_number(record.grid_energy_kwh),
        DECIMALS,
    )
    agg.total_compensated_kwh = round(
        agg.total_compensated_kwh + to_number(record.compensated_energy_kwh),
        DECIMALS,
    )
    agg.total_financial_value = round(
        agg.total_financial_value
        + to_number(record.generated_energy_value)
        + to_number(record.grid_energy_value)
        + to_number(record.public_lighting_value),
        DECIMALS,
    )
    agg.total_savings_value = round(
        agg.total_savings_value + abs(compensated_value),
        DECIMALS,
    )
    if compensated_value < 0:
        agg.spend_exceeds_savings = True


def aggregate(records: Iterable[InvoiceRecord], year: str) -> list[PeriodAggregate]:
    """Return one aggregate per month of `year`, in calendar order.

    Args:
        records: Invoice records; other years are ignored.
        year: Four-digit year text, matched exactly against the label's year.

    Returns:
        List of `PeriodAggregate`, at most one per month, JAN first.
    """
    year = year.strip()
    by_period: dict[PeriodKey, PeriodAggregate] = {}
    skipped = 0

    for record in records:
        key = parse_period_label(record.period_label)
        if key is None:
            skipped += 1
            log.debug(
                "Skipping invoice of %s with unparseable period label %r",
                record.consumer_unit_name,
                record.period_label,
            )
            continue
        if key.year != year:
            continue

        agg = by_period.get(key)
        if agg is None:
            agg = PeriodAggregate(year=key.year, month=key.month)
            by_period[key] = agg
        _fold(agg, record)

    if skipped:
        log.debug("Skipped %d invoices with unparseable period labels", skipped)

    return sorted(by_period.values(), key=lambda a: a.key.month_number)
