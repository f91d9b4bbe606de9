"""Dashboard card metrics: latest month vs the month before.

Cards can be built from the locally aggregated series (`build_card_summary`)
or from the server's pre-aggregated payload (`server_card_summary`); both
produce the same `CardSummary` shape for the presentation layer.
"""
from __future__ import annotations

from typing import Sequence

from invoice_pipeline.aggregate.compare import compare
from invoice_pipeline.models import (
    CardMetric,
    CardSummary,
    DashboardSummary,
    PeriodAggregate,
)

# (key, aggregate attribute, title, unit)
LOCAL_CARDS: tuple[tuple[str, str, str, str], ...] = (
    ("consumption", "total_consumption_kwh", "Energy consumed", "kWh"),
    ("compensated", "total_compensated_kwh", "Energy compensated", "kWh"),
    ("financial", "total_financial_value", "Cost without DG", "R$"),
    ("savings", "total_savings_value", "DG savings", "R$"),
)

SERVER_CARDS: tuple[tuple[str, str, str, str], ...] = (
    ("generated", "generated_energy", "Energy generated", "kWh"),
    ("consumed", "consumed_energy", "Energy consumed", "kWh"),
    ("compensated", "compensated_energy", "Energy compensated", "kWh"),
    ("credits", "credit_balance", "Credit balance", ""),
)


def _metric(key: str, title: str, unit: str, current: float, previous: float) -> CardMetric:
    return CardMetric(
        key=key,
        title=title,
        unit=unit,
        current=current,
        previous=previous,
        comparison=compare(current, previous),
    )


def build_card_summary(aggregates: Sequence[PeriodAggregate]) -> CardSummary:
    """Compare the last aggregate of a chronological series with the one before.

    Missing periods count as zeros: an empty series yields all-unchanged
    cards, a single-period series compares against zero.

    Args:
        aggregates: Output of `aggregate`, sorted by month.

    Returns:
        `CardSummary` with consumption, compensated, financial and savings
        cards.
    """
    current = aggregates[-1] if aggregates else None
    previous = aggregates[-2] if len(aggregates) > 1 else None

    metrics = [
        _metric(
            key,
            title,
            unit,
            getattr(current, attr) if current is not None else 0.0,
            getattr(previous, attr) if previous is not None else 0.0,
        )
        for key, attr, title, unit in LOCAL_CARDS
    ]
    return CardSummary(
        current_label=current.label if current is not None else None,
        previous_label=previous.label if previous is not None else None,
        metrics=metrics,
    )


def server_card_summary(summary: DashboardSummary) -> CardSummary:
    """Build card metrics from the server pre-aggregated dashboard payload."""
    totals = summary.card_totals
    series = summary.period_series
    metrics = [
        _metric(
            key,
            title,
            unit,
            getattr(totals, attr),
            getattr(totals.previous_values, attr),
        )
        for key, attr, title, unit in SERVER_CARDS
    ]
    return CardSummary(
        current_label=series[-1].label if series else None,
        previous_label=series[-2].label if len(series) > 1 else None,
        metrics=metrics,
    )
