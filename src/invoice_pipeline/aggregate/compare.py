"""Month-over-month comparison of dashboard figures."""
from __future__ import annotations

from invoice_pipeline.models import ComparisonResult, Direction

NO_CHANGE_TEXT = "no change"
UNDEFINED_PERCENTAGE_TEXT = "n/a"


def compare(current: float, previous: float) -> ComparisonResult:
    """Compare a current value with the previous period's value.

    The percentage is relative to ``abs(previous)`` so a move from a negative
    previous value toward zero still reads as an increase.

    Args:
        current: Value of the current period.
        previous: Value of the previous period.

    Returns:
        `ComparisonResult`. Equal values are `UNCHANGED` with the
        ``"no change"`` text; a zero previous value with a non-zero current
        one has a direction but an undefined percentage (``"n/a"``).
    """
    if current == previous:
        return ComparisonResult(
            percentage=None,
            percentage_text=NO_CHANGE_TEXT,
            direction=Direction.UNCHANGED,
        )

    difference = current - previous
    direction = Direction.INCREASE if difference > 0 else Direction.DECREASE

    if previous == 0:
        return ComparisonResult(
            percentage=None,
            percentage_text=UNDEFINED_PERCENTAGE_TEXT,
            direction=direction,
            is_undefined=True,
        )

    percentage = round(difference / abs(previous) * 100, 2)
    sign = "+" if direction is Direction.INCREASE else ""
    return ComparisonResult(
        percentage=percentage,
        percentage_text=f"{sign}{percentage:.2f}%",
        direction=direction,
    )
