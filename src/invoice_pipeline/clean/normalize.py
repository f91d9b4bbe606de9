"""Numeric normalization for invoice fields.

The invoice API sends quantities as numbers, as numeric text, or not at all.
Everything that is absent or does not parse to a finite number becomes 0.
"""
from __future__ import annotations

from typing import Any

import numpy as np
import pandas as pd


def to_number(value: Any) -> float:
    """Coerce a string-or-number-or-absent value to a float.

    Returns:
        The parsed value, or 0.0 for ``None``, blank text, booleans, and
        anything that is not a finite number. Never raises.
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0

    try:
        number = float(pd.to_numeric(value, errors="coerce"))
    except (TypeError, ValueError, OverflowError):
        return 0.0
    if not np.isfinite(number):
        return 0.0
    return number


def numeric_column(series: pd.Series) -> pd.Series:
    """Vectorized `to_number` for a pandas column.

    Args:
        series: Column holding numbers, numeric text, blanks or missing values.

    Returns:
        float64 Series with unparseable and non-finite entries set to 0.
    """
    values = series.map(lambda v: v.strip() if isinstance(v, str) else v)
    values = values.map(lambda v: None if isinstance(v, bool) else v)
    # ints beyond float range would make pd.to_numeric raise
    values = values.map(lambda v: None if isinstance(v, int) and not _fits_float(v) else v)
    out = pd.to_numeric(values, errors="coerce").astype("float64")
    return out.where(np.isfinite(out), 0.0)


def _fits_float(value: int) -> bool:
    try:
        float(value)
    except OverflowError:
        return False
    return True
