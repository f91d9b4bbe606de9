"""Period aggregation helpers.

This package turns validated invoice records into the small per-month series
and month-over-month card metrics rendered by the dashboard. Everything here
is a pure function recomputed from scratch on every year or filter change.
"""
