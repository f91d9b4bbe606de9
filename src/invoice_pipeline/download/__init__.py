"""Document download gating and outcomes."""
