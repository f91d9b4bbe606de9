"""Cleaning utilities for invoice records.

Provides the numeric normalizer that turns heterogeneous invoice quantities
(numbers, numeric text, missing values) into plain floats.
"""
