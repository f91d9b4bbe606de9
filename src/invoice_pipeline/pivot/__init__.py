"""Consumer-unit pivot: one table row per unit, one column per month.

Rows carry the document locator of each month's invoice and drive the
download buttons of the invoice table.
"""
