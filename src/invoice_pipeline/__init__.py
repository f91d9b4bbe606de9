"""invoice_pipeline package.

Contains modules for fetching monthly energy-invoice records from the invoice
API, normalizing their numeric fields, building period aggregates and
month-over-month comparisons for the dashboard cards and charts, pivoting
invoices into a consumer-unit x month document matrix, and gating document
downloads.

Architecture:
- Records are validated with Pydantic at the fetch boundary
- Aggregation, comparison and pivoting are pure functions over resident data
- pandas frames feed the Streamlit/Altair presentation layer
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
