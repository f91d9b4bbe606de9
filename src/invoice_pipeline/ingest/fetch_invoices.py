"""Client for the invoice API.

Three endpoints are used:

- ``GET /invoices``: every invoice record
- ``GET /invoices/search``: records filtered by year and name prefixes
- ``GET /invoices/dashboard``: server pre-aggregated cards and chart series

Responses are validated with Pydantic before they reach the core. A response
of the wrong shape is a terminal `InvoicePayloadError`; no partial list is
returned.
"""

from __future__ import annotations

import logging
from typing import Any

import requests  # type: ignore[import-untyped]
from pydantic import ValidationError

from invoice_pipeline.config import Settings
from invoice_pipeline.errors import InvoiceFetchError, InvoicePayloadError
from invoice_pipeline.models import DashboardSummary, InvoiceRecord, SearchFilter

log = logging.getLogger(__name__)


def invoices_url(api_url: str, path: str = "") -> str:
    """Return the URL of an invoice endpoint below `api_url`.

    Args:
        api_url: Base API URL, with or without trailing slash.
        path: Optional sub-path such as ``"search"``.
    """
    base = f"{api_url.rstrip('/')}/invoices"
    return f"{base}/{path.strip('/')}" if path else base


def _get_json(url: str, timeout: float, params: dict[str, str] | None = None) -> Any:
    """GET a JSON document, wrapping transport and HTTP errors.

    Raises:
        InvoiceFetchError: on connection errors, non-2xx status, or a body
            that is not JSON.
    """
    log.info("Requesting %s params=%s", url, params or {})
    try:
        r = requests.get(url, params=params, timeout=timeout)
        r.raise_for_status()
    except requests.RequestException as e:
        raise InvoiceFetchError(f"Invoice API request failed for {url}: {e}") from e

    try:
        return r.json()
    except ValueError as e:
        raise InvoicePayloadError(f"Invoice API returned invalid JSON for {url}") from e


def parse_records(payload: Any) -> list[InvoiceRecord]:
    """Validate a decoded API payload as a list of invoice records.

    Args:
        payload: Decoded JSON body.

    Returns:
        List of `InvoiceRecord`, in payload order.

    Raises:
        InvoicePayloadError: if the payload is not a list or any element fails
            validation.
    """
    if not isinstance(payload, list):
        raise InvoicePayloadError(
            f"Expected a list of invoices, got {type(payload).__name__}"
        )

    records: list[InvoiceRecord] = []
    for i, item in enumerate(payload):
        try:
            records.append(InvoiceRecord.model_validate(item))
        except ValidationError as e:
            raise InvoicePayloadError(f"Invalid invoice record at index {i}: {e}") from e
    return records


def fetch_all_records(settings: Settings) -> list[InvoiceRecord]:
    """Fetch every invoice record.

    Raises:
        InvoiceFetchError: on transport/HTTP failure.
        InvoicePayloadError: if the response is not a list of valid records.
    """
    payload = _get_json(invoices_url(settings.api_url), settings.request_timeout)
    records = parse_records(payload)
    log.info("Fetched %d invoice records", len(records))
    return records


def fetch_records_by_search(
    search_filter: SearchFilter,
    settings: Settings,
) -> list[InvoiceRecord]:
    """Fetch invoice records matching a year and optional name prefixes.

    Raises:
        InvoiceFetchError: on transport/HTTP failure.
        InvoicePayloadError: if the response is not a list of valid records.
    """
    payload = _get_json(
        invoices_url(settings.api_url, "search"),
        settings.request_timeout,
        params=search_filter.to_params(),
    )
    records = parse_records(payload)
    log.info("Fetched %d invoice records for %s", len(records), search_filter.to_params())
    return records


def fetch_summary_for_year(year: str, settings: Settings) -> DashboardSummary:
    """Fetch the server pre-aggregated dashboard summary of one year.

    Raises:
        InvoiceFetchError: on transport/HTTP failure.
        InvoicePayloadError: if the response does not match `DashboardSummary`.
    """
    payload = _get_json(
        invoices_url(settings.api_url, "dashboard"),
        settings.request_timeout,
        params={"year": year},
    )
    try:
        return DashboardSummary.model_validate(payload)
    except ValidationError as e:
        raise InvoicePayloadError(f"Invalid dashboard summary for {year}: {e}") from e
