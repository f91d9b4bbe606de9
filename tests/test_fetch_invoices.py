from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
import requests

from invoice_pipeline.config import Settings
from invoice_pipeline.errors import InvoiceFetchError, InvoicePayloadError
from invoice_pipeline.ingest import fetch_invoices
from invoice_pipeline.ingest.fetch_invoices import (
    fetch_all_records,
    fetch_records_by_search,
    fetch_summary_for_year,
    invoices_url,
    parse_records,
)
from invoice_pipeline.models import SearchFilter


class FakeResponse:
    def __init__(self, payload: Any = None, status: int = 200, bad_json: bool = False) -> None:
        self.payload = payload
        self.status_code = status
        self.bad_json = bad_json

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self) -> Any:
        if self.bad_json:
            raise ValueError("not json")
        return self.payload


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        api_url="https://api.example.com/api",
        default_year="2024",
        request_timeout=5.0,
        download_dir=tmp_path,
    )


@pytest.fixture
def calls(monkeypatch: pytest.MonkeyPatch):
    """Patch requests.get; set `calls.response` to control the answer."""
    class Calls(list):
        response: Any = FakeResponse([])

    recorded = Calls()

    def fake_get(url: str, params: Any = None, timeout: Any = None, **kw: Any) -> Any:
        recorded.append({"url": url, "params": params, "timeout": timeout})
        if isinstance(recorded.response, Exception):
            raise recorded.response
        return recorded.response

    monkeypatch.setattr(fetch_invoices.requests, "get", fake_get)
    return recorded


RECORD = {"periodLabel": "JAN/2024", "consumerUnitName": "UC1", "gridEnergyKwh": "10"}


def test_invoices_url() -> None:
    assert invoices_url("https://h/api/") == "https://h/api/invoices"
    assert invoices_url("https://h/api", "/search") == "https://h/api/invoices/search"


def test_fetch_all_records(settings: Settings, calls) -> None:
    calls.response = FakeResponse([RECORD, RECORD])
    records = fetch_all_records(settings)
    assert len(records) == 2
    assert records[0].grid_energy_kwh == "10"
    assert calls[0]["url"] == "https://api.example.com/api/invoices"
    assert calls[0]["timeout"] == 5.0


def test_fetch_by_search_sends_api_params(settings: Settings, calls) -> None:
    calls.response = FakeResponse([RECORD])
    search = SearchFilter(year="2024", consumer_unit_name="UC", distributor_name=None)
    fetch_records_by_search(search, settings)
    assert calls[0]["url"].endswith("/invoices/search")
    assert calls[0]["params"] == {"year": "2024", "consumerUnitName": "UC"}


def test_fetch_summary_for_year(settings: Settings, calls) -> None:
    calls.response = FakeResponse(
        {
            "cardData": {"energiaGerada": 10, "previousValues": {"energiaGerada": "5"}},
            "groupedData": [{"name": "JAN", "totalKwh": "12.5"}],
        }
    )
    summary = fetch_summary_for_year("2024", settings)
    assert calls[0]["params"] == {"year": "2024"}
    assert summary.card_totals.generated_energy == 10
    assert summary.card_totals.previous_values.generated_energy == 5
    assert summary.period_series[0].total_consumption_kwh == 12.5
    assert summary.period_series[0].spend_exceeds_savings is False


def test_summary_of_wrong_shape_is_payload_error(settings: Settings, calls) -> None:
    calls.response = FakeResponse([])
    with pytest.raises(InvoicePayloadError):
        fetch_summary_for_year("2024", settings)


def test_non_list_payload_is_terminal(settings: Settings, calls) -> None:
    calls.response = FakeResponse({"error": "x"})
    with pytest.raises(InvoicePayloadError):
        fetch_all_records(settings)


def test_one_invalid_record_fails_whole_payload() -> None:
    with pytest.raises(InvoicePayloadError, match="index 1"):
        parse_records([RECORD, {"periodLabel": "JAN/2024"}])


def test_http_error_wrapped(settings: Settings, calls) -> None:
    calls.response = FakeResponse(status=500)
    with pytest.raises(InvoiceFetchError):
        fetch_all_records(settings)


def test_connection_error_wrapped(settings: Settings, calls) -> None:
    calls.response = requests.ConnectionError("refused")
    with pytest.raises(InvoiceFetchError):
        fetch_all_records(settings)


def test_invalid_json_is_payload_error(settings: Settings, calls) -> None:
    calls.response = FakeResponse(bad_json=True)
    with pytest.raises(InvoicePayloadError):
        fetch_all_records(settings)
