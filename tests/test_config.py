from __future__ import annotations

from pathlib import Path

import pytest

from invoice_pipeline.config import get_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "INVOICE_API_URL",
        "INVOICE_DEFAULT_YEAR",
        "INVOICE_REQUEST_TIMEOUT",
        "INVOICE_DOWNLOAD_DIR",
    ):
        monkeypatch.delenv(name, raising=False)


def test_settings_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INVOICE_API_URL", "https://api.example.com/api/")
    s = get_settings()
    assert s.api_url == "https://api.example.com/api"
    assert s.default_year == "2024"
    assert s.request_timeout == 30.0
    assert s.download_dir == Path("data/invoices")


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("INVOICE_API_URL", "https://h/api")
    monkeypatch.setenv("INVOICE_DEFAULT_YEAR", "2023")
    monkeypatch.setenv("INVOICE_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("INVOICE_DOWNLOAD_DIR", "/tmp/faturas")
    s = get_settings()
    assert (s.default_year, s.request_timeout, s.download_dir) == ("2023", 2.5, Path("/tmp/faturas"))


def test_missing_api_url_raises() -> None:
    with pytest.raises(RuntimeError, match="INVOICE_API_URL"):
        get_settings()


@pytest.mark.parametrize("timeout", ["abc", "0", "-1"])
def test_bad_timeout_raises(monkeypatch: pytest.MonkeyPatch, timeout: str) -> None:
    monkeypatch.setenv("INVOICE_API_URL", "https://h/api")
    monkeypatch.setenv("INVOICE_REQUEST_TIMEOUT", timeout)
    with pytest.raises(RuntimeError, match="INVOICE_REQUEST_TIMEOUT"):
        get_settings()
