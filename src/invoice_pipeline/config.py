"""Configuration helpers and Settings container.

This module provides a small `Settings` dataclass and `get_settings` which
reads the invoice API location and download options from the environment
(including a check that `INVOICE_API_URL` is present).
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os

from dotenv import load_dotenv

# Explicitly load .env from project root
PROJECT_ROOT = Path(__file__).resolve().parents[2]
load_dotenv(PROJECT_ROOT / ".env")

@dataclass(frozen=True)
class Settings:
    """Container for configuration read from the environment.

    Attributes:
        api_url: Base URL of the invoice API (no trailing slash).
        default_year: Year preselected by the CLI and the dashboard.
        request_timeout: Timeout in seconds for API and document requests.
        download_dir: Local directory where downloaded invoices are saved.
    """
    api_url: str
    default_year: str
    request_timeout: float
    download_dir: Path



def get_settings() -> Settings:
    """Read environment variables and return a frozen `Settings` object.

    Raises:
        RuntimeError: if `INVOICE_API_URL` is not set or
            `INVOICE_REQUEST_TIMEOUT` is not a positive number.
    """
    api_url = os.getenv("INVOICE_API_URL", "").strip().rstrip("/")
    default_year = os.getenv("INVOICE_DEFAULT_YEAR", "2024").strip() or "2024"
    raw_timeout = os.getenv("INVOICE_REQUEST_TIMEOUT", "30")
    download_dir = Path(os.getenv("INVOICE_DOWNLOAD_DIR", "data/invoices"))

    if not api_url:
        raise RuntimeError(
            "INVOICE_API_URL is required. Set it in .env "
            "(example: 'https://invoices.example.com/api')."
        )

    try:
        request_timeout = float(raw_timeout)
    except ValueError:
        raise RuntimeError(
            f"INVOICE_REQUEST_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
        ) from None
    if request_timeout <= 0:
        raise RuntimeError("INVOICE_REQUEST_TIMEOUT must be positive")

    return Settings(
        api_url=api_url,
        default_year=default_year,
        request_timeout=request_timeout,
        download_dir=download_dir,
    )
