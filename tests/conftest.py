from __future__ import annotations

from typing import Any

import pytest

from invoice_pipeline.models import InvoiceRecord


def make_record(**overrides: Any) -> InvoiceRecord:
    """Build an InvoiceRecord from API field names with sensible defaults."""
    data: dict[str, Any] = {
        "periodLabel": "JAN/2024",
        "consumerUnitName": "UC1",
        "consumerUnitNumber": "7005400387",
        "distributorName": "CEMIG",
        "pdfLocator": "https://files.example.com/uc1-jan.pdf",
    }
    data.update(overrides)
    return InvoiceRecord.model_validate(data)


@pytest.fixture
def record_factory():
    return make_record


@pytest.fixture
def scenario_records() -> list[InvoiceRecord]:
    jan = {
        "periodLabel": "JAN/2024",
        "generatedEnergyKwh": 100,
        "gridEnergyKwh": 10,
        "compensatedEnergyKwh": 50,
        "generatedEnergyValue": 80,
        "gridEnergyValue": 8,
        "publicLightingValue": 2,
        "compensatedEnergyValue": -40,
    }
    fev = {
        "periodLabel": "FEV/2024",
        "generatedEnergyKwh": 200,
        "gridEnergyKwh": 20,
        "compensatedEnergyKwh": 100,
        "generatedEnergyValue": 160,
        "gridEnergyValue": 16,
        "publicLightingValue": 4,
        "compensatedEnergyValue": -80,
    }
    return [make_record(**jan), make_record(**jan), make_record(**fev)]
