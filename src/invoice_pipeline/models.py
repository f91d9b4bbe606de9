"""Pydantic models used at the API boundary and for derived views.

`InvoiceRecord` and `DashboardSummary` validate what the invoice API sends;
the remaining models describe the transient results of aggregation,
comparison and pivoting that the dashboard and CLI render.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from invoice_pipeline.clean.normalize import to_number
from invoice_pipeline.periods import PeriodKey

# Numeric invoice quantities arrive as numbers, numeric text, or not at all
RawNumeric = Union[StrictInt, StrictFloat, StrictStr, None]


class InvoiceRecord(BaseModel):
    """One billing period of one consumer unit, as sent by the invoice API.

    Attributes use snake_case; the aliases are the API field names. Numeric
    quantities keep their raw shape and are normalized by the aggregator.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    period_label: str = Field(..., alias="periodLabel", min_length=1)
    consumer_unit_name: str = Field(..., alias="consumerUnitName", min_length=1)
    consumer_unit_number: str = Field("", alias="consumerUnitNumber")
    distributor_name: str = Field("", alias="distributorName")

    generated_energy_kwh: RawNumeric = Field(None, alias="generatedEnergyKwh")
    grid_energy_kwh: RawNumeric = Field(None, alias="gridEnergyKwh")
    compensated_energy_kwh: RawNumeric = Field(None, alias="compensatedEnergyKwh")
    generated_energy_value: RawNumeric = Field(None, alias="generatedEnergyValue")
    grid_energy_value: RawNumeric = Field(None, alias="gridEnergyValue")
    compensated_energy_value: RawNumeric = Field(None, alias="compensatedEnergyValue")
    public_lighting_value: RawNumeric = Field(None, alias="publicLightingValue")

    pdf_locator: str = Field("", alias="pdfLocator")

    @field_validator("consumer_unit_number", "distributor_name", "pdf_locator", mode="before")
    @classmethod
    def _optional_text(cls, v: Any) -> Any:
        if v is None:
            return ""
        # unit numbers are often sent as bare integers
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("period_label", "consumer_unit_name", mode="after")
    @classmethod
    def _strip_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class PeriodAggregate(BaseModel):
    """Category totals of every invoice sharing one (year, month) period.

    Attributes:
        year: Four-digit year text.
        month: Month code (JAN ... DEZ).
        total_consumption_kwh: Generated plus grid-supplied energy.
        total_compensated_kwh: Compensated energy.
        total_financial_value: Generated plus grid-supplied value plus the
            public-lighting contribution (cost without distributed generation).
        total_savings_value: Sum of absolute compensated values.
        spend_exceeds_savings: True when any folded invoice carried a negative
            compensated value.
    """
    model_config = ConfigDict(extra="forbid")
    year: str
    month: str
    total_consumption_kwh: float = 0.0
    total_compensated_kwh: float = 0.0
    total_financial_value: float = 0.0
    total_savings_value: float = 0.0
    spend_exceeds_savings: bool = False

    @property
    def key(self) -> PeriodKey:
        return PeriodKey(year=self.year, month=self.month)

    @property
    def label(self) -> str:
        return self.month


class Direction(str, Enum):
    """Direction of a month-over-month change."""
    INCREASE = "increase"
    DECREASE = "decrease"
    UNCHANGED = "unchanged"


class ComparisonResult(BaseModel):
    """Outcome of comparing a current value with the previous one.

    Attributes:
        percentage: Signed change relative to ``abs(previous)``, rounded to
            two decimals; ``None`` when unchanged or undefined.
        percentage_text: Display text (``+12.50%``, ``-3.00%``, or a sentinel).
        direction: Increase, decrease, or unchanged.
        is_undefined: True when previous is 0 and current is not, so no
            percentage exists.
    """
    model_config = ConfigDict(frozen=True)
    percentage: float | None
    percentage_text: str
    direction: Direction
    is_undefined: bool = False


class ConsumerUnitRow(BaseModel):
    """One row of the invoice table: a consumer unit and its documents by month.

    Attributes:
        consumer_unit_name: Grouping key.
        consumer_unit_number: Display number from the first invoice seen.
        distributor_name: Distributor from the first invoice seen.
        months_index: Month abbreviation (``Jan`` ... ``Dez``) to document
            locator. Unrecognized months keep their raw text as the key.
    """
    consumer_unit_name: str
    consumer_unit_number: str = ""
    distributor_name: str = ""
    months_index: dict[str, str] = Field(default_factory=dict)


class SearchFilter(BaseModel):
    """Query for the invoice search endpoint (prefix matches on names)."""
    model_config = ConfigDict(extra="forbid")
    year: str = Field(..., min_length=4, max_length=4, pattern=r"^\d{4}$")
    consumer_unit_name: str | None = None
    distributor_name: str | None = None

    def to_params(self) -> dict[str, str]:
        """Return query parameters using the API names, omitting blanks."""
        params = {"year": self.year}
        if self.consumer_unit_name and self.consumer_unit_name.strip():
            params["consumerUnitName"] = self.consumer_unit_name.strip()
        if self.distributor_name and self.distributor_name.strip():
            params["distributorName"] = self.distributor_name.strip()
        return params


class _NormalizedModel(BaseModel):
    """Base for server summary payloads whose numbers may arrive as text."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def _normalize_numbers(cls, v: Any, info: Any) -> Any:
        annotation = cls.model_fields[info.field_name].annotation
        if annotation is float:
            return to_number(v)
        return v


class CardValues(_NormalizedModel):
    """The four headline energy figures of one month."""
    generated_energy: float = Field(0.0, alias="energiaGerada")
    consumed_energy: float = Field(0.0, alias="energiaConsumida")
    compensated_energy: float = Field(0.0, alias="energiaCompensada")
    credit_balance: float = Field(0.0, alias="saldoCreditos")


class CardTotals(CardValues):
    """Current month figures plus the previous month's for comparison."""
    previous_values: CardValues = Field(default_factory=CardValues, alias="previousValues")


class SummaryPoint(_NormalizedModel):
    """One month of the server pre-aggregated chart series."""
    label: str = Field(..., alias="name")
    total_consumption_kwh: float = Field(0.0, alias="totalKwh")
    total_compensated_kwh: float = Field(0.0, alias="totalCompensada")
    total_financial_value: float = Field(0.0, alias="totalFinance")
    total_savings_value: float = Field(0.0, alias="totalEconomia")
    spend_exceeds_savings: bool = Field(False, alias="gastoMaiorQueEconomia")

    @field_validator("spend_exceeds_savings", mode="before")
    @classmethod
    def _missing_flag(cls, v: Any) -> Any:
        return False if v is None else v


class DashboardSummary(BaseModel):
    """Server pre-aggregated dashboard payload for one year."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)
    card_totals: CardTotals = Field(..., alias="cardData")
    period_series: list[SummaryPoint] = Field(default_factory=list, alias="groupedData")


class CardMetric(BaseModel):
    """One dashboard card: a figure, its previous value and the comparison."""
    model_config = ConfigDict(frozen=True)
    key: str
    title: str
    unit: str
    current: float
    previous: float
    comparison: ComparisonResult


class CardSummary(BaseModel):
    """Ordered dashboard cards comparing two periods.

    `current_label` / `previous_label` are ``None`` when the series had no
    such period (the figures are then zeros).
    """
    current_label: str | None = None
    previous_label: str | None = None
    metrics: list[CardMetric] = Field(default_factory=list)

    def by_key(self, key: str) -> CardMetric:
        """Return the metric with the given key.

        Raises:
            KeyError: if no metric has that key.
        """
        for m in self.metrics:
            if m.key == key:
                return m
        raise KeyError(key)
