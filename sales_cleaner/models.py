from __future__ import annotations

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .normalize import exact_arithmetic
from .rules import (
    COL_AMOUNT,
    COL_CATEGORY,
    COL_DATE,
    COL_PRODUCT,
    COL_TIME_SLOT,
    COL_UNIT_PRICE,
    COL_UNITS,
)

# One parsed input line: header name -> raw value, None when the line was short.
RawRecord = Dict[str, Optional[str]]


class TimeSlot(str, Enum):
    DESAYUNO = "Desayuno"
    COMIDA = "Comida"


class Category(str, Enum):
    BEBIDA = "Bebida"
    ENTRANTE = "Entrante"
    PRINCIPAL = "Principal"
    POSTRE = "Postre"


class CleanRecord(BaseModel):
    """A validated sale line. Built once by the cleaner, never mutated."""

    model_config = ConfigDict(frozen=True)

    date: dt.date
    time_slot: TimeSlot
    product: str = Field(min_length=1)
    category: Category
    units: Decimal = Field(gt=0)
    unit_price: Decimal = Field(gt=0)

    @computed_field
    @property
    def amount(self) -> Decimal:
        with exact_arithmetic():
            return self.units * self.unit_price

    def fingerprint(self) -> tuple:
        return (
            self.date,
            self.time_slot,
            self.product,
            self.category,
            self.units,
            self.unit_price,
            self.amount,
        )

    def as_row(self) -> Dict[str, str]:
        """Key/value view in export column order."""
        return {
            COL_DATE: self.date.isoformat(),
            COL_TIME_SLOT: self.time_slot.value,
            COL_PRODUCT: self.product,
            COL_CATEGORY: self.category.value,
            COL_UNITS: str(self.units),
            COL_UNIT_PRICE: str(self.unit_price),
            COL_AMOUNT: str(self.amount),
        }


class Summary(BaseModel):
    total_amount: Decimal = Decimal(0)
    total_units: Decimal = Decimal(0)
    by_product: Dict[str, Decimal] = Field(default_factory=dict)
    by_time_slot: Dict[str, Decimal] = Field(default_factory=dict)
    by_category: Dict[str, Decimal] = Field(default_factory=dict)


class ProductTotal(BaseModel):
    product: str
    amount: Decimal


class Kpis(BaseModel):
    total_sales: str
    total_units: str


class ReportItem(BaseModel):
    row: Optional[int] = None
    column: Optional[str] = None
    issue: str
    value: Optional[str] = None
    action: str = "dropped"


class CleaningReport(BaseModel):
    rows_before: int
    rows_after: int
    rejected: List[ReportItem] = Field(default_factory=list)


class NormalizedCsv(BaseModel):
    sha256: str
    encoding: str = Field(default="utf-8-sig")
    filename: str
    content_b64: str


class PipelineResponse(BaseModel):
    report: CleaningReport
    raw_preview: List[RawRecord] = Field(default_factory=list)
    clean_preview: List[Dict[str, str]] = Field(default_factory=list)
    summary: Summary
    top_products: List[ProductTotal] = Field(default_factory=list)
    kpis: Kpis
    clean_csv: NormalizedCsv


class HealthResponse(BaseModel):
    ok: bool = True
