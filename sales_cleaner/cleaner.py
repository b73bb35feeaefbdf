"""
Row validation, normalization and deduplication.

Every raw record goes through the same ordered checks; the first failing
check rejects it. Rejections never raise and never stop the other rows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple, Union

from .models import Category, CleaningReport, CleanRecord, RawRecord, ReportItem, TimeSlot
from .normalize import normalize_label, parse_date, parse_positive_number
from .rules import (
    COL_CATEGORY,
    COL_DATE,
    COL_PRODUCT,
    COL_TIME_SLOT,
    COL_UNIT_PRICE,
    COL_UNITS,
    VALID_CATEGORIES,
    VALID_TIME_SLOTS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Accepted:
    record: CleanRecord


@dataclass(frozen=True)
class Rejected:
    issue: str
    column: Optional[str] = None
    value: Optional[str] = None


CleanResult = Union[Accepted, Rejected]


def validate_record(raw: RawRecord) -> CleanResult:
    """Validate and normalize one raw record, without deduplication."""
    date_value = raw.get(COL_DATE)
    date = parse_date(date_value)
    if date is None:
        return Rejected("invalid_date", COL_DATE, date_value)

    product = (raw.get(COL_PRODUCT) or "").strip()
    if not product:
        return Rejected("empty_product", COL_PRODUCT, raw.get(COL_PRODUCT))

    time_slot = normalize_label(raw.get(COL_TIME_SLOT))
    if time_slot not in VALID_TIME_SLOTS:
        return Rejected("invalid_time_slot", COL_TIME_SLOT, raw.get(COL_TIME_SLOT))

    category = normalize_label(raw.get(COL_CATEGORY))
    if category not in VALID_CATEGORIES:
        return Rejected("invalid_category", COL_CATEGORY, raw.get(COL_CATEGORY))

    units = parse_positive_number(raw.get(COL_UNITS))
    if units is None:
        return Rejected("invalid_units", COL_UNITS, raw.get(COL_UNITS))

    unit_price = parse_positive_number(raw.get(COL_UNIT_PRICE))
    if unit_price is None:
        return Rejected("invalid_unit_price", COL_UNIT_PRICE, raw.get(COL_UNIT_PRICE))

    return Accepted(CleanRecord(
        date=date,
        time_slot=TimeSlot(time_slot),
        product=product,
        category=Category(category),
        units=units,
        unit_price=unit_price,
    ))


def _clean_results(records: Iterable[RawRecord]) -> List[Tuple[int, CleanResult]]:
    seen: set = set()
    results: List[Tuple[int, CleanResult]] = []

    for row, raw in enumerate(records, start=1):
        result = validate_record(raw)
        if isinstance(result, Accepted):
            key = result.record.fingerprint()
            if key in seen:
                result = Rejected("duplicate")
            else:
                seen.add(key)
        results.append((row, result))

    return results


def clean(records: Sequence[RawRecord]) -> List[CleanRecord]:
    """Return the valid, deduplicated records in input order."""
    cleaned = [r.record for _, r in _clean_results(records) if isinstance(r, Accepted)]
    logger.info("Cleaned %d of %d records", len(cleaned), len(records))
    return cleaned


def clean_with_report(records: Sequence[RawRecord]) -> Tuple[List[CleanRecord], CleaningReport]:
    """
    Same survivors as clean(), plus the reason each dropped row was dropped.

    Row numbers count data lines from 1, the header excluded.
    """
    cleaned: List[CleanRecord] = []
    rejected: List[ReportItem] = []

    for row, result in _clean_results(records):
        if isinstance(result, Accepted):
            cleaned.append(result.record)
        else:
            rejected.append(ReportItem(
                row=row,
                column=result.column,
                issue=result.issue,
                value=result.value,
            ))

    report = CleaningReport(rows_before=len(records), rows_after=len(cleaned), rejected=rejected)
    logger.info("Cleaned %d of %d records (%d rejected)", len(cleaned), len(records), len(rejected))
    return cleaned, report
