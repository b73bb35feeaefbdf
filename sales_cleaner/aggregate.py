from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Sequence

from .models import CleanRecord, Kpis, ProductTotal, Summary
from .normalize import exact_arithmetic

logger = logging.getLogger(__name__)


def _add(totals: Dict[str, Decimal], key: str, amount: Decimal) -> None:
    totals[key] = totals.get(key, Decimal(0)) + amount


def summarize(records: Sequence[CleanRecord]) -> Summary:
    """
    Totals and grouped amount sums in a single pass.

    Group keys keep first-seen order; keys with no records are absent.
    No rounding is applied.
    """
    total_amount = Decimal(0)
    total_units = Decimal(0)
    by_product: Dict[str, Decimal] = {}
    by_time_slot: Dict[str, Decimal] = {}
    by_category: Dict[str, Decimal] = {}

    with exact_arithmetic():
        for record in records:
            amount = record.amount
            total_amount += amount
            total_units += record.units
            _add(by_product, record.product, amount)
            _add(by_time_slot, record.time_slot.value, amount)
            _add(by_category, record.category.value, amount)

    logger.debug("Summarized %d records into %d products", len(records), len(by_product))
    return Summary(
        total_amount=total_amount,
        total_units=total_units,
        by_product=by_product,
        by_time_slot=by_time_slot,
        by_category=by_category,
    )


def top_products(summary: Summary, n: int = 5) -> List[ProductTotal]:
    """Best-selling products by amount; ties keep first-seen order."""
    ranked = sorted(summary.by_product.items(), key=lambda item: item[1], reverse=True)
    return [ProductTotal(product=p, amount=a) for p, a in ranked[:n]]


def format_kpis(summary: Summary) -> Kpis:
    """Display strings; the amount is rounded half up to cents."""
    with exact_arithmetic():
        sales = summary.total_amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
        units = summary.total_units.normalize()
    return Kpis(
        total_sales=f"Ventas totales: €{sales:f}",
        total_units=f"Unidades totales: {units:f}",
    )
