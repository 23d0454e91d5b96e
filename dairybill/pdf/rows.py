from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from typing import List, Tuple

from dairybill.data.models import (
    Billing,
    DateRangeBilling,
    MonthlyBilling,
    PRODUCT_ORDER,
)


@dataclass(frozen=True)
class Row:
    description: str
    quantity: float
    rate: float
    amount: float


def _monthly_rows(billing: MonthlyBilling) -> List[Row]:
    active = billing.active_products
    rows: List[Row] = []
    for product in PRODUCT_ORDER:
        if product not in active:
            continue
        # Recalculated copy; the caller's line is left as is
        ln = replace(billing.line(product)).recalculate(billing.days_in_period)
        rows.append(Row(f"Milk ({product.value})", ln.total_quantity, ln.rate, ln.amount))
    return rows


def _date_rows(billing: DateRangeBilling) -> List[Row]:
    keyed: List[Tuple[date, str, Row]] = []
    for product in billing.active_products:
        for entry in billing.line(product).entries:
            desc = f"{product.value} - {entry.day:%d %b %Y}"
            keyed.append((entry.day, product.value, Row(desc, entry.quantity, entry.rate, entry.amount)))
    # Stable: same product on the same day keeps insertion order
    keyed.sort(key=lambda k: (k[0], k[1]))
    return [row for _day, _name, row in keyed]


def build_rows(billing: Billing) -> List[Row]:
    """Flatten a billing record into printable table rows, in print order."""
    if isinstance(billing, MonthlyBilling):
        return _monthly_rows(billing)
    if isinstance(billing, DateRangeBilling):
        return _date_rows(billing)
    raise TypeError(f"Unsupported billing type: {type(billing).__name__}")
