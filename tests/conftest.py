from __future__ import annotations

from datetime import date, timedelta
from io import BytesIO
from typing import Callable

import pytest
from PIL import Image

from dairybill.data.models import (
    Customer,
    DailyEntry,
    DateBasedLine,
    DateRangeBilling,
    MilkLine,
    MonthlyBilling,
    Product,
    Selection,
)


@pytest.fixture
def customer() -> Customer:
    return Customer(name="Ali Raza", father_name="Ahmad Raza", phone="0300-1234567", address="House 12, Block C")


@pytest.fixture
def monthly_both() -> MonthlyBilling:
    return MonthlyBilling(
        month=4,
        year=2024,
        selection=Selection.BOTH,
        lines={
            Product.BUFFALO: MilkLine(rate=200, daily_quantity=5),
            Product.COW: MilkLine(rate=180, daily_quantity=2),
        },
        previous_due=1500,
        discount=500,
    )


@pytest.fixture
def daily_bill() -> Callable[[int], DateRangeBilling]:
    """Factory: a single-product date-range bill with `n` consecutive daily entries."""

    def make(n: int, previous_due: float = 0, discount: float = 0) -> DateRangeBilling:
        start = date(2024, 1, 1)
        line = DateBasedLine(
            default_rate=200,
            entries=[DailyEntry(day=start + timedelta(days=i), quantity=2 + (i % 3), rate=200) for i in range(n)],
        )
        return DateRangeBilling(
            start=start,
            end=start + timedelta(days=max(n - 1, 0)),
            selection=Selection.COW,
            lines={Product.COW: line},
            previous_due=previous_due,
            discount=discount,
        )

    return make


@pytest.fixture
def png_bytes() -> bytes:
    buf = BytesIO()
    Image.new("RGB", (120, 60), (20, 90, 160)).save(buf, format="PNG")
    return buf.getvalue()
