from __future__ import annotations

from datetime import date

import pytest

from dairybill.data.models import (
    DailyEntry,
    DateBasedLine,
    DateRangeBilling,
    MilkLine,
    MonthlyBilling,
    Product,
    Selection,
)
from dairybill.pdf.rows import Row, build_rows


def test_monthly_both_emits_cow_then_buffalo(monthly_both: MonthlyBilling) -> None:
    rows = build_rows(monthly_both)
    assert [r.description for r in rows] == ["Milk (Cow)", "Milk (Buffalo)"]
    assert rows[1] == Row("Milk (Buffalo)", 150, 200, 30000)
    assert rows[0].quantity == 60
    assert rows[0].amount == 10800


def test_monthly_single_product_ignores_inactive_lines() -> None:
    billing = MonthlyBilling(
        month=4,
        year=2024,
        selection=Selection.MIX,
        lines={Product.MIX: MilkLine(rate=190, daily_quantity=1), Product.COW: MilkLine(rate=180, daily_quantity=9)},
    )
    rows = build_rows(billing)
    assert rows == [Row("Milk (Mix)", 30, 190, 5700)]


def test_date_rows_sorted_by_date_then_product() -> None:
    billing = DateRangeBilling(
        start=date(2024, 1, 1),
        end=date(2024, 1, 31),
        selection=Selection.BOTH,
        lines={
            Product.COW: DateBasedLine(
                default_rate=180,
                entries=[
                    DailyEntry(date(2024, 1, 3), 2, 180),
                    DailyEntry(date(2024, 1, 1), 1, 180),
                ],
            ),
            Product.BUFFALO: DateBasedLine(default_rate=200, entries=[DailyEntry(date(2024, 1, 1), 3, 200)]),
        },
    )
    rows = build_rows(billing)
    assert [r.description for r in rows] == [
        "Buffalo - 01 Jan 2024",
        "Cow - 01 Jan 2024",
        "Cow - 03 Jan 2024",
    ]
    assert rows[0].amount == 600


def test_same_day_same_product_keeps_insertion_order() -> None:
    line = DateBasedLine(
        default_rate=200,
        entries=[DailyEntry(date(2024, 1, 2), 1, 200), DailyEntry(date(2024, 1, 2), 4, 200)],
    )
    billing = DateRangeBilling(date(2024, 1, 1), date(2024, 1, 5), Selection.BUFFALO, {Product.BUFFALO: line})
    assert [r.quantity for r in build_rows(billing)] == [1, 4]


def test_empty_entries_produce_no_rows() -> None:
    billing = DateRangeBilling(
        start=date(2024, 1, 1),
        end=date(2024, 1, 31),
        selection=Selection.BOTH,
        lines={Product.COW: DateBasedLine(default_rate=180)},
    )
    assert build_rows(billing) == []


def test_unknown_billing_type() -> None:
    with pytest.raises(TypeError):
        build_rows(object())  # type: ignore[arg-type]


def test_line_added_after_construction_is_priced() -> None:
    billing = MonthlyBilling(month=4, year=2024, selection=Selection.COW)
    billing.lines[Product.COW] = MilkLine(rate=200, daily_quantity=5)

    assert build_rows(billing) == [Row("Milk (Cow)", 150.0, 200, 30000.0)]


def test_rate_change_after_construction_reprices_row() -> None:
    billing = MonthlyBilling(
        month=4, year=2024, selection=Selection.COW, lines={Product.COW: MilkLine(rate=200, daily_quantity=5)}
    )
    billing.lines[Product.COW].rate = 250

    assert build_rows(billing) == [Row("Milk (Cow)", 150.0, 250, 37500.0)]
    # Rows are derived; the caller's line keeps the values it was given
    assert billing.lines[Product.COW].amount == 30000.0
