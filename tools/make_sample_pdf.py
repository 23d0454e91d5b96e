from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
import logging
import sys

# Ensure we can import the dairybill package when running this script directly
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from dairybill.core.settings import load_settings
from dairybill.data.models import (
    Customer,
    DateBasedLine,
    DateRangeBilling,
    MilkLine,
    MonthlyBilling,
    Product,
    Selection,
)
from dairybill.pdf.bill_pdf import build_bill_pdf

# Generates redacted sample bills (monthly PDF, long date-range PDF and PNG) for README/demo purposes.


def _date_range_sample() -> DateRangeBilling:
    start = date(2024, 1, 1)
    end = start + timedelta(days=29)
    cow = DateBasedLine(default_rate=180)
    buffalo = DateBasedLine(default_rate=200)
    for i in range(30):
        cow.add_entry(day=start + timedelta(days=i), quantity=2 + (i % 2) * 0.5)
        if i % 3 == 0:
            buffalo.add_entry(day=start + timedelta(days=i), quantity=3)
    return DateRangeBilling(
        start=start,
        end=end,
        selection=Selection.BOTH,
        lines={Product.COW: cow, Product.BUFFALO: buffalo},
        previous_due=2500,
        discount=300,
    )


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    settings = load_settings()
    out_dir = ROOT / "assets" / "samples"
    out_dir.mkdir(parents=True, exist_ok=True)

    customer = Customer(name="(Customer Name)", father_name="(Father Name)", phone="(redacted)", address="(Street), (City)")
    monthly = MonthlyBilling(
        month=1,
        year=2024,
        selection=Selection.BOTH,
        lines={Product.COW: MilkLine(rate=180, daily_quantity=2), Product.BUFFALO: MilkLine(rate=200, daily_quantity=5)},
        previous_due=1500,
    )
    daily = _date_range_sample()

    print("Wrote:", build_bill_pdf(out_dir / "sample-monthly.pdf", customer, monthly, settings, invoice_no="SAMPLE"))
    print("Wrote:", build_bill_pdf(out_dir / "sample-daily.pdf", customer, daily, settings, invoice_no="SAMPLE"))
    print("Wrote:", build_bill_pdf(out_dir / "sample-daily.png", customer, daily, settings, as_image=True, invoice_no="SAMPLE"))


if __name__ == "__main__":
    main()
