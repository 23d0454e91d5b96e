from __future__ import annotations

import math
import re
from datetime import date
from io import BytesIO
from pathlib import Path

import pytest
from pypdf import PdfReader
from reportlab.pdfgen.canvas import Canvas

from dairybill.core.errors import BillGenerationError
from dairybill.core.settings import Settings
from dairybill.data.models import Customer, MonthlyBilling
from dairybill.pdf import bill_pdf
from dairybill.pdf.assets import BytesAssets, NoAssets
from dairybill.pdf.bill_pdf import build_bill_pdf, default_filename, generate_bill

ISSUED = date(2024, 5, 2)


def _a4_size_points() -> tuple[float, float]:
    return (595.28, 841.89)


def _template_pdf() -> bytes:
    buf = BytesIO()
    c = Canvas(buf, pagesize=_a4_size_points())
    c.setFont("Helvetica", 9)
    c.drawString(40, 20, "TEMPLATE WATERMARK")
    c.showPage()
    c.save()
    return buf.getvalue()


def test_monthly_bill_pdf(customer: Customer, monthly_both: MonthlyBilling) -> None:
    pdf = generate_bill(customer, monthly_both, Settings(), NoAssets(), invoice_no="1042", issued_on=ISSUED)

    reader = PdfReader(BytesIO(pdf))
    assert len(reader.pages) == 1

    box = reader.pages[0].mediabox
    a4w, a4h = _a4_size_points()
    assert math.isclose(float(box.right - box.left), a4w, abs_tol=1.0)
    assert math.isclose(float(box.top - box.bottom), a4h, abs_tol=1.0)

    text = reader.pages[0].extract_text() or ""
    assert "ITTHAD DAIRY FARM" in text
    assert "Bill To: Ali Raza" in text
    assert "S/O: Ahmad Raza" in text
    assert "Invoice No: 1042" in text
    assert "Description" in text and "Quantity" in text and "Unit Price" in text and "Amount" in text
    assert "150.0 Liters" in text
    assert re.search(r"Payable:\s*Rs\. 41,800", text) is not None
    assert "Faysal Bank: 3309301000001174" in text


def test_long_date_range_bill_spans_pages(customer: Customer, daily_bill) -> None:
    pdf = generate_bill(customer, daily_bill(40), Settings(), NoAssets(), invoice_no="1042", issued_on=ISSUED)
    reader = PdfReader(BytesIO(pdf))
    assert len(reader.pages) == 3

    texts = [p.extract_text() or "" for p in reader.pages]
    assert "Description" in texts[0] and "Description" in texts[1]
    assert "Description" not in texts[2]
    assert "Payment Terms" in texts[2]

    joined = "\n".join(texts)
    for day in range(1, 41):
        stamp = date(2024, 1, 1).toordinal() + day - 1
        label = f"Cow - {date.fromordinal(stamp):%d %b %Y}"
        assert joined.count(label) == 1, label


def test_invariant_output_is_byte_identical(customer: Customer, daily_bill) -> None:
    kw = dict(settings=Settings(), assets=NoAssets(), invoice_no="1042", issued_on=ISSUED, invariant=True)
    assert generate_bill(customer, daily_bill(25), **kw) == generate_bill(customer, daily_bill(25), **kw)


def test_logo_is_embedded(customer: Customer, monthly_both: MonthlyBilling, png_bytes: bytes) -> None:
    pdf = generate_bill(customer, monthly_both, Settings(), BytesAssets(logo=png_bytes), invoice_no="1", issued_on=ISSUED)
    page = PdfReader(BytesIO(pdf)).pages[0]
    assert len(page.images) == 1


def test_template_becomes_first_page_background(customer: Customer, daily_bill) -> None:
    assets = BytesAssets(template=_template_pdf())
    pdf = generate_bill(customer, daily_bill(40), Settings(), assets, invoice_no="1", issued_on=ISSUED)
    reader = PdfReader(BytesIO(pdf))
    assert len(reader.pages) == 3
    assert "TEMPLATE WATERMARK" in (reader.pages[0].extract_text() or "")
    assert "TEMPLATE WATERMARK" not in (reader.pages[1].extract_text() or "")
    assert "Bill To: Ali Raza" in (reader.pages[0].extract_text() or "")


def test_unreadable_template_falls_back_to_blank(customer: Customer, monthly_both: MonthlyBilling) -> None:
    assets = BytesAssets(template=b"%PDF-garbage")
    pdf = generate_bill(customer, monthly_both, Settings(), assets, invoice_no="1", issued_on=ISSUED)
    reader = PdfReader(BytesIO(pdf))
    assert len(reader.pages) == 1
    assert "Payable:" in (reader.pages[0].extract_text() or "")


def test_drawing_failure_surfaces_as_generation_error(customer: Customer, monthly_both: MonthlyBilling, monkeypatch) -> None:
    def broken(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(bill_pdf, "render_pdf", broken)
    with pytest.raises(BillGenerationError) as info:
        generate_bill(customer, monthly_both, Settings(), NoAssets())
    assert isinstance(info.value.__cause__, OSError)


def test_build_bill_pdf_uses_conventional_name(tmp_path: Path, customer: Customer, monthly_both: MonthlyBilling) -> None:
    out = build_bill_pdf(tmp_path, customer, monthly_both, Settings(), NoAssets())
    assert out.name == "Bill_Ali_Raza_April_2024.pdf"
    assert out.read_bytes().startswith(b"%PDF")
    assert default_filename(customer, monthly_both, "png") == "Bill_Ali_Raza_April_2024.png"
