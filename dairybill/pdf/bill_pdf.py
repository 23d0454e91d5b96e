from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Optional

from dairybill.core.errors import BillGenerationError
from dairybill.core.numbering import bill_filename
from dairybill.core.settings import Settings
from dairybill.data.models import Billing, Customer
from dairybill.pdf.assets import AssetProvider, assets_from_settings
from dairybill.pdf.layout import BillDocument, BillLayout
from dairybill.pdf.pdf_draw import render_pdf
from dairybill.pdf.pdf_merge import apply_template
from dairybill.pdf.raster import render_png

logger = logging.getLogger(__name__)


def layout_bill(
    customer: Customer,
    billing: Billing,
    settings: Optional[Settings] = None,
    assets: Optional[AssetProvider] = None,
    invoice_no: Optional[str] = None,
    issued_on: Optional[date] = None,
) -> BillDocument:
    settings = settings or Settings()
    if assets is None:
        assets = assets_from_settings(settings)
    return BillLayout(customer, billing, settings, assets, invoice_no, issued_on).layout()


def _load_template(assets: AssetProvider) -> Optional[bytes]:
    try:
        return assets.template()
    except Exception:
        logger.warning("Template provider failed; using a blank page", exc_info=True)
        return None


def generate_bill(
    customer: Customer,
    billing: Billing,
    settings: Optional[Settings] = None,
    assets: Optional[AssetProvider] = None,
    invoice_no: Optional[str] = None,
    issued_on: Optional[date] = None,
    invariant: bool = False,
) -> bytes:
    """Lay out and render a bill to PDF bytes.

    Asset problems (logo, template) only degrade the output. Anything else that
    goes wrong while laying out or drawing raises BillGenerationError.
    """
    settings = settings or Settings()
    if assets is None:
        assets = assets_from_settings(settings)
    logger.info("Generating %s bill for %r", billing.mode.value, customer.name)
    try:
        doc = layout_bill(customer, billing, settings, assets, invoice_no, issued_on)
        pdf = render_pdf(doc.pages, title=doc.title, author=doc.author, invariant=invariant)
    except Exception as exc:
        logger.exception("Bill generation failed")
        raise BillGenerationError(f"Could not generate bill: {exc}") from exc

    template = _load_template(assets)
    if template:
        try:
            pdf = apply_template(pdf, template)
        except Exception as exc:
            logger.exception("Template merge failed")
            raise BillGenerationError(f"Could not merge template: {exc}") from exc
    logger.info("Bill %s generated (%d bytes, %d page(s))", doc.invoice_no, len(pdf), len(doc.pages))
    return pdf


def generate_bill_image(
    customer: Customer,
    billing: Billing,
    settings: Optional[Settings] = None,
    assets: Optional[AssetProvider] = None,
    invoice_no: Optional[str] = None,
    issued_on: Optional[date] = None,
) -> bytes:
    """Same bill as generate_bill, rasterized into one tall PNG."""
    settings = settings or Settings()
    pdf = generate_bill(customer, billing, settings, assets, invoice_no, issued_on)
    return render_png(pdf, scale=settings.raster_scale, gap=settings.raster_gap)


def default_filename(customer: Customer, billing: Billing, ext: str = "pdf") -> str:
    month_name, year = billing.period_month_year()
    return bill_filename(customer.name, month_name, year, ext)


def build_bill_pdf(
    out_path: Path | str,
    customer: Customer,
    billing: Billing,
    settings: Optional[Settings] = None,
    assets: Optional[AssetProvider] = None,
    as_image: bool = False,
    invoice_no: Optional[str] = None,
    issued_on: Optional[date] = None,
) -> Path:
    """Write the bill to `out_path` (a file, or a directory to get the conventional file name)."""
    out = Path(out_path)
    if out.is_dir():
        out = out / default_filename(customer, billing, "png" if as_image else "pdf")
    if as_image:
        data = generate_bill_image(customer, billing, settings, assets, invoice_no, issued_on)
    else:
        data = generate_bill(customer, billing, settings, assets, invoice_no, issued_on)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_bytes(data)
    logger.info("Wrote %s", out)
    return out
