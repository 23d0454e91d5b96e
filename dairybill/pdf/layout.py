"""
Bill layout and pagination.

Everything here works top-down with a single vertical cursor: the top edge of
the free space on the current page. Each block declares its height, and one
check (`LayoutBudget.fits`) decides whether it goes on the current page or on
a fresh one. Rows never get truncated; they move to the next page instead.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import List, Optional, Tuple

from dairybill.core.currency import fmt_amount, fmt_qty, fmt_rate, round_money_dec, sum_money, to_decimal
from dairybill.core.numbering import random_invoice_number
from dairybill.core.settings import Settings
from dairybill.data.models import Billing, Customer
from dairybill.pdf.assets import AssetProvider, LogoImage, NoAssets
from dairybill.pdf.measure import FONT, FONT_BOLD, centred_x, wrap_text
from dairybill.pdf.page import PAGE_HEIGHT, PAGE_WIDTH, Page
from dairybill.pdf.rows import Row, build_rows

logger = logging.getLogger(__name__)


# ===== Layout constants (points, origin bottom-left) =====
MARGIN_TOP = 50
MARGIN_BOTTOM = 50
LEFT_X = 50
RIGHT_X = PAGE_WIDTH - LEFT_X

# Header (page 1 only)
HEADER_TOP = PAGE_HEIGHT - 45
LOGO_X = 40
LOGO_Y = PAGE_HEIGHT - 130
LOGO_BOX = 80

# Customer / invoice info
INFO_GAP = 40
INFO_RIGHT_X = 400
INFO_LINE = 18
# Columns wrap inside these widths so they never run into each other
INFO_LEFT_WIDTH = INFO_RIGHT_X - LEFT_X - 10
INFO_RIGHT_WIDTH = PAGE_WIDTH - INFO_RIGHT_X - 15

# Table
COLUMNS: Tuple[Tuple[str, float], ...] = (
    ("Description", 60),
    ("Quantity", 300),
    ("Unit Price", 400),
    ("Amount", 480),
)
TABLE_GAP = 6
TABLE_HEADER_SIZE = 12
ROW_HEIGHT = 25
ROW_BASELINE = 15
ROW_SIZE = 11

# Totals
TOTALS_GAP = 40
TOTALS_LABEL_X = 380
TOTALS_VALUE_X = 480
TOTALS_LINE = 20

# Footer
FOOTER_GAP = 40

# Space below the last baseline of a block
DESCENT = 10


@dataclass(frozen=True)
class BlockText:
    text: str
    offset: float  # baseline distance below the block top
    font: str = FONT
    size: float = 11
    x: Optional[float] = None  # None: centred on the page


@dataclass(frozen=True)
class BlockRule:
    offset: float
    width: float = 1.0
    x1: float = LEFT_X
    x2: float = RIGHT_X


@dataclass(frozen=True)
class Block:
    """A group of lines that must stay together on one page."""

    name: str
    texts: Tuple[BlockText, ...] = ()
    rules: Tuple[BlockRule, ...] = ()
    gap_before: float = 0.0
    min_height: float = 0.0

    @property
    def height(self) -> float:
        bottoms = [t.offset + DESCENT for t in self.texts] + [r.offset for r in self.rules]
        return max([self.min_height] + bottoms)

    def draw(self, page: Page, top: float) -> None:
        for r in self.rules:
            page.line(r.x1, top - r.offset, r.x2, top - r.offset, r.width)
        for t in self.texts:
            x = t.x if t.x is not None else centred_x(t.text, t.font, t.size, page.width)
            page.text(x, top - t.offset, t.text, t.font, t.size)


@dataclass
class LayoutBudget:
    """Vertical space left on the current page."""

    y: float
    bottom: float = MARGIN_BOTTOM

    def fits(self, height: float) -> bool:
        return self.y - height >= self.bottom


@dataclass
class BillDocument:
    pages: List[Page]
    rows: List[Row]
    invoice_no: str
    issued_on: date
    bill_total: Decimal
    previous_due: Decimal
    discount: Decimal
    payable: Decimal
    title: str = ""
    author: str = ""
    has_logo: bool = False

    def texts(self) -> List[str]:
        return [t for p in self.pages for t in p.texts()]


def compute_payable(bill_total: Decimal, previous_due: object, discount: object) -> Decimal:
    """Current bill + previous due - discount. A discount above the total yields a negative payable."""
    return round_money_dec(to_decimal(bill_total) + to_decimal(previous_due) - to_decimal(discount))


# ===== Block builders =====
def header_block(settings: Settings) -> Block:
    return Block(
        "header",
        texts=(
            BlockText(settings.farm_name, 15, FONT_BOLD, 22),
            BlockText(settings.farm_address, 35, FONT, 10),
            BlockText(settings.contact, 53, FONT_BOLD, 12),
            BlockText(settings.slogan, 70, FONT, 10),
        ),
    )


def _column(lines: List[Tuple[str, str, float]], x: float, max_width: float) -> List[BlockText]:
    texts: List[BlockText] = []
    for txt, font, size in lines:
        for part in wrap_text(txt, font, size, max_width):
            texts.append(BlockText(part, 15 + len(texts) * INFO_LINE, font, size, x))
    return texts


def info_block(customer: Customer, invoice_no: str, issued_on: date, period: str) -> Block:
    left: List[Tuple[str, str, float]] = [(f"Bill To: {customer.name}", FONT_BOLD, 12)]
    if customer.has_father_name:
        left.append((f"S/O: {customer.father_name.strip()}", FONT, 11))
    left.append((f"Phone: {customer.phone}", FONT, 11))
    address_lines = [ln for ln in str(customer.address or "").splitlines() if ln.strip()] or [""]
    left.append((f"Address: {address_lines[0]}", FONT, 11))
    left.extend((ln, FONT, 11) for ln in address_lines[1:])

    right: List[Tuple[str, str, float]] = [
        (f"Invoice No: {invoice_no}", FONT, 11),
        (f"Date: {issued_on:%d %b %Y}", FONT, 11),
        (f"Period: {period}", FONT, 11),
    ]
    texts = _column(left, LEFT_X, INFO_LEFT_WIDTH) + _column(right, INFO_RIGHT_X, INFO_RIGHT_WIDTH)
    return Block("info", texts=tuple(texts), gap_before=INFO_GAP)


def table_header_block(gap_before: float = 0.0) -> Block:
    return Block(
        "table-header",
        texts=tuple(BlockText(title, 18, FONT_BOLD, TABLE_HEADER_SIZE, x) for title, x in COLUMNS),
        rules=(BlockRule(0, 1.5), BlockRule(30, 1.0)),
        gap_before=gap_before,
        min_height=35,
    )


def row_block(row: Row, currency: str, unit: str) -> Block:
    cells = (
        row.description,
        fmt_qty(row.quantity, unit),
        f"{currency} {fmt_rate(row.rate)}",
        f"{currency} {fmt_amount(row.amount)}",
    )
    return Block(
        "row",
        texts=tuple(BlockText(txt, ROW_BASELINE, FONT, ROW_SIZE, x) for txt, (_t, x) in zip(cells, COLUMNS)),
        min_height=ROW_HEIGHT,
    )


def totals_block(bill_total: Decimal, due: Decimal, discount: Decimal, payable: Decimal, currency: str) -> Block:
    lines = (
        ("Total:", bill_total, FONT_BOLD, 12),
        ("Due Amount:", due, FONT, 11),
        ("Discount:", discount, FONT, 11),
        ("Payable:", payable, FONT, 11),
    )
    texts: List[BlockText] = []
    for i, (label, value, font, size) in enumerate(lines):
        offset = 15 + i * TOTALS_LINE
        texts.append(BlockText(label, offset, font, size, TOTALS_LABEL_X))
        texts.append(BlockText(f"{currency} {fmt_amount(value)}", offset, font, size, TOTALS_VALUE_X))
    return Block("totals", texts=tuple(texts), gap_before=TOTALS_GAP)


def footer_block(settings: Settings) -> Block:
    return Block(
        "footer",
        texts=(
            BlockText(settings.terms_heading, 15, FONT_BOLD, 12),
            BlockText(settings.terms_instruction, 33, FONT, 10),
            BlockText(settings.account_title, 55, FONT_BOLD, 12),
            BlockText(settings.bank_account, 75, FONT_BOLD, 14),
            BlockText(settings.closing, 105, FONT_BOLD, 12),
        ),
        gap_before=FOOTER_GAP,
    )


# ===== Engine =====
class BillLayout:
    """Lay out one bill onto as many A4 pages as its rows need.

    Page 1: header, logo, customer/invoice info, table header.
    Rows follow; when one does not fit, a new page starts with the table header
    repeated. Totals and footer each move to a fresh page (without a table
    header) when the space left is too small for the whole block.
    """

    def __init__(
        self,
        customer: Customer,
        billing: Billing,
        settings: Optional[Settings] = None,
        assets: Optional[AssetProvider] = None,
        invoice_no: Optional[str] = None,
        issued_on: Optional[date] = None,
    ) -> None:
        self.customer = customer
        self.billing = billing
        self.settings = settings or Settings()
        self.assets = assets if assets is not None else NoAssets()
        self.invoice_no = invoice_no or random_invoice_number(self.settings.invoice_min, self.settings.invoice_max)
        self.issued_on = issued_on or date.today()
        self.pages: List[Page] = []
        self.budget = LayoutBudget(PAGE_HEIGHT - MARGIN_TOP)

    @property
    def page(self) -> Page:
        return self.pages[-1]

    def _new_page(self, with_table_header: bool) -> None:
        self.pages.append(Page(number=len(self.pages) + 1))
        self.budget = LayoutBudget(PAGE_HEIGHT - MARGIN_TOP)
        logger.debug("Started page %d (table header: %s)", len(self.pages), with_table_header)
        if with_table_header:
            self._place(table_header_block(), table_header_on_break=False)

    def _place(self, block: Block, table_header_on_break: bool = False) -> None:
        if self.budget.fits(block.gap_before + block.height):
            top = self.budget.y - block.gap_before
        else:
            self._new_page(with_table_header=table_header_on_break)
            top = self.budget.y
        block.draw(self.page, top)
        self.budget.y = top - block.height
        if block.name == "table-header":
            self.page.table_headers += 1

    def _load_logo(self) -> Optional[LogoImage]:
        try:
            return self.assets.logo()
        except Exception:
            logger.warning("Logo provider failed; continuing without logo", exc_info=True)
            return None

    def _draw_logo(self, logo: LogoImage) -> None:
        w, h = logo.fit(LOGO_BOX, LOGO_BOX)
        self.page.image(logo, LOGO_X, LOGO_Y, w, h)

    def layout(self) -> BillDocument:
        s = self.settings
        rows = build_rows(self.billing)
        logger.info("Laying out %d row(s) for %s", len(rows), self.billing.mode.value)

        # Page 1 fixed blocks
        self.pages = [Page(number=1)]
        self.budget = LayoutBudget(HEADER_TOP)
        logo = self._load_logo()
        if logo is not None:
            self._draw_logo(logo)
        self._place(header_block(s))
        self._place(info_block(self.customer, self.invoice_no, self.issued_on, self.billing.period_label()))
        self._place(table_header_block(gap_before=TABLE_GAP))

        # Rows
        for row in rows:
            self._place(row_block(row, s.currency, s.unit), table_header_on_break=True)
            self.page.rows.append(row)
        bill_total = sum_money(row.amount for row in rows)

        # Totals and footer stand alone on a fresh page when they do not fit
        due = round_money_dec(self.billing.previous_due or 0)
        discount = round_money_dec(self.billing.discount or 0)
        payable = compute_payable(bill_total, due, discount)
        self._place(totals_block(bill_total, due, discount, payable, s.currency))
        self._place(footer_block(s))

        logger.info("Bill %s laid out on %d page(s); payable %s", self.invoice_no, len(self.pages), payable)
        return BillDocument(
            pages=self.pages,
            rows=rows,
            invoice_no=self.invoice_no,
            issued_on=self.issued_on,
            bill_total=bill_total,
            previous_due=due,
            discount=discount,
            payable=payable,
            title=f"Invoice {self.invoice_no}",
            author=s.farm_name,
            has_logo=logo is not None,
        )
