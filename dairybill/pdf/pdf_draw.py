from __future__ import annotations

from io import BytesIO
from typing import Sequence

from reportlab.lib import colors
from reportlab.pdfgen.canvas import Canvas

from dairybill.pdf.page import PAGE_SIZE, ImageOp, LineOp, Page, TextOp

TEXT_COLOR = colors.black
RULE_COLOR = colors.black


def _draw_op(c: Canvas, op: object) -> None:
    if isinstance(op, TextOp):
        c.setFont(op.font, op.size)
        c.drawString(op.x, op.y, op.text)
    elif isinstance(op, LineOp):
        c.setLineWidth(op.width)
        c.line(op.x1, op.y1, op.x2, op.y2)
    elif isinstance(op, ImageOp):
        c.drawImage(
            op.image.reader(),
            op.x,
            op.y,
            width=op.width,
            height=op.height,
            preserveAspectRatio=True,
            mask="auto",
        )
    else:
        raise TypeError(f"Unknown draw operation: {op!r}")


def render_pdf(pages: Sequence[Page], title: str = "", author: str = "", invariant: bool = False) -> bytes:
    """Serialize laid-out pages to PDF bytes, one output page per Page.

    invariant=True drops timestamps and random IDs so identical pages give identical bytes.
    """
    if not pages:
        raise ValueError("Nothing to render: no pages")
    buf = BytesIO()
    c = Canvas(buf, pagesize=PAGE_SIZE, invariant=1 if invariant else 0)
    c.setAuthor(author)
    c.setTitle(title)
    for page in pages:
        c.setPageSize((page.width, page.height))
        c.setFillColor(TEXT_COLOR)
        c.setStrokeColor(RULE_COLOR)
        for op in page.ops:
            _draw_op(c, op)
        c.showPage()
    c.save()
    return buf.getvalue()
