from __future__ import annotations

import logging
from io import BytesIO
from typing import List

import fitz  # PyMuPDF
from PIL import Image

from dairybill.core.errors import RasterizationError

logger = logging.getLogger(__name__)


def rasterize_pages(pdf_bytes: bytes, scale: float = 2.0) -> List[Image.Image]:
    """Render every PDF page to an RGB image at `scale` x 72 dpi."""
    images: List[Image.Image] = []
    matrix = fitz.Matrix(scale, scale)
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        for page in doc:
            pix = page.get_pixmap(matrix=matrix, alpha=False)
            images.append(Image.frombytes("RGB", (pix.width, pix.height), pix.samples))
    if not images:
        raise ValueError("PDF has no pages")
    return images


def stitch_vertically(images: List[Image.Image], gap: int = 20) -> Image.Image:
    """Stack page images top to bottom on white, `gap` pixels between consecutive pages."""
    width = max(img.width for img in images)
    height = sum(img.height for img in images) + gap * (len(images) - 1)
    out = Image.new("RGB", (width, height), (255, 255, 255))
    y = 0
    for img in images:
        out.paste(img, (0, y))
        y += img.height + gap
    return out


def render_png(pdf_bytes: bytes, scale: float = 2.0, gap: int = 20) -> bytes:
    """Rasterize all pages and return one tall PNG. Any failure aborts; no partial image."""
    try:
        images = rasterize_pages(pdf_bytes, scale)
        sheet = stitch_vertically(images, gap)
        buf = BytesIO()
        sheet.save(buf, format="PNG")
    except Exception as exc:
        logger.exception("Rasterization failed")
        raise RasterizationError(f"Could not rasterize bill: {exc}") from exc
    logger.info("Rasterized %d page(s) into %dx%d PNG", len(images), sheet.width, sheet.height)
    return buf.getvalue()
