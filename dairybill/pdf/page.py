from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from dairybill.pdf.assets import LogoImage
from dairybill.pdf.measure import FONT
from dairybill.pdf.rows import Row

# A4 in points
PAGE_SIZE = (595.28, 841.89)
PAGE_WIDTH, PAGE_HEIGHT = PAGE_SIZE


@dataclass(frozen=True)
class TextOp:
    x: float
    y: float
    text: str
    font: str
    size: float


@dataclass(frozen=True)
class LineOp:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float


@dataclass(frozen=True)
class ImageOp:
    image: LogoImage
    x: float
    y: float
    width: float
    height: float


DrawOp = Union[TextOp, LineOp, ImageOp]


@dataclass
class Page:
    """One physical sheet: draw operations at absolute coordinates (origin bottom-left)."""

    number: int
    width: float = PAGE_WIDTH
    height: float = PAGE_HEIGHT
    ops: List[DrawOp] = field(default_factory=list)
    # Bookkeeping for pagination checks
    rows: List[Row] = field(default_factory=list)
    table_headers: int = 0

    def text(self, x: float, y: float, text: str, font: str = FONT, size: float = 11) -> None:
        self.ops.append(TextOp(x, y, text, font, size))

    def line(self, x1: float, y1: float, x2: float, y2: float, width: float = 1.0) -> None:
        self.ops.append(LineOp(x1, y1, x2, y2, width))

    def image(self, image: LogoImage, x: float, y: float, width: float, height: float) -> None:
        self.ops.append(ImageOp(image, x, y, width, height))

    def texts(self) -> List[str]:
        return [op.text for op in self.ops if isinstance(op, TextOp)]
