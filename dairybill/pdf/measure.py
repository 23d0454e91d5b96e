from __future__ import annotations

from typing import List

from reportlab.pdfbase import pdfmetrics

# Standard PDF fonts, always available without embedding a TTF
FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


def text_width(text: str, font: str, size: float) -> float:
    """Rendered width of `text` in points."""
    return pdfmetrics.stringWidth(text, font, size)


def centred_x(text: str, font: str, size: float, page_width: float) -> float:
    """Left x that horizontally centres `text` on a page of `page_width`."""
    return (page_width - text_width(text, font, size)) / 2


def wrap_text(text: str, font: str, size: float, max_width: float) -> List[str]:
    """Greedy word wrap to `max_width`. Words wider than a line are split, never dropped."""
    lines: List[str] = []
    line: List[str] = []
    for word in (text or "").split():
        while text_width(word, font, size) > max_width and len(word) > 1:
            cut = len(word) - 1
            while cut > 1 and text_width(word[:cut], font, size) > max_width:
                cut -= 1
            if line:
                lines.append(" ".join(line))
                line = []
            lines.append(word[:cut])
            word = word[cut:]
        trial = " ".join(line + [word])
        if text_width(trial, font, size) <= max_width or not line:
            line.append(word)
        else:
            lines.append(" ".join(line))
            line = [word]
    if line:
        lines.append(" ".join(line))
    return lines or [""]
