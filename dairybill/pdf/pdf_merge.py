from __future__ import annotations

import logging
from io import BytesIO

from pypdf import PdfReader, PdfWriter

logger = logging.getLogger(__name__)


def apply_template(pdf_bytes: bytes, template_bytes: bytes) -> bytes:
	"""Overlay page 1 of the bill onto page 1 of a pre-designed template.

	Remaining bill pages are appended unchanged. If the template cannot be
	read, the bill is returned as-is (blank background).
	"""
	try:
		tpl_reader = PdfReader(BytesIO(template_bytes))
		base_page = tpl_reader.pages[0]
	except Exception as exc:
		logger.warning("Template unreadable; keeping blank first page: %s", exc)
		return pdf_bytes

	ovl_reader = PdfReader(BytesIO(pdf_bytes))
	writer = PdfWriter()

	# Merge without rasterizing to keep background crisp
	base_page.merge_page(ovl_reader.pages[0])
	writer.add_page(base_page)

	for i in range(1, len(ovl_reader.pages)):
		writer.add_page(ovl_reader.pages[i])

	out = BytesIO()
	writer.write(out)
	return out.getvalue()
