from __future__ import annotations

import random
import re
from typing import Optional

_UNSAFE = re.compile(r"[^a-z0-9]", re.IGNORECASE)


def random_invoice_number(low: int = 1001, high: int = 1100, rng: Optional[random.Random] = None) -> str:
	"""
	Return a placeholder invoice number drawn uniformly from [low, high].

	Not collision-checked against any store; bills are not persisted.
	"""
	if high < low:
		low, high = high, low
	r = rng or random
	return str(r.randint(low, high))


def safe_customer_name(name: str, limit: int = 20) -> str:
	"""Replace anything outside [A-Za-z0-9] with '_' and cut to `limit` chars."""
	s = _UNSAFE.sub("_", name or "")[:limit]
	return s or "Customer"


def bill_filename(customer_name: str, month_name: str, year: int, ext: str = "pdf") -> str:
	"""Bill_<sanitized-customer-name>_<month-name>_<year>.<ext>"""
	return f"Bill_{safe_customer_name(customer_name)}_{month_name}_{year}.{ext.lstrip('.')}"
