from __future__ import annotations

from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Iterable


def to_decimal(x: object) -> Decimal:
	"""Best-effort conversion to Decimal via str to avoid binary float artifacts."""
	try:
		return Decimal(str(x))
	except (InvalidOperation, ValueError, TypeError):
		return Decimal("0")


def round_money_dec(x: float | Decimal) -> Decimal:
	"""Round to 2 decimals using banker's rounding (round-half-to-even)."""
	d = to_decimal(x)
	return d.quantize(Decimal("0.01"), rounding=ROUND_HALF_EVEN)


def sum_money(values: Iterable[float | Decimal]) -> Decimal:
	"""Accumulate monetary values using Decimal and banker's rounding at the end."""
	total = Decimal("0")
	for v in values:
		total += to_decimal(v)
	return round_money_dec(total)


def _trim(s: str) -> str:
	# "30,000.00" -> "30,000", "12.50" -> "12.5"
	if "." in s:
		s = s.rstrip("0").rstrip(".")
	return s or "0"


def fmt_amount(x: float | Decimal) -> str:
	"""Integer-or-decimal amount with thousands separators: 30000 -> '30,000', 1234.5 -> '1,234.5'."""
	return _trim(f"{round_money_dec(x):,.2f}")


def fmt_rate(x: float | Decimal) -> str:
	"""Unit price without separators: 200 -> '200', 185.5 -> '185.5'."""
	return _trim(f"{round_money_dec(x):.2f}")


def fmt_money(x: float | Decimal, currency: str = "Rs.") -> str:
	return f"{currency} {fmt_amount(x)}"


def fmt_qty(qty: float | Decimal, unit: str = "Liters") -> str:
	"""Quantity with exactly one decimal place and a unit suffix: 150 -> '150.0 Liters'."""
	d = to_decimal(qty).quantize(Decimal("0.1"), rounding=ROUND_HALF_EVEN)
	return f"{d:.1f} {unit}"
