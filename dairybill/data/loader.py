from __future__ import annotations

from datetime import date
from typing import Any, Dict, Mapping

from dairybill.data.models import (
	Billing,
	Customer,
	DailyEntry,
	DateBasedLine,
	DateRangeBilling,
	MilkLine,
	MonthlyBilling,
	Product,
	Selection,
)


def _date(val: Any) -> date:
	if isinstance(val, date):
		return val
	return date.fromisoformat(str(val))


def _product(key: str) -> Product:
	return Product(str(key).strip().capitalize())


def _selection(val: Any) -> Selection:
	return Selection(str(val or "Buffalo").strip().capitalize())


def customer_from_dict(data: Mapping[str, Any]) -> Customer:
	return Customer(
		name=str(data.get("name") or ""),
		father_name=str(data.get("father_name") or ""),
		phone=str(data.get("phone") or ""),
		address=str(data.get("address") or ""),
	)


def _milk_line(data: Mapping[str, Any]) -> MilkLine:
	return MilkLine(
		rate=float(data.get("rate", 0) or 0),
		daily_quantity=float(data.get("daily_quantity", 0) or 0),
		total_quantity=float(data.get("total_quantity", 0) or 0),
		manual_override=bool(data.get("manual_override", False)),
	)


def _date_line(data: Mapping[str, Any]) -> DateBasedLine:
	default_rate = float(data.get("rate", 0) or 0)
	line = DateBasedLine(default_rate=default_rate)
	for e in data.get("entries", []) or []:
		rate = e.get("rate")
		line.entries.append(
			DailyEntry(
				day=_date(e["date"]),
				quantity=float(e.get("quantity", 0) or 0),
				rate=default_rate if rate is None else float(rate),
			)
		)
	return line


def billing_from_dict(data: Mapping[str, Any]) -> Billing:
	"""
	Build a MonthlyBilling or DateRangeBilling from a plain dict.

	mode: "monthly" (default) or "date-range"; lines keyed by product name (cow/buffalo/mix).
	Raises ValueError/KeyError on malformed input.
	"""
	mode = str(data.get("mode") or "monthly").strip().lower()
	raw_lines: Dict[str, Any] = dict(data.get("lines") or {})
	common = {
		"selection": _selection(data.get("selection")),
		"previous_due": float(data.get("previous_due", 0) or 0),
		"discount": float(data.get("discount", 0) or 0),
	}

	if mode == "monthly":
		days = data.get("days_in_month")
		return MonthlyBilling(
			month=int(data["month"]),
			year=int(data["year"]),
			lines={_product(k): _milk_line(v) for k, v in raw_lines.items()},
			days_in_month=int(days) if days else None,
			**common,
		)
	if mode in ("date-range", "date_range", "date-based"):
		return DateRangeBilling(
			start=_date(data["start"]),
			end=_date(data["end"]),
			lines={_product(k): _date_line(v) for k, v in raw_lines.items()},
			**common,
		)
	raise ValueError(f"Unknown billing mode: {mode!r}")
