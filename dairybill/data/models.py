from __future__ import annotations

import calendar
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date, timedelta
from enum import Enum
from typing import ClassVar, Dict, List, Optional, Tuple

from dairybill.core.currency import to_decimal


class Product(str, Enum):
	COW = "Cow"
	BUFFALO = "Buffalo"
	MIX = "Mix"


# Fixed evaluation order for monthly summary rows
PRODUCT_ORDER: Tuple[Product, ...] = (Product.COW, Product.BUFFALO, Product.MIX)


class Selection(str, Enum):
	BUFFALO = "Buffalo"
	COW = "Cow"
	MIX = "Mix"
	BOTH = "Both"

	@property
	def products(self) -> Tuple[Product, ...]:
		if self is Selection.BOTH:
			return (Product.COW, Product.BUFFALO)
		return (Product(self.value),)


class BillingMode(str, Enum):
	MONTHLY = "monthly"
	DATE_RANGE = "date-range"


@dataclass
class Customer:
	name: str = ""
	father_name: str = ""
	phone: str = ""
	address: str = ""

	@property
	def has_father_name(self) -> bool:
		return bool((self.father_name or "").strip())


@dataclass
class MilkLine:
	rate: float = 0.0
	daily_quantity: float = 0.0
	total_quantity: float = 0.0
	amount: float = 0.0
	# When set, total_quantity is user-supplied and not derived from daily_quantity
	manual_override: bool = False

	def recalculate(self, days: int) -> "MilkLine":
		if not self.manual_override:
			self.total_quantity = float(to_decimal(self.daily_quantity) * days)
		self.amount = float(to_decimal(self.total_quantity) * to_decimal(self.rate))
		return self


@dataclass
class DailyEntry:
	day: date
	quantity: float = 0.0
	rate: float = 0.0

	@property
	def amount(self) -> float:
		return float(to_decimal(self.quantity) * to_decimal(self.rate))


@dataclass
class DateBasedLine:
	default_rate: float = 0.0
	entries: List[DailyEntry] = field(default_factory=list)

	@property
	def total_quantity(self) -> float:
		return float(sum((to_decimal(e.quantity) for e in self.entries), to_decimal(0)))

	@property
	def total_amount(self) -> float:
		return float(sum((to_decimal(e.amount) for e in self.entries), to_decimal(0)))

	def next_available_date(self, start: Optional[date] = None, end: Optional[date] = None) -> date:
		"""Day after the latest entry; the start date (or today) when empty; wraps to start past end."""
		if not self.entries:
			return start or date.today()
		candidate = max(e.day for e in self.entries) + timedelta(days=1)
		if end is not None and candidate > end:
			return start or candidate
		return candidate

	def add_entry(
		self,
		day: Optional[date] = None,
		quantity: float = 0.0,
		rate: Optional[float] = None,
		start: Optional[date] = None,
		end: Optional[date] = None,
	) -> DailyEntry:
		entry = DailyEntry(
			day=day or self.next_available_date(start, end),
			quantity=quantity,
			rate=self.default_rate if rate is None else rate,
		)
		self.entries.append(entry)
		return entry

	def update_entry(
		self,
		index: int,
		day: Optional[date] = None,
		quantity: Optional[float] = None,
		rate: Optional[float] = None,
	) -> DailyEntry:
		entry = self.entries[index]
		if day is not None:
			entry.day = day
		if quantity is not None:
			entry.quantity = quantity
		if rate is not None:
			entry.rate = rate
		return entry

	def remove_entry(self, index: int) -> DailyEntry:
		return self.entries.pop(index)


class Billing(ABC):
	"""Common surface of the two billing modes."""

	mode: ClassVar[BillingMode]
	selection: Selection
	previous_due: float
	discount: float

	@property
	def active_products(self) -> Tuple[Product, ...]:
		return self.selection.products

	@abstractmethod
	def period_label(self) -> str:
		...

	@abstractmethod
	def period_month_year(self) -> Tuple[str, int]:
		...


@dataclass
class MonthlyBilling(Billing):
	month: int
	year: int
	selection: Selection = Selection.BUFFALO
	lines: Dict[Product, MilkLine] = field(default_factory=dict)
	previous_due: float = 0.0
	discount: float = 0.0
	# Overrides the calendar length of the month when set
	days_in_month: Optional[int] = None

	mode: ClassVar[BillingMode] = BillingMode.MONTHLY

	def __post_init__(self) -> None:
		if not 1 <= int(self.month) <= 12:
			raise ValueError(f"month must be 1-12, got {self.month!r}")
		self.selection = Selection(self.selection)
		self.recalculate()

	@property
	def days_in_period(self) -> int:
		if self.days_in_month:
			return int(self.days_in_month)
		return calendar.monthrange(int(self.year), int(self.month))[1]

	def line(self, product: Product) -> MilkLine:
		return self.lines.get(product) or MilkLine()

	def recalculate(self) -> None:
		days = self.days_in_period
		for ln in self.lines.values():
			ln.recalculate(days)

	def period_label(self) -> str:
		return f"{calendar.month_name[int(self.month)]} {self.year}"

	def period_month_year(self) -> Tuple[str, int]:
		return calendar.month_name[int(self.month)], int(self.year)


@dataclass
class DateRangeBilling(Billing):
	start: date
	end: date
	selection: Selection = Selection.BUFFALO
	lines: Dict[Product, DateBasedLine] = field(default_factory=dict)
	previous_due: float = 0.0
	discount: float = 0.0

	mode: ClassVar[BillingMode] = BillingMode.DATE_RANGE

	def __post_init__(self) -> None:
		self.selection = Selection(self.selection)

	def line(self, product: Product) -> DateBasedLine:
		return self.lines.get(product) or DateBasedLine()

	def period_label(self) -> str:
		return f"{self.start:%d %b %Y} - {self.end:%d %b %Y}"

	def period_month_year(self) -> Tuple[str, int]:
		return calendar.month_name[self.start.month], self.start.year
