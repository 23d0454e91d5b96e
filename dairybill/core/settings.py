from __future__ import annotations

from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
import logging

from dairybill.core.paths import settings_path

logger = logging.getLogger(__name__)

# Path to the settings.json (runtime-aware)
SETTINGS_PATH = settings_path()


@dataclass
class Settings:
	# Header block
	farm_name: str = "ITTHAD DAIRY FARM"
	farm_address: str = "Chak Mathroma, Darul Fazal, Rabwah"
	contact: str = "Contact: 0331-6198039"
	slogan: str = "Love For All"
	# Footer block (payment terms)
	terms_heading: str = "Payment Terms"
	terms_instruction: str = "Please make payment to the following account:"
	account_title: str = "Account Title: Inzimam Ul Haq"
	bank_account: str = "Faysal Bank: 3309301000001174"
	closing: str = "Thank you for your continued trust and business!"
	# Units shown in the table
	currency: str = "Rs."
	unit: str = "Liters"
	# Assets: a URL wins over a path when both are set
	logo_path: Optional[str] = "assets/Logo.png"
	logo_url: Optional[str] = None
	template_path: Optional[str] = None
	template_url: Optional[str] = None
	asset_timeout: float = 10.0
	# Placeholder invoice numbers are drawn from this inclusive range
	invoice_min: int = 1001
	invoice_max: int = 1100
	# PNG output
	raster_scale: float = 2.0
	raster_gap: int = 20
	# Remember last used output folder
	last_output_dir: Optional[str] = None

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Settings":
		# Merge provided values over defaults, ignore unknown keys
		defaults = asdict(cls())
		merged: Dict[str, Any] = {**defaults, **{k: v for k, v in data.items() if k in defaults}}
		return cls(**merged)

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


def _coerce_path(path: Optional[Union[str, Path]]) -> Path:
	return Path(path) if path is not None else SETTINGS_PATH


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
	"""
	Load settings from JSON (UTF-8). If the file is missing, write defaults and return them.
	"""
	p = _coerce_path(path)
	if not p.exists():
		settings = Settings()
		try:
			save_settings(settings, p)
		except OSError as exc:
			# Read-only install: run on defaults without persisting them
			logger.warning("Could not write default settings to %s: %s", p, exc)
		return settings

	try:
		with p.open("r", encoding="utf-8") as f:
			raw: Dict[str, Any] = json.load(f)
	except (json.JSONDecodeError, OSError):
		# Unreadable or corrupt: use defaults, leave the file alone
		logger.warning("Could not read settings from %s; using defaults", p)
		return Settings()

	return Settings.from_dict(raw if isinstance(raw, dict) else {})


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> None:
	"""Save settings to JSON (UTF-8), creating parent dirs if needed."""
	p = _coerce_path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	tmp = p.with_suffix(p.suffix + ".tmp")
	with tmp.open("w", encoding="utf-8", newline="\n") as f:
		json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
		f.write("\n")
	tmp.replace(p)
