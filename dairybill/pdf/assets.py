from __future__ import annotations

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Optional, Protocol, Tuple
from urllib.request import urlopen

from reportlab.lib.utils import ImageReader

from dairybill.core.paths import resource_path
from dairybill.core.settings import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LogoImage:
    data: bytes
    width: int
    height: int

    def reader(self) -> ImageReader:
        return ImageReader(BytesIO(self.data))

    def fit(self, max_w: float, max_h: float) -> Tuple[float, float]:
        """Scale into a max_w x max_h box, preserving aspect ratio."""
        scale = min(max_w / self.width, max_h / self.height)
        return self.width * scale, self.height * scale


def decode_logo(data: bytes) -> LogoImage:
    """Parse image bytes far enough to know the pixel size. Raises on unreadable data."""
    iw, ih = ImageReader(BytesIO(data)).getSize()
    if iw <= 0 or ih <= 0:
        raise ValueError(f"Logo has no pixels ({iw}x{ih})")
    return LogoImage(data=data, width=int(iw), height=int(ih))


class AssetProvider(Protocol):
    """Best-effort source of branding assets. Both methods return None instead of raising."""

    def logo(self) -> Optional[LogoImage]:
        ...

    def template(self) -> Optional[bytes]:
        ...


class NoAssets:
    """Unbranded output: no logo, blank first page."""

    def logo(self) -> Optional[LogoImage]:
        return None

    def template(self) -> Optional[bytes]:
        return None


class BytesAssets:
    """Assets already in memory."""

    def __init__(self, logo: Optional[bytes] = None, template: Optional[bytes] = None) -> None:
        self._logo = logo
        self._template = template

    def logo(self) -> Optional[LogoImage]:
        if not self._logo:
            return None
        try:
            return decode_logo(self._logo)
        except Exception as exc:
            logger.warning("Logo could not be decoded; continuing without it: %s", exc)
            return None

    def template(self) -> Optional[bytes]:
        return self._template or None


def _is_url(source: str) -> bool:
    return source.lower().startswith(("http://", "https://", "file://"))


class SourceAssets:
    """Assets addressed by URL (fetched with urllib) or by file path (resolved against the bundle)."""

    def __init__(self, logo: Optional[str] = None, template: Optional[str] = None, timeout: float = 10.0) -> None:
        self.logo_source = logo
        self.template_source = template
        self.timeout = timeout

    def _read(self, source: str) -> bytes:
        if _is_url(source):
            with urlopen(source, timeout=self.timeout) as resp:  # nosec: configured asset location
                return resp.read()
        return resource_path(source).read_bytes()

    def logo(self) -> Optional[LogoImage]:
        if not self.logo_source:
            return None
        try:
            return decode_logo(self._read(self.logo_source))
        except Exception as exc:
            logger.warning("Logo load failed for %s; continuing without it: %s", self.logo_source, exc)
            return None

    def template(self) -> Optional[bytes]:
        if not self.template_source:
            return None
        try:
            return self._read(self.template_source)
        except Exception as exc:
            logger.warning("Template load failed for %s; using a blank page: %s", self.template_source, exc)
            return None


def assets_from_settings(settings: Settings) -> SourceAssets:
    return SourceAssets(
        logo=settings.logo_url or settings.logo_path,
        template=settings.template_url or settings.template_path,
        timeout=settings.asset_timeout,
    )
