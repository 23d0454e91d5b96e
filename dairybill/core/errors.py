from __future__ import annotations


class BillGenerationError(RuntimeError):
	"""Layout or rendering failed; no output was produced."""


class RasterizationError(BillGenerationError):
	"""A page could not be rasterized or stitched into the PNG."""
