"""
Compressed-size estimation — pure functions only.

The estimate is a flat ratio of the raw byte count. Real gzip output
depends on content, so every Size built from an estimate carries
gzip_estimated=True and callers must treat the number as advisory.
"""
from __future__ import annotations

from config import GZIP_PERCENT
from models import Size


def estimate_compressed(raw_bytes: int) -> int:
    """Approximate gzip size: floor(raw * 0.3). Never exact."""
    if raw_bytes < 0:
        raise ValueError(f"raw size must be non-negative, got {raw_bytes}")
    # Integer arithmetic keeps floor(raw * 0.3) exact for large sizes.
    return raw_bytes * GZIP_PERCENT // 100


def make_size(raw: int, gzip: int | None = None) -> Size:
    """Build a Size, estimating gzip when the source did not measure it."""
    if gzip is None:
        return Size(raw=raw, gzip=estimate_compressed(raw), gzip_estimated=True)
    return Size(raw=raw, gzip=gzip, gzip_estimated=False)


def sum_sizes(sizes) -> Size:
    """Total a sequence of sizes; the total is estimated if any part was."""
    raw = gzip = 0
    estimated = False
    for s in sizes:
        raw  += s.raw
        gzip += s.gzip or 0
        estimated = estimated or s.gzip_estimated or s.gzip is None
    return Size(raw=raw, gzip=gzip, gzip_estimated=estimated)
