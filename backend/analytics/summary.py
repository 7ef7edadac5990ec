"""
Build summary for the dashboard — pure functions only.
"""
from __future__ import annotations

import math

from config import TOP_MODULES
from models import BuildStats

_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


def format_bytes(n: int) -> str:
    """1536 → "1.5 KB"; base 1024, at most two decimals."""
    if n <= 0:
        return "0 Bytes"
    i = min(int(math.log(n, 1024)), len(_UNITS) - 1)
    # log() can land a hair under an exact power of 1024
    if i + 1 < len(_UNITS) and n >= 1024 ** (i + 1):
        i += 1
    value = round(n / 1024 ** i, 2)
    return f"{value:g} {_UNITS[i]}"


def format_time(ms: float) -> str:
    if ms < 1000:
        return f"{ms:.0f} ms"
    return f"{ms / 1000:.2f} s"


def largest_modules(modules, n: int = TOP_MODULES) -> list:
    """Top n modules by raw size, ties broken by id."""
    return sorted(modules, key=lambda m: (-m.size.raw, m.id))[:n]


def compute_summary(stats: BuildStats, top_n: int = TOP_MODULES) -> dict:
    total = stats.total_size
    return {
        "timestamp":        stats.timestamp,
        "total_size":       total.model_dump(),
        "total_size_label": format_bytes(total.raw),
        "total_gzip_label": format_bytes(total.gzip or 0),
        "gzip_estimated":   total.gzip_estimated,
        "total_time":       stats.total_time,
        "total_time_label": format_time(stats.total_time) if stats.total_time is not None else None,
        "module_count":     len(stats.modules),
        "asset_count":      len(stats.assets),
        "chunk_count":      len(stats.chunks),
        "entrypoints":      list(stats.entrypoints),
        "largest_modules": [
            {
                "id":         m.id,
                "name":       m.name,
                "path":       m.path,
                "size":       m.size.raw,
                "size_label": format_bytes(m.size.raw),
            }
            for m in largest_modules(stats.modules, top_n)
        ],
    }
