"""
Stats file reading — file I/O only.
"""
from __future__ import annotations

import json
from pathlib import Path

from config import DATA_DIR, MOCK_STATS_FILE
from errors import StatsFileError


def resolve_stats_path(path: str | Path, data_dir: Path = DATA_DIR) -> Path:
    """Absolute paths are used as given; relative ones resolve against data_dir."""
    p = Path(path).expanduser()
    return p if p.is_absolute() else data_dir / p


def read_stats_file(path: str | Path, data_dir: Path = DATA_DIR):
    """
    Read and parse a stats JSON file.

    Raises FileNotFoundError when the file does not exist and
    StatsFileError when it cannot be read or parsed.
    """
    p = resolve_stats_path(path, data_dir)
    if not p.is_file():
        raise FileNotFoundError(f"Stats file not found: {p}")
    try:
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StatsFileError(f"Failed to read stats file {p}: {e}") from e
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise StatsFileError(f"Invalid JSON in stats file {p}: {e}") from e


def read_mock_stats(data_dir: Path = DATA_DIR):
    """The bundled sample stats used for development and tests."""
    return read_stats_file(MOCK_STATS_FILE, data_dir)
