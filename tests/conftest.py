"""
Shared fixtures for the bundle-explorer tests.

The analytics layer is pure, so nearly everything runs against the bundled
mock stats in data/ or small synthetic inputs. No running server required.
"""
import json
import sys
from pathlib import Path

import pytest

ROOT     = Path(__file__).parent.parent
DATA_DIR = ROOT / "data"
sys.path.insert(0, str(ROOT / "backend"))

from analytics.normalize import normalize  # noqa: E402


@pytest.fixture(scope="session")
def mock_raw() -> dict:
    """The documented 7-module / 2-chunk / 5-asset sample."""
    return json.loads((DATA_DIR / "mock-stats.json").read_text())


@pytest.fixture(scope="session")
def mock_stats(mock_raw):
    return normalize(mock_raw)


@pytest.fixture(scope="session")
def mock_by_id(mock_stats) -> dict:
    return mock_stats.module_index()


# --------------------------------------------------------------------------
# Raw record builders
# --------------------------------------------------------------------------

def raw_module(mid, name=None, size=1000, reasons=(), **extra) -> dict:
    m = {
        "id":      mid,
        "name":    name if name is not None else str(mid),
        "size":    size,
        "reasons": [{"moduleIdentifier": r} for r in reasons],
    }
    m.update(extra)
    return m


def raw_chunk(cid, names=None, size=1000, modules=()) -> dict:
    return {
        "id":      cid,
        "names":   list(names) if names is not None else [str(cid)],
        "size":    size,
        "modules": [{"id": m} for m in modules],
    }


def raw_asset(name, size=1000, chunks=()) -> dict:
    return {"name": name, "size": size, "chunks": list(chunks)}
