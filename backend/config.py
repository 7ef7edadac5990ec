"""
Runtime configuration shared by the API, the CLI and the analytics layer.
Environment variables override the defaults.
"""
import os
from pathlib import Path

DATA_DIR = Path(os.environ.get("BUNDLE_EXPLORER_DATA_DIR", Path(__file__).parent.parent / "data"))
MOCK_STATS_FILE = "mock-stats.json"

LOG_LEVEL    = os.environ.get("BUNDLE_EXPLORER_LOG_LEVEL", "INFO").upper()
CORS_ORIGINS = [
    o.strip() for o in os.environ.get("BUNDLE_EXPLORER_CORS_ORIGINS", "*").split(",") if o.strip()
]

# Advisory only: real compression ratios depend on content.
GZIP_PERCENT = 30
TOP_MODULES  = 5
ROOT_NAME    = "root"
