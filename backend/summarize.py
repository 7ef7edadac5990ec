"""
Bundle Explorer offline pass.

Normalizes a bundler stats file and prints the build summary. Optionally
writes the normalized stats (and the size hierarchy) as JSON.

Usage:
    python3 summarize.py data/stats.json
    python3 summarize.py data/stats.json --out data/stats.normalized.json
    python3 summarize.py --mock --hierarchy --out /tmp/mock.json
    python3 summarize.py data/stats.json --types js css --query react
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path

BACKEND = Path(__file__).parent
sys.path.insert(0, str(BACKEND))

from errors import InvalidFormat, StatsFileError                # noqa: E402
from queries.stats_file import read_mock_stats, read_stats_file  # noqa: E402
from analytics.classify import MODULE_TYPES                      # noqa: E402
from analytics.filtering import filter_modules                   # noqa: E402
from analytics.hierarchy import build_hierarchy                  # noqa: E402
from analytics.normalize import normalize                        # noqa: E402
from analytics.summary import compute_summary                    # noqa: E402


def run(raw, types=None, query: str = "", with_hierarchy: bool = False) -> dict:
    """Normalize raw stats and assemble the report written by --out."""
    stats  = normalize(raw)
    report = {
        "summary": compute_summary(stats),
        "stats":   stats.model_dump(),
    }
    if with_hierarchy:
        visible = filter_modules(stats.modules, types, query)
        report["hierarchy"] = build_hierarchy(visible).model_dump()
    return report


def _print_summary(summary: dict) -> None:
    gzip = summary["total_gzip_label"]
    if summary["gzip_estimated"]:
        gzip = f"~{gzip}, estimated"
    print(f"  Total size:  {summary['total_size_label']} ({gzip} gzipped)")
    if summary["total_time_label"]:
        print(f"  Build time:  {summary['total_time_label']}")
    print(f"  Modules: {summary['module_count']} | Assets: {summary['asset_count']} "
          f"| Chunks: {summary['chunk_count']}")
    if summary["largest_modules"]:
        print("  Largest modules:")
        for i, m in enumerate(summary["largest_modules"], 1):
            print(f"    {i}. {m['name']} ({m['size_label']})")


# ── CLI ───────────────────────────────────────────────────────────────────────

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Normalize bundler stats and summarize them.")
    parser.add_argument("stats", nargs="?", help="Path to a stats JSON file")
    parser.add_argument("--mock", action="store_true", help="Use the bundled mock stats")
    parser.add_argument("--out", help="Write normalized JSON to this path")
    parser.add_argument("--hierarchy", action="store_true", help="Include the size hierarchy in --out")
    parser.add_argument("--types", nargs="*", choices=MODULE_TYPES,
                        help="Module types kept in the hierarchy (default: all)")
    parser.add_argument("--query", default="", help="Search filter applied to the hierarchy")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log skipped and dropped entries")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="  %(levelname)s %(name)s: %(message)s",
    )

    if not args.stats and not args.mock:
        parser.print_help()
        return 2

    t0 = time.time()
    source = "mock stats" if args.mock else args.stats
    print(f"Loading {source}...", flush=True)
    try:
        raw    = read_mock_stats() if args.mock else read_stats_file(Path(args.stats).resolve())
        report = run(raw, args.types, args.query, args.hierarchy)
    except (FileNotFoundError, StatsFileError, InvalidFormat) as ex:
        print(f"  ERROR: {ex}", flush=True)
        return 1

    _print_summary(report["summary"])

    if args.out:
        out_path = Path(args.out)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w") as f:
            json.dump(report, f, indent=2)
        print(f"\nWritten → {out_path}", flush=True)

    print(f"Done in {round(time.time() - t0, 2)}s", flush=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
