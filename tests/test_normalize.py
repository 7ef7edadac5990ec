"""
Unit tests for analytics/normalize.py — pure functions only.

Tests cover:
  - the mock sample: totals, counts, dependency resolution, entrypoints
  - dependency symmetry and self-reference freedom
  - dangling references, malformed records, empty collections
  - InvalidFormat rejection
"""
import json
import logging

import pytest

from analytics.normalize import normalize
from errors import InvalidFormat
from conftest import raw_asset, raw_chunk, raw_module


def assert_symmetric(stats):
    by_id = stats.module_index()
    for m in stats.modules:
        assert m.id not in m.dependencies
        assert m.id not in m.dependents
        for dep in m.dependencies:
            assert dep in by_id
            assert m.id in by_id[dep].dependents
        for parent in m.dependents:
            assert parent in by_id
            assert m.id in by_id[parent].dependencies


# ── Mock sample ────────────────────────────────────────────────────────────────

class TestMockStats:
    def test_total_size_is_sum_of_assets(self, mock_stats):
        assert mock_stats.total_size.raw == 1_200_000 + 800_000 + 150_000 + 75_000 + 300_000
        assert mock_stats.total_size.raw == 2_525_000

    def test_total_gzip_is_estimated(self, mock_stats):
        assert mock_stats.total_size.gzip_estimated is True
        assert mock_stats.total_size.gzip == sum(a.size.gzip for a in mock_stats.assets)

    def test_counts(self, mock_stats):
        assert len(mock_stats.modules) == 7
        assert len(mock_stats.chunks) == 2
        assert len(mock_stats.assets) == 5

    def test_total_time(self, mock_stats):
        assert mock_stats.total_time == 5200

    def test_app_dependencies(self, mock_by_id):
        app = mock_by_id["./src/App.js"]
        assert app.dependencies == {"./src/components/Button.js", "./node_modules/react/index.js"}

    def test_app_dependents(self, mock_by_id):
        # Every module whose reasons point at App.js depends on it
        app = mock_by_id["./src/App.js"]
        assert "./src/index.js" in app.dependents
        assert app.dependents == {
            "./src/index.js",
            "./src/components/Button.js",
            "./node_modules/react/index.js",
            "./src/utils/data.js",
        }

    def test_symmetry(self, mock_stats):
        assert_symmetric(mock_stats)

    def test_module_fields(self, mock_by_id):
        button = mock_by_id["./src/components/Button.js"]
        assert button.name == "Button.js"
        assert button.path == "./src/components/Button.js"
        assert button.type == "js"
        assert button.size.raw == 15_000
        assert button.size.gzip == 4_500
        assert button.size.gzip_estimated is True
        assert mock_by_id["./src/styles/main.css"].type == "css"

    def test_input_order_preserved(self, mock_stats, mock_raw):
        assert [m.id for m in mock_stats.modules] == [m["id"] for m in mock_raw["modules"]]

    def test_chunks(self, mock_stats):
        main, vendors = mock_stats.chunks
        assert (main.id, main.name, main.size.raw) == ("main", "main", 1_350_000)
        assert (vendors.id, vendors.name, vendors.size.raw) == ("vendors", "vendors", 430_000)
        assert vendors.modules == ("./node_modules/react/index.js", "./node_modules/lodash/index.js")

    def test_entrypoints_first_module_of_named_chunks(self, mock_stats):
        assert mock_stats.entrypoints == ("./src/index.js", "./node_modules/react/index.js")

    def test_asset_fields(self, mock_stats):
        by_name = {a.name: a for a in mock_stats.assets}
        assert by_name["app.js.map"].type == "map"
        assert by_name["logo.png"].type == "image"
        assert by_name["logo.png"].chunks == frozenset()
        assert by_name["main.js"].chunks == {"main"}

    def test_serializes_as_plain_data(self, mock_stats):
        data = mock_stats.model_dump(mode="json")
        app = next(m for m in data["modules"] if m["id"] == "./src/App.js")
        assert app["dependencies"] == sorted(app["dependencies"])
        assert isinstance(app["dependents"], list)


# ── Dependency resolution ──────────────────────────────────────────────────────

class TestResolution:
    def test_forward_reference(self):
        # a's reason points at b, which appears later in the input
        stats = normalize({"modules": [
            raw_module("a", "a.js", reasons=["b"]),
            raw_module("b", "b.js"),
        ]})
        a, b = stats.modules
        assert a.dependencies == {"b"}
        assert b.dependents == {"a"}

    def test_dangling_reason_dropped(self):
        stats = normalize({"modules": [raw_module("a", "a.js", reasons=["external:react"])]})
        assert stats.modules[0].dependencies == frozenset()

    def test_self_reference_dropped(self):
        stats = normalize({"modules": [raw_module("a", "a.js", reasons=["a"])]})
        m = stats.modules[0]
        assert m.dependencies == frozenset()
        assert m.dependents == frozenset()

    def test_duplicate_reasons_collapse(self):
        stats = normalize({"modules": [
            raw_module("a", "a.js", reasons=["b", "b"]),
            raw_module("b", "b.js"),
        ]})
        assert stats.modules[0].dependencies == {"b"}

    def test_numeric_ids_coerced_to_strings(self):
        stats = normalize({"modules": [
            {"id": 1, "name": "./a.js", "size": 10, "reasons": [{"moduleId": 2}]},
            {"id": 2, "name": "./b.js", "size": 20},
        ]})
        a, b = stats.modules
        assert (a.id, b.id) == ("1", "2")
        assert a.dependencies == {"2"}
        assert b.dependents == {"1"}

    def test_module_id_preferred_over_identifier(self):
        stats = normalize({"modules": [
            {"id": 1, "name": "./a.js", "size": 10,
             "reasons": [{"moduleId": 2, "moduleIdentifier": "/abs/loader!./b.js"}]},
            {"id": 2, "name": "./b.js", "size": 20},
        ]})
        assert stats.modules[0].dependencies == {"2"}

    def test_non_object_reasons_ignored(self):
        stats = normalize({"modules": [
            {"id": "a", "name": "a.js", "size": 1, "reasons": ["b", None, 3]},
            raw_module("b", "b.js"),
        ]})
        assert stats.modules[0].dependencies == frozenset()

    def test_symmetry_on_dense_graph(self):
        ids = [f"m{i}" for i in range(8)]
        modules = [
            raw_module(mid, f"./src/{mid}.js", reasons=[o for o in ids if o != mid][:i] + ["ghost"])
            for i, mid in enumerate(ids)
        ]
        assert_symmetric(normalize({"modules": modules}))


# ── Chunks & entrypoints ───────────────────────────────────────────────────────

class TestChunks:
    def test_unnamed_chunk_uses_id_and_is_not_an_entrypoint(self):
        stats = normalize({
            "modules": [raw_module("a", "a.js")],
            "chunks":  [raw_chunk(7, names=[], modules=["a"])],
        })
        assert stats.chunks[0].name == "7"
        assert stats.entrypoints == ()

    def test_entrypoint_skips_unresolvable_modules(self):
        stats = normalize({
            "modules": [raw_module("b", "b.js")],
            "chunks":  [raw_chunk("main", modules=["missing", "b"])],
        })
        assert stats.chunks[0].modules == ("b",)
        assert stats.entrypoints == ("b",)

    def test_named_chunk_without_resolvable_modules(self):
        stats = normalize({"chunks": [raw_chunk("main", modules=["missing"])]})
        assert stats.chunks[0].modules == ()
        assert stats.entrypoints == ()

    def test_scalar_module_references(self):
        stats = normalize({
            "modules": [raw_module(1, "a.js"), raw_module(2, "b.js")],
            "chunks":  [{"id": 0, "names": ["main"], "size": 5, "modules": [2, 1, 2]}],
        })
        assert stats.chunks[0].modules == ("2", "1")

    def test_shared_first_module_listed_once(self):
        stats = normalize({
            "modules": [raw_module("a", "a.js")],
            "chunks":  [raw_chunk("x", modules=["a"]), raw_chunk("y", modules=["a"])],
        })
        assert stats.entrypoints == ("a",)

    def test_measured_gzip_used(self):
        stats = normalize({"chunks": [{"id": "c", "names": ["c"], "size": 100, "gzipSize": 40}]})
        assert stats.chunks[0].size.gzip == 40
        assert stats.chunks[0].size.gzip_estimated is False


# ── Failure policy ─────────────────────────────────────────────────────────────

class TestInvalidFormat:
    @pytest.mark.parametrize("raw", [{}, {"time": 10}, {"modules": None, "assets": None}])
    def test_no_collections(self, raw):
        with pytest.raises(InvalidFormat):
            normalize(raw)

    @pytest.mark.parametrize("raw", [None, [], "stats", 42])
    def test_not_an_object(self, raw):
        with pytest.raises(InvalidFormat):
            normalize(raw)

    def test_collection_not_a_list(self):
        with pytest.raises(InvalidFormat, match="'modules' must be a list"):
            normalize({"modules": {"a": 1}})


class TestEmptyCollections:
    def test_empty_lists_are_valid(self):
        stats = normalize({"modules": [], "assets": [], "chunks": []})
        assert stats.modules == ()
        assert stats.assets == ()
        assert stats.chunks == ()
        assert stats.total_size.raw == 0

    def test_single_collection_is_enough(self):
        stats = normalize({"assets": [raw_asset("main.js", 10)]})
        assert stats.total_size.raw == 10
        assert stats.modules == ()


class TestMalformedEntries:
    def test_missing_size_skipped_and_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="analytics.normalize"):
            stats = normalize({"modules": [
                {"id": "a", "name": "a.js"},
                raw_module("b", "b.js"),
            ]})
        assert [m.id for m in stats.modules] == ["b"]
        assert "modules[0]: missing size" in caplog.text

    @pytest.mark.parametrize("record", [
        {"name": "a.js", "size": 1},                  # no id
        {"id": "a", "size": 1},                       # no name
        {"id": "a", "name": "a.js", "size": -5},      # negative
        {"id": "a", "name": "a.js", "size": "big"},   # not a number
        {"id": "a", "name": "a.js", "size": True},    # bool is not a size
        {"id": ["a"], "name": "a.js", "size": 1},     # unusable id
        "a.js",                                       # not an object
    ])
    def test_bad_module_records(self, record):
        stats = normalize({"modules": [record, raw_module("ok", "ok.js")]})
        assert [m.id for m in stats.modules] == ["ok"]

    def test_duplicate_module_id_keeps_first(self):
        stats = normalize({"modules": [
            raw_module("a", "first.js", size=1),
            raw_module("a", "second.js", size=2),
        ]})
        assert len(stats.modules) == 1
        assert stats.modules[0].path == "first.js"

    def test_reason_to_skipped_module_is_dangling(self):
        stats = normalize({"modules": [
            raw_module("a", "a.js", reasons=["b"]),
            {"id": "b", "name": "b.js"},
        ]})
        assert stats.modules[0].dependencies == frozenset()

    def test_bad_asset_excluded_from_total(self):
        stats = normalize({"assets": [raw_asset("a.js", 10), {"name": "b.js"}, {"size": 5}]})
        assert [a.name for a in stats.assets] == ["a.js"]
        assert stats.total_size.raw == 10

    def test_bad_chunk_skipped(self):
        stats = normalize({"chunks": [{"names": ["x"], "size": 1}, raw_chunk("ok")]})
        assert [c.id for c in stats.chunks] == ["ok"]


class TestTimestamp:
    def test_built_at_used(self):
        stats = normalize({"builtAt": 1_700_000_000_000, "assets": []})
        assert stats.timestamp == 1_700_000_000_000

    def test_current_time_otherwise(self):
        stats = normalize({"assets": []})
        assert stats.timestamp > 1_600_000_000_000

    def test_each_load_is_independent(self, mock_raw):
        a = normalize(mock_raw)
        b = normalize(mock_raw)
        assert a is not b
        assert a.modules == b.modules


# ── Out-of-range numbers ───────────────────────────────────────────────────────

HUGE = int("9" * 400)


class TestOutOfRangeNumbers:
    def test_huge_module_size_skipped(self, caplog):
        raw = json.loads(
            '{"modules": [{"id": "a", "name": "a.js", "size": %d},'
            ' {"id": "b", "name": "b.js", "size": 10}]}' % HUGE
        )
        with caplog.at_level(logging.WARNING, logger="analytics.normalize"):
            stats = normalize(raw)
        assert [m.id for m in stats.modules] == ["b"]
        assert "modules[0]: size is not a usable number" in caplog.text

    def test_huge_gzip_size_skips_asset(self):
        stats = normalize({"assets": [
            {"name": "a.js", "size": 10, "gzipSize": HUGE},
            raw_asset("b.js", 20),
        ]})
        assert [a.name for a in stats.assets] == ["b.js"]

    @pytest.mark.parametrize("size", [float("nan"), float("inf"), 1e300])
    def test_non_finite_float_size_skipped(self, size):
        stats = normalize({"modules": [{"id": "a", "name": "a.js", "size": size}]})
        assert stats.modules == ()

    def test_huge_built_at_falls_back_to_now(self):
        stats = normalize(json.loads('{"builtAt": %d, "assets": []}' % HUGE))
        assert 1_600_000_000_000 < stats.timestamp < 10 ** 14

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf"), HUGE])
    def test_unusable_total_time_is_absent(self, value):
        stats = normalize({"time": value, "assets": []})
        assert stats.total_time is None
        json.dumps(stats.model_dump(mode="json"), allow_nan=False)
