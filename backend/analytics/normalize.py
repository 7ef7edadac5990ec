"""
Stats normalization — pure functions only.

Turns a parsed, loosely-typed bundler stats object (webpack-shaped:
modules with reasons, assets, chunks) into one BuildStats.

Modules are resolved in two passes. The creation pass allocates a record
per raw module and indexes it by id; the resolution pass walks every
module's reasons against that index, so a reason may point at a module
that appears later in the input. Dependency edges live in an id-keyed
adjacency table while the load is in progress and are frozen into the
Module records at the end.

Raw input contract:
    time      number, optional          total build time in ms
    builtAt   number, optional          epoch ms of the build
    modules   [{id, name, size, gzipSize?, reasons?: [{moduleId | moduleIdentifier}]}]
    assets    [{name, size, gzipSize?, chunks?}]
    chunks    [{id, names?, size, gzipSize?, modules?: [{id} | id]}]
"""
from __future__ import annotations

import logging
import math
import time
from collections import defaultdict
from collections.abc import Mapping

from errors import InvalidFormat, MalformedEntry
from models import Asset, BuildStats, Chunk, Module

from .classify import classify
from .size import make_size, sum_sizes

logger = logging.getLogger(__name__)

COLLECTIONS = ("modules", "assets", "chunks")

# Byte counts and timestamps beyond this are not from a real build.
MAX_VALUE = 2 ** 63 - 1


# ── Field readers ─────────────────────────────────────────────────────────────
# Each reader either returns a clean value or raises MalformedEntry for the
# record it was handed.

def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite_number(value) -> bool:
    """A number that fits the model: not NaN or infinite, and not absurdly large."""
    if not _is_number(value):
        return False
    if isinstance(value, float) and not math.isfinite(value):
        return False
    return abs(value) <= MAX_VALUE


def _coerce_id(value) -> str | None:
    """Ids may be numbers or strings in the source; always strings here."""
    if isinstance(value, str):
        return value
    if _is_number(value):
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        return str(value)
    return None


def _read_id(record: Mapping, collection: str, index: int) -> str:
    if record.get("id") is None:
        raise MalformedEntry(collection, index, "missing id")
    entry_id = _coerce_id(record["id"])
    if entry_id is None:
        raise MalformedEntry(collection, index, f"unusable id {record['id']!r}")
    return entry_id


def _read_name(record: Mapping, collection: str, index: int) -> str:
    name = record.get("name")
    if not isinstance(name, str) or not name:
        raise MalformedEntry(collection, index, "missing name")
    return name


def _read_bytes(record: Mapping, key: str, collection: str, index: int, required: bool = True):
    value = record.get(key)
    if value is None:
        if required:
            raise MalformedEntry(collection, index, f"missing {key}")
        return None
    if not _is_finite_number(value):
        raise MalformedEntry(collection, index, f"{key} is not a usable number: {value!r}")
    if value < 0:
        raise MalformedEntry(collection, index, f"{key} is negative: {value!r}")
    return int(value)


def _read_size(record: Mapping, collection: str, index: int):
    raw  = _read_bytes(record, "size", collection, index)
    gzip = _read_bytes(record, "gzipSize", collection, index, required=False)
    return make_size(raw, gzip)


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _records(raw: Mapping, collection: str):
    """Yield (index, record) for the mapping-shaped entries of a collection."""
    for index, record in enumerate(raw.get(collection) or []):
        if not isinstance(record, Mapping):
            _skip(MalformedEntry(collection, index, f"expected an object, got {type(record).__name__}"))
            continue
        yield index, record


def _skip(err: MalformedEntry) -> None:
    logger.warning("Skipping malformed entry %s", err)


# ── Input validation ──────────────────────────────────────────────────────────

def check_format(raw) -> None:
    """Raise InvalidFormat unless raw looks like a stats document."""
    if not isinstance(raw, Mapping):
        raise InvalidFormat(f"Stats must be a JSON object, got {type(raw).__name__}.")
    present = [c for c in COLLECTIONS if raw.get(c) is not None]
    if not present:
        raise InvalidFormat(
            "The stats object has none of 'modules', 'assets' or 'chunks'; "
            "it does not look like bundler stats output."
        )
    for c in present:
        if not isinstance(raw[c], list):
            raise InvalidFormat(f"'{c}' must be a list, got {type(raw[c]).__name__}.")


# ── Passes ────────────────────────────────────────────────────────────────────

def _create_modules(raw: Mapping) -> tuple[dict[str, dict], dict[str, Mapping]]:
    """
    Creation pass. Returns (index, sources):
        index   — id → partial module fields, in input order
        sources — id → the raw record, for the resolution pass
    """
    index:   dict[str, dict]    = {}
    sources: dict[str, Mapping] = {}
    for i, record in _records(raw, "modules"):
        try:
            module_id = _read_id(record, "modules", i)
            path      = _read_name(record, "modules", i)
            size      = _read_size(record, "modules", i)
            if module_id in index:
                raise MalformedEntry("modules", i, f"duplicate id {module_id!r}")
        except MalformedEntry as err:
            _skip(err)
            continue
        index[module_id] = {
            "id":   module_id,
            "name": path.rstrip("/").split("/")[-1] or path,
            "path": path,
            "size": size,
            "type": classify(path),
        }
        sources[module_id] = record
    return index, sources


def _resolve_reasons(
    index: dict[str, dict],
    sources: dict[str, Mapping],
) -> tuple[dict[str, set], dict[str, set], int]:
    """
    Resolution pass. Returns (dependencies, dependents, dropped) where the
    first two are symmetric adjacency sets keyed by module id.
    """
    dependencies: dict[str, set] = defaultdict(set)
    dependents:   dict[str, set] = defaultdict(set)
    dropped = 0
    for source_id, record in sources.items():
        for reason in _as_list(record.get("reasons")):
            if not isinstance(reason, Mapping):
                dropped += 1
                continue
            ref = reason.get("moduleId")
            if ref is None:
                ref = reason.get("moduleIdentifier")
            target_id = _coerce_id(ref)
            if target_id == source_id:
                continue
            if target_id is None or target_id not in index:
                dropped += 1
                continue
            dependencies[source_id].add(target_id)
            dependents[target_id].add(source_id)
    return dependencies, dependents, dropped


def _normalize_assets(raw: Mapping) -> list[Asset]:
    assets = []
    for i, record in _records(raw, "assets"):
        try:
            name = _read_name(record, "assets", i)
            size = _read_size(record, "assets", i)
        except MalformedEntry as err:
            _skip(err)
            continue
        chunk_ids = {_coerce_id(c) for c in _as_list(record.get("chunks"))}
        chunk_ids.discard(None)
        assets.append(Asset(name=name, size=size, type=classify(name), chunks=frozenset(chunk_ids)))
    return assets


def _chunk_module_ids(record: Mapping, index: dict[str, dict]) -> tuple[list[str], int]:
    ids: list[str] = []
    dropped = 0
    for entry in _as_list(record.get("modules")):
        ref = entry.get("id") if isinstance(entry, Mapping) else entry
        module_id = _coerce_id(ref)
        if module_id is None or module_id not in index:
            dropped += 1
            continue
        if module_id not in ids:
            ids.append(module_id)
    return ids, dropped


def _normalize_chunks(raw: Mapping, index: dict[str, dict]) -> tuple[list[Chunk], list[str], int]:
    """Returns (chunks, entrypoints, dropped module references)."""
    chunks:      list[Chunk] = []
    entrypoints: list[str]   = []
    dropped = 0
    for i, record in _records(raw, "chunks"):
        try:
            chunk_id = _read_id(record, "chunks", i)
            size     = _read_size(record, "chunks", i)
        except MalformedEntry as err:
            _skip(err)
            continue
        names = [n for n in _as_list(record.get("names")) if isinstance(n, str) and n]
        module_ids, missing = _chunk_module_ids(record, index)
        dropped += missing
        chunks.append(Chunk(
            id=chunk_id,
            name=names[0] if names else chunk_id,
            size=size,
            modules=tuple(module_ids),
        ))
        # Heuristic: the first resolvable module of a named chunk is taken as
        # an entrypoint. It is not guaranteed to be the real entry module.
        if names and module_ids and module_ids[0] not in entrypoints:
            entrypoints.append(module_ids[0])
    return chunks, entrypoints, dropped


def _timestamp(raw: Mapping) -> int:
    built_at = raw.get("builtAt")
    if _is_finite_number(built_at):
        return int(built_at)
    return int(time.time() * 1000)


# ── Entry point ───────────────────────────────────────────────────────────────

def normalize(raw) -> BuildStats:
    """
    Normalize a raw stats object into a fresh BuildStats.

    Raises InvalidFormat when the input has none of modules/assets/chunks.
    Malformed individual records are logged and skipped; references to
    modules outside the loaded set are dropped.
    """
    check_format(raw)

    index, sources = _create_modules(raw)
    dependencies, dependents, dropped_reasons = _resolve_reasons(index, sources)
    modules = [
        Module(
            **fields,
            dependencies=frozenset(dependencies.get(module_id, ())),
            dependents=frozenset(dependents.get(module_id, ())),
        )
        for module_id, fields in index.items()
    ]

    assets = _normalize_assets(raw)
    chunks, entrypoints, dropped_refs = _normalize_chunks(raw, index)

    if dropped_reasons or dropped_refs:
        logger.debug(
            "Dropped %d unresolved reasons and %d unresolved chunk module references",
            dropped_reasons, dropped_refs,
        )

    total_time = raw.get("time")
    return BuildStats(
        timestamp=_timestamp(raw),
        total_size=sum_sizes(a.size for a in assets),
        total_time=total_time if _is_finite_number(total_time) else None,
        modules=tuple(modules),
        assets=tuple(assets),
        chunks=tuple(chunks),
        entrypoints=tuple(entrypoints),
    )
