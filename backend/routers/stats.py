from typing import Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import BaseModel

from errors import InvalidFormat, StatsFileError
from store import STORE, get_stats
from queries.stats_file import read_mock_stats, read_stats_file
from analytics.classify import MODULE_TYPES
from analytics.normalize import normalize
from analytics.summary import compute_summary

router = APIRouter()


def _load(raw, source: str) -> dict:
    """Normalize raw stats and publish them unless a newer load got there first."""
    ticket = STORE.begin_load()
    try:
        stats = normalize(raw)
    except InvalidFormat as e:
        raise HTTPException(status_code=422, detail=str(e))
    published = STORE.publish(ticket, stats, source)
    result = compute_summary(stats)
    result["source"]    = source
    result["published"] = published
    return result


def _read(reader, *args):
    try:
        return reader(*args)
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StatsFileError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/api/stats")
def load_stats(raw: Any = Body(...)):
    return _load(raw, "request")


class StatsFileRequest(BaseModel):
    path: str


@router.post("/api/stats/file")
def load_stats_file(req: StatsFileRequest):
    raw = _read(read_stats_file, req.path)
    return _load(raw, req.path)


@router.post("/api/stats/mock")
def load_mock_stats():
    return _load(_read(read_mock_stats), "mock")


@router.get("/api/stats")
def current_stats():
    return get_stats().model_dump()


@router.get("/api/summary")
def summary():
    result = compute_summary(get_stats())
    result["source"] = STORE.source
    return result


@router.get("/api/types")
def module_types():
    return {"types": list(MODULE_TYPES)}
