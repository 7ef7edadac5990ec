from typing import Optional

from fastapi import APIRouter, Query

from store import get_stats
from analytics.filtering import filter_modules, visible_edges
from analytics.graph import compute_graph

router = APIRouter()


@router.get("/api/modules")
def list_modules(
    types: Optional[list[str]] = Query(None),
    q:     str                 = "",
):
    stats   = get_stats()
    visible = filter_modules(stats.modules, types, q)
    return {
        "ids":     [m.id for m in visible],
        "modules": [m.model_dump() for m in visible],
        "edges":   [{"source": s, "target": t} for s, t in visible_edges(visible)],
        "total":   len(stats.modules),
        "query":   q,
    }


@router.get("/api/graph")
def dependency_graph(
    types: Optional[list[str]] = Query(None),
    q:     str                 = "",
):
    stats = get_stats()
    return compute_graph(stats.modules, stats.entrypoints, types, q)
