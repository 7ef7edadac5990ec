from typing import Optional

from fastapi import APIRouter, Query

from store import get_stats
from analytics.filtering import filter_modules
from analytics.hierarchy import build_hierarchy, drill_down

router = APIRouter()


@router.get("/api/hierarchy")
def hierarchy(
    types: Optional[list[str]] = Query(None),
    q:     str                 = "",
    path:  str                 = "",
):
    stats   = get_stats()
    visible = filter_modules(stats.modules, types, q)
    tree    = build_hierarchy(visible)
    node    = drill_down(tree, path)
    return {
        "tree":       node.model_dump(),
        "path":       node.path,
        "found":      node is not tree or not path.strip("/"),
        "total_size": tree.value,
    }
