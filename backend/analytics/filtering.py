"""
Type filter and name search — pure functions only.

A module is visible when its type is active and the query is empty or a
case-insensitive substring of its name or path. The same visible set
feeds both the dependency graph (an edge shows only when both ends are
visible) and the hierarchy (only visible modules become leaves).
"""
from __future__ import annotations

from .classify import MODULE_TYPES


def _active(active_types) -> frozenset[str]:
    return frozenset(MODULE_TYPES if active_types is None else active_types)


def matches(module, active: frozenset[str], needle: str) -> bool:
    if module.type not in active:
        return False
    if not needle:
        return True
    return needle in module.name.casefold() or needle in module.path.casefold()


def filter_modules(modules, active_types=None, query: str = "") -> list:
    """
    Return the modules passing the filter, in input order.

    active_types — iterable of type tags; None means every type
    query        — substring searched in name and path, case-insensitive
    """
    active = _active(active_types)
    needle = (query or "").casefold()
    return [m for m in modules if matches(m, active, needle)]


def visible_ids(modules, active_types=None, query: str = "") -> list[str]:
    return [m.id for m in filter_modules(modules, active_types, query)]


def visible_edges(modules, visible: set[str] | None = None) -> list[tuple[str, str]]:
    """
    Dependency edges (source, target) whose endpoints are both visible.

    visible defaults to the ids of the modules given.
    """
    if visible is None:
        visible = {m.id for m in modules}
    return [
        (m.id, dep)
        for m in modules
        if m.id in visible
        for dep in sorted(m.dependencies)
        if dep in visible
    ]
