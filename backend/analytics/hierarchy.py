"""
Path hierarchy for drill-down size views — pure functions only.

Module paths are split on "/" into a trie. Every segment but the last is a
folder; the last carries the module. Folder values are recomputed
bottom-up once the trie is complete, so each folder is exactly the sum of
the leaves below it. Children are ordered by descending value, then name.

Path collisions (two modules with one path, or a module whose path is also
a folder prefix of another) do not overwrite anything: the node becomes a
folder and each colliding module hangs under it as its own leaf.
"""
from __future__ import annotations

from config import ROOT_NAME
from models import HierarchyNode, Module


def _segments(path: str) -> list[str]:
    return [p for p in path.split("/") if p]


def _new_trie_node(name: str, path: str) -> dict:
    return {"name": name, "path": path, "children": {}, "modules": []}


def _insert(root: dict, module: Module) -> None:
    node  = root
    parts: list[str] = []
    for segment in _segments(module.path) or [module.path]:
        parts.append(segment)
        child = node["children"].get(segment)
        if child is None:
            child = _new_trie_node(segment, "/".join(parts))
            node["children"][segment] = child
        node = child
    node["modules"].append(module)


def _leaf(name: str, path: str, module: Module) -> HierarchyNode:
    return HierarchyNode(
        name=name,
        path=path,
        type=module.type,
        value=module.size.raw,
        origin_module=module,
    )


def _order(nodes: list[HierarchyNode]) -> tuple[HierarchyNode, ...]:
    def key(n: HierarchyNode):
        return (-n.value, n.name, n.origin_module.id if n.origin_module else "")
    return tuple(sorted(nodes, key=key))


def _freeze(node: dict) -> HierarchyNode:
    """Post-order: children are frozen (and valued) before their parent."""
    modules = node["modules"]
    if len(modules) == 1 and not node["children"]:
        return _leaf(node["name"], node["path"], modules[0])

    children = [_freeze(child) for child in node["children"].values()]
    children.extend(_leaf(m.name, node["path"], m) for m in modules)
    return HierarchyNode(
        name=node["name"],
        path=node["path"],
        type="folder",
        value=sum(c.value for c in children),
        children=_order(children),
    )


def build_hierarchy(modules) -> HierarchyNode:
    """
    Build the folder tree for a set of modules.

    modules — iterable of Module, typically the filtered visible set
    Returns the synthetic root folder (path "") whose value is the total raw
    size of all modules given.
    """
    root = _new_trie_node(ROOT_NAME, "")
    for module in modules:
        _insert(root, module)
    return _freeze(root)


def drill_down(tree: HierarchyNode, path) -> HierarchyNode:
    """
    Return the subtree rooted at path ("a/b/c" or a list of segments).

    Falls back to the whole tree when path is empty or does not exist.
    Where a folder and a leaf share a name, the folder wins.

    Node paths are the non-empty segments of a module path joined by "/",
    so "/abs/a.js" lives at "abs/a.js" and a leading or doubled "/" in the
    query is ignored the same way. The module's own path is unchanged on
    its origin_module.
    """
    segments = _segments(path) if isinstance(path, str) else [s for s in (path or []) if s]
    node = tree
    for segment in segments:
        matches = [c for c in node.children if c.name == segment]
        if not matches:
            return tree
        folders = [c for c in matches if not c.is_leaf]
        node = folders[0] if folders else matches[0]
    return node


def iter_nodes(tree: HierarchyNode):
    """Pre-order walk over every node of the tree."""
    stack = [tree]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))
