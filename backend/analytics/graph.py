"""
Dependency graph payload for the force-directed view — pure functions only.

Nodes are the visible modules; links are dependency edges with both
endpoints visible. Degrees are counted inside the visible subgraph, so a
module whose neighbours are all filtered out reports zero.
"""
from __future__ import annotations

import networkx as nx

from .filtering import filter_modules, visible_edges


def build_dependency_graph(modules) -> nx.DiGraph:
    """DiGraph keyed by module id; an edge a → b means a depends on b."""
    G = nx.DiGraph()
    for m in modules:
        G.add_node(m.id)
    G.add_edges_from(visible_edges(modules))
    return G


def compute_graph(modules, entrypoints=(), active_types=None, query: str = "") -> dict:
    """
    Build the graph view for the current filter.

    Returns {nodes, links, total_nodes, total_links}; nodes keep input order.
    """
    visible = filter_modules(modules, active_types, query)
    G       = build_dependency_graph(visible)
    entry   = set(entrypoints)

    nodes = [
        {
            "id":            m.id,
            "name":          m.name,
            "path":          m.path,
            "type":          m.type,
            "size":          m.size.raw,
            "gzip":          m.size.gzip,
            "in_degree":     G.in_degree(m.id),
            "out_degree":    G.out_degree(m.id),
            "is_entrypoint": m.id in entry,
        }
        for m in visible
    ]
    links = [{"source": u, "target": v} for u, v in G.edges()]
    return {
        "nodes":       nodes,
        "links":       links,
        "total_nodes": G.number_of_nodes(),
        "total_links": G.number_of_edges(),
    }
