"""Lifts (derived graphs) of voltage graphs."""

from __future__ import annotations

from .graph import Graph
from .group import Group


def lift(graph: Graph, group: Group) -> Graph:
    """Return the derived graph of ``graph`` with voltages in ``group``.

    Vertex ``v`` with group element ``g`` becomes vertex ``v * |G| + g``; an
    edge from ``v`` to ``u`` with voltage ``a`` joins ``(v, g)`` and ``(u, g*a)``.
    """
    table = group.multiplication_table
    order = len(table)
    total = len(graph.adjacency) * order
    adjacency: list[list[int]] = [[] for _ in range(total)]

    for v in range(total):
        v_vert, v_group = divmod(v, order)
        row = graph.neighbour_to_edge.get(v_vert, {})
        for u_vert in sorted(w for w in row if w >= v_vert):
            targets = []
            for edge in row[u_vert]:
                if edge.voltage < 0:
                    raise ValueError(f"edge {edge.start}->{edge.end} has no voltage")
                targets.append(table[v_group][edge.voltage])
            for u_group in sorted(targets):
                u = u_vert * order + u_group
                if u >= v:
                    adjacency[v].append(u)
                    adjacency[u].append(v)

    return Graph(adjacency=adjacency)


def girth_of_lift(graph: Graph, group: Group) -> int | float:
    """Return the girth of the lift of ``graph`` over ``group``."""
    return lift(graph, group).girth()