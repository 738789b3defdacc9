"""Classification and output of lifted graphs."""

from __future__ import annotations

import sys
import weakref
from typing import TextIO

from .girth_regular import girth_regular_lambdas, has_no_cycle_of_length
from .graph import Graph

_seen_by_stream: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()
_seen_fallback: set[str] = set()


def _seen_for(out: TextIO) -> set[str]:
    try:
        return _seen_by_stream.setdefault(out, set())
    except TypeError:
        return _seen_fallback


def filter_and_write(
    graph: Graph,
    girth: int,
    out: TextIO | None = None,
    written: set[str] | None = None,
) -> list[str]:
    """Write the classes a connected regular graph belongs to and return the lines.

    Every graph gets a ``(k,g)-graph`` line; edge- and vertex-girth-regular
    graphs and graphs of odd girth without ``g+1`` cycles get one more line
    each. Graphs whose graph6 string is already in ``written`` are skipped;
    by default that is the set of graphs written earlier to ``out``.
    """
    if out is None:
        out = sys.stdout
    if written is None:
        written = _seen_for(out)

    if not graph.is_regular() or not graph.is_connected():
        return []

    n = len(graph.adjacency)
    k = len(graph.adjacency[0])
    g6 = graph.graph6()
    if g6 in written:
        return []
    written.add(g6)

    edge_lambda, vertex_lambda = girth_regular_lambdas(graph, girth)

    lines = [f"(k,g)-graph - {k} {girth} {n} - {g6}"]
    if edge_lambda != -1:
        lines.append(f"egr-graph - {k} {girth} {edge_lambda} {n} - {g6}")
    if vertex_lambda != -1:
        lines.append(f"vgr-graph - {k} {girth} {vertex_lambda} {n} - {g6}")
    if girth % 2 == 1 and has_no_cycle_of_length(graph, girth + 1):
        lines.append(f"(k,g,g+1)-graph - {k} {girth} {n} - {g6}")

    for line in lines:
        out.write(line + "\n")
    out.flush()
    return lines