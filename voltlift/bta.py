"""Backtracking enumeration of canonical voltage assignments."""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence

from .edge import Edge
from .filter import filter_and_write
from .graph import Graph
from .group import Group
from .lift import lift
from .voltages import (
    BruteForceSetup,
    RunSetup,
    cannot_achieve_min_girth,
    filter_inverses,
    get_non_canonical_index,
    voltages_for_edge,
)

logger = logging.getLogger(__name__)


def _max_semi_edges(graph: Graph) -> int:
    return max(
        (
            sum(
                1
                for edge in graph.neighbour_to_edge.get(v, {}).get(v, [])
                if edge.reverse_edge is None
            )
            for v in range(len(graph.adjacency))
        ),
        default=0,
    )


def _write_lift(graph: Graph, group: Group, setup: RunSetup) -> None:
    lifted = lift(graph, group)
    girth = lifted.girth()
    if girth < setup.ms.min_girth:
        logger.warning("Girth was smaller than expected: %s", girth)
        return
    filter_and_write(lifted, girth, setup.out)


def iter_bta(
    edges: Sequence[Edge],
    graph: Graph,
    group: Group,
    legal_edge_voltages: Mapping[Edge, Sequence[int]],
    setup: RunSetup,
) -> bool:
    """Enumerate canonical assignments and write every lift of large enough girth.

    Returns True when the search finished and False when it hit its time limit.
    """
    algorithm_setup = setup.algorithm_setup
    if not isinstance(algorithm_setup, BruteForceSetup):
        raise TypeError("iter_bta needs a BruteForceSetup")

    for edge in edges:
        edge.set_voltage(-1, -1)
    if not edges:
        _write_lift(graph, group, setup)
        return True

    choice = [-1] * len(edges)
    last = len(edges) - 1
    start = time.monotonic()
    index = 0
    while True:
        if time.monotonic() - start > algorithm_setup.time_limit:
            return False

        edge = edges[index]
        options = legal_edge_voltages.get(edge, [])

        if choice[index] == len(options) - 1:
            choice[index] = -1
            edge.set_voltage(-1, -1)
            index -= 1
            if index < 0:
                return True
            continue

        choice[index] += 1
        voltage = options[choice[index]]
        edge.set_voltage(voltage, group.inverse[voltage])

        if cannot_achieve_min_girth(group, graph, edge, setup):
            continue

        if index < last:
            index += 1
            continue

        breaks = get_non_canonical_index(edges, graph, group, setup)
        if breaks != -1:
            for i in range(index, breaks, -1):
                edges[i].set_voltage(-1, -1)
                choice[i] = -1
            index = breaks
            continue

        _write_lift(graph, group, setup)


def filtered_bta(graph: Graph, group: Group, setup: RunSetup) -> bool:
    """Run the backtracking search for ``graph`` over ``group``.

    Returns True at once when some edge has no legal voltage or the group has
    too few involutions for the semi-edges; otherwise returns what
    :func:`iter_bta` returns.
    """
    kept = filter_inverses(graph.edges_without_default_voltage())

    legal: dict[Edge, list[int]] = {}
    for edge in kept:
        legal[edge] = voltages_for_edge(graph, group, edge, setup.ms.min_girth)
        if not legal[edge]:
            return True

    if group.involution_count - 1 < _max_semi_edges(graph):
        return True

    return iter_bta(kept, graph, group, legal, setup)