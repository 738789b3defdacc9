"""Run settings, canonicity checks, girth pruning and legal voltages."""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TextIO

from .edge import Edge
from .graph import Graph
from .group import Group

logger = logging.getLogger(__name__)

INITIAL_ASSIGNMENT_TIMEOUT = 3.0


class AlgorithmType(Enum):
    """Search algorithm used for a run."""

    BTA = "bta"
    TABU_SEARCH = "tabu_search"


@dataclass
class MainSetup:
    """Settings shared by every algorithm."""

    seed: int = 0
    k: int = 3
    n: int = 2
    min_girth: int = 3
    log_every: int = 10
    use_graph_automorphisms: bool = True
    use_group_automorphisms: bool = True


@dataclass
class BruteForceSetup:
    """Settings for the backtracking search; ``time_limit`` is in seconds."""

    time_limit: float


@dataclass
class TabuSearchSetup:
    """Settings for the tabu search; ``time_limit`` is in seconds."""

    time_limit: float
    max_iterations: int
    tabu_size_mult: float
    perturb_after_no_improvement: int
    neighbour_min_girth: int
    cost_function: Callable[[Graph, Group, Edge], float]
    tabu_size: int = 1


@dataclass
class RunSetup:
    """A complete run configuration, including where results are written."""

    ms: MainSetup
    algorithm: AlgorithmType
    algorithm_setup: BruteForceSetup | TabuSearchSetup
    out: TextIO = field(default_factory=lambda: sys.stdout)


@dataclass
class CanonicalStats:
    """Counts of assignments accepted and rejected by the canonicity check."""

    not_filtered: int = 0
    automorphism_filtered: int = 0
    graph_orbit_filtered: int = 0


_stats = CanonicalStats()


def canonical_stats() -> CanonicalStats:
    """Return a snapshot of the canonicity counters."""
    return replace(_stats)


def get_non_canonical_index(
    edges: Sequence[Edge], graph: Graph, group: Group, setup: RunSetup
) -> int:
    """Return the index at which the voltage assignment stops being canonical.

    An assignment is canonical when no group automorphism and no edge
    automorphism of the graph maps it to a lexicographically smaller one.
    Returns -1 when the whole assignment is canonical.
    """
    if setup.ms.use_group_automorphisms:
        for automorphism in group.automorphisms:
            for i, edge in enumerate(edges):
                image = automorphism[edge.voltage]
                if image > edge.voltage:
                    break
                if image < edge.voltage:
                    _stats.automorphism_filtered += 1
                    return i

    if setup.ms.use_graph_automorphisms:
        for automorphism in graph.edge_automorphisms:
            for i, (edge, image) in enumerate(zip(edges, automorphism)):
                if image.voltage > edge.voltage:
                    break
                if image.voltage < edge.voltage:
                    _stats.automorphism_filtered += 1
                    other = next((j for j, candidate in enumerate(edges) if candidate is image), -1)
                    return max(i, other)

    _stats.not_filtered += 1
    return -1


def find_path(
    current: int,
    target: int,
    depth: int,
    max_length: int,
    last_taken: Edge | None,
    current_voltage: int,
    graph: Graph,
    group: Group,
    strict: bool,
) -> bool:
    """Search for a non-backtracking closed walk with net voltage identity.

    The walk continues from ``current`` and must end at ``target``. With
    ``strict`` the walk must reach ``target`` exactly at depth
    ``max_length - 1``; otherwise any shorter depth counts too.
    """
    if depth >= max_length:
        return False

    table = group.multiplication_table
    row = graph.neighbour_to_edge.get(current, {})
    for neighbour in sorted(row):
        for edge in row[neighbour]:
            if edge.voltage == -1:
                continue
            if edge.reverse_edge is last_taken:
                continue
            if edge.start == edge.end and edge.reverse_edge is None and edge is last_taken:
                continue

            voltage = table[current_voltage][edge.voltage]
            if neighbour == target and voltage == 0 and (not strict or depth == max_length - 1):
                return True
            if find_path(neighbour, target, depth + 1, max_length, edge, voltage, graph, group, strict):
                return True
    return False


def _taken_edge(edge: Edge) -> Edge:
    return edge.reverse_edge if edge.reverse_edge is not None else edge


def cannot_achieve_min_girth(group: Group, graph: Graph, edge: Edge, setup: RunSetup) -> bool:
    """Return whether ``edge`` closes a cycle shorter than the minimum girth in the lift."""
    taken = _taken_edge(edge)
    return find_path(
        edge.start,
        edge.end,
        1,
        setup.ms.min_girth - 1,
        taken,
        taken.voltage,
        graph,
        group,
        False,
    )


def is_kgno_graph(
    group: Group, graph: Graph, setup: RunSetup, edges: Sequence[Edge]
) -> bool:
    """Return whether the lift has a cycle of the minimum girth but none one longer.

    Shorter cycles are assumed to have been ruled out already.
    """
    girth = setup.ms.min_girth

    def closes(length: int) -> bool:
        for edge in edges:
            taken = _taken_edge(edge)
            if find_path(edge.start, edge.end, 1, length, taken, taken.voltage, graph, group, True):
                return True
        return False

    if not closes(girth):
        return False
    return not closes(girth + 1)


def filter_inverses(edges: Sequence[Edge]) -> list[Edge]:
    """Keep one edge of every pair of mutually reverse edges."""
    result: list[Edge] = []
    illegal: set[Edge | None] = set()
    for edge in edges:
        if edge in illegal:
            continue
        result.append(edge)
        illegal.add(edge.reverse_edge)
    return result


def filter_orbit_inverses(graph: Graph, legal_edges: Sequence[Edge]) -> list[list[Edge]]:
    """Restrict the graph's edge orbits to ``legal_edges``, dropping empty orbits."""
    legal = set(legal_edges)
    result: list[list[Edge]] = []
    for orbit in graph.edge_orbits:
        filtered = [edge for edge in orbit if edge in legal]
        if filtered:
            result.append(filtered)
    return result


def voltages_for_edge(graph: Graph, group: Group, edge: Edge, min_girth: int) -> list[int]:
    """Return the voltages that cannot by themselves make a cycle shorter than ``min_girth``.

    Semi-edges may only carry involutions.
    """
    if edge.start == edge.end and edge.reverse_edge is None:
        return [
            element
            for element, power in enumerate(group.power_to_identity)
            if power == 2
        ]

    if edge.start == edge.end:
        loop_size = 1
    else:
        loop_size = graph.distance(edge.start, edge.end, True, True)[0] + 1

    return [
        element
        for element, power in enumerate(group.power_to_identity)
        if loop_size * power >= min_girth
    ]


def initial_assignment(
    edges: Sequence[Edge],
    group: Group,
    graph: Graph,
    legal_edge_voltages: Mapping[Edge, Sequence[int]],
    setup: RunSetup,
) -> bool:
    """Assign a canonical voltage to every edge that respects the minimum girth.

    Backtracks over ``legal_edge_voltages``. Returns False when no assignment
    exists or the search runs out of time.
    """
    for edge in edges:
        edge.set_voltage(-1, -1)
    if not edges:
        return True

    choice = [-1] * len(edges)
    start = time.monotonic()
    index = 0
    while True:
        edge = edges[index]
        options = legal_edge_voltages.get(edge, [])

        if choice[index] == len(options) - 1:
            choice[index] = -1
            edge.set_voltage(-1, -1)
            index -= 1
            if index < 0:
                break
            continue

        if time.monotonic() - start >= INITIAL_ASSIGNMENT_TIMEOUT:
            logger.info("Initial assignment took too long, giving up")
            return False

        choice[index] += 1
        voltage = options[choice[index]]
        edge.set_voltage(voltage, group.inverse[voltage])

        if cannot_achieve_min_girth(group, graph, edge, setup):
            continue

        if index == len(edges) - 1:
            breaks = get_non_canonical_index(edges, graph, group, setup)
            if breaks != -1:
                for i in range(index, breaks, -1):
                    edges[i].set_voltage(-1, -1)
                    choice[i] = -1
                index = breaks
                continue
            return True
        index += 1

    logger.info("Could not find an initial assignment")
    return False