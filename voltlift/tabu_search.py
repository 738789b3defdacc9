"""Tabu search over voltage assignments."""

from __future__ import annotations

import logging
import time
from collections import deque
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, replace

from .edge import Edge
from .filter import filter_and_write
from .graph import Graph
from .group import Group
from .lift import lift
from .rng import get_random_int, shuffle
from .voltages import (
    RunSetup,
    TabuSearchSetup,
    cannot_achieve_min_girth,
    filter_inverses,
    get_non_canonical_index,
    initial_assignment,
    voltages_for_edge,
)

logger = logging.getLogger(__name__)

_LOWEST_SCORE = -float(2**31 - 1)
_CLOSE = 1e-6


@dataclass(frozen=True)
class Change:
    """Assigning ``voltage`` to ``edge``."""

    edge: Edge
    voltage: int


def perturb(
    edges: Sequence[Edge],
    group: Group,
    graph: Graph,
    legal_edge_voltages: Mapping[Edge, Sequence[int]],
    setup: RunSetup,
) -> bool:
    """Restart from a fresh assignment found with shuffled voltage orders."""
    shuffled: dict[Edge, list[int]] = {}
    for edge, voltages in legal_edge_voltages.items():
        options = list(voltages)
        shuffle(options)
        shuffled[edge] = options
    return initial_assignment(edges, group, graph, shuffled, setup)


def _write_if_good(graph: Graph, group: Group, chosen: Edge, setup: RunSetup) -> None:
    if cannot_achieve_min_girth(group, graph, chosen, setup):
        return
    lifted = lift(graph, group)
    girth = lifted.girth()
    if girth >= setup.ms.min_girth:
        filter_and_write(lifted, girth, setup.out)


def _search(
    edges: Sequence[Edge],
    graph: Graph,
    group: Group,
    legal: Mapping[Edge, Sequence[int]],
    setup: RunSetup,
    ts: TabuSearchSetup,
    tabu_size: int,
) -> None:
    neighbour_setup = replace(
        setup, ms=replace(setup.ms, min_girth=max(ts.neighbour_min_girth, 3))
    )
    inverse = group.inverse
    start = time.monotonic()

    if not initial_assignment(edges, group, graph, legal, neighbour_setup):
        return

    iterations = 0
    since_improvement = 0
    global_best = -1.0
    tabu_list: deque[Change] = deque()
    tabu_set: set[Change] = set()
    chosen = edges[0]

    while True:
        iterations += 1
        since_improvement += 1
        if iterations >= ts.max_iterations:
            break

        if since_improvement >= ts.perturb_after_no_improvement:
            if not perturb(edges, group, graph, legal, setup):
                return
            since_improvement = 0
            tabu_set.clear()
            tabu_list.clear()

        if ts.time_limit > 0 and time.monotonic() - start > ts.time_limit:
            break

        _write_if_good(graph, group, chosen, setup)

        best_changes: list[Change] = []
        best_score = _LOWEST_SCORE
        for edge in edges:
            for voltage in legal.get(edge, []):
                old = edge.voltage
                if old == voltage:
                    continue
                edge.set_voltage(voltage, inverse[voltage])
                try:
                    if cannot_achieve_min_girth(group, graph, edge, neighbour_setup):
                        continue
                    if get_non_canonical_index(edges, graph, group, setup) != -1:
                        continue

                    change = Change(edge, voltage)
                    score = ts.cost_function(graph, group, edge)
                    is_tabu = change in tabu_set
                    is_global_best = score > global_best
                    if (score > best_score and not is_tabu) or is_global_best:
                        best_score = score
                        best_changes = [change]
                        if is_global_best:
                            since_improvement = 0
                            global_best = score
                    elif abs(score - best_score) < _CLOSE and not is_tabu:
                        best_changes.append(change)
                finally:
                    edge.set_voltage(old, inverse[old])

        if not best_changes:
            if not perturb(edges, group, graph, legal, setup):
                return
            since_improvement = 0
            tabu_set.clear()
            tabu_list.clear()
            continue

        best = best_changes[get_random_int(0, len(best_changes) - 1)]
        undo = Change(best.edge, inverse[best.edge.voltage])
        tabu_list.append(undo)
        tabu_set.add(undo)
        if len(tabu_list) > tabu_size:
            tabu_set.discard(tabu_list.popleft())
        best.edge.set_voltage(best.voltage, inverse[best.voltage])
        chosen = best.edge


def tabu_search(graph: Graph, group: Group, setup: RunSetup) -> None:
    """Search for lifts of large girth by tabu search, writing those found."""
    ts = setup.algorithm_setup
    if not isinstance(ts, TabuSearchSetup):
        raise TypeError("tabu_search needs a TabuSearchSetup")

    kept = filter_inverses(graph.edges_without_default_voltage())
    if not kept:
        return

    legal: dict[Edge, list[int]] = {}
    for edge in kept:
        legal[edge] = voltages_for_edge(graph, group, edge, setup.ms.min_girth)
        if not legal[edge]:
            return

    tabu_size = max(1, int(len(group.multiplication_table) * ts.tabu_size_mult))
    _search(kept, graph, group, legal, setup, ts, tabu_size)