"""Driving a search over base graphs and groups, plus the glue around it."""

from __future__ import annotations

import logging
import time
from collections import Counter
from collections.abc import Iterable, Sequence
from pathlib import Path

from .automorphisms import edge_automorphisms
from .bta import filtered_bta
from .edge import Edge
from .graph import Graph
from .graph_parser import parse_orbits
from .group import Group, parse_group_stream
from .tabu_search import tabu_search
from .voltages import AlgorithmType, RunSetup

logger = logging.getLogger(__name__)

MAX_AUTOMORPHISMS = 2000
MAX_AUTOMORPHISMS_LAST = 1000


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def run(graphs: Sequence[Graph], groups: Sequence[Group], setup: RunSetup) -> list[tuple[int, str]]:
    """Search every graph over every group with the configured algorithm.

    Returns ``(graph index, group name)`` for each backtracking search that
    stopped at its time limit.
    """
    logger.info("Starting main algorithm...")
    start = time.monotonic()
    total = len(graphs) * len(groups)
    done = 0
    unfinished: list[tuple[int, str]] = []

    for index, graph in enumerate(graphs):
        logger.info("Starting graph %d/%d", index + 1, len(graphs))
        for group in groups:
            if setup.algorithm is AlgorithmType.BTA:
                if not filtered_bta(graph, group, setup):
                    logger.info("BTA did not finish at group %s", group.name)
                    unfinished.append((index, group.name))
            elif setup.algorithm is AlgorithmType.TABU_SEARCH:
                tabu_search(graph, group, setup)
            else:
                raise ValueError(f"unknown algorithm {setup.algorithm!r}")

            done += 1
            if setup.ms.log_every > 0 and done % setup.ms.log_every == 0:
                logger.info(
                    "Progress: %d/%d combinations done in %dms.", done, total, _elapsed_ms(start)
                )

    logger.info("Done in %dms.", _elapsed_ms(start))
    return unfinished


def load_groups(path: str | Path, group_min: int, group_max: int) -> list[Group]:
    """Read the groups of order ``group_min`` to ``group_max`` from a group file.

    The file lists groups in order of increasing size, each ended by ``####``.
    """
    logger.info("Reading groups...")
    start = time.monotonic()
    result: list[Group] = []
    with open(path, encoding="utf-8") as handle:
        for group in parse_group_stream(handle):
            size = len(group.multiplication_table)
            if size < group_min:
                continue
            if size > group_max:
                break
            result.append(group)
    logger.info("Found %d groups in %dms.", len(result), _elapsed_ms(start))
    return result


def _assign(graphs: Sequence[Graph], index: int, orbit_text: str,
            generators: list[str], limit: int) -> None:
    if index >= len(graphs):
        raise ValueError("more automorphism output than graphs")
    graph = graphs[index]
    graph.set_orbits(parse_orbits(orbit_text))
    automorphisms = edge_automorphisms(generators, graph, limit)
    logger.info(
        "Graph %d has %d generators, %d automorphisms, %d orbits.",
        index + 1, len(generators), len(automorphisms), len(graph.orbits),
    )
    graph.edge_automorphisms = automorphisms


def parse_dreadnaut_output(lines: Iterable[str], graphs: Sequence[Graph]) -> int:
    """Read line-graph generators and orbits and attach them to ``graphs`` in order.

    Returns the number of graphs that received orbits and edge automorphisms.
    """
    logger.info("Calculating usable edge automorphisms...")
    start = time.monotonic()
    stream = (line.rstrip("\r\n") for line in lines)
    generators: list[str] = []
    current_generator = ""
    index = 0

    for line in stream:
        if line.startswith("level"):
            continue
        if line.startswith("   ("):
            current_generator += line[3:]
            continue
        if line.startswith("("):
            if current_generator:
                generators.append(current_generator)
            current_generator = line
            continue
        if not line.startswith("tctotal="):
            continue

        if current_generator:
            generators.append(current_generator)
            current_generator = ""

        orbit_text = ""
        for line in stream:
            if line.startswith("(") or "orbits" in line:
                _assign(graphs, index, orbit_text, generators, MAX_AUTOMORPHISMS)
                index += 1
                generators = []
                if line.startswith("("):
                    current_generator = line
                break
            orbit_text += line
        else:
            _assign(graphs, index, orbit_text, generators, MAX_AUTOMORPHISMS_LAST)
            index += 1
            break

    logger.info("Done calculating edge automorphisms in %dms.", _elapsed_ms(start))
    return index


def dreadnaut_input(graphs: Iterable[Graph]) -> str:
    """Return commands computing the automorphisms of each graph's line graph."""
    parts: list[str] = []
    for graph in graphs:
        line_graph = graph.line_graph()
        parts.append(f"+d n={len(line_graph)} $=0 g\n")
        for vertex, neighbours in enumerate(line_graph):
            parts.append(f"{vertex} :" + "".join(f" {j}" for j in neighbours) + ";\n")
        parts.append("$$xo\n")
    parts.append("q\n")
    return "".join(parts)


def encode_multigraph_to_simple_graph(multigraph: Sequence[Sequence[int]]) -> list[list[int]]:
    """Subdivide every loop and parallel edge so the result is a simple graph.

    Each loop at ``u`` becomes a new pendant vertex on ``u``; each edge ``u-v``
    becomes a path ``u-d-v`` through a new vertex ``d``.
    """
    n = len(multigraph)
    simple: list[list[int]] = [[] for _ in range(n)]

    for u, neighbours in enumerate(multigraph):
        for v, count in Counter(neighbours).items():
            if u == v:
                for _ in range(count):
                    dummy = len(simple)
                    simple.append([u])
                    simple[u].append(dummy)
                continue
            if u >= v:
                continue
            for _ in range(count):
                dummy = len(simple)
                simple.append([u, v])
                simple[u].append(dummy)
                simple[v].append(dummy)
    return simple


def fill_with_semi_edges(k: int, graphs: Iterable[Graph]) -> int:
    """Create edges for each graph and add semi-edges until it is ``k``-regular.

    Returns the number of graphs that received semi-edges. Raises ValueError
    when a graph cannot be made ``k``-regular this way.
    """
    changed_graphs = 0
    for graph in graphs:
        graph.create_edges_with_default_voltage()
        changed = False
        for v, neighbours in enumerate(graph.adjacency):
            for _ in range(k - len(neighbours)):
                neighbours.append(v)
                edge = Edge(v, v)
                graph.edges.append(edge)
                graph.neighbour_to_edge.setdefault(v, {}).setdefault(v, []).append(edge)
                graph.edges_without_spanning_tree.append(edge)
                changed = True
        if changed:
            changed_graphs += 1
        if any(len(neighbours) != k for neighbours in graph.adjacency):
            raise ValueError(f"graph is not {k}-regular: {graph.adjacency}")
    return changed_graphs