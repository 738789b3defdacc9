"""Cost functions that score voltage assignments for the tabu search."""

from __future__ import annotations

import heapq
import logging
import math
from collections import Counter, deque
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from .edge import Edge
from .graph import Graph
from .group import Group
from .lift import lift
from .rng import get_random_int, shuffle
from .voltages import filter_inverses

logger = logging.getLogger(__name__)

CycleSet = frozenset[tuple[int, int]]

WALK_CLOSED_PENALTY = 1000


def _ratio(numerator: float, denominator: float) -> float:
    if denominator == 0:
        if numerator == 0:
            return math.nan
        return math.copysign(math.inf, numerator)
    return numerator / denominator


@dataclass(frozen=True)
class CostFunction:
    """A named scoring function together with the parameters it was built with."""

    func: Callable[[Graph, Group, Edge | None], float]
    name: str
    param_names: tuple[str, ...] = field(default_factory=tuple)
    param_values: tuple[float, ...] = field(default_factory=tuple)

    def __call__(self, graph: Graph, group: Group, edge: Edge | None) -> float:
        return self.func(graph, group, edge)

    def params(self) -> str:
        """Return the parameters as ``{name=value, ...}``."""
        body = ", ".join(
            f"{name}={value:.6f}" for name, value in zip(self.param_names, self.param_values)
        )
        return "{" + body + "}"


def average_simplified_shortest_cycles(
    graph: Graph,
    group: Group,
    amount_of_cycles: int,
    weights: Sequence[int] | None = None,
) -> float:
    """Return the weighted mean of the smallest edge cycle lengths in the lift.

    For every edge of the lift the shortest cycle through it is measured and
    the ``amount_of_cycles`` smallest are kept. Returns -1 if the lift is
    disconnected.
    """
    weights = list(weights or [])
    if weights and len(weights) != amount_of_cycles:
        raise ValueError("The amount of weights should be equal to requested amount of cycles.")
    if amount_of_cycles < 1:
        raise ValueError("amount_of_cycles must be positive")

    lifted = lift(graph, group)
    if not lifted.is_connected():
        return -1.0

    lengths: list[int] = []
    largest = -1
    for v, neighbours in enumerate(lifted.adjacency):
        for u in neighbours:
            if u <= v:
                continue
            try:
                dist = lifted.distance(v, u, False)[0] + 1
            except ValueError:
                continue

            if len(lengths) < amount_of_cycles:
                lengths.append(dist)
                continue

            if largest == -1:
                largest = max(range(amount_of_cycles), key=lengths.__getitem__)
            if dist < lengths[largest]:
                lengths[largest] = dist
                largest = -1

    total = 0
    weight_sum = 0
    for i, length in enumerate(lengths):
        weight = weights[i] if weights else 1
        total += length * weight
        weight_sum += weight
    return _ratio(total, weight_sum)


def fundamental_cycles(graph: Graph) -> list[list[int]]:
    """Return vertex paths closing cycles against a smallest-first spanning tree.

    Each path runs from the second endpoint of a closing edge back to the first.
    Raises ValueError if the graph is disconnected.
    """
    n = len(graph.adjacency)
    connected: set[int] = set()
    explored: set[int] = set()
    unexplored = [0]
    not_in_tree: set[tuple[int, int]] = set()
    tree: list[list[int]] = [[] for _ in range(n)]

    while len(explored) != n:
        if not unexplored:
            raise ValueError("graph is not connected")
        current = heapq.heappop(unexplored)
        explored.add(current)
        connected.add(current)
        for v in graph.adjacency[current]:
            if v not in connected:
                connected.add(v)
                heapq.heappush(unexplored, v)
                tree[current].append(v)
                tree[v].append(current)
            else:
                not_in_tree.add((current, v))
                not_in_tree.add((v, current))

    result: list[list[int]] = []
    for first, second in sorted(not_in_tree):
        if first > second:
            continue
        distances = [-1] * n
        parent = [-1] * n
        distances[first] = 0
        queue = deque([first])
        while queue:
            current = queue.popleft()
            for neighbour in tree[current]:
                if current == first and neighbour == second:
                    continue
                if distances[neighbour] == -1:
                    distances[neighbour] = distances[current] + 1
                    parent[neighbour] = current
                    queue.append(neighbour)
                if neighbour == second:
                    path = []
                    v = second
                    while v != -1:
                        path.append(v)
                        v = parent[v]
                    result.append(path)
    return result


def cycles(graph: Graph) -> set[CycleSet]:
    """Return cycles built from the fundamental cycles, each as a set of edges ``(low, high)``."""
    found = fundamental_cycles(graph)
    if not found:
        return set()

    basis: list[CycleSet] = []
    for cycle in found:
        edges = set()
        for i, start in enumerate(cycle):
            end = cycle[(i + 1) % len(cycle)]
            edges.add((min(start, end), max(start, end)))
        basis.append(frozenset(edges))

    result: set[CycleSet] = {basis[0]}
    pool: set[CycleSet] = {basis[0]}
    for bi in basis[1:]:
        r: set[CycleSet] = set()
        r_star: set[CycleSet] = set()
        for t in pool:
            combined = t ^ bi
            if t.isdisjoint(bi):
                r_star.add(combined)
            else:
                r.add(combined)

        r_new = set(r)
        for u in r:
            for v in r:
                if u != v and u <= v:
                    r_new.discard(v)
                    r_star.add(v)

        result |= r_new
        result.add(bi)
        pool |= r_new
        pool |= r_star
        pool.add(bi)
    return result


def random_cycle_length(graph: Graph) -> int:
    """Return the length found by one randomised depth-first cycle search, or -1."""
    n = len(graph.adjacency)
    visited: set[int] = set()
    parents = [-1] * n
    current = get_random_int(0, n - 1)
    stack = [current]

    while stack:
        current = stack.pop()
        if current in visited:
            continue
        visited.add(current)

        neighbours = list(graph.adjacency[current])
        shuffle(neighbours)
        for neighbour in neighbours:
            if neighbour not in visited:
                stack.append(neighbour)
                parents[neighbour] = current
            elif parents[current] != neighbour:
                length = 1
                temp = current
                while temp != neighbour and temp != -1:
                    temp = parents[temp]
                    length += 1
                if temp == -1:
                    continue
                return length + 1
    return -1


def monte_carlo_average_cycle_length(graph: Graph, group: Group, n: int) -> float:
    """Return the mean of ``n`` random cycle lengths in the lift, or -1 if it is disconnected."""
    lifted = lift(graph, group)
    if not lifted.is_connected():
        return -1.0
    total = sum(random_cycle_length(lifted) for _ in range(n))
    return _ratio(total, n)


def average_cycle_length(graph: Graph, group: Group, ignore_count: int) -> float:
    """Return the mean cycle length in the lift, ignoring the ``ignore_count`` shortest.

    Returns -1 if the lift is disconnected.
    """
    lifted = lift(graph, group)
    if not lifted.is_connected():
        return -1.0

    found = cycles(lifted)
    counts = Counter(len(cycle) for cycle in found)
    total = 0
    ignored = 0
    for length in sorted(counts):
        if ignored < ignore_count:
            ignored += counts[length]
            if ignored > ignore_count:
                total += (ignored - ignore_count) * length
        else:
            total += counts[length] * length
    return _ratio(total, len(found) - ignore_count)


def average_fundamental_cycle_length(graph: Graph, group: Group, ignore_count: int) -> float:
    """Return the mean fundamental cycle length in the lift, skipping the shortest ones.

    Returns -1 if the lift is disconnected.
    """
    lifted = lift(graph, group)
    if not lifted.is_connected():
        return -1.0

    lengths = sorted(len(cycle) for cycle in fundamental_cycles(lifted))
    total = float(sum(lengths[ignore_count:])) if ignore_count >= 0 else float(sum(lengths))
    return _ratio(total, len(lengths) - ignore_count)


def voltage_diversity(graph: Graph, group: Group) -> float:
    """Penalise identity voltages, inverse pairs, repeated voltages and repeated orders."""
    legal = filter_inverses(graph.edges_without_default_voltage())

    identities = inverses = repeated_orders = repeated_voltages = 0
    orders: set[int | float] = set()
    seen: set[int] = set()
    for edge in legal:
        if edge.voltage < 0:
            raise ValueError(f"edge {edge.start}->{edge.end} has no voltage")
        order = group.power_to_identity[edge.voltage]
        if order == 1:
            identities += 1
        elif group.inverse[edge.voltage] in seen:
            inverses += 1
        elif edge.voltage in seen:
            repeated_voltages += 1
        elif order > 1:
            if order in orders:
                repeated_orders += 1
            else:
                orders.add(order)
        seen.add(edge.voltage)

    return float(-20 * identities - 10 * inverses - 10 * repeated_voltages - repeated_orders)


def _skip(edge: Edge, last_taken: Edge | None) -> bool:
    if edge.voltage == -1:
        return True
    if edge.reverse_edge is last_taken:
        return True
    return edge.start == edge.end and edge.reverse_edge is None and edge is last_taken


def count_max_len_paths(
    current: int,
    target: int,
    depth: int,
    max_length: int,
    last_taken: Edge | None,
    current_voltage: int,
    graph: Graph,
    group: Group,
) -> int:
    """Count non-backtracking walks reaching ``target`` with net identity at depth ``max_length - 1``."""
    if depth >= max_length:
        return 0

    table = group.multiplication_table
    row = graph.neighbour_to_edge.get(current, {})
    found = 0
    for neighbour in sorted(row):
        for edge in row[neighbour]:
            if _skip(edge, last_taken):
                continue
            voltage = table[current_voltage][edge.voltage]
            if neighbour == target and voltage == 0 and depth == max_length - 1:
                found += 1
            found += count_max_len_paths(
                neighbour, target, depth + 1, max_length, edge, voltage, graph, group
            )
    return found


def _population_variance(values: Sequence[int]) -> float:
    mean = _ratio(float(sum(values)), len(values))
    return _ratio(sum((value - mean) ** 2 for value in values), len(values))


def walk_regularity(graph: Graph, group: Group) -> float:
    """Return minus the smaller variance of girth-walk counts over vertices and edges."""
    vertex_counts = [0] * len(graph.adjacency)
    edge_counts = [0] * len(graph.edges)

    girth = lift(graph, group).girth()
    for i, edge in enumerate(graph.edges):
        if edge.reverse_edge is None or edge.start > edge.end:
            continue
        count = count_max_len_paths(
            edge.start, edge.end, 1, girth, edge.reverse_edge, 0, graph, group
        )
        vertex_counts[edge.start] += count
        vertex_counts[edge.end] += count
        edge_counts[i] += count

    return -min(_population_variance(vertex_counts), _population_variance(edge_counts))


def sample_walk(
    current: int,
    target: int,
    depth: int,
    max_length: int,
    last_taken: Edge | None,
    current_voltage: int,
    graph: Graph,
    group: Group,
) -> tuple[int, int]:
    """Follow a random non-backtracking walk to ``target``.

    Returns the depth and net voltage on arriving at ``target`` at depth
    ``max_length - 2`` or later, or ``(-1, -1)`` if no such walk is found.
    The graph's per-neighbour edge lists are shuffled in place.
    """
    if depth >= max_length:
        return -1, -1

    table = group.multiplication_table
    neighbours = list(graph.adjacency[current])
    shuffle(neighbours)
    row = graph.neighbour_to_edge.get(current, {})
    for neighbour in neighbours:
        edges_to_neighbour = row.get(neighbour, [])
        shuffle(edges_to_neighbour)
        for edge in edges_to_neighbour:
            if _skip(edge, last_taken):
                continue
            voltage = table[current_voltage][edge.voltage]
            if neighbour == target and depth >= max_length - 2:
                return depth, voltage
            result = sample_walk(
                neighbour, target, depth + 1, max_length, edge, voltage, graph, group
            )
            if result[0] != -1:
                return result
    return -1, -1


def walk_sampler(
    group: Group, graph: Graph, edge: Edge | None, min_girth: int, n: int
) -> float:
    """Score an assignment by sampling ``n`` walks that close an edge picked at random."""
    edges = graph.edges_without_default_voltage()
    chosen = edges[get_random_int(0, len(edges) - 1)]
    taken = chosen.reverse_edge if chosen.reverse_edge is not None else chosen

    total = 0.0
    for _ in range(n):
        depth, voltage = sample_walk(
            chosen.start, chosen.end, 1, min_girth - 1, taken, taken.voltage, graph, group
        )
        if depth == -1:
            logger.info("Failed to sample walk")
            continue
        if voltage == 0:
            total += WALK_CLOSED_PENALTY
        else:
            total += 1.0 / (depth * group.power_to_identity[voltage])
    return -total


def simplified_shortest_cycles_cost(
    amount_of_cycles: int, weights: Sequence[int] | None = None
) -> CostFunction:
    """Build a cost function from :func:`average_simplified_shortest_cycles`."""
    weights = list(weights or [])
    return CostFunction(
        lambda graph, group, edge: average_simplified_shortest_cycles(
            graph, group, amount_of_cycles, weights
        ),
        "SimplifiedShortestCycles",
        ("amountOfCycles", "weights"),
        (float(amount_of_cycles), float(len(weights))),
    )


def average_cycle_length_cost(ignore_count: int) -> CostFunction:
    """Build a cost function from :func:`average_cycle_length`."""
    return CostFunction(
        lambda graph, group, edge: average_cycle_length(graph, group, ignore_count),
        "AverageCycleLength",
        ("ignoreCount",),
        (float(ignore_count),),
    )


def average_fundamental_cycle_length_cost(ignore_count: int) -> CostFunction:
    """Build a cost function from :func:`average_fundamental_cycle_length`."""
    return CostFunction(
        lambda graph, group, edge: average_fundamental_cycle_length(graph, group, ignore_count),
        "AverageFundamentalCycleLength",
        ("ignoreCount",),
        (float(ignore_count),),
    )


def monte_carlo_cycle_length_cost(n: int) -> CostFunction:
    """Build a cost function from :func:`monte_carlo_average_cycle_length`."""
    return CostFunction(
        lambda graph, group, edge: monte_carlo_average_cycle_length(graph, group, n),
        "MonteCarloCycleLength",
        ("N",),
        (float(n),),
    )


def random_cost() -> CostFunction:
    """Build a cost function returning random scores."""
    return CostFunction(
        lambda graph, group, edge: float(-get_random_int(200000, 300000)),
        "Random",
    )


def voltage_diversity_cost() -> CostFunction:
    """Build a cost function from :func:`voltage_diversity`."""
    return CostFunction(
        lambda graph, group, edge: voltage_diversity(graph, group),
        "VoltageDiversity",
    )


def walk_regularity_cost() -> CostFunction:
    """Build a cost function from :func:`walk_regularity`."""
    return CostFunction(
        lambda graph, group, edge: walk_regularity(graph, group),
        "WalkRegularity",
    )


def walk_sampler_cost(n: int, min_girth: int) -> CostFunction:
    """Build a cost function from :func:`walk_sampler`."""
    return CostFunction(
        lambda graph, group, edge: walk_sampler(group, graph, edge, min_girth, n),
        "WalkSampler",
        ("N", "minGirth"),
        (float(n), float(min_girth)),
    )