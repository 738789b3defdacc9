"""Cycle checks and girth-regularity parameters of graphs."""

from __future__ import annotations

import logging
import math
from collections import deque

from .graph import Graph

logger = logging.getLogger(__name__)

PathCache = dict[tuple[int, int], tuple[float, int]]


def has_no_cycle_of_length(graph: Graph, length: int) -> bool:
    """Return whether the graph has no cycle of exactly ``length`` vertices."""
    adjacency = graph.adjacency
    n = len(adjacency)

    def closes(current: int, start: int, remaining: int, visited: list[bool]) -> bool:
        if remaining == 0:
            return start in adjacency[current]
        for neighbour in adjacency[current]:
            if visited[neighbour] or neighbour < start:
                continue
            visited[neighbour] = True
            if closes(neighbour, start, remaining - 1, visited):
                return True
            visited[neighbour] = False
        return False

    for start in range(n - length + 1):
        visited = [False] * n
        visited[start] = True
        if closes(start, start, length - 1, visited):
            return False
    return True


def number_of_shortest_paths(
    graph: Graph, u: int, v: int, cache: PathCache | None = None
) -> tuple[float, int]:
    """Return the distance from ``u`` to ``v`` avoiding the edge ``uv``, and the number of such shortest paths.

    The distance is ``math.inf`` (with zero paths) when ``v`` is unreachable.
    Results are stored in ``cache`` when one is given.
    """
    if cache is not None and (u, v) in cache:
        return cache[(u, v)]

    n = len(graph.adjacency)
    distance: list[float] = [math.inf] * n
    count = [0] * n
    distance[u] = 0
    count[u] = 1
    queue = deque([u])

    while queue:
        now = queue.popleft()
        if now == v:
            break
        for neighbour in graph[now]:
            if (now == u and neighbour == v) or (now == v and neighbour == u):
                continue
            if distance[neighbour] == math.inf:
                distance[neighbour] = distance[now] + 1
                count[neighbour] = count[now]
                queue.append(neighbour)
            elif distance[neighbour] == distance[now] + 1:
                count[neighbour] += count[now]

    result = (distance[v], count[v])
    if cache is not None:
        cache[(u, v)] = result
    return result


def edge_girth_regular_lambda(graph: Graph, girth: int, cache: PathCache | None = None) -> int:
    """Return the number of girth cycles through every edge, or -1 if it varies."""
    current = -1
    for start, neighbours in enumerate(graph.adjacency):
        for end in neighbours:
            length, paths = number_of_shortest_paths(graph, start, end, cache)
            if length + 1 != girth:
                return -1
            if current == -1:
                current = paths
            if current != paths:
                return -1
    return current


def vertex_girth_regular_lambda(graph: Graph, girth: int, cache: PathCache | None = None) -> int:
    """Return the number of girth cycles through every vertex, or -1 if it varies."""
    result = -2
    for start, neighbours in enumerate(graph.adjacency):
        if result == -1:
            break
        total = 0
        for end in neighbours:
            length, paths = number_of_shortest_paths(graph, start, end, cache)
            if length + 1 == girth:
                total += paths
        if total % 2 != 0:
            logger.warning("odd number of girth paths at vertex %d", start)
        total //= 2
        if result == -2:
            result = total
        elif result != total:
            result = -1
    return result


def girth_regular_lambdas(graph: Graph, girth: int) -> tuple[int, int]:
    """Return the edge and vertex girth-regularity parameters, sharing path counts."""
    cache: PathCache = {}
    return (
        edge_girth_regular_lambda(graph, girth, cache),
        vertex_girth_regular_lambda(graph, girth, cache),
    )