import math

import pytest

from voltlift.graph import Graph
from voltlift.girth_regular import (
    edge_girth_regular_lambda,
    girth_regular_lambdas,
    has_no_cycle_of_length,
    number_of_shortest_paths,
    vertex_girth_regular_lambda,
)


def cycle(n):
    return Graph(adjacency=[[(i - 1) % n, (i + 1) % n] for i in range(n)])


def complete(n):
    return Graph(adjacency=[[j for j in range(n) if j != i] for i in range(n)])


def petersen():
    adjacency = [[] for _ in range(10)]
    edges = [(i, (i + 1) % 5) for i in range(5)]
    edges += [(i, i + 5) for i in range(5)]
    edges += [(5 + i, 5 + (i + 2) % 5) for i in range(5)]
    for a, b in edges:
        adjacency[a].append(b)
        adjacency[b].append(a)
    return Graph(adjacency=adjacency)


def test_cycle_graph_cycle_lengths():
    graph = cycle(6)
    assert has_no_cycle_of_length(graph, 3)
    assert has_no_cycle_of_length(graph, 4)
    assert has_no_cycle_of_length(graph, 5)
    assert not has_no_cycle_of_length(graph, 6)


def test_complete_graph_cycle_lengths():
    graph = complete(4)
    assert not has_no_cycle_of_length(graph, 3)
    assert not has_no_cycle_of_length(graph, 4)
    assert has_no_cycle_of_length(graph, 5)


def test_shortest_paths_in_cycle_avoid_direct_edge():
    graph = cycle(5)
    assert number_of_shortest_paths(graph, 0, 1) == (4, 1)


def test_shortest_paths_unreachable():
    graph = Graph(adjacency=[[1], [0]])
    assert number_of_shortest_paths(graph, 0, 1) == (math.inf, 0)


def test_shortest_paths_are_cached():
    graph = cycle(5)
    cache = {}
    result = number_of_shortest_paths(graph, 2, 3, cache)
    assert cache[(2, 3)] == result
    cache[(2, 3)] = (7, 9)
    assert number_of_shortest_paths(graph, 2, 3, cache) == (7, 9)


def test_complete_graph_lambdas():
    graph = complete(4)
    assert edge_girth_regular_lambda(graph, 3) == 2
    assert vertex_girth_regular_lambda(graph, 3) == 3


def test_cycle_lambdas():
    assert girth_regular_lambdas(cycle(5), 5) == (1, 1)


def test_wrong_girth_gives_minus_one():
    graph = complete(4)
    assert edge_girth_regular_lambda(graph, 4) == -1


@pytest.mark.parametrize(
    "graph, girth",
    [(complete(4), 3), (cycle(5), 5), (cycle(7), 7), (petersen(), 5)],
)
def test_edge_and_vertex_counts_agree(graph, girth):
    edge_lambda, vertex_lambda = girth_regular_lambdas(graph, girth)
    assert edge_lambda > 0
    edge_count = sum(len(n) for n in graph.adjacency) // 2
    assert edge_count * edge_lambda == len(graph.adjacency) * vertex_lambda


def test_cached_and_uncached_agree():
    graph = petersen()
    assert girth_regular_lambdas(graph, 5) == (
        edge_girth_regular_lambda(graph, 5),
        vertex_girth_regular_lambda(graph, 5),
    )