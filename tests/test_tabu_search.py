import io

import pytest

from voltlift.cost_functions import voltage_diversity_cost
from voltlift.graph import Graph
from voltlift.group import cyclic_group
from voltlift.lift import lift
from voltlift.rng import reset_with_seed
from voltlift.tabu_search import Change, perturb, tabu_search
from voltlift.voltages import (
    AlgorithmType,
    BruteForceSetup,
    MainSetup,
    RunSetup,
    TabuSearchSetup,
    filter_inverses,
    voltages_for_edge,
)


def theta():
    return Graph(adjacency=[[1, 1, 1], [0, 0, 0]])


def make_setup(min_girth, max_iterations=20):
    return RunSetup(
        ms=MainSetup(k=3, n=2, min_girth=min_girth),
        algorithm=AlgorithmType.TABU_SEARCH,
        algorithm_setup=TabuSearchSetup(
            time_limit=10.0,
            max_iterations=max_iterations,
            tabu_size_mult=3,
            perturb_after_no_improvement=100,
            neighbour_min_girth=min_girth,
            cost_function=voltage_diversity_cost(),
        ),
        out=io.StringIO(),
    )


def test_change_equality_and_hashing():
    graph = theta()
    first, second = filter_inverses(graph.edges_without_default_voltage())
    assert Change(first, 1) == Change(first, 1)
    assert Change(first, 1) != Change(second, 1)
    assert len({Change(first, 1), Change(first, 1), Change(first, 2)}) == 2


def test_tabu_search_finds_heawood():
    reset_with_seed(7)
    setup = make_setup(6)
    tabu_search(theta(), cyclic_group(7), setup)
    lines = [
        line for line in setup.out.getvalue().splitlines() if line.startswith("(k,g)-graph")
    ]
    assert lines
    assert all(line.startswith("(k,g)-graph - 3 6 14 - ") for line in lines)


def test_tabu_search_without_legal_voltages_writes_nothing():
    setup = make_setup(6)
    tabu_search(theta(), cyclic_group(2), setup)
    assert setup.out.getvalue() == ""


def test_single_iteration_only_assigns():
    graph = theta()
    group = cyclic_group(7)
    setup = make_setup(6, max_iterations=1)
    tabu_search(graph, group, setup)
    assert setup.out.getvalue() == ""
    kept = filter_inverses(graph.edges_without_default_voltage())
    for edge in kept:
        assert edge.voltage in voltages_for_edge(graph, group, edge, 6)
    assert lift(graph, group).girth() >= 6


def test_perturb_finds_valid_assignment():
    reset_with_seed(3)
    graph = theta()
    group = cyclic_group(7)
    setup = make_setup(6)
    kept = filter_inverses(graph.edges_without_default_voltage())
    legal = {edge: voltages_for_edge(graph, group, edge, 6) for edge in kept}
    assert perturb(kept, group, graph, legal, setup) is True
    assert all(edge.voltage in legal[edge] for edge in kept)
    assert lift(graph, group).girth() >= 6


def test_perturb_fails_when_girth_unreachable():
    graph = theta()
    group = cyclic_group(3)
    setup = make_setup(6)
    kept = filter_inverses(graph.edges_without_default_voltage())
    legal = {edge: [1, 2] for edge in kept}
    assert perturb(kept, group, graph, legal, setup) is False


def test_tabu_search_needs_tabu_setup():
    setup = RunSetup(
        ms=MainSetup(min_girth=3),
        algorithm=AlgorithmType.BTA,
        algorithm_setup=BruteForceSetup(time_limit=1.0),
        out=io.StringIO(),
    )
    with pytest.raises(TypeError):
        tabu_search(theta(), cyclic_group(3), setup)