import io

import pytest

from voltlift.bta import filtered_bta, iter_bta
from voltlift.graph import Graph
from voltlift.group import cyclic_group
from voltlift.voltages import (
    AlgorithmType,
    BruteForceSetup,
    MainSetup,
    RunSetup,
    filter_inverses,
    voltages_for_edge,
)


def theta():
    return Graph(adjacency=[[1, 1, 1], [0, 0, 0]])


def make_setup(min_girth, time_limit=60.0):
    return RunSetup(
        ms=MainSetup(k=3, n=2, min_girth=min_girth),
        algorithm=AlgorithmType.BTA,
        algorithm_setup=BruteForceSetup(time_limit=time_limit),
        out=io.StringIO(),
    )


def kg_lines(setup):
    return [line for line in setup.out.getvalue().splitlines() if line.startswith("(k,g)-graph")]


def test_theta_over_z3_gives_k33():
    setup = make_setup(3)
    assert filtered_bta(theta(), cyclic_group(3), setup) is True
    lines = kg_lines(setup)
    assert lines
    assert all(line.startswith("(k,g)-graph - 3 4 6 - ") for line in lines)


def test_theta_over_z7_gives_heawood():
    setup = make_setup(6)
    assert filtered_bta(theta(), cyclic_group(7), setup) is True
    text = setup.out.getvalue()
    lines = kg_lines(setup)
    assert lines
    assert all(line.startswith("(k,g)-graph - 3 6 14 - ") for line in lines)
    assert "egr-graph - 3 6 " in text
    assert "vgr-graph - 3 6 " in text


def test_no_legal_voltages_finishes_without_output():
    setup = make_setup(6)
    assert filtered_bta(theta(), cyclic_group(2), setup) is True
    assert setup.out.getvalue() == ""


def test_written_lifts_respect_min_girth():
    setup = make_setup(5)
    filtered_bta(theta(), cyclic_group(8), setup)
    girths = [int(line.split()[3]) for line in kg_lines(setup)]
    assert girths
    assert min(girths) >= 5


def test_iter_bta_time_limit():
    graph = theta()
    group = cyclic_group(7)
    setup = make_setup(6, time_limit=-1.0)
    kept = filter_inverses(graph.edges_without_default_voltage())
    legal = {edge: voltages_for_edge(graph, group, edge, 6) for edge in kept}
    assert iter_bta(kept, graph, group, legal, setup) is False
    assert setup.out.getvalue() == ""


def test_iter_bta_resets_voltages_after_search():
    graph = theta()
    group = cyclic_group(7)
    setup = make_setup(6)
    kept = filter_inverses(graph.edges_without_default_voltage())
    legal = {edge: voltages_for_edge(graph, group, edge, 6) for edge in kept}
    assert iter_bta(kept, graph, group, legal, setup) is True
    assert all(edge.voltage == -1 for edge in kept)


def test_iter_bta_needs_brute_force_setup():
    graph = theta()
    setup = RunSetup(
        ms=MainSetup(min_girth=3),
        algorithm=AlgorithmType.BTA,
        algorithm_setup=None,
        out=io.StringIO(),
    )
    with pytest.raises(TypeError):
        iter_bta([], graph, cyclic_group(3), {}, setup)