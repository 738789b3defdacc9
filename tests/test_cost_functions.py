import pytest

from voltlift.cost_functions import (
    average_cycle_length,
    average_fundamental_cycle_length,
    average_simplified_shortest_cycles,
    count_max_len_paths,
    cycles,
    fundamental_cycles,
    monte_carlo_average_cycle_length,
    random_cost,
    random_cycle_length,
    sample_walk,
    simplified_shortest_cycles_cost,
    voltage_diversity,
    voltage_diversity_cost,
    walk_regularity,
    walk_regularity_cost,
    walk_sampler,
    walk_sampler_cost,
    average_cycle_length_cost,
)
from voltlift.graph import Graph
from voltlift.group import cyclic_group
from voltlift.lift import lift
from voltlift.rng import reset_with_seed
from voltlift.voltages import filter_inverses, find_path


def loop_graph(n, voltage=1):
    graph = Graph(adjacency=[[0]])
    group = cyclic_group(n)
    (edge,) = filter_inverses(graph.edges_without_default_voltage())
    edge.set_voltage(voltage, group.inverse[voltage])
    return graph, group


def dipole(voltages=(1, 2)):
    graph = Graph(adjacency=[[1, 1, 1], [0, 0, 0]])
    group = cyclic_group(3)
    free = filter_inverses(graph.edges_without_default_voltage())
    for edge, voltage in zip(free, voltages):
        edge.set_voltage(voltage, group.inverse[voltage])
    return graph, group


def cycle_graph(n):
    return Graph(adjacency=[[(i - 1) % n, (i + 1) % n] for i in range(n)])


def test_disconnected_lift_scores_minus_one():
    graph, group = dipole((0, 0))
    assert average_simplified_shortest_cycles(graph, group, 2) == -1
    assert average_cycle_length(graph, group, 0) == -1
    assert average_fundamental_cycle_length(graph, group, 0) == -1
    assert monte_carlo_average_cycle_length(graph, group, 3) == -1


def test_weights_must_match_amount():
    graph, group = dipole()
    with pytest.raises(ValueError):
        average_simplified_shortest_cycles(graph, group, 3, [1, 2])


def test_simplified_shortest_cycles_of_edge_transitive_lift_is_girth():
    graph, group = dipole()
    girth = lift(graph, group).girth()
    assert average_simplified_shortest_cycles(graph, group, 3) == girth
    assert average_simplified_shortest_cycles(graph, group, 3, [1, 2, 3]) == girth


@pytest.mark.parametrize("n", [3, 4, 5, 6])
def test_cycle_lift_averages_equal_order(n):
    graph, group = loop_graph(n)
    assert average_fundamental_cycle_length(graph, group, 0) == n
    assert average_cycle_length(graph, group, 0) == n
    assert average_simplified_shortest_cycles(graph, group, 1) == n


def test_ignoring_the_only_cycle_gives_nan():
    graph, group = loop_graph(5)
    result = average_cycle_length(graph, group, 1)
    assert str(result) == "nan"


def test_fundamental_cycles_of_tree_is_empty():
    path = Graph(adjacency=[[1], [0, 2], [1]])
    assert fundamental_cycles(path) == []
    assert cycles(path) == set()


@pytest.mark.parametrize("n", [3, 4, 5, 7])
def test_cycle_graph_has_one_fundamental_cycle(n):
    found = fundamental_cycles(cycle_graph(n))
    assert len(found) == 1
    assert sorted(found[0]) == list(range(n))
    (only,) = cycles(cycle_graph(n))
    assert len(only) == n


def test_triangle_cycle_edges():
    assert cycles(cycle_graph(3)) == {frozenset({(0, 1), (0, 2), (1, 2)})}


def test_fundamental_cycles_disconnected_raises():
    with pytest.raises(ValueError):
        fundamental_cycles(Graph(adjacency=[[1], [0], []]))


def test_bipartite_lift_cycles_are_even_and_at_least_girth():
    graph, group = dipole()
    lifted = lift(graph, group)
    girth = lifted.girth()
    assert all(len(cycle) % 2 == 0 for cycle in cycles(lifted))
    assert all(len(path) >= girth for path in fundamental_cycles(lifted))
    assert average_fundamental_cycle_length(graph, group, 0) >= girth


def test_random_cycle_length_on_tree():
    reset_with_seed(3)
    assert random_cycle_length(Graph(adjacency=[[1], [0, 2], [1]])) == -1


def test_monte_carlo_on_cycle_is_constant():
    graph, group = loop_graph(5)
    reset_with_seed(1)
    single = random_cycle_length(lift(graph, group))
    assert monte_carlo_average_cycle_length(graph, group, 4) == single


def test_voltage_diversity_penalties():
    graph, group = loop_graph(5, voltage=0)
    assert voltage_diversity(graph, group) == -20
    graph, group = dipole((1, 2))
    assert voltage_diversity(graph, group) == -10
    graph, group = loop_graph(5, voltage=2)
    assert voltage_diversity(graph, group) == 0


def test_voltage_diversity_requires_voltages():
    graph = Graph(adjacency=[[0]])
    group = cyclic_group(3)
    graph.edges_without_default_voltage()
    with pytest.raises(ValueError):
        voltage_diversity(graph, group)


def test_count_paths_agrees_with_strict_find_path():
    graph, group = dipole()
    any_found = False
    for edge in graph.edges:
        if edge.reverse_edge is None or edge.start > edge.end:
            continue
        for length in range(2, 6):
            count = count_max_len_paths(edge.start, edge.end, 1, length, edge.reverse_edge, 0, graph, group)
            exists = find_path(edge.start, edge.end, 1, length, edge.reverse_edge, 0, graph, group, True)
            assert (count > 0) == exists
            any_found = any_found or count > 0
    assert any_found


def test_count_paths_beyond_limit_is_zero():
    graph, group = dipole()
    assert count_max_len_paths(0, 1, 4, 4, None, 0, graph, group) == 0


@pytest.mark.parametrize("n", [3, 4, 5])
def test_walk_regularity_of_symmetric_graph(n):
    graph, group = loop_graph(n)
    assert walk_regularity(graph, group) == 0
    assert walk_regularity_cost()(graph, group, None) == walk_regularity(graph, group)


def test_sample_walk_limits():
    graph, group = loop_graph(7)
    assert sample_walk(0, 0, 5, 5, None, 0, graph, group) == (-1, -1)
    reset_with_seed(2)
    edge = graph.edges_without_default_voltage()[0]
    depth, voltage = sample_walk(0, 0, 1, 4, edge.reverse_edge, edge.reverse_edge.voltage, graph, group)
    assert 2 <= depth <= 3
    assert voltage in range(7)


def test_walk_sampler_is_negative():
    graph, group = loop_graph(7)
    reset_with_seed(4)
    assert walk_sampler(group, graph, None, 5, 10) < 0
    reset_with_seed(4)
    first = walk_sampler(group, graph, None, 5, 10)
    reset_with_seed(4)
    assert walk_sampler_cost(10, 5)(graph, group, None) == first


def test_cost_function_metadata():
    cost = walk_sampler_cost(500, 5)
    assert cost.name == "WalkSampler"
    assert cost.params() == "{N=500.000000, minGirth=5.000000}"
    assert simplified_shortest_cycles_cost(3, [1, 2]).param_values == (3.0, 2.0)
    assert voltage_diversity_cost().params() == "{}"
    assert average_cycle_length_cost(2).param_names == ("ignoreCount",)


def test_random_cost_range():
    reset_with_seed(0)
    graph, group = loop_graph(3)
    value = random_cost()(graph, group, None)
    assert -300000 <= value <= -200000


def test_voltage_diversity_cost_matches_function():
    graph, group = dipole((1, 2))
    assert voltage_diversity_cost()(graph, group, None) == voltage_diversity(graph, group)