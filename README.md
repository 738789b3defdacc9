# voltlift

`voltlift` searches for regular graphs of large girth. It builds each one as a
lift (derived graph) of a small base multigraph whose arcs carry voltages from
a finite group. For every new lift it finds, it writes a line with the graph's
parameters and its graph6 string. It writes further lines when the lift is
edge-girth-regular or vertex-girth-regular, and when its girth is odd and it
has no cycle one longer than its girth.

The package is a library and has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `voltlift.edge.Edge` is a directed edge that carries a voltage. It can link
  to its reverse edge. Semi-edges have no reverse edge.
  `set_voltage(voltage, reverse_voltage)` sets the voltage of both directions.
- `voltlift.graph.Graph` is a multigraph stored as adjacency lists. Loops and
  semi-edges are allowed. It provides `girth()`, `is_connected()`,
  `is_one_edge_connected()`, `is_regular()`, `is_bipartite()`, `distance()`,
  `shortest_cycle()`, `shortest_cycles()`, `line_graph()`,
  `canonical_double_cover()`, `find_hamiltonian_path()`, `graph6()`,
  `save_as_matrix()` and `adjacency_text()`.
  `create_edges_with_default_voltage()` builds the edge objects. It gives the
  edges of a spanning tree voltage 0. `edges_without_default_voltage()`
  returns the edges that still need a voltage.
- `voltlift.graph_parser` reads graph6 strings (`graph6_order`,
  `parse_graph6`), pregraph code (`is_little_endian`, `parse_pregraphs`) and
  orbit listings such as `"0 1 3; 2; 4:6;"` (`parse_orbits`).
- `voltlift.group.Group` holds a multiplication table with identity 0. It also
  holds inverses, element orders (`power_to_identity`), the involution count,
  and any automorphisms and orbits. To get a group, use:
  - `from_string` or `from_path` to read one group,
  - `parse_group_stream` to read a stream of groups, each ended by a `####`
    line,
  - `cyclic_group(n)` to build a cyclic group.
- `voltlift.lift` provides `lift(graph, group)`, which builds the derived
  graph, and `girth_of_lift(graph, group)`.
- `voltlift.voltages` holds the run settings and the pruning helpers:
  - settings: `MainSetup`, `BruteForceSetup`, `TabuSearchSetup`, `RunSetup`
    and `AlgorithmType`;
  - legal voltages per edge: `voltages_for_edge`;
  - detection of short cycles in the lift: `find_path`,
    `cannot_achieve_min_girth`, `is_kgno_graph`;
  - canonicity under group and edge automorphisms: `get_non_canonical_index`,
    with counters in `canonical_stats()`;
  - `filter_inverses`, `filter_orbit_inverses` and `initial_assignment`.
- `voltlift.automorphisms` turns permutation generators of the line graph into
  edge automorphisms. The main function is `edge_automorphisms`, with the
  helpers `parse_cycle_generators`, `cycles_to_permutation` and
  `apply_permutation`.
- `voltlift.girth_regular` provides `has_no_cycle_of_length`,
  `number_of_shortest_paths`, `edge_girth_regular_lambda`,
  `vertex_girth_regular_lambda` and `girth_regular_lambdas`.
- `voltlift.cost_functions.CostFunction` is a named scoring function for the
  tabu search. The factories are `simplified_shortest_cycles_cost`,
  `average_cycle_length_cost`, `average_fundamental_cycle_length_cost`,
  `monte_carlo_cycle_length_cost`, `random_cost`, `voltage_diversity_cost`,
  `walk_regularity_cost` and `walk_sampler_cost`.
- `voltlift.rng` is the shared seeded generator (default seed 7). It provides
  `get_random_int`, `shuffle` and `reset_with_seed`.
- `voltlift.filter.filter_and_write` writes the classification lines of a
  connected regular lift. It skips graphs whose graph6 string it has already
  written to the same stream, and it returns the lines it wrote.
- `voltlift.bta.filtered_bta` runs an exhaustive backtracking search over
  canonical voltage assignments. It returns `False` if it stops at its time
  limit.
- `voltlift.tabu_search.tabu_search` runs a local search guided by the
  `CostFunction` in the run's `TabuSearchSetup`.
- `voltlift.pipeline` ties these together:
  - `run` tries every graph with every group and returns the combinations
    that timed out;
  - `load_groups` reads groups in a size range from a group file;
  - `fill_with_semi_edges` makes base graphs `k`-regular by adding semi-edges;
  - `encode_multigraph_to_simple_graph` subdivides loops and parallel edges;
  - `dreadnaut_input` writes commands for a line-graph automorphism tool;
  - `parse_dreadnaut_output` reads that tool's generators and orbits and
    attaches them to the graphs.

## Example

Build a lift by hand:

```python
from voltlift.graph_parser import parse_graph6
from voltlift.group import cyclic_group
from voltlift.lift import lift

base = parse_graph6("A_")          # a single edge
base.create_edges_with_default_voltage()
lifted = lift(base, cyclic_group(3))
print(len(lifted.adjacency), lifted.is_regular())
```

Search all lifts of girth at least 6 of the theta graph (two vertices joined by
three parallel edges) over cyclic groups:

```python
import sys

from voltlift.graph import Graph
from voltlift.group import cyclic_group
from voltlift.pipeline import run
from voltlift.voltages import AlgorithmType, BruteForceSetup, MainSetup, RunSetup

theta = Graph(adjacency=[[1, 1, 1], [0, 0, 0]])
setup = RunSetup(
    MainSetup(k=3, n=2, min_girth=6),
    AlgorithmType.BTA,
    BruteForceSetup(time_limit=60),
    out=sys.stdout,
)
run([theta], [cyclic_group(n) for n in range(5, 10)], setup)
```

Progress messages go to the standard `logging` module, under the
`voltlift.*` logger names.

## What the package does not do

- There is no command-line program. You call everything from Python.
- The package does not generate base multigraphs. You supply the base graphs
  yourself, for example from `parse_graph6` or `parse_pregraphs`.
- It ships no group files. `load_groups` and `from_path` read files you
  provide.
- It does not compute automorphism groups itself and starts no external
  programs. `dreadnaut_input` only produces the command text, and
  `parse_dreadnaut_output` only reads output that you give it.
- `Graph.graph6()` encodes the graph as it is labelled and does not
  canonicalise it. For this reason `filter_and_write` can report two
  isomorphic lifts that are labelled differently.