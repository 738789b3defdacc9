"""Edge automorphisms of a voltage graph from permutation generators."""

from __future__ import annotations

import re
import time
from collections import deque
from collections.abc import Sequence

from .edge import Edge
from .graph import Graph
from .voltages import filter_inverses

AUTOMORPHISM_TIMEOUT = 2.0

_CYCLE = re.compile(r"\(([^)]+)\)")
_NUMBER = re.compile(r"\s*([+-]?[0-9]+)")


def _leading_numbers(text: str) -> list[int]:
    numbers: list[int] = []
    pos = 0
    while (match := _NUMBER.match(text, pos)) is not None:
        numbers.append(int(match.group(1)))
        pos = match.end()
    return numbers


def parse_cycle_generators(generators: Sequence[str]) -> list[list[list[int]]]:
    """Parse generators such as ``"(0 1)(2 3 4)"`` into lists of cycles."""
    parsed: list[list[list[int]]] = []
    for generator in generators:
        cycles = [
            cycle
            for cycle in (_leading_numbers(m.group(1)) for m in _CYCLE.finditer(generator))
            if cycle
        ]
        parsed.append(cycles)
    return parsed


def cycles_to_permutation(cycles: Sequence[Sequence[int]], n: int) -> list[int]:
    """Return the permutation of ``range(n)`` given by disjoint cycles."""
    permutation = list(range(n))
    for cycle in cycles:
        for i, element in enumerate(cycle):
            permutation[element] = cycle[(i + 1) % len(cycle)]
    return permutation


def apply_permutation(f: Sequence[int], g: Sequence[int]) -> list[int]:
    """Return the composition ``f after g``."""
    return [f[image] for image in g]


def _loop_kind_differs(first: Edge, second: Edge) -> bool:
    return (
        first.start == first.end
        and second.start == second.end
        and (first.reverse_edge is None) != (second.reverse_edge is None)
    )


def edge_automorphisms(
    generators: Sequence[str], graph: Graph, max_automorphisms: int = 2000
) -> list[list[Edge]]:
    """Return the non-identity edge automorphisms usable for canonicity checks.

    ``generators`` permute the indices of ``graph.edges``. Only automorphisms
    that map the edges kept by :func:`filter_inverses` onto such edges, and
    never exchange loops with semi-edges, are returned, each as the images of
    those kept edges.
    """
    parsed = parse_cycle_generators(generators)
    filtered = filter_inverses(graph.edges_without_default_voltage())
    size = len(graph.edges)

    position: dict[Edge, int] = {}
    for index, edge in enumerate(graph.edges):
        position.setdefault(edge, index)
    try:
        edge_indices = [position[edge] for edge in filtered]
    except KeyError:
        raise ValueError("edge missing from the graph's edge list") from None
    valid = set(edge_indices)

    permutations = [cycles_to_permutation(cycles, size) for cycles in reversed(parsed)]

    identity = tuple(range(size))
    seen = {identity}
    queue = deque([identity])
    mappings: set[tuple[int, ...]] = set()
    start = time.monotonic()

    while queue and len(mappings) < max_automorphisms:
        current = queue.popleft()
        if time.monotonic() - start > AUTOMORPHISM_TIMEOUT:
            break

        images = tuple(current[index] for index in edge_indices)
        if all(image in valid for image in images):
            mappings.add(images)

        for permutation in permutations:
            following = tuple(apply_permutation(permutation, current))
            if following not in seen:
                seen.add(following)
                queue.append(following)

    identity_images = tuple(edge_indices)
    result: list[list[Edge]] = []
    for images in sorted(mappings):
        if images == identity_images:
            continue
        mapping = [graph.edges[index] for index in images]
        if any(_loop_kind_differs(a, b) for a, b in zip(mapping, filtered)):
            continue
        result.append(mapping)
    return result