"""Multigraphs with voltage-carrying edges."""

from __future__ import annotations

import heapq
import math
from collections import defaultdict, deque
from dataclasses import dataclass, field
from pathlib import Path

from .edge import Edge

_GRAPH6_MAX_ORDER = 68719476735


def _edge_table() -> defaultdict[int, defaultdict[int, list[Edge]]]:
    return defaultdict(_edge_row)


def _edge_row() -> defaultdict[int, list[Edge]]:
    return defaultdict(list)


@dataclass(eq=False)
class Graph:
    """A (multi)graph given by adjacency lists, with optional edge objects.

    ``neighbour_to_edge[u][v]`` lists the edges from ``u`` to ``v``.
    ``orbits`` holds orbits of the line graph's vertices, ``edge_orbits`` the
    corresponding edge groups, and ``edge_automorphisms`` edge permutations in
    the order of ``edges``.
    """

    adjacency: list[list[int]] = field(default_factory=list)
    neighbour_to_edge: defaultdict[int, defaultdict[int, list[Edge]]] = field(
        default_factory=_edge_table
    )
    edges: list[Edge] = field(default_factory=list)
    edges_without_spanning_tree: list[Edge] = field(default_factory=list)
    base_graph: Graph | None = None
    max_semi_edges_per_vertex: int = 0
    orbits: list[list[int]] = field(default_factory=list)
    edge_automorphisms: list[list[Edge]] = field(default_factory=list)
    edge_orbits: list[list[Edge]] = field(default_factory=list)

    def __getitem__(self, vertex: int) -> list[int]:
        return self.adjacency[vertex]

    def _edges_between(self, u: int, v: int) -> list[Edge]:
        row = self.neighbour_to_edge.get(u)
        if row is None:
            return []
        return row.get(v, [])

    def adjacency_text(self) -> str:
        """Return a printable listing of the adjacency lists."""
        lines = ["Adjacency:"]
        for vertex, neighbours in enumerate(self.adjacency):
            lines.append(f"{vertex}: " + "".join(f"{n}, " for n in neighbours))
        return "\n".join(lines) + "\n"

    def graph6(self) -> str:
        """Encode the simple graph underlying the adjacency lists in graph6."""
        n = len(self.adjacency)
        if n > _GRAPH6_MAX_ORDER:
            raise ValueError("number of vertices too large for graph6")

        if n <= 62:
            header = [n]
        elif n <= 258047:
            header = [63] + [(n >> 6 * i) & 0x3F for i in (2, 1, 0)]
        else:
            header = [63, 63] + [(n >> 6 * i) & 0x3F for i in range(5, -1, -1)]

        neighbour_sets = [set(neighbours) for neighbours in self.adjacency]
        bits = [j in neighbour_sets[i] for i in range(1, n) for j in range(i)]
        bits.extend([False] * (-len(bits) % 6))
        body = [
            sum(int(bit) << (5 - offset) for offset, bit in enumerate(bits[pos:pos + 6]))
            for pos in range(0, len(bits), 6)
        ]
        return "".join(chr(value + 63) for value in header + body)

    def save_as_matrix(self, path: str | Path) -> None:
        """Write the adjacency matrix built from ``edges`` to ``path``."""
        n = len(self.adjacency)
        matrix = [[0] * n for _ in range(n)]
        for edge in self.edges:
            matrix[edge.start][edge.end] = 1
        text = "".join("".join(f"{value} " for value in row) + "\n" for row in matrix)
        Path(path).write_text(text)

    def girth(self) -> int | float:
        """Return the girth; 1 for loops, 2 for parallel edges, inf if acyclic."""
        if any(edge.start == edge.end for edge in self.edges):
            return 1

        for neighbours in self.adjacency:
            if len(set(neighbours)) != len(neighbours):
                return 2

        girth: int | float = math.inf
        n = len(self.adjacency)
        for vertex in range(n):
            distances = [-1] * n
            parents = [-1] * n
            distances[vertex] = 0
            queue = deque([vertex])
            while queue:
                current = queue.popleft()
                for neighbour in self.adjacency[current]:
                    if distances[neighbour] == -1:
                        distances[neighbour] = distances[current] + 1
                        parents[neighbour] = current
                        queue.append(neighbour)
                    if parents[current] != neighbour and parents[neighbour] != current:
                        girth = min(girth, distances[current] + distances[neighbour] + 1)
        return girth

    def is_one_edge_connected(self) -> bool:
        """Return whether the graph stays connected after removing any one edge.

        The adjacency lists are left sorted afterwards.
        """
        result = True
        for i, neighbours in enumerate(self.adjacency):
            for j in list(neighbours):
                if i == j:
                    continue
                self.adjacency[i].remove(j)
                self.adjacency[j].remove(i)
                if not self.is_connected():
                    result = False
                    break
                self.adjacency[i].append(j)
                self.adjacency[j].append(i)
            if not result:
                break
        for neighbours in self.adjacency:
            neighbours.sort()
        return result

    def is_connected(self) -> bool:
        """Return whether every vertex is reachable from vertex 0."""
        n = len(self.adjacency)
        if n == 0:
            return True
        visited = [False] * n
        visited[0] = True
        queue = deque([0])
        while queue:
            current = queue.popleft()
            for neighbour in self.adjacency[current]:
                if not visited[neighbour]:
                    visited[neighbour] = True
                    queue.append(neighbour)
        return all(visited)

    def is_regular(self) -> bool:
        """Return whether all vertices have the same degree."""
        if not self.adjacency:
            return True
        degree = len(self.adjacency[0])
        return all(len(neighbours) == degree for neighbours in self.adjacency)

    def is_bipartite(self) -> bool:
        """Return whether the component of vertex 0 is two-colourable."""
        n = len(self.adjacency)
        if n == 0:
            return True
        colour = [-1] * n
        colour[0] = 0
        queue = deque([0])
        while queue:
            current = queue.popleft()
            for neighbour in self.adjacency[current]:
                if colour[neighbour] == -1:
                    colour[neighbour] = 1 - colour[current]
                    queue.append(neighbour)
                elif colour[neighbour] == colour[current]:
                    return False
        return True

    def set_orbits(self, orbits: list[list[int]]) -> None:
        """Store line-graph orbits and append the matching edge orbits.

        Orbits of self-edges are split into loops and semi-edges.
        """
        self.orbits = orbits
        for orbit in orbits:
            orbit_edges = [self.edges[index] for index in orbit]
            first = orbit_edges[0]
            if first.start == first.end:
                loops = [e for e in orbit_edges if e.reverse_edge is not None]
                semi_edges = [e for e in orbit_edges if e.reverse_edge is None]
                self.edge_orbits.append(loops)
                self.edge_orbits.append(semi_edges)
            else:
                self.edge_orbits.append(orbit_edges)

    def shortest_cycle(self, vertex: int) -> int | float:
        """Return the length of the shortest cycle through ``vertex`` (inf if none)."""
        smallest: int | float = math.inf
        for neighbour in self.adjacency[vertex]:
            try:
                length = self.distance(vertex, neighbour, False)[0] + 1
            except ValueError:
                continue
            smallest = min(smallest, length)
        return smallest

    def shortest_cycles(self) -> list[int | float]:
        """Return the shortest cycle length through each vertex."""
        return [self.shortest_cycle(vertex) for vertex in range(len(self.adjacency))]

    def distance(
        self,
        vertex1: int,
        vertex2: int,
        allow_direct: bool,
        only_tree_edges: bool = False,
    ) -> tuple[int, list[int]]:
        """Return the BFS distance and path (from ``vertex2`` back to ``vertex1``).

        With ``allow_direct`` false, edges straight from ``vertex1`` to
        ``vertex2`` are ignored. With ``only_tree_edges`` only spanning-tree
        edges are used. Raises ValueError if ``vertex2`` is unreachable.
        """
        n = len(self.adjacency)
        distances = [-1] * n
        parent = [-1] * n
        distances[vertex1] = 0
        queue = deque([vertex1])

        while queue:
            current = queue.popleft()
            for neighbour in self.adjacency[current]:
                if current == vertex1 and neighbour == vertex2 and not allow_direct:
                    continue
                if only_tree_edges and not any(
                    e.is_part_of_tree for e in self._edges_between(current, neighbour)
                ):
                    continue
                if distances[neighbour] == -1:
                    distances[neighbour] = distances[current] + 1
                    parent[neighbour] = current
                    queue.append(neighbour)
                if neighbour == vertex2:
                    path = []
                    v = vertex2
                    while v != -1:
                        path.append(v)
                        v = parent[v]
                    return distances[vertex2], path

        raise ValueError("The two vertices are not connected.")

    def edges_without_default_voltage(self) -> list[Edge]:
        """Return the edges outside the spanning tree, creating edges if needed."""
        if not self.edges_without_spanning_tree:
            self.create_edges_with_default_voltage()
        return self.edges_without_spanning_tree

    def create_edges_with_default_voltage(self) -> None:
        """Create edge objects, giving spanning-tree edges voltage 0.

        Each loop in the adjacency gets a return edge and is listed twice
        afterwards. Raises ValueError if the graph is disconnected.
        """
        n = len(self.adjacency)
        connected: set[int] = set()
        explored: set[int] = set()
        unexplored = [0]
        spanning_tree: set[tuple[int, int]] = set()

        while len(explored) != n:
            if not unexplored:
                raise ValueError("graph is not connected")
            current = heapq.heappop(unexplored)
            explored.add(current)
            connected.add(current)
            for v in self.adjacency[current]:
                if v not in connected:
                    connected.add(v)
                    heapq.heappush(unexplored, v)
                    spanning_tree.add((current, v))
                    spanning_tree.add((v, current))

        for v in range(n):
            loops = 0
            for u in list(self.adjacency[v]):
                edge = Edge(v, u)
                if v == u:
                    back = Edge(u, v)
                    edge.reverse_edge = back
                    back.reverse_edge = edge
                    self.edges.append(back)
                    self.neighbour_to_edge[u][v].append(back)
                    self.edges_without_spanning_tree.append(back)
                    loops += 1

                if (v, u) in spanning_tree:
                    edge.voltage = 0
                    edge.is_part_of_tree = True
                    spanning_tree.discard((v, u))
                else:
                    self.edges_without_spanning_tree.append(edge)
                self.edges.append(edge)
                self.neighbour_to_edge[v][u].append(edge)
            self.adjacency[v].extend([v] * loops)

        for edge in self.edges:
            if edge.reverse_edge is not None:
                continue
            for option in self._edges_between(edge.end, edge.start):
                if option.reverse_edge is None and option.is_part_of_tree == edge.is_part_of_tree:
                    edge.reverse_edge = option
                    option.reverse_edge = edge
                    break

    def line_graph(self) -> list[list[int]]:
        """Return adjacency lists of the line graph over ``edges``.

        Each edge is listed twice as its own neighbour.
        """
        m = len(self.edges)
        result: list[list[int]] = [[] for _ in range(m)]
        for i, first in enumerate(self.edges):
            for j in range(i, m):
                second = self.edges[j]
                if {first.start, first.end} & {second.start, second.end}:
                    result[i].append(j)
                    result[j].append(i)
        return result

    def canonical_double_cover(self) -> list[list[int]]:
        """Return adjacency lists of the bipartite double cover."""
        n = len(self.adjacency)
        cover: list[list[int]] = [[] for _ in range(2 * n)]
        for u, neighbours in enumerate(self.adjacency):
            for v in neighbours:
                if u > v:
                    continue
                cover[u].append(n + v)
                cover[n + v].append(u)
                cover[v].append(n + u)
                cover[n + u].append(v)
        return cover

    def find_hamiltonian_path(self) -> list[int]:
        """Return the first Hamiltonian path found, or an empty list."""
        n = len(self.adjacency)
        visited = [False] * n
        path: list[int] = []

        def extend(node: int, remaining: int) -> bool:
            visited[node] = True
            path.append(node)
            if remaining == 1:
                return True
            for neighbour in self.adjacency[node]:
                if not visited[neighbour] and extend(neighbour, remaining - 1):
                    return True
            visited[node] = False
            path.pop()
            return False

        for start in range(n):
            path.clear()
            visited[:] = [False] * n
            if extend(start, n):
                return list(path)
        return []