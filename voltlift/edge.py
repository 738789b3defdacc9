"""Directed edges of a voltage graph."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(eq=False)
class Edge:
    """A directed edge carrying a group voltage.

    Edges compare and hash by identity, so two edges with equal endpoints
    remain distinct (as in multigraphs). ``reverse_edge`` links an edge to
    its opposite direction; semi-edges have no reverse edge.
    """

    start: int
    end: int
    voltage: int = -1
    is_part_of_tree: bool = False
    reverse_edge: Edge | None = field(default=None, repr=False)

    def set_voltage(self, voltage: int, reverse_voltage: int) -> None:
        """Set this edge's voltage and, if present, its reverse edge's voltage."""
        self.voltage = voltage
        if self.reverse_edge is not None:
            self.reverse_edge.voltage = reverse_voltage