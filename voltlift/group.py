"""Finite groups given by multiplication tables."""

from __future__ import annotations

import math
import re
from collections.abc import Iterable, Iterator
from pathlib import Path

_INT = re.compile(r"-?[0-9]+")
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")
_SEPARATOR = "####"


class Group:
    """A finite group with identity 0.

    ``multiplication_table[a][b]`` is ``a*b``; ``automorphisms[i][j]`` is the
    image of element ``j`` under automorphism ``i``.
    """

    def __init__(
        self,
        multiplication_table: list[list[int]],
        orbits: list[list[int]] | None = None,
        automorphisms: list[list[int]] | None = None,
    ) -> None:
        self.multiplication_table = multiplication_table
        self.orbits = list(orbits or [])
        self.automorphisms = list(automorphisms or [])
        self.orbit_sets = [set(orbit) for orbit in self.orbits]
        self.name = "Unnamed Group"

        self.inverse = [
            i
            for row in multiplication_table
            for i, product in enumerate(row)
            if product == 0
        ]

        self.power_to_identity: list[int | float] = []
        self.involution_count = 0
        for element in range(len(multiplication_table)):
            power = self._order_of(element)
            self.power_to_identity.append(power)
            if power in (1, 2):
                self.involution_count += 1

    def _order_of(self, element: int) -> int | float:
        seen: set[int] = set()
        current = element
        power = 1
        while current != 0:
            power += 1
            seen.add(current)
            following = self.multiplication_table[current][element]
            if following in seen:
                return math.inf
            current = following
        return power

    def __repr__(self) -> str:
        return f"Group(name={self.name!r}, order={len(self.multiplication_table)})"


class _TableScanner:
    """Reads bracketed integer rows, shifting every number down by one."""

    def __init__(self, text: str) -> None:
        self._text = text
        self._pos = 0
        self._row: list[int] = []
        self._failed = False

    def _next_char(self) -> str | None:
        text = self._text
        while self._pos < len(text) and text[self._pos].isspace():
            self._pos += 1
        if self._pos >= len(text):
            return None
        ch = text[self._pos]
        self._pos += 1
        return ch

    def rows(self, stop: str | None = None) -> list[list[int]]:
        result: list[list[int]] = []
        while not self._failed:
            ch = self._next_char()
            if ch is None:
                break
            if ch == "[":
                self._row = []
            elif ch == "]":
                if self._row:
                    result.append(self._row)
                    self._row = []
            elif ch in "0123456789-":
                match = _INT.match(self._text, self._pos - 1)
                if match is None:
                    self._failed = True
                    break
                self._row.append(int(match.group()) - 1)
                self._pos = match.end()
            elif ch == stop:
                break
        return result


def _leading_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"expected an integer in {text[:20]!r}")
    return int(match.group(1))


def from_string(text: str) -> Group:
    """Parse a group: multiplication table, then automorphisms, then orbits."""
    order = number = 0
    order_pos = text.find("Order:")
    number_pos = text.find("Number:")
    if order_pos != -1 and number_pos != -1:
        order_end = number_pos if number_pos >= order_pos + 6 else None
        order = _leading_int(text[order_pos + 6:order_end])
        number = _leading_int(text[number_pos + 7:])

    scanner = _TableScanner(text)
    table = scanner.rows(stop="A")
    automorphisms = scanner.rows(stop="O")
    orbits = scanner.rows()

    group = Group(table, orbits, automorphisms)
    group.name = f"SmallGroup({order}, {number})"
    return group


def from_path(path: str | Path) -> Group:
    """Read a group from a file, joining its lines."""
    lines = Path(path).read_text().splitlines()
    return from_string("".join(lines))


def parse_group_stream(lines: Iterable[str]) -> Iterator[Group]:
    """Yield the groups in a stream of lines, each ended by a ``####`` line."""
    buffer: list[str] = []
    for line in lines:
        line = line.rstrip("\n")
        if line == _SEPARATOR:
            yield from_string("".join(buffer))
            buffer = []
        else:
            buffer.append(line)


def cyclic_group(n: int) -> Group:
    """Return the cyclic group of order ``n``."""
    return Group([[(i + j) % n for j in range(n)] for i in range(n)])