"""Readers for graph6 strings, pregraph code and orbit listings."""

from __future__ import annotations

import re

from .graph import Graph

MAX_VERTICES = 4096
# Length of the optional ">>graph6<<" prefix.
_GRAPH6_PREFIX_LENGTH = 10
_ORBIT_PART = re.compile(r"\S+")


def _read_number(chars: str, length: int) -> int:
    if len(chars) != length:
        raise ValueError("truncated graph6 string")
    number = 0
    for ch in chars:
        number = (number << 6) | (ord(ch) - 63)
    return number


def graph6_order(text: str) -> int:
    """Return the number of vertices encoded in a graph6 string."""
    if not text:
        raise ValueError("graph6 string is empty")
    first = text[0]
    if not 63 <= ord(first) <= 126 and first != ">":
        raise ValueError("invalid start of graph6 string")

    pos = _GRAPH6_PREFIX_LENGTH if first == ">" else 0
    try:
        if ord(text[pos]) < 126:
            return ord(text[pos]) - 63
        if ord(text[pos + 1]) < 126:
            return _read_number(text[pos + 1:pos + 4], 3)
        if ord(text[pos + 2]) < 126:
            return _read_number(text[pos + 2:pos + 8], 6)
    except IndexError:
        raise ValueError("truncated graph6 string") from None
    raise ValueError("graph6 only encodes graphs up to 68719476735 vertices")


def _bits(body: str):
    for ch in body:
        value = ord(ch) - 63
        if not 0 <= value <= 63:
            raise ValueError(f"invalid graph6 character {ch!r}")
        for shift in range(5, -1, -1):
            yield (value >> shift) & 1


def _pairs(n: int):
    for i in range(1, n):
        for j in range(i):
            yield i, j


def parse_graph6(text: str) -> Graph:
    """Decode a graph6 string into a graph with adjacency lists."""
    text = text.rstrip("\r\n")
    n = graph6_order(text)
    start = _GRAPH6_PREFIX_LENGTH if text.startswith(">") else 0
    if n <= 62:
        start += 1
    elif n <= MAX_VERTICES:
        start += 4
    else:
        raise ValueError(f"only graphs with {MAX_VERTICES} vertices or fewer are supported")

    adjacency: list[list[int]] = [[] for _ in range(n)]
    for (i, j), bit in zip(_pairs(n), _bits(text[start:])):
        if bit:
            adjacency[i].append(j)
            adjacency[j].append(i)
    return Graph(adjacency=adjacency)


def is_little_endian(data: bytes) -> bool:
    """Return whether pregraph code is little endian, judged by its header."""
    if isinstance(data, str):
        data = data.encode("latin-1")
    if len(data) < 16 or data[:1] != b">":
        return True
    if len(data) <= 16:
        raise ValueError("invalid pregraph header")
    marker = data[16:17]
    if marker in (b"l", b"<"):
        return True
    if marker == b"b":
        return False
    raise ValueError("invalid pregraph header")


class _ByteReader:
    def __init__(self, data: bytes, little_endian: bool) -> None:
        self._data = data
        self._pos = 0
        self._little = little_endian

    @property
    def done(self) -> bool:
        return self._pos >= len(self._data)

    def byte(self) -> int:
        if self.done:
            raise ValueError("truncated pregraph code")
        value = self._data[self._pos]
        self._pos += 1
        return value

    def word(self) -> int:
        first = self.byte()
        second = self.byte()
        if self._little:
            return (second << 8) | first
        return (first << 8) | second


def parse_pregraphs(data: bytes) -> list[Graph]:
    """Decode a sequence of graphs in pregraph code."""
    if isinstance(data, str):
        data = data.encode("latin-1")
    little = is_little_endian(data)
    if data[:1] == b">":
        data = data[18:]
        if data[:1] == b"<":
            data = data[2:]

    reader = _ByteReader(data, little)
    graphs: list[Graph] = []
    large = False
    while not reader.done:
        first = reader.byte()
        if first == 0:
            count = reader.word()
            large = True
        else:
            count = first

        adjacency: list[list[int]] = []
        for _ in range(count):
            neighbours: list[int] = []
            while True:
                neighbour = reader.word() if large else reader.byte()
                if neighbour == 0 or neighbour == (64 if large else 32):
                    break
                if neighbour > count:
                    raise ValueError("pregraph neighbour out of range")
                neighbours.append(neighbour - 1)
            adjacency.append(neighbours)

        for vertex in range(count):
            for neighbour in list(adjacency[vertex]):
                if neighbour > vertex:
                    adjacency[neighbour].append(vertex)
        graphs.append(Graph(adjacency=adjacency))
    return graphs


def parse_orbits(text: str) -> list[list[int]]:
    """Parse orbits such as ``"0 1 3; 2; 4:6;"`` into lists of vertices."""
    orbits: list[list[int]] = []
    for part in text.split(";"):
        orbit: list[int] = []
        for item in _ORBIT_PART.findall(part):
            if ":" in item:
                first, _, last = item.partition(":")
                orbit.extend(range(int(first), int(last) + 1))
            else:
                orbit.append(int(item))
        if orbit:
            orbits.append(orbit)
    return orbits