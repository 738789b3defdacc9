import io

from voltlift.filter import filter_and_write
from voltlift.graph import Graph


def triangle():
    return Graph(adjacency=[[1, 2], [0, 2], [0, 1]])


def test_triangle_gets_all_classes():
    out = io.StringIO()
    lines = filter_and_write(triangle(), 3, out)
    assert lines == [
        "(k,g)-graph - 2 3 3 - Bw",
        "egr-graph - 2 3 1 3 - Bw",
        "vgr-graph - 2 3 1 3 - Bw",
        "(k,g,g+1)-graph - 2 3 3 - Bw",
    ]
    assert out.getvalue() == "".join(line + "\n" for line in lines)


def test_duplicate_on_same_stream_is_skipped():
    out = io.StringIO()
    first = filter_and_write(triangle(), 3, out)
    second = filter_and_write(triangle(), 3, out)
    assert len(first) == 4
    assert second == []
    assert out.getvalue().count("(k,g)-graph") == 1


def test_separate_streams_are_independent():
    first = io.StringIO()
    second = io.StringIO()
    filter_and_write(triangle(), 3, first)
    filter_and_write(triangle(), 3, second)
    assert first.getvalue() == second.getvalue()
    assert second.getvalue().startswith("(k,g)-graph")


def test_explicit_written_set():
    out = io.StringIO()
    written = {"Bw"}
    assert filter_and_write(triangle(), 3, out, written) == []
    assert out.getvalue() == ""
    fresh: set[str] = set()
    lines = filter_and_write(triangle(), 3, io.StringIO(), fresh)
    assert fresh == {"Bw"}
    assert lines[0].endswith("Bw")


def test_irregular_graph_is_rejected():
    out = io.StringIO()
    path = Graph(adjacency=[[1], [0, 2], [1]])
    assert filter_and_write(path, 3, out) == []
    assert out.getvalue() == ""


def test_disconnected_graph_is_rejected():
    out = io.StringIO()
    two_triangles = Graph(
        adjacency=[[1, 2], [0, 2], [0, 1], [4, 5], [3, 5], [3, 4]]
    )
    assert filter_and_write(two_triangles, 3, out) == []
    assert out.getvalue() == ""


def test_even_girth_has_no_kgg1_line():
    square = Graph(adjacency=[[1, 3], [0, 2], [1, 3], [0, 2]])
    lines = filter_and_write(square, 4, io.StringIO())
    assert lines[0].startswith("(k,g)-graph - 2 4 4 - ")
    assert not any(line.startswith("(k,g,g+1)") for line in lines)