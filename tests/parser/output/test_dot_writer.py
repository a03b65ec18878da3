"""
Tests for DOT rendering of edges.
"""

import io
from unittest.mock import MagicMock

import pytest

from tsqldeps.parser.analysis import DependencyEdge, EdgeKind, EdgeSink
from tsqldeps.parser.output import DotWriter
from tsqldeps.parser.shared.exceptions import OutputGenerationError


@pytest.fixture
def stream():
    return io.StringIO()


class TestDotWriter:
    """Test DotWriter."""

    def test_edge_line(self, stream):
        writer = DotWriter(stream)
        writer.emit(DependencyEdge("dbo.P", "dbo.T", EdgeKind.INSERT))
        writer.close()
        assert stream.getvalue() == '"dbo.P" -> "dbo.T" [label="INSERT"]\n'

    def test_quotes_not_escaped_by_default(self, stream):
        writer = DotWriter(stream)
        writer.emit(DependencyEdge('dbo.P', 'dbo."odd"', EdgeKind.DELETE))
        assert stream.getvalue() == '"dbo.P" -> "dbo."odd"" [label="DELETE"]\n'

    def test_escape_quotes(self, stream):
        writer = DotWriter(stream, escape_quotes=True)
        writer.emit(DependencyEdge('dbo.P', 'dbo."odd"', EdgeKind.DELETE))
        assert stream.getvalue() == '"dbo.P" -> "dbo.\\"odd\\"" [label="DELETE"]\n'

    def test_wrap(self, stream):
        writer = DotWriter(stream, wrap=True, graph_name="deps")
        writer.emit(DependencyEdge("S.T", "Trg1", EdgeKind.TRIG))
        writer.emit(DependencyEdge("Trg1", "S.U", EdgeKind.UPDATE))
        writer.close()
        assert stream.getvalue().splitlines() == [
            'digraph "deps" {',
            '    "S.T" -> "Trg1" [label="TRIG"]',
            '    "Trg1" -> "S.U" [label="UPDATE"]',
            "}",
        ]

    def test_wrap_without_edges(self, stream):
        writer = DotWriter(stream, wrap=True)
        writer.close()
        assert stream.getvalue() == 'digraph "dependencies" {\n}\n'

    def test_count(self, stream):
        writer = DotWriter(stream)
        for _ in range(3):
            writer.emit(DependencyEdge("a", "b", EdgeKind.EXEC))
        assert writer.count == 3

    def test_is_an_edge_sink(self, stream):
        assert isinstance(DotWriter(stream), EdgeSink)

    def test_write_failure(self):
        broken = MagicMock()
        broken.write.side_effect = OSError("disk full")
        writer = DotWriter(broken)
        with pytest.raises(OutputGenerationError, match="disk full"):
            writer.emit(DependencyEdge("a", "b", EdgeKind.EXEC))
