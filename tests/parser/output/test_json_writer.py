"""
Tests for JSON Lines rendering of edges.
"""

import io
import json

import pytest

from tsqldeps.parser.analysis import DependencyEdge, EdgeKind
from tsqldeps.parser.output import JsonLinesWriter
from tsqldeps.parser.shared.exceptions import OutputGenerationError


class TestJsonLinesWriter:
    """Test JsonLinesWriter."""

    def test_one_object_per_line(self):
        stream = io.StringIO()
        writer = JsonLinesWriter(stream)
        writer.emit(DependencyEdge("dbo.P", "dbo.T", EdgeKind.TRUNC))
        writer.emit(DependencyEdge("dbo.P", "EXEC()", EdgeKind.EXEC))
        writer.close()

        records = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert records == [
            {"source": "dbo.P", "target": "dbo.T", "kind": "TRUNC"},
            {"source": "dbo.P", "target": "EXEC()", "kind": "EXEC"},
        ]
        assert writer.count == 2

    def test_closed_stream(self):
        stream = io.StringIO()
        stream.close()
        with pytest.raises(OutputGenerationError):
            JsonLinesWriter(stream).emit(DependencyEdge("a", "b", EdgeKind.QUEUE))
