"""
JSON Lines rendering of dependency edges.
"""

import json
from typing import TextIO

from tsqldeps.parser.analysis.edges import DependencyEdge
from tsqldeps.parser.shared.exceptions import OutputGenerationError


class JsonLinesWriter:
    """Writes one JSON object per edge: ``{"source": ..., "target": ..., "kind": ...}``."""

    def __init__(self, stream: TextIO):
        self.stream = stream
        self.count = 0

    def emit(self, edge: DependencyEdge) -> None:
        record = {"source": edge.source, "target": edge.target, "kind": edge.kind.value}
        try:
            self.stream.write(json.dumps(record, ensure_ascii=False) + "\n")
        except (OSError, ValueError) as e:
            raise OutputGenerationError(f"Failed to write JSON output: {e}") from e
        self.count += 1

    def close(self) -> None:
        pass
