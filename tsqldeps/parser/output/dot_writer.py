"""
Graphviz DOT rendering of dependency edges.
"""

import logging
from typing import TextIO

from tsqldeps.parser.analysis.edges import DependencyEdge
from tsqldeps.parser.shared.constants import DEFAULT_GRAPH_NAME
from tsqldeps.parser.shared.exceptions import OutputGenerationError

logger = logging.getLogger(__name__)


class DotWriter:
    """
    Writes one DOT edge line per dependency edge.

    Lines have the form ``"<source>" -> "<target>" [label="<KIND>"]``, so the
    output can be pasted into a digraph body or, with ``wrap``, rendered on its
    own.
    """

    def __init__(
        self,
        stream: TextIO,
        escape_quotes: bool = False,
        wrap: bool = False,
        graph_name: str = DEFAULT_GRAPH_NAME,
    ):
        """
        Initialize the writer.

        Args:
            stream: Text stream the lines are written to
            escape_quotes: Escape ``"`` inside names as ``\\"``
            wrap: Surround the edges with ``digraph <graph_name> { ... }``
            graph_name: Name of the wrapping digraph
        """
        self.stream = stream
        self.escape_quotes = escape_quotes
        self.wrap = wrap
        self.graph_name = graph_name
        self.count = 0
        self._opened = False

    def emit(self, edge: DependencyEdge) -> None:
        if self.wrap and not self._opened:
            self._write(f"digraph {self._quote(self.graph_name)} {{\n")
        self._opened = True
        source = self._quote(edge.source)
        target = self._quote(edge.target)
        indent = "    " if self.wrap else ""
        self._write(f'{indent}{source} -> {target} [label="{edge.kind.value}"]\n')
        self.count += 1

    def close(self) -> None:
        """Finish the graph. Only writes anything when wrapping."""
        if not self.wrap:
            return
        if not self._opened:
            self._write(f"digraph {self._quote(self.graph_name)} {{\n")
            self._opened = True
        self._write("}\n")
        logger.debug(f"Wrote {self.count} edges to digraph {self.graph_name}")

    def _quote(self, name: str) -> str:
        if self.escape_quotes:
            name = name.replace('"', '\\"')
        return f'"{name}"'

    def _write(self, text: str) -> None:
        try:
            self.stream.write(text)
        except (OSError, ValueError) as e:
            raise OutputGenerationError(f"Failed to write DOT output: {e}") from e
