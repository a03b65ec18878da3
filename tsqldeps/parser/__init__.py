"""
Parser Module

Parses T-SQL scripts and extracts object-level dependency edges from the
procedures and triggers they define.
"""

from .analysis import DependencyEdge, DependencyExtractor, EdgeKind, ListSink, extract_edges
from .output import DotWriter, JsonLinesWriter
from .parsers import ScriptParser, parse_script
from .shared import (
    ConfigError,
    DependencyError,
    OutputGenerationError,
    ParserError,
    SQLParsingError,
)

__all__ = [
    "ConfigError",
    "DependencyEdge",
    "DependencyError",
    "DependencyExtractor",
    "DotWriter",
    "EdgeKind",
    "JsonLinesWriter",
    "ListSink",
    "OutputGenerationError",
    "ParserError",
    "SQLParsingError",
    "ScriptParser",
    "extract_edges",
    "parse_script",
]
