"""
tsqldeps Module

Object-level dependency extraction for T-SQL procedures and triggers.
"""

from .cli.main import main as cli_main
from .config import GraphConfig, load_config
from .parser import (
    DependencyEdge,
    DependencyExtractor,
    DotWriter,
    EdgeKind,
    JsonLinesWriter,
    ListSink,
    ScriptParser,
    extract_edges,
    parse_script,
)

__all__ = [
    "DependencyEdge",
    "DependencyExtractor",
    "DotWriter",
    "EdgeKind",
    "GraphConfig",
    "JsonLinesWriter",
    "ListSink",
    "ScriptParser",
    "cli_main",
    "extract_edges",
    "load_config",
    "parse_script",
]
