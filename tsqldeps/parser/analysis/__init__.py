"""
Analysis layer: dependency extraction over parsed scripts.
"""

from .alias_resolver import (
    NOT_FOUND,
    QualifiedName,
    ResolvedTarget,
    TableVariable,
    lookup_key,
    resolve_alias,
)
from .dispatcher import DependencyExtractor, Procedure, TopLevelObject, Trigger, extract_edges
from .edges import DependencyEdge, EdgeKind, EdgeSink, ListSink
from .name_resolver import format_object_name
from .statement_traversal import StatementTraversal

__all__ = [
    "DependencyEdge",
    "DependencyExtractor",
    "EdgeKind",
    "EdgeSink",
    "ListSink",
    "NOT_FOUND",
    "Procedure",
    "QualifiedName",
    "ResolvedTarget",
    "StatementTraversal",
    "TableVariable",
    "TopLevelObject",
    "Trigger",
    "extract_edges",
    "format_object_name",
    "lookup_key",
    "resolve_alias",
]
