"""
Dependency edges and the sinks they are emitted into.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, runtime_checkable


class EdgeKind(Enum):
    """How the source object interacts with the target object."""

    TRIG = "TRIG"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    EXEC = "EXEC"
    TRUNC = "TRUNC"
    QUEUE = "QUEUE"


@dataclass(frozen=True)
class DependencyEdge:
    """Directed, labeled fact: ``source`` interacts with ``target`` via ``kind``."""

    source: str
    target: str
    kind: EdgeKind

    def as_tuple(self) -> tuple[str, str, str]:
        return (self.source, self.target, self.kind.value)


@runtime_checkable
class EdgeSink(Protocol):
    """Anything edges can be handed to as they are produced."""

    def emit(self, edge: DependencyEdge) -> None: ...


class ListSink:
    """Collects emitted edges in order."""

    def __init__(self) -> None:
        self.edges: list[DependencyEdge] = []

    def emit(self, edge: DependencyEdge) -> None:
        self.edges.append(edge)

    def as_tuples(self) -> list[tuple[str, str, str]]:
        return [edge.as_tuple() for edge in self.edges]

    def __len__(self) -> int:
        return len(self.edges)

    def __iter__(self):
        return iter(self.edges)
