"""
Top-level dispatch: finds procedures and triggers in a script and traverses each.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from tsqldeps.parser.shared.exceptions import DependencyError
from tsqldeps.parser.syntax import (
    CreateProcedureStatement,
    CreateTriggerStatement,
    DefinitionMode,
    Script,
    Statement,
)

from .edges import DependencyEdge, EdgeKind, EdgeSink, ListSink
from .name_resolver import format_object_name
from .statement_traversal import StatementTraversal

logger = logging.getLogger(__name__)


@dataclass
class TopLevelObject:
    """A named object that owns a statement body."""

    name: str
    statements: list[Statement] = field(default_factory=list, repr=False)
    line: int = 0

    @property
    def object_type(self) -> str:
        return "procedure"


@dataclass
class Procedure(TopLevelObject):
    pass


@dataclass
class Trigger(TopLevelObject):
    table: str | None = None

    @property
    def object_type(self) -> str:
        return "trigger"


class DependencyExtractor:
    """Drives one statement traversal per procedure or trigger of a script."""

    def __init__(
        self,
        sink: EdgeSink,
        include_alter: bool = False,
        exclude_temp_tables: bool = False,
        ignore_alias_case: bool = False,
    ):
        """
        Initialize the extractor.

        Args:
            sink: Receives every edge in emission order
            include_alter: Also treat ALTER and CREATE OR ALTER definitions as objects
            exclude_temp_tables: Drop edges whose target is a temporary table
            ignore_alias_case: Match UPDATE/DELETE target aliases case-insensitively
        """
        self.sink = sink
        self.include_alter = include_alter
        self.exclude_temp_tables = exclude_temp_tables
        self.ignore_alias_case = ignore_alias_case

    def top_level_objects(self, script: Script) -> Iterator[TopLevelObject]:
        """
        Yield the procedures and triggers defined at the top level of the script.

        Other top-level statements are skipped without comment. Parse issues
        recorded on the script are not looked at here.
        """
        for statement in script.statements:
            obj = self._to_object(statement)
            if obj is not None:
                yield obj

    def extract(self, script: Script) -> None:
        """
        Emit the dependency edges of every object in the script.

        A trigger first emits ``(table, trigger, TRIG)``, then the edges of its
        body. Procedures emit the edges of their body.

        Raises:
            DependencyError: If traversal fails unexpectedly
        """
        for obj in self.top_level_objects(script):
            logger.info(f"Extracting dependencies of {obj.object_type} {obj.name}")
            try:
                if isinstance(obj, Trigger) and obj.table is not None:
                    self.sink.emit(DependencyEdge(obj.table, obj.name, EdgeKind.TRIG))
                traversal = StatementTraversal(
                    obj.name,
                    self.sink,
                    exclude_temp_tables=self.exclude_temp_tables,
                    ignore_alias_case=self.ignore_alias_case,
                )
                traversal.traverse(obj.statements)
            except DependencyError:
                raise
            except Exception as e:
                raise DependencyError(
                    f"Failed to extract dependencies of {obj.object_type} {obj.name}: {e}"
                ) from e

    def _to_object(self, statement: Statement) -> TopLevelObject | None:
        if not isinstance(statement, (CreateProcedureStatement, CreateTriggerStatement)):
            return None
        if statement.name is None:
            logger.debug(f"Skipping unnamed definition at line {statement.line}")
            return None
        if statement.mode is not DefinitionMode.CREATE and not self.include_alter:
            logger.debug(
                f"Skipping {statement.mode.value} definition of {statement.name.written}"
            )
            return None

        name = format_object_name(statement.name)
        if isinstance(statement, CreateTriggerStatement):
            table = None
            if statement.trigger_object is not None:
                table = format_object_name(statement.trigger_object)
            else:
                logger.debug(f"Trigger {name} is not defined on a table, no TRIG edge")
            return Trigger(name=name, statements=statement.statements, line=statement.line, table=table)
        return Procedure(name=name, statements=statement.statements, line=statement.line)


def extract_edges(
    script: Script,
    include_alter: bool = False,
    exclude_temp_tables: bool = False,
    ignore_alias_case: bool = False,
) -> list[DependencyEdge]:
    """
    Collect the dependency edges of a script into a list.

    Args:
        script: Parsed script
        include_alter: Also treat ALTER and CREATE OR ALTER definitions as objects
        exclude_temp_tables: Drop edges whose target is a temporary table
        ignore_alias_case: Match UPDATE/DELETE target aliases case-insensitively

    Returns:
        Edges in emission order, duplicates included
    """
    sink = ListSink()
    DependencyExtractor(
        sink,
        include_alter=include_alter,
        exclude_temp_tables=exclude_temp_tables,
        ignore_alias_case=ignore_alias_case,
    ).extract(script)
    return sink.edges
