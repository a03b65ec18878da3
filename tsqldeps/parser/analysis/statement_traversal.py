"""
Traversal of a procedure or trigger body into dependency edges.
"""

import logging
from collections.abc import Iterable

from tsqldeps.parser.shared.constants import DEFAULT_CONTRACT, DYNAMIC_EXEC_TARGET
from tsqldeps.parser.shared.types import ObjectIdentity
from tsqldeps.parser.syntax import (
    BeginDialogStatement,
    DeleteStatement,
    ExecutableProcedureReference,
    ExecutableStringList,
    ExecuteSpecification,
    ExecuteStatement,
    FromClause,
    InsertStatement,
    MergeAction,
    MergeStatement,
    NamedTableReference,
    OutputIntoClause,
    SchemaObjectName,
    Statement,
    TableReference,
    TruncateTableStatement,
    UpdateStatement,
)

from .alias_resolver import QualifiedName, TableVariable, lookup_key, resolve_alias
from .edges import DependencyEdge, EdgeKind, EdgeSink
from .name_resolver import format_object_name

logger = logging.getLogger(__name__)

_MERGE_EDGE_KINDS = {
    MergeAction.UPDATE: EdgeKind.UPDATE,
    MergeAction.DELETE: EdgeKind.DELETE,
    MergeAction.INSERT: EdgeKind.INSERT,
}


class StatementTraversal:
    """
    Walks the statements of one top-level object and emits its edges.

    Every edge uses the enclosing object as its source, however deeply the
    statement is nested. A statement's own edges are emitted before those of
    the statements nested inside it, so edges come out in document order.
    """

    def __init__(
        self,
        enclosing_object: ObjectIdentity,
        sink: EdgeSink,
        exclude_temp_tables: bool = False,
        ignore_alias_case: bool = False,
    ):
        """
        Initialize the traversal.

        Args:
            enclosing_object: Rendered name used as the source of every edge
            sink: Receives edges as they are produced
            exclude_temp_tables: Skip targets whose base name starts with ``#``
            ignore_alias_case: Match UPDATE/DELETE target aliases case-insensitively
        """
        self.enclosing_object = enclosing_object
        self.sink = sink
        self.exclude_temp_tables = exclude_temp_tables
        self.ignore_alias_case = ignore_alias_case

    def traverse(self, statements: Iterable[Statement]) -> None:
        for statement in statements:
            self.visit(statement)

    def visit(self, statement: Statement) -> None:
        """Emit the edges of one statement, then descend into its children."""
        if isinstance(statement, InsertStatement):
            self._visit_insert(statement)
        elif isinstance(statement, UpdateStatement):
            self._visit_update_delete(statement.target, statement.from_clause, EdgeKind.UPDATE)
            self._visit_output_into(statement.output_into)
        elif isinstance(statement, DeleteStatement):
            self._visit_update_delete(statement.target, statement.from_clause, EdgeKind.DELETE)
            self._visit_output_into(statement.output_into)
        elif isinstance(statement, MergeStatement):
            self._visit_merge(statement)
        elif isinstance(statement, TruncateTableStatement):
            if statement.table is not None:
                self._emit_name(statement.table, EdgeKind.TRUNC)
        elif isinstance(statement, ExecuteStatement):
            self._visit_execute(statement.specification)
        elif isinstance(statement, BeginDialogStatement):
            self._visit_begin_dialog(statement)

        for child in statement.child_statements():
            self.visit(child)

    def _visit_insert(self, statement: InsertStatement) -> None:
        if isinstance(statement.target, NamedTableReference):
            self._emit_name(statement.target.schema_object, EdgeKind.INSERT)
        else:
            logger.debug(
                f"Skipping INSERT at line {statement.line} in {self.enclosing_object}: "
                "target is not a named table"
            )
        self._visit_output_into(statement.output_into)
        if statement.execute_source is not None:
            self._visit_execute(statement.execute_source)

    def _visit_update_delete(
        self,
        target: TableReference | None,
        from_clause: FromClause | None,
        kind: EdgeKind,
    ) -> None:
        if not isinstance(target, NamedTableReference):
            return

        resolved = resolve_alias(
            lookup_key(target), from_clause, ignore_case=self.ignore_alias_case
        )
        if isinstance(resolved, TableVariable):
            logger.debug(
                f"{kind.value} target in {self.enclosing_object} is table variable "
                f"{resolved.variable}, no edge"
            )
            return
        if isinstance(resolved, QualifiedName):
            self._emit(resolved.name, kind)
        else:
            self._emit_name(target.schema_object, kind)

    def _visit_output_into(self, clause: OutputIntoClause | None) -> None:
        if clause is not None and isinstance(clause.target, NamedTableReference):
            self._emit_name(clause.target.schema_object, EdgeKind.INSERT)

    def _visit_merge(self, statement: MergeStatement) -> None:
        if isinstance(statement.target, NamedTableReference):
            for clause in statement.action_clauses:
                self._emit_name(statement.target.schema_object, _MERGE_EDGE_KINDS[clause.action])
        self._visit_output_into(statement.output_into)

    def _visit_execute(self, specification: ExecuteSpecification) -> None:
        entity = specification.entity
        if isinstance(entity, ExecutableProcedureReference):
            if entity.name is not None:
                self._emit_name(entity.name, EdgeKind.EXEC)
            else:
                logger.debug(
                    f"Skipping EXEC of procedure variable {entity.variable} "
                    f"in {self.enclosing_object}"
                )
        elif isinstance(entity, ExecutableStringList):
            self._emit(DYNAMIC_EXEC_TARGET, EdgeKind.EXEC)

    def _visit_begin_dialog(self, statement: BeginDialogStatement) -> None:
        if not statement.initiator_service:
            return
        contract = statement.contract or DEFAULT_CONTRACT
        self._emit(f"{statement.initiator_service}.{contract}", EdgeKind.QUEUE)

    def _emit_name(self, name: SchemaObjectName, kind: EdgeKind) -> None:
        self._emit(format_object_name(name), kind)

    def _emit(self, target: str, kind: EdgeKind) -> None:
        if self.exclude_temp_tables and target.rsplit(".", 1)[-1].startswith("#"):
            return
        self.sink.emit(DependencyEdge(self.enclosing_object, target, kind))
