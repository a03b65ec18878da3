"""
Syntax tree for T-SQL scripts.

The script parser builds these nodes and the dependency analysis walks them.
Statements form a closed set: every kind the analysis cares about has its own
class, everything else is an OtherStatement that only remembers its leading
keyword. Compound statements expose their nested statements through
``child_statements()``.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Union


@dataclass(frozen=True)
class SchemaObjectName:
    """Server/database/schema/base object name as written in the source."""

    base: str
    schema: str | None = None
    database: str | None = None
    server: str | None = None
    identifiers: tuple[str, ...] = ()

    @classmethod
    def from_parts(cls, parts: Sequence[str | None]) -> "SchemaObjectName":
        """
        Build a name from up to four dotted parts, right-aligned.

        Empty or None parts (``db..table``) leave the matching component unset.

        Args:
            parts: Name parts in source order, base name last

        Returns:
            SchemaObjectName for the parts

        Raises:
            ValueError: If there is no base name or more than four parts
        """
        if not parts or not parts[-1]:
            raise ValueError("Schema object name requires a base name")
        if len(parts) > 4:
            raise ValueError(f"Too many name parts: {'.'.join(p or '' for p in parts)}")

        padded = [None] * (4 - len(parts)) + [p or None for p in parts]
        server, database, schema, base = padded
        return cls(
            base=base,
            schema=schema,
            database=database,
            server=server,
            identifiers=tuple(p or "" for p in parts),
        )

    @property
    def written(self) -> str:
        """The identifiers joined with dots, as they appeared in the source."""
        if self.identifiers:
            return ".".join(self.identifiers)
        return ".".join(
            part
            for part in (self.server, self.database, self.schema, self.base)
            if part is not None
        )


@dataclass(frozen=True)
class NamedTableReference:
    """A reference to a persistent table, view or synonym."""

    schema_object: SchemaObjectName
    alias: str | None = None


@dataclass(frozen=True)
class VariableTableReference:
    """A reference to a table variable such as ``@rows``."""

    variable: str
    alias: str | None = None


TableReference = Union[NamedTableReference, VariableTableReference]


@dataclass
class FromClause:
    """Table references of a FROM clause in document order, nested ones included."""

    table_references: list[TableReference] = field(default_factory=list)


@dataclass
class OutputIntoClause:
    target: TableReference | None = None


@dataclass(frozen=True)
class ExecutableProcedureReference:
    """EXECUTE of a procedure, either by name or through a variable."""

    name: SchemaObjectName | None = None
    variable: str | None = None


@dataclass(frozen=True)
class ExecutableStringList:
    """EXECUTE of dynamic SQL strings; the content is not introspected."""

    pass


ExecutableEntity = Union[ExecutableProcedureReference, ExecutableStringList]


@dataclass
class ExecuteSpecification:
    entity: ExecutableEntity | None = None


class MergeAction(Enum):
    """Action taken by a MERGE WHEN clause."""

    UPDATE = "UPDATE"
    DELETE = "DELETE"
    INSERT = "INSERT"


@dataclass
class MergeActionClause:
    action: MergeAction
    condition: str = "MATCHED"


class DefinitionMode(Enum):
    """How a procedure or trigger definition was introduced."""

    CREATE = "CREATE"
    ALTER = "ALTER"
    CREATE_OR_ALTER = "CREATE OR ALTER"


@dataclass
class Statement:
    """Base class for every statement node."""

    line: int = field(default=0, kw_only=True)

    def child_statements(self) -> list["Statement"]:
        """Statements nested directly inside this one."""
        return []


@dataclass
class InsertStatement(Statement):
    target: TableReference | None = None
    output_into: OutputIntoClause | None = None
    execute_source: ExecuteSpecification | None = None


@dataclass
class UpdateStatement(Statement):
    target: TableReference | None = None
    from_clause: FromClause | None = None
    output_into: OutputIntoClause | None = None


@dataclass
class DeleteStatement(Statement):
    target: TableReference | None = None
    from_clause: FromClause | None = None
    output_into: OutputIntoClause | None = None


@dataclass
class MergeStatement(Statement):
    target: TableReference | None = None
    action_clauses: list[MergeActionClause] = field(default_factory=list)
    output_into: OutputIntoClause | None = None


@dataclass
class TruncateTableStatement(Statement):
    table: SchemaObjectName | None = None


@dataclass
class ExecuteStatement(Statement):
    specification: ExecuteSpecification = field(default_factory=ExecuteSpecification)


@dataclass
class BeginDialogStatement(Statement):
    """Service broker ``BEGIN DIALOG`` conversation."""

    initiator_service: str | None = None
    target_service: str | None = None
    contract: str | None = None


@dataclass
class BeginEndBlockStatement(Statement):
    statements: list[Statement] = field(default_factory=list)

    def child_statements(self) -> list[Statement]:
        return list(self.statements)


@dataclass
class IfStatement(Statement):
    then_statement: Statement | None = None
    else_statement: Statement | None = None

    def child_statements(self) -> list[Statement]:
        return [s for s in (self.then_statement, self.else_statement) if s is not None]


@dataclass
class WhileStatement(Statement):
    body: Statement | None = None

    def child_statements(self) -> list[Statement]:
        return [self.body] if self.body is not None else []


@dataclass
class TryCatchStatement(Statement):
    try_statements: list[Statement] = field(default_factory=list)
    catch_statements: list[Statement] = field(default_factory=list)

    def child_statements(self) -> list[Statement]:
        return [*self.try_statements, *self.catch_statements]


@dataclass
class OtherStatement(Statement):
    """Any statement without a dedicated node; only its leading keyword is kept."""

    keyword: str = ""


@dataclass
class CreateProcedureStatement(Statement):
    name: SchemaObjectName | None = None
    statements: list[Statement] = field(default_factory=list)
    mode: DefinitionMode = DefinitionMode.CREATE

    def child_statements(self) -> list[Statement]:
        return list(self.statements)


@dataclass
class CreateTriggerStatement(Statement):
    name: SchemaObjectName | None = None
    trigger_object: SchemaObjectName | None = None
    statements: list[Statement] = field(default_factory=list)
    mode: DefinitionMode = DefinitionMode.CREATE

    def child_statements(self) -> list[Statement]:
        return list(self.statements)


@dataclass(frozen=True)
class ParseIssue:
    """A problem the parser hit; parsing continues past it."""

    message: str
    line: int = 0


@dataclass
class Batch:
    """Statements between two GO separators."""

    statements: list[Statement] = field(default_factory=list)
    line: int = 1


@dataclass
class Script:
    batches: list[Batch] = field(default_factory=list)
    issues: list[ParseIssue] = field(default_factory=list)

    @property
    def statements(self) -> list[Statement]:
        """Top-level statements of every batch, in order."""
        return [stmt for batch in self.batches for stmt in batch.statements]
