"""
Resolution of UPDATE/DELETE targets through the statement's FROM clause.
"""

from dataclasses import dataclass
from typing import Union

from tsqldeps.parser.syntax import (
    FromClause,
    NamedTableReference,
    VariableTableReference,
)

from .name_resolver import format_object_name


@dataclass(frozen=True)
class QualifiedName:
    """The alias denotes a real object with this rendered name."""

    name: str


@dataclass(frozen=True)
class TableVariable:
    """The alias denotes a table variable, which is not a dependency."""

    variable: str


class _NotFound:
    """No table reference in the FROM clause carries the alias."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_FOUND"

    def __bool__(self) -> bool:
        return False


NOT_FOUND = _NotFound()

ResolvedTarget = Union[QualifiedName, TableVariable, _NotFound]


def lookup_key(target: NamedTableReference) -> str:
    """
    Key used to find the target in the FROM clause.

    The explicit alias when there is one, otherwise the target's identifiers
    as written, joined with dots.
    """
    if target.alias:
        return target.alias
    return target.schema_object.written


def resolve_alias(
    alias: str, from_clause: FromClause | None, ignore_case: bool = False
) -> ResolvedTarget:
    """
    Find what an UPDATE/DELETE target alias denotes.

    Every table reference of the FROM clause, nested ones included, is checked
    against the alias. Aliases must match exactly unless ``ignore_case`` is
    set. When several references match, the last one wins.

    Args:
        alias: Alias or written name of the statement target
        from_clause: The statement's FROM clause, if it has one
        ignore_case: Compare aliases case-insensitively

    Returns:
        QualifiedName for a named table, TableVariable for a table variable,
        NOT_FOUND when nothing matches or there is no FROM clause
    """
    if from_clause is None or not alias:
        return NOT_FOUND

    def normalize(value: str) -> str:
        return value.casefold() if ignore_case else value

    wanted = normalize(alias)
    found: ResolvedTarget = NOT_FOUND
    for reference in from_clause.table_references:
        if reference.alias is None or normalize(reference.alias) != wanted:
            continue
        if isinstance(reference, VariableTableReference):
            found = TableVariable(reference.variable)
        elif isinstance(reference, NamedTableReference):
            found = QualifiedName(format_object_name(reference.schema_object))
    return found
