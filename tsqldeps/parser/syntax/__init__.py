"""
Syntax tree node types for parsed T-SQL scripts.
"""

from .nodes import (
    Batch,
    BeginDialogStatement,
    BeginEndBlockStatement,
    CreateProcedureStatement,
    CreateTriggerStatement,
    DefinitionMode,
    DeleteStatement,
    ExecutableEntity,
    ExecutableProcedureReference,
    ExecutableStringList,
    ExecuteSpecification,
    ExecuteStatement,
    FromClause,
    IfStatement,
    InsertStatement,
    MergeAction,
    MergeActionClause,
    MergeStatement,
    NamedTableReference,
    OtherStatement,
    OutputIntoClause,
    ParseIssue,
    SchemaObjectName,
    Script,
    Statement,
    TableReference,
    TruncateTableStatement,
    TryCatchStatement,
    UpdateStatement,
    VariableTableReference,
    WhileStatement,
)

__all__ = [
    "Batch",
    "BeginDialogStatement",
    "BeginEndBlockStatement",
    "CreateProcedureStatement",
    "CreateTriggerStatement",
    "DefinitionMode",
    "DeleteStatement",
    "ExecutableEntity",
    "ExecutableProcedureReference",
    "ExecutableStringList",
    "ExecuteSpecification",
    "ExecuteStatement",
    "FromClause",
    "IfStatement",
    "InsertStatement",
    "MergeAction",
    "MergeActionClause",
    "MergeStatement",
    "NamedTableReference",
    "OtherStatement",
    "OutputIntoClause",
    "ParseIssue",
    "SchemaObjectName",
    "Script",
    "Statement",
    "TableReference",
    "TruncateTableStatement",
    "TryCatchStatement",
    "UpdateStatement",
    "VariableTableReference",
    "WhileStatement",
]
