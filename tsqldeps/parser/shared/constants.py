"""
Constants for the parser module.
"""

# Placeholder used when a schema-object name carries no schema part
MISSING_SCHEMA = "{MISSING}"

# Target used for EXECUTE of a dynamic string list
DYNAMIC_EXEC_TARGET = "EXEC()"

# Service broker contract used when BEGIN DIALOG omits ON CONTRACT
DEFAULT_CONTRACT = "DEFAULT"

# Supported file extensions
SUPPORTED_SQL_EXTENSIONS = [".sql"]

# Output formats understood by the renderers
OUTPUT_FORMATS = ("dot", "json")

DEFAULT_GRAPH_NAME = "dependencies"

# Keywords that can open a statement inside a procedure or trigger body.
# Whether a keyword actually opens a new statement also depends on the tokens
# around it (see parsers.statement_parser).
STATEMENT_KEYWORDS = {
    "ALTER",
    "BEGIN",
    "BREAK",
    "BULK",
    "CHECKPOINT",
    "CLOSE",
    "COMMIT",
    "CONTINUE",
    "CREATE",
    "DBCC",
    "DEALLOCATE",
    "DECLARE",
    "DELETE",
    "DROP",
    "ELSE",
    "END",
    "EXEC",
    "EXECUTE",
    "FETCH",
    "GOTO",
    "IF",
    "INSERT",
    "KILL",
    "MERGE",
    "OPEN",
    "PRINT",
    "RAISERROR",
    "RECONFIGURE",
    "RETURN",
    "REVERT",
    "ROLLBACK",
    "SAVE",
    "SELECT",
    "SET",
    "THROW",
    "TRUNCATE",
    "UPDATE",
    "USE",
    "WAITFOR",
    "WHILE",
    "WITH",
}

# Statement verbs that can follow a WITH common table expression prefix
CTE_VERBS = {"SELECT", "INSERT", "UPDATE", "DELETE", "MERGE"}

# Set operators that let a SELECT continue the current statement
SET_OPERATORS = {"UNION", "ALL", "EXCEPT", "INTERSECT"}

# Object kinds that may precede IF in DROP <kind> IF EXISTS
DROPPABLE_KINDS = {
    "TABLE",
    "VIEW",
    "PROCEDURE",
    "PROC",
    "FUNCTION",
    "INDEX",
    "TRIGGER",
    "SCHEMA",
    "TYPE",
    "SEQUENCE",
    "SYNONYM",
    "DATABASE",
    "USER",
    "ROLE",
    "STATISTICS",
    "ASSEMBLY",
    "DEFAULT",
    "RULE",
}

# Permission verbs; a statement keyword right after one of these is an argument
PERMISSION_VERBS = {"GRANT", "DENY", "REVOKE"}

# Keywords that end a FROM clause at its own nesting level
FROM_CLAUSE_TERMINATORS = {
    "WHERE",
    "GROUP",
    "HAVING",
    "ORDER",
    "OPTION",
    "UNION",
    "EXCEPT",
    "INTERSECT",
    "FOR",
    "OUTPUT",
    "SELECT",
    "WINDOW",
}

# Keywords that introduce a table reference inside a FROM clause
TABLE_INTRODUCERS = {"FROM", "JOIN", "APPLY"}

# Words that can never be a table alias
NON_ALIAS_KEYWORDS = FROM_CLAUSE_TERMINATORS | STATEMENT_KEYWORDS | {
    "AS",
    "CROSS",
    "FULL",
    "INNER",
    "JOIN",
    "LEFT",
    "ON",
    "OUTER",
    "PIVOT",
    "RIGHT",
    "TABLESAMPLE",
    "UNPIVOT",
    "APPLY",
    "USING",
    "WHEN",
    "THEN",
    "FROM",
    "INTO",
    "VALUES",
    "DEFAULT",
    "HASH",
    "LOOP",
    "REMOTE",
}
