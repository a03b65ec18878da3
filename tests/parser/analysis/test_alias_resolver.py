"""
Tests for resolving UPDATE/DELETE target aliases through the FROM clause.
"""

from tsqldeps.parser.analysis import (
    NOT_FOUND,
    QualifiedName,
    TableVariable,
    lookup_key,
    resolve_alias,
)
from tsqldeps.parser.syntax import (
    FromClause,
    NamedTableReference,
    SchemaObjectName,
    VariableTableReference,
)


def _name(dotted: str) -> SchemaObjectName:
    return SchemaObjectName.from_parts(dotted.split("."))


class TestResolveAlias:
    """Test resolve_alias."""

    def test_alias_of_named_table(self):
        from_clause = FromClause([NamedTableReference(_name("S.T"), alias="a")])
        assert resolve_alias("a", from_clause) == QualifiedName("S.T")

    def test_alias_of_table_variable(self):
        from_clause = FromClause([VariableTableReference("@v", alias="v")])
        assert resolve_alias("v", from_clause) == TableVariable("@v")

    def test_no_from_clause(self):
        assert resolve_alias("a", None) is NOT_FOUND

    def test_no_matching_alias(self):
        from_clause = FromClause([NamedTableReference(_name("S.T"), alias="b")])
        assert resolve_alias("a", from_clause) is NOT_FOUND

    def test_unaliased_reference_never_matches(self):
        """Test that a reference without an alias is not matched by its table name."""
        from_clause = FromClause([NamedTableReference(_name("dbo.T"))])
        assert resolve_alias("T", from_clause) is NOT_FOUND

    def test_last_match_wins(self):
        from_clause = FromClause(
            [
                NamedTableReference(_name("S.First"), alias="x"),
                NamedTableReference(_name("S.Second"), alias="x"),
            ]
        )
        assert resolve_alias("x", from_clause) == QualifiedName("S.Second")

    def test_case_sensitive_by_default(self):
        from_clause = FromClause([NamedTableReference(_name("dbo.Orders"), alias="O")])
        assert resolve_alias("o", from_clause) is NOT_FOUND

    def test_ignore_case(self):
        from_clause = FromClause([NamedTableReference(_name("dbo.Orders"), alias="O")])
        assert resolve_alias("o", from_clause, ignore_case=True) == QualifiedName("dbo.Orders")

    def test_resolved_name_missing_schema(self):
        from_clause = FromClause([NamedTableReference(_name("Orders"), alias="o")])
        assert resolve_alias("o", from_clause) == QualifiedName("{MISSING}.Orders")

    def test_not_found_is_falsy(self):
        assert not NOT_FOUND
        assert repr(NOT_FOUND) == "NOT_FOUND"


class TestLookupKey:
    """Test lookup_key."""

    def test_explicit_alias(self):
        target = NamedTableReference(_name("dbo.Orders"), alias="o")
        assert lookup_key(target) == "o"

    def test_written_name(self):
        target = NamedTableReference(_name("dbo.Orders"))
        assert lookup_key(target) == "dbo.Orders"
