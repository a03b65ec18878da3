"""
Tests for rendering schema-object names.
"""

import pytest

from tsqldeps.parser.analysis import format_object_name
from tsqldeps.parser.syntax import SchemaObjectName


class TestFormatObjectName:
    """Test format_object_name."""

    def test_base_only_gets_missing_schema(self):
        assert format_object_name(SchemaObjectName(base="T")) == "{MISSING}.T"

    def test_schema_and_base(self):
        assert format_object_name(SchemaObjectName(base="Orders", schema="dbo")) == "dbo.Orders"

    def test_all_four_parts(self):
        name = SchemaObjectName(base="Orders", schema="dbo", database="Sales", server="srv1")
        assert format_object_name(name) == "srv1.Sales.dbo.Orders"

    def test_database_without_schema(self):
        """Test that db..table keeps the database and marks the schema as missing."""
        name = SchemaObjectName.from_parts(["Sales", None, "Orders"])
        assert format_object_name(name) == "Sales.{MISSING}.Orders"

    def test_no_normalization(self):
        """Test that names differing only in qualification render differently."""
        assert format_object_name(SchemaObjectName(base="T1")) != format_object_name(
            SchemaObjectName(base="T1", schema="dbo")
        )


class TestSchemaObjectName:
    """Test SchemaObjectName construction."""

    def test_from_parts_right_aligns(self):
        name = SchemaObjectName.from_parts(["dbo", "Orders"])
        assert name.base == "Orders"
        assert name.schema == "dbo"
        assert name.database is None
        assert name.server is None

    def test_written_keeps_source_identifiers(self):
        assert SchemaObjectName.from_parts(["Sales", "", "Orders"]).written == "Sales..Orders"

    def test_from_parts_requires_base(self):
        with pytest.raises(ValueError):
            SchemaObjectName.from_parts(["dbo", None])

    def test_from_parts_rejects_five_parts(self):
        with pytest.raises(ValueError, match="Too many name parts"):
            SchemaObjectName.from_parts(["a", "b", "c", "d", "e"])
