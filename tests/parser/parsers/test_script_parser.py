"""
Tests for script-level parsing: batches and definitions.
"""

from unittest.mock import patch

from tsqldeps.parser.parsers import ScriptParser, parse_script, split_batches
from tsqldeps.parser.syntax import (
    CreateProcedureStatement,
    CreateTriggerStatement,
    DefinitionMode,
    InsertStatement,
    OtherStatement,
)


class TestSplitBatches:
    """Test GO batch separation."""

    def test_go_lines(self):
        sql = "SELECT 1\nGO\nSELECT 2\ngo 5\nSELECT 3\n"
        batches = split_batches(sql)
        assert [text.strip() for text, _ in batches] == ["SELECT 1", "SELECT 2", "SELECT 3"]
        assert [offset for _, offset in batches] == [0, 1, 3]

    def test_go_inside_a_line_is_not_a_separator(self):
        assert len(split_batches("SELECT 1 AS GO\nSELECT 2")) == 1

    def test_blank_batches_dropped(self):
        assert split_batches("GO\n\nGO\n") == []


class TestDefinitions:
    """Test procedure and trigger definitions."""

    def test_create_procedure(self):
        script = parse_script(
            """
            CREATE PROCEDURE dbo.LoadOrders
                @day DATE,
                @mode INT = 0
            AS
            BEGIN
                INSERT INTO dbo.Orders (Id) VALUES (1)
            END
            """
        )
        (statement,) = script.statements
        assert isinstance(statement, CreateProcedureStatement)
        assert statement.name.written == "dbo.LoadOrders"
        assert statement.mode is DefinitionMode.CREATE
        assert script.issues == []

    def test_proc_with_execute_as(self):
        script = parse_script(
            "CREATE PROC dbo.P WITH EXECUTE AS OWNER AS DELETE FROM dbo.A"
        )
        (statement,) = script.statements
        assert len(statement.statements) == 1

    def test_create_or_alter_and_alter(self):
        script = parse_script(
            "CREATE OR ALTER PROCEDURE dbo.P1 AS SELECT 1\nGO\nALTER PROCEDURE dbo.P2 AS SELECT 2\nGO\n"
        )
        assert [s.mode for s in script.statements] == [DefinitionMode.CREATE_OR_ALTER, DefinitionMode.ALTER]

    def test_trigger_on_table(self):
        script = parse_script(
            """
            CREATE TRIGGER dbo.trgOrders ON dbo.Orders
            AFTER INSERT, UPDATE
            AS
            BEGIN
                INSERT INTO audit.OrderLog (Id) SELECT Id FROM inserted
            END
            """
        )
        (statement,) = script.statements
        assert isinstance(statement, CreateTriggerStatement)
        assert statement.trigger_object.written == "dbo.Orders"

    def test_database_trigger(self):
        script = parse_script("CREATE TRIGGER trgDdl ON DATABASE FOR CREATE_TABLE AS PRINT 'x'")
        (statement,) = script.statements
        assert statement.trigger_object is None

    def test_view_is_opaque(self):
        script = parse_script("CREATE VIEW dbo.V AS SELECT Id FROM dbo.A\nGO\n")
        (statement,) = script.statements
        assert isinstance(statement, OtherStatement)
        assert statement.keyword == "CREATE VIEW"

    def test_missing_as(self):
        script = parse_script("CREATE PROCEDURE dbo.P")
        assert len(script.issues) == 1
        assert "no AS" in script.issues[0].message

    def test_top_level_statements_outside_definitions(self):
        script = parse_script("INSERT INTO dbo.A (Id) VALUES (1)")
        assert isinstance(script.statements[0], InsertStatement)


class TestScriptParser:
    """Test ScriptParser behavior."""

    def test_line_numbers_across_batches(self):
        script = parse_script("CREATE PROCEDURE dbo.P1 AS SELECT 1\nGO\nCREATE PROCEDURE dbo.P2 AS SELECT 2\n")
        assert [s.line for s in script.statements] == [1, 3]
        assert [b.line for b in script.batches] == [1, 3]

    def test_tokenizer_failure_skips_batch(self):
        script = parse_script("SELECT 'unterminated\nGO\nCREATE PROCEDURE dbo.P AS SELECT 1\n")
        assert len(script.batches) == 1
        assert len(script.issues) == 1
        assert script.issues[0].line == 1

    def test_results_are_cached(self):
        parser = ScriptParser()
        first = parser.parse("SELECT 1", file_path="a.sql")
        with patch("tsqldeps.parser.parsers.script_parser.tokenize") as tokenize:
            second = parser.parse("SELECT 1", file_path="a.sql")
            tokenize.assert_not_called()
        assert first is second

    def test_clear_cache(self):
        parser = ScriptParser()
        first = parser.parse("SELECT 1")
        parser.clear_cache()
        assert parser.parse("SELECT 1") is not first
