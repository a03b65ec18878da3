"""
Script-level T-SQL parsing: batches, procedure and trigger definitions.
"""

import logging
import re

from tsqldeps.parser.shared.exceptions import SQLParsingError
from tsqldeps.parser.shared.types import FilePath
from tsqldeps.parser.syntax import (
    Batch,
    CreateProcedureStatement,
    CreateTriggerStatement,
    DefinitionMode,
    OtherStatement,
    ParseIssue,
    Script,
    Statement,
)

from .base import BaseParser
from .statement_parser import StatementParser, parse_object_name
from .tokens import TokenStream, tokenize

logger = logging.getLogger(__name__)

# A batch separator is GO alone on its line, optionally with a repeat count
_GO_LINE = re.compile(r"^[ \t]*GO(?:[ \t]+\d+)?[ \t]*;?[ \t]*$", re.IGNORECASE | re.MULTILINE)

_PROCEDURE_KINDS = {"PROC", "PROCEDURE"}
# Definitions whose bodies are not analysed
_SKIPPED_KINDS = {"VIEW", "FUNCTION"}


def split_batches(sql: str) -> list[tuple[str, int]]:
    """
    Split a script on GO separator lines.

    Returns:
        (text, line_offset) per non-blank batch, where line_offset is the number
        of script lines before the batch text starts
    """
    batches = []
    start = 0
    for match in _GO_LINE.finditer(sql):
        batches.append((sql[start : match.start()], sql.count("\n", 0, start)))
        start = match.end()
    batches.append((sql[start:], sql.count("\n", 0, start)))
    return [(text, offset) for text, offset in batches if text.strip()]


class ScriptParser(BaseParser):
    """Parses T-SQL scripts into batches of statements."""

    def parse(self, content: str, file_path: FilePath = None) -> Script:
        """
        Parse a T-SQL script.

        Syntax problems do not stop parsing. They are recorded on the returned
        script as issues, and a batch that cannot be tokenized is skipped.

        Args:
            content: Script text
            file_path: Optional file path, used for caching and log messages

        Returns:
            Parsed script
        """
        cache_key = self._get_cache_key(content, file_path)
        cached = self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        script = Script()
        for text, offset in split_batches(content):
            try:
                tokens = tokenize(text, line_offset=offset)
            except SQLParsingError as e:
                logger.warning(f"Skipping batch at line {offset + 1}: {e}")
                script.issues.append(ParseIssue(str(e), offset + 1))
                continue
            batch = Batch(line=tokens[0].line if tokens else offset + 1)
            batch.statements = self._parse_batch(TokenStream(tokens), script.issues)
            script.batches.append(batch)

        source = file_path or "<script>"
        logger.debug(
            f"Parsed {source}: {len(script.batches)} batches, {len(script.issues)} issues"
        )
        self._set_cache(cache_key, script)
        return script

    def _parse_batch(self, stream: TokenStream, issues: list[ParseIssue]) -> list[Statement]:
        statements: list[Statement] = []
        parser = StatementParser(stream, issues)
        while True:
            stream.skip_semicolons()
            if stream.at_end():
                break

            definition = self._parse_definition(stream, issues)
            if definition is not None:
                statements.append(definition)
                continue

            statement = parser.parse_statement()
            if statement is None:
                # END or ELSE with nothing to close
                token = stream.advance()
                logger.warning(f"Line {token.line}: Unexpected {token.text}")
                issues.append(ParseIssue(f"Unexpected {token.text}", token.line))
                continue
            statements.append(statement)
        return statements

    def _parse_definition(self, stream: TokenStream, issues: list[ParseIssue]) -> Statement | None:
        """Parse a CREATE/ALTER of a procedure, trigger, view or function, if one starts here."""
        first = stream.peek()
        keyword = stream.peek_keyword()
        if keyword == "CREATE" and stream.peek_keyword(1) == "OR" and stream.peek_keyword(2) == "ALTER":
            mode, offset = DefinitionMode.CREATE_OR_ALTER, 3
        elif keyword == "CREATE":
            mode, offset = DefinitionMode.CREATE, 1
        elif keyword == "ALTER":
            mode, offset = DefinitionMode.ALTER, 1
        else:
            return None

        kind = stream.peek_keyword(offset)
        if kind in _SKIPPED_KINDS:
            stream.pos = len(stream.tokens)
            return OtherStatement(keyword=f"{mode.value} {kind}", line=first.line)
        if kind not in _PROCEDURE_KINDS and kind != "TRIGGER":
            return None

        stream.advance(offset + 1)
        name = parse_object_name(stream)
        if name is None:
            self._issue(issues, f"{mode.value} {kind} without a name", first.line)
            stream.pos = len(stream.tokens)
            return OtherStatement(keyword=mode.value, line=first.line)

        if kind == "TRIGGER":
            trigger_object = self._trigger_object(stream, issues, first.line)
            statements = self._parse_body(stream, issues, name.written, first.line)
            return CreateTriggerStatement(
                name=name,
                trigger_object=trigger_object,
                statements=statements,
                mode=mode,
                line=first.line,
            )

        # numbered procedure group, e.g. CREATE PROCEDURE dbo.p;2
        if stream.peek_is(";") and stream.peek(1) is not None and stream.peek(1).text.isdigit():
            stream.advance(2)
        statements = self._parse_body(stream, issues, name.written, first.line)
        return CreateProcedureStatement(name=name, statements=statements, mode=mode, line=first.line)

    def _trigger_object(self, stream: TokenStream, issues: list[ParseIssue], line: int):
        if not stream.match_keyword("ON"):
            self._issue(issues, "Trigger definition without ON clause", line)
            return None
        if stream.match_keyword("DATABASE"):
            return None
        if stream.peek_keyword() == "ALL" and stream.peek_keyword(1) == "SERVER":
            stream.advance(2)
            return None
        return parse_object_name(stream)

    def _parse_body(
        self, stream: TokenStream, issues: list[ParseIssue], name: str, line: int
    ) -> list[Statement]:
        """Skip the definition header up to its AS and parse the rest of the batch as the body."""
        depth = 0
        while not stream.at_end():
            token = stream.peek()
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                depth = max(depth - 1, 0)
            elif depth == 0 and token.keyword == "AS":
                prev = stream.peek(-1) if stream.pos > 0 else None
                # WITH EXECUTE AS ... and "@param AS type" are part of the header
                if prev is None or not (prev.keyword in ("EXEC", "EXECUTE") or prev.is_variable):
                    stream.advance()
                    return StatementParser(stream, issues).parse_statements()
            stream.advance()

        self._issue(issues, f"Definition of {name} has no AS before its body", line)
        return []

    def _issue(self, issues: list[ParseIssue], message: str, line: int) -> None:
        logger.warning(f"Line {line}: {message}")
        issues.append(ParseIssue(message, line))


def parse_script(sql: str) -> Script:
    """Parse T-SQL text with a fresh ScriptParser."""
    return ScriptParser().parse(sql)
