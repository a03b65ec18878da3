"""
Statement parsing for procedure and trigger bodies.

T-SQL does not require semicolons between statements, so statements are
delimited by the keywords that open them. A keyword such as SELECT or SET
opens a new statement only outside the contexts where it continues the
current one (``INSERT ... SELECT``, ``UPDATE ... SET``, ``MERGE ... THEN
UPDATE SET``, a ``WITH`` prefix, a CASE expression, parentheses).
"""

import logging
from dataclasses import dataclass, field

from tsqldeps.parser.shared.constants import (
    CTE_VERBS,
    DROPPABLE_KINDS,
    FROM_CLAUSE_TERMINATORS,
    NON_ALIAS_KEYWORDS,
    PERMISSION_VERBS,
    SET_OPERATORS,
    STATEMENT_KEYWORDS,
    TABLE_INTRODUCERS,
)
from tsqldeps.parser.syntax import (
    BeginDialogStatement,
    BeginEndBlockStatement,
    DeleteStatement,
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
    Statement,
    TableReference,
    TruncateTableStatement,
    TryCatchStatement,
    UpdateStatement,
    VariableTableReference,
    WhileStatement,
)

from .tokens import SqlToken, TokenStream

logger = logging.getLogger(__name__)

# Rowset functions that can stand where an INSERT target table would
_ROWSET_FUNCTIONS = {"OPENQUERY", "OPENROWSET", "OPENDATASOURCE", "OPENXML"}

# Keywords after BEGIN that make it a simple statement rather than a block
_BEGIN_STATEMENTS = {"TRAN", "TRANSACTION", "DISTRIBUTED", "CONVERSATION"}

_INSERT_SOURCES = {"SELECT", "VALUES", "EXEC", "EXECUTE", "DEFAULT"}


@dataclass
class _Extent:
    """What has been seen so far while collecting one statement's tokens."""

    first: str | None
    verb: str | None = None
    seen: set[str] = field(default_factory=set)
    has_source: bool = False

    def __post_init__(self):
        if self.first != "WITH":
            self.verb = self.first

    def note(self, token: SqlToken) -> None:
        keyword = token.keyword
        if keyword is None:
            return
        if self.verb is None and keyword in CTE_VERBS:
            self.verb = keyword
        elif self.verb == "INSERT" and keyword in _INSERT_SOURCES:
            self.has_source = True
        self.seen.add(keyword)


def parse_object_name(stream: TokenStream) -> SchemaObjectName | None:
    """
    Read a dotted object name of up to four parts at the stream position.

    Returns:
        The name, or None (nothing consumed) if no name starts here
    """
    first = stream.peek()
    if first is None or first.is_variable or not first.is_name_part:
        return None

    start = stream.pos
    parts: list[str | None] = [first.text]
    stream.advance()
    while stream.peek_is("."):
        stream.advance()
        if stream.peek_is("."):
            parts.append(None)
            continue
        token = stream.peek()
        # dbo. VALUES: a clause keyword ends the name, it is not its base
        if (
            token is not None
            and token.is_name_part
            and not token.is_variable
            and (token.quoted or token.keyword not in NON_ALIAS_KEYWORDS)
        ):
            parts.append(token.text)
            stream.advance()
        else:
            parts.append(None)
            break

    try:
        return SchemaObjectName.from_parts(parts)
    except ValueError as e:
        logger.debug(f"Ignoring malformed object name at line {first.line}: {e}")
        stream.pos = start
        return None


class StatementParser:
    """Parses the statements of a procedure or trigger body from a token stream."""

    def __init__(self, stream: TokenStream, issues: list[ParseIssue]):
        """
        Initialize the parser.

        Args:
            stream: Tokens of the body, positioned at its first statement
            issues: Problems found while parsing are appended here
        """
        self.stream = stream
        self.issues = issues

    def parse_statements(self) -> list[Statement]:
        """Parse statements until the stream is exhausted."""
        statements: list[Statement] = []
        while True:
            self.stream.skip_semicolons()
            if self.stream.at_end():
                break
            if self._at_end_keyword() or self.stream.peek_keyword() == "ELSE":
                self._stray_token()
                continue
            statement = self.parse_statement()
            if statement is not None:
                statements.append(statement)
        return statements

    def parse_statement(self) -> Statement | None:
        """
        Parse one statement, compound or simple.

        Returns:
            The statement, or None at the end of input or at an END/ELSE that
            belongs to the enclosing construct
        """
        stream = self.stream
        stream.skip_semicolons()
        if stream.at_end() or self._at_end_keyword() or stream.peek_keyword() == "ELSE":
            return None

        keyword = stream.peek_keyword()
        if keyword == "BEGIN":
            following = stream.peek_keyword(1)
            if following == "TRY":
                return self._parse_try_catch()
            if following == "DIALOG":
                return self._build(self._collect())
            if following not in _BEGIN_STATEMENTS:
                return self._parse_block()
        elif keyword == "IF":
            return self._parse_if()
        elif keyword == "WHILE":
            return self._parse_while()

        return self._build(self._collect())

    # Compound statements

    def _parse_block(self) -> BeginEndBlockStatement:
        begin = self.stream.advance()
        statements = self._statements_until_end()
        self._expect_end(begin, None)
        return BeginEndBlockStatement(statements=statements, line=begin.line)

    def _parse_try_catch(self) -> TryCatchStatement:
        begin = self.stream.advance(2)
        try_statements = self._statements_until_end()
        self._expect_end(begin, "TRY")

        catch_statements: list[Statement] = []
        self.stream.skip_semicolons()
        if self.stream.peek_keyword() == "BEGIN" and self.stream.peek_keyword(1) == "CATCH":
            catch_begin = self.stream.advance(2)
            catch_statements = self._statements_until_end()
            self._expect_end(catch_begin, "CATCH")
        else:
            self._issue("BEGIN TRY without BEGIN CATCH", begin.line)

        return TryCatchStatement(
            try_statements=try_statements,
            catch_statements=catch_statements,
            line=begin.line,
        )

    def _parse_if(self) -> IfStatement:
        start = self.stream.advance()
        self._skip_condition()
        then_statement = self.parse_statement()
        else_statement = None
        self.stream.skip_semicolons()
        if self.stream.peek_keyword() == "ELSE":
            self.stream.advance()
            else_statement = self.parse_statement()
        return IfStatement(
            then_statement=then_statement,
            else_statement=else_statement,
            line=start.line,
        )

    def _parse_while(self) -> WhileStatement:
        start = self.stream.advance()
        self._skip_condition()
        return WhileStatement(body=self.parse_statement(), line=start.line)

    def _statements_until_end(self) -> list[Statement]:
        statements: list[Statement] = []
        while True:
            self.stream.skip_semicolons()
            if self.stream.at_end() or self._at_end_keyword():
                break
            if self.stream.peek_keyword() == "ELSE":
                self._stray_token()
                continue
            statement = self.parse_statement()
            if statement is not None:
                statements.append(statement)
        return statements

    def _expect_end(self, begin: SqlToken, suffix: str | None) -> None:
        if not self._at_end_keyword():
            self._issue(f"Missing END for BEGIN at line {begin.line}", begin.line)
            return
        self.stream.advance()
        if suffix is not None:
            if self.stream.peek_keyword() == suffix:
                self.stream.advance()
            else:
                self._issue(f"Expected END {suffix}", begin.line)

    def _skip_condition(self) -> None:
        """Skip an IF/WHILE condition up to the statement it guards."""
        stream = self.stream
        depth = 0
        case_depth = 0
        while not stream.at_end():
            token = stream.peek()
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                depth = max(depth - 1, 0)
            elif depth == 0:
                keyword = token.keyword
                if keyword == "CASE":
                    case_depth += 1
                elif keyword == "END" and case_depth:
                    case_depth -= 1
                elif (
                    case_depth == 0
                    and keyword in STATEMENT_KEYWORDS
                    and not (keyword == "UPDATE" and stream.peek_is("(", 1))
                ):
                    return
            stream.advance()

    def _at_end_keyword(self) -> bool:
        return (
            self.stream.peek_keyword() == "END"
            and self.stream.peek_keyword(1) != "CONVERSATION"
        )

    def _stray_token(self) -> None:
        token = self.stream.advance()
        self._issue(f"Unexpected {token.text}", token.line)

    def _issue(self, message: str, line: int) -> None:
        logger.warning(f"Line {line}: {message}")
        self.issues.append(ParseIssue(message, line))

    # Statement extent

    def _collect(self) -> list[SqlToken]:
        """Consume the tokens of one simple statement."""
        stream = self.stream
        first = stream.advance()
        tokens = [first]
        extent = _Extent(first.keyword)
        depth = 0
        case_depth = 0

        while not stream.at_end():
            token = stream.peek()
            if token.is_punct(";") and depth == 0:
                stream.advance()
                break
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                depth = max(depth - 1, 0)
            elif depth == 0:
                keyword = token.keyword
                if keyword == "CASE":
                    case_depth += 1
                elif keyword == "END" and case_depth:
                    case_depth -= 1
                elif case_depth == 0 and self._opens_statement(
                    extent, token, tokens[-1], stream.peek(1), stream.peek(2)
                ):
                    break
                extent.note(token)
            tokens.append(token)
            stream.advance()

        return tokens

    def _opens_statement(
        self,
        extent: _Extent,
        token: SqlToken,
        prev: SqlToken,
        nxt: SqlToken | None,
        after_next: SqlToken | None,
    ) -> bool:
        """Whether a depth-0 token starts a new statement instead of continuing this one."""
        keyword = token.keyword
        if keyword not in STATEMENT_KEYWORDS:
            return False
        prev_keyword = prev.keyword
        if prev.is_punct(",") or prev.is_punct(".") or prev_keyword in PERMISSION_VERBS:
            return False

        if keyword == "SELECT":
            if prev_keyword in SET_OPERATORS or prev_keyword in ("FOR", "AS"):
                return False
            if extent.verb is None:
                return False
            return not (extent.verb == "INSERT" and not extent.has_source)
        if keyword in ("INSERT", "UPDATE", "DELETE", "MERGE"):
            if prev_keyword in ("THEN", "FOR", "AFTER", "OF", "BULK"):
                return False
            # ON DELETE / ON UPDATE referential actions
            if prev_keyword == "ON" and extent.first in ("CREATE", "ALTER"):
                return False
            if keyword == "UPDATE" and nxt is not None and nxt.is_punct("("):
                return False
            return extent.verb is not None
        if keyword == "SET":
            if prev_keyword == "UPDATE":
                return False
            if extent.verb == "UPDATE" and "SET" not in extent.seen:
                return False
            return not (extent.first == "ALTER" and nxt is not None and nxt.is_punct("("))
        if keyword in ("EXEC", "EXECUTE"):
            if prev_keyword == "WITH":
                return False
            return not (extent.verb == "INSERT" and not extent.has_source)
        if keyword == "WITH":
            if nxt is None or after_next is None or nxt.is_punct("("):
                return False
            if not nxt.is_name_part:
                return False
            return after_next.keyword == "AS" or after_next.is_punct("(")
        if keyword == "IF":
            return prev_keyword not in DROPPABLE_KINDS
        if keyword == "FETCH":
            return prev_keyword not in ("ROW", "ROWS")
        if keyword == "DROP":
            return extent.first != "ALTER"
        return True

    # Statement nodes

    def _build(self, tokens: list[SqlToken]) -> Statement:
        line = tokens[0].line
        verb_index = self._verb_index(tokens)
        verb = tokens[verb_index].keyword if verb_index is not None else None
        body = TokenStream(tokens)
        body.pos = (verb_index or 0) + 1

        statement: Statement | None = None
        if verb == "INSERT":
            statement = self._build_insert(body, line)
        elif verb == "UPDATE" and body.peek_keyword() != "STATISTICS":
            statement = self._build_update(body, line)
        elif verb == "DELETE":
            statement = self._build_delete(body, line)
        elif verb == "MERGE":
            statement = self._build_merge(body, line)
        elif verb == "TRUNCATE" and body.peek_keyword() == "TABLE":
            body.advance()
            statement = TruncateTableStatement(table=parse_object_name(body), line=line)
        elif verb in ("EXEC", "EXECUTE") and body.peek_keyword() != "AS":
            statement = ExecuteStatement(specification=self._execute_specification(body), line=line)
        elif verb == "BEGIN" and body.peek_keyword() == "DIALOG":
            statement = self._build_begin_dialog(tokens, line)

        if statement is None:
            statement = OtherStatement(keyword=tokens[0].keyword or tokens[0].text, line=line)
        return statement

    def _verb_index(self, tokens: list[SqlToken]) -> int | None:
        """Index of the statement verb, looking past a WITH prefix."""
        if tokens[0].keyword != "WITH":
            return 0
        depth = 0
        for index, token in enumerate(tokens[1:], start=1):
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                depth = max(depth - 1, 0)
            elif depth == 0 and token.keyword in CTE_VERBS:
                return index
        return None

    def _build_insert(self, body: TokenStream, line: int) -> InsertStatement:
        self._skip_top(body)
        body.match_keyword("INTO")
        target = self._table_target(body)
        if isinstance(target, NamedTableReference) and target.schema_object.base.upper() in _ROWSET_FUNCTIONS:
            target = None

        execute_source = None
        index = self._find_keyword(body.tokens, body.pos, ("EXEC", "EXECUTE"))
        if index is not None:
            source = TokenStream(body.tokens)
            source.pos = index + 1
            execute_source = self._execute_specification(source)

        return InsertStatement(
            target=target,
            output_into=self._output_into(body.tokens, body.pos),
            execute_source=execute_source,
            line=line,
        )

    def _build_update(self, body: TokenStream, line: int) -> UpdateStatement:
        self._skip_top(body)
        target = self._table_target(body)
        return UpdateStatement(
            target=target,
            from_clause=self._from_clause(body.tokens, body.pos),
            output_into=self._output_into(body.tokens, body.pos),
            line=line,
        )

    def _build_delete(self, body: TokenStream, line: int) -> DeleteStatement:
        self._skip_top(body)
        body.match_keyword("FROM")
        target = self._table_target(body)
        return DeleteStatement(
            target=target,
            from_clause=self._from_clause(body.tokens, body.pos),
            output_into=self._output_into(body.tokens, body.pos),
            line=line,
        )

    def _build_merge(self, body: TokenStream, line: int) -> MergeStatement:
        self._skip_top(body)
        body.match_keyword("INTO")
        target = self._table_target(body)
        if isinstance(target, NamedTableReference):
            self._skip_table_hints(body)
            alias = self._read_alias(body)
            target = NamedTableReference(target.schema_object, alias)

        clauses: list[MergeActionClause] = []
        tokens = body.tokens
        depth = 0
        case_depth = 0
        condition: list[str] = []
        for index in range(body.pos, len(tokens)):
            token = tokens[index]
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                depth = max(depth - 1, 0)
            elif depth == 0:
                keyword = token.keyword
                if keyword == "CASE":
                    case_depth += 1
                elif keyword == "END" and case_depth:
                    case_depth -= 1
                elif case_depth:
                    continue
                elif keyword == "WHEN":
                    condition = []
                elif keyword == "THEN" and index + 1 < len(tokens):
                    action = tokens[index + 1].keyword
                    if action in MergeAction.__members__:
                        clauses.append(
                            MergeActionClause(MergeAction[action], " ".join(condition) or "MATCHED")
                        )
                elif keyword in ("NOT", "MATCHED", "BY", "TARGET", "SOURCE"):
                    condition.append(keyword)

        return MergeStatement(
            target=target,
            action_clauses=clauses,
            output_into=self._output_into(tokens, body.pos),
            line=line,
        )

    def _build_begin_dialog(self, tokens: list[SqlToken], line: int) -> BeginDialogStatement:
        initiator = self._word_after(tokens, ("FROM", "SERVICE"))
        target = self._word_after(tokens, ("TO", "SERVICE"))
        contract = self._word_after(tokens, ("ON", "CONTRACT"))
        return BeginDialogStatement(
            initiator_service=initiator,
            target_service=target,
            contract=contract,
            line=line,
        )

    def _execute_specification(self, body: TokenStream) -> ExecuteSpecification:
        token = body.peek()
        if token is None:
            return ExecuteSpecification()
        if token.is_punct("("):
            return ExecuteSpecification(ExecutableStringList())
        if token.is_variable:
            if not body.peek_is("=", 1):
                return ExecuteSpecification(ExecutableProcedureReference(variable=token.text))
            # EXEC @status = procedure
            body.advance(2)
            token = body.peek()
            if token is not None and token.is_variable:
                return ExecuteSpecification(ExecutableProcedureReference(variable=token.text))

        name = parse_object_name(body)
        if name is None:
            return ExecuteSpecification()
        return ExecuteSpecification(ExecutableProcedureReference(name=name))

    # Clause helpers

    def _skip_top(self, body: TokenStream) -> None:
        """Skip ``TOP (n) [PERCENT]``."""
        if body.peek_keyword() != "TOP":
            return
        body.advance()
        if body.peek_is("("):
            self._skip_parenthesized(body)
        else:
            body.advance()
        body.match_keyword("PERCENT")

    def _skip_parenthesized(self, body: TokenStream) -> None:
        depth = 0
        while not body.at_end():
            token = body.advance()
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                depth -= 1
                if depth <= 0:
                    return

    def _skip_table_hints(self, body: TokenStream) -> None:
        if body.peek_keyword() == "WITH" and body.peek_is("(", 1):
            body.advance()
            self._skip_parenthesized(body)

    def _table_target(self, body: TokenStream) -> TableReference | None:
        token = body.peek()
        if token is None:
            return None
        if token.is_variable:
            body.advance()
            return VariableTableReference(token.text)
        name = parse_object_name(body)
        if name is None:
            return None
        return NamedTableReference(name)

    def _read_alias(self, body: TokenStream) -> str | None:
        token = body.peek()
        if token is None:
            return None
        if token.keyword == "AS":
            body.advance()
            token = body.peek()
            if token is not None and token.is_name_part:
                body.advance()
                return token.text
            return None
        if token.is_name_part and (token.quoted or token.keyword not in NON_ALIAS_KEYWORDS):
            body.advance()
            return token.text
        return None

    def _find_keyword(
        self,
        tokens: list[SqlToken],
        start: int,
        keywords: tuple[str, ...],
        stop: tuple[str, ...] = (),
    ) -> int | None:
        """Index of the first depth-0 token among ``keywords`` before any ``stop`` keyword."""
        depth = 0
        for index in range(start, len(tokens)):
            token = tokens[index]
            if token.is_punct("("):
                depth += 1
            elif token.is_punct(")"):
                depth = max(depth - 1, 0)
            elif depth == 0:
                if token.keyword in keywords:
                    return index
                if token.keyword in stop:
                    return None
        return None

    def _output_into(self, tokens: list[SqlToken], start: int) -> OutputIntoClause | None:
        output = self._find_keyword(tokens, start, ("OUTPUT",))
        if output is None:
            return None
        into = self._find_keyword(
            tokens,
            output + 1,
            ("INTO",),
            stop=("FROM", "WHERE", "SELECT", "VALUES", "DEFAULT", "EXEC", "EXECUTE", "OPTION", "WHEN"),
        )
        if into is None:
            return None
        body = TokenStream(tokens)
        body.pos = into + 1
        return OutputIntoClause(target=self._table_target(body))

    def _from_clause(self, tokens: list[SqlToken], start: int) -> FromClause | None:
        """
        Collect the table references of the FROM clause that follows ``start``.

        References inside joins, APPLY operators and derived tables are
        included, in document order.
        """
        from_index = self._find_keyword(tokens, start, ("FROM",))
        if from_index is None:
            return None
        end = self._find_keyword(tokens, from_index + 1, ("WHERE", "OPTION", "OUTPUT"))
        if end is None:
            end = len(tokens)

        body = TokenStream(tokens[:end])
        body.pos = from_index
        references: list[TableReference] = []
        in_from = {0: False}
        depth = 0
        while not body.at_end():
            token = body.peek()
            if token.is_punct("("):
                depth += 1
                in_from[depth] = False
                body.advance()
                continue
            if token.is_punct(")"):
                in_from.pop(depth, None)
                depth = max(depth - 1, 0)
                body.advance()
                continue

            keyword = token.keyword
            if keyword in TABLE_INTRODUCERS or (token.is_punct(",") and in_from.get(depth)):
                in_from[depth] = True
                body.advance()
                reference = self._table_reference(body)
                if reference is not None:
                    references.append(reference)
                continue
            if keyword in FROM_CLAUSE_TERMINATORS:
                in_from[depth] = False
            body.advance()

        return FromClause(table_references=references)

    def _table_reference(self, body: TokenStream) -> TableReference | None:
        token = body.peek()
        if token is None:
            return None
        if token.is_variable:
            body.advance()
            self._skip_table_hints(body)
            return VariableTableReference(token.text, self._read_alias(body))
        if not token.quoted and token.keyword in NON_ALIAS_KEYWORDS:
            return None

        name = parse_object_name(body)
        if name is None or body.peek_is("("):
            # table-valued function or rowset function
            return None
        self._skip_table_hints(body)
        return NamedTableReference(name, self._read_alias(body))

    def _word_after(self, tokens: list[SqlToken], keywords: tuple[str, str]) -> str | None:
        first, second = keywords
        for index in range(len(tokens) - 2):
            if tokens[index].keyword == first and tokens[index + 1].keyword == second:
                return tokens[index + 2].text
        return None
