"""
Token stream over the sqlglot T-SQL tokenizer.
"""

import logging
from dataclasses import dataclass

from sqlglot.dialects.tsql import TSQL
from sqlglot.errors import TokenError
from sqlglot.tokens import TokenType

from tsqldeps.parser.shared.exceptions import SQLParsingError

logger = logging.getLogger(__name__)

# Prefixes the tokenizer may emit as separate tokens before a name
_NAME_PREFIXES = ("@", "@@", "#", "##")

# Token types whose text differs from the source by its quotes
_QUOTED_TYPES = {
    TokenType.IDENTIFIER,
    TokenType.STRING,
    TokenType.NATIONAL_STRING,
    TokenType.HEX_STRING,
    TokenType.BIT_STRING,
    TokenType.BYTE_STRING,
    TokenType.RAW_STRING,
}


class _BodyTokenizer(TSQL.Tokenizer):
    """
    T-SQL tokenizer for procedure bodies.

    The stock tokenizer folds the rest of a statement into a single string
    after command keywords (EXEC, FETCH, END, ...) that open an input or follow
    BEGIN or a semicolon. Bodies need every token, so nothing is folded.
    """

    COMMANDS = set()


@dataclass(frozen=True)
class SqlToken:
    """A single token; quoted identifiers and strings carry their unquoted text."""

    text: str
    line: int = 0
    quoted: bool = False

    @property
    def keyword(self) -> str | None:
        """Upper-cased text for unquoted tokens, None for quoted ones."""
        if self.quoted:
            return None
        return self.text.upper()

    @property
    def is_variable(self) -> bool:
        return not self.quoted and self.text.startswith("@")

    @property
    def is_name_part(self) -> bool:
        """Whether the token can be one part of a dotted object name."""
        if self.quoted:
            return bool(self.text)
        first = self.text[:1]
        return first.isalpha() or first in ("_", "#")

    def is_punct(self, text: str) -> bool:
        return not self.quoted and self.text == text


def tokenize(sql: str, line_offset: int = 0) -> list[SqlToken]:
    """
    Tokenize T-SQL text.

    Variable and temp-table prefixes are glued to their names (``@rows``,
    ``#staging``), and multi-word keyword tokens are split into words.

    Args:
        sql: T-SQL text
        line_offset: Added to every token line, for text cut out of a larger script

    Returns:
        Tokens in source order, comments dropped

    Raises:
        SQLParsingError: If the text cannot be tokenized
    """
    try:
        raw_tokens = _BodyTokenizer(dialect="tsql").tokenize(sql)
    except TokenError as e:
        raise SQLParsingError(f"Failed to tokenize T-SQL: {e}") from e

    tokens: list[SqlToken] = []
    i = 0
    while i < len(raw_tokens):
        raw = raw_tokens[i]
        line = raw.line + line_offset
        if raw.token_type in _QUOTED_TYPES:
            tokens.append(SqlToken(raw.text, line, quoted=True))
            i += 1
            continue

        # keyword tokens carry upper-cased text, names keep their source spelling
        source = sql[raw.start : raw.end + 1]
        if source in _NAME_PREFIXES:
            end = raw.end
            j = i + 1
            while j < len(raw_tokens) and raw_tokens[j].start == end + 1:
                nxt = raw_tokens[j]
                if nxt.token_type in _QUOTED_TYPES:
                    break
                part = sql[nxt.start : nxt.end + 1]
                source += part
                end = nxt.end
                j += 1
                if part not in _NAME_PREFIXES:
                    break
            tokens.append(SqlToken(source, line))
            i = j
            continue

        if source and set(source) == {"."}:
            # db..table
            tokens.extend(SqlToken(".", line) for _ in source)
        else:
            tokens.extend(SqlToken(word, line) for word in source.split())
        i += 1

    return tokens


class TokenStream:
    """Cursor over a token list."""

    def __init__(self, tokens: list[SqlToken]):
        self.tokens = tokens
        self.pos = 0

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def peek(self, offset: int = 0) -> SqlToken | None:
        index = self.pos + offset
        if 0 <= index < len(self.tokens):
            return self.tokens[index]
        return None

    def peek_keyword(self, offset: int = 0) -> str | None:
        token = self.peek(offset)
        return token.keyword if token is not None else None

    def peek_is(self, text: str, offset: int = 0) -> bool:
        token = self.peek(offset)
        return token is not None and token.is_punct(text)

    def advance(self, count: int = 1) -> SqlToken | None:
        token = self.peek()
        self.pos = min(self.pos + count, len(self.tokens))
        return token

    def match_keyword(self, *keywords: str) -> bool:
        """Consume the next token if it is one of the keywords."""
        if self.peek_keyword() in keywords:
            self.advance()
            return True
        return False

    def skip_semicolons(self) -> None:
        while self.peek_is(";"):
            self.advance()

    def rest(self) -> list[SqlToken]:
        return self.tokens[self.pos :]
