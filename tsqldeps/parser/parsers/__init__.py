"""
Parsers layer: T-SQL scripts into syntax trees.
"""

from .base import BaseParser
from .script_parser import ScriptParser, parse_script, split_batches
from .statement_parser import StatementParser, parse_object_name
from .tokens import SqlToken, TokenStream, tokenize

__all__ = [
    "BaseParser",
    "ScriptParser",
    "SqlToken",
    "StatementParser",
    "TokenStream",
    "parse_object_name",
    "parse_script",
    "split_batches",
    "tokenize",
]
