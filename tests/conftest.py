"""
Pytest configuration and shared fixtures for tsqldeps tests.
"""

import pytest

from tsqldeps.parser.analysis import extract_edges
from tsqldeps.parser.parsers import parse_script


@pytest.fixture
def edges_of():
    """Parse T-SQL and return its edges as (source, target, kind) tuples."""

    def _edges_of(sql: str, **options) -> list[tuple[str, str, str]]:
        return [edge.as_tuple() for edge in extract_edges(parse_script(sql), **options)]

    return _edges_of


@pytest.fixture
def sql_file(tmp_path):
    """Write T-SQL text to a .sql file and return its path."""

    def _sql_file(sql: str, filename: str = "script.sql") -> str:
        path = tmp_path / filename
        path.write_text(sql, encoding="utf-8")
        return str(path)

    return _sql_file
