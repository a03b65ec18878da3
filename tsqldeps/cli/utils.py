"""
CLI utility functions.

Pure, stateless utility functions used across CLI commands.
"""

import logging
import sys
from pathlib import Path

from tsqldeps.parser.shared.constants import SUPPORTED_SQL_EXTENSIONS

logger = logging.getLogger(__name__)

STDIN_PATH = "-"


def read_sql_file(sql_file: str) -> str:
    """
    Read a T-SQL script.

    Args:
        sql_file: Path to the script, or "-" to read standard input

    Returns:
        Script text

    Raises:
        FileNotFoundError: If the file does not exist
    """
    if sql_file == STDIN_PATH:
        return sys.stdin.read()

    path = Path(sql_file)
    if not path.is_file():
        raise FileNotFoundError(f"SQL file not found: {sql_file}")
    if path.suffix.lower() not in SUPPORTED_SQL_EXTENSIONS:
        logger.warning(f"{sql_file} does not have a .sql extension, parsing it anyway")

    # utf-8-sig drops the byte order mark SSMS writes
    with open(path, encoding="utf-8-sig") as f:
        return f.read()


def setup_logging(verbose: bool = False) -> None:
    """
    Set up logging configuration.

    Log records go to stderr so edges written to stdout stay clean.

    Args:
        verbose: If True, set logging level to DEBUG, otherwise INFO
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(levelname)s - %(name)s - %(message)s", stream=sys.stderr
    )
