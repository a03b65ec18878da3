"""
Output layer: rendering of dependency edges.
"""

from .dot_writer import DotWriter
from .json_writer import JsonLinesWriter

__all__ = [
    "DotWriter",
    "JsonLinesWriter",
]
