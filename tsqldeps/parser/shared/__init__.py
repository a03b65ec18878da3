"""
Shared utilities and common types for the parser module.
"""

from .types import *
from .exceptions import *
from .constants import *

__all__ = [
    # Types
    "ObjectIdentity",
    "FilePath",
    "RawConfig",
    # Exceptions
    "ParserError",
    "SQLParsingError",
    "DependencyError",
    "OutputGenerationError",
    "ConfigError",
    # Constants
    "MISSING_SCHEMA",
    "DYNAMIC_EXEC_TARGET",
    "DEFAULT_CONTRACT",
    "SUPPORTED_SQL_EXTENSIONS",
    "OUTPUT_FORMATS",
    "DEFAULT_GRAPH_NAME",
]
