"""
Custom exceptions for the parser module.
"""


class ParserError(Exception):
    """Base exception for all parser-related errors."""

    pass


class SQLParsingError(ParserError):
    """Raised when SQL parsing fails."""

    pass


class DependencyError(ParserError):
    """Raised when dependency extraction fails."""

    pass


class OutputGenerationError(ParserError):
    """Raised when output generation fails."""

    pass


class ConfigError(ParserError):
    """Raised when the graph configuration is invalid."""

    pass
