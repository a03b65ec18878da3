"""
Rendering of schema-object names into dotted identifiers.
"""

from tsqldeps.parser.shared.constants import MISSING_SCHEMA
from tsqldeps.parser.syntax import SchemaObjectName


def format_object_name(name: SchemaObjectName) -> str:
    """
    Render a schema-object name as a single dotted identifier.

    Server and database are left out when absent; a missing schema is written
    as ``{MISSING}``. No normalization happens beyond that, so ``T1`` and
    ``dbo.T1`` render differently.

    Args:
        name: The name to render

    Returns:
        Dotted identifier, e.g. ``srv.db.dbo.Orders`` or ``{MISSING}.Orders``
    """
    schema = name.schema if name.schema is not None else MISSING_SCHEMA
    parts = (name.server, name.database, schema, name.base)
    return ".".join(part for part in parts if part is not None)
