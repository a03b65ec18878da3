"""
Common type definitions for the parser module.
"""

from pathlib import Path
from typing import Any

# Rendered, dotted object name
ObjectIdentity = str

# File paths
FilePath = str | Path

# Raw configuration mapping as read from TOML or the environment
RawConfig = dict[str, Any]
