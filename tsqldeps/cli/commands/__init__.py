"""
CLI command implementations.
"""

from tsqldeps.cli.commands.graph import cmd_graph
from tsqldeps.cli.commands.objects import cmd_objects

__all__ = ["cmd_graph", "cmd_objects"]
