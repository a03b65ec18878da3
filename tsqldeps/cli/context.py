"""
Command context for shared setup across CLI commands.
"""

import traceback
from pathlib import Path

import typer

from tsqldeps.config import GraphConfig, load_config

from .utils import setup_logging


class CommandContext:
    """
    Shared context for CLI commands.

    Handles common setup: setting up logging and loading the graph configuration.
    """

    def __init__(self, verbose: bool = False, project_root: str | None = None):
        """
        Initialize command context from parameters.

        Args:
            verbose: Enable verbose output
            project_root: Directory whose pyproject.toml holds [tool.tsqldeps]
        """
        self.verbose = verbose
        setup_logging(self.verbose)

        self.project_path = Path(project_root).resolve() if project_root else Path.cwd()
        self._config: GraphConfig | None = None

    @property
    def config(self) -> GraphConfig:
        """Configuration from pyproject.toml and the environment, loaded on first use."""
        if self._config is None:
            self._config = load_config(self.project_path)
        return self._config

    def handle_error(self, error: Exception, show_traceback: bool | None = None) -> None:
        """
        Handle errors consistently across commands.

        Args:
            error: The exception that occurred
            show_traceback: Whether to show traceback (defaults to verbose mode)
        """
        if show_traceback is None:
            show_traceback = self.verbose

        error_prefix = typer.style("Error: ", fg=typer.colors.RED, bold=True)
        typer.echo(f"{error_prefix}{error}", err=True)
        if show_traceback:
            traceback.print_exc()
        raise typer.Exit(1)
