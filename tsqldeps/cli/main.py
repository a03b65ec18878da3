"""
tsqldeps CLI Main Module

Command-line interface for extracting dependency graphs from T-SQL scripts.
"""

from typing import Any

import typer

from tsqldeps.cli.commands import cmd_graph, cmd_objects
from tsqldeps.parser.shared.constants import OUTPUT_FORMATS


class AlphabeticalOrderGroup(typer.core.TyperGroup):
    """Custom Typer Group that lists commands in alphabetical order."""

    def list_commands(self, ctx: typer.Context) -> list[str]:
        return sorted(self.commands.keys())


def validate_format(value: str | None) -> str | None:
    """Validate format option (dot or json)."""
    if value is not None and value not in OUTPUT_FORMATS:
        raise typer.BadParameter(
            typer.style("Error: ", fg=typer.colors.RED, bold=True)
            + f"Invalid format '{value}'. Must be one of: {', '.join(OUTPUT_FORMATS)}."
        )
    return value


app = typer.Typer(
    name="tsqldeps",
    help="tsqldeps - dependency graphs of T-SQL procedures and triggers",
    add_completion=False,
    rich_markup_mode="rich",
    cls=AlphabeticalOrderGroup,
    invoke_without_command=True,
)


@app.callback()
def main_callback(ctx: typer.Context) -> None:
    """Main CLI callback - shows help when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


# Common option definitions to reduce duplication
SQL_FILE_ARG = typer.Argument(None, help="T-SQL script to analyse, or - for stdin")
VERBOSE_OPTION = typer.Option(False, "-v", "--verbose", help="Enable verbose output")
INCLUDE_ALTER_OPTION = typer.Option(
    False, "--include-alter", help="Also analyse ALTER and CREATE OR ALTER definitions"
)
PROJECT_ROOT_OPTION = typer.Option(
    None, "--project-root", help="Directory whose pyproject.toml holds [tool.tsqldeps]"
)


def _check_required_argument(ctx: typer.Context, arg_value: Any) -> None:
    """Check if a required argument is provided, show help if not."""
    if arg_value is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)


@app.command()
def graph(
    ctx: typer.Context,
    sql_file: str | None = SQL_FILE_ARG,
    output_format: str | None = typer.Option(
        None, "-f", "--format", help="Output format: dot or json", callback=validate_format
    ),
    output: str | None = typer.Option(None, "-o", "--output", help="Write edges to this file"),
    escape_quotes: bool = typer.Option(
        False, "--escape-quotes", help="Escape double quotes inside names"
    ),
    wrap: bool = typer.Option(False, "--wrap", help="Wrap DOT edges in a digraph block"),
    include_alter: bool = INCLUDE_ALTER_OPTION,
    exclude_temp_tables: bool = typer.Option(
        False, "--exclude-temp-tables", help="Leave out edges to #temp tables"
    ),
    ignore_alias_case: bool = typer.Option(
        False, "--ignore-alias-case", help="Match UPDATE/DELETE target aliases case-insensitively"
    ),
    strict: bool = typer.Option(False, "--strict", help="Fail on any parse issue"),
    project_root: str | None = PROJECT_ROOT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Extract the dependency edges of a T-SQL script."""
    _check_required_argument(ctx, sql_file)
    cmd_graph(
        sql_file=sql_file,
        output_format=output_format,
        output=output,
        escape_quotes=escape_quotes,
        wrap=wrap,
        include_alter=include_alter,
        exclude_temp_tables=exclude_temp_tables,
        ignore_alias_case=ignore_alias_case,
        strict=strict,
        verbose=verbose,
        project_root=project_root,
    )


@app.command()
def objects(
    ctx: typer.Context,
    sql_file: str | None = SQL_FILE_ARG,
    include_alter: bool = INCLUDE_ALTER_OPTION,
    project_root: str | None = PROJECT_ROOT_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """List the procedures and triggers defined in a T-SQL script."""
    _check_required_argument(ctx, sql_file)
    cmd_objects(
        sql_file=sql_file,
        include_alter=include_alter,
        verbose=verbose,
        project_root=project_root,
    )


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
