"""
Objects command implementation.
"""

import typer

from tsqldeps.cli.context import CommandContext
from tsqldeps.cli.utils import STDIN_PATH, read_sql_file
from tsqldeps.parser.analysis import DependencyExtractor, ListSink, Trigger
from tsqldeps.parser.parsers import ScriptParser


def cmd_objects(
    sql_file: str,
    include_alter: bool = False,
    verbose: bool = False,
    project_root: str | None = None,
):
    """Execute the objects command."""
    ctx = CommandContext(verbose=verbose, project_root=project_root)

    try:
        config = ctx.config.with_overrides(include_alter=include_alter or None)
        sql = read_sql_file(sql_file)
        source = "<stdin>" if sql_file == STDIN_PATH else sql_file
        script = ScriptParser().parse(sql, file_path=source)

        extractor = DependencyExtractor(ListSink(), include_alter=config.include_alter)
        found = 0
        for obj in extractor.top_level_objects(script):
            line = f"{obj.object_type}\t{obj.name}"
            if isinstance(obj, Trigger) and obj.table is not None:
                line += f"\ton {obj.table}"
            typer.echo(line)
            found += 1

        if verbose:
            typer.echo(f"Found {found} objects", err=True)

    except Exception as e:
        ctx.handle_error(e)
