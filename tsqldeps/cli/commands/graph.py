"""
Graph command implementation.
"""

import logging
import os
import sys
from pathlib import Path

from tsqldeps.cli.context import CommandContext
from tsqldeps.cli.utils import STDIN_PATH, read_sql_file
from tsqldeps.config import GraphConfig
from tsqldeps.parser.analysis import DependencyExtractor
from tsqldeps.parser.output import DotWriter, JsonLinesWriter
from tsqldeps.parser.parsers import ScriptParser
from tsqldeps.parser.shared.exceptions import SQLParsingError
from tsqldeps.parser.syntax import Script

logger = logging.getLogger(__name__)


def _make_writer(config: GraphConfig, stream):
    if config.output_format == "json":
        return JsonLinesWriter(stream)
    return DotWriter(
        stream,
        escape_quotes=config.escape_quotes,
        wrap=config.wrap_digraph,
        graph_name=config.graph_name,
    )


def _write_edges(config: GraphConfig, script: Script, stream) -> int:
    writer = _make_writer(config, stream)
    DependencyExtractor(
        writer,
        include_alter=config.include_alter,
        exclude_temp_tables=config.exclude_temp_tables,
        ignore_alias_case=config.ignore_alias_case,
    ).extract(script)
    writer.close()
    return writer.count


def _write_to_file(config: GraphConfig, script: Script, path: Path) -> int:
    """Write edges next to the output file, moving them into place only once complete."""
    partial = path.with_name(f"{path.name}.partial")
    try:
        with open(partial, "w", encoding="utf-8") as stream:
            count = _write_edges(config, script, stream)
        os.replace(partial, path)
    except Exception:
        partial.unlink(missing_ok=True)
        raise
    return count


def cmd_graph(
    sql_file: str,
    output_format: str | None = None,
    output: str | None = None,
    escape_quotes: bool = False,
    wrap: bool = False,
    include_alter: bool = False,
    exclude_temp_tables: bool = False,
    ignore_alias_case: bool = False,
    strict: bool = False,
    verbose: bool = False,
    project_root: str | None = None,
):
    """Execute the graph command."""
    ctx = CommandContext(verbose=verbose, project_root=project_root)

    try:
        # Flags only switch options on; configured values stay otherwise
        config = ctx.config.with_overrides(
            output_format=output_format,
            escape_quotes=escape_quotes or None,
            wrap_digraph=wrap or None,
            include_alter=include_alter or None,
            exclude_temp_tables=exclude_temp_tables or None,
            ignore_alias_case=ignore_alias_case or None,
            strict=strict or None,
        )

        sql = read_sql_file(sql_file)
        source = "<stdin>" if sql_file == STDIN_PATH else sql_file
        script = ScriptParser().parse(sql, file_path=source)

        if script.issues:
            if config.strict:
                first = script.issues[0]
                raise SQLParsingError(
                    f"{len(script.issues)} parse issue(s) in {source}, "
                    f"first at line {first.line}: {first.message}"
                )
            logger.warning(f"{len(script.issues)} parse issue(s) in {source}")

        if output:
            count = _write_to_file(config, script, Path(output))
        else:
            count = _write_edges(config, script, sys.stdout)

        logger.info(f"Wrote {count} edges")

    except Exception as e:
        ctx.handle_error(e)
