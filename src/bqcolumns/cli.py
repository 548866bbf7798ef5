"""bqcolumns CLI: decode exported query results into columnar files."""

from __future__ import annotations

import logging
import sys
import time
from pathlib import Path
from typing import Annotated

import cyclopts
import pyarrow.parquet as pq
from loguru import logger
from rich.console import Console

import bqcolumns.api as api
import bqcolumns.errors as errors
import bqcolumns.output as output
import bqcolumns.schema as schema_mod
import bqcolumns.settings as settings
import bqcolumns.sources as sources

# Version is defined here and in pyproject.toml
__version__ = "0.1.0"

console = Console()

app = cyclopts.App(
    name="bqcolumns",
    help="Decode paginated query result JSON into typed columnar tables.",
    version=__version__,
)

# stdlib logging has no TRACE/SUCCESS
_STDLIB_LEVELS = {"TRACE": "DEBUG", "SUCCESS": "INFO"}


class _InterceptHandler(logging.Handler):
    """Forward records from the library's stdlib loggers to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        logger.opt(depth=6, exception=record.exc_info).log(record.levelname, record.getMessage())


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level)

    package_logger = logging.getLogger("bqcolumns")
    package_logger.setLevel(_STDLIB_LEVELS.get(level, level))
    if not any(isinstance(h, _InterceptHandler) for h in package_logger.handlers):
        package_logger.addHandler(_InterceptHandler())


def _load(config: Path | None) -> settings.DecodeSettings:
    decode_settings = settings.load_settings(config)
    _configure_logging(decode_settings.log_level)
    return decode_settings


@app.command
def schema(
    schema_path: Annotated[
        Path,
        cyclopts.Parameter(help="Table metadata JSON with schema.fields"),
    ],
    config: Annotated[
        Path | None,
        cyclopts.Parameter(name="--config", help="YAML settings file"),
    ] = None,
):
    """Show the field tree of a schema file."""
    try:
        _load(config)
        parsed = schema_mod.parse_schema(sources.load_document(schema_path))
        output.render_schema(parsed, title=str(schema_path))
    except errors.BqColumnsError as e:
        output.render_error(e)
        raise SystemExit(1)


@app.command
def decode(
    schema_path: Annotated[
        Path,
        cyclopts.Parameter(help="Table metadata JSON with schema.fields"),
    ],
    *data_paths: Annotated[
        Path,
        cyclopts.Parameter(help="Data pages, decoded in the order given"),
    ],
    rows: Annotated[
        int | None,
        cyclopts.Parameter(name="--rows", help="Total rows across all pages"),
    ] = None,
    output_path: Annotated[
        Path | None,
        cyclopts.Parameter(name="--output", help="Write a Parquet file instead of a preview"),
    ] = None,
    quiet: Annotated[
        bool,
        cyclopts.Parameter(name="--quiet", help="Hide the progress bar"),
    ] = False,
    config: Annotated[
        Path | None,
        cyclopts.Parameter(name="--config", help="YAML settings file"),
    ] = None,
):
    """Decode data pages into one table.

    A single page can be decoded without --rows. Several pages need the
    total row count up front so the table is allocated once.

    Examples:
        bqcolumns decode schema.json page.json
        bqcolumns decode schema.json rows-*.json --rows 120000 --output out.parquet
    """
    try:
        decode_settings = _load(config)

        if not data_paths:
            console.print("[red]Error:[/red] No data files given")
            raise SystemExit(1)

        t0 = time.perf_counter()
        if rows is None:
            if len(data_paths) > 1:
                console.print("[red]Error:[/red] --rows is required with more than one data file")
                console.print("[dim]Pass the total row count of the result set.[/dim]")
                raise SystemExit(1)
            table = api.decode_one(
                sources.load_document(schema_path),
                sources.load_document(data_paths[0]),
            )
        else:
            quiet = quiet or decode_settings.quiet
            with output.document_progress(len(data_paths), quiet=quiet) as tick:
                table = sources.decode_files(schema_path, data_paths, rows, on_document_done=tick)
        t_decode = time.perf_counter() - t0
        logger.debug(
            f"Decode: {t_decode * 1000:.1f}ms ({len(data_paths)} files, {table.num_rows} rows)"
        )

        if output_path is None:
            output.render_table_preview(table, limit=decode_settings.preview_rows)
            return

        t0 = time.perf_counter()
        output_path.parent.mkdir(parents=True, exist_ok=True)
        pq.write_table(
            table.to_arrow(),
            str(output_path),
            compression=decode_settings.parquet_compression,
        )
        logger.debug(f"Write: {(time.perf_counter() - t0) * 1000:.1f}ms")
        output.render_written(str(output_path), table)

    except errors.BqColumnsError as e:
        output.render_error(e)
        raise SystemExit(1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
