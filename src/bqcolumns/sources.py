"""Loading schema and data documents from JSON files.

Typical layout of an exported result set: one schema file holding the table
metadata and one file per page of rows::

    export/
      schema.json
      rows-000.json
      rows-001.json

``decode_files`` decodes the pages in the order given, loading one file at a
time into a table allocated for the known total row count.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any

import bqcolumns.api as api
import bqcolumns.errors as errors
from bqcolumns.columns import Table

logger = logging.getLogger(__name__)


def load_document(path: Path | str) -> Any:
    """Read and parse one JSON document.

    Raises:
        SourceError: If the file cannot be read or is not valid JSON.
    """
    path = Path(path)
    try:
        with path.open("rb") as f:
            return json.load(f)
    except FileNotFoundError as e:
        raise errors.SourceError(str(path), "File not found") from e
    except OSError as e:
        raise errors.SourceError(str(path), f"Could not read file: {e}") from e
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise errors.SourceError(str(path), f"Invalid JSON: {e}") from e


def iter_documents(paths: Iterable[Path | str]) -> Iterator[Any]:
    """Yield parsed documents lazily, in order."""
    for path in paths:
        logger.debug("Loading %s", path)
        yield load_document(path)


def decode_files(
    schema_path: Path | str,
    data_paths: Iterable[Path | str],
    total_rows: int,
    on_document_done: api.DocumentCallback | None = None,
) -> Table:
    """Decode data files against the schema file into one table of ``total_rows``.

    The first unreadable file aborts the whole decode.
    """
    schema_document = load_document(schema_path)
    return api.decode_many(
        schema_document,
        iter_documents(data_paths),
        total_rows,
        on_document_done=on_document_done,
    )
