"""Shared fixtures: schema and data documents in the wire shape."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from wire import data_doc, field, record, repeated, row, schema_doc


@pytest.fixture
def person_schema() -> dict:
    """Scalars, a repeated scalar, a record and a repeated record."""
    return schema_doc(
        field("id", "INTEGER"),
        field("name", "STRING"),
        field("tags", "STRING", mode="REPEATED"),
        field(
            "address",
            "RECORD",
            fields=[
                field("city", "STRING"),
                field("zip", "INTEGER"),
            ],
        ),
        field(
            "phones",
            "RECORD",
            mode="REPEATED",
            fields=[
                field("kind", "STRING"),
                field("number", "STRING"),
            ],
        ),
    )


@pytest.fixture
def person_data() -> dict:
    return data_doc(
        row(
            "1",
            "ada",
            repeated("a", "b"),
            record("London", "12345"),
            repeated(record("home", "555-1"), record("work", "555-2")),
        ),
        row(
            "2",
            None,
            [],
            None,
            [],
        ),
    )


@pytest.fixture
def write_json(tmp_path: Path):
    """Write a document to tmp_path and return its path."""

    def _write(name: str, document: Any) -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document))
        return path

    return _write
