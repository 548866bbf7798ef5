"""Tests for record and repeated value decoding."""

from __future__ import annotations

import pytest

import bqcolumns.columns as columns
import bqcolumns.errors as errors
import bqcolumns.records as records
import bqcolumns.schema as schema_mod
from wire import field, record, repeated


@pytest.fixture
def address() -> schema_mod.Field:
    return schema_mod.parse_field(
        field(
            "address",
            "RECORD",
            fields=[
                field("city", "STRING"),
                field("zips", "INTEGER", mode="REPEATED"),
                field("geo", "RECORD", fields=[field("lat", "FLOAT"), field("lon", "FLOAT")]),
            ],
        )
    )


@pytest.fixture
def items() -> schema_mod.Field:
    return schema_mod.parse_field(
        field(
            "items",
            "RECORD",
            mode="REPEATED",
            fields=[field("sku", "STRING"), field("qty", "INTEGER")],
        )
    )


class TestRepeatedScalar:
    def test_three_elements(self) -> None:
        """A wire array of three values becomes a three-cell column."""
        xs = schema_mod.parse_field(field("xs", "INTEGER", mode="REPEATED"))
        col = columns.allocate_column(xs, 1)

        records.set_cell(col, 0, repeated("1", "2", "3"))

        assert len(col[0]) == 3
        assert col[0].cells == [1, 2, 3]

    def test_empty_array(self) -> None:
        xs = schema_mod.parse_field(field("xs", "STRING", mode="REPEATED"))

        assert len(records.decode_repeated(xs, [])) == 0

    def test_null_elements_decode_to_null(self) -> None:
        xs = schema_mod.parse_field(field("xs", "DATE", mode="REPEATED"))

        assert records.decode_repeated(xs, repeated("1970-01-02", None, "bad")).cells == [1, None, None]

    def test_non_array_raises(self) -> None:
        xs = schema_mod.parse_field(field("xs", "INTEGER", mode="REPEATED"))
        col = columns.allocate_column(xs, 1)

        with pytest.raises(errors.StructuralError, match="array"):
            records.set_cell(col, 0, "1")

    def test_unwrapped_element_raises(self) -> None:
        xs = schema_mod.parse_field(field("xs", "INTEGER", mode="REPEATED"))

        with pytest.raises(errors.StructuralError):
            records.decode_repeated(xs, ["1", "2"])


class TestRecord:
    def test_decodes_children(self, address: schema_mod.Field) -> None:
        table = records.decode_record(
            address, record("Paris", repeated("75001", "75002"), record("48.85", "2.35"))
        )

        assert table.num_rows == 1
        assert table["city"][0] == "Paris"
        assert table["zips"][0].cells == [75001, 75002]
        assert table["geo"][0]["lat"][0] == 48.85

    def test_repeated_child_sized_by_array(self, address: schema_mod.Field) -> None:
        table = records.decode_record(address, record(None, repeated("1"), None))

        assert len(table["zips"][0]) == 1

    @pytest.mark.parametrize("node", [None, "text", []])
    def test_non_object_is_all_null(self, address: schema_mod.Field, node: object) -> None:
        """A NULL struct yields a row whose every child cell is null."""
        table = records.decode_record(address, node)

        assert table.to_pylist() == [
            {"city": None, "zips": [], "geo": {"lat": None, "lon": None}}
        ]

    def test_missing_child_array_raises(self, address: schema_mod.Field) -> None:
        with pytest.raises(errors.StructuralError, match="'f' array"):
            records.decode_record(address, {"f": "oops"})

    def test_short_child_array_raises(self, address: schema_mod.Field) -> None:
        with pytest.raises(errors.StructuralError, match="3 child values"):
            records.decode_record(address, record("Paris"))

    def test_malformed_repeated_child_raises(self, address: schema_mod.Field) -> None:
        """Leniency covers the record itself, not arrays inside it."""
        with pytest.raises(errors.StructuralError):
            records.decode_record(address, record("Paris", "not-an-array", None))

    def test_fills_preallocated_row(self, address: schema_mod.Field) -> None:
        col = columns.allocate_column(address, 2)
        row = col.rows[1]

        records.set_cell(col, 1, record("Oslo", [], None))

        assert col.rows[1] is row
        assert row["city"][0] == "Oslo"
        assert col.rows[0]["city"][0] is None


class TestRepeatedRecord:
    def test_struct_of_arrays(self, items: schema_mod.Field) -> None:
        """Array of structs on the wire becomes one column per child."""
        table = records.decode_repeated_record(
            items, repeated(record("a", "1"), record("b", "2"), record("c", None))
        )

        assert table.num_rows == 3
        assert table["sku"].cells == ["a", "b", "c"]
        assert table["qty"].cells == [1, 2, None]

    @pytest.mark.parametrize("node", [None, {}, "x"])
    def test_non_array_is_empty(self, items: schema_mod.Field, node: object) -> None:
        table = records.decode_repeated_record(items, node)

        assert table.num_rows == 0
        assert table.column_names == ["sku", "qty"]

    def test_element_without_child_array_raises(self, items: schema_mod.Field) -> None:
        with pytest.raises(errors.StructuralError):
            records.decode_repeated_record(items, [{"v": None}])

    def test_nested_repeated_record_in_record(self) -> None:
        order = schema_mod.parse_field(
            field(
                "order",
                "RECORD",
                fields=[
                    field("id", "INTEGER"),
                    field("lines", "RECORD", mode="REPEATED", fields=[field("sku", "STRING")]),
                ],
            )
        )

        table = records.decode_record(order, record("9", repeated(record("x"), record("y"))))

        lines = table["lines"][0]
        assert lines.num_rows == 2
        assert lines["sku"].cells == ["x", "y"]

    def test_null_element_in_record_is_all_null_row(self) -> None:
        order = schema_mod.parse_field(
            field(
                "order",
                "RECORD",
                fields=[
                    field("lines", "RECORD", mode="REPEATED", fields=[field("sku", "STRING")]),
                ],
            )
        )

        table = records.decode_record(order, record([{"v": None}, {"v": record("x")}]))

        lines = table["lines"][0]
        assert lines.num_rows == 2
        assert lines["sku"].cells == [None, "x"]
        assert table.to_pylist() == [{"lines": [{"sku": None}, {"sku": "x"}]}]

    def test_non_array_in_record_raises(self) -> None:
        order = schema_mod.parse_field(
            field(
                "order",
                "RECORD",
                fields=[
                    field("lines", "RECORD", mode="REPEATED", fields=[field("sku", "STRING")]),
                ],
            )
        )

        with pytest.raises(errors.StructuralError, match="lines"):
            records.decode_record(order, record(None))

    def test_set_cell_replaces_row(self, items: schema_mod.Field) -> None:
        col = columns.allocate_column(items, 2)

        records.set_cell(col, 1, repeated(record("z", "5")))

        assert col[0].num_rows == 0
        assert col[1].to_pylist() == [{"sku": "z", "qty": 5}]
