"""Tests for field statistics and the record collection model."""

from datetime import date

import pytest

from record_search.core.errors import InvalidInputError
from record_search.core.models import FieldStats, RecordCollection
from record_search.schema.extractor import FieldStatsExtractor
from record_search.schema.type_mappings import TypeMapper


class TestTypeMapper:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (True, "boolean"),
            (3, "number"),
            (2.5, "number"),
            ("x", "string"),
            ([1], "array"),
            ({"a": 1}, "object"),
            (date(2024, 1, 1), "date"),
            (None, "null"),
            (object(), "unknown"),
        ],
    )
    def test_type_of(self, value, expected):
        assert TypeMapper.type_of(value) == expected

    def test_normalize_type(self):
        assert TypeMapper.normalize_type(" Integer ") == "number"
        assert TypeMapper.normalize_type("keyword") == "string"
        assert TypeMapper.normalize_type("geo_point") == "geo_point"


class TestFieldStatsExtractor:
    def test_union_of_fields_in_first_seen_order(self):
        records = [{"a": 1, "b": "x"}, {"c": True, "a": 2}]
        assert FieldStatsExtractor.field_names(records) == ["a", "b", "c"]

    def test_compute(self):
        records = [
            {"name": "John", "age": 30, "tags": ["a"]},
            {"name": "Jane", "age": None, "tags": ["a"]},
            {"name": "", "age": 30},
        ]
        stats = FieldStatsExtractor.compute(records)
        assert stats["name"].type == "string"
        assert stats["name"].null_count == 1
        assert stats["name"].unique_count == 2
        assert stats["age"].type == "number"
        assert stats["age"].null_count == 1
        assert stats["age"].unique_count == 1
        assert stats["tags"].type == "array"
        assert stats["tags"].null_count == 1
        assert stats["tags"].unique_count == 1

    def test_all_null_field(self):
        stats = FieldStatsExtractor.compute([{"x": None}, {"x": ""}])
        assert stats["x"].type == "null"
        assert stats["x"].null_count == 2

    def test_empty_collection(self):
        assert FieldStatsExtractor.compute([]) == {}

    @pytest.mark.parametrize("records", [None, "records", {"a": 1}, [{"a": 1}, "oops"]])
    def test_invalid_records(self, records):
        with pytest.raises(InvalidInputError):
            FieldStatsExtractor.compute(records)


class TestRecordCollection:
    def test_from_records_keeps_caller_objects(self, people):
        collection = RecordCollection.from_records(people)
        assert collection.records is people
        assert len(collection) == 2
        assert collection.field_names() == ["name", "age", "city"]

    def test_field_catalog_uses_first_record_examples(self, people):
        catalog = RecordCollection.from_records(people).field_catalog()
        assert [(f.name, f.type, f.example) for f in catalog] == [
            ("name", "string", "John"),
            ("age", "number", 30),
            ("city", "string", "NYC"),
        ]

    def test_schema_types_override_inferred_types(self, people):
        collection = RecordCollection.from_records(people, schema_types={"age": "integer"})
        assert collection.type_for("age") == "number"
        assert collection.type_for("city") == "string"
        assert collection.type_for("missing") == "unknown"

    def test_constructor_computes_field_stats(self, people):
        collection = RecordCollection(records=people)
        assert collection.field_names() == ["name", "age", "city"]
        assert collection.type_for("age") == "number"
        assert collection.field_stats["city"].unique_count == 2

    def test_constructor_keeps_given_field_stats(self, people):
        stats = {"name": FieldStats(type="string")}
        assert RecordCollection(records=people, field_stats=stats).field_names() == ["name"]

    def test_example_for_empty_collection(self):
        assert RecordCollection.from_records([]).example_for("x") is None
