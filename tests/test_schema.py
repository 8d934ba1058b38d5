import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

import pytest
from pydantic import BaseModel

from es_query_builder import ConfigurationError, IndexDefinition, IndexSelector, TypeMapper
from es_query_builder.core import Indexable, ModelMetadata
from es_query_builder.schema import PRESERVE, decode, mapping_template
from tests.models import Gadget, Sprocket, Unindexed, Widget


class Color(Enum):
    RED = "red"


class TestIndexNames:
    def test_split_versions(self):
        assert Widget.es_index("read") == "widgets1"
        assert Widget.es_index("index") == "widgets2"
        assert Widget.es_index("delete") == "widgets1"

    def test_selector_enum(self):
        assert Widget.es_index(IndexSelector.INDEX) == "widgets2"
        assert Widget.es_index() == "widgets1"

    def test_named_index(self):
        assert Widget.es_index("archive") == "widget_archive"

    def test_single_version(self):
        assert Gadget.es_index("read") == "gadgets2"
        assert Gadget.es_index("index") == "gadgets2"

    def test_no_version(self):
        assert Sprocket.es_index("read") == "sprockets"

    def test_doc_type_defaults_to_none(self):
        assert IndexDefinition("thing").doc_type() is None
        assert Sprocket.doc_type() is None

    def test_legacy_doc_type(self):
        assert Widget.doc_type() == "widget"

    def test_owns_index(self):
        assert Widget.owns_index("widgets1")
        assert Widget.owns_index("widgets2")
        assert Widget.owns_index("widget_archive")
        assert not Widget.owns_index("widgets3")
        assert not Widget.owns_index("gadgets2")
        assert not Widget.owns_index(None)
        assert Sprocket.owns_index("sprockets")


class TestMappings:
    def test_widget_mappings(self):
        assert Widget.es_mappings() == {
            "properties": {
                "name": {"type": "text"},
                "age": {"type": "long"},
                "group": {"type": "keyword"},
                "user": {"properties": {"ext_name": {"type": "text"}}},
                "teams": {
                    "type": "nested",
                    "properties": {"name": {"type": "keyword"}, "rating": {"type": "integer"}},
                },
            },
            "dynamic": "strict",
        }

    def test_uuid_maps_to_keyword(self):
        assert Sprocket.es_type("ref") == "keyword"

    def test_unknown_field(self):
        assert Widget.es_type("missing") is None

    def test_settings(self):
        assert Gadget.es_settings() == {"settings": {"number_of_shards": 1}}
        assert Widget.es_settings() == {"settings": {}}

    def test_mapped_fields_keep_declaration_order(self):
        assert Widget.mapped_fields() == ["name", "age", "group", "user", "teams"]

    def test_mapping_options(self):
        assert Widget.mapping_options() == {"dynamic": "strict"}

    def test_definition_is_bound(self):
        assert Widget.index_definition.model is Widget

    def test_mapping_does_not_mutate(self):
        base = IndexDefinition("thing")
        base.mapping("name")

        assert base.mappings == ()

    def test_missing_definition(self):
        with pytest.raises(ConfigurationError):
            Unindexed.es_index()


class TestTypeMapper:
    @pytest.mark.parametrize(
        "tag,expected",
        [
            ("binary_id", "keyword"),
            ("integer", "long"),
            ("float", "double"),
            ("string", "text"),
            ("boolean", "boolean"),
            ("utc_datetime", "date"),
            ("geo_point", "geo_point"),
        ],
    )
    def test_tags(self, tag, expected):
        assert TypeMapper.infer(tag) == expected

    @pytest.mark.parametrize(
        "annotation,expected",
        [
            (bool, "boolean"),
            (int, "long"),
            (float, "double"),
            (Decimal, "double"),
            (uuid.UUID, "keyword"),
            (Color, "keyword"),
            (datetime, "date"),
            (date, "date"),
            (str, "text"),
            (Optional[int], "long"),
            (List[str], "text"),
            (dict, None),
            (None, None),
        ],
    )
    def test_annotations(self, annotation, expected):
        assert TypeMapper.infer(annotation) == expected

    def test_custom_mapper(self):
        class KeywordStrings(TypeMapper):
            @classmethod
            def infer(cls, field_type):
                if field_type is str:
                    return "keyword"
                return super().infer(field_type)

        class Thing(BaseModel):
            name: str

        definition = IndexDefinition("thing", type_mapper=KeywordStrings).mapping("name")
        bound = definition.bind(Thing)

        assert bound.es_mappings() == {"properties": {"name": {"type": "keyword"}}}


class TestDecoding:
    def test_mapping_template(self):
        assert mapping_template("name", {}) == ("name", "name", PRESERVE)
        assert mapping_template("user", {"properties": {"ext_name": {"type": "text"}}}) == (
            "user",
            "user",
            [("ext_name", "ext_name", PRESERVE)],
        )

    def test_decode_drops_unmapped_keys(self):
        template = [("name", "name", PRESERVE)]

        assert decode(template, {"name": "x", "other": 1}) == {"name": "x"}

    def test_decode_lists_and_scalars(self):
        template = [("name", "name", PRESERVE)]

        assert decode(template, [{"name": "a"}, {"name": "b"}]) == [{"name": "a"}, {"name": "b"}]
        assert decode(template, "scalar") is None

    def test_es_decode(self):
        source = {
            "name": "x",
            "age": 3,
            "user": {"ext_name": "y", "secret": "z"},
            "teams": [{"name": "a", "rating": 1}, {"name": "b"}],
            "unmapped": True,
        }

        result = Widget.es_decode(source)

        assert type(result).__name__ == "WidgetSearchResult"
        assert result.name == "x"
        assert result.age == 3
        assert result.group is None
        assert result.user == {"ext_name": "y"}
        assert result.teams == [{"name": "a", "rating": 1}, {"name": "b", "rating": None}]
        assert not hasattr(result, "unmapped")

    def test_es_decode_nested_scalar(self):
        assert Widget.es_decode({"user": "flat"}).user is None

    def test_es_decode_non_object(self):
        assert Widget.es_decode(None) is None

    def test_result_model_is_cached(self):
        assert Widget.search_result_model() is Widget.search_result_model()


class TestIndexable:
    def test_es_document(self):
        widget = Widget(id="1", name="x", age=2, teams=[{"name": "a"}])

        assert widget.es_document() == {
            "name": "x",
            "age": 2,
            "group": None,
            "teams": [{"name": "a"}],
        }

    def test_es_id(self):
        assert Widget(id="abc").es_id() == "abc"

    def test_es_preload(self):
        widget = Widget(id="1")

        assert widget.es_preload("index") is widget

    def test_satisfies_protocols(self):
        assert isinstance(Widget(id="1"), Indexable)
        assert isinstance(Widget, ModelMetadata)
