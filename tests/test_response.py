from es_query_builder import Hits, Record, SearchResponse
from es_query_builder.response.search import owning_model
from tests.models import Gadget, Widget


def _hit(index, doc_id, source, score=1.0):
    return {"_index": index, "_id": doc_id, "_score": score, "_source": source}


class TestRecord:
    def test_parse_decodes_source(self):
        record = Record.parse(
            _hit("widgets1", "1", {"name": "x", "hidden": True}), Widget
        )

        assert record.id == "1"
        assert record.index == "widgets1"
        assert record.score == 1.0
        assert record.source.name == "x"
        assert not hasattr(record.source, "hidden")

    def test_parse_get_body(self):
        record = Record.parse(
            {"_index": "gadgets2", "_id": "g", "found": True, "_source": {"name": "y"}}, Gadget
        )

        assert record.found is True
        assert record.source.name == "y"

    def test_parse_missing_document(self):
        record = Record.parse({"_index": "widgets1", "_id": "1", "found": False}, Widget)

        assert record.found is False
        assert record.source is None

    def test_parse_non_object(self):
        assert Record.parse(None, Widget) is None
        assert Record.parse("error", Widget) is None


class TestHits:
    def test_total_from_object(self):
        hits = Hits.parse({"total": {"value": 7, "relation": "eq"}, "hits": []}, Widget)

        assert hits.total == 7

    def test_total_from_integer(self):
        assert Hits.parse({"total": 3, "hits": []}, Widget).total == 3

    def test_missing_total(self):
        assert Hits.parse({"hits": []}, Widget).total == 0


class TestSearchResponse:
    def test_parse(self):
        body = {
            "took": 4,
            "timed_out": False,
            "hits": {
                "total": {"value": 2, "relation": "eq"},
                "max_score": 1.5,
                "hits": [
                    _hit("widgets1", "1", {"name": "a"}, 1.5),
                    _hit("widgets1", "2", {"name": "b"}, 0.5),
                ],
            },
            "aggregations": {"groups": {"buckets": []}},
        }

        response = SearchResponse.parse(body, Widget)

        assert response.took == 4
        assert response.total == 2
        assert response.hits.max_score == 1.5
        assert [hit.source.name for hit in response.hits.hits] == ["a", "b"]
        assert response.aggregations == {"groups": {"buckets": []}}

    def test_multi_model_hits_use_their_own_model(self):
        body = {
            "hits": {
                "total": {"value": 2},
                "hits": [
                    _hit("gadgets2", "g", {"name": "gadget"}),
                    _hit("widgets1", "w", {"name": "widget", "age": 4}),
                ],
            }
        }

        response = SearchResponse.parse(body, [Widget, Gadget])
        gadget, widget = response.hits.hits

        assert type(gadget.source).__name__ == "GadgetSearchResult"
        assert type(widget.source).__name__ == "WidgetSearchResult"
        assert widget.source.age == 4

    def test_multi_model_hits_after_rotation(self):
        body = {
            "hits": {
                "total": {"value": 2},
                "hits": [
                    _hit("gadgets2", "g", {"name": "gadget"}),
                    _hit("widgets2", "w", {"name": "widget", "age": 4}),
                ],
            }
        }

        gadget, widget = SearchResponse.parse(body, [Gadget, Widget]).hits.hits

        assert type(gadget.source).__name__ == "GadgetSearchResult"
        assert type(widget.source).__name__ == "WidgetSearchResult"
        assert widget.source.age == 4

    def test_hit_from_unknown_index_keeps_raw_source(self):
        body = {"hits": {"hits": [_hit("others1", "o", {"name": "other", "extra": 1})]}}

        (hit,) = SearchResponse.parse(body, [Gadget, Widget]).hits.hits

        assert hit.source == {"name": "other", "extra": 1}

    def test_parse_non_object(self):
        assert SearchResponse.parse(None, Widget) is None

    def test_total_without_hits(self):
        assert SearchResponse.parse({"took": 1}, Widget).total == 0


class TestOwningModel:
    def test_single_model(self):
        assert owning_model(Widget, "anything", "read") is Widget

    def test_matches_index_type(self):
        assert owning_model([Widget, Gadget], "widgets2", "index") is Widget
        assert owning_model([Gadget, Widget], "widgets2", "index") is Widget

    def test_rotated_index_matches_its_own_model(self):
        # read alias widgets1 now points at widgets2
        assert owning_model([Gadget, Widget], "widgets2", "read") is Widget

    def test_unknown_index(self):
        assert owning_model([Gadget, Widget], "unknown", "read") is None

    def test_empty_list(self):
        assert owning_model([], "widgets1", "read") is None
