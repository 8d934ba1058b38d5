from es_query_builder import Query, QueryType
from es_query_builder.query import (
    exists,
    ids,
    match,
    match_phrase,
    multi_match,
    query_string,
    range,
    term,
    terms,
    wildcard,
)
from tests.models import Gadget, Widget


class TestClauses:
    def test_match(self):
        assert match("name", "x") == {"match": {"name": "x"}}

    def test_match_with_options(self):
        assert match("name", "x", operator="and") == {
            "match": {"name": {"query": "x", "operator": "and"}}
        }

    def test_match_phrase(self):
        assert match_phrase("name", "blue widget", slop=2) == {
            "match_phrase": {"name": {"query": "blue widget", "slop": 2}}
        }

    def test_multi_match_defaults_to_best_fields(self):
        assert multi_match(["name", "group"], "x") == {
            "multi_match": {"query": "x", "fields": ["name", "group"], "type": "best_fields"}
        }

    def test_multi_match_type_override(self):
        clause = multi_match(["name"], "x", type="phrase_prefix")
        assert clause["multi_match"]["type"] == "phrase_prefix"

    def test_structural_clauses(self):
        assert term("status", "active") == {"term": {"status": "active"}}
        assert terms("status", ["a", "b"]) == {"terms": {"status": ["a", "b"]}}
        assert range("age", {"gte": 18}) == {"range": {"age": {"gte": 18}}}
        assert ids(["1", "2"]) == {"ids": {"values": ["1", "2"]}}
        assert query_string("name:x", default_operator="AND") == {
            "query_string": {"query": "name:x", "default_operator": "AND"}
        }
        assert exists("name") == {"exists": {"field": "name"}}
        assert wildcard("name", "*x*", case_insensitive=True) == {
            "wildcard": {"name": {"value": "*x*", "case_insensitive": True}}
        }


class TestRealize:
    def test_end_to_end(self):
        body = (
            Widget.search_query()
            .must(match("name", "x"))
            .filter(term("status", "active"))
            .sort("created_at", "desc")
            .realize()
        )

        assert body == {
            "query": {
                "bool": {
                    "must": [{"match": {"name": "x"}}],
                    "filter": [{"term": {"status": "active"}}],
                }
            },
            "sort": [{"created_at": "desc"}],
        }

    def test_empty_query(self):
        assert Query().realize() == {"query": {"bool": {}}}

    def test_clause_lists_keep_append_order(self):
        body = (
            Query()
            .should(term("a", 1))
            .should(term("b", 2))
            .must_not(term("c", 3))
            .realize()
        )

        assert body["query"]["bool"] == {
            "should": [{"term": {"a": 1}}, {"term": {"b": 2}}],
            "must_not": [{"term": {"c": 3}}],
        }

    def test_sort_keeps_call_order(self):
        body = Query().sort("a", "asc").sort("b", "desc").realize()

        assert body["sort"] == [{"a": "asc"}, {"b": "desc"}]

    def test_sort_defaults_to_asc(self):
        assert Query().sort("name").realize()["sort"] == [{"name": "asc"}]

    def test_options_merge_into_bool(self):
        body = (
            Query()
            .should(term("a", 1))
            .should(term("b", 2))
            .options(minimum_should_match=1)
            .realize()
        )

        assert body["query"]["bool"]["minimum_should_match"] == 1

    def test_options_replace_previous_options(self):
        query = Query().options(boost=2).options(minimum_should_match=1)

        assert query.opts == {"minimum_should_match": 1}
        assert query.merge_options(boost=2).opts == {"minimum_should_match": 1, "boost": 2}

    def test_builders_do_not_mutate(self):
        base = Query().must(term("a", 1))
        left = base.must(term("b", 2))
        right = base.should(term("c", 3))

        assert len(base.musts) == 1
        assert len(left.musts) == 2
        assert right.musts == base.musts
        assert right.shoulds == ({"term": {"c": 3}},)

    def test_nested_bool_query(self):
        inner = Query().should(term("a", 1)).should(term("b", 2))
        body = Query().filter(inner).realize()

        assert body == {
            "query": {
                "bool": {
                    "filter": [
                        {"bool": {"should": [{"term": {"a": 1}}, {"term": {"b": 2}}]}}
                    ]
                }
            }
        }

    def test_construct_with_wire_names(self):
        query = Query(queryable=Widget, filter=[term("name", "x")], index_type="es8")

        assert query.realize() == {"query": {"bool": {"filter": [{"term": {"name": "x"}}]}}}
        assert query.index_type == "es8"

    def test_search_query_is_bound_to_model(self):
        query = Widget.search_query()

        assert query.queryable is Widget
        assert query.type == QueryType.BOOL
        assert query.index_type == "read"


class TestCompoundQueries:
    def test_nested(self):
        query = Query().must(match("teams.name", "arsenal")).nested("teams")

        assert query.realize() == {
            "query": {
                "nested": {
                    "query": {"bool": {"must": [{"match": {"teams.name": "arsenal"}}]}},
                    "path": "teams",
                }
            }
        }

    def test_nested_inside_bool(self):
        nested = Query().filter(term("teams.name", "arsenal")).nested("teams")
        body = Query().must(match("name", "x")).filter(nested).realize()

        assert body["query"]["bool"]["filter"] == [
            {
                "nested": {
                    "query": {"bool": {"filter": [{"term": {"teams.name": "arsenal"}}]}},
                    "path": "teams",
                }
            }
        ]

    def test_script_score(self):
        source = "doc['age'].value * 2"
        body = Query().must(match("name", "x")).sort("age", "desc").script_score(source).realize()

        assert body == {
            "query": {
                "function_score": {
                    "query": {"bool": {"must": [{"match": {"name": "x"}}]}},
                    "script_score": {"script": {"source": source}},
                }
            },
            "sort": [{"age": "desc"}],
        }

    def test_script_score_with_params(self):
        query = Query().script_score("params.factor", params={"factor": 2})

        assert query.realize()["query"]["function_score"]["script_score"] == {
            "script": {"source": "params.factor", "params": {"factor": 2}}
        }

    def test_script_score_embedded(self):
        scored = Query().must(match("name", "x")).script_score("_score")
        body = Query().should(scored).realize()

        assert body["query"]["bool"]["should"] == [
            {
                "function_score": {
                    "query": {"bool": {"must": [{"match": {"name": "x"}}]}},
                    "script_score": {"script": {"source": "_score"}},
                }
            }
        ]

    def test_function_score(self):
        functions = [{"filter": term("group", "a"), "weight": 2}]
        body = (
            Query()
            .must(match("name", "x"))
            .options(minimum_should_match=1)
            .function_score(functions, score_mode="sum")
            .realize()
        )

        assert body == {
            "query": {
                "function_score": {
                    "query": {
                        "bool": {"must": [{"match": {"name": "x"}}], "minimum_should_match": 1}
                    },
                    "functions": functions,
                    "score_mode": "sum",
                }
            }
        }

    def test_field_value_factor(self):
        body = Query().must(match("name", "x")).field_value_factor("age", modifier="log1p").realize()

        assert body["query"]["function_score"] == {
            "query": {"bool": {"must": [{"match": {"name": "x"}}]}},
            "field_value_factor": {"field": "age", "modifier": "log1p"},
        }

    def test_constant_score(self):
        body = Query().filter(term("group", "a")).constant_score(boost=1.5).realize()

        assert body == {
            "query": {"constant_score": {"filter": [{"term": {"group": "a"}}], "boost": 1.5}}
        }

    def test_multi_model_queryable(self):
        query = Query(queryable=[Widget, Gadget]).must(match("name", "x"))

        assert query.queryable == [Widget, Gadget]
