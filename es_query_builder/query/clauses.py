"""
Leaf query clauses.

Each function returns a single-key dict in Elasticsearch query DSL. They do
no validation; see https://www.elastic.co/guide/en/elasticsearch/reference/current/query-dsl.html
for the individual query types.
"""

from typing import Any, Dict, List


def match(field: str, query: Any, **options: Any) -> Dict[str, Any]:
    """
    Build a match clause.

    Without options the field maps straight to the query text, with options
    the text moves under ``query`` next to them.
    """
    if not options:
        return {"match": {field: query}}
    return {"match": {field: {"query": query, **options}}}


def match_phrase(field: str, query: Any, **options: Any) -> Dict[str, Any]:
    return {"match_phrase": {field: {"query": query, **options}}}


def multi_match(fields: List[str], query: Any, **options: Any) -> Dict[str, Any]:
    """Build a multi_match clause, ``best_fields`` unless ``type`` is given."""
    return {"multi_match": {"query": query, "fields": fields, "type": "best_fields", **options}}


def term(field: str, value: Any) -> Dict[str, Any]:
    return {"term": {field: value}}


def terms(field: str, values: List[Any]) -> Dict[str, Any]:
    return {"terms": {field: values}}


def range(field: str, bounds: Dict[str, Any]) -> Dict[str, Any]:
    """Build a range clause, e.g. ``range("age", {"gte": 18})``."""
    return {"range": {field: bounds}}


def ids(values: List[Any]) -> Dict[str, Any]:
    return {"ids": {"values": values}}


def query_string(query: str, **options: Any) -> Dict[str, Any]:
    """Query string clause, rewritten by the engine's query parser."""
    return {"query_string": {"query": query, **options}}


def exists(field: str) -> Dict[str, Any]:
    return {"exists": {"field": field}}


def wildcard(field: str, value: str, **options: Any) -> Dict[str, Any]:
    return {"wildcard": {field: {"value": value, **options}}}


def match_all() -> Dict[str, Any]:
    return {"match_all": {}}
