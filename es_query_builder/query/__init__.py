"""Query and aggregation builders."""

from es_query_builder.query.clauses import (
    exists,
    ids,
    match,
    match_all,
    match_phrase,
    multi_match,
    query_string,
    range,
    term,
    terms,
    wildcard,
)
from es_query_builder.query.query import Query, QueryType, query_clause, realize
from es_query_builder.query.aggregation import Aggregation, composite_source, realize_aggregation

__all__ = [
    "exists",
    "ids",
    "match",
    "match_all",
    "match_phrase",
    "multi_match",
    "query_string",
    "range",
    "term",
    "terms",
    "wildcard",
    "Query",
    "QueryType",
    "query_clause",
    "realize",
    "Aggregation",
    "composite_source",
    "realize_aggregation",
]
