"""
ES Query Builder - model-bound query building for Elasticsearch.

Main entry points for declaring indexed models, building queries,
aggregations and bulk requests, and executing them through a ``Repo``.
"""

from es_query_builder.config import ESSettings, RetrySettings
from es_query_builder.core import (
    ConfigurationError,
    DocumentNotFoundError,
    IndexSelector,
    OperationFailedError,
    Page,
    QueryBuilderError,
)
from es_query_builder.schema import IndexDefinition, Searchable, TypeMapper
from es_query_builder.query import Aggregation, Query, QueryType, composite_source, realize
from es_query_builder.bulk import (
    DeleteIntent,
    IndexIntent,
    NestedUpdateIntent,
    UpdateIntent,
    bulk_operation,
    bulk_request,
)
from es_query_builder.response import Hits, Record, SearchResponse
from es_query_builder.repo import Repo
from es_query_builder.execution import paginate

__all__ = [
    "ESSettings",
    "RetrySettings",
    "ConfigurationError",
    "DocumentNotFoundError",
    "IndexSelector",
    "OperationFailedError",
    "Page",
    "QueryBuilderError",
    "IndexDefinition",
    "Searchable",
    "TypeMapper",
    "Aggregation",
    "Query",
    "QueryType",
    "composite_source",
    "realize",
    "DeleteIntent",
    "IndexIntent",
    "NestedUpdateIntent",
    "UpdateIntent",
    "bulk_operation",
    "bulk_request",
    "Hits",
    "Record",
    "SearchResponse",
    "Repo",
    "paginate",
]
