"""Core interfaces, models and exceptions for the query builder."""

from es_query_builder.core.exceptions import (
    ConfigurationError,
    DocumentNotFoundError,
    OperationFailedError,
    QueryBuilderError,
)
from es_query_builder.core.interfaces import Indexable, ModelMetadata
from es_query_builder.core.models import IndexSelector, Page, Selector, selector_name

__all__ = [
    "ConfigurationError",
    "DocumentNotFoundError",
    "OperationFailedError",
    "QueryBuilderError",
    "Indexable",
    "ModelMetadata",
    "IndexSelector",
    "Page",
    "Selector",
    "selector_name",
]
