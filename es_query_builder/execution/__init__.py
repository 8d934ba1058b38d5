"""Request execution helpers: retries and pagination."""

from es_query_builder.execution.retry import RETRYABLE_ERRORS, build_retrying, retryable
from es_query_builder.execution.paginator import paginate

__all__ = ["RETRYABLE_ERRORS", "build_retrying", "retryable", "paginate"]
