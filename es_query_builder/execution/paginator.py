"""
Page-based access to search results.
"""

import logging
import math
from typing import Any

from elasticsearch import ApiError, TransportError

from es_query_builder.core.exceptions import QueryBuilderError
from es_query_builder.core.models import Page
from es_query_builder.query.query import Query

logger = logging.getLogger(__name__)


def paginate(repo: Any, query: Query, page: int = 1, page_size: int = 10) -> Page:
    """
    Run a query for a single page of hits.

    A failed search yields an empty page rather than an error.

    Args:
        repo: Repo to search with
        query: Query to run
        page: 1-based page number
        page_size: Hits per page

    Returns:
        Page of decoded records
    """
    try:
        response = repo.search(query, from_=(page - 1) * page_size, size=page_size)
    except (QueryBuilderError, ApiError, TransportError) as e:
        logger.warning("Search for page %s failed: %s", page, e)
        response = None

    hits = response.hits if response is not None else None
    entries = hits.hits if hits is not None else []
    total = hits.total if hits is not None else 0

    return Page(
        page_number=page,
        page_size=page_size,
        entries=entries,
        total_entries=total,
        total_pages=math.ceil(total / page_size) if page_size else 0,
    )
