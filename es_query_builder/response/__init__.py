"""Decoded engine responses."""

from es_query_builder.response.search import Hits, Record, SearchResponse, owning_model

__all__ = ["Hits", "Record", "SearchResponse", "owning_model"]
