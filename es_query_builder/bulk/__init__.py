"""Bulk write intents and their encoding."""

from es_query_builder.bulk.operations import (
    BulkIntent,
    DeleteIntent,
    IndexIntent,
    NestedUpdateIntent,
    UpdateIntent,
    to_intent,
)
from es_query_builder.bulk.encoder import bulk_operation, bulk_request, update_payload

__all__ = [
    "BulkIntent",
    "DeleteIntent",
    "IndexIntent",
    "NestedUpdateIntent",
    "UpdateIntent",
    "to_intent",
    "bulk_operation",
    "bulk_request",
    "update_payload",
]
