"""
Bulk request encoding.

Turns write intents into the action/source line pairs of the bulk API. No
requests are made here; index names are resolved while encoding.
"""

from typing import Any, Dict, Iterable, List

from es_query_builder.bulk.operations import (
    DeleteIntent,
    IndexIntent,
    NestedUpdateIntent,
    UpdateIntent,
    to_intent,
)
from es_query_builder.core.models import Selector

# Top-level keys of an update body; data carrying any of them is sent as-is
UPDATE_ENVELOPE_KEYS = frozenset(
    {"doc", "script", "upsert", "doc_as_upsert", "scripted_upsert", "detect_noop"}
)


def bulk_operation(operation: Any) -> List[Dict[str, Any]]:
    """
    Encode one operation.

    Args:
        operation: Intent or tuple-form operation

    Returns:
        The action line followed by the source line, if the operation has one
    """
    intent = to_intent(operation)

    if isinstance(intent, DeleteIntent):
        model = type(intent.struct)
        return [{"delete": _action(model, intent.struct.es_id(), intent.index)}]

    if isinstance(intent, UpdateIntent):
        return [
            {"update": _action(intent.model, intent.id, intent.index)},
            update_payload(intent.data),
        ]

    if isinstance(intent, NestedUpdateIntent):
        data = {key: value for key, value in intent.data.items() if key != intent.id_key}
        return [
            {"update": _action(intent.model, intent.id, intent.index)},
            {"script": {"source": intent.source, "params": {"data": data}}},
        ]

    struct = intent.struct
    return [
        {intent.op: _action(type(struct), struct.es_id(), intent.index)},
        build_document(struct, intent.index),
    ]


def bulk_request(operations: Iterable[Any]) -> List[Dict[str, Any]]:
    """Encode operations into one bulk body, keeping their order."""
    lines: List[Dict[str, Any]] = []
    for operation in operations:
        lines.extend(bulk_operation(operation))
    return lines


def update_payload(data: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap a bare field patch as ``{"doc": data}``."""
    if UPDATE_ENVELOPE_KEYS.intersection(data):
        return data
    return {"doc": data}


def build_document(struct: Any, index: Selector) -> Dict[str, Any]:
    return struct.es_preload(index).es_document(index)


def _action(model: Any, doc_id: Any, index: Selector) -> Dict[str, Any]:
    action = {"_id": doc_id, "_index": model.es_index(index)}
    doc_type = model.doc_type()
    if doc_type is not None:
        action["_type"] = doc_type
    return action
