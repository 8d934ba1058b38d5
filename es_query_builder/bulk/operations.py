"""
Bulk write intents.

Each intent describes one write against a model's index. All of them target
the ``index`` selector unless told otherwise.
"""

from typing import Any, Dict, Literal, Union

from pydantic import BaseModel, ConfigDict

from es_query_builder.core.exceptions import ConfigurationError
from es_query_builder.core.models import IndexSelector, Selector


class _Intent(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class IndexIntent(_Intent):
    """Index (or create) a record's document."""

    struct: Any
    index: Selector = IndexSelector.INDEX
    op: Literal["index", "create"] = "index"


class UpdateIntent(_Intent):
    """
    Partial update of a document by id.

    ``data`` is either a field patch, which is sent as ``{"doc": data}``, or
    an update body that already has an envelope such as ``doc`` or ``script``.
    """

    model: Any
    id: Any
    data: Dict[str, Any]
    index: Selector = IndexSelector.INDEX


class NestedUpdateIntent(_Intent):
    """
    Scripted update of an element in a nested array.

    ``data`` is exposed to the script as ``params.data``, without ``id_key``.
    """

    model: Any
    id: Any
    source: str
    data: Dict[str, Any]
    index: Selector = IndexSelector.INDEX
    id_key: str = "document_id"


class DeleteIntent(_Intent):
    """Delete a record's document."""

    struct: Any
    index: Selector = IndexSelector.INDEX


BulkIntent = Union[IndexIntent, UpdateIntent, NestedUpdateIntent, DeleteIntent]


def to_intent(operation: Any) -> BulkIntent:
    """
    Normalize a tuple-form operation into an intent.

    Accepted forms (the trailing index is optional):

        ("index", struct, index)
        ("create", struct, index)
        ("update", model, id, data, index)
        ("nested_update", model, id, source, data, index)
        ("delete", struct, index)

    Args:
        operation: Intent instance or tuple

    Returns:
        Intent instance

    Raises:
        ConfigurationError: If the operation has an unknown shape
    """
    if isinstance(operation, (IndexIntent, UpdateIntent, NestedUpdateIntent, DeleteIntent)):
        return operation

    if not isinstance(operation, (tuple, list)) or not operation:
        raise ConfigurationError(f"Unknown bulk operation: {operation!r}")

    op_type, *args = operation

    if op_type in ("index", "create") and len(args) in (1, 2):
        return IndexIntent(op=op_type, struct=args[0], **_index_kwarg(args, 1))
    if op_type == "update" and len(args) in (3, 4):
        return UpdateIntent(model=args[0], id=args[1], data=args[2], **_index_kwarg(args, 3))
    if op_type == "nested_update" and len(args) in (4, 5):
        return NestedUpdateIntent(
            model=args[0], id=args[1], source=args[2], data=args[3], **_index_kwarg(args, 4)
        )
    if op_type == "delete" and len(args) in (1, 2):
        return DeleteIntent(struct=args[0], **_index_kwarg(args, 1))

    raise ConfigurationError(f"Unknown bulk operation: {operation!r}")


def _index_kwarg(args: list, position: int) -> Dict[str, Any]:
    return {"index": args[position]} if len(args) > position else {}
