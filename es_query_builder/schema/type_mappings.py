"""
Type mapping utilities for converting model field types to index mapping types.
"""

import types
import uuid
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Union, get_args, get_origin


class TypeMapper:
    """
    Maps model field types to Elasticsearch mapping types.

    Field types may be given either as abstract string tags (``"integer"``,
    ``"string"``, ``"utc_datetime"``...) or as Python annotations taken from a
    model's fields. Subclass and override ``infer`` to customise the mapping
    for a model.
    """

    # Abstract field type tags
    TAG_TYPE_MAP: Dict[str, str] = {
        "binary_id": "keyword",
        "id": "keyword",
        "enum": "keyword",
        "integer": "long",
        "float": "double",
        "decimal": "double",
        "string": "text",
        "binary": "text",
        "boolean": "boolean",
        "date": "date",
        "utc_datetime": "date",
        "naive_datetime": "date",
        "utc_datetime_usec": "date",
    }

    # Python annotations, checked in order (bool before int)
    PYTHON_TYPE_MAP = (
        (bool, "boolean"),
        (int, "long"),
        (float, "double"),
        (Decimal, "double"),
        (uuid.UUID, "keyword"),
        (Enum, "keyword"),
        (datetime, "date"),
        (date, "date"),
        (str, "text"),
        (bytes, "text"),
    )

    @classmethod
    def infer(cls, field_type: Any) -> Optional[str]:
        """
        Infer the mapping type for a field type.

        Args:
            field_type: Abstract type tag or Python annotation

        Returns:
            Mapping type string, the tag itself for unknown tags, or None
            when nothing can be inferred
        """
        if field_type is None:
            return None

        if isinstance(field_type, str):
            return cls.TAG_TYPE_MAP.get(field_type.lower(), field_type)

        return cls._infer_annotation(field_type)

    @classmethod
    def _infer_annotation(cls, annotation: Any) -> Optional[str]:
        """Infer a mapping type from a Python annotation."""
        origin, args = get_origin(annotation), get_args(annotation)

        # Optional[X] / Union[X, None]
        if origin is Union or origin is getattr(types, "UnionType", None):
            non_none = [arg for arg in args if arg is not type(None)]
            if len(non_none) == 1:
                return cls._infer_annotation(non_none[0])
            return None

        # Engine fields are multi-valued, lists map to their item type
        if origin in (list, tuple, set, frozenset):
            return cls._infer_annotation(args[0]) if args else None

        if not isinstance(annotation, type):
            return None

        for python_type, es_type in cls.PYTHON_TYPE_MAP:
            if issubclass(annotation, python_type):
                return es_type

        return None
