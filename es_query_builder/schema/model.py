"""
Base class for records backed by a search index.

Subclasses declare their fields as a pydantic model and attach an
``IndexDefinition``:

    class Widget(Searchable):
        index_definition: ClassVar[IndexDefinition] = (
            IndexDefinition("widget", versions=(2, 1)).mapping("name")
        )

        id: str
        name: str = ""
"""

from typing import Any, ClassVar, Dict, List, Optional

from pydantic import BaseModel, create_model

from es_query_builder.core.exceptions import ConfigurationError
from es_query_builder.core.models import IndexSelector, Selector
from es_query_builder.schema.decoding import DecodeTemplate, decode
from es_query_builder.schema.index import IndexDefinition

# Search result models, created on first decode
_RESULT_MODELS: Dict[type, type[BaseModel]] = {}


class Searchable(BaseModel):
    """
    A pydantic record with index metadata and default ``Indexable`` behaviour.

    The class-level ``index_definition`` is bound to the subclass when the
    class is created, so field types can be inferred from its annotations.
    """

    index_definition: ClassVar[Optional[IndexDefinition]] = None

    @classmethod
    def __pydantic_init_subclass__(cls, **kwargs: Any) -> None:
        super().__pydantic_init_subclass__(**kwargs)
        definition = cls.__dict__.get("index_definition")
        if definition is not None:
            cls.index_definition = definition.bind(cls)

    @classmethod
    def _definition(cls) -> IndexDefinition:
        if cls.index_definition is None:
            raise ConfigurationError(f"{cls.__name__} does not declare an index_definition")
        return cls.index_definition

    # Model metadata

    @classmethod
    def search_query(cls):
        """Start a new query against this model's index."""
        from es_query_builder.query.query import Query

        return Query(queryable=cls)

    @classmethod
    def es_index(cls, selector: Selector = IndexSelector.READ) -> str:
        return cls._definition().es_index(selector)

    @classmethod
    def doc_type(cls) -> Optional[str]:
        return cls._definition().doc_type()

    @classmethod
    def owns_index(cls, index_name: Optional[str]) -> bool:
        return cls._definition().owns_index(index_name)

    @classmethod
    def es_settings(cls) -> Dict[str, Any]:
        return cls._definition().es_settings()

    @classmethod
    def es_mappings(cls) -> Dict[str, Any]:
        return cls._definition().es_mappings()

    @classmethod
    def mapping_options(cls) -> Dict[str, Any]:
        return cls._definition().mapping_options()

    @classmethod
    def mapped_fields(cls) -> List[str]:
        return cls._definition().mapped_fields()

    @classmethod
    def es_type(cls, field: str) -> Optional[str]:
        return cls._definition().es_type(field)

    @classmethod
    def decode_template(cls) -> DecodeTemplate:
        return cls._definition().decode_template()

    @classmethod
    def search_result_model(cls) -> type[BaseModel]:
        """
        Get or create the model that decoded documents are returned as.

        Returns:
            A pydantic model with one optional field per mapped field
        """
        if cls not in _RESULT_MODELS:
            fields = {name: (Any, None) for name in cls.mapped_fields()}
            _RESULT_MODELS[cls] = create_model(f"{cls.__name__}SearchResult", **fields)  # type: ignore[call-overload]
        return _RESULT_MODELS[cls]

    @classmethod
    def es_decode(cls, source: Any) -> Optional[BaseModel]:
        """
        Decode an index document into this model's search result type.

        Args:
            source: The ``_source`` of a hit

        Returns:
            Search result instance, or None when source is not an object
        """
        if not isinstance(source, dict):
            return None
        return cls.search_result_model()(**decode(cls.decode_template(), source))

    # Indexable

    def es_id(self) -> str:
        return str(getattr(self, "id"))

    def es_preload(self, selector: Selector = IndexSelector.INDEX) -> "Searchable":
        return self

    def es_document(self, selector: Selector = IndexSelector.INDEX) -> Dict[str, Any]:
        """Document body holding only the mapped fields that the record has."""
        data = self.model_dump()
        return {name: data[name] for name in self.mapped_fields() if name in data}
