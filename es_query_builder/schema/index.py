"""
Index declarations for searchable models.

An ``IndexDefinition`` is constructed once, when a model class is declared,
and carries everything needed to name, create and decode the model's index.
"""

from typing import Any, Dict, List, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

from es_query_builder.core.models import IndexSelector, Selector, selector_name
from es_query_builder.schema.decoding import DecodeTemplate, mapping_template
from es_query_builder.schema.type_mappings import TypeMapper

# Selectors served by the read version of the index
_READ_SELECTORS = {IndexSelector.READ.value, IndexSelector.DELETE.value}


class IndexDefinition(BaseModel):
    """
    Declarative index configuration for one model.

    ``versions`` is either None (no suffix), a single version shared by every
    selector, or an ``(index_version, read_version)`` pair. Splitting the
    versions lets a new index be built while the old one keeps serving reads.

    Indices are type-less unless ``document_type`` is set, which only legacy
    clusters accept.

    Example:
        IndexDefinition("widget", versions=(2, 1))
            .mapping("name")
            .mapping("group", type="keyword")
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: str
    versions: Any = None
    settings: Dict[str, Any] = Field(default_factory=dict)
    options: Dict[str, Any] = Field(default_factory=dict)
    mappings: Tuple[Tuple[str, Dict[str, Any]], ...] = ()
    document_type: Optional[str] = None
    type_mapper: Type[TypeMapper] = TypeMapper
    model: Any = None

    def __init__(self, type: str, **data: Any):
        super().__init__(type=type, **data)

    def mapping(self, name: str, **properties: Any) -> "IndexDefinition":
        """
        Add a mapped field.

        Args:
            name: Field name
            **properties: Mapping properties; an explicit ``type`` overrides
                the inferred one

        Returns:
            A new definition including the field
        """
        return self.model_copy(
            update={"mappings": self.mappings + ((name, dict(properties)),)}
        )

    def bind(self, model: Any) -> "IndexDefinition":
        """Return a copy bound to the model class that owns it."""
        return self.model_copy(update={"model": model})

    @property
    def index_version(self) -> Any:
        if isinstance(self.versions, (tuple, list)):
            return self.versions[0]
        return self.versions

    @property
    def read_version(self) -> Any:
        if isinstance(self.versions, (tuple, list)):
            return self.versions[1]
        return self.versions

    def es_index(self, selector: Selector = IndexSelector.READ) -> str:
        """
        Resolve a selector to a concrete index name.

        read and delete resolve to the read version, index to the indexing
        version. Any other selector names a separate index.

        Args:
            selector: Index selector

        Returns:
            Index name
        """
        name = selector_name(selector)

        if name in _READ_SELECTORS:
            return f"{self.type}s{_suffix(self.read_version)}"
        if name == IndexSelector.INDEX.value:
            return f"{self.type}s{_suffix(self.index_version)}"
        return f"{self.type}_{name}"

    def owns_index(self, index_name: Optional[str]) -> bool:
        """
        Check whether a concrete index name belongs to this definition.

        Any configured version matches, so hits read through an alias still
        resolve after the read and index versions are rotated.
        """
        if not index_name:
            return False
        if index_name.startswith(f"{self.type}_"):
            return True
        versions = {self.index_version, self.read_version}
        return index_name in {f"{self.type}s{_suffix(version)}" for version in versions}

    def doc_type(self) -> Optional[str]:
        """Legacy document type sent in bulk action lines, None for type-less indices."""
        return self.document_type

    def es_settings(self) -> Dict[str, Any]:
        return {"settings": self.settings}

    def mapping_options(self) -> Dict[str, Any]:
        return dict(self.options)

    def mapped_fields(self) -> List[str]:
        return [name for name, _ in self.mappings]

    def es_type(self, field: str) -> Optional[str]:
        """
        Infer the mapping type of a model field.

        Args:
            field: Field name

        Returns:
            Mapping type, or None when the model has no such field
        """
        model_fields = getattr(self.model, "model_fields", None) or {}
        field_info = model_fields.get(field)
        if field_info is None:
            return None
        return self.type_mapper.infer(field_info.annotation)

    def es_mappings(self) -> Dict[str, Any]:
        """
        Build the full mapping body.

        Returns:
            ``{"properties": {...}}`` merged with the mapping options
        """
        properties: Dict[str, Any] = {}
        for name, props in self.mappings:
            field_mapping: Dict[str, Any] = {}
            inferred = self.es_type(name)
            if inferred is not None:
                field_mapping["type"] = inferred
            field_mapping.update(props)
            properties[name] = field_mapping

        return {"properties": properties, **self.options}

    def decode_template(self) -> DecodeTemplate:
        return [mapping_template(name, props) for name, props in self.mappings]


def _suffix(version: Any) -> str:
    return "" if version is None else str(version)
