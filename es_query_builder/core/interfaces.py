"""
Protocols for the collaborators the query builder consumes.

Models and records plug into query compilation and bulk encoding through
these contracts. ``Searchable`` provides default implementations of both.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from es_query_builder.core.models import Selector


@runtime_checkable
class ModelMetadata(Protocol):
    """
    Index metadata for a model class.

    Resolves selectors to concrete index names and exposes the mapping table
    used to create the index.
    """

    @classmethod
    def doc_type(cls) -> Optional[str]:
        """
        Document type of the model's index.

        Returns:
            The legacy type name, or None for type-less indices
        """
        ...

    @classmethod
    def es_index(cls, selector: Selector = "read") -> str:
        """
        Resolve a selector to an index name.

        Args:
            selector: read, index, delete or any custom selector

        Returns:
            Concrete index name
        """
        ...

    @classmethod
    def es_mappings(cls) -> Dict[str, Any]:
        """Full mapping body for the model's index."""
        ...

    @classmethod
    def mapped_fields(cls) -> List[str]:
        """Names of the fields that are sent to the index."""
        ...


@runtime_checkable
class Indexable(Protocol):
    """
    Conversion of a record into an indexable document.
    """

    def es_id(self) -> str:
        """Document id of the record."""
        ...

    def es_preload(self, selector: Selector = "index") -> "Indexable":
        """
        Load whatever the record needs before ``es_document`` is called.

        Args:
            selector: Index selector the document is built for

        Returns:
            The record, possibly a new instance
        """
        ...

    def es_document(self, selector: Selector = "index") -> Dict[str, Any]:
        """
        Build the document body stored in the index.

        Args:
            selector: Index selector the document is built for

        Returns:
            Document body
        """
        ...
