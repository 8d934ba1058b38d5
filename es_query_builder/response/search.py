"""
Typed search and document responses.

Wire keys starting with an underscore (``_id``, ``_source``...) are exposed
through aliases, since pydantic does not allow them as field names.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from es_query_builder.core.models import IndexSelector, Selector


class Record(BaseModel):
    """A single document, either from a get request or a search hit."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[str] = Field(default=None, alias="_id")
    index: Optional[str] = Field(default=None, alias="_index")
    score: Optional[float] = Field(default=None, alias="_score")
    source: Any = Field(default=None, alias="_source")
    found: Optional[bool] = None

    @classmethod
    def parse(
        cls, body: Any, model: Any, index_type: Selector = IndexSelector.READ
    ) -> Optional["Record"]:
        """
        Parse a document body, decoding ``_source`` through its model.

        Args:
            body: Parsed JSON body
            model: Model class, or list of model classes for multi-index searches
            index_type: Selector the request was made against

        Returns:
            Record, or None if the body is not an object
        """
        if not isinstance(body, dict):
            return None

        record = cls.model_validate(body)
        owner = owning_model(model, record.index, index_type)
        if owner is not None and record.source is not None:
            record = record.model_copy(update={"source": owner.es_decode(record.source)})
        return record


class Hits(BaseModel):
    """The hits section of a search response."""

    total: int = 0
    max_score: Optional[float] = None
    hits: List[Record] = Field(default_factory=list)

    @field_validator("total", mode="before")
    @classmethod
    def _total_value(cls, value: Any) -> Any:
        # 7.x+ returns {"value": n, "relation": "eq"}
        if isinstance(value, dict):
            return value.get("value", 0)
        return value if value is not None else 0

    @classmethod
    def parse(
        cls, body: Any, model: Any, index_type: Selector = IndexSelector.READ
    ) -> Optional["Hits"]:
        if not isinstance(body, dict):
            return None

        records = [Record.parse(hit, model, index_type) for hit in body.get("hits") or []]
        return cls(
            total=body.get("total"),
            max_score=body.get("max_score"),
            hits=[record for record in records if record is not None],
        )


class SearchResponse(BaseModel):
    """A decoded search response."""

    took: Optional[int] = None
    timed_out: Optional[bool] = None
    hits: Optional[Hits] = None
    aggregations: Optional[Dict[str, Any]] = None

    @property
    def total(self) -> int:
        return self.hits.total if self.hits else 0

    @classmethod
    def parse(
        cls, body: Any, model: Any, index_type: Selector = IndexSelector.READ
    ) -> Optional["SearchResponse"]:
        """
        Parse a search response body.

        Args:
            body: Parsed JSON body
            model: Model class or list of model classes that were searched
            index_type: Selector the search ran against

        Returns:
            SearchResponse, or None if the body is not an object
        """
        if not isinstance(body, dict):
            return None

        return cls(
            took=body.get("took"),
            timed_out=body.get("timed_out"),
            hits=Hits.parse(body.get("hits"), model, index_type),
            aggregations=body.get("aggregations"),
        )


def owning_model(model: Any, index_name: Optional[str], index_type: Selector) -> Any:
    """
    Pick the model a hit belongs to.

    For a list of models, the one whose index name for ``index_type``
    matches the hit's ``_index`` wins. Otherwise the model that owns the
    index under any version is used, which covers hits read through a
    rotated alias. Returns None when no model owns the index, and the
    hit keeps its raw ``_source``.
    """
    if not isinstance(model, (list, tuple)):
        return model

    for candidate in model:
        if candidate.es_index(index_type) == index_name:
            return candidate

    for candidate in model:
        owns_index = getattr(candidate, "owns_index", None)
        if owns_index is not None and owns_index(index_name):
            return candidate
    return None
