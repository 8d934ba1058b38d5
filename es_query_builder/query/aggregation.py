"""
Aggregation building.

    sources = [
        composite_source("group", "terms", field="group"),
        composite_source("age", "terms", field="age", order="asc"),
    ]
    Aggregation().composite("group", sources).nest("group", Aggregation().top_hits("hits", size=1))

Aggregations realize in the order they were added.
"""

from typing import Any, Dict, List, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


class Aggregation(BaseModel):
    """Immutable set of named aggregations with optional sub-aggregations."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)

    aggregations: Tuple[Tuple[str, Any], ...] = ()
    nested: Dict[str, Any] = Field(default_factory=dict)
    opts: Dict[str, Any] = Field(default_factory=dict, alias="options")

    def add(self, name: str, agg_type: str, **options: Any) -> "Aggregation":
        """
        Add an aggregation of any type.

        Args:
            name: Name the results are returned under
            agg_type: Aggregation type, e.g. ``"avg"``
            **options: Aggregation body
        """
        return self.model_copy(
            update={"aggregations": self.aggregations + ((name, {agg_type: dict(options)}),)}
        )

    def terms(self, name: str, **options: Any) -> "Aggregation":
        """Bucket documents by the terms of a field."""
        return self.add(name, "terms", **options)

    def composite(self, name: str, sources: List[Dict[str, Any]], **options: Any) -> "Aggregation":
        """
        Add a composite aggregation.

        Args:
            name: Aggregation name
            sources: Ordered sources built with ``composite_source``
            **options: Composite options, e.g. ``size`` or ``after`` for paging
        """
        return self.add(name, "composite", sources=sources, **options)

    def top_hits(self, name: str, **options: Any) -> "Aggregation":
        """Return the top matching documents for the enclosing scope."""
        return self.add(name, "top_hits", **options)

    def date_histogram(self, name: str, **options: Any) -> "Aggregation":
        return self.add(name, "date_histogram", **options)

    def nest(self, name: str, aggregation: Union["Aggregation", Dict[str, Any]]) -> "Aggregation":
        """Include ``aggregation`` inside the aggregation called ``name``."""
        return self.model_copy(update={"nested": {**self.nested, name: aggregation}})

    def options(self, **options: Any) -> "Aggregation":
        """Set keys realized next to ``aggs``."""
        return self.model_copy(update={"opts": {**self.opts, **options}})

    def realize(self) -> Dict[str, Any]:
        return realize_aggregation(self)


def composite_source(name: str, bucket_type: str, **options: Any) -> Dict[str, Any]:
    """A composite source, e.g. ``composite_source("age", "terms", field="age")``."""
    return {name: {bucket_type: dict(options)}}


def realize_aggregation(aggregation: Any) -> Dict[str, Any]:
    """
    Convert an aggregation to its request representation.

    Plain dicts are returned unchanged, so already realized fragments can be
    passed anywhere an ``Aggregation`` is accepted.

    Args:
        aggregation: ``Aggregation`` or realized dict

    Returns:
        ``{"aggs": {name: spec, ...}, **options}``
    """
    if not isinstance(aggregation, Aggregation):
        return aggregation

    aggs: Dict[str, Any] = {}
    for name, spec in aggregation.aggregations:
        realized = realize_aggregation(spec)
        if name in aggregation.nested:
            realized = {**realized, **realize_aggregation(aggregation.nested[name])}
        aggs[name] = realized

    return {"aggs": aggs, **aggregation.opts}
