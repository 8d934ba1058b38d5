"""
Compound query building.

Basic usage against a ``Searchable`` model:

    Widget.search_query()
        .must(match("name", "x"))
        .should(match_phrase("description", "blue widget", slop=2))
        .filter(term("status", "active"))
        .sort("created_at", "desc")
        .realize()

A query has four clause lists. ``must`` and ``should`` both contribute to
scoring, but ``must`` rejects documents that fail to match. ``filter`` and
``must_not`` never affect scoring. Queries can be nested inside one another
and turned into nested, function_score or constant_score queries.

Every builder method returns a new ``Query``; the receiver is never changed.
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from es_query_builder.core.models import IndexSelector, Selector

# (wire key, attribute) for each clause list
CLAUSE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("must", "musts"),
    ("should", "shoulds"),
    ("filter", "filters"),
    ("must_not", "must_nots"),
)

# Options that belong to the function_score body rather than its inner bool query
FUNCTION_SCORE_KEYS: Tuple[str, ...] = (
    "script",
    "functions",
    "field_value_factor",
    "score_mode",
    "boost_mode",
    "max_boost",
    "min_score",
)


class QueryType(str, Enum):
    """Compilation strategy of a query node."""

    BOOL = "bool"
    NESTED = "nested"
    FUNCTION_SCORE = "function_score"
    CONSTANT_SCORE = "constant_score"


class Query(BaseModel):
    """
    Immutable query tree node.

    Clause lists hold either leaf clause dicts or nested ``Query`` nodes.
    Fields are populated by their wire names as well, so
    ``Query(queryable=Widget, filter=[term("name", "x")])`` works.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, arbitrary_types_allowed=True)

    type: QueryType = QueryType.BOOL
    queryable: Any = None
    musts: Tuple[Any, ...] = Field(default=(), alias="must")
    shoulds: Tuple[Any, ...] = Field(default=(), alias="should")
    filters: Tuple[Any, ...] = Field(default=(), alias="filter")
    must_nots: Tuple[Any, ...] = Field(default=(), alias="must_not")
    opts: Dict[str, Any] = Field(default_factory=dict, alias="options")
    sorts: Tuple[Tuple[Any, Any], ...] = Field(default=(), alias="sort")
    index_type: Selector = IndexSelector.READ

    def _append(self, attribute: str, clause: Any) -> "Query":
        return self.model_copy(update={attribute: getattr(self, attribute) + (clause,)})

    def must(self, clause: Any) -> "Query":
        """Append a must clause to the running query."""
        return self._append("musts", clause)

    def should(self, clause: Any) -> "Query":
        """Append a should clause to the running query."""
        return self._append("shoulds", clause)

    def filter(self, clause: Any) -> "Query":
        """Append a filter clause to the running query."""
        return self._append("filters", clause)

    def must_not(self, clause: Any) -> "Query":
        """Append a must_not clause to the running query."""
        return self._append("must_nots", clause)

    def sort(self, field: Any, direction: Any = "asc") -> "Query":
        """
        Add a sort clause. The first sort added is the primary sort key.

        Args:
            field: Field to sort on
            direction: ``"asc"``, ``"desc"`` or a full sort options dict
        """
        return self._append("sorts", (field, direction))

    def options(self, **options: Any) -> "Query":
        """
        Replace the options of the compound query, e.g.
        ``minimum_should_match``.
        """
        return self.model_copy(update={"opts": dict(options)})

    def merge_options(self, **options: Any) -> "Query":
        return self.model_copy(update={"opts": {**self.opts, **options}})

    def with_index_type(self, index_type: Selector) -> "Query":
        """Search against another index selector than ``read``."""
        return self.model_copy(update={"index_type": index_type})

    def nested(self, path: str) -> "Query":
        """Convert to a nested query over the objects at ``path``."""
        return self.model_copy(
            update={"type": QueryType.NESTED, "opts": {**self.opts, "path": path}}
        )

    def script_score(self, source: str, **script_options: Any) -> "Query":
        """
        Convert to a function_score query scored by a script.

        Args:
            source: Script source
            **script_options: Extra script keys such as ``params`` or ``lang``
        """
        script = {"source": source, **script_options}
        return self.model_copy(
            update={"type": QueryType.FUNCTION_SCORE, "opts": {**self.opts, "script": script}}
        )

    def function_score(self, functions: List[Dict[str, Any]], **options: Any) -> "Query":
        """
        Convert to a function_score query over a list of score functions.

        Args:
            functions: Score function definitions
            **options: function_score options such as ``score_mode``
        """
        return self.model_copy(
            update={
                "type": QueryType.FUNCTION_SCORE,
                "opts": {**self.opts, "functions": functions, **options},
            }
        )

    def field_value_factor(self, field: str, **options: Any) -> "Query":
        """Convert to a function_score query boosted by a numeric field."""
        factor = {"field": field, **options}
        return self.model_copy(
            update={
                "type": QueryType.FUNCTION_SCORE,
                "opts": {**self.opts, "field_value_factor": factor},
            }
        )

    def constant_score(self, **options: Any) -> "Query":
        """Convert to a constant_score query; options such as ``boost`` are merged in."""
        return self.model_copy(
            update={"type": QueryType.CONSTANT_SCORE, "opts": {**self.opts, **options}}
        )

    def realize(self) -> Dict[str, Any]:
        """Compile into a search request body."""
        return realize(self)


def realize(query: Query) -> Dict[str, Any]:
    """
    Compile a query into a search request body.

    Args:
        query: Root query node

    Returns:
        ``{"query": ..., "sort": [...]}``, without ``sort`` when no sort was added
    """
    body: Dict[str, Any] = {"query": query_clause(query)}
    if query.sorts:
        body["sort"] = [{field: direction} for field, direction in query.sorts]
    return body


def query_clause(clause: Any) -> Any:
    """Compile a clause; leaf dicts pass through unchanged."""
    if isinstance(clause, Query):
        return _COMPILERS[clause.type](clause)
    if isinstance(clause, (list, tuple)):
        return [query_clause(item) for item in clause]
    return clause


def _bool_body(query: Query, strip: Tuple[str, ...] = ()) -> Dict[str, Any]:
    body: Dict[str, Any] = {}
    for key, attribute in CLAUSE_FIELDS:
        clauses = getattr(query, attribute)
        if clauses:
            body[key] = [query_clause(clause) for clause in clauses]

    body.update({key: value for key, value in query.opts.items() if key not in strip})
    return body


def _compile_bool(query: Query) -> Dict[str, Any]:
    return {"bool": _bool_body(query)}


def _compile_nested(query: Query) -> Dict[str, Any]:
    return {
        "nested": {
            "query": {"bool": _bool_body(query, strip=("path",))},
            "path": query.opts.get("path"),
        }
    }


def _compile_function_score(query: Query) -> Dict[str, Any]:
    body: Dict[str, Any] = {"query": {"bool": _bool_body(query, strip=FUNCTION_SCORE_KEYS)}}

    for key in FUNCTION_SCORE_KEYS:
        if key in query.opts and key != "script":
            body[key] = query.opts[key]

    if "script" in query.opts:
        body["script_score"] = {"script": query.opts["script"]}

    return {"function_score": body}


def _compile_constant_score(query: Query) -> Dict[str, Any]:
    return {"constant_score": _bool_body(query)}


_COMPILERS: Dict[QueryType, Callable[[Query], Dict[str, Any]]] = {
    QueryType.BOOL: _compile_bool,
    QueryType.NESTED: _compile_nested,
    QueryType.FUNCTION_SCORE: _compile_function_score,
    QueryType.CONSTANT_SCORE: _compile_constant_score,
}
