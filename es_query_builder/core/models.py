"""
Shared data models for the query builder.
"""

from enum import Enum
from typing import Any, List, Union

from pydantic import BaseModel, Field


class IndexSelector(str, Enum):
    """Logical index pointers resolved to versioned index names."""

    READ = "read"
    INDEX = "index"
    DELETE = "delete"


Selector = Union[IndexSelector, str]


def selector_name(selector: Selector) -> str:
    """Return the plain string form of a selector."""
    if isinstance(selector, IndexSelector):
        return selector.value
    return str(selector)


class Page(BaseModel):
    """A single page of search results."""

    page_number: int
    page_size: int
    entries: List[Any] = Field(default_factory=list)
    total_entries: int = 0
    total_pages: int = 0
