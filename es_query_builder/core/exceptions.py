"""
Exceptions raised by the query builder and its repository layer.
"""

from typing import Any, Optional


class QueryBuilderError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(QueryBuilderError):
    """A model or operation is missing required configuration."""


class OperationFailedError(QueryBuilderError):
    """
    The engine accepted the request but reported a failure in its body.

    Raised for responses where no shard succeeded or for bulk responses
    flagged with ``errors: true``.
    """

    def __init__(self, message: str, response: Optional[Any] = None):
        super().__init__(message)
        self.response = response


class DocumentNotFoundError(QueryBuilderError):
    """The engine returned a body that could not be decoded into a result."""
