"""
Repository - main entry point for talking to Elasticsearch.

Coordinates index management, document writes, bulk requests and searches
for ``Searchable`` models, compiling queries and bulk intents into request
bodies and decoding the responses.
"""

import itertools
import logging
import threading
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, as_completed, wait
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Optional

from elasticsearch import ApiError, Elasticsearch, NotFoundError, TransportError

from es_query_builder.bulk.encoder import build_document, bulk_request, update_payload
from es_query_builder.bulk.operations import IndexIntent
from es_query_builder.config import ESSettings
from es_query_builder.core.exceptions import DocumentNotFoundError, OperationFailedError
from es_query_builder.core.models import IndexSelector, Selector
from es_query_builder.execution.retry import retryable
from es_query_builder.query.aggregation import realize_aggregation
from es_query_builder.query.query import Query, query_clause
from es_query_builder.response.search import Record, SearchResponse

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], Any]


class Repo:
    """
    Executes requests for searchable models.

    One client is kept per cluster url; selectors can be routed to their own
    cluster through ``ESSettings.urls``.
    """

    def __init__(
        self,
        settings: Optional[ESSettings] = None,
        client_factory: Optional[ClientFactory] = None,
    ):
        """
        Initialize the repository.

        Args:
            settings: Connection settings, loaded from the environment if omitted
            client_factory: Builds a client for a url, defaults to ``Elasticsearch``
        """
        self.settings = settings or ESSettings.from_env()
        self._client_factory = client_factory or self._default_client
        self._clients: Dict[str, Any] = {}
        self._lock = threading.Lock()
        self._log_level = getattr(logging, self.settings.log_level.upper(), logging.DEBUG)

    def _default_client(self, url: str) -> Elasticsearch:
        if self.settings.request_timeout is not None:
            return Elasticsearch(hosts=[url], request_timeout=self.settings.request_timeout)
        return Elasticsearch(hosts=[url])

    def client(self, selector: Selector = IndexSelector.INDEX) -> Any:
        """Get the client for the cluster serving ``selector``."""
        url = self.settings.url_for(selector)
        with self._lock:
            if url not in self._clients:
                self._clients[url] = self._client_factory(url)
            return self._clients[url]

    # Index management

    def create_index(self, model: Any, index: Selector = IndexSelector.INDEX) -> Any:
        """Create the index for ``model`` with its settings."""
        response = self.client(index).indices.create(
            index=model.es_index(index), **model.es_settings()
        )
        return self._log_response(response)

    def update_index(self, model: Any, index: Selector = IndexSelector.INDEX) -> Any:
        """Apply ``model``'s current settings to its existing index."""
        response = self.client(index).indices.put_settings(
            index=model.es_index(index), settings=model.es_settings()["settings"]
        )
        return self._log_response(response)

    def close_index(self, model: Any, index: Selector = IndexSelector.INDEX) -> Any:
        response = self.client(index).indices.close(index=model.es_index(index))
        return self._log_response(response)

    def open_index(self, model: Any, index: Selector = IndexSelector.INDEX) -> Any:
        response = self.client(index).indices.open(index=model.es_index(index))
        return self._log_response(response)

    def create_mapping(self, model: Any, index: Selector = IndexSelector.INDEX, **params: Any) -> Any:
        """
        Put ``model``'s mapping definition on its index.

        Args:
            model: Searchable model
            index: Index selector
            **params: Extra put-mapping parameters

        Returns:
            Response body
        """
        response = self.client(index).indices.put_mapping(
            index=model.es_index(index), **model.es_mappings(), **params
        )
        return self._log_response(response)

    def delete_index(self, model: Any, index: Selector = IndexSelector.INDEX) -> Any:
        """Remove ``model``'s index. A missing index is not an error."""
        response = (
            self.client(index)
            .options(ignore_status=404)
            .indices.delete(index=model.es_index(index))
        )
        return self._log_response(response)

    def create_alias(
        self,
        model: Any,
        from_: Selector = IndexSelector.INDEX,
        target: Selector = IndexSelector.READ,
        index: Selector = IndexSelector.INDEX,
    ) -> Any:
        """
        Alias one index version to another.

        ``create_alias(Widget, from_="index", target="read")`` makes the read
        name of the index point at the indexing version.

        Args:
            model: Searchable model
            from_: Selector of the index being aliased
            target: Selector whose index name becomes the alias
            index: Selector of the cluster to send the request to

        Returns:
            Response body
        """
        actions = [
            {"add": {"index": model.es_index(from_), "alias": model.es_index(target)}}
        ]
        response = self.client(index).indices.update_aliases(actions=actions)
        return self._log_response(response)

    def rotate(
        self,
        model: Any,
        read: Selector = IndexSelector.READ,
        index: Selector = IndexSelector.INDEX,
    ) -> Any:
        """
        Delete the read index and alias the indexing index in its place.

        Returns:
            The alias response, or None when both selectors name the same index
        """
        if model.es_index(read) == model.es_index(index):
            return None

        self.delete_index(model, read)
        return self.create_alias(model, from_=index, target=read)

    def get_alias(self, model: Any, index: Selector) -> Any:
        response = self.client(index).indices.get_alias(index=model.es_index(index), name="*")
        return self._log_response(response)

    def exists(self, model: Any, index: Selector = IndexSelector.READ) -> bool:
        """Check if ``model``'s index exists. Request failures count as missing."""
        try:
            return bool(self.client(index).indices.exists(index=model.es_index(index)))
        except (ApiError, TransportError) as e:
            logger.warning("Could not check index %s: %s", model.es_index(index), e)
            return False

    def refresh(self, model: Any, index: Selector = IndexSelector.READ) -> Any:
        response = self.client(index).indices.refresh(index=model.es_index(index))
        return self._log_response(response)

    # Documents

    @retryable
    def index(self, struct: Any, index: Selector = IndexSelector.INDEX) -> Any:
        """
        Add a record to its model's index.

        The record is converted through ``es_preload`` and ``es_document``
        before it is sent.

        Args:
            struct: Indexable record
            index: Index selector

        Returns:
            Response body

        Raises:
            OperationFailedError: If no shard accepted the write
        """
        model = type(struct)
        response = self.client(index).index(
            index=model.es_index(index),
            id=struct.es_id(),
            document=build_document(struct, index),
        )
        return self._mark_failure(self._log_response(response))

    @retryable
    def update(self, model: Any, id: Any, data: Dict[str, Any], index: Selector = IndexSelector.INDEX) -> Any:
        """
        Update the document with ``id`` in ``model``'s index.

        Args:
            model: Searchable model
            id: Document id
            data: Field patch, or an update body with ``doc``/``script``
            index: Index selector

        Returns:
            Response body
        """
        response = self.client(index).update(
            index=model.es_index(index), id=id, **update_payload(data)
        )
        return self._mark_failure(self._log_response(response))

    def bulk(self, operations: Iterable[Any], index: Selector = IndexSelector.INDEX, **params: Any) -> Any:
        """
        Send a bulk request.

        ``operations`` are intents or tuples, the trailing index being optional:

            [
                ("index", struct, "index"),
                ("delete", other_struct, "index"),
                ("update", Model, id, {"doc": {...}}, "index"),
            ]

        Args:
            operations: Write operations
            index: Selector of the cluster to send the request to
            **params: Bulk query parameters, e.g. ``refresh``

        Returns:
            Response body

        Raises:
            OperationFailedError: If the response reports item errors
        """
        lines = bulk_request(operations)
        response = self.client(index).bulk(operations=lines, **params)
        return self._mark_failure(self._log_response(response))

    def update_by_query(
        self, model: Any, query: Any, script: Any, index: Selector = IndexSelector.INDEX
    ) -> Any:
        """Update every document matching ``query`` with ``script``."""
        if isinstance(query, Query):
            query = query_clause(query)

        response = self.client(index).update_by_query(
            index=model.es_index(index), query=query, script=script
        )
        return self._mark_failure(self._log_response(response))

    def get(self, struct: Any, index: Selector = IndexSelector.READ) -> Record:
        """
        Get a record's document by id.

        A missing document is returned as a record with ``found=False``.

        Raises:
            DocumentNotFoundError: If the response could not be decoded
        """
        model = type(struct)
        try:
            body = _body(self.client(index).get(index=model.es_index(index), id=struct.es_id()))
        except NotFoundError as e:
            body = e.body

        self._log_response(body)
        record = Record.parse(body, model, index)
        if record is None:
            raise DocumentNotFoundError(f"No document for {model.__name__} {struct.es_id()}")
        return record

    @retryable
    def delete(self, struct: Any, index: Selector = IndexSelector.INDEX) -> Any:
        """Remove a record from its model's index."""
        model = type(struct)
        response = self.client(index).delete(index=model.es_index(index), id=struct.es_id())
        return self._mark_failure(self._log_response(response))

    # Search

    def search(self, query: Query, **params: Any) -> SearchResponse:
        """
        Realize ``query`` and search the index of its queryable.

        Args:
            query: Query built from a model's ``search_query()``
            **params: Search parameters, e.g. ``size`` or ``from_``

        Returns:
            Decoded search response
        """
        return self.search_raw(query.queryable, query.realize(), index_type=query.index_type, **params)

    def search_raw(
        self,
        model: Any,
        body: Dict[str, Any],
        index_type: Selector = IndexSelector.READ,
        **params: Any,
    ) -> SearchResponse:
        """
        Search with an already realized request body.

        Args:
            model: Model class, or list of model classes to search together
            body: Search request body
            index_type: Index selector
            **params: Search parameters

        Returns:
            Decoded search response

        Raises:
            DocumentNotFoundError: If the response could not be decoded
        """
        response = self.client(index_type).search(
            index=model_to_index(model, index_type), **_search_kwargs(body, params)
        )
        result = SearchResponse.parse(self._log_response(response), model, index_type)
        if result is None:
            raise DocumentNotFoundError("Search response could not be decoded")
        return result

    def aggregate(self, query: Query, aggregation: Any) -> Dict[str, Any]:
        """
        Run an aggregation over the documents matching ``query``.

        Returns:
            The raw response body; aggregation results are under ``aggregations``
        """
        body = {**query.realize(), **realize_aggregation(aggregation)}
        response = self.client(query.index_type).search(
            index=model_to_index(query.queryable, query.index_type),
            **_search_kwargs(body, {"size": 0}),
        )
        return self._log_response(response)

    # Streaming

    def index_stream(
        self,
        records: Iterable[Any],
        index: Selector = IndexSelector.INDEX,
        parallelism: Optional[int] = None,
        chunk_size: Optional[int] = None,
    ) -> Iterator[int]:
        """
        Index a stream of records in concurrent bulk chunks.

        Records are grouped into chunks, each sent as one bulk request by a
        pool of workers. Chunks complete in any order.

        Args:
            records: Indexable records
            index: Index selector
            parallelism: Number of workers, defaults to settings
            chunk_size: Records per bulk request, defaults to settings

        Yields:
            The number of records in each completed chunk
        """
        chunk_size = chunk_size or self.settings.chunk_size
        workers = parallelism or self.settings.parallelism

        with ThreadPoolExecutor(max_workers=workers) as executor:
            pending = set()
            for chunk in _chunks(records, chunk_size):
                pending.add(executor.submit(self._insert_chunk, chunk, index))
                if len(pending) >= workers:
                    done, pending = wait(pending, return_when=FIRST_COMPLETED)
                    for future in done:
                        yield future.result()

            for future in as_completed(pending):
                yield future.result()

    def _insert_chunk(self, chunk: List[Any], index: Selector) -> int:
        try:
            self.bulk([IndexIntent(struct=record, index=index) for record in chunk], index)
        except Exception:
            logger.exception("Bulk chunk of %d records failed", len(chunk))
            raise
        logger.info("Indexed chunk of %d records", len(chunk))
        return len(chunk)

    # Responses

    def _log_response(self, response: Any) -> Any:
        body = _body(response)
        logger.log(self._log_level, "Elasticsearch response: %r", body)
        return body

    @staticmethod
    def _mark_failure(body: Any) -> Any:
        if isinstance(body, Mapping):
            shards = body.get("_shards")
            # a noop update touches no shards
            if (
                isinstance(shards, Mapping)
                and shards.get("successful") == 0
                and body.get("result") != "noop"
            ):
                raise OperationFailedError("No shards succeeded", body)
            if body.get("errors") is True:
                raise OperationFailedError("Bulk request reported errors", body)
        return body


def model_to_index(model: Any, index_type: Selector) -> str:
    """Index name for a model, or comma-joined names for a list of models."""
    if isinstance(model, (list, tuple)):
        return ",".join(item.es_index(index_type) for item in model)
    return model.es_index(index_type)


def _body(response: Any) -> Any:
    return getattr(response, "body", response)


def _search_kwargs(body: Dict[str, Any], params: Dict[str, Any]) -> Dict[str, Any]:
    kwargs = {**body, **params}
    if "from" in kwargs:
        kwargs["from_"] = kwargs.pop("from")
    return kwargs


def _chunks(records: Iterable[Any], size: int) -> Iterator[List[Any]]:
    iterator = iter(records)
    while True:
        chunk = list(itertools.islice(iterator, size))
        if not chunk:
            return
        yield chunk
