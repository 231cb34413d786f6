"""OpenSearch document store — Persistence over an OpenSearch/Elasticsearch cluster.

The store composes the translation pieces from ``searchdb.core`` around an
async network client with the ``opensearchpy.AsyncOpenSearch`` call surface
(``elasticsearch.AsyncElasticsearch`` exposes the same one).  The client is
injected and treated as opaque: the store never retries and never manages
connections beyond closing the client it was given.

Usage::

    client = AsyncOpenSearch(hosts=["https://localhost:9200"])
    async with OpenSearchDb(client, namespace="tenant-a") as db:
        await db.create(Document(id=1, type="post", index="posts", attributes={...}), {"wait": True})
        docs = await db.find_all({"query": {"match": {"title": "lorem"}}, "index": "posts"})

Install the client with::

    pip install searchdb[opensearch]
    # or: pip install opensearch-py
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from searchdb.adapters.base.adapter import DocumentStore
from searchdb.adapters.base.exceptions import (
    BackendError,
    ConfigurationError,
    DocumentNotFoundError,
    SearchDBError,
)
from searchdb.config.settings import NamespaceSettings, Settings
from searchdb.core.lifecycle import IndexLifecycleSequencer
from searchdb.core.namespace import Namespacer
from searchdb.core.query import BatchTranslator, QueryTranslator
from searchdb.core.requests import RequestBuilder, RequestMode
from searchdb.core.results import BatchAggregator, ResultNormalizer
from searchdb.models.document import CanonicalDocument, SearchableDocument
from searchdb.models.query import IndexRequest, MultiSearchOptions, SearchOptions, WriteOptions

logger = logging.getLogger(__name__)


class OpenSearchDb(DocumentStore):
    """Document store backed by OpenSearch (or a compatible Elasticsearch).

    Args:
        client: Async search client.  Required.
        namespace: Tenant namespace, as a ``Namespacer``, ``NamespaceSettings``
            or bare namespace string (default separator ``::``).
    Raises:
        ConfigurationError: If no client is given.
    """

    def __init__(
        self,
        client: Any,
        namespace: Namespacer | NamespaceSettings | str = "",
    ) -> None:
        if client is None:
            raise ConfigurationError("Search client must be provided")
        if isinstance(namespace, Namespacer):
            namespacer = namespace
        elif isinstance(namespace, NamespaceSettings):
            namespacer = Namespacer.from_settings(namespace)
        else:
            namespacer = Namespacer(namespace)

        self._client = client
        self.namespacer = namespacer
        self.requests = RequestBuilder(namespacer)
        self.queries = QueryTranslator(namespacer)
        self.batches = BatchTranslator(namespacer)
        self.normalizer = ResultNormalizer(namespacer.separator)
        self.aggregator = BatchAggregator(self.normalizer)
        self.lifecycle = IndexLifecycleSequencer()

    @classmethod
    def from_settings(cls, settings: Settings, client: Any = None) -> OpenSearchDb:
        """Create a store from settings, building an ``AsyncOpenSearch`` client if none is given."""
        if client is None:
            try:
                from opensearchpy import AsyncOpenSearch
            except ImportError as e:
                raise ConfigurationError(
                    "opensearch-py package is required.  Install with: pip install searchdb[opensearch]"
                ) from e

            backend = settings.backend
            client_kwargs: dict[str, Any] = {
                "hosts": backend.hosts,
                "verify_certs": backend.verify_certs,
                "ssl_show_warn": False,
            }
            if backend.username and backend.password:
                client_kwargs["http_auth"] = (backend.username, backend.password)
            client_kwargs.update(backend.extra)
            client = AsyncOpenSearch(**client_kwargs)

        return cls(client, settings.namespace)

    @property
    def name(self) -> str:
        return "opensearch"

    @property
    def client(self) -> Any:
        return self._client

    async def close(self) -> None:
        """Close the search client."""
        await self._client.close()

    # ── Documents ────────────────────────────────────────────────────────

    async def create(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        opts = _write_options(options)
        request = self.requests.build(document, RequestMode.WRITE_FULL)
        logger.debug("create %s/%s", request.index, request.id)
        await self._call("create", lambda: self._client.create(**request.to_client_kwargs()))
        await self._wait(request.index, opts)
        return _attributes(document, request.body)

    async def find(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        request = self.requests.build(document, RequestMode.READ)
        response = await self._call(
            "get",
            lambda: self._client.get(**request.to_client_kwargs()),
            missing_document=True,
        )
        attributes = _attributes(document)
        attributes.update(response.get("_source") or {})
        return attributes

    async def update(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Write a document.

        - ``options.inc`` set: atomic increment, see ``increment``.
        - ``options.update``: merge the payload into the stored document
          (``{"doc": ...}``), creating it if ``options.upsert``.
        - otherwise: replace the stored document with the payload.
        """
        opts = _write_options(options)
        if opts.inc is not None:
            return await self.increment(document, opts)

        if opts.update:
            request = self.requests.build(document, RequestMode.WRITE_PARTIAL, upsert=opts.upsert)
            await self._call("update", lambda: self._client.update(**request.to_client_kwargs()))
            payload = request.body["doc"] if request.body else None
        else:
            request = self.requests.build(document, RequestMode.WRITE_FULL)
            await self._call("index", lambda: self._client.index(**request.to_client_kwargs()))
            payload = request.body
        await self._wait(request.index, opts)
        return _attributes(document, payload)

    async def destroy(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        opts = _write_options(options)
        request = self.requests.build(document, RequestMode.READ)
        logger.debug("destroy %s/%s", request.index, request.id)
        await self._call(
            "delete",
            lambda: self._client.delete(**request.to_client_kwargs()),
            missing_document=True,
        )
        await self._wait(request.index, opts)
        return _attributes(document)

    async def increment(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any]
    ) -> dict[str, Any]:
        opts = _write_options(options)
        if opts.inc is None:
            raise ConfigurationError("Increment requires options.inc with an attribute and amount")
        request = self.requests.build_increment(document, opts.inc, upsert=opts.upsert)
        await self._call("update", lambda: self._client.update(**request.to_client_kwargs()))
        await self._wait(request.index, opts)
        return _attributes(document)

    # ── Collections ──────────────────────────────────────────────────────

    async def search(self, options: SearchOptions) -> list[CanonicalDocument]:
        request = self.queries.build(options)
        kwargs = request.to_client_kwargs()
        response = await self._call("search", lambda: self._client.search(**kwargs))
        documents = self.normalizer.normalize_response(response, request.type)
        logger.debug("search returned %d documents", len(documents))
        return documents

    async def msearch(self, options: MultiSearchOptions) -> list[CanonicalDocument]:
        request = self.batches.build(options.units)
        response = await self._call("msearch", lambda: self._client.msearch(**request.to_client_kwargs()))
        return self.aggregator.aggregate(response, request.positions, request.types)

    # ── Index administration ─────────────────────────────────────────────

    async def create_index(self, request: IndexRequest | Mapping[str, Any]) -> Any:
        req = _index_request(request)
        index = self.namespacer.namespace_list(req.index)
        body: dict[str, Any] = {}
        if req.settings is not None:
            body["settings"] = req.settings
        if req.mapping is not None:
            body["mappings"] = req.mapping
        kwargs: dict[str, Any] = {"index": index}
        if body:
            kwargs["body"] = body
        logger.info("Creating index %s", index)
        return await self._call("create_index", lambda: self._client.indices.create(**kwargs))

    async def delete_index(self, request: IndexRequest | Mapping[str, Any]) -> Any:
        index = self.namespacer.namespace_list(_index_request(request).index)
        logger.info("Deleting index %s", index)
        return await self._call("delete_index", lambda: self._client.indices.delete(index=index))

    async def close_index(self, request: IndexRequest | Mapping[str, Any]) -> Any:
        index = self.namespacer.namespace_list(_index_request(request).index)
        logger.info("Closing index %s", index)
        return await self._call("close_index", lambda: self._client.indices.close(index=index))

    async def open_index(self, request: IndexRequest | Mapping[str, Any]) -> Any:
        index = self.namespacer.namespace_list(_index_request(request).index)
        logger.info("Opening index %s", index)
        return await self._call("open_index", lambda: self._client.indices.open(index=index))

    async def update_index(self, request: IndexRequest | Mapping[str, Any]) -> Any:
        req = _index_request(request)
        if req.settings is None:
            raise ConfigurationError("update_index requires settings")
        index = self.namespacer.namespace_list(req.index)
        logger.info("Updating settings of index %s", index)
        return await self.lifecycle.update_settings(self._client.indices, index, req.settings)

    async def update_mapping(self, request: IndexRequest | Mapping[str, Any]) -> Any:
        req = _index_request(request)
        if req.mapping is None:
            raise ConfigurationError("update_mapping requires a mapping")
        index = self.namespacer.namespace_list(req.index)
        logger.info("Updating mapping of index %s", index)
        return await self._call(
            "put_mapping", lambda: self._client.indices.put_mapping(index=index, body=req.mapping)
        )

    async def get_mapping(self, request: IndexRequest | Mapping[str, Any]) -> Any:
        index = self.namespacer.namespace_list(_index_request(request).index)
        return await self._call("get_mapping", lambda: self._client.indices.get_mapping(index=index))

    async def delete_mapping(self, request: IndexRequest | Mapping[str, Any]) -> Any:
        """Delete one mapping type of an index.

        The client has no helper for this endpoint, so the request goes
        through its transport.  Clusters without mapping types answer with
        an error, raised as ``BackendError``.
        """
        req = _index_request(request)
        if not req.type:
            raise ConfigurationError("delete_mapping requires a type")
        index = self.namespacer.namespace_list(req.index)
        path = f"/{quote(index, safe=',*')}/_mapping/{quote(req.type, safe='')}"
        logger.info("Deleting mapping %s of index %s", req.type, index)
        return await self._call("delete_mapping", lambda: self._client.transport.perform_request("DELETE", path))

    async def refresh(self, index: str | None = None) -> Any:
        """Refresh indices of this namespace; all of them when ``index`` is None."""
        physical = self.namespacer.prefix + "*" if index is None else self.namespacer.namespace_list(index)
        return await self._refresh(physical)

    # ── Helpers ──────────────────────────────────────────────────────────

    async def _wait(self, index: str, options: WriteOptions) -> None:
        if options.wait:
            await self._refresh(index)

    async def _refresh(self, index: str) -> Any:
        logger.debug("refresh %s", index)
        return await self._call("refresh", lambda: self._client.indices.refresh(index=index))

    @staticmethod
    async def _call(
        operation: str,
        call: Callable[[], Awaitable[Any]],
        missing_document: bool = False,
    ) -> Any:
        """Await a client call, wrapping client exceptions in ``BackendError``."""
        try:
            return await call()
        except SearchDBError:
            raise
        except Exception as e:
            if missing_document and "NotFoundError" in type(e).__name__:
                raise DocumentNotFoundError(f"{operation} failed, document not found: {e}") from e
            raise BackendError(f"{operation} failed: {e}") from e


def _write_options(options: WriteOptions | Mapping[str, Any] | None) -> WriteOptions:
    if options is None:
        return WriteOptions()
    if isinstance(options, WriteOptions):
        return options
    try:
        return WriteOptions.model_validate(dict(options))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid write options: {e}") from e


def _index_request(request: IndexRequest | Mapping[str, Any]) -> IndexRequest:
    if isinstance(request, IndexRequest):
        return request
    try:
        return IndexRequest.model_validate(dict(request))
    except ValidationError as e:
        raise ConfigurationError(f"Invalid index request: {e}") from e


def _attributes(document: SearchableDocument, values: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """The document's attributes as returned to the caller, always including its id."""
    if values is None:
        search_values = getattr(document, "search_values", None)
        values = search_values() if callable(search_values) else {}
    attributes = dict(values)
    attributes.setdefault("id", document.search_id)
    return attributes
