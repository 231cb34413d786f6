"""Base document store — Abstract persistence interface over a search backend.

A store is what an application's persistence layer talks to.  It is
responsible for:
  1. Document CRUD (create, find, update, destroy, increment)
  2. Collection queries (single search and multi-search)
  3. Index administration
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from searchdb.adapters.base.exceptions import ConfigurationError
from searchdb.models.query import MultiSearchOptions, SearchOptions

if TYPE_CHECKING:
    from searchdb.models.document import CanonicalDocument, SearchableDocument
    from searchdb.models.query import IndexRequest, WriteOptions


class DocumentStore(ABC):
    """Abstract base class for search-backed document stores.

    Write options and index requests may be given as models or as plain
    mappings; stores validate them before use.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Backend name (e.g., 'opensearch')."""

    # ── Documents ────────────────────────────────────────────────────────

    @abstractmethod
    async def create(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Create a document.

        Returns:
            The document's attributes.
        """

    @abstractmethod
    async def find(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Fetch a document by id.

        Raises:
            DocumentNotFoundError: If the document does not exist.
        """

    @abstractmethod
    async def update(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Replace, merge-update or increment a document depending on ``options``."""

    @abstractmethod
    async def destroy(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any] | None = None
    ) -> dict[str, Any]:
        """Delete a document."""

    @abstractmethod
    async def increment(
        self, document: SearchableDocument, options: WriteOptions | Mapping[str, Any]
    ) -> dict[str, Any]:
        """Atomically add ``options.inc.amount`` to ``options.inc.attribute``."""

    # ── Collections ──────────────────────────────────────────────────────

    @abstractmethod
    async def search(self, options: SearchOptions) -> list[CanonicalDocument]:
        """Run a single search."""

    @abstractmethod
    async def msearch(self, options: MultiSearchOptions) -> list[CanonicalDocument]:
        """Run a multi-search and merge its results by score."""

    async def find_all(
        self, options: SearchOptions | MultiSearchOptions | Mapping[str, Any]
    ) -> list[CanonicalDocument]:
        """Query a collection.

        Accepts ``SearchOptions``, ``MultiSearchOptions`` or a plain mapping.
        A mapping with ``msearch: True`` is a multi-search whose ``body`` is
        the alternating header/body list; any other mapping is a single search.
        """

        if isinstance(options, MultiSearchOptions):
            return await self.msearch(options)
        if isinstance(options, SearchOptions):
            return await self.search(options)
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Unsupported query options: {type(options).__name__}")
        if options.get("msearch"):
            return await self.msearch(MultiSearchOptions.from_wire(options.get("body") or []))
        try:
            search_options = SearchOptions.model_validate(dict(options))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid search options: {e}") from e
        return await self.search(search_options)

    # ── Index administration ─────────────────────────────────────────────

    @abstractmethod
    async def create_index(self, request: IndexRequest | Mapping[str, Any]) -> Any: ...

    @abstractmethod
    async def delete_index(self, request: IndexRequest | Mapping[str, Any]) -> Any: ...

    @abstractmethod
    async def close_index(self, request: IndexRequest | Mapping[str, Any]) -> Any: ...

    @abstractmethod
    async def open_index(self, request: IndexRequest | Mapping[str, Any]) -> Any: ...

    @abstractmethod
    async def update_index(self, request: IndexRequest | Mapping[str, Any]) -> Any:
        """Apply new settings to an index (close → put settings → open)."""

    @abstractmethod
    async def update_mapping(self, request: IndexRequest | Mapping[str, Any]) -> Any: ...

    @abstractmethod
    async def get_mapping(self, request: IndexRequest | Mapping[str, Any]) -> Any: ...

    @abstractmethod
    async def delete_mapping(self, request: IndexRequest | Mapping[str, Any]) -> Any: ...

    @abstractmethod
    async def close(self) -> None:
        """Release the backend client."""

    async def __aenter__(self) -> DocumentStore:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
