"""Document models — what goes into the store and what comes back out.

``SearchableDocument`` is the capability interface a persisted object offers
to the store: an id, a type, where it lives (a logical index or a
pre-qualified alias) and, for writes, its attribute payload.  ``Document`` is
the stock implementation; any model class can satisfy the protocol instead.

``CanonicalDocument`` is the normalized shape of every search hit, independent
of backend field names.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field


@runtime_checkable
class SearchableDocument(Protocol):
    """Capabilities a document needs to be stored in a search index."""

    @property
    def search_id(self) -> str | int | None:
        """Backend document id."""

    @property
    def search_type(self) -> str | None:
        """Document type, also used to prefix canonical ids."""

    @property
    def search_index(self) -> str | None:
        """Logical (tenant-relative) index name, namespaced before use."""

    @property
    def search_alias(self) -> str | None:
        """Pre-qualified index or alias name, used verbatim."""

    def search_values(self) -> dict[str, Any]:
        """Attribute payload to index."""


class Document(BaseModel):
    """Plain document implementing ``SearchableDocument``.

    Example::

        Document(id=1, type="test", index="testidx", attributes={"title": "lorem"})
    """

    id: str | int | None = Field(default=None, description="Document id")
    type: str | None = Field(default=None, description="Document type")
    index: str | None = Field(default=None, description="Logical index name")
    alias: str | None = Field(default=None, description="Pre-qualified index/alias name")
    attributes: dict[str, Any] = Field(default_factory=dict, description="Attribute payload")

    @property
    def search_id(self) -> str | int | None:
        return self.id

    @property
    def search_type(self) -> str | None:
        return self.type

    @property
    def search_index(self) -> str | None:
        return self.index

    @property
    def search_alias(self) -> str | None:
        return self.alias

    def search_values(self) -> dict[str, Any]:
        return dict(self.attributes)


class CanonicalDocument(BaseModel):
    """Normalized search hit.

    ``id`` is ``<type><separator><backend id>`` so that documents of different
    types sharing one result list never collide.
    """

    id: str = Field(description="Composite id: type + separator + backend id")
    content: dict[str, Any] = Field(default_factory=dict, description="Document source")
    content_type: str = Field(description="Document type reported by the backend")
    score: float | None = Field(default=None, description="Relevance score or synthesized rank")
