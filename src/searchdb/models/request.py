"""Backend request shapes produced by the translators."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class DocumentRequest(BaseModel):
    """Single-document request: ``{index, type, id, body?}``.

    ``type`` addresses the document on the caller's side only; typeless
    clients take no mapping type, so it never reaches the wire.
    """

    index: str = Field(description="Physical index name")
    type: str = Field(description="Document type")
    id: str = Field(description="Backend document id")
    body: dict[str, Any] | None = Field(default=None, description="Request body for writes")

    def to_client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the network client call."""
        kwargs: dict[str, Any] = {"index": self.index, "id": self.id}
        if self.body is not None:
            kwargs["body"] = self.body
        return kwargs


class SearchRequest(BaseModel):
    """Search request: ``{index?, type?, body}``.

    ``type`` labels the hits of the response that carry no ``_type`` of
    their own.
    """

    index: str | None = Field(default=None, description="Physical index scope (comma-separated)")
    type: str | None = Field(default=None, description="Document type of the hits")
    body: dict[str, Any] = Field(default_factory=dict, description="Query DSL body")

    def to_client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"body": self.body}
        if self.index is not None:
            kwargs["index"] = self.index
        return kwargs


class MultiSearchRequest(BaseModel):
    """Multi-search request.

    ``body`` is the alternating header/body list sent over the wire;
    ``positions[i]`` is the correlation index of the i-th header/body pair
    and ``types[i]`` the document type its header named, if any.
    """

    body: list[dict[str, Any]] = Field(default_factory=list, description="Alternating header/body entries")
    positions: list[int] = Field(default_factory=list, description="Correlation index per pair")
    types: list[str | None] = Field(default_factory=list, description="Document type per pair")

    def to_client_kwargs(self) -> dict[str, Any]:
        return {"body": self.body}
