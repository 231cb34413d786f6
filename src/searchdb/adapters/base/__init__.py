"""Base store interface and exceptions."""

from searchdb.adapters.base.adapter import DocumentStore

__all__ = ["DocumentStore"]
