"""Shared test fixtures and configuration."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, create_autospec

import pytest
from opensearchpy import AsyncOpenSearch, AsyncTransport
from opensearchpy._async.client.indices import IndicesClient

from searchdb.adapters.opensearch.adapter import OpenSearchDb
from searchdb.config.settings import Settings
from searchdb.core.namespace import Namespacer
from searchdb.models.document import Document

CLIENT_METHODS = ("create", "get", "index", "update", "delete", "search", "msearch", "close")
INDICES_METHODS = (
    "create",
    "delete",
    "close",
    "open",
    "put_settings",
    "put_mapping",
    "get_mapping",
    "refresh",
)


@pytest.fixture
def settings() -> Settings:
    """Create a test Settings instance with defaults."""
    return Settings(
        _env_file=None,  # type: ignore[call-arg]
        namespace={"name": "T", "separator": "::"},
    )


@pytest.fixture
def namespacer() -> Namespacer:
    return Namespacer("T", "::")


@pytest.fixture
def document() -> Document:
    """A document as persisted by the application layer."""
    return Document(
        id=1,
        type="test",
        index="testidx",
        attributes={"title": "testtitle", "value": 45},
    )


@pytest.fixture
def another_document() -> Document:
    return Document(
        id=1,
        type="another",
        index="anotheridx",
        attributes={"title": "dolor sit amet", "name": "efgabc", "meta": {"score": 90}},
    )


@pytest.fixture
def client() -> MagicMock:
    """Async search client stand-in pinned to the opensearch-py call surface.

    Every call succeeds with an empty response; unknown methods and
    keywords fail as they would on the real client.
    """
    mock = create_autospec(AsyncOpenSearch, instance=True)
    mock.indices = create_autospec(IndicesClient, instance=True)
    mock.transport = create_autospec(AsyncTransport, instance=True)
    _answer(mock, CLIENT_METHODS, {})
    _answer(mock.indices, INDICES_METHODS, {"acknowledged": True})
    _answer(mock.transport, ("perform_request",), {"acknowledged": True})
    return mock


def _answer(mock: MagicMock, methods: tuple[str, ...], value: Any) -> None:
    """Make each method awaitable, resolving to its current ``return_value``."""
    for name in methods:
        method = getattr(mock, name)
        method.return_value = value
        method.side_effect = _responder(method)


def _responder(method: MagicMock) -> Any:
    async def respond(*args: Any, **kwargs: Any) -> Any:
        return method.return_value

    return respond


@pytest.fixture
def db(client: MagicMock, namespacer: Namespacer) -> OpenSearchDb:
    return OpenSearchDb(client, namespacer)
