"""Integration test fixtures — a live OpenSearch node.

Expects a node reachable at ``SEARCHDB_TEST_HOST`` (default
``http://localhost:9201``), e.g.::

    docker run -d -p 9201:9200 -e discovery.type=single-node \
        -e DISABLE_SECURITY_PLUGIN=true opensearchproject/opensearch:2

Tests are skipped when the node is not reachable.  Every session uses its own
namespace, and the indices it creates are deleted afterwards.
"""

from __future__ import annotations

import os
import time
import uuid

import httpx
import pytest

from searchdb.adapters.opensearch.adapter import OpenSearchDb
from searchdb.models.document import Document

MOCK_DOCUMENTS: list[Document] = [
    Document(
        id=1,
        type="test",
        index="testidx",
        attributes={"title": "lorem ipsum", "name": "abc", "tags": ["a", "b"], "meta": {"score": 23}},
    ),
    Document(
        id=2,
        type="test",
        index="testidx",
        attributes={"title": "hop hep", "name": "abc", "tags": ["c", "b"], "meta": {"score": 40}},
    ),
    Document(
        id=1,
        type="another",
        index="anotheridx",
        attributes={"title": "dolor sit amet", "name": "efgabc", "data": "abc", "meta": {"score": 90}},
    ),
]


def _wait_for_service(url: str, timeout: float = 60.0) -> bool:
    """Block until *url* returns HTTP 200, or timeout."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        try:
            r = httpx.get(url, timeout=10)
            if r.status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(2)
    return False


@pytest.fixture(scope="session")
def opensearch_host() -> str:
    """Ensure OpenSearch is running."""
    pytest.importorskip("opensearchpy")
    host = os.environ.get("SEARCHDB_TEST_HOST", "http://localhost:9201")
    if not _wait_for_service(host, timeout=float(os.environ.get("SEARCHDB_TEST_WAIT", "10"))):
        pytest.skip(f"OpenSearch not available at {host}")
    return host


@pytest.fixture
async def db(opensearch_host: str):
    from opensearchpy import AsyncOpenSearch

    client = AsyncOpenSearch(hosts=[opensearch_host], verify_certs=False, ssl_show_warn=False)
    store = OpenSearchDb(client, f"it-{uuid.uuid4().hex[:8]}")
    yield store
    await client.indices.delete(index=store.namespacer.prefix + "*", ignore_unavailable=True)
    await store.close()


@pytest.fixture
async def seeded_db(db: OpenSearchDb):
    for document in MOCK_DOCUMENTS[:-1]:
        await db.create(document)
    await db.create(MOCK_DOCUMENTS[-1], {"wait": True})
    await db.refresh()
    return db
