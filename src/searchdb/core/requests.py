"""Request Builder — Turns a document into a single-document backend request.

Everything a request needs is validated up front so that an unusable document
never results in a half-built request reaching the backend.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any

from searchdb.adapters.base.exceptions import ConfigurationError
from searchdb.core.namespace import Namespacer
from searchdb.models.document import SearchableDocument
from searchdb.models.query import IncrementSpec
from searchdb.models.request import DocumentRequest

logger = logging.getLogger(__name__)

_ATTRIBUTE_PATH = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")


class RequestMode(str, Enum):
    """What a document request is for."""

    READ = "read"
    WRITE_FULL = "write_full"
    WRITE_PARTIAL = "write_partial"


class RequestBuilder:
    """Builds ``DocumentRequest`` objects for get/create/index/update/delete.

    Index resolution: a document's logical ``search_index`` is namespaced;
    only when it declares none is its ``search_alias`` used, verbatim.
    """

    def __init__(self, namespacer: Namespacer) -> None:
        self.namespacer = namespacer

    def build(
        self,
        document: SearchableDocument,
        mode: RequestMode = RequestMode.READ,
        upsert: bool = False,
    ) -> DocumentRequest:
        """Build the request for one document.

        Args:
            document: The document to address.
            mode: ``READ`` (no body), ``WRITE_FULL`` (body is the attribute
                payload) or ``WRITE_PARTIAL`` (body is ``{"doc": payload}``).
            upsert: For ``WRITE_PARTIAL``, create the document when missing.

        Raises:
            ConfigurationError: If the document has no resolvable index, id
                or type, or cannot produce its payload for a write.
        """
        request = self._address(document)
        if mode is RequestMode.WRITE_FULL:
            request.body = self._values(document)
        elif mode is RequestMode.WRITE_PARTIAL:
            body: dict[str, Any] = {"doc": self._values(document)}
            if upsert:
                body["doc_as_upsert"] = True
            request.body = body
        logger.debug("Built %s request for %s/%s/%s", mode.value, request.index, request.type, request.id)
        return request

    def build_increment(
        self,
        document: SearchableDocument,
        inc: IncrementSpec,
        upsert: bool = False,
    ) -> DocumentRequest:
        """Build an update request that atomically adds ``inc.amount`` to one attribute.

        The body carries only an inline script, e.g. ``ctx._source.value += 1``;
        the document payload is not sent.  With ``upsert`` a missing document
        is created holding just the incremented attribute set to ``amount``.

        Raises:
            ConfigurationError: On an invalid document, attribute path or amount.
        """
        if not _ATTRIBUTE_PATH.match(inc.attribute):
            raise ConfigurationError(f"Invalid increment attribute: {inc.attribute!r}")
        amount = inc.amount
        if isinstance(amount, bool) or not isinstance(amount, (int, float)) or not math.isfinite(amount):
            raise ConfigurationError(f"Increment amount must be a finite number, got {amount!r}")

        request = self._address(document)
        body: dict[str, Any] = {
            "script": {
                "source": f"ctx._source.{inc.attribute} += {amount}",
                "lang": "painless",
            }
        }
        if upsert:
            body["upsert"] = _nested(inc.attribute, amount)
        request.body = body
        logger.debug("Built increment request for %s/%s/%s: %s", request.index, request.type, request.id, inc)
        return request

    def resolve_index(self, document: SearchableDocument) -> str:
        """Return the physical index a document lives in."""
        index = getattr(document, "search_index", None)
        if index:
            return self.namespacer.namespace_name(index)
        alias = getattr(document, "search_alias", None)
        if alias:
            return alias
        raise ConfigurationError("Document must declare a search index or alias")

    # ── Helpers ──────────────────────────────────────────────────────────

    def _address(self, document: SearchableDocument) -> DocumentRequest:
        index = self.resolve_index(document)
        doc_id = getattr(document, "search_id", None)
        if doc_id is None or str(doc_id) == "":
            raise ConfigurationError("Document id must be defined")
        doc_type = getattr(document, "search_type", None)
        if not doc_type:
            raise ConfigurationError("Document type must be defined")
        return DocumentRequest(index=index, type=doc_type, id=str(doc_id))

    @staticmethod
    def _values(document: SearchableDocument) -> dict[str, Any]:
        search_values = getattr(document, "search_values", None)
        if not callable(search_values):
            raise ConfigurationError("Document must provide search_values() for writes")
        values = search_values()
        if not isinstance(values, Mapping):
            raise ConfigurationError(
                f"search_values() must return a mapping, got {type(values).__name__}"
            )
        return dict(values)


def _nested(path: str, value: Any) -> dict[str, Any]:
    """``_nested("meta.score", 1)`` → ``{"meta": {"score": 1}}``."""
    result: dict[str, Any] = {}
    node = result
    *parents, leaf = path.split(".")
    for part in parents:
        node = node.setdefault(part, {})
    node[leaf] = value
    return result
