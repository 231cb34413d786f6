"""Query translation — Search options to backend search requests.

``QueryTranslator`` handles a single search; ``BatchTranslator`` handles a
multi-search, where each sub-query carries its own index scope.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from searchdb.adapters.base.exceptions import ConfigurationError
from searchdb.core.namespace import Namespacer
from searchdb.models.query import BatchQueryUnit, SearchOptions
from searchdb.models.request import MultiSearchRequest, SearchRequest

logger = logging.getLogger(__name__)


class QueryTranslator:
    """Builds a ``SearchRequest`` from ``SearchOptions``.

    Only options that are set make it into the request; an unset offset or
    size is left to the backend's defaults rather than sent as ``0``.

    Mapping:
      - ``query`` / ``filter`` / ``sort`` → body, verbatim
      - ``offset`` (else ``from``) → ``body.from``
      - ``limit`` (else ``size``) → ``body.size``
      - ``index`` → namespaced index scope
      - ``alias`` → index scope, verbatim
      - ``type`` → document type of hits without their own ``_type``
      - ``indices_boost`` → ``body.indices_boost`` with namespaced keys
    """

    def __init__(self, namespacer: Namespacer) -> None:
        self.namespacer = namespacer

    def build(self, options: SearchOptions) -> SearchRequest:
        """Translate search options into a backend request.

        Raises:
            ConfigurationError: If both ``index`` and ``alias`` are given.
        """
        if options.index is not None and options.alias is not None:
            raise ConfigurationError("Search options accept either 'index' or 'alias', not both")

        body: dict[str, Any] = {}
        if options.query is not None:
            body["query"] = options.query
        if options.filter is not None:
            body["filter"] = options.filter

        offset = options.offset if options.offset is not None else options.from_
        if offset is not None:
            body["from"] = offset
        size = options.limit if options.limit is not None else options.size
        if size is not None:
            body["size"] = size

        if options.sort is not None:
            body["sort"] = options.sort
        if options.indices_boost is not None:
            body["indices_boost"] = self.namespacer.namespace_keys(options.indices_boost)

        request = SearchRequest(body=body, type=options.type)
        if options.index is not None:
            request.index = self.namespacer.namespace_list(options.index)
        elif options.alias is not None:
            request.index = options.alias

        logger.debug("Search request: index=%s type=%s body=%s", request.index, request.type, body)
        return request


class BatchTranslator:
    """Builds a ``MultiSearchRequest`` from ordered ``BatchQueryUnit`` objects.

    Units are copied, never modified in place.  Order is kept exactly: the
    backend pairs headers with bodies by position.  A header ``type`` is
    taken off the wire and kept as the type of that sub-query's hits.
    """

    def __init__(self, namespacer: Namespacer) -> None:
        self.namespacer = namespacer

    def build(self, units: list[BatchQueryUnit]) -> MultiSearchRequest:
        """Translate ordered sub-queries into one multi-search request.

        Raises:
            ConfigurationError: If there are no units or a header ``index``
                is neither a string nor a list of strings.
        """
        if not units:
            raise ConfigurationError("Multi-search needs at least one query")

        request = MultiSearchRequest()
        for i, unit in enumerate(units):
            header = copy.deepcopy(unit.header)
            if header.get("index"):
                header["index"] = self._namespace_scope(header["index"])
            request.types.append(header.pop("type", None) or None)
            request.body.append(header)
            request.body.append(copy.deepcopy(unit.body))
            request.positions.append(unit.position if unit.position is not None else i)

        logger.debug("Multi-search request with %d queries: %s", len(units), request.body)
        return request

    def _namespace_scope(self, index: Any) -> str | list[str]:
        if isinstance(index, str):
            return self.namespacer.namespace_list(index)
        if isinstance(index, list) and all(isinstance(name, str) for name in index):
            return [self.namespacer.namespace_list(name) for name in index]
        raise ConfigurationError(f"Multi-search header index must be a string or list of strings, got {index!r}")
