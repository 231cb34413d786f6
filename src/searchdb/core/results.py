"""Result normalization — Raw backend hits to ``CanonicalDocument`` lists.

Scoring rule
------------
A hit's ``_score`` is used as-is, with one exception: when *no* hit in a
result set carries a score (e.g. a pure sort, which the backend does not
score), scores are synthesized from the backend order as
``count - position``, so the first of three hits scores 3 and the last 1.
A set where only some hits lack a score is passed through untouched.

In a multi-search every sub-query's hits form their own result set.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from typing import Any

from searchdb.adapters.base.exceptions import BackendError, BatchSearchError
from searchdb.models.document import CanonicalDocument

logger = logging.getLogger(__name__)

DEFAULT_TYPE = "_doc"


class ResultNormalizer:
    """Converts raw hits into canonical documents.

    Args:
        separator: Token between type and backend id in canonical ids.
    """

    def __init__(self, separator: str = "::") -> None:
        self.separator = separator

    def normalize(
        self, hits: Sequence[dict[str, Any]] | None, default_type: str | None = None
    ) -> list[CanonicalDocument]:
        """Convert hits, typing those without ``_type`` as ``default_type`` (else ``_doc``)."""
        if not hits:
            return []

        synthesize = all(hit.get("_score") is None for hit in hits)
        count = len(hits)
        documents = []
        for position, hit in enumerate(hits):
            hit_type = hit.get("_type") or default_type or DEFAULT_TYPE
            score = count - position if synthesize else hit.get("_score")
            documents.append(
                CanonicalDocument(
                    id=f"{hit_type}{self.separator}{hit.get('_id')}",
                    content=hit.get("_source") or {},
                    content_type=hit_type,
                    score=score,
                )
            )
        return documents

    def normalize_response(
        self, response: dict[str, Any], default_type: str | None = None
    ) -> list[CanonicalDocument]:
        """Normalize the hits of a single search response."""
        return self.normalize(_hits(response), default_type)


class BatchAggregator:
    """Merges the sub-responses of a multi-search into one ranked list.

    Any sub-query error fails the whole batch: every error message is
    collected into one ``BatchSearchError`` and no documents are returned.
    """

    def __init__(self, normalizer: ResultNormalizer) -> None:
        self.normalizer = normalizer

    def aggregate(
        self,
        response: dict[str, Any],
        positions: Sequence[int] | None = None,
        types: Sequence[str | None] | None = None,
    ) -> list[CanonicalDocument]:
        """Aggregate a raw multi-search response.

        Args:
            response: Raw backend response holding a ``responses`` list.
            positions: Correlation index of each submitted sub-query, in
                submission order.  Defaults to ``0..n-1``.
            types: Document type of each sub-query's untyped hits, in
                submission order.

        Returns:
            Documents from all sub-queries, by score descending.  Equal
            scores keep submission order.

        Raises:
            BatchSearchError: If any sub-response carries an error.
            BackendError: If the number of sub-responses does not match the
                number of submitted sub-queries.
        """
        responses = response.get("responses") or []
        if positions is None:
            positions = list(range(len(responses)))
        elif len(responses) != len(positions):
            raise BackendError(
                f"Multi-search returned {len(responses)} responses for {len(positions)} queries"
            )

        errors = [
            (position, _error_message(sub["error"]))
            for position, sub in zip(positions, responses, strict=True)
            if sub.get("error")
        ]
        if errors:
            logger.warning("Multi-search failed for %d of %d queries", len(errors), len(responses))
            raise BatchSearchError(errors)

        documents: list[CanonicalDocument] = []
        if types is None:
            types = [None] * len(responses)
        for sub, default_type in zip(responses, types, strict=True):
            documents.extend(self.normalizer.normalize(_hits(sub), default_type))

        # sorted() is stable, so ties keep concatenation order.
        return sorted(documents, key=_score_key, reverse=True)


def _hits(response: dict[str, Any]) -> list[dict[str, Any]]:
    return (response.get("hits") or {}).get("hits") or []


def _score_key(document: CanonicalDocument) -> float:
    return document.score if document.score is not None else float("-inf")


def _error_message(error: Any) -> str:
    """Render a sub-response error, which may be a string or a structured object."""
    if isinstance(error, dict):
        reason = error.get("reason") or (error.get("root_cause") or [{}])[0].get("reason")
        if reason:
            return f"{error['type']}: {reason}" if error.get("type") else str(reason)
        return json.dumps(error, sort_keys=True, default=str)
    return str(error)
