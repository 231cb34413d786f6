"""Store-level exceptions.

Four failure categories are distinguished:

  - ``ConfigurationError`` — the caller handed over something unusable
    (missing document id/type/index, malformed options).  Raised before any
    request reaches the backend and never worth retrying.
  - ``BackendError`` — a single backend call failed.  The client exception is
    kept as ``__cause__``.
  - ``BatchSearchError`` — one or more sub-queries of a multi-search failed.
  - ``LifecycleError`` — a step of a multi-call index operation failed.
"""

from __future__ import annotations


class SearchDBError(Exception):
    """Base exception for all SearchDB errors."""


class ConfigurationError(SearchDBError):
    """Raised when a document descriptor or request options are invalid."""


class BackendError(SearchDBError):
    """Raised when the search backend rejects or fails a request."""


class DocumentNotFoundError(BackendError):
    """Raised when a requested document does not exist."""


class BatchSearchError(BackendError):
    """Raised when any sub-query of a multi-search reports an error.

    Attributes:
        errors: ``(position, message)`` pairs, one per failed sub-query, in
            submission order.
    """

    def __init__(self, errors: list[tuple[int, str]]) -> None:
        self.errors = errors
        super().__init__(" & ".join(message for _, message in errors))


class LifecycleError(BackendError):
    """Raised when a step of an index lifecycle sequence fails.

    Attributes:
        index: Physical index the sequence was running against.
        step: Name of the step that failed.  Steps after it were not run.
    """

    def __init__(self, index: str, step: str, message: str) -> None:
        self.index = index
        self.step = step
        super().__init__(f"{step} failed for index '{index}': {message}")
