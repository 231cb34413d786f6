"""SearchDB — Document persistence over OpenSearch/Elasticsearch.

Translates create/read/update/delete and collection queries into search
engine requests, namespaces index names per tenant, and normalizes hits into
``CanonicalDocument`` objects.
"""

from searchdb.adapters.base.exceptions import (
    BackendError,
    BatchSearchError,
    ConfigurationError,
    DocumentNotFoundError,
    LifecycleError,
    SearchDBError,
)
from searchdb.adapters.opensearch.adapter import OpenSearchDb
from searchdb.models.document import CanonicalDocument, Document, SearchableDocument

__version__ = "0.1.0"

__all__ = [
    "BackendError",
    "BatchSearchError",
    "CanonicalDocument",
    "ConfigurationError",
    "Document",
    "DocumentNotFoundError",
    "LifecycleError",
    "OpenSearchDb",
    "SearchDBError",
    "SearchableDocument",
    "__version__",
]
