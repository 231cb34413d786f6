from searchdb.adapters.opensearch.adapter import OpenSearchDb

__all__ = ["OpenSearchDb"]
