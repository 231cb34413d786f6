"""Translation core — namespacing, request/query building, result normalization."""
