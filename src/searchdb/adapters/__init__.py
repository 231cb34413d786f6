"""Store adapter layer — Document stores over search backends.

Built-in stores:
  - opensearch: OpenSearch v2+ and API-compatible Elasticsearch clusters

Implement ``DocumentStore`` to put another backend behind the same interface.
"""
