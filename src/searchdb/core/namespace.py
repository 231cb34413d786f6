"""Namespacer — Maps tenant-relative index names to physical index names.

Several applications can share one cluster by giving each a namespace::

    logical "docs"  →  physical "tenant-a::docs"

Namespacing is applied exactly once, on the way out.  Index names the backend
reports back (``_index`` on hits) are already physical and are left alone.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TypeVar

from searchdb.adapters.base.exceptions import ConfigurationError
from searchdb.config.settings import NamespaceSettings

V = TypeVar("V")


class Namespacer:
    """Prefixes index names with ``<namespace><separator>``.

    Args:
        namespace: Tenant/application namespace. May be empty, in which case
            physical names still start with the separator.
        separator: Token placed between namespace and logical name.
    """

    def __init__(self, namespace: str = "", separator: str = "::") -> None:
        if not separator:
            raise ConfigurationError("Namespace separator must not be empty")
        self.namespace = namespace
        self.separator = separator

    @classmethod
    def from_settings(cls, settings: NamespaceSettings) -> Namespacer:
        return cls(settings.name, settings.separator)

    @property
    def prefix(self) -> str:
        return f"{self.namespace}{self.separator}"

    def namespace_name(self, logical: str) -> str:
        """Return the physical name for one logical index name."""
        logical = logical.strip()
        if not logical:
            raise ConfigurationError("Index name must not be empty")
        return self.prefix + logical

    def namespace_list(self, logical: str) -> str:
        """Namespace a comma-separated list of logical index names.

        ``"a,b"`` becomes ``"T::a,T::b"`` for namespace ``T``.
        """
        return ",".join(self.namespace_name(name) for name in logical.split(","))

    def namespace_keys(self, mapping: Mapping[str, V]) -> dict[str, V]:
        """Rename the keys of a per-index mapping, keeping its values."""
        return {self.namespace_name(key): value for key, value in mapping.items()}

    def is_namespaced(self, name: str) -> bool:
        return name.startswith(self.prefix)

    def strip(self, physical: str) -> str:
        """Return the logical name of a physical index name of this namespace."""
        if not self.is_namespaced(physical):
            raise ConfigurationError(f"Index '{physical}' does not belong to namespace '{self.namespace}'")
        return physical[len(self.prefix) :]

    def __repr__(self) -> str:
        return f"Namespacer(namespace={self.namespace!r}, separator={self.separator!r})"
