"""Query, write and index-administration option models.

Option names follow the snake_case Python convention but the wire-style
spellings used by collection code (``from``, ``size``, ``indicesBoost``) are
accepted as aliases, so a plain options mapping can be validated directly::

    SearchOptions.model_validate({"query": {...}, "from": 20, "indicesBoost": {"docs": 2}})
"""

from __future__ import annotations

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, model_validator

from searchdb.adapters.base.exceptions import ConfigurationError


class SearchOptions(BaseModel):
    """Options for a single search request.

    Every field is optional; only the fields that are set end up in the
    backend request.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    query: dict[str, Any] | None = Field(default=None, description="Backend query DSL body")
    filter: dict[str, Any] | None = Field(default=None, description="Backend filter body")
    sort: Any = Field(default=None, description="Sort clauses, passed through verbatim")
    offset: int | None = Field(default=None, ge=0, description="Pagination offset (preferred over 'from')")
    from_: int | None = Field(default=None, alias="from", ge=0, description="Pagination offset")
    limit: int | None = Field(default=None, ge=0, description="Page size (preferred over 'size')")
    size: int | None = Field(default=None, ge=0, description="Page size")
    index: str | None = Field(default=None, description="Logical index name or comma-separated list")
    alias: str | None = Field(default=None, description="Pre-qualified index/alias scope, not namespaced")
    type: str | None = Field(default=None, description="Document type of hits that carry no _type")
    indices_boost: dict[str, float] | None = Field(
        default=None,
        alias="indicesBoost",
        description="Per logical index score multipliers",
    )


class BatchQueryUnit(BaseModel):
    """One header/body pair of a multi-search.

    ``position`` is the correlation index tying the unit to its entry in the
    backend's ``responses`` array.
    """

    header: dict[str, Any] = Field(default_factory=dict, description="Index/type scope of the sub-query")
    body: dict[str, Any] = Field(default_factory=dict, description="Query, filter, size, ...")
    position: int | None = Field(default=None, ge=0, description="Correlation index, assigned if omitted")


class MultiSearchOptions(BaseModel):
    """Ordered sub-queries executed as one multi-search call."""

    units: list[BatchQueryUnit] = Field(description="Sub-queries in submission order", min_length=1)

    @model_validator(mode="after")
    def _assign_positions(self) -> MultiSearchOptions:
        for i, unit in enumerate(self.units):
            if unit.position is None:
                unit.position = i
        positions = [unit.position for unit in self.units]
        if len(set(positions)) != len(positions):
            raise ValueError(f"Duplicate batch positions: {positions}")
        return self

    @classmethod
    def from_wire(cls, body: list[dict[str, Any]]) -> MultiSearchOptions:
        """Build options from an alternating ``[header, body, header, body, ...]`` list.

        Raises:
            ConfigurationError: If the list is empty or has an odd length.
        """
        if not body or len(body) % 2:
            raise ConfigurationError(
                f"Multi-search body must alternate header/body entries, got {len(body or [])} entries"
            )
        units = [
            BatchQueryUnit(header=copy.deepcopy(body[i]), body=copy.deepcopy(body[i + 1]), position=i // 2)
            for i in range(0, len(body), 2)
        ]
        return cls(units=units)


class IncrementSpec(BaseModel):
    """Atomic in-place increment of one numeric attribute."""

    attribute: str = Field(min_length=1, description="Attribute (dotted path) to increment")
    amount: StrictInt | StrictFloat = Field(default=1, description="Amount to add")


class WriteOptions(BaseModel):
    """Refinements for create/update/destroy/increment."""

    model_config = ConfigDict(extra="ignore")

    wait: bool = Field(default=False, description="Refresh the index before returning")
    update: bool = Field(default=False, description="Partial (merge) update instead of full replace")
    upsert: bool = Field(default=False, description="Create the document if it does not exist")
    inc: IncrementSpec | None = Field(default=None, description="Atomic increment instead of a write")


class IndexRequest(BaseModel):
    """Arguments for index administration calls."""

    model_config = ConfigDict(extra="ignore")

    index: str = Field(min_length=1, description="Logical index name or comma-separated list")
    settings: dict[str, Any] | None = Field(default=None, description="Index settings")
    mapping: dict[str, Any] | None = Field(default=None, description="Mapping definition")
    type: str | None = Field(default=None, description="Mapping type")
