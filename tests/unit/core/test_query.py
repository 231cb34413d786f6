"""Tests for the QueryTranslator and BatchTranslator."""

from __future__ import annotations

import pytest

from searchdb.adapters.base.exceptions import ConfigurationError
from searchdb.core.namespace import Namespacer
from searchdb.core.query import BatchTranslator, QueryTranslator
from searchdb.models.query import BatchQueryUnit, MultiSearchOptions, SearchOptions

WILDCARD = {"wildcard": {"name": "*abc*"}}


@pytest.fixture
def translator(namespacer: Namespacer) -> QueryTranslator:
    return QueryTranslator(namespacer)


@pytest.fixture
def batch_translator(namespacer: Namespacer) -> BatchTranslator:
    return BatchTranslator(namespacer)


class TestQueryTranslator:
    def test_query_only(self, translator: QueryTranslator) -> None:
        request = translator.build(SearchOptions(query=WILDCARD))
        assert request.body == {"query": WILDCARD}
        assert request.index is None
        assert request.type is None

    def test_absent_options_are_omitted(self, translator: QueryTranslator) -> None:
        request = translator.build(SearchOptions())
        assert request.body == {}

    def test_offset_and_limit(self, translator: QueryTranslator) -> None:
        request = translator.build(SearchOptions(query=WILDCARD, offset=2, limit=2))
        assert request.body["from"] == 2
        assert request.body["size"] == 2

    def test_from_and_size_aliases(self, translator: QueryTranslator) -> None:
        options = SearchOptions.model_validate({"query": WILDCARD, "from": 10, "size": 5})
        request = translator.build(options)
        assert request.body["from"] == 10
        assert request.body["size"] == 5

    def test_offset_preferred_over_from(self, translator: QueryTranslator) -> None:
        options = SearchOptions.model_validate({"offset": 3, "from": 10, "limit": 1, "size": 5})
        request = translator.build(options)
        assert request.body["from"] == 3
        assert request.body["size"] == 1

    def test_zero_offset_is_sent(self, translator: QueryTranslator) -> None:
        request = translator.build(SearchOptions(offset=0))
        assert request.body == {"from": 0}

    def test_filter_and_sort_pass_through(self, translator: QueryTranslator) -> None:
        sort = [{"name": "asc"}, "_score"]
        filter_ = {"range": {"meta.score": {"gte": 30}}}
        request = translator.build(SearchOptions(query=WILDCARD, sort=sort, filter=filter_))
        assert request.body["sort"] == sort
        assert request.body["filter"] == filter_

    def test_index_list_is_namespaced(self, translator: QueryTranslator) -> None:
        request = translator.build(SearchOptions(query=WILDCARD, index="testidx,anotheridx", type="another"))
        assert request.index == "T::testidx,T::anotheridx"
        assert request.type == "another"

    def test_indices_boost_keys_namespaced(self, translator: QueryTranslator) -> None:
        options = SearchOptions.model_validate({"query": WILDCARD, "indicesBoost": {"anotheridx": 10}})
        request = translator.build(options)
        assert request.body["indices_boost"] == {"T::anotheridx": 10}

    def test_alias_used_verbatim(self, translator: QueryTranslator) -> None:
        request = translator.build(SearchOptions(query=WILDCARD, alias="shared-alias"))
        assert request.index == "shared-alias"

    def test_index_and_alias_rejected(self, translator: QueryTranslator) -> None:
        with pytest.raises(ConfigurationError, match="alias"):
            translator.build(SearchOptions(index="testidx", alias="shared-alias"))

    def test_client_kwargs(self, translator: QueryTranslator) -> None:
        request = translator.build(SearchOptions(query=WILDCARD, index="testidx", type="test"))
        assert request.to_client_kwargs() == {
            "body": {"query": WILDCARD},
            "index": "T::testidx",
        }
        assert request.type == "test"


class TestBatchTranslator:
    @pytest.fixture
    def wire_body(self) -> list[dict]:
        return [
            {"index": "anotheridx"},
            {"query": {"match_all": {}}},
            {"index": "testidx", "type": "test"},
            {"query": {"query_string": {"query": '"abc"'}}, "size": 1},
        ]

    def test_headers_namespaced_in_order(self, batch_translator: BatchTranslator, wire_body: list[dict]) -> None:
        request = batch_translator.build(MultiSearchOptions.from_wire(wire_body).units)
        assert request.body == [
            {"index": "T::anotheridx"},
            {"query": {"match_all": {}}},
            {"index": "T::testidx"},
            {"query": {"query_string": {"query": '"abc"'}}, "size": 1},
        ]
        assert request.positions == [0, 1]
        assert request.types == [None, "test"]

    def test_units_not_mutated(self, batch_translator: BatchTranslator) -> None:
        unit = BatchQueryUnit(header={"index": "testidx"}, body={"query": {"match_all": {}}}, position=0)
        request = batch_translator.build([unit])
        assert unit.header == {"index": "testidx"}
        assert request.body[1] is not unit.body

    def test_header_without_index_passes_through(self, batch_translator: BatchTranslator) -> None:
        unit = BatchQueryUnit(header={"preference": "local"}, body={"query": {"match_all": {}}})
        request = batch_translator.build([unit])
        assert request.body[0] == {"preference": "local"}
        assert request.positions == [0]

    def test_multi_index_header(self, batch_translator: BatchTranslator) -> None:
        unit = BatchQueryUnit(header={"index": "a,b"}, body={})
        assert batch_translator.build([unit]).body[0] == {"index": "T::a,T::b"}

    def test_list_index_header(self, batch_translator: BatchTranslator) -> None:
        unit = BatchQueryUnit(header={"index": ["a", "b,c"]}, body={})
        assert batch_translator.build([unit]).body[0] == {"index": ["T::a", "T::b,T::c"]}

    @pytest.mark.parametrize("index", [7, ["a", 1], {"name": "a"}])
    def test_invalid_index_header_rejected(self, batch_translator: BatchTranslator, index: object) -> None:
        with pytest.raises(ConfigurationError, match="header index"):
            batch_translator.build([BatchQueryUnit(header={"index": index}, body={})])

    def test_explicit_positions_kept(self, batch_translator: BatchTranslator) -> None:
        units = [BatchQueryUnit(body={}, position=7), BatchQueryUnit(body={}, position=3)]
        assert batch_translator.build(units).positions == [7, 3]

    def test_empty_batch_rejected(self, batch_translator: BatchTranslator) -> None:
        with pytest.raises(ConfigurationError):
            batch_translator.build([])
