from __future__ import annotations

import json

from search_bridge.adapters.elasticsearch.request_converter import ESRequestConverter, EsSearchRequest
from search_bridge.core.models import (
    AndQuery,
    CompileContext,
    DateHistogramAgg,
    DateRangeQuery,
    Direction,
    DocSort,
    SearchRequest,
    TermQuery,
    TermsAgg,
)


def test_empty_request_sends_only_paging() -> None:
    assert ESRequestConverter().compile(SearchRequest()) == {"from": 0, "size": 50}


def test_full_request_body() -> None:
    request = SearchRequest(
        offset=20,
        limit=10,
        query=AndQuery(of=[TermQuery(field="status", value="reviewed")]),
        aggs=[TermsAgg(key="net", field="net", size=3)],
        sorts=[DocSort(field="time", direction=Direction.DESCENDING), DocSort(field="mag")],
        fields=["place", "mag", "place", "alert"],
        stored_fields=["time"],
    )

    body = ESRequestConverter().compile(request)

    assert body == {
        "from": 20,
        "size": 10,
        "query": {"bool": {"must": [{"term": {"status": {"value": "reviewed"}}}]}},
        "_source": ["alert", "mag", "place"],
        "aggs": {"net": {"terms": {"field": "net", "size": 3, "order": {"_count": "desc"}}}},
        "sort": [{"time": "desc"}, {"mag": "asc"}],
        "stored_fields": ["time"],
    }
    json.dumps(body)


def test_time_zone_from_params_reaches_query_and_aggs() -> None:
    request = SearchRequest(
        query=DateRangeQuery(field="time", gte="now-7d/d"),
        aggs=[DateHistogramAgg(key="by_day", field="time", interval="day")],
        params={"timeZone": "America/Los_Angeles"},
    )

    body = ESRequestConverter(default_time_zone="UTC").compile(request)

    assert body["query"]["range"]["time"]["time_zone"] == "America/Los_Angeles"
    assert body["aggs"]["by_day"]["date_histogram"]["time_zone"] == "America/Los_Angeles"


def test_default_time_zone_applies_without_params() -> None:
    converter = ESRequestConverter(default_time_zone="Europe/Paris")

    assert converter.context_for(SearchRequest()).time_zone == "Europe/Paris"
    assert converter.context_for(SearchRequest(params={"time_zone": "UTC"})).time_zone == "UTC"


def test_explicit_context_overrides_params() -> None:
    request = SearchRequest(
        query=DateRangeQuery(field="time", gte="now-1h"),
        params={"timeZone": "America/Los_Angeles"},
    )

    body = ESRequestConverter().compile(request, CompileContext(time_zone="Asia/Tokyo"))

    assert body["query"]["range"]["time"]["time_zone"] == "Asia/Tokyo"


def test_convert_returns_wire_model() -> None:
    wire = ESRequestConverter().convert(SearchRequest(limit=5, fields=["b", "a"]))

    assert isinstance(wire, EsSearchRequest)
    assert wire.from_ == 0
    assert wire.size == 5
    assert wire.source == ["a", "b"]
    assert wire.query is None
    assert wire.aggs is None


def test_compile_is_repeatable() -> None:
    converter = ESRequestConverter()
    request = SearchRequest(query=TermQuery(field="status", value="reviewed"), aggs=[TermsAgg(field="net")])

    assert converter.compile(request) == converter.compile(request)
