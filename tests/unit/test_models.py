from __future__ import annotations

from datetime import datetime, timezone

from search_bridge.core.models import (
    CompileContext,
    DateRangeQuery,
    FiltersAgg,
    MissingAgg,
    NativeAgg,
    SearchRequest,
    TermQuery,
)


def test_context_reads_time_zone_from_params() -> None:
    assert CompileContext.from_params({"timeZone": "Asia/Tokyo"}).time_zone == "Asia/Tokyo"
    assert CompileContext.from_params({"time_zone": "+02:00"}).time_zone == "+02:00"
    assert CompileContext.from_params({}, default_time_zone="UTC").time_zone == "UTC"
    assert CompileContext.from_params({}).time_zone is None


def test_context_anchor() -> None:
    naive = datetime(2014, 11, 18, 10, 30)

    assert CompileContext(now=naive).anchor() == naive.replace(tzinfo=timezone.utc)
    assert CompileContext().anchor().tzinfo is not None


def test_date_range_detects_date_math() -> None:
    assert DateRangeQuery(field="time", gte="now-1d").has_date_math()
    assert not DateRangeQuery(field="time", gte=1416268800000, lt=datetime(2014, 11, 19)).has_date_math()


def test_kind_names_the_variant() -> None:
    assert TermQuery(field="a", value="b").kind == "TermQuery"
    assert MissingAgg(field="alert").kind == "MissingAgg"


def test_non_field_aggregations_need_explicit_keys() -> None:
    agg = FiltersAgg(key="f", filters={"a": TermQuery(field="a", value="b")})

    assert agg.key == "f"
    assert NativeAgg(key="n", value={}).aggs == []


def test_request_defaults() -> None:
    request = SearchRequest()

    assert (request.offset, request.limit) == (0, 50)
    assert request.query is None
    assert request.aggs == request.sorts == request.fields == []
    assert request.stored_fields is None
