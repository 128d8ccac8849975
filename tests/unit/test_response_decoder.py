from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from search_bridge.adapters.elasticsearch.response import AggregationResult, ESResponseDecoder
from search_bridge.core.models import Coordinate, Envelope, Stats
from search_bridge.errors import MalformedReply

_CORPUS_SIZE = 46


@pytest.fixture
def decoder() -> ESResponseDecoder:
    return ESResponseDecoder()


def test_decode_hits(decoder, earthquake_reply) -> None:
    result = decoder.decode(earthquake_reply)

    assert result.took == 3
    assert result.timed_out is False
    assert result.shards.successful == 1
    assert result.hits.total == _CORPUS_SIZE
    assert [hit.id for hit in result.hits.hits] == ["nc72338251", "us10000abc"]
    assert result.hits.hits[1].source["alert"] == "green"
    assert result.hits.hits[0].index == "earthquakes"
    assert result.scroll_id is None


def test_decode_accepts_text_bytes_and_response_objects(decoder, earthquake_reply, earthquake_reply_json) -> None:
    from_mapping = decoder.decode(earthquake_reply)

    assert decoder.decode(earthquake_reply_json) == from_mapping
    assert decoder.decode(earthquake_reply_json.encode("utf-8")) == from_mapping
    assert decoder.decode(SimpleNamespace(body=earthquake_reply)) == from_mapping


def test_legacy_integer_total(decoder, make_reply) -> None:
    body = make_reply([])
    body["hits"]["total"] = 46

    assert decoder.decode(body).hits.total == _CORPUS_SIZE


def test_terms_with_missing_substitute(decoder, earthquake_reply) -> None:
    alert = decoder.decode(earthquake_reply).aggregations["alert"]

    counts = {bucket.key: bucket.count for bucket in alert.buckets}
    assert counts == {"Missing-value": 43, "green": 3}
    assert sum(counts.values()) == _CORPUS_SIZE
    assert alert.sum_other_doc_count == 0


def test_range_buckets_keep_order_and_cover_corpus(decoder, earthquake_reply) -> None:
    ranges = decoder.decode(earthquake_reply).aggregations["mag_ranges"]

    assert [bucket.key for bucket in ranges.buckets] == ["4+", "0-4"]
    assert ranges.buckets[0].from_ == 4.0
    assert ranges.buckets[0].to is None
    assert ranges.buckets[1].to == 4.0
    assert sum(bucket.count for bucket in ranges.buckets) == _CORPUS_SIZE


def test_keyed_and_array_buckets_decode_identically() -> None:
    as_array = AggregationResult.model_validate(
        {"buckets": [{"key": "reviewed", "doc_count": 38}, {"key": "automatic", "doc_count": 8}]}
    )
    as_object = AggregationResult.model_validate(
        {"buckets": {"reviewed": {"doc_count": 38}, "automatic": {"doc_count": 8}}}
    )

    assert as_object.buckets == as_array.buckets


def test_keyed_range_buckets_take_member_name_as_key(decoder, make_reply) -> None:
    body = make_reply(
        [],
        aggregations={
            "mag_ranges": {
                "buckets": {
                    "4+": {"from": 4.0, "doc_count": 12},
                    "0-4": {"from": 0.0, "to": 4.0, "doc_count": 34},
                }
            }
        },
    )

    buckets = decoder.decode(json.dumps(body)).aggregations["mag_ranges"].buckets

    assert [(bucket.key, bucket.count) for bucket in buckets] == [("4+", 12), ("0-4", 34)]


def test_numeric_bucket_keys_become_text() -> None:
    result = AggregationResult.model_validate(
        {"buckets": [{"key": 1416268800000, "key_as_string": "2014-11-18", "doc_count": 4}]}
    )

    assert result.buckets[0].key == "1416268800000"
    assert result.buckets[0].key_as_string == "2014-11-18"


def test_bucket_residual_members_and_sub_aggregations() -> None:
    result = AggregationResult.model_validate(
        {
            "buckets": [
                {
                    "key": "reviewed",
                    "doc_count": 38,
                    "score": 0.5,
                    "mag_stats": {"count": 38, "min": 2.5, "max": 6.2, "avg": 3.7, "sum": 140.6},
                }
            ]
        }
    )
    bucket = result.buckets[0]

    assert bucket.other["score"] == 0.5
    sub = bucket.sub_aggregations()
    assert list(sub) == ["mag_stats"]
    assert sub["mag_stats"].stats == Stats(count=38, min=2.5, max=6.2, avg=3.7, sum=140.6)


def test_metric_values(decoder, earthquake_reply) -> None:
    aggregations = decoder.decode(earthquake_reply).aggregations

    assert aggregations["tz_count"].value == 11
    assert aggregations["tz_count"].buckets is None
    assert aggregations["mag_stats"].stats.min == 2.5
    assert aggregations["mag_stats"].stats.count == _CORPUS_SIZE
    assert aggregations["status"].stats is None


def test_native_percentiles_keep_values_member(decoder, earthquake_reply) -> None:
    percentiles = decoder.decode(earthquake_reply).aggregations["mag_percentiles"]

    assert "values" in percentiles.value
    assert percentiles.value["values"]["50.0"] == 3.2


def test_geo_values(decoder, earthquake_reply) -> None:
    aggregations = decoder.decode(earthquake_reply).aggregations

    assert aggregations["centroid"].value == Coordinate(lon=-118.5, lat=37.25)
    assert aggregations["bounds"].value == Envelope(min_x=-155.7, max_x=145.2, min_y=-21.1, max_y=61.3)


def test_empty_metric_has_no_value() -> None:
    assert AggregationResult.model_validate({}).value is None


def test_unknown_top_level_members_are_kept(decoder, make_reply) -> None:
    body = make_reply([])
    body["terminated_early"] = True

    assert decoder.decode(body).other == {"terminated_early": True}


def test_hit_residual_members(decoder, make_reply, make_hit) -> None:
    entry = make_hit("a", mag=1.0)
    entry["sort"] = [1416268800000]
    entry["fields"] = {"time": ["2014-11-18"]}

    hit = decoder.decode(make_reply([entry])).hits.hits[0]

    assert hit.other == {"sort": [1416268800000]}
    assert hit.fields == {"time": ["2014-11-18"]}


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        b"[]",
        {"hits": {"hits": []}},
        {"took": 1},
        {"took": 1, "hits": {"hits": [], "total": 0}, "aggregations": {"a": {"buckets": 3}}},
        42,
    ],
)
def test_malformed_replies(decoder, raw) -> None:
    with pytest.raises(MalformedReply, match="Malformed search reply"):
        decoder.decode(raw)


def test_stats_over_no_documents_keeps_zero_count() -> None:
    result = AggregationResult.model_validate({"count": 0, "min": None, "max": None, "avg": None, "sum": 0.0})

    assert result.stats == Stats(count=0, sum=0.0)
