from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from search_bridge.core.models import CompileContext

# Fixed anchor for relative date math: 2014-11-18T10:30:00Z.
ANCHOR = datetime(2014, 11, 18, 10, 30, tzinfo=timezone.utc)


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    target_dir = (Path(config.rootpath) / "tests" / marker).resolve()

    for item in items:
        p = Path(str(item.fspath)).resolve()
        if p == target_dir or target_dir in p.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    _mark_tests_by_directory(config, items, "unit")


def hit(doc_id: str, **source: Any) -> dict[str, Any]:
    return {"_index": "earthquakes", "_type": "_doc", "_id": doc_id, "_score": 1.0, "_source": source}


def reply(
    hits: list[dict[str, Any]],
    total: Any = None,
    scroll_id: str | None = None,
    aggregations: dict[str, Any] | None = None,
) -> dict[str, Any]:
    body: dict[str, Any] = {
        "took": 3,
        "timed_out": False,
        "_shards": {"total": 1, "successful": 1, "skipped": 0, "failed": 0},
        "hits": {
            "total": {"value": len(hits) if total is None else total, "relation": "eq"},
            "max_score": 1.0 if hits else None,
            "hits": hits,
        },
    }
    if scroll_id is not None:
        body["_scroll_id"] = scroll_id
    if aggregations is not None:
        body["aggregations"] = aggregations
    return body


@dataclass
class FakeTransport:
    """Transport serving recorded replies and recording every call."""

    initial: Any = None
    pages: list[Any] = field(default_factory=list)
    searches: list[dict[str, Any]] = field(default_factory=list)
    continuations: list[tuple[str, str]] = field(default_factory=list)

    def execute_search(
        self,
        index: str,
        document_type: str | None,
        request_body: dict[str, Any],
        scroll: str | None = None,
    ) -> Any:
        self.searches.append(
            {"index": index, "document_type": document_type, "body": request_body, "scroll": scroll}
        )
        return self.initial

    def continue_scroll(self, keep_alive: str, scroll_id: str) -> Any:
        self.continuations.append((keep_alive, scroll_id))
        if not self.pages:
            raise AssertionError("continuation requested after the last recorded page")
        return self.pages.pop(0)


@pytest.fixture
def make_hit():
    return hit


@pytest.fixture
def make_reply():
    return reply


@pytest.fixture
def fake_transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def context() -> CompileContext:
    return CompileContext(time_zone="UTC", now=ANCHOR)


@pytest.fixture
def earthquake_aggregations() -> dict[str, Any]:
    """Aggregation reply recorded against the 46-document earthquake corpus."""
    return {
        "alert": {
            "doc_count_error_upper_bound": 0,
            "sum_other_doc_count": 0,
            "buckets": [
                {"key": "Missing-value", "doc_count": 43},
                {"key": "green", "doc_count": 3},
            ],
        },
        "status": {
            "doc_count_error_upper_bound": 0,
            "sum_other_doc_count": 0,
            "buckets": [
                {"key": "reviewed", "doc_count": 38},
                {"key": "automatic", "doc_count": 8},
            ],
        },
        "mag_ranges": {
            "buckets": [
                {"key": "4+", "from": 4.0, "doc_count": 12},
                {"key": "0-4", "from": 0.0, "to": 4.0, "doc_count": 34},
            ]
        },
        "tz_count": {"value": 11},
        "mag_stats": {"count": 46, "min": 2.5, "max": 6.2, "avg": 3.68, "sum": 169.28},
        "mag_percentiles": {"values": {"50.0": 3.2, "95.0": 5.4}},
        "centroid": {"location": {"lat": 37.25, "lon": -118.5}, "count": 46},
        "bounds": {
            "bounds": {
                "top_left": {"lat": 61.3, "lon": -155.7},
                "bottom_right": {"lat": -21.1, "lon": 145.2},
            }
        },
    }


@pytest.fixture
def earthquake_reply(earthquake_aggregations) -> dict[str, Any]:
    hits = [
        hit("nc72338251", mag=2.5, place="Northern California", status="reviewed"),
        hit("us10000abc", mag=4.1, place="Alaska", status="reviewed", alert="green"),
    ]
    return reply(hits, total=46, aggregations=earthquake_aggregations)


@pytest.fixture
def earthquake_reply_json(earthquake_reply) -> str:
    return json.dumps(earthquake_reply)
