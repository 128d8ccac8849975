"""Elasticsearch adapter for the search bridge."""

from search_bridge.adapters.elasticsearch.aggregation_compiler import ESAggregationCompiler
from search_bridge.adapters.elasticsearch.executor import ESSearchExecutor
from search_bridge.adapters.elasticsearch.query_compiler import ESQueryCompiler
from search_bridge.adapters.elasticsearch.request_converter import ESRequestConverter, EsSearchRequest
from search_bridge.adapters.elasticsearch.response import (
    AggregationResult,
    Bucket,
    ESResponseDecoder,
    Hit,
    Hits,
    SearchResult,
    Shards,
)
from search_bridge.adapters.elasticsearch.scroll import ESScrollIterator
from search_bridge.adapters.elasticsearch.wire_aggs import EsAggs

__all__ = [
    "ESAggregationCompiler",
    "ESSearchExecutor",
    "ESQueryCompiler",
    "ESRequestConverter",
    "EsSearchRequest",
    "AggregationResult",
    "Bucket",
    "ESResponseDecoder",
    "Hit",
    "Hits",
    "SearchResult",
    "Shards",
    "ESScrollIterator",
    "EsAggs",
]
