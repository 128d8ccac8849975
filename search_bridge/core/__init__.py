"""Core interfaces and models for the search bridge."""

from search_bridge.core.interfaces import (
    IRequestCompiler,
    ISearchTransport,
    IResponseDecoder,
)
from search_bridge.core.models import (
    Agg,
    AggSort,
    AndQuery,
    BboxQuery,
    CardinalityAgg,
    CompileContext,
    Coordinate,
    DateHistogramAgg,
    DateRangeAgg,
    DateRangeQuery,
    Direction,
    DocSort,
    Envelope,
    ExistsQuery,
    FiltersAgg,
    GeoBoundsAgg,
    GeoCentroidAgg,
    GeoDistanceAgg,
    GeoHashAgg,
    HistogramAgg,
    LuceneQuery,
    MatchAllQuery,
    MatchQuery,
    MissingAgg,
    NativeAgg,
    NotQuery,
    OrQuery,
    PrefixQuery,
    Query,
    QueryResult,
    Range,
    RangeAgg,
    RangeQuery,
    RegexQuery,
    SearchRequest,
    SortType,
    Stats,
    StatsAgg,
    TermQuery,
    TermsAgg,
    TermsQuery,
    WildcardQuery,
)

__all__ = [
    "IRequestCompiler",
    "ISearchTransport",
    "IResponseDecoder",
    "Agg",
    "AggSort",
    "AndQuery",
    "BboxQuery",
    "CardinalityAgg",
    "CompileContext",
    "Coordinate",
    "DateHistogramAgg",
    "DateRangeAgg",
    "DateRangeQuery",
    "Direction",
    "DocSort",
    "Envelope",
    "ExistsQuery",
    "FiltersAgg",
    "GeoBoundsAgg",
    "GeoCentroidAgg",
    "GeoDistanceAgg",
    "GeoHashAgg",
    "HistogramAgg",
    "LuceneQuery",
    "MatchAllQuery",
    "MatchQuery",
    "MissingAgg",
    "NativeAgg",
    "NotQuery",
    "OrQuery",
    "PrefixQuery",
    "Query",
    "QueryResult",
    "Range",
    "RangeAgg",
    "RangeQuery",
    "RegexQuery",
    "SearchRequest",
    "SortType",
    "Stats",
    "StatsAgg",
    "TermQuery",
    "TermsAgg",
    "TermsQuery",
    "WildcardQuery",
]
