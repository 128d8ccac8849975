"""
Elasticsearch aggregation compiler.

Converts portable aggregations to the `aggs` section of a search request.
"""

import copy
import json
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel

from search_bridge.core.date_math import DateMathParser, to_epoch_millis
from search_bridge.core.models import (
    Agg,
    AggSort,
    CardinalityAgg,
    CompileContext,
    DateHistogramAgg,
    DateRangeAgg,
    Direction,
    FiltersAgg,
    GeoBoundsAgg,
    GeoCentroidAgg,
    GeoDistanceAgg,
    GeoHashAgg,
    HistogramAgg,
    MissingAgg,
    NativeAgg,
    Range,
    RangeAgg,
    SortType,
    StatsAgg,
    TermsAgg,
)
from search_bridge.adapters.elasticsearch.query_compiler import ESQueryCompiler
from search_bridge.adapters.elasticsearch.wire_aggs import (
    SUB_AGGREGATIONS_KEY,
    EsAggs,
    EsSortDirection,
    EsSortType,
    min_doc_count,
)
from search_bridge.adapters.elasticsearch.wire_query import compact
from search_bridge.errors import (
    InvalidInterval,
    InvalidNativeAggregation,
    UnsupportedAggregationKind,
)

# Intervals the engine treats as calendar-aware; anything else is a fixed duration.
CALENDAR_INTERVALS = {
    "minute", "1m",
    "hour", "1h",
    "day", "1d",
    "week", "1w",
    "month", "1M",
    "quarter", "1q",
    "year", "1y",
}

# Units that only exist as calendar intervals, which take no multiple.
_CALENDAR_ONLY_UNITS = {"w", "M", "q", "y"}

_INTERVAL_RE = re.compile(r"^(\d+)([a-zA-Z]+)$")


class ESAggregationCompiler:
    """
    Translates portable aggregations to Elasticsearch aggregations.

    Filters aggregations delegate their sub-queries to the query compiler.
    The compiler holds no per-request state.
    """

    def __init__(self, query_compiler: Optional[ESQueryCompiler] = None):
        """
        Initialize aggregation compiler.

        Args:
            query_compiler: Compiler used for filters sub-queries
        """
        self.query_compiler = query_compiler or ESQueryCompiler()

    def compile(self, aggs: List[Agg], context: Optional[CompileContext] = None) -> EsAggs:
        """
        Compile a list of aggregations into one named mapping.

        Args:
            aggs: Portable aggregations, in output order
            context: Per-request context (time zone and date-math anchor)

        Returns:
            Wire aggregation mapping

        Raises:
            UnsupportedAggregationKind: If an aggregation type has no wire translation
            InvalidNativeAggregation: If a native body is not a JSON object
            InvalidInterval: If a date histogram interval cannot be expressed
        """
        context = context or CompileContext()
        if context.now is None:
            # Every relative bound of the request resolves against one anchor.
            context = context.model_copy(update={"now": context.anchor()})
        result = EsAggs()
        for agg in aggs:
            self._compile_agg(result, agg, context)
        return result

    def _compile_agg(self, result: EsAggs, agg: Agg, context: CompileContext) -> None:
        sub_aggs = self.compile(agg.aggs, context) if agg.aggs else None

        if isinstance(agg, TermsAgg):
            body = result.term(
                agg.key,
                agg.field,
                agg.size,
                _sort_type(agg.sort),
                _sort_direction(agg.sort),
                agg.missing,
                sub_aggs,
            )
        elif isinstance(agg, MissingAgg):
            body = result.missing(agg.key, agg.field, sub_aggs)
        elif isinstance(agg, CardinalityAgg):
            body = result.cardinality(agg.key, agg.field, sub_aggs)
        elif isinstance(agg, HistogramAgg):
            body = result.histogram(agg.key, agg.field, agg.interval, agg.offset, sub_aggs)
        elif isinstance(agg, DateHistogramAgg):
            interval_name = _interval_name(agg)
            body = result.date_histogram(
                agg.key,
                agg.field,
                interval_name,
                agg.interval,
                agg.format,
                agg.offset,
                agg.time_zone or context.time_zone,
                sub_aggs,
            )
        elif isinstance(agg, StatsAgg):
            body = result.stats(agg.key, agg.field, sub_aggs)
        elif isinstance(agg, RangeAgg):
            body = result.agg(agg.key, "range", sub_aggs)
            body["field"] = agg.field
            body["ranges"] = [_range(r) for r in agg.ranges]
        elif isinstance(agg, DateRangeAgg):
            body = result.agg(agg.key, "date_range", sub_aggs)
            body["field"] = agg.field
            if agg.format is not None:
                body["format"] = agg.format
            body["ranges"] = self._date_ranges(agg, context)
        elif isinstance(agg, GeoHashAgg):
            body = result.agg(agg.key, "geohash_grid", sub_aggs)
            body["field"] = agg.field
            if agg.precision is not None:
                body["precision"] = agg.precision
            if agg.size is not None:
                body["size"] = agg.size
        elif isinstance(agg, GeoCentroidAgg):
            body = result.agg(agg.key, "geo_centroid", sub_aggs)
            body["field"] = agg.field
        elif isinstance(agg, GeoBoundsAgg):
            body = result.agg(agg.key, "geo_bounds", sub_aggs)
            body["field"] = agg.field
        elif isinstance(agg, GeoDistanceAgg):
            body = result.agg(agg.key, "geo_distance", sub_aggs)
            body["field"] = agg.field
            body["origin"] = {"lat": agg.origin.lat, "lon": agg.origin.lon}
            if agg.unit is not None:
                body["unit"] = agg.unit
            body["ranges"] = [_range(r) for r in agg.ranges]
        elif isinstance(agg, FiltersAgg):
            body = result.agg(agg.key, "filters", sub_aggs)
            body["filters"] = {
                label: self.query_compiler.compile(query, context).to_wire()
                for label, query in agg.filters.items()
            }
        elif isinstance(agg, NativeAgg):
            body = result.put(agg.key, _native_body(agg, sub_aggs))
        else:
            raise UnsupportedAggregationKind(agg.key, agg.kind)

        min_doc_count(body, agg.min_doc_count)

    @staticmethod
    def _date_ranges(agg: DateRangeAgg, context: CompileContext) -> List[Dict[str, Any]]:
        parser = DateMathParser(agg.time_zone or context.time_zone)
        now = context.anchor()

        def resolve(bound: Any) -> Any:
            if isinstance(bound, str):
                return parser.parse(bound, now)
            if isinstance(bound, datetime):
                return to_epoch_millis(bound)
            return bound

        return [
            compact({"key": r.key, "from": resolve(r.from_), "to": resolve(r.to)})
            for r in agg.ranges
        ]


def _interval_name(agg: DateHistogramAgg) -> str:
    if agg.interval in CALENDAR_INTERVALS:
        return "calendar_interval"
    match = _INTERVAL_RE.match(agg.interval)
    if match and match.group(2) in _CALENDAR_ONLY_UNITS:
        raise InvalidInterval(agg.key, agg.interval)
    return "fixed_interval"


def _range(r: Range) -> Dict[str, Any]:
    return compact({"key": r.key, "from": r.from_, "to": r.to})


def _sort_type(sort: Optional[AggSort]) -> EsSortType:
    if sort is not None and sort.type == SortType.LEXICAL:
        return EsSortType.TERM
    return EsSortType.COUNT


def _sort_direction(sort: Optional[AggSort]) -> EsSortDirection:
    if sort is not None and sort.direction == Direction.ASCENDING:
        return EsSortDirection.ASC
    return EsSortDirection.DESC


def _native_body(agg: NativeAgg, sub_aggs: Optional[EsAggs]) -> Dict[str, Any]:
    """Normalize a native aggregation value into a JSON object."""
    value = agg.value
    if isinstance(value, (str, bytes)):
        try:
            body = json.loads(value)
        except ValueError as exc:
            raise InvalidNativeAggregation(agg.key, str(exc)) from exc
    elif isinstance(value, BaseModel):
        body = value.model_dump(by_alias=True, exclude_none=True)
    elif isinstance(value, Mapping):
        body = copy.deepcopy(dict(value))
    else:
        raise InvalidNativeAggregation(agg.key, f"unsupported value type {type(value).__name__}")

    if not isinstance(body, dict):
        raise InvalidNativeAggregation(agg.key, f"expected an object, got {type(body).__name__}")

    if sub_aggs:
        nested = dict(body.get(SUB_AGGREGATIONS_KEY) or {})
        nested.update(sub_aggs.to_wire())
        body[SUB_AGGREGATIONS_KEY] = nested
    return body
