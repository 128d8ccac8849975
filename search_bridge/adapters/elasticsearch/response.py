"""
Elasticsearch search reply decoding.

Parses `_search` and `_search/scroll` replies into typed results. Members
the models do not name are kept (see `other`) so engine-specific outputs
stay reachable without the decoder knowing every aggregation type.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from search_bridge.core.models import Coordinate, Envelope, Stats
from search_bridge.errors import MalformedReply

_STATS_MEMBERS = {"min", "max", "avg", "sum"}


class Shards(BaseModel):
    model_config = ConfigDict(extra="allow")

    total: int = 0
    successful: int = 0
    failed: int = 0


class Hit(BaseModel):
    """A single matching document."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    index: Optional[str] = Field(default=None, alias="_index")
    type: Optional[str] = Field(default=None, alias="_type")
    id: Optional[str] = Field(default=None, alias="_id")
    score: Optional[float] = Field(default=None, alias="_score")
    source: Optional[Dict[str, Any]] = Field(default=None, alias="_source")
    fields: Optional[Dict[str, List[Any]]] = None

    @property
    def other(self) -> Dict[str, Any]:
        """Members not modelled above (e.g. `sort`, `highlight`)."""
        return dict(self.model_extra or {})


class Hits(BaseModel):
    total: int = 0
    max_score: Optional[float] = None
    hits: List[Hit] = Field(default_factory=list)

    @field_validator("total", mode="before")
    @classmethod
    def _total_value(cls, value: Any) -> Any:
        # Newer engines report {"value": n, "relation": "eq"}.
        if isinstance(value, Mapping):
            return value.get("value", 0)
        return value


class Bucket(BaseModel):
    """
    One partition of an aggregation result.

    Nested aggregation results are kept in `other`, keyed by aggregation name;
    `sub_aggregations()` decodes them.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    key: Optional[str] = None
    key_as_string: Optional[str] = None
    doc_count: int = 0
    from_: Optional[Any] = Field(default=None, alias="from")
    to: Optional[Any] = None

    @field_validator("key", mode="before")
    @classmethod
    def _key_as_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def count(self) -> int:
        return self.doc_count

    @property
    def other(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

    def sub_aggregations(self) -> Dict[str, "AggregationResult"]:
        """Decode nested aggregation results carried by this bucket."""
        return {
            name: AggregationResult.model_validate(value)
            for name, value in self.other.items()
            if isinstance(value, Mapping)
        }


class AggregationResult(BaseModel):
    """
    Result of one aggregation.

    Bucketing aggregations fill `buckets`; metric aggregations fill the
    scalar fields or, for types not modelled here, `other`.
    """

    model_config = ConfigDict(extra="allow")

    buckets: Optional[List[Bucket]] = None
    doc_count: Optional[int] = None
    doc_count_error_upper_bound: Optional[int] = None
    sum_other_doc_count: Optional[int] = None
    count: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None
    avg: Optional[float] = None
    sum: Optional[float] = None

    @field_validator("buckets", mode="before")
    @classmethod
    def _normalize_buckets(cls, value: Any) -> Any:
        """
        Accept both bucket container shapes.

        Keyed aggregations (filters, keyed ranges) return an object whose
        member names are the bucket keys; they become the `key` of each
        bucket, in reply order.
        """
        if value is None or isinstance(value, list):
            return value
        if isinstance(value, Mapping):
            return [
                {**bucket, "key": name} if isinstance(bucket, Mapping) else bucket
                for name, bucket in value.items()
            ]
        raise ValueError(f"buckets must be an array or an object, got {type(value).__name__}")

    @property
    def other(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

    @property
    def stats(self) -> Optional[Stats]:
        """
        Summary statistics, when this is a stats-like result.

        A stats reply over no documents carries `count: 0` and null metrics;
        it still yields `Stats`.
        """
        if not _STATS_MEMBERS & self.model_fields_set:
            return None
        return Stats(count=self.count, min=self.min, max=self.max, avg=self.avg, sum=self.sum)

    @property
    def value(self) -> Any:
        """
        Render the result of a metric aggregation.

        Returns:
            `Envelope` for geo bounds, `Coordinate` for geo centroids, the
            scalar for single-value metrics, otherwise the unmodelled members
            (e.g. the `values` map of percentiles), or None when there are none
        """
        other = self.other
        bounds = other.get("bounds")
        if isinstance(bounds, Mapping):
            top_left = bounds.get("top_left") or {}
            bottom_right = bounds.get("bottom_right") or {}
            return Envelope(
                min_x=top_left.get("lon"),
                max_x=bottom_right.get("lon"),
                min_y=bottom_right.get("lat"),
                max_y=top_left.get("lat"),
            )
        location = other.get("location")
        if isinstance(location, Mapping):
            return Coordinate(lon=location.get("lon"), lat=location.get("lat"))
        if "value" in other:
            return other["value"]
        return other or None


class SearchResult(BaseModel):
    """A decoded `_search` or `_search/scroll` reply."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    took: int
    timed_out: bool = False
    shards: Shards = Field(default_factory=Shards, alias="_shards")
    scroll_id: Optional[str] = Field(default=None, alias="_scroll_id")
    hits: Hits
    aggregations: Dict[str, AggregationResult] = Field(default_factory=dict)

    @property
    def other(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class ESResponseDecoder:
    """
    Decodes Elasticsearch replies.

    Implements the IResponseDecoder interface for Elasticsearch.
    """

    def decode(self, raw: Any) -> SearchResult:
        """
        Parse a search reply.

        Args:
            raw: Reply body as bytes or str, a parsed JSON mapping, or a client
                 response object exposing the parsed body as `.body`

        Returns:
            Decoded search result

        Raises:
            MalformedReply: If the reply is not JSON or does not have the
                            shape of a search reply
        """
        try:
            if isinstance(raw, (bytes, bytearray, str)):
                return SearchResult.model_validate_json(raw)
            body = getattr(raw, "body", raw)
            if isinstance(body, Mapping):
                return SearchResult.model_validate(dict(body))
        except ValidationError as exc:
            raise MalformedReply(str(exc)) from exc
        raise MalformedReply(f"unsupported reply type {type(raw).__name__}")
