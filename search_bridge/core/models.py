"""
Portable search model shared by every engine adapter.

Queries and aggregations are closed sets of pydantic models. Adapters
dispatch on the concrete class and reject anything they do not know.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Direction(str, Enum):
    """Sort direction."""
    ASCENDING = "asc"
    DESCENDING = "desc"


class Coordinate(BaseModel):
    """A geographic point (x = longitude, y = latitude)."""

    lon: float
    lat: float


class Envelope(BaseModel):
    """A longitude/latitude bounding rectangle."""

    min_x: float
    max_x: float
    min_y: float
    max_y: float


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


class Query(BaseModel):
    """Base class of the portable query algebra."""

    @property
    def kind(self) -> str:
        return type(self).__name__


class AndQuery(Query):
    """All child queries must match."""
    of: List[Query] = Field(min_length=1)


class OrQuery(Query):
    """At least one child query should match."""
    of: List[Query] = Field(min_length=1)


class NotQuery(Query):
    """None of the child queries may match."""
    of: List[Query] = Field(min_length=1)


class MatchAllQuery(Query):
    """Matches every document."""


class TermQuery(Query):
    field: str
    value: Any


class TermsQuery(Query):
    field: str
    value: List[Any]


class MatchQuery(Query):
    """Full-text match on a single field."""
    field: str
    value: str
    operator: Optional[str] = None


class RangeQuery(Query):
    field: str
    gte: Optional[Any] = None
    gt: Optional[Any] = None
    lte: Optional[Any] = None
    lt: Optional[Any] = None


class DateRangeQuery(Query):
    """
    Range over a date field.

    Bounds given as strings are date-math expressions resolved by the engine;
    numbers and datetimes are concrete instants.
    """
    field: str
    gte: Optional[Union[datetime, int, float, str]] = None
    gt: Optional[Union[datetime, int, float, str]] = None
    lte: Optional[Union[datetime, int, float, str]] = None
    lt: Optional[Union[datetime, int, float, str]] = None
    time_zone: Optional[str] = None

    def has_date_math(self) -> bool:
        return any(isinstance(bound, str) for bound in (self.gte, self.gt, self.lte, self.lt))


class RegexQuery(Query):
    field: str
    value: str


class PrefixQuery(Query):
    field: str
    value: str


class WildcardQuery(Query):
    field: str
    value: str


class ExistsQuery(Query):
    """Field presence; `value=False` asks for documents lacking the field."""
    field: str
    value: bool = True


class BboxQuery(Query):
    field: str
    value: Envelope


class LuceneQuery(Query):
    """Free-text query in the engine's native query-string syntax."""
    query: str
    default_field: Optional[str] = None
    default_operator: str = "and"


# ---------------------------------------------------------------------------
# Aggregations
# ---------------------------------------------------------------------------


class SortType(str, Enum):
    """What bucket ordering is based on."""
    COUNT = "count"
    LEXICAL = "lexical"


class AggSort(BaseModel):
    """Bucket ordering for terms aggregations."""

    type: SortType = SortType.COUNT
    direction: Direction = Direction.DESCENDING


class Range(BaseModel):
    """A half-open interval `[from, to)` with an optional caller-chosen key."""

    model_config = ConfigDict(populate_by_name=True)

    key: Optional[str] = None
    from_: Optional[Any] = Field(default=None, alias="from")
    to: Optional[Any] = None


class Agg(BaseModel):
    """
    Base class of the portable aggregation algebra.

    Every aggregation is identified by a caller-chosen `key` and may carry
    child aggregations computed within each of its buckets.
    """

    key: str
    aggs: List["Agg"] = Field(default_factory=list)
    min_doc_count: Optional[int] = None

    @property
    def kind(self) -> str:
        return type(self).__name__


class FieldAgg(Agg):
    """Aggregation over a single field; `key` defaults to the field name."""

    field: str

    @model_validator(mode="before")
    @classmethod
    def _default_key(cls, data: Any) -> Any:
        if isinstance(data, dict) and not data.get("key") and data.get("field"):
            data = {**data, "key": data["field"]}
        return data


class TermsAgg(FieldAgg):
    size: int = 10
    sort: Optional[AggSort] = None
    missing: Optional[Any] = None


class MissingAgg(FieldAgg):
    """Single bucket of documents lacking the field."""


class CardinalityAgg(FieldAgg):
    """Approximate count of distinct values."""


class HistogramAgg(FieldAgg):
    interval: float
    offset: Optional[float] = None


class DateHistogramAgg(FieldAgg):
    """
    Date histogram.

    `interval` is a calendar unit (`day`, `1M`, ...) or a fixed duration
    (`90m`, `12h`).
    """
    interval: str
    format: Optional[str] = None
    offset: Optional[str] = None
    time_zone: Optional[str] = None


class StatsAgg(FieldAgg):
    """count/min/max/avg/sum of a numeric field."""


class RangeAgg(FieldAgg):
    ranges: List[Range] = Field(default_factory=list)


class DateRangeAgg(FieldAgg):
    ranges: List[Range] = Field(default_factory=list)
    format: Optional[str] = None
    time_zone: Optional[str] = None


class GeoHashAgg(FieldAgg):
    precision: Optional[int] = None
    size: Optional[int] = None


class GeoCentroidAgg(FieldAgg):
    pass


class GeoBoundsAgg(FieldAgg):
    pass


class GeoDistanceAgg(FieldAgg):
    origin: Coordinate
    unit: Optional[str] = None
    ranges: List[Range] = Field(default_factory=list)


class FiltersAgg(Agg):
    """One bucket per named sub-query."""
    filters: Dict[str, Query]


class NativeAgg(Agg):
    """
    Engine-native aggregation body passed through without interpretation.

    `value` may be a mapping, a JSON-encoded string or a pydantic model.
    """
    value: Any


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class DocSort(BaseModel):
    """Document ordering on a single field."""

    field: str
    direction: Direction = Direction.ASCENDING


class SearchRequest(BaseModel):
    """An engine-agnostic search request."""

    offset: int = 0
    limit: int = 50
    query: Optional[Query] = None
    aggs: List[Agg] = Field(default_factory=list)
    sorts: List[DocSort] = Field(default_factory=list)
    fields: List[str] = Field(default_factory=list)
    stored_fields: Optional[List[str]] = None
    params: Dict[str, Any] = Field(default_factory=dict)


class CompileContext(BaseModel):
    """
    Per-request values shared by the compilers.

    `now` anchors relative date-math; when absent the current instant is used.
    """

    model_config = ConfigDict(frozen=True)

    time_zone: Optional[str] = None
    now: Optional[datetime] = None

    @classmethod
    def from_params(
        cls,
        params: Dict[str, Any],
        default_time_zone: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "CompileContext":
        time_zone = params.get("timeZone") or params.get("time_zone") or default_time_zone
        return cls(time_zone=time_zone, now=now)

    def anchor(self) -> datetime:
        """Return the instant that `now` resolves to."""
        if self.now is None:
            return datetime.now(timezone.utc)
        if self.now.tzinfo is None:
            return self.now.replace(tzinfo=timezone.utc)
        return self.now


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class Stats(BaseModel):
    """Summary statistics of a numeric field."""

    count: Optional[int] = None
    min: Optional[float] = None
    max: Optional[float] = None
    avg: Optional[float] = None
    sum: Optional[float] = None


class QueryResult(BaseModel):
    """Standardized query result format."""

    total_hits: int = 0
    documents: List[Dict[str, Any]] = Field(default_factory=list)
    aggregations: Dict[str, Any] = Field(default_factory=dict)
    metadata: Dict[str, Any] = Field(default_factory=dict)
