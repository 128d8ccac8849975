"""
Elasticsearch query DSL model.

Structural representation of the engine's nested query JSON. Optional
values left unset are never written to the wire.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from search_bridge.core.models import Envelope


def compact(values: Dict[str, Any]) -> Dict[str, Any]:
    """Drop entries whose value is None, keeping insertion order."""
    return {name: value for name, value in values.items() if value is not None}


class EsQuery(BaseModel):
    """Base class for wire queries."""

    def to_wire(self) -> Dict[str, Any]:
        """Render the query as its JSON object."""
        raise NotImplementedError(type(self).__name__)


class EsBoolQuery(EsQuery):
    """Boolean composition; empty clause lists are omitted."""

    must: List[EsQuery] = Field(default_factory=list)
    filter: List[EsQuery] = Field(default_factory=list)
    should: List[EsQuery] = Field(default_factory=list)
    must_not: List[EsQuery] = Field(default_factory=list)

    def to_wire(self) -> Dict[str, Any]:
        clauses = {
            "must": self.must,
            "filter": self.filter,
            "should": self.should,
            "must_not": self.must_not,
        }
        return {
            "bool": {
                name: [query.to_wire() for query in queries]
                for name, queries in clauses.items()
                if queries
            }
        }


class EsMatchAllQuery(EsQuery):
    def to_wire(self) -> Dict[str, Any]:
        return {"match_all": {}}


class EsRangeQuery(EsQuery):
    field: str
    gte: Optional[Any] = None
    gt: Optional[Any] = None
    lte: Optional[Any] = None
    lt: Optional[Any] = None
    boost: Optional[float] = None
    format: Optional[str] = None
    time_zone: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        return {
            "range": {
                self.field: compact(
                    {
                        "gte": self.gte,
                        "gt": self.gt,
                        "lte": self.lte,
                        "lt": self.lt,
                        "boost": self.boost,
                        "format": self.format,
                        "time_zone": self.time_zone,
                    }
                )
            }
        }


class EsTermQuery(EsQuery):
    field: str
    value: str
    boost: Optional[float] = None

    def to_wire(self) -> Dict[str, Any]:
        return {"term": {self.field: compact({"value": self.value, "boost": self.boost})}}


class EsTermsQuery(EsQuery):
    field: str
    value: List[str]
    boost: Optional[float] = None

    def to_wire(self) -> Dict[str, Any]:
        return {"terms": compact({self.field: list(self.value), "boost": self.boost})}


class EsMatchQuery(EsQuery):
    field: str
    value: str
    operator: Optional[str] = None
    boost: Optional[float] = None

    def to_wire(self) -> Dict[str, Any]:
        return {
            "match": {
                self.field: compact(
                    {"query": self.value, "boost": self.boost, "operator": self.operator}
                )
            }
        }


class EsWildcardQuery(EsQuery):
    field: str
    value: str

    def to_wire(self) -> Dict[str, Any]:
        return {"wildcard": {self.field: {"value": self.value}}}


class EsRegexpQuery(EsQuery):
    field: str
    value: str
    boost: Optional[float] = None

    def to_wire(self) -> Dict[str, Any]:
        return {"regexp": {self.field: compact({"value": self.value, "boost": self.boost})}}


class EsPrefixQuery(EsQuery):
    field: str
    value: str
    boost: Optional[float] = None

    def to_wire(self) -> Dict[str, Any]:
        return {"prefix": {self.field: compact({"value": self.value, "boost": self.boost})}}


class EsQueryStringQuery(EsQuery):
    query: str
    default_field: Optional[str] = None
    default_operator: Optional[str] = None

    def to_wire(self) -> Dict[str, Any]:
        return {
            "query_string": compact(
                {
                    "query": self.query,
                    "default_field": self.default_field,
                    "default_operator": self.default_operator,
                }
            )
        }


class EsInlineTemplateQuery(EsQuery):
    """Search template given inline, rendered engine-side with `params`."""

    template: str
    params: Dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        return {"template": {"inline": self.template, "params": dict(self.params)}}


class EsStoredTemplateQuery(EsQuery):
    """Search template stored on the engine under `id`."""

    id: str
    params: Dict[str, Any] = Field(default_factory=dict)

    def to_wire(self) -> Dict[str, Any]:
        return {"template": {"id": self.id, "params": dict(self.params)}}


class EsGeoBoundingBoxQuery(EsQuery):
    field: str
    bbox: Envelope

    def to_wire(self) -> Dict[str, Any]:
        return {
            "geo_bounding_box": {
                self.field: {
                    "top_left": {"lon": self.bbox.min_x, "lat": self.bbox.max_y},
                    "bottom_right": {"lon": self.bbox.max_x, "lat": self.bbox.min_y},
                }
            }
        }


class EsExistsQuery(EsQuery):
    field: str

    def to_wire(self) -> Dict[str, Any]:
        return {"exists": {"field": self.field}}
