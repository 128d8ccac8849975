"""
Elasticsearch aggregation model.

An ordered mapping from aggregation name to aggregation body. Each entry has
the shape `{<type>: {...}, "aggs": {...}}`, where `aggs` holds nested
aggregations and is only present when there are any.
"""

import copy
from enum import Enum
from typing import Any, Dict, Iterator, Optional

SUB_AGGREGATIONS_KEY = "aggs"


class EsSortType(str, Enum):
    """Bucket order key."""
    TERM = "_key"
    COUNT = "_count"


class EsSortDirection(str, Enum):
    """Bucket order direction."""
    ASC = "asc"
    DESC = "desc"


class EsAggs:
    """
    Builder for the `aggs` section of a search request.

    Entries keep the order in which they were added. Builder methods return
    the type-specific body so callers can append further fields to it.
    """

    def __init__(self):
        self._aggs: Dict[str, Dict[str, Any]] = {}

    def __len__(self) -> int:
        return len(self._aggs)

    def __contains__(self, name: object) -> bool:
        return name in self._aggs

    def __iter__(self) -> Iterator[str]:
        return iter(self._aggs)

    def __getitem__(self, name: str) -> Dict[str, Any]:
        return self._aggs[name]

    def agg(self, name: str, agg_type: str, sub_aggs: Optional["EsAggs"] = None) -> Dict[str, Any]:
        """
        Add an aggregation entry.

        Args:
            name: Aggregation name
            agg_type: Engine aggregation type (e.g. "terms")
            sub_aggs: Nested aggregations computed per bucket

        Returns:
            The (empty) type-specific body, to be filled by the caller
        """
        body: Dict[str, Any] = {}
        entry: Dict[str, Any] = {agg_type: body}
        if sub_aggs:
            entry[SUB_AGGREGATIONS_KEY] = sub_aggs.to_wire()
        self._aggs[name] = entry
        return body

    def put(self, name: str, entry: Dict[str, Any]) -> Dict[str, Any]:
        """Add a pre-built entry as-is."""
        self._aggs[name] = entry
        return entry

    def term(
        self,
        name: str,
        field: str,
        size: int,
        sort_type: EsSortType,
        sort_direction: EsSortDirection,
        missing: Any = None,
        sub_aggs: Optional["EsAggs"] = None,
    ) -> Dict[str, Any]:
        body = self.agg(name, "terms", sub_aggs)
        body["field"] = field
        body["size"] = size
        body["order"] = {sort_type.value: sort_direction.value}
        if missing is not None:
            body["missing"] = missing
        return body

    def missing(self, name: str, field: str, sub_aggs: Optional["EsAggs"] = None) -> Dict[str, Any]:
        body = self.agg(name, "missing", sub_aggs)
        body["field"] = field
        return body

    def cardinality(self, name: str, field: str, sub_aggs: Optional["EsAggs"] = None) -> Dict[str, Any]:
        body = self.agg(name, "cardinality", sub_aggs)
        body["field"] = field
        return body

    def histogram(
        self,
        name: str,
        field: str,
        interval: float,
        offset: Optional[float] = None,
        sub_aggs: Optional["EsAggs"] = None,
    ) -> Dict[str, Any]:
        body = self.agg(name, "histogram", sub_aggs)
        body["field"] = field
        body["interval"] = interval
        if offset is not None:
            body["offset"] = offset
        return body

    def date_histogram(
        self,
        name: str,
        field: str,
        interval_name: str,
        interval: str,
        format: Optional[str] = None,
        offset: Optional[str] = None,
        time_zone: Optional[str] = None,
        sub_aggs: Optional["EsAggs"] = None,
    ) -> Dict[str, Any]:
        """
        Add a date histogram.

        `interval_name` is "calendar_interval" or "fixed_interval".
        """
        body = self.agg(name, "date_histogram", sub_aggs)
        body["field"] = field
        body[interval_name] = interval
        if format is not None:
            body["format"] = format
        if offset is not None:
            body["offset"] = offset
        if time_zone is not None:
            body["time_zone"] = time_zone
        return body

    def stats(self, name: str, field: str, sub_aggs: Optional["EsAggs"] = None) -> Dict[str, Any]:
        body = self.agg(name, "stats", sub_aggs)
        body["field"] = field
        return body

    def to_wire(self) -> Dict[str, Any]:
        """Render the mapping as its JSON object."""
        return copy.deepcopy(self._aggs)


def min_doc_count(body: Dict[str, Any], value: Optional[int]) -> Dict[str, Any]:
    """Append `min_doc_count` to a compiled body when a threshold is set."""
    if value is not None:
        body["min_doc_count"] = value
    return body
