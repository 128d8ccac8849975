"""
Elasticsearch search request assembly.

Combines paging, the compiled query and aggregations, sorting and field
projection into one request body.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from search_bridge.core.models import CompileContext, DocSort, SearchRequest
from search_bridge.adapters.elasticsearch.aggregation_compiler import ESAggregationCompiler
from search_bridge.adapters.elasticsearch.query_compiler import ESQueryCompiler
from search_bridge.adapters.elasticsearch.wire_aggs import EsAggs
from search_bridge.adapters.elasticsearch.wire_query import EsQuery

_logger = logging.getLogger(__name__)


class EsSearchRequest(BaseModel):
    """
    Body of a `_search` request.

    `from` and `size` are always sent; every other member is omitted when
    unset or empty.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    from_: int = Field(default=0, alias="from")
    size: int = 50
    query: Optional[EsQuery] = None
    source: Optional[List[str]] = Field(default=None, alias="_source")
    aggs: Optional[EsAggs] = None
    sort: Optional[List[Dict[str, str]]] = None
    stored_fields: Optional[List[str]] = None

    def to_wire(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"from": self.from_, "size": self.size}
        if self.query is not None:
            body["query"] = self.query.to_wire()
        if self.source:
            body["_source"] = list(self.source)
        if self.aggs:
            body["aggs"] = self.aggs.to_wire()
        if self.sort:
            body["sort"] = [dict(entry) for entry in self.sort]
        if self.stored_fields:
            body["stored_fields"] = list(self.stored_fields)
        return body


class ESRequestConverter:
    """
    Converts portable search requests to Elasticsearch request bodies.

    Implements the IRequestCompiler interface for Elasticsearch.
    """

    def __init__(
        self,
        query_compiler: Optional[ESQueryCompiler] = None,
        aggregation_compiler: Optional[ESAggregationCompiler] = None,
        default_time_zone: Optional[str] = None,
    ):
        """
        Initialize request converter.

        Args:
            query_compiler: Compiler for the query tree
            aggregation_compiler: Compiler for aggregations; shares the
                                  query compiler when omitted
            default_time_zone: Time zone used when the request names none
        """
        self.query_compiler = query_compiler or ESQueryCompiler()
        self.aggregation_compiler = aggregation_compiler or ESAggregationCompiler(self.query_compiler)
        self.default_time_zone = default_time_zone

    def context_for(self, request: SearchRequest) -> CompileContext:
        return CompileContext.from_params(request.params, default_time_zone=self.default_time_zone)

    def convert(
        self,
        request: SearchRequest,
        context: Optional[CompileContext] = None,
    ) -> EsSearchRequest:
        """
        Build the wire request for a portable request.

        Args:
            request: Portable search request
            context: Compile context; derived from `request.params` when omitted

        Returns:
            Wire search request
        """
        context = context or self.context_for(request)

        query = None
        if request.query is not None:
            query = self.query_compiler.compile(request.query, context)

        aggs = None
        if request.aggs:
            aggs = self.aggregation_compiler.compile(request.aggs, context)

        return EsSearchRequest(
            from_=request.offset,
            size=request.limit,
            query=query,
            source=_convert_fields(request.fields),
            aggs=aggs,
            sort=_convert_sorts(request.sorts),
            stored_fields=request.stored_fields,
        )

    def compile(
        self,
        request: SearchRequest,
        context: Optional[CompileContext] = None,
    ) -> Dict[str, Any]:
        """Convert a request straight to its JSON body."""
        body = self.convert(request, context).to_wire()
        _logger.debug("Compiled search request: %s", body)
        return body


def _convert_fields(fields: List[str]) -> Optional[List[str]]:
    if not fields:
        return None
    return sorted(set(fields))


def _convert_sorts(sorts: List[DocSort]) -> Optional[List[Dict[str, str]]]:
    if not sorts:
        return None
    return [{sort.field: sort.direction.value} for sort in sorts]
