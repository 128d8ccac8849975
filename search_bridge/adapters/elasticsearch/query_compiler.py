"""
Elasticsearch query compiler.

Converts portable queries to the Elasticsearch query DSL.
"""

from datetime import datetime
from typing import Any, List, Optional

from search_bridge.core.models import (
    AndQuery,
    BboxQuery,
    CompileContext,
    DateRangeQuery,
    ExistsQuery,
    LuceneQuery,
    MatchAllQuery,
    MatchQuery,
    NotQuery,
    OrQuery,
    PrefixQuery,
    Query,
    RangeQuery,
    RegexQuery,
    TermQuery,
    TermsQuery,
    WildcardQuery,
)
from search_bridge.adapters.elasticsearch.wire_query import (
    EsBoolQuery,
    EsExistsQuery,
    EsGeoBoundingBoxQuery,
    EsMatchAllQuery,
    EsMatchQuery,
    EsPrefixQuery,
    EsQuery,
    EsQueryStringQuery,
    EsRangeQuery,
    EsRegexpQuery,
    EsTermQuery,
    EsTermsQuery,
    EsWildcardQuery,
)
from search_bridge.errors import UnsupportedQueryKind


class ESQueryCompiler:
    """
    Translates portable queries to Elasticsearch DSL.

    The compiler is stateless; one instance may be shared between threads.
    """

    def compile(self, query: Query, context: Optional[CompileContext] = None) -> EsQuery:
        """
        Compile a query tree.

        Args:
            query: Portable query
            context: Per-request context (supplies the shared time zone)

        Returns:
            Wire query

        Raises:
            UnsupportedQueryKind: If the tree contains a query type with no
                                  wire translation
        """
        context = context or CompileContext()

        if isinstance(query, AndQuery):
            return EsBoolQuery(must=self._compile_all(query.of, context))
        elif isinstance(query, OrQuery):
            return EsBoolQuery(should=self._compile_all(query.of, context))
        elif isinstance(query, NotQuery):
            return EsBoolQuery(must_not=self._compile_all(query.of, context))
        elif isinstance(query, MatchAllQuery):
            return EsMatchAllQuery()
        elif isinstance(query, TermQuery):
            return EsTermQuery(field=query.field, value=_term_value(query.value))
        elif isinstance(query, TermsQuery):
            return EsTermsQuery(field=query.field, value=[_term_value(value) for value in query.value])
        elif isinstance(query, MatchQuery):
            return EsMatchQuery(field=query.field, value=query.value, operator=query.operator)
        elif isinstance(query, RegexQuery):
            return EsRegexpQuery(field=query.field, value=query.value)
        elif isinstance(query, PrefixQuery):
            return EsPrefixQuery(field=query.field, value=query.value)
        elif isinstance(query, RangeQuery):
            return EsRangeQuery(
                field=query.field, gte=query.gte, gt=query.gt, lte=query.lte, lt=query.lt
            )
        elif isinstance(query, DateRangeQuery):
            return self._date_range(query, context)
        elif isinstance(query, BboxQuery):
            return EsGeoBoundingBoxQuery(field=query.field, bbox=query.value)
        elif isinstance(query, ExistsQuery):
            if query.value:
                return EsExistsQuery(field=query.field)
            return EsBoolQuery(must_not=[EsExistsQuery(field=query.field)])
        elif isinstance(query, WildcardQuery):
            return EsWildcardQuery(field=query.field, value=query.value)
        elif isinstance(query, LuceneQuery):
            return EsQueryStringQuery(
                query=query.query,
                default_field=query.default_field,
                default_operator=query.default_operator,
            )

        raise UnsupportedQueryKind(_kind_of(query))

    def _compile_all(self, queries: List[Query], context: CompileContext) -> List[EsQuery]:
        return [self.compile(child, context) for child in queries]

    @staticmethod
    def _date_range(query: DateRangeQuery, context: CompileContext) -> EsRangeQuery:
        # Time zone only matters when the engine has date math to resolve.
        time_zone = None
        if query.has_date_math():
            time_zone = query.time_zone or context.time_zone
        return EsRangeQuery(
            field=query.field,
            gte=_date_bound(query.gte),
            gt=_date_bound(query.gt),
            lte=_date_bound(query.lte),
            lt=_date_bound(query.lt),
            time_zone=time_zone,
        )


def _term_value(value: Any) -> str:
    # Literals take their JSON spelling.
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    return str(value)


def _date_bound(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return value


def _kind_of(query: Any) -> str:
    kind = getattr(query, "kind", None)
    if isinstance(kind, str):
        return kind
    return type(query).__name__
