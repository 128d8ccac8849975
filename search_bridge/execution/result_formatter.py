"""
Result formatting utilities.

Flattens decoded search replies into a consistent structure for the
application layer.
"""

from search_bridge.core.models import QueryResult
from search_bridge.adapters.elasticsearch.response import SearchResult


class ResultFormatter:
    """Formats decoded search results."""

    @staticmethod
    def format_result(result: SearchResult) -> QueryResult:
        """
        Format a single search result.

        Args:
            result: Decoded search reply

        Returns:
            Result with the `_source` of every hit as documents and the
            aggregation results keyed by aggregation name
        """
        metadata = {
            "took": result.took,
            "timed_out": result.timed_out,
            "shards": result.shards.model_dump(),
        }
        if result.hits.max_score is not None:
            metadata["max_score"] = result.hits.max_score
        if result.scroll_id is not None:
            metadata["scroll_id"] = result.scroll_id

        return QueryResult(
            total_hits=result.hits.total,
            documents=[hit.source for hit in result.hits.hits if hit.source is not None],
            aggregations=dict(result.aggregations),
            metadata=metadata,
        )
