"""
Search orchestrator - main entry point.

Coordinates all components to provide a unified search interface.
"""

from typing import Any, Dict, Optional

from search_bridge.config import SearchSettings
from search_bridge.core.interfaces import IRequestCompiler, ISearchTransport
from search_bridge.core.models import CompileContext, QueryResult, SearchRequest
from search_bridge.query.translator import SearchTranslator
from search_bridge.execution.executor import SearchExecutor
from search_bridge.execution.result_formatter import ResultFormatter
from search_bridge.adapters.elasticsearch.response import ESResponseDecoder, SearchResult
from search_bridge.adapters.elasticsearch.scroll import ESScrollIterator


class SearchOrchestrator:
    """
    Main orchestrator for engine-agnostic searching.

    Coordinates request compilation, execution, reply decoding and
    scrolling.
    """

    def __init__(
        self,
        request_compiler: IRequestCompiler,
        transport: ISearchTransport,
        index: str,
        document_type: Optional[str] = None,
        decoder: Optional[ESResponseDecoder] = None,
        scroll_keep_alive: str = "1m",
        page_size: Optional[int] = None,
    ):
        """
        Initialize search orchestrator with engine adapters.

        Args:
            request_compiler: Engine-specific request compiler
            transport: Engine-specific transport
            index: Index (or alias) to search
            document_type: Document type, for engines that still have one
            decoder: Reply decoder
            scroll_keep_alive: Default keep-alive for scrolled searches
            page_size: Page size for requests that leave `limit` unset
        """
        self.translator = SearchTranslator(request_compiler)
        self.executor = SearchExecutor(
            transport,
            index=index,
            document_type=document_type,
            decoder=decoder or ESResponseDecoder(),
        )
        self.scroll_keep_alive = scroll_keep_alive
        self.page_size = page_size

    @classmethod
    def from_elasticsearch(
        cls,
        es_host: Optional[str] = None,
        index: Optional[str] = None,
        settings: Optional[SearchSettings] = None,
        client: Optional[Any] = None,
    ) -> "SearchOrchestrator":
        """
        Create orchestrator for Elasticsearch.

        Args:
            es_host: Elasticsearch host URL; overrides the settings
            index: Name of the index; overrides the settings
            settings: Connection and compilation defaults; read from the
                      environment when omitted
            client: Pre-configured Elasticsearch client

        Returns:
            Configured SearchOrchestrator for Elasticsearch

        Raises:
            ValueError: If no index is configured
        """
        from search_bridge.adapters.elasticsearch import (
            ESRequestConverter,
            ESSearchExecutor,
        )

        settings = settings or SearchSettings.from_env()
        index = index or settings.index
        if not index:
            raise ValueError("index is required (provide as parameter or set SEARCH_BRIDGE_INDEX)")

        transport = ESSearchExecutor(
            es_host=es_host or settings.es_host,
            client=client,
            request_timeout=settings.request_timeout,
            verify_certs=settings.verify_certs,
        )
        request_compiler = ESRequestConverter(default_time_zone=settings.time_zone)

        return cls(
            request_compiler=request_compiler,
            transport=transport,
            index=index,
            document_type=settings.document_type,
            scroll_keep_alive=settings.scroll_keep_alive,
            page_size=settings.page_size,
        )

    def compile(self, request: SearchRequest, context: Optional[CompileContext] = None) -> Dict[str, Any]:
        """
        Compile a request without executing it.

        Args:
            request: Engine-agnostic search request
            context: Optional compile context

        Returns:
            Engine request body
        """
        if self.page_size is not None and "limit" not in request.model_fields_set:
            request = request.model_copy(update={"limit": self.page_size})
        return self.translator.translate(request, context)

    def search(self, request: SearchRequest, context: Optional[CompileContext] = None) -> SearchResult:
        """
        Compile and execute a request.

        Args:
            request: Engine-agnostic search request
            context: Optional compile context

        Returns:
            Decoded search result
        """
        return self.executor.execute(self.compile(request, context))

    def query(self, request: SearchRequest, context: Optional[CompileContext] = None) -> QueryResult:
        """Compile, execute and format a request."""
        return ResultFormatter.format_result(self.search(request, context))

    def scroll(
        self,
        request: SearchRequest,
        keep_alive: Optional[str] = None,
        context: Optional[CompileContext] = None,
    ) -> ESScrollIterator:
        """
        Enumerate every hit of a request through a scroll cursor.

        Args:
            request: Engine-agnostic search request; `limit` is the page size
            keep_alive: Cursor keep-alive; defaults to the orchestrator's
            context: Optional compile context

        Returns:
            Lazy iterator over all matching hits
        """
        body = self.compile(request, context)
        return self.executor.scroll(body, keep_alive=keep_alive or self.scroll_keep_alive)
