"""
Search execution coordinator.

Issues compiled requests through a transport and decodes the replies.
"""

import logging
from typing import Any, Dict, Optional

from search_bridge.core.interfaces import ISearchTransport
from search_bridge.adapters.elasticsearch.response import ESResponseDecoder, SearchResult
from search_bridge.adapters.elasticsearch.scroll import DEFAULT_KEEP_ALIVE, ESScrollIterator

_logger = logging.getLogger(__name__)


class SearchExecutor:
    """
    Coordinates search execution.

    Wraps an engine-specific transport. There is no retry and no partial
    result: transport and decode failures propagate to the caller.
    """

    def __init__(
        self,
        transport: ISearchTransport,
        index: str,
        document_type: Optional[str] = None,
        decoder: Optional[ESResponseDecoder] = None,
    ):
        """
        Initialize search executor.

        Args:
            transport: Engine-specific transport implementation
            index: Index (or alias) searched by this executor
            document_type: Document type, for engines that still have one
            decoder: Reply decoder
        """
        self.transport = transport
        self.index = index
        self.document_type = document_type
        self.decoder = decoder or ESResponseDecoder()

    def execute(self, request_body: Dict[str, Any], scroll: Optional[str] = None) -> SearchResult:
        """
        Run a search and decode its reply.

        Args:
            request_body: Compiled request body
            scroll: Keep-alive; when set the reply carries a scroll cursor

        Returns:
            Decoded search result
        """
        raw = self.transport.execute_search(self.index, self.document_type, request_body, scroll)
        result = self.decoder.decode(raw)
        _logger.debug(
            "Search on %s took %dms: %d hits total, %d returned",
            self.index,
            result.took,
            result.hits.total,
            len(result.hits.hits),
        )
        return result

    def scroll(self, request_body: Dict[str, Any], keep_alive: str = DEFAULT_KEEP_ALIVE) -> ESScrollIterator:
        """
        Start a scrolled search.

        Args:
            request_body: Compiled request body
            keep_alive: Keep-alive for the initial request and every continuation

        Returns:
            Iterator over every matching hit
        """
        result = self.execute(request_body, scroll=keep_alive)
        return ESScrollIterator(self.transport, result, keep_alive=keep_alive, decoder=self.decoder)
