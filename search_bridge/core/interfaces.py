"""
Abstract interfaces for search engine adapters.

These protocols define the contract that engine adapters must implement
to work with the search bridge.
"""

from typing import Any, Dict, Optional, Protocol

from search_bridge.core.models import CompileContext, SearchRequest


class IRequestCompiler(Protocol):
    """
    Compile portable search requests to the engine's wire format.

    Implementations must be pure: the same request and context always
    produce the same wire body, and no state is shared between calls.
    """

    def compile(
        self,
        request: SearchRequest,
        context: Optional[CompileContext] = None,
    ) -> Dict[str, Any]:
        """
        Convert a portable request into a wire request body.

        Args:
            request: Engine-agnostic search request
            context: Per-request compile context; derived from
                     `request.params` when omitted

        Returns:
            JSON-serializable request body
        """
        ...


class ISearchTransport(Protocol):
    """
    Issue search requests against the engine.

    Transports define their own timeout and retry policies; failures are
    raised to the caller unchanged.
    """

    def execute_search(
        self,
        index: str,
        document_type: Optional[str],
        request_body: Dict[str, Any],
        scroll: Optional[str] = None,
    ) -> Any:
        """
        Run an initial search.

        Args:
            index: Index (or alias) to search
            document_type: Document type, for engines that still have one
            request_body: Wire request body
            scroll: Keep-alive for a scroll cursor; no cursor when omitted

        Returns:
            Raw reply (bytes, str or parsed JSON mapping)
        """
        ...

    def continue_scroll(self, keep_alive: str, scroll_id: str) -> Any:
        """
        Fetch the next page of a scroll cursor.

        Args:
            keep_alive: How long the engine should keep the cursor alive
            scroll_id: Cursor token from the previous reply

        Returns:
            Raw reply (bytes, str or parsed JSON mapping)
        """
        ...


class IResponseDecoder(Protocol):
    """Decode raw engine replies into the uniform result model."""

    def decode(self, raw: Any) -> Any:
        """
        Parse a raw search reply.

        Args:
            raw: Reply as bytes, str or an already-parsed mapping

        Returns:
            Decoded search result
        """
        ...
