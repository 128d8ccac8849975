"""
Elasticsearch transport.

Issues search and scroll requests through the official Python client.
"""

import logging
from typing import Any, Dict, Optional

from elasticsearch import Elasticsearch

_logger = logging.getLogger(__name__)


class ESSearchExecutor:
    """
    Executes Elasticsearch requests.

    Implements the ISearchTransport interface for Elasticsearch. Client
    errors (connection failures, timeouts, HTTP errors) are not caught.
    """

    def __init__(
        self,
        es_host: Optional[str] = None,
        client: Optional[Elasticsearch] = None,
        request_timeout: float = 30.0,
        verify_certs: bool = True,
    ):
        """
        Initialize Elasticsearch transport.

        Args:
            es_host: Elasticsearch host URL; ignored when `client` is given
            client: Pre-configured Elasticsearch client
            request_timeout: Request timeout in seconds
            verify_certs: Whether TLS certificates are verified

        Raises:
            ValueError: If neither `es_host` nor `client` is provided
        """
        if client is None:
            if not es_host:
                raise ValueError("es_host is required when no client is provided")
            client = Elasticsearch(
                hosts=[es_host],
                request_timeout=request_timeout,
                verify_certs=verify_certs,
            )
        self.es_host = es_host
        self.es_client = client

    def execute_search(
        self,
        index: str,
        document_type: Optional[str],
        request_body: Dict[str, Any],
        scroll: Optional[str] = None,
    ) -> Any:
        """
        Run a search request.

        `document_type` is accepted for interface parity; typeless engines
        address documents by index only.
        """
        kwargs: Dict[str, Any] = {"index": index, "body": request_body}
        if scroll:
            kwargs["scroll"] = scroll
        _logger.debug("Searching index %s (type=%s, scroll=%s)", index, document_type, scroll)
        return self.es_client.search(**kwargs)

    def continue_scroll(self, keep_alive: str, scroll_id: str) -> Any:
        """Fetch the next page of a scroll cursor."""
        return self.es_client.scroll(scroll_id=scroll_id, scroll=keep_alive)
