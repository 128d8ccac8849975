"""
Lazy iteration over a scroll cursor.
"""

import logging
from collections import deque
from typing import Deque, Optional

from search_bridge.core.interfaces import ISearchTransport
from search_bridge.adapters.elasticsearch.response import ESResponseDecoder, Hit, SearchResult
from search_bridge.errors import ScrollExhausted

_logger = logging.getLogger(__name__)

DEFAULT_KEEP_ALIVE = "1m"


class ESScrollIterator:
    """
    Forward-only iterator over every hit of a scrolled search.

    Hits of the initial reply are served first; further pages are fetched
    one continuation request at a time, only when the local queue runs dry.
    The first empty page ends the iteration and drops the cursor. A failed
    continuation is not retried: the transport error propagates.

    Instances keep per-session state and must not be shared between
    concurrent consumers.
    """

    def __init__(
        self,
        transport: ISearchTransport,
        result: SearchResult,
        keep_alive: str = DEFAULT_KEEP_ALIVE,
        decoder: Optional[ESResponseDecoder] = None,
    ):
        """
        Initialize scroll iterator.

        Args:
            transport: Transport used for continuation requests
            result: Reply of the initial search (requested with a scroll keep-alive)
            keep_alive: Keep-alive sent with every continuation request
            decoder: Decoder for continuation replies
        """
        self.transport = transport
        self.keep_alive = keep_alive
        self.decoder = decoder or ESResponseDecoder()
        self._queue: Deque[Hit] = deque(result.hits.hits)
        self._scroll_id: Optional[str] = result.scroll_id

    @property
    def scroll_id(self) -> Optional[str]:
        """Cursor token currently held; None once the scroll is exhausted."""
        return self._scroll_id

    def has_next(self) -> bool:
        """
        Tell whether another hit is available, fetching a page if needed.

        Calling this repeatedly while hits are queued issues no requests.
        """
        if self._queue:
            return True

        scroll_id = self._scroll_id
        if scroll_id is not None:
            _logger.debug("Fetching next scroll page (keep_alive=%s)", self.keep_alive)
            result = self.decoder.decode(self.transport.continue_scroll(self.keep_alive, scroll_id))
            self._queue = deque(result.hits.hits)
            if self._queue:
                self._scroll_id = result.scroll_id
            else:
                _logger.info("Scroll exhausted")
                self._scroll_id = None
        return bool(self._queue)

    def next_hit(self) -> Hit:
        """
        Return the next hit.

        Raises:
            ScrollExhausted: If no hit is available
        """
        if not self.has_next():
            raise ScrollExhausted()
        return self._queue.popleft()

    def __iter__(self) -> "ESScrollIterator":
        return self

    def __next__(self) -> Hit:
        return self.next_hit()
