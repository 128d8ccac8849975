"""
Search request translation coordinator.

Delegates compilation to engine-specific request compilers.
"""

import logging
from typing import Any, Dict, Optional

from search_bridge.core.interfaces import IRequestCompiler
from search_bridge.core.models import CompileContext, SearchRequest

_logger = logging.getLogger(__name__)


class SearchTranslator:
    """
    Coordinates translation from portable requests to engine requests.

    This class wraps an engine-specific request compiler and provides
    common pre/post-processing logic.
    """

    def __init__(self, compiler: IRequestCompiler):
        """
        Initialize search translator.

        Args:
            compiler: Engine-specific request compiler implementation
        """
        self.compiler = compiler

    def translate(
        self,
        request: SearchRequest,
        context: Optional[CompileContext] = None,
    ) -> Dict[str, Any]:
        """
        Translate a portable request to an engine request body.

        Compile errors abort the whole request; nothing partial is returned.

        Args:
            request: Engine-agnostic search request
            context: Optional compile context

        Returns:
            Engine request body
        """
        body = self.compiler.compile(request, context)
        _logger.debug(
            "Translated request (offset=%d, limit=%d, aggs=%d)",
            request.offset,
            request.limit,
            len(request.aggs),
        )
        return body
