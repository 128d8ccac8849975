"""Search request translation."""

from search_bridge.query.translator import SearchTranslator

__all__ = ["SearchTranslator"]
