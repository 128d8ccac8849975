"""
Exceptions raised by the search bridge.

Transport failures reported by the Elasticsearch client are never wrapped:
they reach the caller unchanged.
"""

from typing import Optional


class SearchBridgeError(Exception):
    """Base exception for the project."""


class UnsupportedQueryKind(NotImplementedError, SearchBridgeError):
    """Raised when a query variant has no wire translation."""

    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported query type: {kind}")


class UnsupportedAggregationKind(NotImplementedError, SearchBridgeError):
    """Raised when an aggregation variant has no wire translation."""

    def __init__(self, key: str, kind: str):
        self.key = key
        self.kind = kind
        super().__init__(f"Unsupported aggregation type: key = {key}, op = {kind}")


class InvalidNativeAggregation(ValueError, SearchBridgeError):
    """Raised when a native aggregation body cannot be turned into a JSON object."""

    def __init__(self, key: str, reason: str):
        self.key = key
        super().__init__(f"Native aggregation '{key}' is not a JSON object: {reason}")


class InvalidInterval(ValueError, SearchBridgeError):
    """Raised when a date histogram interval is a multiple of a calendar-only unit."""

    def __init__(self, key: str, interval: str):
        self.key = key
        self.interval = interval
        super().__init__(
            f"Date histogram '{key}': interval '{interval}' is a multiple of a calendar unit; "
            "only single calendar units (1w, 1M, 1q, 1y) are supported"
        )


class InvalidDateMath(ValueError, SearchBridgeError):
    """Raised when a date-math expression cannot be parsed."""

    def __init__(self, expression: str, reason: Optional[str] = None):
        self.expression = expression
        message = f"Invalid date math expression '{expression}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnknownTimeZone(ValueError, SearchBridgeError):
    """Raised when a time zone identifier cannot be resolved."""

    def __init__(self, time_zone: str):
        self.time_zone = time_zone
        super().__init__(f"Unknown time zone: {time_zone}")


class MalformedReply(ValueError, SearchBridgeError):
    """Raised when a search reply does not match the expected shape."""

    def __init__(self, reason: str):
        super().__init__(f"Malformed search reply: {reason}")


class ScrollExhausted(StopIteration, SearchBridgeError):
    """Raised when pulling from a scroll iterator that has no more hits."""

    def __init__(self):
        super().__init__("Scroll iterator has no more hits")


class ConfigurationError(ValueError, SearchBridgeError):
    """Raised when a configuration value cannot be interpreted."""

    def __init__(self, name: str, value: str):
        super().__init__(f"Invalid value for {name}: {value!r}")
