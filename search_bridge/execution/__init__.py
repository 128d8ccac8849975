"""Search execution and result formatting."""

from search_bridge.execution.executor import SearchExecutor
from search_bridge.execution.result_formatter import ResultFormatter

__all__ = ["SearchExecutor", "ResultFormatter"]
