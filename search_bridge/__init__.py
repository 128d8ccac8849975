"""
Search Bridge - engine-agnostic search and aggregation requests.

Main entry point for compiling portable searches to a search engine's
query DSL, running them and decoding the replies.
"""

from search_bridge.orchestrator import SearchOrchestrator

__all__ = ["SearchOrchestrator"]
