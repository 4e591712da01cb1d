"""Graph package: Bolt client used by the documentation generators."""

from __future__ import annotations

from graph_docs.graph.client import COUNTER_NAMES, GraphClient, QueryResult, QueryTimeoutError

__all__ = [
    "COUNTER_NAMES",
    "GraphClient",
    "QueryResult",
    "QueryTimeoutError",
]
