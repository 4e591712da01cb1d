"""Async Bolt client for graph-docs.

Handles connection lifecycle, timeouts and per-database routing.  Uses the
neo4j async driver; query results come back as plain dicts plus the update
counters of the result summary, which the documentation harness asserts on.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger
from neo4j import AsyncGraphDatabase

if TYPE_CHECKING:
    from neo4j import AsyncDriver

    from graph_docs.settings import Neo4jSettings

# Counter attributes of neo4j.SummaryCounters, in rendering order.
COUNTER_NAMES: tuple[str, ...] = (
    "nodes_created",
    "nodes_deleted",
    "relationships_created",
    "relationships_deleted",
    "properties_set",
    "labels_added",
    "labels_removed",
    "indexes_added",
    "indexes_removed",
    "constraints_added",
    "constraints_removed",
    "system_updates",
)


class QueryTimeoutError(Exception):
    """Raised when a query exceeds the configured timeout."""

    def __init__(self, timeout_s: float, query_prefix: str = "") -> None:
        self.timeout_s = timeout_s
        self.query_prefix = query_prefix
        super().__init__(f"Query timed out after {timeout_s}s: {query_prefix}")


@dataclass(frozen=True)
class QueryResult:
    """Rows and update statistics of one executed query."""

    columns: list[str] = field(default_factory=list)
    records: list[dict[str, Any]] = field(default_factory=list)
    counters: dict[str, int] = field(default_factory=dict)

    def column_as(self, name: str) -> list[Any]:
        """Return every value of column *name*, in row order."""
        return [record[name] for record in self.records]

    @property
    def row_count(self) -> int:
        return len(self.records)

    @property
    def contains_updates(self) -> bool:
        return any(self.counters.values())


def _counters_as_dict(counters: Any) -> dict[str, int]:
    return {name: int(getattr(counters, name, 0) or 0) for name in COUNTER_NAMES}


class GraphClient:
    """Async client wrapping the neo4j Bolt driver.

    Lifecycle: construct → ping → use → close.
    """

    def __init__(self, settings: Neo4jSettings) -> None:
        self._uri = settings.uri
        auth = (settings.username, settings.password) if settings.username else None
        self._driver: AsyncDriver = AsyncGraphDatabase.driver(self._uri, auth=auth)
        self._database = settings.database
        self._query_timeout_s = settings.query_timeout_s
        self._write_timeout_s = settings.write_timeout_s

    @property
    def uri(self) -> str:
        return self._uri

    async def ping(self) -> bool:
        """Health check: returns True if the server answers."""
        records = await self.execute("RETURN 1 AS n")
        return len(records) == 1 and records[0]["n"] == 1

    async def execute(
        self, query: str, params: dict[str, Any] | None = None, *, database: str | None = None
    ) -> list[dict[str, Any]]:
        """Execute a read query and return results as a list of dicts."""
        result = await self.run(query, params, database=database)
        return result.records

    async def execute_write(
        self, query: str, params: dict[str, Any] | None = None, *, database: str | None = None
    ) -> None:
        """Execute a write query.

        Consumes the result to ensure server-side errors (e.g. constraint
        violations) are raised instead of being silently dropped.
        """
        await self.run(query, params, database=database, write=True)

    async def run(
        self,
        query: str,
        params: dict[str, Any] | None = None,
        *,
        database: str | None = None,
        write: bool = False,
    ) -> QueryResult:
        """Execute *query* and return rows together with the update counters."""
        timeout_s = self._write_timeout_s if write else self._query_timeout_s
        try:
            return await asyncio.wait_for(self._run_inner(query, params, database), timeout=timeout_s)
        except TimeoutError:
            raise QueryTimeoutError(timeout_s, query[:120]) from None

    async def _run_inner(self, query: str, params: dict[str, Any] | None, database: str | None) -> QueryResult:
        """Inner run without timeout."""
        db = database or self._database
        logger.trace("Running on {}: {}", db or "<default>", query[:200])
        async with self._driver.session(database=db) as session:
            result = await session.run(query, params or {})  # type: ignore[arg-type]  # dynamic Cypher
            columns = list(await result.keys())
            records = [dict(record) async for record in result]
            summary = await result.consume()
        return QueryResult(columns=columns, records=records, counters=_counters_as_dict(summary.counters))

    async def close(self) -> None:
        """Close the underlying driver."""
        await self._driver.close()
