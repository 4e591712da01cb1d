"""Execute a documentation page against a live server.

Init queries run first, then every documented query in document order.  Each
query's assertions are checked as soon as it returns, so a failing example
stops the build with the document id and the offending query.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger
from neo4j.exceptions import Neo4jError

from graph_docs.docgen.assertions import DocumentationError
from graph_docs.docgen.document import Document, GraphViz, Query
from graph_docs.graph.client import QueryTimeoutError

if TYPE_CHECKING:
    from graph_docs.graph.client import GraphClient, QueryResult

SYSTEM_DATABASE = "system"

_NODES_QUERY = "MATCH (n) RETURN id(n) AS id, labels(n) AS labels, properties(n) AS props ORDER BY id"
_RELS_QUERY = (
    "MATCH (a)-[r]->(b) "
    "RETURN id(a) AS start, id(b) AS end, type(r) AS type, properties(r) AS props ORDER BY id(r)"
)


@dataclass(frozen=True)
class GraphSnapshot:
    """Nodes and relationships of the database at one point of the build."""

    nodes: list[dict[str, Any]] = field(default_factory=list)
    relationships: list[dict[str, Any]] = field(default_factory=list)


@dataclass
class RunOutcome:
    """Everything the renderer needs besides the document itself."""

    document: Document
    results: dict[Query, QueryResult] = field(default_factory=dict)
    graphs: dict[GraphViz, GraphSnapshot] = field(default_factory=dict)
    duration_s: float = 0.0


class DocumentRunner:
    """Run documents against one server connection."""

    def __init__(self, graph: GraphClient, *, reset: bool = False) -> None:
        self._graph = graph
        self._reset = reset

    async def run(self, document: Document) -> RunOutcome:
        t0 = time.monotonic()
        outcome = RunOutcome(document=document)
        db = document.database

        if self._reset and db != SYSTEM_DATABASE:
            await self._graph.execute_write("MATCH (n) DETACH DELETE n", database=db)

        for init_query in document.init_queries:
            await self._run_query(document, init_query, {}, write=True)

        for node in document.walk():
            if isinstance(node, Query):
                result = await self._run_query(document, node.text, node.params)
                if node.assertions is not None:
                    try:
                        await node.assertions.verify(result, self._graph)
                    except AssertionError as exc:
                        raise DocumentationError(document.id, node.text, str(exc) or "assertion failed") from exc
                outcome.results[node] = result
            elif isinstance(node, GraphViz):
                outcome.graphs[node] = await self._snapshot(document)

        outcome.duration_s = time.monotonic() - t0
        logger.info("Ran {} ({} queries) in {:.1f}s", document.id, len(outcome.results), outcome.duration_s)
        return outcome

    async def _run_query(
        self, document: Document, query: str, params: dict[str, Any], *, write: bool = False
    ) -> QueryResult:
        logger.debug("[{}] {}", document.id, query.splitlines()[0] if query else "")
        try:
            return await self._graph.run(query, params, database=document.database, write=write)
        except (Neo4jError, QueryTimeoutError) as exc:
            raise DocumentationError(document.id, query, f"query failed: {exc}") from exc

    async def _snapshot(self, document: Document) -> GraphSnapshot:
        nodes = await self._graph.execute(_NODES_QUERY, database=document.database)
        rels = await self._graph.execute(_RELS_QUERY, database=document.database)
        return GraphSnapshot(nodes=nodes, relationships=rels)
