"""End-to-end tests against a live Neo4j server (skipped when none is reachable)."""

from __future__ import annotations

import pytest

from graph_docs.docgen import DocBuilder, DocumentationError, DocumentRunner, render_document, stats
from graph_docs.docs import DOCUMENTS
from graph_docs.procedures import fetch_procedures

pytestmark = [pytest.mark.integration]


class TestGraphClient:
    async def test_ping(self, graph_client) -> None:
        assert await graph_client.ping() is True

    async def test_run_reports_counters(self, graph_client) -> None:
        result = await graph_client.run("CREATE (n:Person {name: 'A'}) RETURN n.name AS name", write=True)
        assert result.columns == ["name"]
        assert result.column_as("name") == ["A"]
        assert result.counters["nodes_created"] == 1
        assert result.counters["labels_added"] == 1
        assert result.contains_updates

    async def test_read_has_no_updates(self, graph_client) -> None:
        result = await graph_client.run("RETURN 1 AS n")
        assert result.row_count == 1
        assert not result.contains_updates


@pytest.mark.parametrize("doc_id", ["query-functions-aggregating", "query-functions-temporal"])
async def test_function_pages_build(graph_client, doc_id: str) -> None:
    document = DOCUMENTS[doc_id]()
    outcome = await DocumentRunner(graph_client, reset=True).run(document)
    assert len(outcome.results) == len(document.queries())
    text = render_document(outcome)
    assert text.startswith(f"[[{doc_id}]]\n")
    assert ".Result\n" in text


async def test_aggregating_graph_is_drawn(graph_client) -> None:
    outcome = await DocumentRunner(graph_client).run(DOCUMENTS["query-functions-aggregating"]())
    (snapshot,) = outcome.graphs.values()
    assert len(snapshot.nodes) == 5
    assert len(snapshot.relationships) == 5


async def test_wrong_example_fails_the_build(graph_client) -> None:
    b = DocBuilder("Broken", "broken")
    with b.query("CREATE (:Person)", stats(nodes_created=2)):
        b.result_table()
    with pytest.raises(DocumentationError, match="nodes_created: expected 2, got 1"):
        await DocumentRunner(graph_client).run(b.build())


async def test_syntax_error_fails_the_build(graph_client) -> None:
    b = DocBuilder("Broken", "broken")
    with b.query("MATCH (n RETURN n"):
        pass
    with pytest.raises(DocumentationError, match="query failed"):
        await DocumentRunner(graph_client).run(b.build())


async def test_procedure_listing(graph_client) -> None:
    procedures = await fetch_procedures(graph_client, "SHOW PROCEDURES YIELD name, signature, description")
    assert "db.labels" in procedures
    assert procedures["db.labels"].signature
