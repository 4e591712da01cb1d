"""Tests for the document runner, using a mocked graph client."""

from __future__ import annotations

from unittest.mock import call

import pytest
from neo4j.exceptions import ClientError

from graph_docs.docgen import DocBuilder, DocumentationError, DocumentRunner, stats
from graph_docs.docgen.document import GraphViz
from graph_docs.graph.client import QueryResult, QueryTimeoutError


def _doc(database: str | None = None):
    b = DocBuilder("T", "doc", database=database)
    b.init_queries("CREATE (:Person {name: 'A'})")
    with b.query("MATCH (n:Person) RETURN n.name AS name"):
        b.result_table()
    with b.section("S", "s"), b.query("MATCH (n) SET n.seen = true", stats(properties_set=1)):
        b.stats_only_result_table()
    return b.build()


async def test_runs_init_then_queries_in_order(mock_graph) -> None:
    first = QueryResult(columns=["name"], records=[{"name": "A"}])
    second = QueryResult(counters={"properties_set": 1})
    mock_graph.run.side_effect = [QueryResult(counters={"nodes_created": 1}), first, second]
    doc = _doc()

    outcome = await DocumentRunner(mock_graph).run(doc)

    assert mock_graph.run.await_args_list == [
        call("CREATE (:Person {name: 'A'})", {}, database=None, write=True),
        call("MATCH (n:Person) RETURN n.name AS name", {}, database=None, write=False),
        call("MATCH (n) SET n.seen = true", {}, database=None, write=False),
    ]
    assert list(outcome.results.values()) == [first, second]
    assert list(outcome.results) == doc.queries()
    assert outcome.duration_s >= 0
    mock_graph.execute_write.assert_not_awaited()


async def test_params_and_database_are_passed(mock_graph) -> None:
    b = DocBuilder("T", "doc", database="system")
    with b.query("SHOW DATABASE $name", params={"name": "neo4j"}):
        pass
    await DocumentRunner(mock_graph).run(b.build())
    mock_graph.run.assert_awaited_once_with("SHOW DATABASE $name", {"name": "neo4j"}, database="system", write=False)


async def test_failed_assertion_names_document_and_query(mock_graph) -> None:
    mock_graph.run.return_value = QueryResult(counters={"properties_set": 2})
    with pytest.raises(DocumentationError) as exc_info:
        await DocumentRunner(mock_graph).run(_doc())
    assert exc_info.value.doc_id == "doc"
    assert exc_info.value.query == "MATCH (n) SET n.seen = true"
    assert "properties_set: expected 1, got 2" in exc_info.value.reason


@pytest.mark.parametrize("error", [ClientError("Invalid input"), QueryTimeoutError(30.0, "MATCH")])
async def test_query_errors_become_documentation_errors(mock_graph, error) -> None:
    mock_graph.run.side_effect = error
    with pytest.raises(DocumentationError, match="query failed") as exc_info:
        await DocumentRunner(mock_graph).run(_doc())
    assert exc_info.value.query == "CREATE (:Person {name: 'A'})"
    assert exc_info.value.__cause__ is error


async def test_reset_deletes_graph_first(mock_graph) -> None:
    mock_graph.run.side_effect = [QueryResult(), QueryResult(), QueryResult(counters={"properties_set": 1})]
    await DocumentRunner(mock_graph, reset=True).run(_doc(database="neo4j"))
    mock_graph.execute_write.assert_awaited_once_with("MATCH (n) DETACH DELETE n", database="neo4j")


async def test_reset_skips_system_database(mock_graph) -> None:
    b = DocBuilder("T", "doc", database="system")
    with b.query("SHOW ROLES"):
        pass
    await DocumentRunner(mock_graph, reset=True).run(b.build())
    mock_graph.execute_write.assert_not_awaited()


async def test_graph_viz_snapshots_database(mock_graph) -> None:
    nodes = [{"id": 0, "labels": ["Person"], "props": {"name": "A"}}]
    rels = [{"start": 0, "end": 0, "type": "KNOWS", "props": {}}]
    mock_graph.execute.side_effect = [nodes, rels]
    b = DocBuilder("T", "doc")
    b.init_queries("CREATE (a:Person {name: 'A'})-[:KNOWS]->(a)")
    b.graph_viz()
    doc = b.build()

    outcome = await DocumentRunner(mock_graph).run(doc)

    (viz,) = [node for node in doc.walk() if isinstance(node, GraphViz)]
    assert outcome.graphs[viz].nodes == nodes
    assert outcome.graphs[viz].relationships == rels
    assert mock_graph.execute.await_count == 2
