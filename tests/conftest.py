"""Shared test fixtures for graph-docs."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from graph_docs.graph.client import GraphClient, QueryResult
from graph_docs.settings import DocsSettings


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Run from an empty directory, out of reach of any graphdocs.toml."""
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def settings(isolated_env):
    """Settings from defaults and GRAPHDOCS_* variables, with no graphdocs.toml in reach."""
    return DocsSettings()


@pytest.fixture
def neo4j_settings(settings):
    return settings.neo4j


@pytest.fixture
def mock_graph():
    """AsyncMock standing in for GraphClient; ``run`` returns an empty result by default."""
    graph = AsyncMock(spec=GraphClient)
    graph.uri = "bolt://mock:7687"
    graph.run.return_value = QueryResult()
    graph.execute.return_value = []
    return graph


@pytest.fixture
async def graph_client(neo4j_settings):
    """Async GraphClient fixture: skips if Neo4j is unreachable."""
    client = GraphClient(neo4j_settings)
    try:
        await client.ping()
    except Exception:
        await client.close()
        pytest.skip("Neo4j not available")

    await client.execute_write("MATCH (n) DETACH DELETE n")

    yield client

    await client.execute_write("MATCH (n) DETACH DELETE n")
    await client.close()
