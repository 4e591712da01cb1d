"""Result checks attached to documented queries.

An assertion fails when its function raises ``AssertionError`` or returns
``False``; any other return value counts as a pass.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from graph_docs.graph.client import COUNTER_NAMES

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from graph_docs.graph.client import GraphClient, QueryResult


class DocumentationError(Exception):
    """A documented query failed or did not produce the documented result."""

    def __init__(self, doc_id: str, query: str, reason: str) -> None:
        self.doc_id = doc_id
        self.query = query
        self.reason = reason
        super().__init__(f"[{doc_id}] {reason}\nQuery: {query}")


@dataclass(frozen=True)
class ResultAssertions:
    """Check the rows and counters of a query result."""

    check: Callable[[QueryResult], Any]

    async def verify(self, result: QueryResult, graph: GraphClient) -> None:  # noqa: ARG002
        _expect(self.check(result))


@dataclass(frozen=True)
class ResultAndDbAssertions:
    """Check a query result against the database state; *check* may be async."""

    check: Callable[[QueryResult, GraphClient], Any | Awaitable[Any]]

    async def verify(self, result: QueryResult, graph: GraphClient) -> None:
        outcome = self.check(result, graph)
        if inspect.isawaitable(outcome):
            outcome = await outcome
        _expect(outcome)


Assertions = ResultAssertions | ResultAndDbAssertions


def _expect(outcome: Any) -> None:
    if outcome is False:
        msg = "assertion returned False"
        raise AssertionError(msg)


def assert_stats(result: QueryResult, **expected: int) -> None:
    """Assert update counters, e.g. ``assert_stats(r, system_updates=1)``.

    Counters not named are expected to be zero.
    """
    unknown = set(expected) - set(COUNTER_NAMES)
    if unknown:
        msg = f"Unknown counters: {sorted(unknown)}"
        raise ValueError(msg)
    mismatched = {
        name: (expected.get(name, 0), result.counters.get(name, 0))
        for name in COUNTER_NAMES
        if result.counters.get(name, 0) != expected.get(name, 0)
    }
    if mismatched:
        detail = ", ".join(f"{k}: expected {e}, got {a}" for k, (e, a) in mismatched.items())
        msg = f"Unexpected statistics ({detail})"
        raise AssertionError(msg)


def stats(**expected: int) -> ResultAssertions:
    """Shorthand for ``ResultAssertions`` wrapping ``assert_stats``."""
    return ResultAssertions(lambda r: assert_stats(r, **expected))


def rows_equal(expected: list[dict[str, Any]]) -> ResultAssertions:
    """Rows must equal *expected*, comparing values by their string form."""

    def _check(result: QueryResult) -> None:
        actual = [{k: str(v) for k, v in row.items()} for row in result.records]
        wanted = [{k: str(v) for k, v in row.items()} for row in expected]
        if actual != wanted:
            msg = f"expected {wanted}, got {actual}"
            raise AssertionError(msg)

    return ResultAssertions(_check)


def single_value(column: str, predicate: Callable[[Any], bool]) -> ResultAssertions:
    """The first row's *column* must satisfy *predicate*."""

    def _check(result: QueryResult) -> bool:
        return bool(result.records) and predicate(result.records[0][column])

    return ResultAssertions(_check)
