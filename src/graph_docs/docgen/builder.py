"""Builder DSL for documentation pages.

Nesting follows ``with`` blocks::

    b = DocBuilder("Aggregating functions", "query-functions-aggregating")
    b.init_queries("CREATE (:Person {name: 'A', age: 13})")
    with b.section("avg()", "functions-avg"):
        b.p("`avg()` returns the average value of a numeric expression.")
        with b.query("MATCH (n:Person) RETURN avg(n.age)", ResultAssertions(check)):
            b.result_table()
    doc = b.build()
"""

from __future__ import annotations

import textwrap
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from graph_docs.docgen.document import (
    Considerations,
    Content,
    Document,
    Function,
    GraphViz,
    Note,
    Paragraph,
    Query,
    ResultTable,
    Section,
    StatsOnlyResultTable,
    Synopsis,
)

if TYPE_CHECKING:
    from collections.abc import Iterator

    from graph_docs.docgen.assertions import Assertions


def _clean(text: str) -> str:
    return textwrap.dedent(text).strip()


class DocBuilder:
    """Accumulates a ``Document`` through nested ``with`` blocks."""

    def __init__(self, title: str, doc_id: str, *, output_path: str = "", database: str | None = None) -> None:
        self._doc = Document(title=title, id=doc_id, output_path=output_path, database=database)
        self._stack: list[Content] = [self._doc]
        self._ids: set[str] = {doc_id}

    def _add(self, node: Content) -> Content:
        self._stack[-1].children.append(node)
        return node

    @contextmanager
    def _nested(self, node: Content) -> Iterator[Content]:
        self._add(node)
        self._stack.append(node)
        try:
            yield node
        finally:
            self._stack.pop()

    # -- document-level ----------------------------------------------------

    def init_queries(self, *queries: str) -> None:
        """Queries run once before any documented query."""
        self._doc.init_queries.extend(_clean(q) for q in queries)

    def synopsis(self, text: str) -> None:
        self._add(Synopsis(_clean(text)))

    # -- content -----------------------------------------------------------

    def p(self, text: str) -> None:
        self._add(Paragraph(_clean(text)))

    @contextmanager
    def note(self) -> Iterator[Content]:
        with self._nested(Note()) as node:
            yield node

    @contextmanager
    def section(self, title: str, section_id: str | None = None, role: str | None = None) -> Iterator[Content]:
        if section_id is not None:
            if section_id in self._ids:
                msg = f"Duplicate section id {section_id!r} in document {self._doc.id!r}"
                raise ValueError(msg)
            self._ids.add(section_id)
        with self._nested(Section(title=title, id=section_id, role=role)) as node:
            yield node

    def function(self, signature: str, *arguments: tuple[str, str], returns: str | None = None) -> None:
        self._add(Function(signature=signature, returns=returns, arguments=list(arguments)))

    def considerations(self, *items: str) -> None:
        self._add(Considerations(list(items)))

    @contextmanager
    def query(
        self, text: str, assertions: Assertions | None = None, params: dict[str, Any] | None = None
    ) -> Iterator[Content]:
        with self._nested(Query(text=_clean(text), assertions=assertions, params=params or {})) as node:
            yield node

    def result_table(self) -> None:
        self._require_query("result_table")
        self._add(ResultTable())

    def stats_only_result_table(self) -> None:
        self._require_query("stats_only_result_table")
        self._add(StatsOnlyResultTable())

    def graph_viz(self) -> None:
        self._add(GraphViz())

    def _require_query(self, what: str) -> None:
        if not isinstance(self._stack[-1], Query):
            msg = f"{what}() must be called inside a query() block"
            raise ValueError(msg)

    def build(self) -> Document:
        return self._doc
