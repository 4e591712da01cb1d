"""AsciiDoc rendering of executed documentation pages."""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from graph_docs.docgen.document import (
    Considerations,
    Content,
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
from graph_docs.docgen.serializer import serialize
from graph_docs.graph.client import COUNTER_NAMES

if TYPE_CHECKING:
    from typing import Any

    from graph_docs.docgen.runner import GraphSnapshot, RunOutcome
    from graph_docs.graph.client import QueryResult


def _cell(text: str) -> str:
    return text.replace("|", "\\|")


def _counter_label(name: str) -> str:
    return name.replace("_", " ").capitalize()


def stats_lines(result: QueryResult) -> list[str]:
    """Non-zero update counters, e.g. ``["Nodes created: 2"]``."""
    return [f"{_counter_label(name)}: {result.counters[name]}" for name in COUNTER_NAMES if result.counters.get(name)]


def _viz_value(value: Any) -> str:
    if isinstance(value, str):
        return "\\'" + value.replace('"', '\\"') + "\\'"
    return serialize(value).replace('"', '\\"')


class AsciiDocRenderer:
    """Render a ``RunOutcome`` to AsciiDoc."""

    def __init__(self, outcome: RunOutcome) -> None:
        self._outcome = outcome
        self._out = io.StringIO()
        self._current_query: Query | None = None
        self._graph_count = 0

    def render(self) -> str:
        doc = self._outcome.document
        self._out = io.StringIO()
        self._graph_count = 0
        self._out.write(f"[[{doc.id}]]\n= {doc.title}\n\n")
        self._render_children(doc.children, depth=1)
        return self._out.getvalue().rstrip("\n") + "\n"

    def _render_children(self, children: list[Content], depth: int) -> None:
        for child in children:
            self._render(child, depth)

    def _render(self, node: Content, depth: int) -> None:  # noqa: C901
        out = self._out
        if isinstance(node, Synopsis):
            out.write(f"[abstract]\n--\n{node.text}\n--\n\n")
        elif isinstance(node, Paragraph):
            out.write(f"{node.text}\n\n")
        elif isinstance(node, Note):
            out.write(f"[NOTE]\n====\n{self._render_nested(node.children, depth)}\n====\n\n")
        elif isinstance(node, Section):
            if node.role:
                out.write(f"[role={node.role}]\n")
            if node.id:
                out.write(f"[[{node.id}]]\n")
            out.write(f"{'=' * (depth + 1)} {node.title}\n\n")
            self._render_children(node.children, depth + 1)
        elif isinstance(node, Function):
            self._render_function(node)
        elif isinstance(node, Considerations):
            out.write("*Considerations:*\n\n|===\n")
            for item in node.items:
                out.write(f"| {_cell(item)}\n")
            out.write("|===\n\n")
        elif isinstance(node, Query):
            out.write(f".Query\n[source, cypher, indent=0]\n----\n{node.text}\n----\n\n")
            previous, self._current_query = self._current_query, node
            self._render_children(node.children, depth)
            self._current_query = previous
        elif isinstance(node, ResultTable):
            self._render_result(self._result(), stats_only=False)
        elif isinstance(node, StatsOnlyResultTable):
            self._render_result(self._result(), stats_only=True)
        elif isinstance(node, GraphViz):
            self._render_graph(self._outcome.graphs[node])
        else:
            msg = f"Cannot render {type(node).__name__}"
            raise TypeError(msg)

    def _render_nested(self, children: list[Content], depth: int) -> str:
        outer, self._out = self._out, io.StringIO()
        try:
            self._render_children(children, depth)
            return self._out.getvalue().rstrip("\n")
        finally:
            self._out = outer

    def _result(self) -> QueryResult:
        if self._current_query is None or self._current_query not in self._outcome.results:
            msg = "Result table outside an executed query"
            raise ValueError(msg)
        return self._outcome.results[self._current_query]

    def _render_function(self, node: Function) -> None:
        out = self._out
        out.write(f"*Syntax:* `{node.signature}`\n\n")
        if node.returns:
            out.write(f"*Returns:*\n\n|===\n\n| {_cell(node.returns)}\n\n|===\n\n")
        if node.arguments:
            out.write('*Arguments:*\n[options="header"]\n|===\n| Name | Description\n')
            for name, description in node.arguments:
                if description:
                    out.write(f"| `{name}` | {_cell(description)}\n")
                else:
                    out.write(f"2+| {_cell(name)}\n")
            out.write("|===\n\n")

    def _render_result(self, result: QueryResult, *, stats_only: bool) -> None:
        out = self._out
        width = max(len(result.columns), 1)
        footer = [f"Rows: {result.row_count}", *stats_lines(result)]
        if stats_only:
            out.write('.Result\n[role="statsonly"]\n|===\n')
            out.write(f"{width}+|(empty result)\n")
        else:
            options = "header,footer" if result.columns else "footer"
            out.write(f'.Result\n[role="queryresult",options="{options}",cols="{width}*<m"]\n|===\n')
            if result.columns:
                out.write("| " + " | ".join(f"+{_cell(c)}+" for c in result.columns) + "\n")
            if not result.records:
                out.write(f"{width}+|(empty result)\n")
            for record in result.records:
                out.write("| " + " | ".join(f"+{_cell(serialize(record.get(c)))}+" for c in result.columns) + "\n")
        out.write(f"{width}+d|" + " +\n".join(footer) + "\n|===\n\n")

    def _render_graph(self, snapshot: GraphSnapshot) -> None:
        self._graph_count += 1
        doc_id = self._outcome.document.id
        out = self._out
        out.write(f'.Graph\n["dot", "{doc_id}-graph-{self._graph_count}.svg", "neoviz"]\n----\n')
        for node in snapshot.nodes:
            labels = ":".join(node.get("labels") or [])
            props = "".join(f"{k} = {_viz_value(v)}\\l" for k, v in sorted((node.get("props") or {}).items()))
            out.write(f'  N{node["id"]} [label = "{{{labels}|{props}}}"]\n')
        for rel in snapshot.relationships:
            props = "".join(f"{k} = {_viz_value(v)}\\l" for k, v in sorted((rel.get("props") or {}).items()))
            out.write(f'  N{rel["start"]} -> N{rel["end"]} [label = "{rel["type"]}\\n{props}"]\n')
        out.write("----\n\n")


def render_document(outcome: RunOutcome) -> str:
    """Render *outcome* to AsciiDoc text."""
    return AsciiDocRenderer(outcome).render()
