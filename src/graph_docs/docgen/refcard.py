"""Cypher refcard sections.

A refcard section is written in a compact text format::

    ###assertion=update-one
    //

    CREATE ROLE my_role
    ###

    Create a role named `my_role`.

``//`` lines are comments and never reach the server.  Each entry's query is
executed in order and checked against its named assertion before the section
is rendered.
"""

from __future__ import annotations

import io
import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from loguru import logger
from neo4j.exceptions import Neo4jError

from graph_docs.docgen.assertions import DocumentationError
from graph_docs.graph.client import QueryTimeoutError

if TYPE_CHECKING:
    from collections.abc import Callable

    from graph_docs.graph.client import GraphClient, QueryResult

_ENTRY_PATTERN = re.compile(r"^###assertion=(?P<assertion>[\w-]+)[ \t]*\n(?P<query>.*?)^###[ \t]*$", re.M | re.S)


def _total_updates(result: QueryResult) -> int:
    return sum(result.counters.values())


ASSERTIONS: dict[str, Callable[[QueryResult], bool]] = {
    "update-one": lambda r: _total_updates(r) == 1,
    "update-two": lambda r: _total_updates(r) == 2,
    "show": lambda r: r.row_count > 0,
    "empty": lambda r: r.row_count == 0,
}


@dataclass(frozen=True)
class RefcardEntry:
    assertion: str
    query: str
    description: str


@dataclass(frozen=True)
class RefcardSection:
    """One titled refcard section with its setup queries."""

    title: str
    link_id: str
    text: str
    setup_queries: list[str] = field(default_factory=list)
    database: str | None = None

    @property
    def anchor(self) -> str:
        return self.link_id.rstrip("/").rsplit("#", 1)[-1].rsplit("/", 1)[-1]

    def entries(self) -> list[RefcardEntry]:
        return parse_refcard(self.text)


def _strip_comments(block: str) -> str:
    lines = [line for line in block.splitlines() if not line.lstrip().startswith("//")]
    return "\n".join(lines).strip()


def parse_refcard(text: str) -> list[RefcardEntry]:
    """Split refcard text into entries; unknown assertion names raise ``ValueError``."""
    entries: list[RefcardEntry] = []
    matches = list(_ENTRY_PATTERN.finditer(text))
    for i, match in enumerate(matches):
        assertion = match["assertion"]
        if assertion not in ASSERTIONS:
            msg = f"Unknown refcard assertion {assertion!r}"
            raise ValueError(msg)
        end = matches[i + 1].start() if i + 1 < len(matches) else len(text)
        description = " ".join(text[match.end() : end].split())
        query = _strip_comments(match["query"])
        entries.append(RefcardEntry(assertion=assertion, query=query, description=description))
    return entries


async def run_refcard(section: RefcardSection, graph: GraphClient) -> list[tuple[RefcardEntry, QueryResult]]:
    """Run setup and every entry of *section*, checking each entry's assertion."""
    for query in section.setup_queries:
        try:
            await graph.execute_write(query, database=section.database)
        except (Neo4jError, QueryTimeoutError) as exc:
            raise DocumentationError(section.anchor, query, f"setup failed: {exc}") from exc

    outcome: list[tuple[RefcardEntry, QueryResult]] = []
    for entry in section.entries():
        try:
            result = await graph.run(entry.query, database=section.database)
        except (Neo4jError, QueryTimeoutError) as exc:
            raise DocumentationError(section.anchor, entry.query, f"query failed: {exc}") from exc
        if not ASSERTIONS[entry.assertion](result):
            reason = f"assertion {entry.assertion!r} failed (rows={result.row_count}, updates={_total_updates(result)})"
            raise DocumentationError(section.anchor, entry.query, reason)
        outcome.append((entry, result))
    logger.info("Ran refcard {} ({} entries)", section.anchor, len(outcome))
    return outcome


def render_refcard(section: RefcardSection) -> str:
    """Render *section* as a refcard page."""
    out = io.StringIO()
    out.write(f"[[{section.anchor}]]\n== {section.title}\n\n")
    out.write(f"link:{section.link_id}[Reference]\n\n")
    for entry in section.entries():
        out.write(f"[source,cypher]\n----\n{entry.query}\n----\n\n{entry.description}\n\n")
    return out.getvalue().rstrip("\n") + "\n"
