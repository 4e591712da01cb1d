"""Document tree produced by ``DocBuilder`` and consumed by the runner and renderer."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

    from graph_docs.docgen.assertions import Assertions


class Content:
    """Base class of every node in a document tree."""

    children: list[Content]

    def walk(self) -> Iterator[Content]:
        """Yield this node and its descendants in document order."""
        yield self
        for child in getattr(self, "children", ()):
            yield from child.walk()


@dataclass(eq=False)
class Paragraph(Content):
    text: str


@dataclass(eq=False)
class Synopsis(Content):
    text: str


@dataclass(eq=False)
class Note(Content):
    children: list[Content] = field(default_factory=list)


@dataclass(eq=False)
class Section(Content):
    title: str
    id: str | None = None
    role: str | None = None
    children: list[Content] = field(default_factory=list)


@dataclass(eq=False)
class Function(Content):
    """Signature block of a Cypher function."""

    signature: str
    returns: str | None = None
    arguments: list[tuple[str, str]] = field(default_factory=list)


@dataclass(eq=False)
class Considerations(Content):
    items: list[str]


@dataclass(eq=False)
class Query(Content):
    """A query executed during the build; its results feed nested tables."""

    text: str
    assertions: Assertions | None = None
    params: dict[str, Any] = field(default_factory=dict)
    children: list[Content] = field(default_factory=list)


@dataclass(eq=False)
class ResultTable(Content):
    pass


@dataclass(eq=False)
class StatsOnlyResultTable(Content):
    pass


@dataclass(eq=False)
class GraphViz(Content):
    pass


@dataclass(eq=False)
class Document(Content):
    title: str
    id: str
    output_path: str = ""
    database: str | None = None
    init_queries: list[str] = field(default_factory=list)
    children: list[Content] = field(default_factory=list)

    def queries(self) -> list[Query]:
        return [node for node in self.walk() if isinstance(node, Query)]

    def section_ids(self) -> list[str]:
        return [node.id for node in self.walk() if isinstance(node, Section) and node.id]
