"""Docgen package: builder, runner and renderer for query-driven documentation."""

from __future__ import annotations

from graph_docs.docgen.assertions import (
    DocumentationError,
    ResultAndDbAssertions,
    ResultAssertions,
    assert_stats,
    rows_equal,
    single_value,
    stats,
)
from graph_docs.docgen.builder import DocBuilder
from graph_docs.docgen.document import Document
from graph_docs.docgen.refcard import RefcardEntry, RefcardSection, parse_refcard, render_refcard, run_refcard
from graph_docs.docgen.render import AsciiDocRenderer, render_document
from graph_docs.docgen.runner import DocumentRunner, GraphSnapshot, RunOutcome
from graph_docs.docgen.serializer import serialize

__all__ = [
    "AsciiDocRenderer",
    "DocBuilder",
    "Document",
    "DocumentRunner",
    "DocumentationError",
    "GraphSnapshot",
    "RefcardEntry",
    "RefcardSection",
    "ResultAndDbAssertions",
    "ResultAssertions",
    "RunOutcome",
    "assert_stats",
    "parse_refcard",
    "render_document",
    "render_refcard",
    "rows_equal",
    "run_refcard",
    "serialize",
    "single_value",
    "stats",
]
