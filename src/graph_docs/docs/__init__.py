"""Documentation pages and refcard sections built by ``graphdocs build``.

Each entry maps a document id to a factory so pages are constructed fresh for
every run.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph_docs.docs.aggregating import aggregating_functions
from graph_docs.docs.databases import databases
from graph_docs.docs.refcards import role_management
from graph_docs.docs.security import security_administration, security_privileges, security_writes
from graph_docs.docs.temporal import temporal_functions

if TYPE_CHECKING:
    from collections.abc import Callable

    from graph_docs.docgen import Document, RefcardSection

DOCUMENTS: dict[str, Callable[[], Document]] = {
    "query-functions-temporal": temporal_functions,
    "query-functions-aggregating": aggregating_functions,
    "administration-databases": databases,
    "administration-security-administration": security_administration,
    "administration-security-subgraph": security_privileges,
    "administration-security-writes": security_writes,
}

REFCARDS: dict[str, Callable[[], RefcardSection]] = {
    "administration-security-roles": role_management,
}

__all__ = ["DOCUMENTS", "REFCARDS"]
