"""Stored-procedure reference generator.

Merges the procedure listings of a community and an enterprise server into a
single AsciiDoc table.  Procedures only the enterprise edition ships are
tagged with the ``enterprise`` role so the docs build can style them.
"""

from __future__ import annotations

import io
import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

    from graph_docs.graph.client import GraphClient

ENTERPRISE_FEATURE_ROLE_TEMPLATE = "[enterprise-feature]#{}#"
NOT_APPLICABLE = "N/A"


class ProcedureListingError(Exception):
    """A procedure listing could not be read."""


@dataclass(frozen=True)
class Procedure:
    """One row of a procedure listing."""

    name: str
    signature: str
    description: str
    roles: tuple[str, ...] | None = None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Procedure:
        roles = row.get("roles")
        return cls(
            name=row["name"],
            signature=row.get("signature") or "",
            description=row.get("description") or "",
            roles=tuple(roles) if roles is not None else None,
        )


def procedures_by_name(rows: Iterable[Mapping[str, Any]]) -> dict[str, Procedure]:
    procedures: dict[str, Procedure] = {}
    for row in rows:
        procedure = Procedure.from_row(row)
        procedures[procedure.name] = procedure
    return procedures


async def fetch_procedures(graph: GraphClient, query: str = "CALL dbms.procedures()") -> dict[str, Procedure]:
    """List the procedures a running server exposes."""
    records = await graph.execute(query)
    logger.debug("Fetched {} procedures from {}", len(records), graph.uri)
    return procedures_by_name(records)


def load_procedures(path: Path) -> dict[str, Procedure]:
    """Read a procedure listing exported as a JSON list of rows."""
    try:
        rows = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        msg = f"Cannot read procedure listing from {path}: {exc}"
        raise ProcedureListingError(msg) from exc
    if not isinstance(rows, list) or not all(isinstance(row, dict) for row in rows):
        msg = f"Cannot read procedure listing from {path}: expected a JSON list of objects"
        raise ProcedureListingError(msg)
    try:
        return procedures_by_name(rows)
    except (KeyError, TypeError) as exc:
        msg = f"Cannot read procedure listing from {path}: bad row: {exc}"
        raise ProcedureListingError(msg) from exc


def _roles_cell(roles: tuple[str, ...] | None) -> str:
    if roles is None:
        return NOT_APPLICABLE
    return ENTERPRISE_FEATURE_ROLE_TEMPLATE.format(", ".join(roles))


class ProcedureReferenceGenerator:
    """Render the procedure reference table for two edition listings."""

    def __init__(self, community: Mapping[str, Procedure], enterprise: Mapping[str, Procedure]) -> None:
        self._community = dict(community)
        self._enterprise = dict(enterprise)

    def document(self, table_id: str, title: str) -> str:
        out = io.StringIO()
        out.write(f"[[{table_id}]]\n")
        out.write(f".{title}\n")
        out.write('[options=header, cols="a,a,m,a"]\n')
        out.write("|===\n")
        out.write("|Name\n|Description\n|Signature\n|")
        out.write(ENTERPRISE_FEATURE_ROLE_TEMPLATE.format("Roles"))
        out.write("\n")

        for proc in sorted(self._community.values(), key=lambda p: p.name):
            enterprise = self._enterprise.get(proc.name)
            roles = _roles_cell(enterprise.roles if enterprise is not None else None)
            out.write(f"|{proc.name} |{proc.description} |{proc.signature} |{roles}\n")

        enterprise_only = sorted(
            (p for name, p in self._enterprise.items() if name not in self._community),
            key=lambda p: p.name,
        )
        for proc in enterprise_only:
            roles = _roles_cell(proc.roles)
            out.write(f"[roles=enterprise]|{proc.name} |{proc.description} |{proc.signature} |{roles}\n")

        out.write("|===\n")
        logger.debug(
            "Documented {} community and {} enterprise-only procedures", len(self._community), len(enterprise_only)
        )
        return out.getvalue()
