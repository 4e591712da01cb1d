"""Tests for the procedure reference generator."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from graph_docs.procedures import (
    Procedure,
    ProcedureListingError,
    ProcedureReferenceGenerator,
    fetch_procedures,
    load_procedures,
    procedures_by_name,
)


def _proc(name: str, roles: tuple[str, ...] | None = None) -> Procedure:
    return Procedure(name=name, signature=f"{name}() :: VOID", description=f"Runs {name}.", roles=roles)


def _listing(*procs: Procedure) -> dict[str, Procedure]:
    return {p.name: p for p in procs}


class TestDocument:
    def test_header(self) -> None:
        out = ProcedureReferenceGenerator({}, {}).document("procs", "Procedures")
        assert out == (
            "[[procs]]\n"
            ".Procedures\n"
            '[options=header, cols="a,a,m,a"]\n'
            "|===\n"
            "|Name\n"
            "|Description\n"
            "|Signature\n"
            "|[enterprise-feature]#Roles#\n"
            "|===\n"
        )

    def test_community_rows_use_enterprise_roles(self) -> None:
        community = _listing(_proc("db.labels"))
        enterprise = _listing(_proc("db.labels", ("reader", "admin")))
        out = ProcedureReferenceGenerator(community, enterprise).document("procs", "Procedures")
        assert "|db.labels |Runs db.labels. |db.labels() :: VOID |[enterprise-feature]#reader, admin#\n" in out

    def test_missing_from_enterprise_is_not_applicable(self) -> None:
        out = ProcedureReferenceGenerator(_listing(_proc("db.ping")), {}).document("procs", "Procedures")
        assert "|db.ping |Runs db.ping. |db.ping() :: VOID |N/A\n" in out

    def test_enterprise_without_roles_is_not_applicable(self) -> None:
        out = ProcedureReferenceGenerator(_listing(_proc("db.ping")), _listing(_proc("db.ping"))).document("p", "P")
        assert out.rstrip().splitlines()[-2].endswith("|N/A")

    def test_enterprise_only_rows_follow_community_rows(self) -> None:
        community = _listing(_proc("db.b"), _proc("db.a"))
        enterprise = _listing(_proc("db.a", ("admin",)), _proc("dbms.z", ("admin",)), _proc("dbms.y", ()))
        lines = ProcedureReferenceGenerator(community, enterprise).document("p", "P").splitlines()
        rows = [line for line in lines if line.startswith(("|db", "[roles"))]
        assert [row.split(" |")[0] for row in rows] == [
            "|db.a",
            "|db.b",
            "[roles=enterprise]|dbms.y",
            "[roles=enterprise]|dbms.z",
        ]
        assert rows[2].endswith("|[enterprise-feature]##")


class TestListings:
    def test_from_row_defaults(self) -> None:
        proc = Procedure.from_row({"name": "db.a", "signature": None})
        assert proc == Procedure(name="db.a", signature="", description="", roles=None)

    def test_from_row_roles_become_tuple(self) -> None:
        proc = Procedure.from_row({"name": "db.a", "roles": ["reader"]})
        assert proc.roles == ("reader",)

    def test_later_rows_win(self) -> None:
        procs = procedures_by_name([{"name": "db.a", "description": "old"}, {"name": "db.a", "description": "new"}])
        assert procs["db.a"].description == "new"

    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "community.json"
        path.write_text(json.dumps([{"name": "db.a", "signature": "db.a()", "description": "A."}]), encoding="utf-8")
        assert load_procedures(path)["db.a"].signature == "db.a()"

    @pytest.mark.parametrize("content", ["{", '[{"signature": "no name"}]', "42", '{"procedures": []}', '["x"]'])
    def test_load_rejects_bad_listing(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "bad.json"
        path.write_text(content, encoding="utf-8")
        with pytest.raises(ProcedureListingError):
            load_procedures(path)

    def test_load_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ProcedureListingError, match="Cannot read"):
            load_procedures(tmp_path / "absent.json")

    async def test_fetch(self, mock_graph) -> None:
        mock_graph.execute.return_value = [{"name": "db.a", "signature": "db.a()", "description": "A.", "roles": None}]
        procs = await fetch_procedures(mock_graph)
        mock_graph.execute.assert_awaited_once_with("CALL dbms.procedures()")
        assert procs["db.a"].roles is None
