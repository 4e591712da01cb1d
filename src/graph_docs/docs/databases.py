"""Database management commands, documented against the ``system`` database."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graph_docs.docgen import DocBuilder, Document, ResultAndDbAssertions, stats

if TYPE_CHECKING:
    from graph_docs.graph.client import GraphClient, QueryResult

OUTPUT_PATH = "dev/ql/administration"
SYSTEM = "system"


async def _listing_matches_server(result: QueryResult, graph: GraphClient) -> bool:
    rows = await graph.execute("SHOW DATABASES YIELD name", database=SYSTEM)
    return set(result.column_as("name")) == {row["name"] for row in rows}


def _database_shown() -> ResultAndDbAssertions:
    return ResultAndDbAssertions(_listing_matches_server)


def _show_databases(b: DocBuilder) -> None:
    with b.query("SHOW DATABASES", _database_shown()):
        b.result_table()


def databases() -> Document:
    b = DocBuilder("Databases", "administration-databases", output_path=OUTPUT_PATH, database=SYSTEM)
    b.init_queries("DROP DATABASE customers IF EXISTS")
    b.synopsis(
        "This section explains how to use Cypher to manage Neo4j databases: "
        "creating, deleting, starting and stopping individual databases within a single server."
    )
    b.p(
        """
        * <<administration-databases-introduction, Introduction>>
        * <<administration-databases-show-databases, Listing databases>>
        * <<administration-databases-create-database, Creating databases>>
        * <<administration-databases-stop-database, Stopping databases>>
        * <<administration-databases-start-database, Starting databases>>
        * <<administration-databases-drop-database, Deleting databases>>
        """
    )
    with b.section("Introduction", "administration-databases-introduction"):
        b.p(
            """
            Neo4j allows the same server to manage multiple databases. The metadata for these databases,
            including the associated security model, is maintained in a special database called the `system` database.
            All multi-database administrative commands need to be executing against the `system` database.
            """
        )

    with b.section("Listing databases", "administration-databases-show-databases"):
        b.p("Available databases can be seen using the `SHOW DATABASES`.")
        _show_databases(b)
        b.considerations(
            "The `status` of the database is the desired status, "
            "and might not necessarily reflect the actual status across all members of a cluster."
        )

    with b.section("Creating databases", "administration-databases-create-database"):
        b.p("Databases can be created using the `CREATE DATABASE`.")
        with b.query("CREATE DATABASE customers", stats(system_updates=1)):
            b.p("Nothing is returned from this query, except the count of administrative commands.")
            b.result_table()
        b.p("The status of any databases created can be seen using the command `SHOW DATABASES`.")
        _show_databases(b)
        b.p(
            "This command is optionally idempotent, with the default behavior to throw an exception "
            "if the database already exists. Appending `IF NOT EXISTS` to the command will ensure that no exception "
            "is thrown and nothing happens should the database already exist. Adding `OR REPLACE` to the command "
            "will result in any existing database being deleted and a new one created."
        )
        with b.query("CREATE DATABASE customers IF NOT EXISTS", stats()):
            pass
        with b.query("CREATE OR REPLACE DATABASE customers", stats(system_updates=2)):
            pass

    with b.section("Stopping databases", "administration-databases-stop-database"):
        b.p("Databases can be stopped using the `STOP DATABASE` command.")
        with b.query("STOP DATABASE customers", stats(system_updates=1)):
            b.p("Nothing is returned from this query, except the count of administrative commands.")
            b.result_table()
        b.p("The status of any databases stopped can be seen using the command `SHOW DATABASES`.")
        _show_databases(b)

    with b.section("Starting databases", "administration-databases-start-database"):
        b.p("Databases can be started using the `START DATABASE` command.")
        with b.query("START DATABASE customers", stats(system_updates=1)):
            b.p("Nothing is returned from this query, except the count of administrative commands.")
            b.result_table()
        b.p("The status of any databases started can be seen using the command `SHOW DATABASES`.")
        _show_databases(b)

    with b.section("Deleting databases", "administration-databases-drop-database"):
        b.p("Databases can be deleted using the `DROP DATABASE` command.")
        with b.query("DROP DATABASE customers", stats(system_updates=1)):
            b.p("Nothing is returned from this query, except the count of administrative commands.")
            b.result_table()
        b.p(
            "When a database has been deleted, it will no longer show up in the listing provided by "
            "the command `SHOW DATABASES`."
        )
        _show_databases(b)
        b.p(
            "This command is optionally idempotent, with the default behavior to throw an exception if the database "
            "does not exists. Appending `IF EXISTS` to the command will ensure that no exception is thrown "
            "and nothing happens should the database not exist."
        )
        with b.query("DROP DATABASE customers IF EXISTS", stats()):
            pass

    return b.build()
