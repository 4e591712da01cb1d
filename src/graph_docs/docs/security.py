"""Security administration pages: administrative, graph and write privileges.

All three pages run against the ``system`` database.  Their init queries use
``CREATE OR REPLACE`` so a page can be rebuilt against the same server.
"""

from __future__ import annotations

from typing import Any

from graph_docs.docgen import DocBuilder, Document, ResultAssertions, stats

OUTPUT_PATH = "dev/ql/administration/security"
SYSTEM = "system"


def privileges_shown(*expected: dict[str, Any]) -> ResultAssertions:
    """At least one listed privilege must match one of the *expected* partial rows.

    An empty mapping matches any row, so ``privileges_shown({})`` only asks for
    a non-empty listing.
    """

    def _check(result) -> bool:
        wanted = expected or ({},)
        return any(all(row.get(k) == v for k, v in exp.items()) for row in result.records for exp in wanted)

    return ResultAssertions(_check)


def _system_update(b: DocBuilder, query: str, count: int = 1) -> None:
    with b.query(query, stats(system_updates=count)):
        b.stats_only_result_table()


# ---------------------------------------------------------------------------
# Administrative privileges
# ---------------------------------------------------------------------------


def security_administration() -> Document:
    b = DocBuilder(
        "Security of administration", "administration-security-administration", output_path=OUTPUT_PATH, database=SYSTEM
    )
    b.init_queries(
        "CREATE OR REPLACE ROLE regularUsers",
        "CREATE OR REPLACE ROLE noAccessUsers",
        "CREATE OR REPLACE USER jake SET PASSWORD 'abc123' CHANGE NOT REQUIRED",
        "GRANT ROLE regularUsers TO jake",
        "DENY ACCESS ON DATABASE neo4j TO noAccessUsers",
    )
    b.synopsis("This section explains how to use Cypher to manage Neo4j administrative privileges.")
    b.p(
        """
        All of the commands described in the enclosing <<administration, Administration>> section require that the user executing the commands has the rights to do so.
        These privileges can be conferred either by granting the user the `admin` role, which enables all administrative rights, or by granting specific combinations of privileges.
        """  # noqa: E501
    )
    b.p(
        """
        * <<administration-security-administration-introduction, The 'admin' role>>
        * <<administration-security-administration-database-privileges, Database administration>>
        ** <<administration-security-administration-database-access, The database ACCESS privilege>>
        ** <<administration-security-administration-database-startstop, The database START/STOP privileges>>
        ** <<administration-security-administration-database-indexes, The INDEX MANAGEMENT privileges>>
        ** <<administration-security-administration-database-constraints, The CONSTRAINT MANAGEMENT privileges>>
        ** <<administration-security-administration-database-tokens, The NAME MANAGEMENT privileges>>
        ** <<administration-security-administration-database-all, Granting all database administration privileges>>
        """
    )
    with b.section("The 'admin' role", "administration-security-administration-introduction"):
        b.p("include::admin-role-introduction.asciidoc[]")

    with b.section("Database administration", "administration-security-administration-database-privileges"):
        b.synopsis("This section explains how to use Cypher to manage privileges for Neo4j database administrative rights.")  # noqa: E501
        b.p("include::database/admin-role-database.asciidoc[]")
        b.p("include::database/admin-database-syntax.asciidoc[]")

        with b.section("The database ACCESS privilege", "administration-security-administration-database-access"):
            b.p(
                """
                The `ACCESS` privilege can be used to enable the ability to access a database.
                If this is not granted to users, they will not even be able to start transactions on the relevant database.
                """  # noqa: E501
            )
            b.p("include::database/grant-database-access-syntax.asciidoc[]")
            b.p(
                "For example, granting the ability to access the database `neo4j` to the role `regularUsers` "
                "is done using the following query."
            )
            _system_update(b, "GRANT ACCESS ON DATABASE neo4j TO regularUsers")
            b.p("The `ACCESS` privilege can also be denied.")
            b.p("include::database/deny-database-access-syntax.asciidoc[]")
            b.p(
                "For example, denying the ability to access to the database `neo4j` to the role `regularUsers` "
                "is done using the following query."
            )
            _system_update(b, "DENY ACCESS ON DATABASE neo4j TO regularUsers")
            b.p("The privileges granted can be seen using the `SHOW PRIVILEGES` command:")
            with b.query(
                "SHOW ROLE regularUsers PRIVILEGES",
                privileges_shown(
                    {"access": "GRANTED", "action": "access"},
                    {"access": "DENIED", "action": "access"},
                ),
            ):
                b.result_table()

        with b.section("The database START/STOP privileges", "administration-security-administration-database-startstop"):  # noqa: E501
            b.p("The `START` privilege can be used to enable the ability to start a database.")
            b.p("include::database/grant-database-start-syntax.asciidoc[]")
            _system_update(b, "GRANT START ON DATABASE neo4j TO regularUsers")
            b.p("The `START` privilege can also be denied.")
            _system_update(b, "DENY START ON DATABASE system TO regularUsers")
            b.p("The `STOP` privilege can be used to enable the ability to stop a database.")
            b.p("include::database/grant-database-stop-syntax.asciidoc[]")
            _system_update(b, "GRANT STOP ON DATABASE neo4j TO regularUsers")
            b.p("The `STOP` privilege can also be denied.")
            _system_update(b, "DENY STOP ON DATABASE system TO regularUsers")
            b.p("The privileges granted can be seen using the `SHOW PRIVILEGES` command:")
            with b.query(
                "SHOW ROLE regularUsers PRIVILEGES",
                privileges_shown(
                    {"access": "GRANTED", "action": "start_database"},
                    {"access": "DENIED", "action": "stop_database"},
                ),
            ):
                b.result_table()

        with b.section("The INDEX MANAGEMENT privileges", "administration-security-administration-database-indexes"):
            b.p(
                """
                Indexes can be created or deleted with the `CREATE INDEX` and `DROP INDEX` commands.
                The privilege to do this can be granted with `GRANT CREATE INDEX` and `GRANT DROP INDEX` commands.
                """
            )
            b.p("include::database/index-management-syntax.asciidoc[]")
            _system_update(b, "GRANT CREATE INDEX ON DATABASE neo4j TO regularUsers")

        with b.section(
            "The CONSTRAINT MANAGEMENT privileges", "administration-security-administration-database-constraints"
        ):
            b.p(
                """
                Constraints can be created or deleted with the `CREATE CONSTRAINT` and `DROP CONSTRAINT` commands.
                The privilege to do this can be granted with `GRANT CREATE CONSTRAINT` and `GRANT DROP CONSTRAINT` commands.
                """  # noqa: E501
            )
            b.p("include::database/constraint-management-syntax.asciidoc[]")
            _system_update(b, "GRANT CREATE CONSTRAINT ON DATABASE neo4j TO regularUsers")

        with b.section("The NAME MANAGEMENT privileges", "administration-security-administration-database-tokens"):
            b.p(
                """
                The right to create new labels, relationship types or property names is different from the right to create nodes, relationships or properties.
                The latter is managed using database `WRITE` privileges, while the former is managed using specific `GRANT/DENY CREATE NEW ...` commands for each type.
                """  # noqa: E501
            )
            b.p("include::database/name-management-syntax.asciidoc[]")
            _system_update(b, "GRANT CREATE NEW PROPERTY NAME ON DATABASE neo4j TO regularUsers")

        with b.section(
            "Granting all database administration privileges", "administration-security-administration-database-all"
        ):
            b.p("Conferring the right to perform all of the above tasks can be achieved with a single command:")
            b.p("include::database/all-management-syntax.asciidoc[]")
            _system_update(b, "GRANT ALL DATABASE PRIVILEGES ON DATABASE neo4j TO regularUsers")
            b.p("The privileges granted can be seen using the `SHOW PRIVILEGES` command:")
            with b.query(
                "SHOW ROLE regularUsers PRIVILEGES",
                privileges_shown(
                    {"access": "GRANTED", "action": "database_actions", "role": "regularUsers"},
                    {"access": "GRANTED", "action": "create_index", "role": "regularUsers"},
                    {"access": "GRANTED", "action": "create_propertykey", "role": "regularUsers"},
                ),
            ):
                b.result_table()

    return b.build()


# ---------------------------------------------------------------------------
# Graph and sub-graph access control
# ---------------------------------------------------------------------------


def security_privileges() -> Document:
    b = DocBuilder(
        "Database, Graph and Sub-graph Access Control",
        "administration-security-subgraph",
        output_path=OUTPUT_PATH,
        database=SYSTEM,
    )
    b.init_queries(
        "CREATE OR REPLACE USER jake SET PASSWORD 'abc123' CHANGE NOT REQUIRED SET STATUS ACTIVE",
        "CREATE OR REPLACE ROLE regularUser",
        "CREATE OR REPLACE ROLE noopUser",
        "GRANT ROLE regularUser TO jake",
        "GRANT ACCESS ON DATABASE neo4j TO regularUser",
        "DENY ACCESS ON DATABASE neo4j TO noopUser",
    )
    b.synopsis(
        "This section explains how to use Cypher to manage privileges for Neo4j role-based access control "
        "and fine-grained security."
    )
    b.p(
        """
        Privileges control the access rights to graph elements using a combined allowlist/denylist mechanism.
        It is possible to grant access, or deny access, or both.
        The user will be able to access the resource if they have a grant and do not have a deny relevant to that resource.
        If a user was not provided with the access privilege then access to the entire graph will be denied.
        All other combinations of GRANT and DENY will result in the matching subgraph being visible.
        It will appear to the user as if they have a smaller database (smaller graph).
        """  # noqa: E501
    )
    with b.section("The GRANT, DENY and REVOKE commands", "administration-security-subgraph-introduction"):
        b.p("include::grant-deny-syntax.asciidoc[]")
        b.p('image::grant-privileges-graph.png[title="GRANT and DENY Syntax"]')

    with b.section("Listing privileges", "administration-security-subgraph-show"):
        b.p("Available privileges for all roles can be seen using `SHOW PRIVILEGES`.")
        with b.query("SHOW PRIVILEGES", privileges_shown()):
            b.p("Lists all privileges for all roles")
            b.result_table()
        b.p("Available privileges for a particular role can be seen using `SHOW ROLE $role PRIVILEGES`.")
        with b.query("SHOW ROLE regularUser PRIVILEGES", privileges_shown({"role": "regularUser"})):
            b.p("Lists all privileges for role 'regularUser'")
            b.result_table()
        b.p("Available privileges for a particular user can be seen using `SHOW USER $user PRIVILEGES`.")
        with b.query("SHOW USER jake PRIVILEGES", privileges_shown({"user": "jake"})):
            b.p("Lists all privileges for user 'jake'")
            b.result_table()

    with b.section("The TRAVERSE privilege", "administration-security-subgraph-traverse"):
        b.p("Users can be granted the right to find nodes and relationships using the `GRANT TRAVERSE` privilege.")
        b.p("include::grant-traverse-syntax.asciidoc[]")
        b.p("For example, we can allow the user `jake`, who has role 'regularUser' to find all nodes with the label `Post`.")  # noqa: E501
        with b.query("GRANT TRAVERSE ON GRAPH neo4j NODES Post TO regularUser", stats(system_updates=1)):
            b.p("Nothing is returned from this query, except the count of system database changes made.")
            b.result_table()
        b.p("The privileges granted to the `regularUser` role will appear on the list provided by `SHOW ROLE $role PRIVILEGES`.")  # noqa: E501
        with b.query(
            "SHOW ROLE regularUser PRIVILEGES",
            privileges_shown({"access": "GRANTED", "segment": "NODE(Post)", "role": "regularUser"}),
        ):
            b.result_table()
        b.p("The `TRAVERSE` privilege can also be denied.")
        b.p("include::deny-traverse-syntax.asciidoc[]")
        b.p(
            "For example, we can disallow the user `jake`, who has role 'regularUser' "
            "to find all nodes with the label `Payments`."
        )
        with b.query("DENY TRAVERSE ON GRAPH neo4j NODES Payments TO regularUser", stats(system_updates=1)):
            b.p("Nothing is returned from this query, except the count of system database changes made.")
            b.result_table()
        with b.query(
            "SHOW ROLE regularUser PRIVILEGES",
            privileges_shown({"access": "DENIED", "segment": "NODE(Payments)", "role": "regularUser"}),
        ):
            b.result_table()

    with b.section("The READ privilege", "administration-security-subgraph-read"):
        b.p("Users can be granted the right to do property reads on nodes and relationships using the `GRANT READ` privilege.")  # noqa: E501
        b.p("include::grant-read-syntax.asciidoc[]")
        b.p("The `READ` privilege can also be denied.")
        b.p("include::deny-read-syntax.asciidoc[]")

    with b.section("The MATCH privilege", "administration-security-subgraph-match"):
        b.p(
            "As a shorthand for `TRAVERSE` and `READ`, users can be granted the right to find and do property reads "
            "on nodes and relationships using the `GRANT MATCH` privilege."
        )
        b.p("include::grant-match-syntax.asciidoc[]")
        b.p("The `MATCH` privilege can also be denied.")
        b.p("include::deny-match-syntax.asciidoc[]")

    with b.section("The REVOKE command", "administration-security-subgraph-revoke"):
        b.p("Privileges that were granted or denied earlier can be revoked using the `REVOKE` command.")
        b.p("include::revoke-syntax.asciidoc[]")
        b.p("An example usage of the `REVOKE` command is given here:")
        with b.query("REVOKE GRANT TRAVERSE ON GRAPH neo4j NODES Post FROM regularUser", stats(system_updates=1)):
            pass
        b.p(
            """
            While it can be explicitly specified that revoke should remove a `GRANT` or `DENY`, it is also possible to revoke either one by not specifying at all as the next example demonstrates.
            Because of this, if there happen to be a `GRANT` and a `DENY` on the same privilege, it would remove both.
            """  # noqa: E501
        )
        with b.query("REVOKE TRAVERSE ON GRAPH neo4j NODES Payments FROM regularUser", stats(system_updates=1)):
            pass

    return b.build()


# ---------------------------------------------------------------------------
# Write privileges
# ---------------------------------------------------------------------------

_WRITE_SECTIONS = (
    ("The `CREATE` privilege", "administration-security-writes-create"),
    ("The `DELETE` privilege", "administration-security-writes-delete"),
    ("The `SET LABEL` privilege", "administration-security-writes-set-label"),
    ("The `REMOVE LABEL` privilege", "administration-security-writes-remove-label"),
    ("The `SET PROPERTY` privilege", "administration-security-writes-set-property"),
    ("The `MERGE` privilege", "administration-security-writes-merge"),
)


def security_writes() -> Document:
    b = DocBuilder("Write privileges", "administration-security-writes", output_path=OUTPUT_PATH, database=SYSTEM)
    b.init_queries(
        "CREATE OR REPLACE USER jake SET PASSWORD 'abc123' CHANGE NOT REQUIRED SET STATUS ACTIVE",
        "CREATE OR REPLACE ROLE regularUsers",
        "GRANT ROLE regularUsers TO jake",
        "GRANT ACCESS ON DATABASE neo4j TO regularUsers",
    )
    b.synopsis("This section explains how to use Cypher to manage write privileges for Neo4j.")
    b.p(
        "\n".join(
            [f"* <<{section_id}, {title}>>" for title, section_id in _WRITE_SECTIONS]
            + [
                "* <<administration-security-writes-write, The `WRITE` privilege>>",
                "* <<administration-security-writes-all, `ALL GRAPH PRIVILEGES`>>",
            ]
        )
    )
    b.p(
        """
        There are several separate write privileges:

        * `WRITE` - this privilege can only be assigned to all nodes, relationships, and properties in the entire graph.
        """
    )
    for title, section_id in _WRITE_SECTIONS:
        with b.section(title, section_id, role="enterprise-edition"):
            pass

    with b.section("The `WRITE` privilege", "administration-security-writes-write", role="enterprise-edition"):
        b.p("The `WRITE` privilege enables you to write on a graph.")
        b.p("include::grant-write-syntax.asciidoc[]")
        b.p(
            "For example, granting the ability to write on the graph `neo4j` to the role `regularUsers` "
            "would be achieved using:"
        )
        _system_update(b, "GRANT WRITE ON GRAPH neo4j TO regularUsers", 2)
        with b.note():
            b.p(
                "Unlike with `GRANT READ` it is not possible to restrict `WRITE` privileges to specific "
                "ELEMENTS, NODES or RELATIONSHIPS."
            )
        b.p("The `WRITE` privilege can also be denied.")
        b.p("include::deny-write-syntax.asciidoc[]")
        b.p(
            "For example, denying the ability to write on the graph `neo4j` to the role `regularUsers` "
            "would be achieved using:"
        )
        _system_update(b, "DENY WRITE ON GRAPH neo4j TO regularUsers", 2)
        with b.note():
            b.p(
                """
                Users with `WRITE` privilege but restricted `TRAVERSE` privileges will not be able to do `DETACH DELETE` in all cases.
                See <<operations-manual#detach-delete-restricted-user, Operations Manual -> Fine-grained access control>> for more info.
                """  # noqa: E501
            )

    with b.section("`ALL GRAPH PRIVILEGES`", "administration-security-writes-all", role="enterprise-edition"):
        pass

    return b.build()
