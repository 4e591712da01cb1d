"""Refcard sections."""

from __future__ import annotations

from graph_docs.docgen import RefcardSection

ROLE_MANAGEMENT_TEXT = """
###assertion=update-one
//

CREATE ROLE my_role
###

Create a role named `my_role`.

###assertion=update-one
//

CREATE ROLE my_second_role IF NOT EXISTS AS COPY OF my_role
###

Create a role named `my_second_role` unless it already exists, as a copy of the existing role `my_role`.

###assertion=update-two
//

GRANT ROLE my_role, my_second_role TO alice
###

Assign the roles `my_role` and `my_second_role` to the user `alice`.

###assertion=update-one
//

REVOKE ROLE my_second_role FROM alice
###

Remove the role `my_second_role` from the user `alice`.

###assertion=show
//

SHOW POPULATED ROLES WITH USERS
###

List all roles, and their users, that are assigned to users in the system.

###assertion=update-one
//

DROP ROLE my_role
###

Delete the role `my_role`.
"""


def role_management() -> RefcardSection:
    return RefcardSection(
        title="(★) ROLE MANAGEMENT",
        link_id="administration/security/users-and-roles/#administration-security-roles",
        text=ROLE_MANAGEMENT_TEXT,
        setup_queries=[
            "CREATE OR REPLACE USER alice SET PASSWORD 'secret' CHANGE NOT REQUIRED",
            "DROP ROLE my_role IF EXISTS",
            "DROP ROLE my_second_role IF EXISTS",
        ],
        database="system",
    )
