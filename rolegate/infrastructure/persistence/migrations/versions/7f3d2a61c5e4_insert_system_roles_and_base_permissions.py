"""insert_system_roles_and_base_permissions

Revision ID: 7f3d2a61c5e4
Revises: 4c1e8a2b9d10
Create Date: 2026-10-12 09:31:05.118740

Inserts the four system roles and the users/roles/permissions CRUD
permissions. Grants: super_admin gets all; admin gets everything except
permissions:*; manager gets users:read, users:update, roles:read; user gets
every :read permission. Rows that already exist (by name) are left alone.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from rolegate.shared.utils.generators import generate_cuid

# revision identifiers, used by Alembic.
revision: str = "7f3d2a61c5e4"
down_revision: Union[str, Sequence[str], None] = "4c1e8a2b9d10"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SYSTEM_ROLES = {
    "super_admin": "Super Administrator with full system access",
    "admin": "Administrator with elevated privileges",
    "manager": "Manager with moderate privileges",
    "user": "Standard user with basic privileges",
}
RESOURCES = ("users", "roles", "permissions")
ACTIONS = ("create", "read", "update", "delete")


def _grants(role: str, resource: str, action: str) -> bool:
    if role == "super_admin":
        return True
    if role == "admin":
        return resource != "permissions"
    if role == "manager":
        return (resource == "users" and action in ("read", "update")) or (
            resource == "roles" and action == "read"
        )
    return action == "read"


def upgrade() -> None:
    """Insert system roles, base permissions and their edges."""
    conn = op.get_bind()

    role_ids: dict[str, str] = {}
    for name, description in SYSTEM_ROLES.items():
        existing = conn.execute(
            sa.text("SELECT id FROM role WHERE name = :name"), {"name": name}
        ).scalar()
        if existing is None:
            existing = generate_cuid()
            conn.execute(
                sa.text(
                    "INSERT INTO role (id, name, description) VALUES (:id, :name, :description)"
                ),
                {"id": existing, "name": name, "description": description},
            )
        role_ids[name] = existing

    permission_ids: dict[tuple[str, str], str] = {}
    for resource in RESOURCES:
        for action in ACTIONS:
            name = f"{resource}:{action}"
            existing = conn.execute(
                sa.text("SELECT id FROM permission WHERE name = :name"), {"name": name}
            ).scalar()
            if existing is None:
                existing = generate_cuid()
                conn.execute(
                    sa.text(
                        "INSERT INTO permission (id, name, resource, action, description) "
                        "VALUES (:id, :name, :resource, :action, :description)"
                    ),
                    {
                        "id": existing,
                        "name": name,
                        "resource": resource,
                        "action": action,
                        "description": f"{action.capitalize()} {resource}",
                    },
                )
            permission_ids[(resource, action)] = existing

    for role_name, role_id in role_ids.items():
        for (resource, action), permission_id in permission_ids.items():
            if not _grants(role_name, resource, action):
                continue
            conn.execute(
                sa.text(
                    "INSERT INTO role_permission (id, role_id, permission_id) "
                    "VALUES (:id, :role_id, :permission_id) "
                    "ON CONFLICT (role_id, permission_id) DO NOTHING"
                ),
                {"id": generate_cuid(), "role_id": role_id, "permission_id": permission_id},
            )


def downgrade() -> None:
    """Remove base permissions and system roles (only when nobody holds them)."""
    conn = op.get_bind()
    names = [f"{r}:{a}" for r in RESOURCES for a in ACTIONS]
    conn.execute(
        sa.text(
            "DELETE FROM role_permission WHERE permission_id IN "
            "(SELECT id FROM permission WHERE name = ANY(:names))"
        ),
        {"names": names},
    )
    conn.execute(sa.text("DELETE FROM permission WHERE name = ANY(:names)"), {"names": names})
    conn.execute(
        sa.text(
            "DELETE FROM role WHERE name = ANY(:names) "
            "AND id NOT IN (SELECT role_id FROM user_role)"
        ),
        {"names": list(SYSTEM_ROLES)},
    )
