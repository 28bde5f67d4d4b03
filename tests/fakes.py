"""In-memory repositories and resolver for service and API tests.

They honor the same contracts as the SQLAlchemy repositories (unique names and
emails, cascade on role/user delete) over plain dicts, so services can be
exercised without a database.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta

from rolegate.application.dtos.permission import (
    PermissionGrant,
    PermissionResult,
    PermissionUpdate,
)
from rolegate.application.dtos.role import RoleHolder, RoleResult, RoleUpdate
from rolegate.application.dtos.user import (
    RoleAssignmentResult,
    UserCredentials,
    UserResult,
    UserUpdate,
)
from rolegate.domain.enums import SYSTEM_ROLE_NAMES
from rolegate.domain.exceptions import (
    ConflictException,
    DuplicateAssignmentException,
    DuplicateEmailException,
    UserAlreadyExistsException,
)

_EPOCH = datetime(2026, 1, 1, tzinfo=UTC)

STRONG_PASSWORD = "Str0ng@Pass"


@dataclass
class _UserEdge:
    role_id: str
    assigned_at: datetime
    assigned_by: str | None


@dataclass
class InMemoryStore:
    """Shared state behind every fake repository of one test."""

    users: dict[str, UserResult] = field(default_factory=dict)
    passwords: dict[str, str] = field(default_factory=dict)
    roles: dict[str, RoleResult] = field(default_factory=dict)
    permissions: dict[str, PermissionResult] = field(default_factory=dict)
    role_permissions: dict[str, list[str]] = field(default_factory=dict)
    user_roles: dict[str, list[_UserEdge]] = field(default_factory=dict)
    # (operation, user_id) in call order for the role-set writes
    journal: list[tuple[str, str]] = field(default_factory=list)
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1))
    _ticks: itertools.count = field(default_factory=lambda: itertools.count(1))

    def next_id(self, prefix: str) -> str:
        return f"{prefix}{next(self._ids)}"

    def now(self) -> datetime:
        return _EPOCH + timedelta(seconds=next(self._ticks))

    # ---- seeding helpers ----

    def add_role(self, name: str, description: str | None = None) -> RoleResult:
        role = RoleResult(
            id=self.next_id("role_"),
            name=name,
            description=description,
            is_system=name in SYSTEM_ROLE_NAMES,
            created_at=self.now(),
            updated_at=self.now(),
        )
        self.roles[role.id] = role
        self.role_permissions.setdefault(role.id, [])
        return role

    def add_permission(self, resource: str, action: str) -> PermissionResult:
        permission = PermissionResult(
            id=self.next_id("perm_"),
            name=f"{resource}:{action}",
            resource=resource,
            action=action,
            description=None,
            created_at=self.now(),
            updated_at=self.now(),
        )
        self.permissions[permission.id] = permission
        return permission

    def grant(self, role: RoleResult, *permissions: PermissionResult) -> None:
        edges = self.role_permissions.setdefault(role.id, [])
        for permission in permissions:
            if permission.id not in edges:
                edges.append(permission.id)

    def add_user(
        self,
        email: str,
        hashed_password: str = "",
        *roles: RoleResult,
        is_active: bool = True,
    ) -> UserResult:
        user = UserResult(
            id=self.next_id("user_"),
            email=email,
            first_name="Test",
            last_name="User",
            is_active=is_active,
            created_at=self.now(),
            updated_at=self.now(),
        )
        self.users[user.id] = user
        self.passwords[user.id] = hashed_password
        self.user_roles[user.id] = [
            _UserEdge(role_id=r.id, assigned_at=self.now(), assigned_by=None) for r in roles
        ]
        return user

    def assign(self, user: UserResult, role: RoleResult) -> None:
        """Give user an extra role directly, bypassing service rules."""
        self.user_roles.setdefault(user.id, []).append(
            _UserEdge(role_id=role.id, assigned_at=self.now(), assigned_by=None)
        )

    def role_by_name(self, name: str) -> RoleResult:
        return next(r for r in self.roles.values() if r.name == name)


def _matches(search: str | None, *values: str | None) -> bool:
    if not search:
        return True
    needle = search.lower()
    return any(v and needle in v.lower() for v in values)


class FakeUserRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_by_id(self, user_id: str) -> UserResult | None:
        return self.store.users.get(user_id)

    async def get_by_email(self, email: str) -> UserResult | None:
        return next((u for u in self.store.users.values() if u.email == email), None)

    async def get_credentials_by_email(self, email: str) -> UserCredentials | None:
        user = await self.get_by_email(email)
        if user is None:
            return None
        return UserCredentials(user=user, hashed_password=self.store.passwords[user.id])

    async def get_credentials_by_id(self, user_id: str) -> UserCredentials | None:
        user = self.store.users.get(user_id)
        if user is None:
            return None
        return UserCredentials(user=user, hashed_password=self.store.passwords[user.id])

    async def create_user(
        self, email: str, hashed_password: str, first_name: str, last_name: str
    ) -> UserResult:
        if await self.get_by_email(email):
            raise UserAlreadyExistsException()
        user = UserResult(
            id=self.store.next_id("user_"),
            email=email,
            first_name=first_name,
            last_name=last_name,
            is_active=True,
            created_at=self.store.now(),
            updated_at=self.store.now(),
        )
        self.store.users[user.id] = user
        self.store.passwords[user.id] = hashed_password
        self.store.user_roles[user.id] = []
        return user

    async def update_user(self, user_id: str, changes: UserUpdate) -> UserResult | None:
        user = self.store.users.get(user_id)
        if user is None:
            return None
        if changes.email is not None:
            other = await self.get_by_email(changes.email)
            if other and other.id != user_id:
                raise DuplicateEmailException()
        updated = replace(user, **changes.changes(), updated_at=self.store.now())
        self.store.users[user_id] = updated
        return updated

    async def set_password(self, user_id: str, hashed_password: str) -> bool:
        if user_id not in self.store.users:
            return False
        self.store.passwords[user_id] = hashed_password
        return True

    async def lock_for_update(self, user_id: str) -> bool:
        self.store.journal.append(("lock", user_id))
        return user_id in self.store.users

    async def delete_user(self, user_id: str) -> bool:
        self.store.journal.append(("delete_user", user_id))
        if self.store.users.pop(user_id, None) is None:
            return False
        self.store.passwords.pop(user_id, None)
        self.store.user_roles.pop(user_id, None)
        return True

    def _filtered(self, search: str | None) -> list[UserResult]:
        return [
            u
            for u in self.store.users.values()
            if _matches(search, u.email, u.first_name, u.last_name)
        ]

    async def list_users(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> list[UserResult]:
        users = sorted(self._filtered(search), key=lambda u: u.created_at, reverse=True)
        return users[skip : skip + limit]

    async def count_users(self, search: str | None = None) -> int:
        return len(self._filtered(search))


class FakeRoleRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        return self.store.roles.get(role_id)

    async def get_by_name(self, name: str) -> RoleResult | None:
        return next((r for r in self.store.roles.values() if r.name == name), None)

    async def get_by_ids(self, role_ids: list[str]) -> list[RoleResult]:
        return [self.store.roles[rid] for rid in role_ids if rid in self.store.roles]

    async def create_role(self, name: str, description: str | None = None) -> RoleResult:
        if await self.get_by_name(name):
            raise ConflictException("Role with this name already exists", "ROLE_ALREADY_EXISTS")
        return self.store.add_role(name, description)

    async def update_role(self, role_id: str, changes: RoleUpdate) -> RoleResult | None:
        role = self.store.roles.get(role_id)
        if role is None:
            return None
        fields: dict[str, object] = {}
        if changes.name is not None:
            fields["name"] = changes.name
        if changes.description is not None:
            fields["description"] = changes.description
        updated = replace(role, **fields, updated_at=self.store.now())
        self.store.roles[role_id] = updated
        return updated

    async def delete_role(self, role_id: str) -> bool:
        if self.store.roles.pop(role_id, None) is None:
            return False
        self.store.role_permissions.pop(role_id, None)
        return True

    def _filtered(self, search: str | None) -> list[RoleResult]:
        return [r for r in self.store.roles.values() if _matches(search, r.name, r.description)]

    async def list_roles(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> list[RoleResult]:
        return sorted(self._filtered(search), key=lambda r: r.name)[skip : skip + limit]

    async def count_roles(self, search: str | None = None) -> int:
        return len(self._filtered(search))


class FakePermissionRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_by_id(self, permission_id: str) -> PermissionResult | None:
        return self.store.permissions.get(permission_id)

    async def get_by_name(self, name: str) -> PermissionResult | None:
        return next((p for p in self.store.permissions.values() if p.name == name), None)

    async def get_by_ids(self, permission_ids: list[str]) -> list[PermissionResult]:
        return [
            self.store.permissions[pid]
            for pid in permission_ids
            if pid in self.store.permissions
        ]

    async def create_permission(
        self, resource: str, action: str, description: str | None = None
    ) -> PermissionResult:
        if await self.get_by_name(f"{resource}:{action}"):
            raise ConflictException(
                "Permission with this name already exists", "PERMISSION_ALREADY_EXISTS"
            )
        permission = self.store.add_permission(resource, action)
        if description is not None:
            permission = replace(permission, description=description)
            self.store.permissions[permission.id] = permission
        return permission

    async def update_permission(
        self, permission_id: str, changes: PermissionUpdate
    ) -> PermissionResult | None:
        permission = self.store.permissions.get(permission_id)
        if permission is None:
            return None
        resource = changes.resource if changes.resource is not None else permission.resource
        action = changes.action if changes.action is not None else permission.action
        updated = replace(
            permission,
            resource=resource,
            action=action,
            name=f"{resource}:{action}",
            description=(
                changes.description
                if changes.description is not None
                else permission.description
            ),
            updated_at=self.store.now(),
        )
        self.store.permissions[permission_id] = updated
        return updated

    async def delete_permission(self, permission_id: str) -> bool:
        return self.store.permissions.pop(permission_id, None) is not None

    def _ordered(self, search: str | None = None) -> list[PermissionResult]:
        return sorted(
            (
                p
                for p in self.store.permissions.values()
                if _matches(search, p.name, p.description)
            ),
            key=lambda p: (p.resource, p.action),
        )

    async def list_permissions(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> list[PermissionResult]:
        return self._ordered(search)[skip : skip + limit]

    async def count_permissions(self, search: str | None = None) -> int:
        return len(self._ordered(search))

    async def list_all_ordered(self) -> list[PermissionResult]:
        return self._ordered()

    async def get_by_resource(self, resource: str) -> list[PermissionResult]:
        return [p for p in self._ordered() if p.resource == resource]


class FakeRolePermissionRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_permissions_for_role(self, role_id: str) -> list[PermissionResult]:
        ids = self.store.role_permissions.get(role_id, [])
        return sorted((self.store.permissions[pid] for pid in ids), key=lambda p: p.name)

    async def get_permissions_for_roles(
        self, role_ids: list[str]
    ) -> dict[str, list[PermissionResult]]:
        return {rid: await self.get_permissions_for_role(rid) for rid in role_ids}

    async def get_roles_for_permission(self, permission_id: str) -> list[RoleResult]:
        return sorted(
            (
                self.store.roles[rid]
                for rid, ids in self.store.role_permissions.items()
                if permission_id in ids
            ),
            key=lambda r: r.name,
        )

    async def has_assignment(self, role_id: str, permission_id: str) -> bool:
        return permission_id in self.store.role_permissions.get(role_id, [])

    async def assign_permission_to_role(self, role_id: str, permission_id: str) -> None:
        if await self.has_assignment(role_id, permission_id):
            raise DuplicateAssignmentException(
                "Permission already assigned to this role", assignment_type="role_permission"
            )
        self.store.role_permissions.setdefault(role_id, []).append(permission_id)

    async def remove_permission_from_role(self, role_id: str, permission_id: str) -> bool:
        ids = self.store.role_permissions.get(role_id, [])
        if permission_id not in ids:
            return False
        ids.remove(permission_id)
        return True

    async def replace_role_permissions(self, role_id: str, permission_ids: list[str]) -> None:
        self.store.role_permissions[role_id] = list(dict.fromkeys(permission_ids))

    async def count_for_permission(self, permission_id: str) -> int:
        return sum(1 for ids in self.store.role_permissions.values() if permission_id in ids)


class FakeUserRoleRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    def _to_result(self, edge: _UserEdge) -> RoleAssignmentResult:
        return RoleAssignmentResult(
            role=self.store.roles[edge.role_id],
            assigned_at=edge.assigned_at,
            assigned_by=edge.assigned_by,
        )

    async def get_user_roles(self, user_id: str) -> list[RoleAssignmentResult]:
        return [self._to_result(e) for e in self.store.user_roles.get(user_id, [])]

    async def get_roles_for_users(
        self, user_ids: list[str]
    ) -> dict[str, list[RoleAssignmentResult]]:
        return {uid: await self.get_user_roles(uid) for uid in user_ids}

    async def get_assignment(self, user_id: str, role_id: str) -> RoleAssignmentResult | None:
        for edge in self.store.user_roles.get(user_id, []):
            if edge.role_id == role_id:
                return self._to_result(edge)
        return None

    async def count_for_user(self, user_id: str) -> int:
        self.store.journal.append(("count", user_id))
        return len(self.store.user_roles.get(user_id, []))

    async def count_for_role(self, role_id: str) -> int:
        return sum(
            1
            for edges in self.store.user_roles.values()
            if any(e.role_id == role_id for e in edges)
        )

    async def count_for_roles(self, role_ids: list[str]) -> dict[str, int]:
        return {rid: await self.count_for_role(rid) for rid in role_ids}

    async def get_role_holders(self, role_id: str) -> list[RoleHolder]:
        holders = [
            (edge, self.store.users[uid])
            for uid, edges in self.store.user_roles.items()
            for edge in edges
            if edge.role_id == role_id
        ]
        holders.sort(key=lambda pair: (pair[0].assigned_at, pair[1].email))
        return [
            RoleHolder(
                user_id=user.id,
                email=user.email,
                first_name=user.first_name,
                last_name=user.last_name,
                is_active=user.is_active,
                assigned_at=edge.assigned_at,
            )
            for edge, user in holders
        ]

    async def remove_role_from_user(self, user_id: str, role_id: str) -> bool:
        self.store.journal.append(("remove", user_id))
        edges = self.store.user_roles.get(user_id, [])
        for edge in edges:
            if edge.role_id == role_id:
                edges.remove(edge)
                return True
        return False

    async def replace_user_roles(
        self, user_id: str, role_ids: list[str], assigned_by: str | None = None
    ) -> None:
        self.store.journal.append(("replace", user_id))
        now = self.store.now()
        self.store.user_roles[user_id] = [
            _UserEdge(role_id=rid, assigned_at=now, assigned_by=assigned_by)
            for rid in dict.fromkeys(role_ids)
        ]


class FakePermissionResolver:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def get_user_role_names(self, user_id: str) -> set[str]:
        return {
            self.store.roles[e.role_id].name for e in self.store.user_roles.get(user_id, [])
        }

    async def get_user_permissions(self, user_id: str) -> set[str]:
        return {g.permission.name for g in await self.get_permission_grants(user_id)}

    async def get_permissions_for_users(self, user_ids: list[str]) -> dict[str, set[str]]:
        return {uid: await self.get_user_permissions(uid) for uid in user_ids}

    async def get_permission_grants(self, user_id: str) -> list[PermissionGrant]:
        grants: dict[str, PermissionGrant] = {}
        edges = sorted(
            self.store.user_roles.get(user_id, []),
            key=lambda e: (e.assigned_at, self.store.roles[e.role_id].name),
        )
        for edge in edges:
            role = self.store.roles[edge.role_id]
            permissions = sorted(
                (self.store.permissions[pid] for pid in self.store.role_permissions[role.id]),
                key=lambda p: p.name,
            )
            for permission in permissions:
                grants.setdefault(
                    permission.id, PermissionGrant(permission=permission, granted_by=role.name)
                )
        return list(grants.values())


def seed_system_graph(store: InMemoryStore) -> None:
    """System roles and users/roles/permissions CRUD permissions with the default grants."""
    roles = {name: store.add_role(name) for name in ("super_admin", "admin", "manager", "user")}
    for resource in ("users", "roles", "permissions"):
        for action in ("create", "read", "update", "delete"):
            permission = store.add_permission(resource, action)
            store.grant(roles["super_admin"], permission)
            if resource != "permissions":
                store.grant(roles["admin"], permission)
            if (resource == "users" and action in ("read", "update")) or (
                resource == "roles" and action == "read"
            ):
                store.grant(roles["manager"], permission)
            if action == "read":
                store.grant(roles["user"], permission)
