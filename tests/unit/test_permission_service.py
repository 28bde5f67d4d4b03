"""Tests for PermissionService: derived names, uniqueness and dependents."""

import pytest

from rolegate.application.dtos.permission import PermissionUpdate
from rolegate.application.services.permission_service import PermissionService
from rolegate.application.services.role_service import RoleService
from rolegate.domain.exceptions import (
    AuthorizationException,
    ConflictException,
    ResourceNotFoundException,
    ValidationException,
)
from tests.fakes import FakePermissionRepository, InMemoryStore


async def test_document_permission_lifecycle(
    store: InMemoryStore, permission_service: PermissionService
) -> None:
    """Create documents:read, reject a duplicate, then rename the action to write."""
    created = await permission_service.create_permission("documents", "read", "Read docs")
    assert created.name == "documents:read"

    with pytest.raises(ConflictException, match="Permission with this name already exists"):
        await permission_service.create_permission("documents", "read")

    updated = await permission_service.update_permission(
        created.id, PermissionUpdate(action="write")
    )
    assert updated.name == "documents:write"
    assert updated.resource == "documents"
    repo = FakePermissionRepository(store)
    assert await repo.get_by_name("documents:read") is None
    assert (await repo.get_by_name("documents:write")).id == created.id


@pytest.mark.parametrize(
    ("resource", "action"),
    [("Documents", "read"), ("documents", "read-all"), ("docs1", "read"), ("documents", "")],
)
async def test_invalid_segments(
    permission_service: PermissionService, resource: str, action: str
) -> None:
    with pytest.raises(ValidationException):
        await permission_service.create_permission(resource, action)


async def test_update_into_existing_name_conflicts(
    store: InMemoryStore, permission_service: PermissionService
) -> None:
    created = await permission_service.create_permission("users", "export")
    with pytest.raises(ConflictException):
        await permission_service.update_permission(created.id, PermissionUpdate(action="read"))
    assert store.permissions[created.id].name == "users:export"


async def test_description_only_update_keeps_name(
    permission_service: PermissionService,
) -> None:
    created = await permission_service.create_permission("users", "export")
    updated = await permission_service.update_permission(
        created.id, PermissionUpdate(description="Export users")
    )
    assert updated.name == "users:export"
    assert updated.description == "Export users"


async def test_delete_in_use_then_unused(
    store: InMemoryStore,
    permission_service: PermissionService,
    role_service: RoleService,
) -> None:
    created = await permission_service.create_permission("reports", "read")
    for name in ("admin", "manager"):
        await role_service.add_permission_to_role(store.role_by_name(name).id, created.id)

    with pytest.raises(AuthorizationException) as exc_info:
        await permission_service.delete_permission(created.id)
    assert exc_info.value.message == "Cannot delete permission. It is assigned to 2 role(s)"
    assert exc_info.value.details["dependent_count"] == 2

    for name in ("admin", "manager"):
        await role_service.remove_permission_from_role(store.role_by_name(name).id, created.id)
    await permission_service.delete_permission(created.id)
    assert created.id not in store.permissions


async def test_get_unknown(permission_service: PermissionService) -> None:
    with pytest.raises(ResourceNotFoundException, match="Permission not found"):
        await permission_service.get_permission("missing")


async def test_get_lists_referencing_roles(
    store: InMemoryStore, permission_service: PermissionService
) -> None:
    permission = next(p for p in store.permissions.values() if p.name == "users:read")
    detail = await permission_service.get_permission(permission.id)
    assert [r.name for r in detail.roles] == ["admin", "manager", "super_admin", "user"]


async def test_grouped_by_resource(permission_service: PermissionService) -> None:
    grouped = await permission_service.list_permissions_by_resource()
    assert list(grouped) == ["permissions", "roles", "users"]
    assert [p.action for p in grouped["users"]] == ["create", "delete", "read", "update"]


async def test_resource_actions(permission_service: PermissionService) -> None:
    actions = await permission_service.get_resource_actions("roles")
    assert [p.name for p in actions] == [
        "roles:create",
        "roles:delete",
        "roles:read",
        "roles:update",
    ]
    assert await permission_service.get_resource_actions("unknown") == []


async def test_list_with_search(permission_service: PermissionService) -> None:
    items, total = await permission_service.list_permissions(search="users", limit=2)
    assert total == 4
    assert len(items) == 2
