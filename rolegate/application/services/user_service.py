"""User application service: credentials, identity lifecycle and role assignment.

Password hashing and comparison run in a worker thread (bcrypt is CPU bound).
Role-assignment rules: every identity keeps at least one role, super_admin
cannot be taken away, and nobody deletes themselves.
"""

from __future__ import annotations

import asyncio
import logging

from rolegate.application.dtos.permission import PermissionGrant
from rolegate.application.dtos.user import UserDetail, UserResult, UserUpdate
from rolegate.application.interfaces.repositories import (
    IRoleRepository,
    IUserRepository,
    IUserRoleRepository,
)
from rolegate.application.interfaces.services import IPermissionResolver, ISecurityService
from rolegate.domain.enums import DEFAULT_ROLE_NAME, SystemRole
from rolegate.domain.exceptions import (
    AuthenticationException,
    AuthorizationException,
    DuplicateEmailException,
    InfrastructureException,
    InvalidReferenceException,
    PasswordPolicyException,
    ResourceNotFoundException,
    UserAlreadyExistsException,
    ValidationException,
)

logger = logging.getLogger(__name__)

_MSG_INVALID_CREDENTIALS = "Invalid credentials"
_MSG_USER_NOT_FOUND = "User not found"
_MSG_INVALID_ROLES = "One or more role IDs are invalid"
_SUPER_ADMIN = SystemRole.SUPER_ADMIN.value


class UserService:
    """Identity records, password verification and identity-role edges."""

    def __init__(
        self,
        user_repo: IUserRepository,
        role_repo: IRoleRepository,
        user_role_repo: IUserRoleRepository,
        permission_resolver: IPermissionResolver,
        auth_security: ISecurityService,
    ) -> None:
        self._user_repo = user_repo
        self._role_repo = role_repo
        self._user_role_repo = user_role_repo
        self._resolver = permission_resolver
        self._auth_security = auth_security

    def _enforce_password_policy(self, password: str, field: str = "password") -> None:
        errors = self._auth_security.validate_password(password)
        if errors:
            raise PasswordPolicyException(errors, field=field)

    async def _get_or_404(self, user_id: str) -> UserResult:
        user = await self._user_repo.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundException("user", user_id, _MSG_USER_NOT_FOUND)
        return user

    async def _lock_or_404(self, user_id: str) -> None:
        if not await self._user_repo.lock_for_update(user_id):
            raise ResourceNotFoundException("user", user_id, _MSG_USER_NOT_FOUND)

    async def _validate_role_ids(self, role_ids: list[str]) -> list[str]:
        unique_ids = list(dict.fromkeys(role_ids))
        found = {r.id for r in await self._role_repo.get_by_ids(unique_ids)}
        invalid = [rid for rid in unique_ids if rid not in found]
        if invalid:
            raise InvalidReferenceException(
                _MSG_INVALID_ROLES, field="role_ids", invalid_ids=invalid
            )
        return unique_ids

    async def _to_detail(self, user: UserResult) -> UserDetail:
        roles = await self._user_role_repo.get_user_roles(user.id)
        permissions = await self._resolver.get_user_permissions(user.id)
        return UserDetail(
            user=user,
            roles=tuple(roles),
            permissions=tuple(sorted(permissions)),
        )

    # ---- Credentials ----

    async def verify_credentials(self, email: str, password: str) -> UserResult:
        """Return the identity when email and password match.

        Unknown email and wrong password fail identically; a dummy comparison
        keeps their timing alike. No state changes on failure.

        Raises:
            AuthenticationException: Invalid credentials or deactivated account.
        """
        credentials = await self._user_repo.get_credentials_by_email(email)
        if credentials is None:
            dummy_hash = await self._auth_security.dummy_hash()
            await asyncio.to_thread(self._auth_security.verify_password, password, dummy_hash)
            logger.info("Login failed: unknown email")
            raise AuthenticationException(_MSG_INVALID_CREDENTIALS)
        matches = await asyncio.to_thread(
            self._auth_security.verify_password, password, credentials.hashed_password
        )
        if not matches:
            logger.info("Login failed: wrong password for user %s", credentials.user.id)
            raise AuthenticationException(_MSG_INVALID_CREDENTIALS)
        if not credentials.user.is_active:
            logger.info("Login rejected: user %s is deactivated", credentials.user.id)
            raise AuthenticationException("Account is deactivated")
        return credentials.user

    async def create_user(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role_ids: list[str] | None = None,
        created_by: str | None = None,
    ) -> UserDetail:
        """Create an identity holding role_ids (the default role when none are given).

        assigned_by on the new edges is created_by, or the new identity itself
        for self-registration.

        Raises:
            UserAlreadyExistsException: Email already registered.
            PasswordPolicyException: Weak password (every failing rule listed).
            InvalidReferenceException: Unknown role ids.
        """
        if await self._user_repo.get_by_email(email):
            raise UserAlreadyExistsException()
        self._enforce_password_policy(password)
        if role_ids:
            unique_ids = await self._validate_role_ids(role_ids)
        else:
            default_role = await self._role_repo.get_by_name(DEFAULT_ROLE_NAME)
            if not default_role:
                logger.error("Default role %r is missing; seed system roles", DEFAULT_ROLE_NAME)
                raise InfrastructureException("Default role is not configured")
            unique_ids = [default_role.id]
        hashed = await asyncio.to_thread(self._auth_security.hash_password, password)
        user = await self._user_repo.create_user(
            email=email,
            hashed_password=hashed,
            first_name=first_name,
            last_name=last_name,
        )
        await self._user_role_repo.replace_user_roles(
            user.id, unique_ids, assigned_by=created_by or user.id
        )
        logger.info("User created: %s (roles=%d)", user.id, len(unique_ids))
        return await self._to_detail(user)

    async def change_password(
        self, user_id: str, current_password: str, new_password: str
    ) -> None:
        """Replace the password after verifying the current one.

        Raises:
            AuthenticationException: Current password does not match.
            PasswordPolicyException: New password is weak.
        """
        credentials = await self._user_repo.get_credentials_by_id(user_id)
        if credentials is None:
            raise ResourceNotFoundException("user", user_id, _MSG_USER_NOT_FOUND)
        matches = await asyncio.to_thread(
            self._auth_security.verify_password,
            current_password,
            credentials.hashed_password,
        )
        if not matches:
            raise AuthenticationException("Invalid current password")
        self._enforce_password_policy(new_password, field="new_password")
        hashed = await asyncio.to_thread(self._auth_security.hash_password, new_password)
        await self._user_repo.set_password(user_id, hashed)
        logger.info("Password changed for user %s", user_id)

    # ---- Identity records ----

    async def get_user(self, user_id: str) -> UserDetail:
        return await self._to_detail(await self._get_or_404(user_id))

    async def list_users(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> tuple[list[UserDetail], int]:
        """Return a page of users (with roles and permissions) and the total matching search."""
        users = await self._user_repo.list_users(skip=skip, limit=limit, search=search)
        total = await self._user_repo.count_users(search=search)
        user_ids = [u.id for u in users]
        roles = await self._user_role_repo.get_roles_for_users(user_ids)
        permissions = await self._resolver.get_permissions_for_users(user_ids)
        items = [
            UserDetail(
                user=user,
                roles=tuple(roles.get(user.id, [])),
                permissions=tuple(sorted(permissions.get(user.id, set()))),
            )
            for user in users
        ]
        return items, total

    async def update_user(self, user_id: str, changes: UserUpdate) -> UserDetail:
        """Apply present fields only.

        Raises:
            DuplicateEmailException: New email belongs to another identity.
        """
        existing = await self._get_or_404(user_id)
        if changes.email is not None and changes.email != existing.email:
            if await self._user_repo.get_by_email(changes.email):
                raise DuplicateEmailException()
        if changes.is_empty():
            return await self._to_detail(existing)
        updated = await self._user_repo.update_user(user_id, changes)
        if updated is None:
            raise ResourceNotFoundException("user", user_id, _MSG_USER_NOT_FOUND)
        return await self._to_detail(updated)

    async def delete_user(self, user_id: str, deleted_by: str) -> None:
        """Hard-delete an identity.

        Raises:
            AuthorizationException: Target holds super_admin, or is the caller.
        """
        await self._lock_or_404(user_id)
        roles = await self._user_role_repo.get_user_roles(user_id)
        if any(assignment.role.name == _SUPER_ADMIN for assignment in roles):
            raise AuthorizationException("Cannot delete super admin user")
        if user_id == deleted_by:
            raise AuthorizationException("Cannot delete your own account")
        await self._user_repo.delete_user(user_id)
        logger.info("User %s deleted by %s", user_id, deleted_by)

    # ---- Role assignment ----

    async def assign_roles(
        self, user_id: str, role_ids: list[str], assigned_by: str | None = None
    ) -> UserDetail:
        """Replace the identity's whole role set in one transaction.

        Raises:
            ValidationException: Empty role_ids or unknown ids.
            AuthorizationException: The new set would drop super_admin.
        """
        if not role_ids:
            raise ValidationException("At least one role is required", field="role_ids")
        await self._lock_or_404(user_id)
        user = await self._get_or_404(user_id)
        unique_ids = await self._validate_role_ids(role_ids)
        current = await self._user_role_repo.get_user_roles(user_id)
        super_admin_ids = {a.role.id for a in current if a.role.name == _SUPER_ADMIN}
        if super_admin_ids and not super_admin_ids <= set(unique_ids):
            raise AuthorizationException("Cannot remove super_admin role")
        await self._user_role_repo.replace_user_roles(
            user_id, unique_ids, assigned_by=assigned_by
        )
        logger.info("User %s roles replaced (%d)", user_id, len(unique_ids))
        return await self._to_detail(user)

    async def remove_role(self, user_id: str, role_id: str) -> None:
        """Remove one role edge.

        The identity row stays locked from the count to the delete, so two
        concurrent removals cannot leave it without roles.

        Raises:
            ResourceNotFoundException: Unknown identity, or it does not hold the role.
            AuthorizationException: The role is super_admin.
            ValidationException: It is the identity's last role.
        """
        await self._lock_or_404(user_id)
        assignment = await self._user_role_repo.get_assignment(user_id, role_id)
        if assignment is None:
            raise ResourceNotFoundException(
                "user_role", f"{user_id}:{role_id}", "User does not have this role"
            )
        if assignment.role.name == _SUPER_ADMIN:
            raise AuthorizationException("Cannot remove super_admin role")
        if await self._user_role_repo.count_for_user(user_id) <= 1:
            raise ValidationException("User must have at least one role", field="role_id")
        await self._user_role_repo.remove_role_from_user(user_id, role_id)
        logger.info("Role %s removed from user %s", role_id, user_id)

    async def get_user_permissions(self, user_id: str) -> list[PermissionGrant]:
        """Return held permissions (one per permission) with the granting role."""
        await self._get_or_404(user_id)
        return await self._resolver.get_permission_grants(user_id)
