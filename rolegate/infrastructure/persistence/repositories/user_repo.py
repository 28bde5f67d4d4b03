"""User repository. Interface methods return application DTOs; the password hash
is only exposed through UserCredentials for the credential check."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from rolegate.application.dtos.user import UserCredentials, UserResult, UserUpdate
from rolegate.domain.exceptions import DuplicateEmailException, UserAlreadyExistsException
from rolegate.infrastructure.persistence.models.user import User
from rolegate.infrastructure.persistence.repositories.base import BaseRepository


def user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (no password)."""
    return UserResult(
        id=u.id,
        email=u.email,
        first_name=u.first_name,
        last_name=u.last_name,
        is_active=u.is_active,
        email_verified=u.email_verified,
        avatar_url=u.avatar_url,
        created_at=u.created_at,
        updated_at=u.updated_at,
    )


def _user_to_credentials(u: User) -> UserCredentials:
    return UserCredentials(user=user_to_result(u), hashed_password=u.hashed_password)


class UserRepository(BaseRepository[User]):
    """User repository. create_user, update_user, set_password, delete_user, list_users."""

    search_columns = ("email", "first_name", "last_name")

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def _get_entity_by_email(self, email: str) -> User | None:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: str) -> UserResult | None:
        user = await self.get_entity_by_id(user_id)
        return user_to_result(user) if user else None

    async def get_by_email(self, email: str) -> UserResult | None:
        user = await self._get_entity_by_email(email)
        return user_to_result(user) if user else None

    async def get_credentials_by_email(self, email: str) -> UserCredentials | None:
        user = await self._get_entity_by_email(email)
        return _user_to_credentials(user) if user else None

    async def get_credentials_by_id(self, user_id: str) -> UserCredentials | None:
        user = await self.get_entity_by_id(user_id)
        return _user_to_credentials(user) if user else None

    async def create_user(
        self,
        email: str,
        hashed_password: str,
        first_name: str,
        last_name: str,
    ) -> UserResult:
        """Create user; raise UserAlreadyExistsException on unique constraint violation."""
        user = User(
            email=email,
            hashed_password=hashed_password,
            first_name=first_name,
            last_name=last_name,
            is_active=True,
            email_verified=False,
        )
        try:
            created = await self.create(user)
        except IntegrityError:
            raise UserAlreadyExistsException() from None
        return user_to_result(created)

    async def update_user(self, user_id: str, changes: UserUpdate) -> UserResult | None:
        """Apply present fields; raise DuplicateEmailException on unique constraint."""
        user = await self.get_entity_by_id(user_id)
        if not user:
            return None
        for field, value in changes.changes().items():
            setattr(user, field, value)
        try:
            updated = await self.save(user)
        except IntegrityError:
            raise DuplicateEmailException() from None
        return user_to_result(updated)

    async def set_password(self, user_id: str, hashed_password: str) -> bool:
        user = await self.get_entity_by_id(user_id)
        if not user:
            return False
        user.hashed_password = hashed_password
        await self.save(user)
        return True

    async def lock_for_update(self, user_id: str) -> bool:
        """SELECT ... FOR UPDATE on the user row; held until commit or rollback."""
        result = await self.db.execute(
            select(User.id).where(User.id == user_id).with_for_update()
        )
        return result.scalar_one_or_none() is not None

    async def delete_user(self, user_id: str) -> bool:
        user = await self.get_entity_by_id(user_id)
        if not user:
            return False
        await self.delete(user)
        return True

    async def list_users(
        self, skip: int = 0, limit: int = 100, search: str | None = None
    ) -> list[UserResult]:
        query = self._apply_search(select(User), search)
        result = await self.db.execute(
            query.order_by(User.created_at.desc(), User.id).offset(skip).limit(limit)
        )
        return [user_to_result(u) for u in result.scalars().all()]

    async def count_users(self, search: str | None = None) -> int:
        return await self._count(search)
