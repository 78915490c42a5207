import uuid
from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError

from models.enums import UserRole
from models.models import Rental, User
from models.utils import LIKE_ESCAPE, contains_pattern


class AuthRepo:
    def __init__(self, db):
        self.db = db

    async def by_id(self, user_id: uuid.UUID) -> Optional[User]:
        stmt = select(User).where(User.id == user_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> User | None:
        email_payload = email.strip().lower()
        result = await self.db.execute(select(User).where(User.email == email_payload))
        return result.scalar_one_or_none()

    async def create(self, user: User) -> User:
        if user.id is not None:
            raise ValueError(
                "create() called with existing user, use update() instead"
            )
        self.db.add(user)
        return await self._commit_and_refresh(user)

    async def update(self, user: User) -> User:
        if user.id is None:
            raise ValueError("update() called with no ID, use create() instead")

        self.db.add(user)
        return await self._commit_and_refresh(user)

    async def search(
        self,
        *,
        search: str | None = None,
        role: UserRole | None = None,
        is_active: bool | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[User], int]:
        conditions = []
        if search:
            pattern = contains_pattern(search.lower())
            conditions.append(
                or_(
                    func.lower(User.name).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(User.email).like(pattern, escape=LIKE_ESCAPE),
                    User.phone.like(contains_pattern(search), escape=LIKE_ESCAPE),
                )
            )
        if role is not None:
            conditions.append(User.role == role)
        if is_active is not None:
            conditions.append(User.is_active == is_active)

        total = await self.db.scalar(
            select(func.count()).select_from(User).where(*conditions)
        )
        result = await self.db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    async def recent_tenants(self, limit: int = 5) -> list[User]:
        result = await self.db.execute(
            select(User)
            .where(User.role == UserRole.TENANT)
            .order_by(User.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def rental_history(self, user_id: uuid.UUID) -> list[Rental]:
        result = await self.db.execute(
            select(Rental)
            .where(Rental.tenant_id == user_id)
            .order_by(Rental.created_at.desc())
        )
        return list(result.scalars().all())

    async def _commit_and_refresh(self, user: User) -> User:
        try:
            await self.db.commit()
            await self.db.refresh(user)
            return user
        except SQLAlchemyError:
            await self.db.rollback()
            raise
