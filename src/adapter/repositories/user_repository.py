from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories.base import flush_or_conflict
from src.app.repositories.user_repository import IUserRepository
from src.domain.base import utc_now
from src.domain.entities import User


class UserRepository(IUserRepository):
    """User repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address"""
        stmt = select(User).where(User.email == email)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        stmt = select(User).where(User.id == user_id)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def get_by_api_key(self, api_key: str) -> Optional[User]:
        stmt = select(User).where(User.api_key == api_key)
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def list(self, limit: int = 50, offset: int = 0) -> Tuple[List[User], int]:
        total = (await self.session.exec(select(func.count()).select_from(User))).one()
        stmt = (
            select(User)
            .order_by(User.created_at.desc(), User.id)
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.exec(stmt)
        return list(result.all()), total

    async def create(self, user: User) -> User:
        """Create a new user"""
        self.session.add(user)
        await flush_or_conflict(self.session)
        await self.session.refresh(user)
        return user

    async def update(self, user: User) -> User:
        """Update existing user"""
        user.updated_at = utc_now()
        self.session.add(user)
        await flush_or_conflict(self.session)
        await self.session.refresh(user)
        return user

    async def delete(self, user: User) -> None:
        await self.session.delete(user)
        await flush_or_conflict(self.session)
