"""
User Service

Platform user administration (admin API). Passwords are bcrypt-hashed,
responses never include the hash or the API key.
"""

import logging
from typing import Optional
from uuid import UUID

import bcrypt

from src.app.repositories.errors import ConstraintViolationError
from src.app.services.base import DEFAULT_PAGE_SIZE, changes_from, null_violation
from src.app.services.dtos import PageResponse, UserCreate, UserResponse, UserUpdate
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import User
from src.libs.result import Error, Result, Return

logger = logging.getLogger(__name__)

USER_NOT_FOUND = Error("USER_NOT_FOUND", "User not found")
EMAIL_EXISTS = Error("EMAIL_ALREADY_EXISTS", "Email already registered")


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds)).decode()


class UserService:
    def __init__(self, uow: UnitOfWork, bcrypt_rounds: int = 10):
        self.uow = uow
        self.bcrypt_rounds = bcrypt_rounds

    async def create(self, command: UserCreate) -> Result[UserResponse]:
        user = User(
            email=command.email.lower(),
            password_hash=hash_password(command.password, self.bcrypt_rounds),
            role=command.role,
            is_active=command.is_active,
        )
        async with self.uow:
            try:
                user = await self.uow.users.create(user)
            except ConstraintViolationError:
                return Return.err(EMAIL_EXISTS)

            await self.uow.commit()
            logger.info("User created: %s (%s)", user.email, user.role.value)
            return Return.ok(UserResponse.model_validate(user))

    async def get(self, user_id: UUID) -> Result[UserResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(USER_NOT_FOUND)
            return Return.ok(UserResponse.model_validate(user))

    async def list(
        self, limit: int = DEFAULT_PAGE_SIZE, offset: int = 0
    ) -> Result[PageResponse[UserResponse]]:
        async with self.uow:
            users, total = await self.uow.users.list(limit, offset)
            data = [UserResponse.model_validate(u) for u in users]
            return Return.ok(PageResponse[UserResponse].build(data, total, limit, offset))

    async def update(self, user_id: UUID, command: UserUpdate) -> Result[UserResponse]:
        fields = changes_from(command)
        password: Optional[str] = fields.pop("password", None)
        error = null_violation(User, fields)
        if error:
            return Return.err(error)
        if "email" in fields:
            fields["email"] = fields["email"].lower()

        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(USER_NOT_FOUND)

            for key, value in fields.items():
                setattr(user, key, value)
            if password:
                user.password_hash = hash_password(password, self.bcrypt_rounds)
            try:
                user = await self.uow.users.update(user)
            except ConstraintViolationError:
                return Return.err(EMAIL_EXISTS)

            await self.uow.commit()
            return Return.ok(UserResponse.model_validate(user))

    async def delete(self, user_id: UUID) -> Result[None]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(USER_NOT_FOUND)
            try:
                await self.uow.users.delete(user)
            except ConstraintViolationError:
                return Return.err(Error("USER_IN_USE", "User still has orders"))

            await self.uow.commit()
            return Return.ok(None)
