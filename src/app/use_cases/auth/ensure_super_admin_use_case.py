"""
Ensure Super Admin Use Case

Boot step: guarantees the configured super admin account exists.
"""

import logging
from typing import Optional

from src.app.services.unit_of_work import UnitOfWork
from src.app.services.user_service import hash_password
from src.domain.entities import User, UserRole
from src.libs.result import Result, Return

logger = logging.getLogger(__name__)


class EnsureSuperAdminUseCase:
    """
    Business Rules:
    - Creates the account when the email is unknown
    - Existing account is promoted to super_admin and reactivated
    - A configured API key is written when it differs from the stored one
    - The stored password is never overwritten
    """

    def __init__(self, uow: UnitOfWork, bcrypt_rounds: int = 10):
        self.uow = uow
        self.bcrypt_rounds = bcrypt_rounds

    async def execute(
        self, email: str, password: str, api_key: Optional[str] = None
    ) -> Result[str]:
        email = email.lower()
        async with self.uow:
            user = await self.uow.users.get_by_email(email)

            if user is None:
                user = await self.uow.users.create(
                    User(
                        email=email,
                        password_hash=hash_password(password, self.bcrypt_rounds),
                        role=UserRole.super_admin,
                        api_key=api_key or None,
                    )
                )
                await self.uow.commit()
                logger.info("Super admin created: %s", email)
                return Return.ok(str(user.id))

            changed = False
            if user.role != UserRole.super_admin or not user.is_active:
                user.role = UserRole.super_admin
                user.is_active = True
                changed = True
            if api_key and user.api_key != api_key:
                user.api_key = api_key
                changed = True

            if changed:
                await self.uow.users.update(user)
                await self.uow.commit()
                logger.info("Super admin updated: %s", email)
            return Return.ok(str(user.id))
