"""
Admin Login Use Case

Authenticates an admin or super admin and issues an admin bearer token.
"""

import bcrypt

from config import ApplicationConfig
from src.api.utils.jwt import generate_admin_token
from src.app.services.unit_of_work import UnitOfWork
from src.domain.entities import UserRole
from src.libs.result import Error, Result, Return
from .dtos import AdminLoginResponse, AdminUser

ADMIN_ROLES = (UserRole.admin, UserRole.super_admin)

# Compared against when the email is unknown so both paths cost one bcrypt check
_DUMMY_HASH = bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(4))


class AdminLoginUseCase:
    """
    Use case for admin login.

    Business Rules:
    - Constant-time password comparison to prevent timing attacks
    - User must be active and have role admin or super_admin
    - Every failure is reported as INVALID_CREDENTIALS
    """

    def __init__(self, uow: UnitOfWork, config=ApplicationConfig):
        self.uow = uow
        self.config = config

    async def execute(self, email: str, password: str) -> Result[AdminLoginResponse]:
        invalid = Error("INVALID_CREDENTIALS", "Invalid email or password")

        async with self.uow:
            user = await self.uow.users.get_by_email(email.lower())

            if user is None:
                bcrypt.checkpw(password.encode(), _DUMMY_HASH)
                return Return.err(invalid)

            if not bcrypt.checkpw(password.encode(), user.password_hash.encode()):
                return Return.err(invalid)

            if not user.is_active or user.role not in ADMIN_ROLES:
                return Return.err(invalid)

            token = generate_admin_token(
                str(user.id), user.email, user.role.value, config=self.config
            )
            return Return.ok(
                AdminLoginResponse(
                    token=token,
                    user=AdminUser(id=str(user.id), email=user.email, role=user.role.value),
                )
            )
