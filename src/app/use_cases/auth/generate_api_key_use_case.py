import logging
import secrets
from uuid import UUID

from src.app.services.unit_of_work import UnitOfWork
from src.libs.result import Error, Result, Return
from .dtos import AdminUser, GenerateApiKeyResponse

logger = logging.getLogger(__name__)


def new_api_key() -> str:
    return f"sk_{secrets.token_hex(24)}"


class GenerateApiKeyUseCase:
    """Issue a new static API key for an admin, replacing any previous key"""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    async def execute(self, user_id: UUID) -> Result[GenerateApiKeyResponse]:
        async with self.uow:
            user = await self.uow.users.get_by_id(user_id)
            if user is None:
                return Return.err(Error("USER_NOT_FOUND", "User not found"))

            user.api_key = new_api_key()
            user = await self.uow.users.update(user)
            await self.uow.commit()

            logger.info("API key rotated for %s", user.email)
            return Return.ok(
                GenerateApiKeyResponse(
                    api_key=user.api_key,
                    user=AdminUser(id=str(user.id), email=user.email, role=user.role.value),
                )
            )
