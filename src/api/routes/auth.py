from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from src.api.responses import ApiResponse, ok
from src.api.utils.auth import verify_admin_token
from src.api.utils.crud import unwrap
from src.app.services.dtos import Identity
from src.app.services.unit_of_work import UnitOfWork
from src.app.use_cases.auth import (
    AdminLoginResponse,
    AdminLoginUseCase,
    GenerateApiKeyResponse,
    GenerateApiKeyUseCase,
)
from src.depends import get_config, get_unit_of_work

router = APIRouter(prefix="/auth", tags=["Authentication"])


class AdminLoginRequest(BaseModel):
    """
    Admin login HTTP request payload

    Validates incoming credentials before they reach the use case.
    """

    email: EmailStr = Field(..., description="Admin email address")
    password: str = Field(..., min_length=1, description="Admin password")


@router.post(
    "/admin/login",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse[AdminLoginResponse],
)
async def admin_login(
    request: AdminLoginRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    config=Depends(get_config),
):
    """
    Admin Login

    Exchanges admin credentials for a JWT signed with ADMIN_JWT_SECRET.

    Raises:
        - 400 Bad Request: Invalid payload
        - 401 Unauthorized: INVALID_CREDENTIALS (unknown email, wrong
                            password, inactive account or non-admin role)
    """
    use_case = AdminLoginUseCase(uow, config)
    result = await use_case.execute(request.email, request.password)
    return ok(unwrap(result), "Login successful")


@router.post(
    "/admin/api-keys",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[GenerateApiKeyResponse],
)
async def generate_api_key(
    admin: Identity = Depends(verify_admin_token),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Generate API Key

    Issues a new static API key for the calling admin, replacing any
    previous one. The key is only returned here. Requires an admin JWT, an
    API key cannot mint its successor.

    Raises:
        - 401 Unauthorized: Missing or invalid admin token
        - 404 Not Found: USER_NOT_FOUND
    """
    use_case = GenerateApiKeyUseCase(uow)
    result = await use_case.execute(UUID(admin.id))
    return ok(unwrap(result), "API key generated")
