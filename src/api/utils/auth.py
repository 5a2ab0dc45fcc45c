"""
Authentication dependencies.

Admin routes accept an admin JWT (ADMIN_JWT_SECRET) or an X-API-Key that
belongs to an active admin. Tenant write routes require a tenant JWT
(TENANT_JWT_SECRET) issued for the tenant in the path.
"""

from typing import Optional

from fastapi import Depends, Header, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.api.error import ForbiddenError, UnauthorizedError
from src.api.utils.jwt import decode_admin_token, decode_tenant_token
from src.api.utils.tenant import resolve_tenant
from src.app.services.dtos import Identity, TenantResponse
from src.app.services.unit_of_work import UnitOfWork
from src.depends import get_unit_of_work
from src.domain.entities import UserRole
from src.libs.result import Error

ADMIN_ROLES = (UserRole.admin.value, UserRole.super_admin.value)

security = HTTPBearer(auto_error=False)


def _admin_identity(request: Request, token: str) -> Optional[Identity]:
    payload = decode_admin_token(token, request.app.state.config)
    if payload is None or payload.get("role") not in ADMIN_ROLES:
        return None
    return Identity(id=payload["id"], email=payload["email"], role=payload["role"])


async def verify_admin_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """
    Require a valid admin bearer token.

    Raises:
        UnauthorizedError: 401 if the token is missing, invalid or expired
    """
    if credentials is None:
        raise UnauthorizedError(Error("UNAUTHORIZED", "Authentication required"))

    identity = _admin_identity(request, credentials.credentials)
    if identity is None:
        raise UnauthorizedError(Error("INVALID_TOKEN", "Invalid or expired token"))

    request.state.admin = identity
    return identity


async def verify_admin_token_or_api_key(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    x_api_key: Optional[str] = Header(None, alias="X-API-Key"),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Identity:
    """Admin bearer token, else a static API key owned by an active admin"""
    if credentials is not None:
        identity = _admin_identity(request, credentials.credentials)
        if identity is not None:
            request.state.admin = identity
            return identity
        if not x_api_key:
            raise UnauthorizedError(Error("INVALID_TOKEN", "Invalid or expired token"))

    if not x_api_key:
        raise UnauthorizedError(Error("UNAUTHORIZED", "Authentication required"))

    async with uow:
        user = await uow.users.get_by_api_key(x_api_key)
        if user is None or not user.is_active or user.role.value not in ADMIN_ROLES:
            raise UnauthorizedError(Error("INVALID_API_KEY", "Invalid API key"))
        identity = Identity(
            id=str(user.id), email=user.email, role=user.role.value, auth_method="api_key"
        )

    request.state.admin = identity
    return identity


def _tenant_identity(request: Request, token: str) -> Optional[Identity]:
    payload = decode_tenant_token(token, request.app.state.config)
    if payload is None:
        return None
    return Identity(
        id=payload["id"],
        email=payload["email"],
        role=payload["role"],
        tenant_id=payload["tenant_id"],
        tenant_slug=payload.get("tenant_slug"),
    )


async def verify_tenant_token(
    request: Request,
    tenant: TenantResponse = Depends(resolve_tenant),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Identity:
    """
    Require a tenant bearer token issued for the resolved tenant.

    Raises:
        UnauthorizedError: 401 if the token is missing or invalid
        ForbiddenError: 403 if the token belongs to another tenant
    """
    if credentials is None:
        raise UnauthorizedError(Error("UNAUTHORIZED", "Authentication required"))

    identity = _tenant_identity(request, credentials.credentials)
    if identity is None:
        raise UnauthorizedError(Error("INVALID_TOKEN", "Invalid or expired token"))
    if identity.tenant_id != str(tenant.id):
        raise ForbiddenError(Error("TENANT_MISMATCH", "Token was issued for another tenant"))

    request.state.user = identity
    return identity


async def optional_tenant_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Identity]:
    """Attach the tenant identity when a valid token is present, never reject"""
    if credentials is None:
        return None

    identity = _tenant_identity(request, credentials.credentials)
    tenant = getattr(request.state, "tenant", None)
    if identity is None or tenant is None or identity.tenant_id != str(tenant.id):
        return None

    request.state.user = identity
    return identity
