"""
Authentication Use Case DTOs (Data Transfer Objects)
"""

from pydantic import BaseModel


class AdminUser(BaseModel):
    """Admin identity returned on login"""

    id: str
    email: str
    role: str


class AdminLoginResponse(BaseModel):
    token: str
    user: AdminUser


class GenerateApiKeyResponse(BaseModel):
    """The key is only ever shown in this response"""

    api_key: str
    user: AdminUser


class TenantTokenResponse(BaseModel):
    token: str
    tenant_id: str
    tenant_slug: str
    expires_in: int  # seconds
