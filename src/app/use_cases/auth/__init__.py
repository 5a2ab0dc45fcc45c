"""
Authentication Use Cases
"""

from .admin_login_use_case import AdminLoginUseCase
from .generate_api_key_use_case import GenerateApiKeyUseCase
from .issue_tenant_token_use_case import IssueTenantTokenUseCase
from .ensure_super_admin_use_case import EnsureSuperAdminUseCase
from .dtos import AdminLoginResponse, AdminUser, GenerateApiKeyResponse, TenantTokenResponse

__all__ = [
    # Use Cases
    "AdminLoginUseCase",
    "GenerateApiKeyUseCase",
    "IssueTenantTokenUseCase",
    "EnsureSuperAdminUseCase",
    # DTOs
    "AdminLoginResponse",
    "AdminUser",
    "GenerateApiKeyResponse",
    "TenantTokenResponse",
]
