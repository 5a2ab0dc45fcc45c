"""
Use Cases

Authentication flows that are not plain entity CRUD.
"""

from .auth import (
    AdminLoginUseCase,
    EnsureSuperAdminUseCase,
    GenerateApiKeyUseCase,
    IssueTenantTokenUseCase,
)

__all__ = [
    "AdminLoginUseCase",
    "EnsureSuperAdminUseCase",
    "GenerateApiKeyUseCase",
    "IssueTenantTokenUseCase",
]
