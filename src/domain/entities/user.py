"""
User Entity

Platform account. Admin and super admin users operate the admin API.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import Column, DateTime, Field, SQLModel

from src.domain.base import utc_now
from .enums import UserRole


class User(SQLModel, table=True):
    """
    User entity.

    Business Rules:
    - Email must be unique across all users
    - Password stored as bcrypt hash
    - api_key is an alternate admin credential, unique when set
    """

    __tablename__ = "users"

    id: UUID = Field(default_factory=uuid4, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255)
    password_hash: str = Field(max_length=60)  # Bcrypt output is 60 chars

    role: UserRole = Field(default=UserRole.user)
    api_key: Optional[str] = Field(default=None, unique=True, index=True, max_length=128)
    is_active: bool = Field(default=True)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
    updated_at: datetime = Field(default_factory=utc_now, sa_column=Column(DateTime))
