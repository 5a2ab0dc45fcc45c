import bcrypt
import pytest

from src.api.utils.jwt import decode_admin_token
from src.app.use_cases.auth import AdminLoginUseCase
from src.domain.entities import User, UserRole


class Secrets:
    ADMIN_JWT_SECRET = "admin-secret"
    TENANT_JWT_SECRET = "tenant-secret"
    JWT_EXPIRES_HOURS = 1


def make_user(role=UserRole.admin, is_active=True) -> User:
    return User(
        email="admin@example.com",
        password_hash=bcrypt.hashpw(b"correct-horse", bcrypt.gensalt(4)).decode(),
        role=role,
        is_active=is_active,
    )


@pytest.mark.asyncio
async def test_login_success(mock_uow):
    user = make_user()
    mock_uow.users.get_by_email.return_value = user

    result = await AdminLoginUseCase(mock_uow, Secrets).execute("Admin@Example.com", "correct-horse")

    assert result.is_ok()
    mock_uow.users.get_by_email.assert_awaited_once_with("admin@example.com")
    claims = decode_admin_token(result.value.token, config=Secrets)
    assert claims["id"] == str(user.id)
    assert result.value.user.role == "admin"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "user, password",
    [
        (None, "correct-horse"),
        (make_user(), "wrong-password"),
        (make_user(role=UserRole.user), "correct-horse"),
        (make_user(is_active=False), "correct-horse"),
    ],
    ids=["unknown-email", "wrong-password", "not-admin", "inactive"],
)
async def test_login_failures_look_the_same(mock_uow, user, password):
    mock_uow.users.get_by_email.return_value = user

    result = await AdminLoginUseCase(mock_uow, Secrets).execute("admin@example.com", password)

    assert result.is_err()
    assert result.error.code == "INVALID_CREDENTIALS"
