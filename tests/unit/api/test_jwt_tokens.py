from datetime import UTC, datetime, timedelta

from jose import jwt

from src.api.utils.jwt import (
    ALGORITHM,
    decode_admin_token,
    decode_tenant_token,
    generate_admin_token,
    generate_tenant_token,
)


class Secrets:
    ADMIN_JWT_SECRET = "admin-secret"
    TENANT_JWT_SECRET = "tenant-secret"
    JWT_EXPIRES_HOURS = 1


def test_admin_token_round_trip():
    token = generate_admin_token("u-1", "root@example.com", "super_admin", config=Secrets)

    claims = decode_admin_token(token, config=Secrets)

    assert claims["id"] == "u-1"
    assert claims["role"] == "super_admin"
    assert claims["exp"] - claims["iat"] == 3600


def test_admin_token_rejected_as_tenant_token():
    token = generate_admin_token("u-1", "root@example.com", "admin", config=Secrets)

    assert decode_tenant_token(token, config=Secrets) is None


def test_tenant_token_carries_tenant():
    token = generate_tenant_token("u-1", "a@example.com", "admin", "t-1", "acme", config=Secrets)

    claims = decode_tenant_token(token, config=Secrets)

    assert claims["tenant_id"] == "t-1"
    assert claims["tenant_slug"] == "acme"
    assert decode_admin_token(token, config=Secrets) is None


def test_tenant_secret_token_without_tenant_id_is_rejected():
    token = jwt.encode({"id": "u-1"}, Secrets.TENANT_JWT_SECRET, algorithm=ALGORITHM)

    assert decode_tenant_token(token, config=Secrets) is None


def test_expired_token_is_rejected():
    past = datetime.now(UTC) - timedelta(hours=2)
    token = jwt.encode(
        {"id": "u-1", "exp": past + timedelta(hours=1), "iat": past},
        Secrets.ADMIN_JWT_SECRET,
        algorithm=ALGORITHM,
    )

    assert decode_admin_token(token, config=Secrets) is None


def test_garbage_token_is_rejected():
    assert decode_admin_token("not-a-jwt", config=Secrets) is None
