from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt

from config import ApplicationConfig

ALGORITHM = "HS256"


def _encode(claims: dict, secret: str, expires_hours: int) -> str:
    now = datetime.now(UTC)
    payload = {
        **claims,
        "exp": now + timedelta(hours=expires_hours),
        "iat": now,
    }
    return jwt.encode(payload, secret, algorithm=ALGORITHM)


def _decode(token: str, secret: str) -> Optional[dict]:
    try:
        return jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None


def generate_admin_token(user_id: str, email: str, role: str, config=ApplicationConfig) -> str:
    """
    Generate admin bearer token

    Args:
        user_id: User UUID as string
        email: User email
        role: admin or super_admin

    Returns:
        JWT token string (HS256, signed with ADMIN_JWT_SECRET)
    """
    claims = {"id": user_id, "email": email, "role": role}
    return _encode(claims, config.ADMIN_JWT_SECRET, config.JWT_EXPIRES_HOURS)


def generate_tenant_token(
    user_id: str,
    email: str,
    role: str,
    tenant_id: str,
    tenant_slug: str,
    config=ApplicationConfig,
) -> str:
    """
    Generate tenant-scoped bearer token

    The tenant_id claim binds the token to one tenant, it is rejected on
    any other tenant's routes.
    """
    claims = {
        "id": user_id,
        "email": email,
        "role": role,
        "tenant_id": tenant_id,
        "tenant_slug": tenant_slug,
    }
    return _encode(claims, config.TENANT_JWT_SECRET, config.JWT_EXPIRES_HOURS)


def decode_admin_token(token: str, config=ApplicationConfig) -> Optional[dict]:
    """Decoded admin claims, or None if the signature or expiry is invalid"""
    return _decode(token, config.ADMIN_JWT_SECRET)


def decode_tenant_token(token: str, config=ApplicationConfig) -> Optional[dict]:
    payload = _decode(token, config.TENANT_JWT_SECRET)
    if payload is None or not payload.get("tenant_id"):
        return None
    return payload
