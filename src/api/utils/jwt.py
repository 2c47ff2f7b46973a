from datetime import UTC, datetime, timedelta
from typing import Optional
from uuid import UUID

from jose import JWTError, jwt

from config import ApplicationConfig


def generate_jwt(session_id: UUID, user_id: UUID, role: str) -> str:
    """
    Generate JWT access token

    Args:
        session_id: Server-side session the token refers to
        user_id: User UUID
        role: Canonical role at login (informational; the live session is authoritative)

    Returns:
        JWT token string (HS256, ACCESS_TOKEN_TTL_MINUTES expiry)
    """
    now = datetime.now(UTC)
    payload = {
        "session_id": str(session_id),
        "user_id": str(user_id),
        "role": role,
        "exp": now + timedelta(minutes=ApplicationConfig.ACCESS_TOKEN_TTL_MINUTES),
        "iat": now,
    }
    return jwt.encode(payload, ApplicationConfig.JWT_SECRET, algorithm="HS256")


def verify_jwt(token: str) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(
            token, ApplicationConfig.JWT_SECRET, algorithms=["HS256"]
        )
    except JWTError:
        return None

    if "session_id" not in payload:
        return None
    try:
        UUID(payload["session_id"])
    except (TypeError, ValueError):
        return None
    return payload
