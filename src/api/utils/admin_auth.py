"""
Service API Key Authentication

Validates the API key other services present when they push notifications.
"""

import secrets

from fastapi import Header, status
from libs.result import Error
from src.api.error import ClientError
from config import ApplicationConfig


async def verify_admin_api_key(x_admin_api_key: str = Header(None)):
    """
    Verify admin API key from X-Admin-API-Key header.

    Used by the request-processing service to fan out notifications
    (request created, assigned, completed). Different from user sessions -
    this is service-to-service auth.

    Args:
        x_admin_api_key: API key from X-Admin-API-Key header

    Raises:
        ClientError: 401 if key is missing or invalid

    Returns:
        True if valid
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if not secrets.compare_digest(x_admin_api_key, ApplicationConfig.ADMIN_API_KEY):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
