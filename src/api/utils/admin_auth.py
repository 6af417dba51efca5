"""
Admin API Key Authentication

Admin accounts cannot self-register: creating one requires the operator key
in the X-Admin-API-Key header.
"""

import secrets

from fastapi import Header, status

from config import ApplicationConfig
from src.api.error import ClientError
from src.libs.result import Error


async def verify_admin_api_key(x_admin_api_key: str = Header(None)) -> bool:
    """
    Raises:
        ClientError: 401 UNAUTHORIZED if the header is missing,
            401 INVALID_API_KEY if it does not match ADMIN_API_KEY
    """
    if not x_admin_api_key:
        raise ClientError(
            Error("UNAUTHORIZED", "Admin API key required"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    if not secrets.compare_digest(
        x_admin_api_key.encode("utf-8"), str(ApplicationConfig.ADMIN_API_KEY).encode("utf-8")
    ):
        raise ClientError(
            Error("INVALID_API_KEY", "Invalid admin API key"),
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    return True
