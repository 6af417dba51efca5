import secrets
from datetime import UTC, datetime, timedelta
from typing import Optional

from jose import JWTError, jwt


def generate_access_token(
    subject: str,
    role: str,
    session_id: str,
    secret: str,
    expires_delta: timedelta,
    algorithm: str = "HS256",
    issuer: Optional[str] = None,
) -> str:
    """
    Generate JWT access token

    Args:
        subject: Principal UUID as string (session UUID for anonymous sessions)
        role: Principal kind (admin, member, guest, anonymous)
        session_id: Session the token was issued for
        secret: Signing secret
        expires_delta: Token lifetime

    Returns:
        JWT token string
    """
    now = datetime.now(UTC)
    payload = {
        "sub": subject,
        "role": role,
        "sid": session_id,
        "jti": secrets.token_hex(8),
        "exp": now + expires_delta,
        "iat": now,
    }
    if issuer:
        payload["iss"] = issuer
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_access_token(
    token: str,
    secret: str,
    algorithm: str = "HS256",
    issuer: Optional[str] = None,
) -> Optional[dict]:
    """
    Verify and decode JWT token

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid or expired
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm], issuer=issuer)
    except JWTError:
        return None
