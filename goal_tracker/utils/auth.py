"""Bearer token utilities."""
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt

from goal_tracker.config import settings


def create_access_token(
    email: str, expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a signed JWT carrying the user's email.

    Args:
        email: Email to encode in token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string

    Raises:
        RuntimeError: If no signing secret is configured
    """
    if not settings.jwt_secret:
        raise RuntimeError("JWT_SECRET is not configured")

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expiration_minutes)

    to_encode = {
        "sub": email,
        "email": email,
        "exp": expire,
    }

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str) -> str:
    """
    Verify a signed JWT and return its email.

    Args:
        token: JWT token string to verify

    Returns:
        Email from the ``email`` claim, falling back to ``sub``

    Raises:
        JWTError: If token is invalid, expired, or carries no email
    """
    payload = jwt.decode(
        token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
    )
    email = payload.get("email") or payload.get("sub")

    if not email:
        raise JWTError("Token payload missing 'email' claim")

    return email


def read_unverified_email(token: str) -> Optional[str]:
    """
    Read the email claim without checking the signature.

    Only used in demo mode, when no signing secret is configured.

    Returns:
        Email claim, or None when the token is not a JWT or has no email
    """
    try:
        claims = jwt.get_unverified_claims(token)
    except JWTError:
        return None
    return claims.get("email")
