"""Password hashing and JWT helpers."""
from __future__ import annotations

import hashlib
import string
from datetime import datetime
from typing import Any

import bcrypt
from jose import jwt

from discuss_board.core.settings import settings

ACCESS_TOKEN = "access"
REFRESH_TOKEN = "refresh"

# bcrypt only looks at the first 72 bytes of a secret.
_BCRYPT_MAX_BYTES = 72


def hash_password(password: str) -> str:
    """Return a salted bcrypt hash of ``password``."""
    hashed = bcrypt.hashpw(
        password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
        bcrypt.gensalt(rounds=settings.bcrypt_rounds),
    )
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check ``password`` against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(
            password.encode("utf-8")[:_BCRYPT_MAX_BYTES],
            password_hash.encode("utf-8"),
        )
    except ValueError:
        return False


def hash_token(token: str) -> str:
    """Return a SHA-256 hex digest used to store refresh tokens at rest."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def password_policy_violation(password: str) -> str | None:
    """Describe why ``password`` is too weak, or return None when it is acceptable.

    A password needs the configured minimum length and at least one
    uppercase letter, lowercase letter, digit and special character.
    """
    if len(password) < settings.password_min_length:
        return f"Password must be at least {settings.password_min_length} characters long"
    if not any(ch.isupper() for ch in password):
        return "Password must contain an uppercase letter"
    if not any(ch.islower() for ch in password):
        return "Password must contain a lowercase letter"
    if not any(ch.isdigit() for ch in password):
        return "Password must contain a digit"
    if not any(ch in string.punctuation for ch in password):
        return "Password must contain a special character"
    return None


def create_token(
    *,
    subject: str,
    role: str,
    role_id: str,
    jwt_id: str,
    token_type: str,
    issued_at: datetime,
    expires_at: datetime,
) -> str:
    """Encode a signed JWT carrying the role discriminator.

    Args:
        subject: Account identifier (or guest identifier) placed in ``sub``.
        role: One of ``member``, ``moderator``, ``administrator`` or ``guest``.
        role_id: Primary key of the role record, placed in ``id``.
        jwt_id: Session identifier shared by the access/refresh pair.
        token_type: ``access`` or ``refresh``.
        issued_at: Issue time.
        expires_at: Expiry time.

    Returns:
        The encoded token.
    """
    claims: dict[str, Any] = {
        "sub": subject,
        "id": role_id,
        "type": role,
        "jti": jwt_id,
        "token_type": token_type,
        "iss": settings.jwt_issuer,
        "iat": issued_at,
        "exp": expires_at,
    }
    encoded: str = jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)
    return encoded


def decode_token(token: str) -> dict[str, Any]:
    """Decode and verify a JWT issued by this service.

    Raises:
        jose.JWTError: If the signature, expiry or issuer is invalid.
    """
    payload: dict[str, Any] = jwt.decode(
        token,
        settings.secret_key,
        algorithms=[settings.jwt_algorithm],
        issuer=settings.jwt_issuer,
    )
    return payload
