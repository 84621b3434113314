"""
Security utilities for authentication and encryption.

Provides password hashing, JWT utilities, encryption of stored Ringba
API keys, and redaction of secrets for display.
"""

import base64
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt as _bcrypt
from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from jose import JWTError, jwt

from .config import settings


# =============================================================================
# Password Hashing  (direct bcrypt – avoids passlib/bcrypt>=4 incompatibility)
# =============================================================================


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    return _bcrypt.hashpw(password.encode("utf-8"), _bcrypt.gensalt()).decode("utf-8")


# =============================================================================
# JWT Token Management
# =============================================================================

ALGORITHM = "HS256"


def create_access_token(
    data: dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token.

    Tokens are issued by the identity provider in production; this is
    used by operational scripts and tests.

    Args:
        data: Payload data to encode in token
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )

    to_encode.update({"exp": expire, "type": "access"})

    return jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[dict[str, Any]]:
    """
    Decode and verify a JWT token.

    Args:
        token: JWT token string

    Returns:
        Decoded payload dict or None if invalid
    """
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        return payload
    except JWTError:
        return None


# =============================================================================
# Encryption for stored third-party credentials
# =============================================================================

def _get_fernet_key() -> bytes:
    """
    Derive a Fernet-compatible key from the encryption key.

    Fernet requires a 32-byte base64-urlsafe encoded key.
    PBKDF2 gives a consistent key from the configured encryption key.
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=32,
        salt=b"onscript_credential_salt",  # Static salt for consistent derivation
        iterations=100000,
    )
    return base64.urlsafe_b64encode(
        kdf.derive(settings.encryption_key.encode())
    )


_fernet = Fernet(_get_fernet_key())


def encrypt_secret(plaintext: str) -> bytes:
    """
    Encrypt a third-party secret (e.g. a Ringba API key) for storage.

    Args:
        plaintext: Secret to encrypt

    Returns:
        Encrypted bytes
    """
    if not plaintext:
        return b""

    return _fernet.encrypt(plaintext.encode("utf-8"))


def decrypt_secret(ciphertext: bytes) -> str:
    """
    Decrypt a stored third-party secret.

    Raises:
        ValueError: If decryption fails (invalid or corrupted data)
    """
    if not ciphertext:
        return ""

    try:
        return _fernet.decrypt(ciphertext).decode("utf-8")
    except InvalidToken as e:
        raise ValueError("Failed to decrypt stored credential") from e


# =============================================================================
# Redaction
# =============================================================================

PREVIEW_EDGE = 10


def preview_secret(value: Optional[str]) -> Optional[str]:
    """
    Redacted preview of a secret: first and last 10 characters.

    Short values overlap rather than pad, so nothing beyond the edges
    of a long key is ever exposed.

    Example:
        preview_secret("abcdefghij0123456789XYZ") -> "abcdefghij...3456789XYZ"
    """
    if not value:
        return None
    return f"{value[:PREVIEW_EDGE]}...{value[-PREVIEW_EDGE:]}"
