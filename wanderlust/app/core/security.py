"""
Security helpers for password hashing and cookie signing.

Passwords are hashed with PBKDF2‑HMAC using SHA‑256 and a random
per‑password salt.  Values handed to the browser (the session id) are
signed with HMAC‑SHA256 and base64url encoded, so a client cannot forge
or guess another user's session identifier.  The secret key comes from
the application settings.
"""

import base64
import hashlib
import hmac
import os
from typing import Optional

from .config import settings


PBKDF2_ITERATIONS = 100_000


def _b64_url_encode(data: bytes) -> str:
    """Base64‑url encode bytes without padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("utf-8")


def _b64_url_decode(data: str) -> bytes:
    """Decode base64‑url encoded string, adding padding if necessary."""
    padding = '=' * (-len(data) % 4)
    return base64.urlsafe_b64decode(data + padding)


def _sign(message: bytes, secret: str) -> bytes:
    """Compute HMAC‑SHA256 signature of a message using the given secret."""
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).digest()


def sign_value(value: str) -> str:
    """Return ``value`` with its signature appended as ``value.signature``.

    ``value`` must not contain a dot.
    """
    signature = _sign(value.encode("utf-8"), settings.secret_key)
    return f"{value}.{_b64_url_encode(signature)}"


def unsign_value(signed: str) -> Optional[str]:
    """Verify a string produced by :func:`sign_value`.

    Returns the original value, or ``None`` when the signature is
    missing or does not match.
    """
    if not signed or "." not in signed:
        return None
    value, signature_b64 = signed.rsplit(".", 1)
    try:
        actual_sig = _b64_url_decode(signature_b64)
    except (ValueError, TypeError):
        return None
    expected_sig = _sign(value.encode("utf-8"), settings.secret_key)
    # Constant‑time comparison to prevent timing attacks
    if not hmac.compare_digest(expected_sig, actual_sig):
        return None
    return value


def hash_password(password: str) -> str:
    """Hash a password using PBKDF2‑HMAC with SHA‑256.

    A 16‑byte random salt is generated for each password.  The
    resulting string contains the salt and hash separated by a
    ``$`` (salt in hex, then hash in hex).

    Parameters
    ----------
    password : str
        The plain text password to hash.

    Returns
    -------
    str
        Salt and hash concatenated with ``$``.
    """
    salt = os.urandom(16)
    dk = hashlib.pbkdf2_hmac('sha256', password.encode('utf-8'), salt, PBKDF2_ITERATIONS)
    return f"{salt.hex()}${dk.hex()}"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against a stored salt+hash string.

    Splits the stored string into salt and hash, recomputes the
    PBKDF2‑HMAC digest and compares it using constant‑time comparison.
    Malformed stored values never match.
    """
    try:
        salt_hex, hash_hex = hashed_password.split('$', 1)
        salt = bytes.fromhex(salt_hex)
        stored_hash = bytes.fromhex(hash_hex)
    except (AttributeError, ValueError):
        return False
    dk = hashlib.pbkdf2_hmac('sha256', plain_password.encode('utf-8'), salt, PBKDF2_ITERATIONS)
    return hmac.compare_digest(dk, stored_hash)
