import base64
import hashlib
import hmac
import os

from app.config import get_settings

_PBKDF2_ROUNDS = 150_000


def _derive(password: str, salt: bytes) -> bytes:
    settings = get_settings()
    return hashlib.pbkdf2_hmac(
        "sha256",
        (password + settings.password_pepper).encode("utf-8"),
        salt,
        _PBKDF2_ROUNDS,
    )


def hash_password(password: str) -> str:
    salt = os.urandom(16)
    digest = _derive(password, salt)
    return f"{base64.b64encode(salt).decode()}${base64.b64encode(digest).decode()}"


def verify_password(password: str, stored: str) -> bool:
    try:
        salt_b64, digest_b64 = stored.split("$", 1)
        salt = base64.b64decode(salt_b64)
        expected = base64.b64decode(digest_b64)
    except (ValueError, TypeError):
        return False
    return hmac.compare_digest(_derive(password, salt), expected)
