# cinema_api/users/passwords.py
import bcrypt

from ..settings import settings


def hash_password(plaintext: str) -> bytes:
    return bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=settings.password_hash_rounds))


def password_matches(plaintext: str, password_hash: bytes) -> bool:
    """Constant-time comparison of ``plaintext`` against a stored bcrypt hash."""
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), password_hash)
    except ValueError:
        # Malformed stored hash or a plaintext bcrypt refuses (over 72 bytes)
        return False
