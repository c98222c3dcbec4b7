from functools import lru_cache

import bcrypt

from app.core.config import settings

BCRYPT_PREFIXES = ("$2a$", "$2b$", "$2y$")


def _prepare_password(password: str) -> bytes:
    """Encode and truncate to the 72 bytes bcrypt actually uses."""
    return password.encode("utf-8")[:72]


def is_password_hash(value: str | None) -> bool:
    """True when the stored credential is a bcrypt hash."""
    return bool(value) and value.startswith(BCRYPT_PREFIXES)


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_prepare_password(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str | None) -> bool:
    """
    Verify a plain password against a stored bcrypt hash.

    Stored values that are not bcrypt hashes (legacy plaintext rows) never
    verify; those accounts need a password reset.
    """
    if not is_password_hash(hashed_password):
        return False
    try:
        return bcrypt.checkpw(_prepare_password(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        # malformed hash
        return False


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    return get_password_hash("employees-api-dummy-password")


def burn_password_check(plain_password: str) -> None:
    """Spend the same bcrypt work as a real check when no account exists."""
    bcrypt.checkpw(_prepare_password(plain_password), _dummy_hash().encode("utf-8"))
