"""Password hashing helpers.

Credentials that authorize deletions are stored as bcrypt hashes,
never as plaintext.
"""

import bcrypt

from shortener.core.config import settings


def hash_password(password: str) -> str:
    """Hash a plaintext password with a fresh bcrypt salt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plaintext password against a stored bcrypt hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


# Compared against when the username is unknown, so both branches pay the same cost
DUMMY_HASH = hash_password("dummy-password-for-timing")
