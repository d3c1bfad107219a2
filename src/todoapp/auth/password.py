"""Password hashing utilities.

Learn: Uses bcrypt for password hashing. bcrypt salts automatically and
the work factor makes brute force expensive. Passwords are truncated to
72 bytes (bcrypt's limit).
"""

from functools import lru_cache

import bcrypt

DEFAULT_ROUNDS = 12


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt. Returns a "$2b$..." string."""
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        return bcrypt.checkpw(pw_bytes, password_hash.encode("utf-8"))
    except (ValueError, TypeError):
        return False


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    return hash_password("todoapp-dummy-password", rounds)


def burn_verification(password: str, rounds: int = DEFAULT_ROUNDS) -> None:
    """Run one bcrypt check that can never succeed.

    Used when the username does not exist, so that path costs the same
    as a wrong password.
    """
    verify_password(password, _dummy_hash(rounds))


def prepare_dummy_hash(rounds: int = DEFAULT_ROUNDS) -> None:
    """Build the dummy hash ahead of the first sign-in."""
    _dummy_hash(rounds)
