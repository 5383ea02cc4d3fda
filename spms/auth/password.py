"""
Password hashing with bcrypt.

Hashes are stored in the modular crypt format (``$2b$10$<salt><digest>``),
so the salt and cost travel with the hash and verification needs nothing
else. Hashes written by other bcrypt implementations (``$2a$``/``$2y$``)
verify as well.
"""

import bcrypt

BCRYPT_ROUNDS = 10

# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """
    Hash a password with a fresh random salt.

    Args:
        password: The plaintext password to hash (must not be empty)

    Returns:
        The hashed password string (includes algorithm, cost and salt)
    """
    if not password:
        raise ValueError("Password must not be empty")
    hashed = bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("ascii")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against its hash.

    Returns False on mismatch, and also when the stored hash is empty or
    malformed, so a corrupt row reads as bad credentials instead of a crash.
    """
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_encode(password), password_hash.encode("ascii"))
    except (ValueError, UnicodeEncodeError):
        return False


def needs_rehash(password_hash: str) -> bool:
    """True when the hash was produced with a different cost factor."""
    try:
        cost = int(password_hash.split("$")[2])
    except (IndexError, ValueError, AttributeError):
        return True
    return cost != BCRYPT_ROUNDS
