"""Security utilities for password hashing and password reset secrets."""

import hashlib
import secrets

from bcrypt import checkpw, gensalt, hashpw

MIN_PASSWORD_LENGTH = 8
RESET_SECRET_BYTES = 32


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Every call embeds a fresh salt, so hashing the same password twice
    yields different strings.

    Args:
        password: Plain text password to hash

    Returns:
        Hashed password as a string

    Example:
        ```python
        from gathrio.core.security import hash_password

        hashed = hash_password("my_password")
        ```
    """
    return hashpw(password.encode("utf-8"), gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash.

    Args:
        plain_password: Plain text password to verify
        hashed_password: Hashed password to compare against

    Returns:
        True if password matches, False otherwise

    Example:
        ```python
        from gathrio.core.security import verify_password

        is_valid = verify_password("my_password", hashed_password)
        ```
    """
    return checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def hash_reset_secret(secret: str) -> str:
    """Hash a password reset secret for storage and lookup.

    Unlike password hashing this is deterministic: the plaintext presented
    at reset time is re-hashed and matched against the stored value.

    Args:
        secret: Plaintext reset secret

    Returns:
        SHA-256 hex digest of the secret
    """
    return hashlib.sha256(secret.encode("utf-8")).hexdigest()


def issue_reset_secret() -> tuple[str, str]:
    """Generate a random password reset secret.

    Returns:
        Tuple of (plaintext secret for out-of-band delivery, hash for storage)

    Example:
        ```python
        from gathrio.core.security import issue_reset_secret

        plaintext, secret_hash = issue_reset_secret()
        user.reset_token_hash = secret_hash
        ```
    """
    plaintext = secrets.token_hex(RESET_SECRET_BYTES)
    return plaintext, hash_reset_secret(plaintext)
