"""Password hashing and verification using Argon2id

Passwords are peppered with the server-side PASSWORD_PEPPER before hashing.
The pepper never reaches the database, so a leaked user table alone is not
enough to mount an offline attack.

Argon2id parameters follow the OWASP minimum configuration:
- Memory cost: 19456 KB (19 MiB)
- Time cost: 2 iterations
- Parallelism: 1
"""

import os
import re
from typing import Tuple

from argon2 import PasswordHasher, Type
from argon2.exceptions import VerifyMismatchError, VerificationError, InvalidHashError


_hasher = PasswordHasher(
    memory_cost=19456,
    time_cost=2,
    parallelism=1,
    hash_len=32,
    salt_len=16,
    type=Type.ID
)

_SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*(),.?":{}|<>_\-+=\[\]\\\/~`]')


def _get_pepper() -> str:
    """Get PASSWORD_PEPPER from environment.

    Raises:
        ValueError: If PASSWORD_PEPPER is not set
    """
    pepper = os.getenv('PASSWORD_PEPPER')
    if not pepper:
        raise ValueError("PASSWORD_PEPPER environment variable is not set")
    return pepper


def hash_password(password: str) -> str:
    """Hash a password using Argon2id with the global pepper.

    Args:
        password: Plain text password to hash

    Returns:
        str: Argon2id hash string ($argon2id$v=19$m=19456,t=2,p=1$...)

    Raises:
        ValueError: If PASSWORD_PEPPER is not set or password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")

    return _hasher.hash(password + _get_pepper())


def verify_password(password: str, hash: str) -> bool:
    """Verify a password against an Argon2id hash.

    Returns False for empty inputs and for malformed hashes instead of raising,
    so callers can treat every failure as "invalid credentials".
    """
    if not password or not hash:
        return False

    try:
        _hasher.verify(hash, password + _get_pepper())
        return True
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


def validate_password_strength(password: str) -> Tuple[bool, str]:
    """Validate password meets strength requirements.

    Requirements:
    - Minimum 8 characters
    - At least one uppercase letter, one lowercase letter and one digit
    - At least one special character

    Returns:
        Tuple of (is_valid, error_message); error_message is "" when valid

    Example:
        >>> validate_password_strength("weak")
        (False, 'Password must be at least 8 characters long')
        >>> validate_password_strength("SecureP@ss123")
        (True, '')
    """
    if len(password) < 8:
        return False, "Password must be at least 8 characters long"

    if not re.search(r'[A-Z]', password):
        return False, "Password must contain at least one uppercase letter"

    if not re.search(r'[a-z]', password):
        return False, "Password must contain at least one lowercase letter"

    if not re.search(r'\d', password):
        return False, "Password must contain at least one digit"

    if not _SPECIAL_CHARACTERS.search(password):
        return False, "Password must contain at least one special character"

    return True, ""
