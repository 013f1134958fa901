"""
Password Hashing Utilities

Stores calendar admin and guest passwords as salted PBKDF2-SHA256 hashes.
"""

import base64
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC


ALGORITHM = "pbkdf2_sha256"
ITERATIONS = 100000
SALT_BYTES = 16
KEY_LENGTH = 32


def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
    return PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt,
        iterations=iterations,
    )


def hash_password(password: str) -> str:
    """
    Hash a password for storage.

    Returns:
        String of the form ``pbkdf2_sha256$<iterations>$<salt>$<hash>`` with
        base64url-encoded salt and hash.

    Raises:
        ValueError: If password is empty
    """
    if not password:
        raise ValueError("Password must not be empty")

    salt = os.urandom(SALT_BYTES)
    derived = _kdf(salt, ITERATIONS).derive(password.encode())
    return "$".join([
        ALGORITHM,
        str(ITERATIONS),
        base64.urlsafe_b64encode(salt).decode(),
        base64.urlsafe_b64encode(derived).decode(),
    ])


def verify_password(password: str, stored_hash: str) -> bool:
    """
    Check a password against a stored hash in constant time.

    Returns False for empty input or a hash in an unknown format.
    """
    if not password or not stored_hash:
        return False

    try:
        algorithm, iterations, salt_b64, hash_b64 = stored_hash.split("$")
        if algorithm != ALGORITHM:
            return False
        salt = base64.urlsafe_b64decode(salt_b64.encode())
        expected = base64.urlsafe_b64decode(hash_b64.encode())
        _kdf(salt, int(iterations)).verify(password.encode(), expected)
        return True
    except (InvalidKey, ValueError, base64.binascii.Error):
        return False
