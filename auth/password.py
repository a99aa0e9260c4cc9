"""
Password hashing and verification.

Credentials are stored as ``<salt>.<digest>``: a random hex salt and the
hex PBKDF2-HMAC digest of the password under that salt.  The plaintext
never leaves this module.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
from typing import Tuple

from config.settings import config

SEPARATOR = "."


class PasswordHasher:
    """Salted PBKDF2 digests with a constant-time compare."""

    def __init__(
        self,
        salt_bytes: int = 8,
        iterations: int = 1000,
        key_length: int = 32,
        hash_name: str = "sha256",
    ) -> None:
        if salt_bytes < 1:
            raise ValueError("salt_bytes must be positive")
        if iterations < 1000:
            raise ValueError("iterations must be at least 1000")
        if key_length < 1:
            raise ValueError("key_length must be positive")
        hashlib.new(hash_name)  # fail fast on an unknown digest name
        self.salt_bytes = salt_bytes
        self.iterations = iterations
        self.key_length = key_length
        self.hash_name = hash_name

    def generate_salt(self) -> str:
        return secrets.token_hex(self.salt_bytes)

    def derive(self, password: str, salt: str) -> str:
        """Return the hex digest of *password* under *salt*."""
        return hashlib.pbkdf2_hmac(
            self.hash_name,
            password.encode(),
            salt.encode(),
            self.iterations,
            dklen=self.key_length,
        ).hex()

    def hash_password(self, password: str) -> str:
        """Hash a password with a fresh salt, returning ``salt.digest``."""
        salt = self.generate_salt()
        return f"{salt}{SEPARATOR}{self.derive(password, salt)}"

    def check_password(self, password: str, credential: str) -> bool:
        """
        Constant-time comparison against a stored ``salt.digest``.

        Raises ``ValueError`` when the credential is malformed or either
        side cannot be encoded.
        """
        salt, expected = split_credential(credential)
        digest = self.derive(password, salt)
        return hmac.compare_digest(digest.encode(), expected.encode())

    def verify_password(self, password: str, credential: str) -> bool:
        """Like ``check_password`` but malformed input is just a mismatch."""
        try:
            return self.check_password(password, credential)
        except ValueError:
            return False


def split_credential(credential: str) -> Tuple[str, str]:
    """
    Split a stored credential into ``(salt, digest)``.

    Raises ``ValueError`` unless there is exactly one separator with a
    non-empty value on each side.
    """
    parts = (credential or "").split(SEPARATOR)
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError("malformed credential string")
    return parts[0], parts[1]


def get_password_hasher() -> PasswordHasher:
    """Build a hasher from application settings."""
    return PasswordHasher(**config.get_hasher_config())
