"""
Field Encryption.

Authenticated encryption-at-rest for entry fields (title, body, tags).

A single key is derived once per process from the configured password and
salt (PBKDF2-HMAC-SHA256) and wrapped in an immutable CipherKey. FieldCipher
uses Fernet tokens, so a tampered ciphertext or a wrong key fails
verification instead of yielding garbage.

Usage:
    from entrybook.backend.core.crypto import get_field_cipher

    cipher = get_field_cipher()
    token = cipher.encrypt("groceries")
    cipher.decrypt(token)  # "groceries"
"""

import base64
from dataclasses import dataclass
from functools import lru_cache

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from entrybook.backend.core.config import get_app_config, get_settings
from entrybook.backend.core.exceptions import DecryptionError
from entrybook.backend.core.logging import get_logger

logger = get_logger(__name__)

KEY_LENGTH = 32


@dataclass(frozen=True)
class CipherKey:
    """Derived key material, urlsafe-base64 encoded as Fernet expects."""

    value: bytes

    def __repr__(self) -> str:
        return "CipherKey(<redacted>)"


def derive_key(password: str, salt: str, iterations: int) -> CipherKey:
    """
    Derive the field encryption key from a password and salt.

    Args:
        password: Configured encryptor password
        salt: Configured encryptor salt
        iterations: PBKDF2 iteration count

    Returns:
        Immutable derived key
    """
    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=KEY_LENGTH,
        salt=salt.encode("utf-8"),
        iterations=iterations,
    )
    return CipherKey(base64.urlsafe_b64encode(kdf.derive(password.encode("utf-8"))))


def _is_canonical(token: bytes) -> bool:
    """Whether the token re-encodes to itself; base64 ignores the spare low bits of the last character."""
    try:
        return base64.urlsafe_b64encode(base64.urlsafe_b64decode(token)) == token
    except ValueError:
        return False


class FieldCipher:
    """Encrypts and verifies individual entry fields with a fixed key."""

    def __init__(self, key: CipherKey) -> None:
        self._fernet = Fernet(key.value)

    def encrypt(self, plaintext: str) -> str:
        """Encrypt and sign a plaintext string, returning a Fernet token."""
        return self._fernet.encrypt(plaintext.encode("utf-8")).decode("ascii")

    def decrypt(self, ciphertext: str | None) -> str:
        """
        Verify and decrypt a stored field.

        An unset or empty ciphertext decrypts to an empty string without
        invoking Fernet.

        Raises:
            DecryptionError: If the token was altered or the key is wrong
        """
        if not ciphertext:
            return ""
        try:
            token = ciphertext.encode("ascii")
            if not _is_canonical(token):
                raise InvalidToken
            return self._fernet.decrypt(token).decode("utf-8")
        except (InvalidToken, UnicodeError) as e:
            logger.warning("Field decryption failed", extra={"error": type(e).__name__})
            raise DecryptionError() from e


@lru_cache
def get_field_cipher() -> FieldCipher:
    """Get the process-wide cipher, deriving the key on first use."""
    settings = get_settings()
    iterations = get_app_config().security.encryption.kdf_iterations
    key = derive_key(settings.encryptor_password, settings.encryptor_salt, iterations)
    logger.debug("Field encryption key derived", extra={"iterations": iterations})
    return FieldCipher(key)
