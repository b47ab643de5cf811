"""Decryption of passwords stored in the settings file.

Encrypted values are Fernet tokens wrapped in braces, e.g. ``{gAAAAAB...}``.
Values without braces are plain text and pass through untouched.
"""

import dataclasses
import logging

from cryptography.fernet import Fernet, InvalidToken

from mgmt_connect.server_settings import CredentialRecord

logger = logging.getLogger(__name__)


class DecryptionError(RuntimeError):
    """Raised when a stored password cannot be decrypted."""


def is_encrypted(value: str | None) -> bool:
    return value is not None and len(value) > 2 and value.startswith("{") and value.endswith("}")


class SettingsDecrypter:
    """Decrypts credential records with a Fernet key."""

    def __init__(self, key: str | bytes | None = None) -> None:
        # The key is only checked once something actually needs decrypting.
        self._key = key or None
        self._fernet: Fernet | None = None

    @staticmethod
    def generate_key() -> str:
        return Fernet.generate_key().decode("ascii")

    def encrypt(self, plain: str) -> str:
        """Return the braced form of ``plain`` suitable for the settings file."""
        token = self._require_fernet().encrypt(plain.encode("utf-8"))
        return "{" + token.decode("ascii") + "}"

    def decrypt_value(self, value: str | None) -> str | None:
        if not is_encrypted(value):
            return value
        token = value[1:-1]
        try:
            return self._require_fernet().decrypt(token.encode("ascii")).decode("utf-8")
        except (InvalidToken, UnicodeError) as exc:
            raise DecryptionError(
                "Unable to decrypt password: wrong settings key or corrupted value."
            ) from exc

    def decrypt(self, record: CredentialRecord) -> CredentialRecord:
        """Return a copy of ``record`` with its password decrypted."""
        if not is_encrypted(record.password):
            return record
        logger.debug("Decrypting password", extra={"server_id": record.id})
        return dataclasses.replace(record, password=self.decrypt_value(record.password))

    def _require_fernet(self) -> Fernet:
        if self._fernet is not None:
            return self._fernet
        if self._key is None:
            raise DecryptionError(
                "An encrypted password was found but no settings key was configured (MGMT_SETTINGS_KEY)."
            )
        try:
            self._fernet = Fernet(self._key)
        except (ValueError, TypeError) as exc:
            raise DecryptionError(
                "Settings key must be a 32-byte url-safe base64 encoded Fernet key."
            ) from exc
        return self._fernet
