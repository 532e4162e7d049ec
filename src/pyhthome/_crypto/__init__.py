"""Credential encryption required by the HT login endpoint.

The passphrase is fixed and shared with every client of the vendor API,
so this offers no secrecy against anyone who knows it. It exists only
because the login endpoint rejects plaintext credentials.
"""

from __future__ import annotations

import secrets

from pyhthome._constants import CREDENTIAL_PASSPHRASE
from pyhthome._crypto.aes import SALT_SIZE, aes_decrypt_salted, aes_encrypt_salted
from pyhthome._crypto.hashing import evp_bytes_to_key


class CredentialCodec:
    """Encrypts login credentials with the vendor passphrase.

    The salt is drawn once per codec, so repeated calls with the same
    input return the same cipher-text.
    """

    def __init__(self, passphrase: str = CREDENTIAL_PASSPHRASE, *, salt: bytes | None = None) -> None:
        self._passphrase = passphrase
        self._salt = salt if salt is not None else secrets.token_bytes(SALT_SIZE)

    def encrypt(self, secret: str) -> str:
        return aes_encrypt_salted(secret, self._passphrase, self._salt)


__all__ = [
    "CredentialCodec",
    "aes_decrypt_salted",
    "aes_encrypt_salted",
    "evp_bytes_to_key",
]
