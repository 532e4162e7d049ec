"""Passphrase AES in the OpenSSL ``Salted__`` envelope.

Produces the same cipher-text as CryptoJS ``AES.encrypt(text, passphrase)``:
AES-256-CBC with PKCS#7 padding, base64 of ``b"Salted__" + salt + ct``.
"""

from __future__ import annotations

import base64

from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from pyhthome._crypto.hashing import evp_bytes_to_key

SALT_MAGIC = b"Salted__"
SALT_SIZE = 8


def aes_encrypt_salted(plaintext: str, passphrase: str, salt: bytes) -> str:
    """Encrypt *plaintext* with a passphrase-derived key.

    Parameters
    ----------
    plaintext : str
        UTF-8 string to encrypt.
    passphrase : str
        Shared passphrase.
    salt : bytes
        8-byte salt mixed into the key derivation.

    Returns
    -------
    str
        Base64 ``Salted__`` envelope.
    """
    if len(salt) != SALT_SIZE:
        raise ValueError(f"salt must be {SALT_SIZE} bytes (got {len(salt)})")
    key, iv = evp_bytes_to_key(passphrase.encode("utf-8"), salt)
    padder = padding.PKCS7(128).padder()
    padded = padder.update(plaintext.encode("utf-8")) + padder.finalize()
    encryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).encryptor()
    ct = encryptor.update(padded) + encryptor.finalize()
    return base64.b64encode(SALT_MAGIC + salt + ct).decode("ascii")


def aes_decrypt_salted(envelope: str, passphrase: str) -> str:
    """Decrypt a base64 ``Salted__`` envelope back to text."""
    raw = base64.b64decode(envelope)
    if not raw.startswith(SALT_MAGIC):
        raise ValueError("envelope does not start with 'Salted__'")
    salt = raw[len(SALT_MAGIC) : len(SALT_MAGIC) + SALT_SIZE]
    ct = raw[len(SALT_MAGIC) + SALT_SIZE :]
    key, iv = evp_bytes_to_key(passphrase.encode("utf-8"), salt)
    decryptor = Cipher(algorithms.AES(key), modes.CBC(iv)).decryptor()
    padded = decryptor.update(ct) + decryptor.finalize()
    unpadder = padding.PKCS7(128).unpadder()
    return (unpadder.update(padded) + unpadder.finalize()).decode("utf-8")
