"""Key derivation for passphrase-based AES.

Mirrors the OpenSSL ``EVP_BytesToKey`` routine that CryptoJS applies when
``AES.encrypt`` is given a passphrase instead of a key.
"""

from __future__ import annotations

import hashlib


def evp_bytes_to_key(
    passphrase: bytes,
    salt: bytes,
    *,
    key_len: int = 32,
    iv_len: int = 16,
) -> tuple[bytes, bytes]:
    """Derive an AES key and IV from *passphrase* and *salt*.

    Uses a single MD5 iteration per block, which is what OpenSSL's
    ``enc`` command and CryptoJS both default to.

    Parameters
    ----------
    passphrase : bytes
        Shared passphrase.
    salt : bytes
        8-byte salt.
    key_len : int
        Key length in bytes (32 selects AES-256).
    iv_len : int
        IV length in bytes.

    Returns
    -------
    tuple[bytes, bytes]
        ``(key, iv)``.
    """
    derived = b""
    block = b""
    while len(derived) < key_len + iv_len:
        block = hashlib.md5(block + passphrase + salt).digest()
        derived += block
    return derived[:key_len], derived[key_len : key_len + iv_len]
