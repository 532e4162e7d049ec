"""Redaction of request bodies before they reach DEBUG logs.

Login bodies carry the account ID and password (encrypted, but with a
passphrase every client knows), and header maps carry the session cookie.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_KEYS = frozenset({"id", "password", "token", "cookie", "set-cookie", "authorization"})
_REDACTED = "<redacted>"
_MAX_DEPTH = 20


def redact_for_log(value: Any, *, max_string: int = 512) -> Any:
    """Return a copy of a JSON-like *value* with credentials masked.

    Keys are matched case-insensitively at any depth. Long strings are
    truncated and raw bytes are replaced by their length.
    """
    return _redact(value, max_string, 0)


def _redact(value: Any, max_string: int, depth: int) -> Any:
    if depth > _MAX_DEPTH:
        return "<max-depth>"
    if isinstance(value, Mapping):
        return {
            str(key): _REDACTED if str(key).lower() in _SENSITIVE_KEYS else _redact(item, max_string, depth + 1)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [_redact(item, max_string, depth + 1) for item in value]
    if isinstance(value, str) and len(value) > max_string:
        return f"{value[:max_string]}…<truncated>"
    if isinstance(value, (bytes, bytearray)):
        return f"<bytes:{len(value)}b>"
    return value
