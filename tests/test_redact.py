from __future__ import annotations

from pyhthome._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "id": "U2FsdGVkX1+abc",
        "password": "U2FsdGVkX1+def",
        "rememberMe": False,
        "headers": {"Cookie": "SESSION=tok", "Accept": "application/json"},
    }

    redacted = redact_for_log(payload)
    assert redacted["id"] == "<redacted>"
    assert redacted["password"] == "<redacted>"
    assert redacted["rememberMe"] is False
    assert redacted["headers"]["Cookie"] == "<redacted>"
    assert redacted["headers"]["Accept"] == "application/json"


def test_redact_for_log_walks_lists() -> None:
    payload = {"commandList": [{"command": "power", "value": "on", "token": "x"}]}

    redacted = redact_for_log(payload)
    assert redacted["commandList"] == [{"command": "power", "value": "on", "token": "<redacted>"}]


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_summarizes_bytes() -> None:
    assert redact_for_log(b"\x00\x01\x02") == "<bytes:3b>"


def test_redact_for_log_matches_keys_case_insensitively() -> None:
    headers = {"Set-Cookie": "SESSION=tok; Path=/", "AUTHORIZATION": "x", "Content-Type": "application/json"}

    redacted = redact_for_log(headers)
    assert redacted == {"Set-Cookie": "<redacted>", "AUTHORIZATION": "<redacted>", "Content-Type": "application/json"}
    assert headers["Set-Cookie"] == "SESSION=tok; Path=/"
