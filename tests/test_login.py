from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from pyhthome._api.login import build_login_payload, extract_session_token, login, raise_for_login_error
from pyhthome._crypto import CredentialCodec, aes_decrypt_salted
from pyhthome.config import HtConfig
from pyhthome.exceptions import (
    HtAccessDeniedError,
    HtInvalidCredentialsError,
    HtLoginLockedError,
    HtMissingTokenError,
    HtUnexpectedLoginError,
)

if TYPE_CHECKING:
    from conftest import FakeHtBackend, ResponseFactory


def test_login_payload_encrypts_credentials(config: HtConfig) -> None:
    payload = build_login_payload(config, CredentialCodec())

    assert payload["rememberMe"] is False
    assert payload["id"] != config.username
    assert aes_decrypt_salted(payload["id"], "hTsEcret") == config.username
    assert aes_decrypt_salted(payload["password"], "hTsEcret") == config.password


class TestExtractSessionToken:
    def test_takes_first_cookie_before_semicolon(self) -> None:
        cookies = ["SESSION=abc123; Path=/; HttpOnly", "OTHER=zzz; Path=/"]
        assert extract_session_token(cookies) == "SESSION=abc123"

    def test_cookie_without_attributes(self) -> None:
        assert extract_session_token(["SESSION=abc"]) == "SESSION=abc"

    def test_missing_cookie_raises(self) -> None:
        with pytest.raises(HtMissingTokenError):
            extract_session_token([])


class TestLoginErrorMapping:
    def test_invalid_credentials_with_fail_count(self) -> None:
        with pytest.raises(HtInvalidCredentialsError) as exc_info:
            raise_for_login_error({"errorCode": 104, "errorMessage": "bad", "resultData": {"loginFailCount": 3}})

        message = str(exc_info.value)
        assert "Incorrect ID or password" in message
        assert "3/5" in message
        assert exc_info.value.login_fail_count == 3

    def test_invalid_credentials_without_fail_count(self) -> None:
        with pytest.raises(HtInvalidCredentialsError) as exc_info:
            raise_for_login_error({"errorCode": 104, "errorMessage": "bad"})

        assert str(exc_info.value) == "Incorrect ID or password."
        assert exc_info.value.login_fail_count is None

    @pytest.mark.parametrize(
        "result_data",
        [{}, None, {"loginFailCount": None}, {"other": 1}],
    )
    def test_invalid_credentials_with_unusable_result_data(self, result_data: object) -> None:
        with pytest.raises(HtInvalidCredentialsError) as exc_info:
            raise_for_login_error({"errorCode": 104, "errorMessage": "bad", "resultData": result_data})

        assert str(exc_info.value) == "Incorrect ID or password."
        assert exc_info.value.login_fail_count is None

    def test_access_denied(self) -> None:
        with pytest.raises(HtAccessDeniedError, match="Access denied"):
            raise_for_login_error({"errorCode": 107, "errorMessage": ""})

    def test_unusual_activity_lock(self) -> None:
        with pytest.raises(HtLoginLockedError, match="wait 5 minutes"):
            raise_for_login_error({"errorCode": 108, "errorMessage": ""})

    def test_unknown_code(self) -> None:
        with pytest.raises(HtUnexpectedLoginError, match="unexpected error") as exc_info:
            raise_for_login_error({"errorCode": 999, "errorMessage": "?"})
        assert exc_info.value.code == 999

    def test_unparseable_payload(self) -> None:
        with pytest.raises(HtUnexpectedLoginError):
            raise_for_login_error({"message": "no code here"})


@pytest.mark.asyncio
async def test_login_returns_cookie_token(config: HtConfig, backend: FakeHtBackend) -> None:
    token = await login(config, backend, CredentialCodec())

    assert token == "SESSION=tok-1"
    method, endpoint, sent_token, body = backend.calls[0]
    assert (method, endpoint, sent_token) == ("POST", "login", None)
    assert set(body) == {"id", "password", "rememberMe"}


@pytest.mark.asyncio
async def test_login_without_cookie_raises_missing_token(config: HtConfig, backend: FakeHtBackend) -> None:
    backend.omit_cookie = True

    with pytest.raises(HtMissingTokenError):
        await login(config, backend, CredentialCodec())

    assert backend.count("login") == 1


@pytest.mark.asyncio
async def test_login_non_json_error_body(config: HtConfig, make_response: ResponseFactory) -> None:
    class _Gateway:
        async def send(self, method: str, endpoint: str, *, token: str | None, json: object = None):  # type: ignore[no-untyped-def]
            return make_response(502, body=b"<html>Bad Gateway</html>", endpoint=endpoint)

    with pytest.raises(HtUnexpectedLoginError):
        await login(config, _Gateway(), CredentialCodec())
