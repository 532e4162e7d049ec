"""Login endpoint.

Endpoint:
  - POST login

Credentials are encrypted with :class:`~pyhthome._crypto.CredentialCodec`.
On success the session token is the first ``Set-Cookie`` value up to
its first ``;``. On failure the body is a :class:`LoginError`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, NoReturn

from pyhthome._constants import (
    LOGIN_ACCESS_DENIED,
    LOGIN_ENDPOINT,
    LOGIN_INVALID_CREDENTIALS,
    LOGIN_MAX_ATTEMPTS,
    LOGIN_UNUSUAL_ACTIVITY,
)
from pyhthome._crypto import CredentialCodec
from pyhthome._transport import Sender
from pyhthome.config import HtConfig
from pyhthome.exceptions import (
    HtAccessDeniedError,
    HtDecodeError,
    HtInvalidCredentialsError,
    HtLoginLockedError,
    HtMissingTokenError,
    HtUnexpectedLoginError,
)
from pyhthome.models import LoginError, parse_model

_logger = logging.getLogger(__name__)

_UNEXPECTED_MESSAGE = "Failed to login due to an unexpected error."


def build_login_payload(config: HtConfig, codec: CredentialCodec) -> dict[str, Any]:
    return {
        "id": codec.encrypt(config.username),
        "password": codec.encrypt(config.password),
        "rememberMe": False,
    }


def extract_session_token(set_cookies: Sequence[str]) -> str:
    """Return the first cookie's ``name=value`` pair.

    Raises
    ------
    HtMissingTokenError
        If no ``Set-Cookie`` header was sent.
    """
    if not set_cookies or not set_cookies[0]:
        raise HtMissingTokenError("There is no access token in the response header")
    return set_cookies[0].split(";", 1)[0]


def raise_for_login_error(payload: Any) -> NoReturn:
    """Translate a login failure body into a typed exception."""
    try:
        error = parse_model(LoginError, payload, endpoint=LOGIN_ENDPOINT)
    except HtDecodeError as exc:
        raise HtUnexpectedLoginError(_UNEXPECTED_MESSAGE) from exc

    _logger.debug("Login rejected code=%s message=%s", error.error_code, error.error_message)

    if error.error_code == LOGIN_INVALID_CREDENTIALS:
        message = "Incorrect ID or password."
        fail_count = error.result_data.login_fail_count if error.result_data else None
        if fail_count is not None:
            message += (
                f" Login will be temporarily locked for 5 minutes after {LOGIN_MAX_ATTEMPTS} failed attempts."
                f" ({fail_count}/{LOGIN_MAX_ATTEMPTS})"
            )
        raise HtInvalidCredentialsError(message, login_fail_count=fail_count)
    if error.error_code == LOGIN_ACCESS_DENIED:
        raise HtAccessDeniedError("Access denied. You are not authorized to log in with these credentials.")
    if error.error_code == LOGIN_UNUSUAL_ACTIVITY:
        raise HtLoginLockedError("Unusual login activity detected. Please wait 5 minutes before trying again.")
    raise HtUnexpectedLoginError(_UNEXPECTED_MESSAGE, code=error.error_code)


async def login(config: HtConfig, http: Sender, codec: CredentialCodec) -> str:
    """Log in and return the new (not yet household-authorized) token."""
    _logger.info("Logging in to get access token")
    response = await http.send(
        "POST",
        LOGIN_ENDPOINT,
        token=None,
        json=build_login_payload(config, codec),
    )
    if response.ok:
        return extract_session_token(response.set_cookies)

    try:
        payload = response.json()
    except HtDecodeError as exc:
        raise HtUnexpectedLoginError(_UNEXPECTED_MESSAGE) from exc
    raise_for_login_error(payload)
