"""Custom exception hierarchy for pyhthome."""

from __future__ import annotations


class HtError(Exception):
    """Base exception for all pyhthome errors."""


class HtConfigError(HtError):
    """Invalid or missing configuration."""


class HtTransportError(HtError):
    """HTTP-level failure (network error, unexpected status)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class HtDecodeError(HtError):
    """Response body does not match the expected shape."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class HtMalformedDeviceDetailError(HtDecodeError):
    """Device detail carried no status entry.

    The vendor always reports at least one status for a device, so an
    empty ``statusList`` is a protocol violation rather than "off".
    """


class HtAuthenticationError(HtError):
    """Base for failures of the login / authorization sequence."""


class HtInvalidCredentialsError(HtAuthenticationError):
    """Login rejected the ID or password (vendor code ``104``)."""

    def __init__(self, message: str, *, login_fail_count: int | None = None) -> None:
        self.login_fail_count = login_fail_count
        super().__init__(message)


class HtAccessDeniedError(HtAuthenticationError):
    """The account may not log in with these credentials (code ``107``)."""


class HtLoginLockedError(HtAuthenticationError):
    """Login temporarily locked after unusual activity (code ``108``)."""


class HtUnexpectedLoginError(HtAuthenticationError):
    """Login failed with a code pyhthome does not know."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        self.code = code
        super().__init__(message)


class HtMissingTokenError(HtAuthenticationError):
    """Login succeeded but no session cookie was returned."""


class HtNoApprovedHouseholdError(HtAuthenticationError):
    """The account has no approved residence (danji) to authorize against."""


class HtAuthorizationError(HtAuthenticationError):
    """The household-scoped authorization upgrade was rejected."""


class HtRefreshError(HtAuthenticationError):
    """A session refresh failed.

    The failing step is available as ``__cause__``.
    """
