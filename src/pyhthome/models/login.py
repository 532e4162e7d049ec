"""Login failure payload."""

from __future__ import annotations

from pyhthome.models._base import HtBaseModel


class LoginFailData(HtBaseModel):
    login_fail_count: int | None = None


class LoginError(HtBaseModel):
    """Body returned by ``POST login`` when authentication fails."""

    error_code: int
    error_message: str = ""
    result_data: LoginFailData | None = None
