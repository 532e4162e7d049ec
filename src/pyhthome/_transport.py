"""HTTP transport with session cookie injection and 401 recovery."""

from __future__ import annotations

import asyncio
import dataclasses
import json
import logging
from typing import Any, Protocol

import aiohttp
from multidict import CIMultiDictProxy

from pyhthome._redact import redact_for_log
from pyhthome.config import HtConfig
from pyhthome.exceptions import HtAuthenticationError, HtDecodeError, HtTransportError

_logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class HttpResponse:
    """A fully read HTTP response.

    The body is read eagerly so the response can be returned after the
    underlying connection has been released.
    """

    status: int
    reason: str
    headers: CIMultiDictProxy[str]
    body: bytes
    endpoint: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @property
    def set_cookies(self) -> list[str]:
        """All ``Set-Cookie`` header values in the order received."""
        return self.headers.getall("Set-Cookie", [])

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def json(self) -> Any:
        try:
            return json.loads(self.body)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise HtDecodeError(
                f"Invalid JSON from {self.endpoint}: {self.text()[:200]}",
                endpoint=self.endpoint,
            ) from exc

    def raise_for_status(self, what: str) -> None:
        """Raise :class:`HtTransportError` unless the status is 2xx.

        *what* names the operation, e.g. ``"fetch devices"``.
        """
        if not self.ok:
            raise HtTransportError(
                f"Failed to {what}: {self.status} {self.reason}.",
                status_code=self.status,
                endpoint=self.endpoint,
            )


class HttpTransport:
    """Sends a single request carrying an explicit session cookie.

    No retry is performed here. :class:`ResilientTransport` adds the
    401 refresh-and-replay behaviour on top.
    """

    def __init__(self, config: HtConfig, http_session: aiohttp.ClientSession) -> None:
        self._config = config
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=config.request_timeout)

    def url_for(self, endpoint: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    async def send(
        self,
        method: str,
        endpoint: str,
        *,
        token: str | None,
        json: Any = None,
    ) -> HttpResponse:
        headers = {
            "accept": "application/json",
            "user-agent": self._config.user_agent,
            "cookie": token or "",
        }
        url = self.url_for(endpoint)

        _logger.debug("%s %s body=%s", method, url, redact_for_log(json))

        try:
            async with self._http.request(
                method,
                url,
                json=json,
                headers=headers,
                timeout=self._timeout,
            ) as resp:
                body = await resp.read()
                response = HttpResponse(
                    status=resp.status,
                    reason=resp.reason or "",
                    headers=resp.headers,
                    body=body,
                    endpoint=endpoint,
                )
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise HtTransportError(
                f"Request to {endpoint} failed: {exc!r}",
                endpoint=endpoint,
            ) from exc

        _logger.debug("%s %s -> %d", method, url, response.status)
        return response


class Sender(Protocol):
    """Structural interface of :class:`HttpTransport` used by login helpers."""

    async def send(
        self,
        method: str,
        endpoint: str,
        *,
        token: str | None,
        json: Any = None,
    ) -> HttpResponse: ...


class Transport(Protocol):
    """What device endpoint modules need: a request that carries the session.

    :class:`ResilientTransport` is the production implementation.
    """

    async def request(self, method: str, endpoint: str, *, json: Any = None) -> HttpResponse: ...


class SessionProvider(Protocol):
    """Read access to the current token plus a way to renew it."""

    @property
    def token(self) -> str | None: ...

    @property
    def generation(self) -> int: ...

    async def refresh_if_stale(self, observed_generation: int) -> Any: ...


class ResilientTransport:
    """Injects the current session token and recovers once from HTTP 401.

    On a 401 the session provider is asked to refresh. If that succeeds
    the original request is replayed exactly once with the new token and
    the replay's response is returned, whatever its status. If the
    refresh fails the original 401 response is returned unchanged.
    Every other status passes through untouched.
    """

    def __init__(self, http: Sender, sessions: SessionProvider) -> None:
        self._http = http
        self._sessions = sessions

    async def request(self, method: str, endpoint: str, *, json: Any = None) -> HttpResponse:
        token = self._sessions.token
        generation = self._sessions.generation
        response = await self._http.send(method, endpoint, token=token, json=json)
        if response.status != 401:
            return response

        _logger.info("Access token expired, refreshing...")
        try:
            await self._sessions.refresh_if_stale(generation)
        except HtAuthenticationError as exc:
            _logger.error("%s", exc)
            return response
        _logger.info("Finished refreshing access token successfully")

        return await self._http.send(method, endpoint, token=self._sessions.token, json=json)

    async def get(self, endpoint: str) -> HttpResponse:
        return await self.request("GET", endpoint)

    async def post(self, endpoint: str, *, json: Any = None) -> HttpResponse:
        return await self.request("POST", endpoint, json=json)

    async def put(self, endpoint: str, *, json: Any = None) -> HttpResponse:
        return await self.request("PUT", endpoint, json=json)
