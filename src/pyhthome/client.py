"""High-level async client for the HT Home Service API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp

from pyhthome._crypto import CredentialCodec
from pyhthome._transport import HttpTransport, ResilientTransport
from pyhthome.config import HtConfig
from pyhthome.controller import LightController
from pyhthome.discovery import DeviceDirectory
from pyhthome.exceptions import HtError
from pyhthome.models import Device
from pyhthome.session import Session, SessionManager

_logger = logging.getLogger(__name__)


class HtClient:
    """Async client for the HT Home Service API.

    Usage::

        async with HtClient(config) as client:
            devices = await client.get_devices()
            light = client.light(devices[0])
            await light.turn_on()

    Logging in is lazy: the first request goes out without a session,
    the vendor answers 401 and the transport runs the full login
    sequence before replaying it. Call :meth:`login` to authenticate
    up front instead.
    """

    def __init__(
        self,
        config: HtConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        codec: CredentialCodec | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._codec = codec
        self._sessions: SessionManager | None = None
        self._transport: ResilientTransport | None = None
        self._directory: DeviceDirectory | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> HtClient:
        await self.open()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def open(self) -> None:
        if self._transport is not None:
            return
        if self._http_session is None:
            # the session cookie is managed by SessionManager, not aiohttp
            self._http_session = aiohttp.ClientSession(cookie_jar=aiohttp.DummyCookieJar())
        http = HttpTransport(self._config, self._http_session)
        self._sessions = SessionManager(self._config, http, codec=self._codec)
        self._transport = ResilientTransport(http, self._sessions)
        self._directory = DeviceDirectory(self._transport)

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None
        self._sessions = None
        self._directory = None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @property
    def sessions(self) -> SessionManager:
        if self._sessions is None:
            raise HtError("Client not initialized. Use 'async with HtClient(...) as client:'")
        return self._sessions

    @property
    def transport(self) -> ResilientTransport:
        if self._transport is None:
            raise HtError("Client not initialized. Use 'async with HtClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    async def login(self) -> Session:
        """Run the full login sequence and install a fresh session."""
        return await self.sessions.refresh()

    # ------------------------------------------------------------------
    # Devices
    # ------------------------------------------------------------------

    async def get_devices(self) -> list[Device]:
        """Fetch all devices on the account's approved household."""
        if self._directory is None:
            raise HtError("Client not initialized. Use 'async with HtClient(...) as client:'")
        return await self._directory.discover()

    def light(self, device: Device, *, poll_interval: float | None = None, **kwargs: Any) -> LightController:
        """Build a :class:`LightController` for *device*.

        Polling starts immediately unless ``autostart=False`` is passed.
        """
        interval = poll_interval if poll_interval is not None else self._config.device_state_refresh_interval
        return LightController(self.transport, device, poll_interval=interval, **kwargs)
