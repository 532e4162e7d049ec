"""Bridge between pyhthome and a home-automation host.

The host owns accessory objects (*handles*) and a registry to publish
them. :class:`HtPlatform` discovers devices, reconciles them against the
handles the host restored from its cache, keeps one
:class:`~pyhthome.controller.LightController` per accepted device and
tells the registry what to register or unregister.

No remote or configuration failure propagates to the host: every entry
point logs and returns.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Generic, Protocol, TypeVar

import aiohttp

from pyhthome.client import HtClient
from pyhthome.config import HtConfig
from pyhthome.controller import DeviceState, ErrorSink, LightController
from pyhthome.discovery import AddDevice, KeepDevice, ReconcilePlan, RemoveDevice, reconcile
from pyhthome.exceptions import HtConfigError, HtError
from pyhthome.models import Device, DeviceType

_logger = logging.getLogger(__name__)

H = TypeVar("H")


class AccessoryRegistry(Protocol[H]):
    """Host callbacks for publishing accessories."""

    def create_accessory(self, device: Device, accessory_id: str) -> H: ...

    def register_accessories(self, handles: list[H]) -> None: ...

    def unregister_accessories(self, handles: list[H]) -> None: ...

    def update_accessory(self, handle: H, state: DeviceState[Any]) -> None: ...


class HtPlatform(Generic[H]):
    """Discovery and controller lifecycle for a host plugin.

    Parameters
    ----------
    raw_config : Mapping
        Host plugin config (``id``, ``password``,
        ``deviceStateRefreshInterval``). When invalid the platform is
        built disabled and every operation logs an error and returns.
    registry : AccessoryRegistry
        Host callbacks.
    http_session : aiohttp.ClientSession, optional
        Shared HTTP session; one is created when omitted.
    on_error : callable, optional
        Receives per-device poll failures after they are logged.
    """

    SUPPORTED_TYPES: frozenset[str] = frozenset({DeviceType.LIGHT.value})

    def __init__(
        self,
        raw_config: Mapping[str, Any],
        registry: AccessoryRegistry[H],
        *,
        http_session: aiohttp.ClientSession | None = None,
        on_error: ErrorSink | None = None,
    ) -> None:
        self._registry = registry
        self._on_error = on_error
        self.accessories: dict[str, H] = {}
        self.controllers: dict[str, LightController] = {}

        self._config: HtConfig | None
        try:
            self._config = HtConfig.from_mapping(raw_config)
        except HtConfigError as exc:
            _logger.error("The plugin is not configured properly: %s", exc)
            self._config = None

        self._client = HtClient(self._config, session=http_session) if self._config is not None else None
        _logger.debug("Finished initializing platform (enabled=%s)", self.enabled)

    @property
    def enabled(self) -> bool:
        return self._client is not None

    # ------------------------------------------------------------------
    # Host lifecycle
    # ------------------------------------------------------------------

    def configure_accessory(self, device_id: str, handle: H) -> None:
        """Record an accessory the host restored from its cache."""
        _logger.info("Loading accessory from cache: %s", device_id)
        self.accessories[device_id] = handle

    async def start(self) -> ReconcilePlan[H] | None:
        """Open the client and run the first discovery."""
        if self._client is None:
            _logger.error("Cannot start: The plugin is not configured properly.")
            return None
        await self._client.open()
        return await self.discover_devices()

    async def close(self) -> None:
        for controller in list(self.controllers.values()):
            await controller.stop()
        self.controllers.clear()
        if self._client is not None:
            await self._client.close()

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    async def discover_devices(self) -> ReconcilePlan[H] | None:
        """Reconcile cached accessories with the cloud device list.

        Returns the applied plan, or ``None`` when discovery was skipped
        or failed (the failure is logged).
        """
        if self._client is None:
            _logger.error("Cannot discover devices: The plugin is not configured properly.")
            return None

        try:
            await self._client.open()
            devices = await self._client.get_devices()
        except HtError as exc:
            _logger.error("%s", exc)
            return None

        plan = reconcile(self.accessories, devices, self.SUPPORTED_TYPES)

        added: list[H] = []
        removed: list[H] = []
        for decision in plan:
            if isinstance(decision, AddDevice):
                _logger.info("Registering accessory for device: %s", decision.device.display_name)
                handle = self._registry.create_accessory(decision.device, decision.device.accessory_id)
                self.accessories[decision.device.id] = handle
                added.append(handle)
                await self._bind_controller(decision.device, handle)
            elif isinstance(decision, KeepDevice):
                _logger.info("Restoring existing accessory from cache: %s", decision.device.display_name)
                await self._bind_controller(decision.device, decision.handle)
            elif isinstance(decision, RemoveDevice):
                _logger.info("Removing existing accessory from cache: %s", decision.device_id)
                await self._unbind_controller(decision.device_id)
                self.accessories.pop(decision.device_id, None)
                removed.append(decision.handle)

        if added:
            self._registry.register_accessories(added)
        if removed:
            self._registry.unregister_accessories(removed)
        return plan

    async def _bind_controller(self, device: Device, handle: H) -> None:
        await self._unbind_controller(device.id)
        if self._client is None or self._config is None:
            return

        def on_state(_device: Device, state: DeviceState[Any]) -> None:
            self._registry.update_accessory(handle, state)

        self.controllers[device.id] = self._client.light(
            device,
            poll_interval=self._config.device_state_refresh_interval,
            on_state=on_state,
            on_error=self._on_error,
        )

    async def _unbind_controller(self, device_id: str) -> None:
        controller = self.controllers.pop(device_id, None)
        if controller is not None:
            await controller.stop()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def set_light(self, device_id: str, on: bool) -> bool:
        """Switch a light on or off. Returns ``False`` (after logging) on failure."""
        controller = self.controllers.get(device_id)
        if controller is None:
            _logger.error("Cannot control %s: no such light", device_id)
            return False
        try:
            await controller.set_on(on)
        except HtError as exc:
            _logger.error("%s", exc)
            return False
        return True
