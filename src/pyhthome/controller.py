"""Per-device state polling and command dispatch."""

from __future__ import annotations

import abc
import asyncio
import contextlib
import dataclasses
import enum
import logging
import time
from collections.abc import Callable
from typing import Any, ClassVar, Generic, TypeVar

from pyhthome._api.devices import fetch_device_detail, send_device_command
from pyhthome._transport import Transport
from pyhthome.exceptions import HtError
from pyhthome.models import Device, DeviceCommand, DeviceDetail

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclasses.dataclass(frozen=True, slots=True)
class DeviceState(Generic[T]):
    """Last observed value of a device.

    ``valid`` is ``False`` until the first successful poll or command.
    """

    value: T | None = None
    valid: bool = False
    updated_at: float | None = None


ErrorSink = Callable[[Device, Exception], None]
StateSink = Callable[[Device, DeviceState[Any]], None]


class DeviceController(abc.ABC, Generic[T]):
    """Polls one device on a fixed interval and sends commands on demand.

    The poll loop is an independent :class:`asyncio.Task`. A failed tick
    is logged and handed to *on_error*; the next tick still runs. When
    *autostart* is true (the default) the loop starts in the constructor,
    which then has to run inside an event loop.

    Subclasses set :attr:`kind` (the path segment of the device endpoint)
    and implement :meth:`decode_state`.
    """

    kind: ClassVar[str]

    def __init__(
        self,
        transport: Transport,
        device: Device,
        *,
        poll_interval: float,
        on_state: StateSink | None = None,
        on_error: ErrorSink | None = None,
        autostart: bool = True,
    ) -> None:
        if not getattr(type(self), "kind", ""):
            raise TypeError(f"{type(self).__name__} must set the class attribute 'kind'")
        if poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {poll_interval}")
        self._transport = transport
        self._device = device
        self._poll_interval = poll_interval
        self._on_state = on_state
        self._on_error = on_error
        self._state: DeviceState[T] = DeviceState()
        self._task: asyncio.Task[None] | None = None
        if autostart:
            self.start()

    @property
    def device(self) -> Device:
        return self._device

    @property
    def device_id(self) -> str:
        return self._device.id

    @property
    def state(self) -> DeviceState[T]:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @abc.abstractmethod
    def decode_state(self, detail: DeviceDetail) -> T:
        """Map a device detail to this controller's state value.

        ``detail.status_list`` is guaranteed non-empty; its first entry is
        the authoritative current state.
        """

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def poll_state(self) -> T:
        """Fetch and decode the current state, updating :attr:`state`."""
        detail = await fetch_device_detail(self._transport, self.kind, self.device_id)
        value = self.decode_state(detail)
        self._set_state(value)
        return value

    async def send_command(self, command: DeviceCommand) -> None:
        """Send *command*. No read-back is done; poll to confirm."""
        _logger.debug("Sending %s=%s to %s", command.command, command.value, self._device.display_name)
        await send_device_command(self._transport, self.kind, self.device_id, command)

    def _set_state(self, value: T) -> None:
        self._state = DeviceState(value=value, valid=True, updated_at=time.monotonic())
        if self._on_state is not None:
            self._on_state(self._device, self._state)

    # ------------------------------------------------------------------
    # Polling lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the poll loop (no-op when already running)."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(
            self._run_poll_loop(),
            name=f"pyhthome-poll-{self.device_id}",
        )

    async def stop(self) -> None:
        """Cancel the poll loop and wait for it to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run_poll_loop(self) -> None:
        while True:
            await asyncio.sleep(self._poll_interval)
            await self._poll_tick()

    async def _poll_tick(self) -> None:
        try:
            value = await self.poll_state()
        except HtError as exc:
            _logger.error("%s", exc)
            self._report_error(exc)
            return
        except Exception as exc:
            _logger.exception("Unexpected error polling %s", self._device.display_name)
            self._report_error(exc)
            return
        _logger.debug("Checked %s is %s", self._device.display_name, value)

    def _report_error(self, exc: Exception) -> None:
        if self._on_error is None:
            return
        try:
            self._on_error(self._device, exc)
        except Exception:
            _logger.debug("on_error callback failed", exc_info=True)


class LightPower(str, enum.Enum):
    ON = "on"
    OFF = "off"


class LightController(DeviceController[bool]):
    """Binary light: ``power`` is ``"on"`` or ``"off"``.

    With *optimistic* set, a successful command updates :attr:`state`
    immediately instead of waiting for the next poll.
    """

    kind = "lights"
    POWER_COMMAND = "power"

    def __init__(self, transport: Transport, device: Device, *, optimistic: bool = True, **kwargs: Any) -> None:
        self._optimistic = optimistic
        super().__init__(transport, device, **kwargs)

    def decode_state(self, detail: DeviceDetail) -> bool:
        return detail.status_list[0].value == LightPower.ON.value

    async def is_on(self) -> bool:
        return await self.poll_state()

    async def set_on(self, on: bool) -> None:
        power = LightPower.ON if on else LightPower.OFF
        await self.send_command(DeviceCommand(command=self.POWER_COMMAND, value=power.value))
        if self._optimistic:
            self._set_state(on)

    async def turn_on(self) -> None:
        await self.set_on(True)

    async def turn_off(self) -> None:
        await self.set_on(False)
