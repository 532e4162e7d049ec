"""Device discovery and reconciliation against a locally known set.

:class:`DeviceDirectory` asks the cloud for the current device list.
:func:`reconcile` diffs that list against the devices a caller already
holds handles for and returns what to add, keep and remove.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Collection, Iterable, Iterator, Mapping
from typing import Generic, TypeVar, Union

from pyhthome._api.devices import fetch_device_list
from pyhthome._transport import Transport
from pyhthome.models import Device

_logger = logging.getLogger(__name__)

H = TypeVar("H")


class DeviceDirectory:
    """Fetches the account's devices. Nothing is cached between calls."""

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    async def discover(self) -> list[Device]:
        devices = await fetch_device_list(self._transport)
        _logger.debug("Discovered %d device(s)", len(devices))
        return devices


@dataclasses.dataclass(frozen=True, slots=True)
class AddDevice:
    """A newly discovered device with no existing handle."""

    device: Device


@dataclasses.dataclass(frozen=True, slots=True)
class KeepDevice(Generic[H]):
    """A discovered device the caller already holds *handle* for."""

    handle: H
    device: Device


@dataclasses.dataclass(frozen=True, slots=True)
class RemoveDevice(Generic[H]):
    """A previously known device absent from the latest discovery."""

    device_id: str
    handle: H


Decision = Union[AddDevice, KeepDevice[H], RemoveDevice[H]]


@dataclasses.dataclass(frozen=True)
class ReconcilePlan(Generic[H]):
    """Ordered reconciliation decisions.

    Add/keep decisions follow discovery order; removals follow the
    iteration order of the previously known mapping and come last.
    """

    decisions: tuple[Decision[H], ...]

    @property
    def added(self) -> list[AddDevice]:
        return [d for d in self.decisions if isinstance(d, AddDevice)]

    @property
    def kept(self) -> list[KeepDevice[H]]:
        return [d for d in self.decisions if isinstance(d, KeepDevice)]

    @property
    def removed(self) -> list[RemoveDevice[H]]:
        return [d for d in self.decisions if isinstance(d, RemoveDevice)]

    @property
    def known_ids(self) -> set[str]:
        """Device ids the caller holds after applying the plan."""
        ids = {d.device.id for d in self.added}
        ids.update(d.device.id for d in self.kept)
        return ids

    def __iter__(self) -> Iterator[Decision[H]]:
        return iter(self.decisions)

    def __len__(self) -> int:
        return len(self.decisions)


def reconcile(
    previous: Mapping[str, H],
    discovered: Iterable[Device],
    supported_types: Collection[str],
) -> ReconcilePlan[H]:
    """Diff *previous* (device id -> handle) against *discovered*.

    Only devices whose ``device_type`` is in *supported_types* are
    eligible for add or keep. Unsupported devices are skipped entirely:
    a previously known id whose fresh record is unsupported is neither
    kept nor removed. A device id listed more than once is handled once.
    """
    decisions: list[Decision[H]] = []
    seen: set[str] = set()

    for device in discovered:
        if device.id in seen:
            continue
        seen.add(device.id)
        if device.device_type not in supported_types:
            continue
        if device.id in previous:
            decisions.append(KeepDevice(previous[device.id], device))
        else:
            decisions.append(AddDevice(device))

    for device_id, handle in previous.items():
        if device_id not in seen:
            decisions.append(RemoveDevice(device_id, handle))

    return ReconcilePlan(tuple(decisions))
