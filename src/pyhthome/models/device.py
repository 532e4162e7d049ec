"""Device models."""

from __future__ import annotations

import uuid
from typing import Any

from pydantic import BaseModel, ConfigDict, computed_field

from pyhthome.models._base import HtBaseModel, HtEnum

#: Namespace for deriving stable accessory identifiers from vendor device ids.
ACCESSORY_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "https://www2.hthomeservice.com/")


def accessory_id_for(device_id: str) -> str:
    """Deterministic accessory identifier for a vendor device id."""
    return str(uuid.uuid5(ACCESSORY_NAMESPACE, device_id))


class DeviceType(HtEnum):
    """Vendor device categories."""

    FAN = "fan"
    INDUCTION = "induction"
    MULTI_SWITCH = "multi_switch"
    WALLSOCKET = "wallsocket"
    LIGHT = "light"
    GAS = "gas"
    AIRCON = "aircon"
    HEATING = "heating"
    COOKTOP = "cooktop"
    CURTAIN = "curtain"
    SWITCH = "switch"
    UNKNOWN = "unknown"


class Device(HtBaseModel):
    """A controllable device reported by ``GET proxy/ctoc/devices``.

    Identity is :attr:`id`. A new discovery cycle yields a fresh record
    that may differ in name or location.
    """

    id: str
    """Vendor-assigned stable device id."""
    device_type: str
    """Vendor category tag (see :class:`DeviceType`)."""
    device_location: str = ""
    """Room label (e.g. ``"거실"``)."""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display_name(self) -> str:
        return f"{self.device_location} {self.device_type}"

    @property
    def category(self) -> DeviceType:
        return DeviceType(self.device_type)

    @property
    def accessory_id(self) -> str:
        return accessory_id_for(self.id)


class DeviceListData(HtBaseModel):
    device_list: list[Device]


class DeviceListResponse(HtBaseModel):
    data: DeviceListData


class DeviceStatus(HtBaseModel):
    """A single ``{command, value}`` status entry."""

    command: str
    value: Any = None


class DeviceDetail(HtBaseModel):
    """Per-device detail returned by ``GET proxy/ctoc/<kind>/<id>``."""

    id: str
    device_type: str = ""
    status_list: list[DeviceStatus]


class DeviceDetailResponse(HtBaseModel):
    data: DeviceDetail


class DeviceCommand(BaseModel):
    """A command sent to a device control endpoint."""

    model_config = ConfigDict(frozen=True)

    command: str
    value: Any

    def to_payload(self) -> dict[str, Any]:
        return {"commandList": [{"command": self.command, "value": self.value}]}
