"""Device endpoints.

Endpoints:
  - GET proxy/ctoc/devices
  - GET proxy/ctoc/<kind>/<id>
  - PUT proxy/ctoc/<kind>/<id>

All calls go through a :class:`~pyhthome._transport.Transport`, so they
carry the current session and recover once from an expired token.
"""

from __future__ import annotations

from pyhthome._constants import DEVICE_ENDPOINT_PREFIX, DEVICES_ENDPOINT
from pyhthome._transport import Transport
from pyhthome.exceptions import HtMalformedDeviceDetailError
from pyhthome.models import (
    Device,
    DeviceCommand,
    DeviceDetail,
    DeviceDetailResponse,
    DeviceListResponse,
    parse_model,
)


def device_endpoint(kind: str, device_id: str) -> str:
    """Per-device path, e.g. ``proxy/ctoc/lights/<id>``."""
    return f"{DEVICE_ENDPOINT_PREFIX}/{kind}/{device_id}"


async def fetch_device_list(transport: Transport) -> list[Device]:
    response = await transport.request("GET", DEVICES_ENDPOINT)
    response.raise_for_status("fetch devices")
    parsed = parse_model(DeviceListResponse, response.json(), endpoint=DEVICES_ENDPOINT)
    return parsed.data.device_list


async def fetch_device_detail(transport: Transport, kind: str, device_id: str) -> DeviceDetail:
    """Fetch a device's detail.

    Raises
    ------
    HtMalformedDeviceDetailError
        If the detail has an empty ``statusList``.
    """
    endpoint = device_endpoint(kind, device_id)
    response = await transport.request("GET", endpoint)
    response.raise_for_status(f"fetch {kind} detail")
    detail = parse_model(DeviceDetailResponse, response.json(), endpoint=endpoint).data
    if not detail.status_list:
        raise HtMalformedDeviceDetailError(
            f"Device {device_id} reported no status entries",
            endpoint=endpoint,
        )
    return detail


async def send_device_command(transport: Transport, kind: str, device_id: str, command: DeviceCommand) -> None:
    """Send one command. Success is judged by HTTP status only."""
    endpoint = device_endpoint(kind, device_id)
    response = await transport.request("PUT", endpoint, json=command.to_payload())
    response.raise_for_status(f"send {command.command} command to {kind} {device_id}")
