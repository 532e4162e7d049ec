"""Data models for HT API payloads."""

from pyhthome.models._base import HtBaseModel, HtEnum, parse_model
from pyhthome.models.device import (
    Device,
    DeviceCommand,
    DeviceDetail,
    DeviceDetailResponse,
    DeviceListResponse,
    DeviceStatus,
    DeviceType,
    accessory_id_for,
)
from pyhthome.models.household import Danji, HouseholdContext, HouseholdResponse
from pyhthome.models.login import LoginError

__all__ = [
    "Danji",
    "Device",
    "DeviceCommand",
    "DeviceDetail",
    "DeviceDetailResponse",
    "DeviceListResponse",
    "DeviceStatus",
    "DeviceType",
    "HouseholdContext",
    "HouseholdResponse",
    "HtBaseModel",
    "HtEnum",
    "LoginError",
    "accessory_id_for",
    "parse_model",
]
