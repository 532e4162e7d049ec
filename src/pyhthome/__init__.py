"""pyhthome - Async Python client for the HT Home Service smart-home API."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pyhthome")
except PackageNotFoundError:
    __version__ = "0+local"
from pyhthome._crypto import CredentialCodec
from pyhthome.client import HtClient
from pyhthome.config import HtConfig
from pyhthome.controller import DeviceController, DeviceState, LightController
from pyhthome.discovery import AddDevice, DeviceDirectory, KeepDevice, ReconcilePlan, RemoveDevice, reconcile
from pyhthome.exceptions import (
    HtAccessDeniedError,
    HtAuthenticationError,
    HtAuthorizationError,
    HtConfigError,
    HtDecodeError,
    HtError,
    HtInvalidCredentialsError,
    HtLoginLockedError,
    HtMalformedDeviceDetailError,
    HtMissingTokenError,
    HtNoApprovedHouseholdError,
    HtRefreshError,
    HtTransportError,
    HtUnexpectedLoginError,
)
from pyhthome.models import Device, DeviceCommand, DeviceType, HouseholdContext
from pyhthome.platform import AccessoryRegistry, HtPlatform
from pyhthome.session import Session, SessionManager, SessionState

__all__ = [
    "__version__",
    "AccessoryRegistry",
    "AddDevice",
    "CredentialCodec",
    "Device",
    "DeviceCommand",
    "DeviceController",
    "DeviceDirectory",
    "DeviceState",
    "DeviceType",
    "HouseholdContext",
    "HtAccessDeniedError",
    "HtAuthenticationError",
    "HtAuthorizationError",
    "HtClient",
    "HtConfig",
    "HtConfigError",
    "HtDecodeError",
    "HtError",
    "HtInvalidCredentialsError",
    "HtLoginLockedError",
    "HtMalformedDeviceDetailError",
    "HtMissingTokenError",
    "HtNoApprovedHouseholdError",
    "HtPlatform",
    "HtRefreshError",
    "HtTransportError",
    "HtUnexpectedLoginError",
    "KeepDevice",
    "LightController",
    "ReconcilePlan",
    "RemoveDevice",
    "Session",
    "SessionManager",
    "SessionState",
    "reconcile",
]
