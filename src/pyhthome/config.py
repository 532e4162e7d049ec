"""Client configuration for pyhthome."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pyhthome._constants import BASE_URL, USER_AGENT
from pyhthome.exceptions import HtConfigError


@dataclasses.dataclass(frozen=True)
class HtConfig:
    """Client configuration.

    Parameters
    ----------
    username : str
        HT Home Service account ID.
    password : str
        HT Home Service account password.
    device_state_refresh_interval : float
        Seconds between device state polls.
    base_url : str
        API origin. Request paths are resolved relative to it.
    request_timeout : float
        Total per-request deadline in seconds.
    user_agent : str
        User-Agent header sent with every request.
    """

    username: str
    password: str = dataclasses.field(repr=False)
    device_state_refresh_interval: float = 10.0
    base_url: str = BASE_URL
    request_timeout: float = 15.0
    user_agent: str = USER_AGENT

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> HtConfig:
        """Validate a host-supplied config dict.

        Accepts ``id``, ``password`` and ``deviceStateRefreshInterval``
        (the keys a host plugin config uses) as well as the field names.

        Raises
        ------
        HtConfigError
            If a required field is missing or not usable.
        """
        username = raw.get("id", raw.get("username"))
        password = raw.get("password")
        interval = raw.get("deviceStateRefreshInterval", raw.get("device_state_refresh_interval"))

        missing = [
            name
            for name, value in (("id", username), ("password", password), ("deviceStateRefreshInterval", interval))
            if not value
        ]
        if missing:
            raise HtConfigError(f"Missing required config fields: {', '.join(missing)}")
        if not isinstance(username, str) or not isinstance(password, str):
            raise HtConfigError("id and password must be strings")
        try:
            interval_s = float(interval)
        except (TypeError, ValueError) as exc:
            raise HtConfigError(f"deviceStateRefreshInterval must be a number, got {interval!r}") from exc
        if interval_s <= 0:
            raise HtConfigError(f"deviceStateRefreshInterval must be positive, got {interval_s}")

        kwargs: dict[str, Any] = {
            "username": username,
            "password": password,
            "device_state_refresh_interval": interval_s,
        }
        for key in ("base_url", "request_timeout", "user_agent"):
            if key in raw:
                kwargs[key] = raw[key]
        return cls(**kwargs)

    @classmethod
    def from_env(cls, **overrides: Any) -> HtConfig:
        """Create configuration from environment variables.

        Reads ``HT_USERNAME``, ``HT_PASSWORD`` and the optional
        ``HT_REFRESH_INTERVAL``, ``HT_BASE_URL`` and ``HT_REQUEST_TIMEOUT``.
        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "HT_USERNAME": "username",
            "HT_PASSWORD": "password",
            "HT_BASE_URL": "base_url",
            "HT_USER_AGENT": "user_agent",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        # numeric fields, handle separately
        for env_key, field_name in (
            ("HT_REFRESH_INTERVAL", "device_state_refresh_interval"),
            ("HT_REQUEST_TIMEOUT", "request_timeout"),
        ):
            val = env.get(env_key)
            if val is None or field_name in overrides:
                continue
            try:
                config_kwargs[field_name] = float(val)
            except ValueError as exc:
                raise HtConfigError(f"{env_key} must be a number, got {val!r}") from exc

        config_kwargs.update(overrides)

        if not config_kwargs.get("username") or not config_kwargs.get("password"):
            raise HtConfigError("HT_USERNAME and HT_PASSWORD must be set")
        return cls(**config_kwargs)
