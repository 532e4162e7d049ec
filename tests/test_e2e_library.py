from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from pyhthome import HtClient, HtConfig
from pyhthome.exceptions import HtError, HtRefreshError, HtTransportError
from pyhthome.session import SessionState

if TYPE_CHECKING:
    from conftest import FakeHtBackend


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_client_happy_path_exercises_full_library(config: HtConfig, wired_backend: FakeHtBackend) -> None:
    async with HtClient(config) as client:
        devices = await client.get_devices()
        assert [d.id for d in devices] == ["light-1", "gas-1"]
        assert devices[0].display_name == "거실 light"

        light = client.light(devices[0], autostart=False)
        assert await light.is_on() is False

        await light.turn_on()
        assert wired_backend.light_power["light-1"] == "on"
        assert await light.is_on() is True

        await light.turn_off()
        assert light.state.value is False

        assert client.sessions.state is SessionState.AUTHENTICATED

    # lazy login: the first devices call is rejected, then the full sequence runs once
    assert [endpoint for _m, endpoint, _t, _j in wired_backend.calls[:5]] == [
        "proxy/ctoc/devices",
        "login",
        "proxy/bearer/api/v1/user/danji/household",
        "getctoctoken",
        "proxy/ctoc/devices",
    ]
    assert wired_backend.calls[0][2] is None
    assert wired_backend.count("login") == 1
    assert wired_backend.authorized_for["SESSION=tok-1"] == ("S2", "102", "1502")


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_expired_session_is_renewed_transparently(config: HtConfig, wired_backend: FakeHtBackend) -> None:
    async with HtClient(config) as client:
        await client.login()
        devices = await client.get_devices()
        light = client.light(devices[0], autostart=False)

        wired_backend.expire_all()
        await light.turn_on()

        assert client.sessions.token == "SESSION=tok-2"

    assert wired_backend.count("login") == 2
    assert wired_backend.light_power["light-1"] == "on"


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_login_error_surfaces_as_original_401(config: HtConfig, wired_backend: FakeHtBackend) -> None:
    wired_backend.login_error = {"errorCode": 108, "errorMessage": "locked"}

    async with HtClient(config) as client:
        with pytest.raises(HtTransportError, match="Failed to fetch devices: 401") as exc_info:
            await client.get_devices()
        assert exc_info.value.status_code == 401

        with pytest.raises(HtRefreshError, match="Unusual login activity detected"):
            await client.login()


@pytest.mark.asyncio
@pytest.mark.e2e
async def test_e2e_background_polling_follows_remote_changes(config: HtConfig, wired_backend: FakeHtBackend) -> None:
    async with HtClient(config) as client:
        devices = await client.get_devices()
        seen: list[bool] = []
        light = client.light(devices[0], on_state=lambda _device, state: seen.append(state.value))

        wired_backend.light_power["light-1"] = "on"
        for _ in range(200):
            if True in seen:
                break
            await asyncio.sleep(0.005)
        await light.stop()

    assert True in seen


@pytest.mark.asyncio
async def test_client_requires_open(config: HtConfig) -> None:
    client = HtClient(config)
    with pytest.raises(HtError, match="Client not initialized"):
        await client.get_devices()
