from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from pyhthome._transport import HttpResponse
from pyhthome.config import HtConfig

ResponseFactory = Callable[..., HttpResponse]

_REASONS = {200: "OK", 400: "Bad Request", 401: "Unauthorized", 403: "Forbidden", 500: "Internal Server Error"}


def _make_response(
    status: int = 200,
    payload: Any = None,
    *,
    endpoint: str = "",
    headers: list[tuple[str, str]] | None = None,
    body: bytes | None = None,
) -> HttpResponse:
    if body is None:
        body = b"" if payload is None else json.dumps(payload).encode("utf-8")
    return HttpResponse(
        status=status,
        reason=_REASONS.get(status, ""),
        headers=CIMultiDictProxy(CIMultiDict(headers or [])),
        body=body,
        endpoint=endpoint,
    )


@pytest.fixture
def make_response() -> ResponseFactory:
    return _make_response


@pytest.fixture
def config() -> HtConfig:
    return HtConfig(username="user-1", password="secret", device_state_refresh_interval=0.01)


@dataclass
class FakeHtBackend:
    """In-memory stand-in for the HT web API at the ``send`` level.

    Tokens are issued as ``SESSION=tok-<n>``. A token only unlocks device
    endpoints after ``getctoctoken`` was called with it.
    """

    danji_list: list[dict[str, Any]] = field(
        default_factory=lambda: [
            {"siteId": "S1", "dong": "101", "ho": "1001", "isApproved": False},
            {"siteId": "S2", "dong": "102", "ho": "1502", "isApproved": True},
        ]
    )
    devices: list[dict[str, Any]] = field(
        default_factory=lambda: [
            {"id": "light-1", "deviceType": "light", "deviceLocation": "거실"},
            {"id": "gas-1", "deviceType": "gas", "deviceLocation": "주방"},
        ]
    )
    light_power: dict[str, str] = field(default_factory=lambda: {"light-1": "off"})
    login_error: dict[str, Any] | None = None
    omit_cookie: bool = False
    authorize_status: int = 200
    calls: list[tuple[str, str, str | None, Any]] = field(default_factory=list)
    issued: int = 0
    authorized: set[str] = field(default_factory=set)
    authorized_for: dict[str, tuple[str, str, str]] = field(default_factory=dict)

    def count(self, endpoint: str) -> int:
        return sum(1 for _method, ep, _token, _json in self.calls if ep == endpoint)

    def expire_all(self) -> None:
        self.authorized.clear()

    async def send(self, method: str, endpoint: str, *, token: str | None, json: Any = None) -> HttpResponse:
        self.calls.append((method, endpoint, token, json))
        # let concurrent callers interleave as they would over a real connection
        await asyncio.sleep(0)

        if endpoint == "login":
            if self.login_error is not None:
                return _make_response(400, self.login_error, endpoint=endpoint)
            self.issued += 1
            headers = [] if self.omit_cookie else [("Set-Cookie", f"SESSION=tok-{self.issued}; Path=/; HttpOnly")]
            return _make_response(200, {}, endpoint=endpoint, headers=headers)

        if endpoint == "proxy/bearer/api/v1/user/danji/household":
            if not token:
                return _make_response(401, endpoint=endpoint)
            return _make_response(200, {"resultData": {"danjiList": self.danji_list}}, endpoint=endpoint)

        if endpoint == "getctoctoken":
            if self.authorize_status != 200 or not token:
                return _make_response(self.authorize_status if token else 401, endpoint=endpoint)
            self.authorized.add(token)
            self.authorized_for[token] = (json["siteId"], json["dong"], json["ho"])
            return _make_response(200, {"result": "ok"}, endpoint=endpoint)

        if token not in self.authorized:
            return _make_response(401, endpoint=endpoint)

        if endpoint == "proxy/ctoc/devices":
            return _make_response(200, {"data": {"deviceList": self.devices}}, endpoint=endpoint)

        if endpoint.startswith("proxy/ctoc/lights/"):
            device_id = endpoint.rsplit("/", 1)[1]
            if method == "PUT":
                self.light_power[device_id] = json["commandList"][0]["value"]
                return _make_response(200, {}, endpoint=endpoint)
            return _make_response(
                200,
                {
                    "data": {
                        "id": device_id,
                        "deviceType": "light",
                        "statusList": [{"command": "power", "value": self.light_power[device_id]}],
                    }
                },
                endpoint=endpoint,
            )

        raise AssertionError(f"Unexpected endpoint in fake backend: {method} {endpoint}")


@pytest.fixture
def backend() -> FakeHtBackend:
    return FakeHtBackend()


@pytest.fixture
def wired_backend(backend: FakeHtBackend, monkeypatch: pytest.MonkeyPatch) -> FakeHtBackend:
    """Route every :class:`HttpTransport` request to the fake backend."""

    async def fake_send(_self: Any, method: str, endpoint: str, *, token: str | None, json: Any = None) -> HttpResponse:
        return await backend.send(method, endpoint, token=token, json=json)

    monkeypatch.setattr("pyhthome._transport.HttpTransport.send", fake_send)
    return backend
