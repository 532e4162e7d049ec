#!/usr/bin/env python3
"""Live HT Home Service verification tool.

Runs the full login sequence against the real service and reports what
the account exposes.

Credential sourcing:
- HT_USERNAME
- HT_PASSWORD
- HT_BASE_URL (optional)

Default behavior:
1) login, household lookup and authorization,
2) device list,
3) one state poll per light,
4) print a report.

With ``--toggle <device id>`` the light is switched to the opposite state
and back again.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyhthome import HtClient, HtConfig, HtConfigError, HtError  # noqa: E402
from pyhthome.models import DeviceType  # noqa: E402


@dataclass(frozen=True)
class ProbeResult:
    name: str
    ok: bool
    detail: str


def _print_results(results: list[ProbeResult]) -> None:
    width = max((len(result.name) for result in results), default=20)
    print("\nProbe report")
    print("-" * (width + 24))
    for result in results:
        status = "OK" if result.ok else "FAIL"
        print(f"{result.name:<{width}}  {status:<4}  {result.detail}")

    failures = [result for result in results if not result.ok]
    print("-" * (width + 24))
    print(f"Summary: {len(results) - len(failures)} OK, {len(failures)} FAIL")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Probe a live HT Home Service account")
    parser.add_argument(
        "--toggle",
        default=None,
        metavar="DEVICE_ID",
        help="Switch this light to the opposite state and back.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the raw device list as JSON.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable DEBUG logging (request bodies are redacted).",
    )
    return parser.parse_args()


async def _run(args: argparse.Namespace) -> int:
    try:
        config = HtConfig.from_env()
    except HtConfigError as exc:
        raise SystemExit(str(exc)) from exc

    results: list[ProbeResult] = []
    async with HtClient(config) as client:
        try:
            session = await client.login()
        except HtError as exc:
            _print_results([ProbeResult("login", False, str(exc))])
            return 1
        household = session.household
        results.append(
            ProbeResult("login", True, f"site={household.site_id} dong={household.dong} ho={household.ho}")
        )

        try:
            devices = await client.get_devices()
        except HtError as exc:
            results.append(ProbeResult("devices", False, str(exc)))
            _print_results(results)
            return 1
        results.append(ProbeResult("devices", True, f"count={len(devices)}"))

        if args.json:
            print(json.dumps([d.raw for d in devices], indent=2, ensure_ascii=False, sort_keys=True))

        lights = [d for d in devices if d.device_type == DeviceType.LIGHT.value]
        for device in lights:
            light = client.light(device, autostart=False)
            try:
                on = await light.is_on()
                results.append(ProbeResult(f"light.{device.id}", True, f"{device.display_name}: {'on' if on else 'off'}"))
            except HtError as exc:
                results.append(ProbeResult(f"light.{device.id}", False, str(exc)))

        if args.toggle:
            target = next((d for d in lights if d.id == args.toggle), None)
            if target is None:
                results.append(ProbeResult("toggle", False, f"no light with id {args.toggle!r}"))
            else:
                light = client.light(target, autostart=False)
                try:
                    before = await light.is_on()
                    await light.set_on(not before)
                    after = await light.is_on()
                    await light.set_on(before)
                    results.append(ProbeResult("toggle", after is not before, f"{before} -> {after} -> {before}"))
                except HtError as exc:
                    results.append(ProbeResult("toggle", False, str(exc)))

    _print_results(results)
    return 0 if all(result.ok for result in results) else 1


def main() -> int:
    args = _parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    raise SystemExit(main())
