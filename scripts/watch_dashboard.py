#!/usr/bin/env python3
"""Console consumer for the dashboard state.

Polls the store, printing one line per view-state change. Optionally issues
a single control write first.

Configuration is read from ``HOMEDASH_*`` environment variables
(``HOMEDASH_BASE_URL`` is required, ``HOMEDASH_API_KEY`` usually is).

Examples::

    python scripts/watch_dashboard.py --duration 30
    python scripts/watch_dashboard.py --set led1=200 --duration 10
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyhomedash import Dashboard, DashboardConfig, HomeDashError, ViewState  # noqa: E402
from pyhomedash.models import ControlField  # noqa: E402

_LOG = logging.getLogger("watch_dashboard")


def _parse_assignment(text: str) -> tuple[str, str]:
    field, sep, value = text.partition("=")
    if not sep or not field:
        raise argparse.ArgumentTypeError(f"expected FIELD=VALUE, got {text!r}")
    if field not in {f.value for f in ControlField}:
        raise argparse.ArgumentTypeError(f"unknown control field {field!r}")
    return field, value


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Watch sensor readings and control state.",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument(
        "--set",
        dest="assignment",
        type=_parse_assignment,
        default=None,
        metavar="FIELD=VALUE",
        help="Write one control field before watching.",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logs.",
    )
    return parser.parse_args()


def _render(state: ViewState) -> str:
    if state.show_loading:
        return "[dash] loading..."
    controls = state.controls
    timer = state.timer
    leds = "/".join(str(controls.resolved(f)) for f in (ControlField.LED1, ControlField.LED2, ControlField.LED3))
    rgb = ",".join(str(controls.resolved(f)) for f in (ControlField.RGB_R, ControlField.RGB_G, ControlField.RGB_B))
    line = (
        f"[dash] temp={state.temperature_display} hum={state.humidity_display} light={state.light_display}"
        f" | strip={'on' if controls.resolved(ControlField.STRIP) else 'off'}"
        f" timer={timer.hours:02d}:{timer.minutes:02d} leds={leds} rgb=({rgb})"
        f" buzzer={'on' if controls.resolved(ControlField.BUZZER) else 'off'}"
    )
    if state.transient_error:
        line += f" !! {state.transient_error}"
    return line


async def _watch(config: DashboardConfig, args: argparse.Namespace) -> None:
    last_line: str | None = None

    def _on_change(state: ViewState) -> None:
        nonlocal last_line
        line = _render(state)
        if line != last_line:
            print(line)
            last_line = line

    async with Dashboard(config, on_state_change=_on_change) as dashboard:
        if args.assignment is not None:
            field, value = args.assignment
            update = await dashboard.set_control(field, value)
            if update is None:
                _LOG.warning("Write %s=%s failed", field, value)
            else:
                _LOG.info("Wrote %s=%s", field, update.value)
        dashboard.start_polling()
        if args.duration > 0:
            await asyncio.sleep(args.duration)
        else:
            await asyncio.Event().wait()


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = DashboardConfig.from_env()
    except HomeDashError as exc:
        print(f"[dash] Configuration error: {exc}", file=sys.stderr)
        return 2

    try:
        asyncio.run(_watch(config, args))
    except KeyboardInterrupt:
        print("[dash] Interrupted")
    return 0


if __name__ == "__main__":
    raise SystemExit(_main())
