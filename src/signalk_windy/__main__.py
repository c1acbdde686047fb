"""Command-line entry point: relay a Signal K server to a Windy.com station.

Usage
-----
Set the API key and run::

    export SIGNALK_WINDY_API_KEY="very.long.string"
    signalk-windy --signalk-url http://localhost:3000 --station-id 1

Every flag falls back to the matching ``SIGNALK_WINDY_*`` variable.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import sys
from typing import Any

import aiohttp

from signalk_windy._transport import WindyTransport
from signalk_windy.config import WindyConfig
from signalk_windy.exceptions import WindyConfigError
from signalk_windy.plugin import WindyPlugin
from signalk_windy.signalk import SignalKHost

_PATH_OPTIONS: dict[str, str] = {
    "position": "position",
    "windDirection": "wind_direction",
    "windSpeed": "wind_speed",
    "waterTemperature": "water_temperature",
    "outsideTemperature": "outside_temperature",
    "pressure": "pressure",
    "humidity": "humidity",
}


def _parse_path(value: str) -> tuple[str, str]:
    name, sep, path = value.partition("=")
    if not sep or not path or name not in _PATH_OPTIONS:
        raise argparse.ArgumentTypeError(f"expected NAME=PATH with NAME one of {', '.join(_PATH_OPTIONS)}")
    return _PATH_OPTIONS[name], path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="signalk-windy",
        description="Submit Signal K weather data to a Windy.com station.",
    )
    parser.add_argument("--signalk-url", help="Signal K server base URL (default: http://localhost:3000)")
    parser.add_argument("--signalk-token", help="Signal K access token")
    parser.add_argument("--api-key", help="Windy.com API key (obtain from stations.windy.com)")
    parser.add_argument("--station-id", type=int, help="Windy.com station ID (default: 100)")
    parser.add_argument("--submit-interval", type=float, help="Submit interval in minutes (default: 5)")
    parser.add_argument("--provider", help="Provider shown on the station page")
    parser.add_argument("--url", help="Web site shown on the station page")
    parser.add_argument(
        "--path",
        action="append",
        type=_parse_path,
        default=[],
        metavar="NAME=PATH",
        help="Override a subscribed path, e.g. windSpeed=environment.wind.speedTrue",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> WindyConfig:
    overrides: dict[str, Any] = {}
    for field_name in ("signalk_url", "signalk_token", "api_key", "station_id", "submit_interval", "provider", "url"):
        value = getattr(args, field_name)
        if value is not None:
            overrides[field_name] = value

    if args.path:
        # merged over SIGNALK_WINDY_PATH_* by from_env
        overrides["paths"] = dict(args.path)
    return WindyConfig.from_env(**overrides)


async def run(config: WindyConfig) -> None:
    async with aiohttp.ClientSession() as session:
        host = SignalKHost(config, session)
        plugin = WindyPlugin(host, transport=WindyTransport(session, timeout=config.request_timeout))
        await plugin.start(config)
        try:
            await host.run_forever()
        finally:
            await plugin.stop()
            await host.close()


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        config = config_from_args(args)
        config.validate()
    except WindyConfigError as exc:
        print(f"signalk-windy: {exc}", file=sys.stderr)
        return 2

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(run(config))
    return 0


if __name__ == "__main__":
    sys.exit(main())
