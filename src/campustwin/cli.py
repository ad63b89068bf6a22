"""Command line entry point: serve the facade, watch it headlessly, or request a route."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import sys

from campustwin.config import TwinConfig
from campustwin.exceptions import TwinError
from campustwin.models.location import LatLng
from campustwin.server import run_server
from campustwin.sync.api import TwinApiClient
from campustwin.sync.surface import InMemoryMapSurface
from campustwin.sync.view import CampusMapView

_logger = logging.getLogger(__name__)


def _parse_lat_lng(text: str) -> LatLng:
    try:
        lat_text, lng_text = text.split(",", 1)
        return LatLng(lat=float(lat_text), lng=float(lng_text))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected LAT,LNG, got {text!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="campustwin", description="Campus digital twin demo")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP facade and vehicle simulator")
    serve.add_argument("--host", help="Bind address (default: TWIN_HOST or 0.0.0.0)")
    serve.add_argument("--port", type=int, help="Listen port (default: PORT or 5002)")
    serve.add_argument("--no-simulator", action="store_true", help="Do not move vehicles")

    watch = sub.add_parser("watch", help="Run the headless map client against a facade")
    watch.add_argument("--api-url", help="Facade URL (default: TWIN_API_URL)")
    watch.add_argument("--interval", type=float, help="Seconds between vehicle polls")
    watch.add_argument("--duration", type=float, default=30.0, help="Seconds to watch before exiting")
    watch.add_argument("--route", action="store_true", help="Also draw the b1 -> b2 route once")

    route = sub.add_parser("route", help="Request one optimized route")
    route.add_argument("--start", type=_parse_lat_lng, required=True, help="Start as LAT,LNG")
    route.add_argument("--end", type=_parse_lat_lng, required=True, help="End as LAT,LNG")
    route.add_argument("--api-url", help="Facade URL (default: TWIN_API_URL)")

    return parser


async def _watch(config: TwinConfig, duration: float, draw_route: bool) -> int:
    surface = InMemoryMapSurface(ready=True)
    async with TwinApiClient(config.api_base_url) as api:
        view = CampusMapView(
            api,
            surface,
            poll_interval=config.poll_interval,
            retire_after_misses=config.retire_after_misses,
        )
        await view.start()
        try:
            if draw_route:
                await view.optimize_route()
            await asyncio.sleep(duration)
        finally:
            await view.stop()

    for vehicle_id, binding in view.vehicle_layer.bindings.items():
        print(f"{vehicle_id}: {binding.position.lat:.6f},{binding.position.lng:.6f}")
    return 1 if surface.alerts else 0


async def _route(config: TwinConfig, start: LatLng, end: LatLng) -> int:
    async with TwinApiClient(config.api_base_url) as api:
        try:
            result = await api.optimize_route(start, end)
        except TwinError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 1
    print(json.dumps({"geometry": result.geometry}))
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    overrides: dict[str, object] = {}
    if getattr(args, "host", None):
        overrides["host"] = args.host
    if getattr(args, "port", None):
        overrides["port"] = args.port
    if getattr(args, "no_simulator", False):
        overrides["simulator_enabled"] = False
    if getattr(args, "api_url", None):
        overrides["api_base_url"] = args.api_url
    if getattr(args, "interval", None):
        overrides["poll_interval"] = args.interval

    try:
        config = TwinConfig.from_env(**overrides)
    except TwinError as exc:
        print(f"configuration error: {exc}", file=sys.stderr)
        return 2

    if args.command == "serve":
        run_server(config)
        return 0
    with contextlib.suppress(KeyboardInterrupt):
        if args.command == "watch":
            return asyncio.run(_watch(config, args.duration, args.route))
        return asyncio.run(_route(config, args.start, args.end))
    # interrupted
    return 130


if __name__ == "__main__":
    sys.exit(main())
