"""HTTP facade over the entity store and the route proxy."""

from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator, Awaitable, Callable

from aiohttp import web

from campustwin._constants import ROUTE_UPSTREAM_MESSAGE
from campustwin.config import TwinConfig
from campustwin.exceptions import TwinError, TwinUpstreamError, TwinValidationError
from campustwin.routing.provider import MapmyIndiaProvider
from campustwin.routing.proxy import RouteProxy
from campustwin.simulator import VehicleMotionSimulator
from campustwin.state.store import EntityStore

_logger = logging.getLogger(__name__)

STORE_KEY = web.AppKey("store", EntityStore)
PROXY_KEY = web.AppKey("route_proxy", RouteProxy)
CORS_ORIGIN_KEY = web.AppKey("cors_allow_origin", str)

_Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]

_CORS_ALLOW_METHODS = "GET, POST, OPTIONS"
_CORS_ALLOW_HEADERS = "Content-Type"


@web.middleware
async def cors_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    origin = request.app[CORS_ORIGIN_KEY]
    if request.method == "OPTIONS":
        return web.Response(
            status=204,
            headers={
                "Access-Control-Allow-Origin": origin,
                "Access-Control-Allow-Methods": _CORS_ALLOW_METHODS,
                "Access-Control-Allow-Headers": _CORS_ALLOW_HEADERS,
            },
        )
    try:
        response = await handler(request)
    except web.HTTPException as exc:
        exc.headers["Access-Control-Allow-Origin"] = origin
        raise
    response.headers["Access-Control-Allow-Origin"] = origin
    return response


@web.middleware
async def error_middleware(request: web.Request, handler: _Handler) -> web.StreamResponse:
    """Render :class:`TwinError` as ``{"error": message}`` with the error's status."""
    try:
        return await handler(request)
    except TwinError as exc:
        return web.json_response({"error": str(exc)}, status=exc.status)


async def get_buildings(request: web.Request) -> web.Response:
    buildings = request.app[STORE_KEY].get_buildings()
    return web.json_response([building.to_wire() for building in buildings])


async def get_vehicles(request: web.Request) -> web.Response:
    vehicles = request.app[STORE_KEY].get_vehicles()
    return web.json_response({vehicle_id: vehicle.to_wire() for vehicle_id, vehicle in vehicles.items()})


async def optimize_route(request: web.Request) -> web.Response:
    try:
        payload = await request.json()
    except json.JSONDecodeError as exc:
        raise TwinValidationError("Request body must be JSON.") from exc

    proxy = request.app.get(PROXY_KEY)
    if proxy is None:
        _logger.error("No route proxy configured")
        raise TwinUpstreamError(ROUTE_UPSTREAM_MESSAGE)
    result = await proxy.optimize_route(payload)
    return web.json_response({"geometry": result.geometry})


def create_app(
    store: EntityStore,
    *,
    proxy: RouteProxy | None = None,
    simulator: VehicleMotionSimulator | None = None,
    cors_allow_origin: str = "*",
) -> web.Application:
    """Build the facade application around already-constructed components.

    The simulator, when given, is started with the application and stopped
    on cleanup. Without ``proxy`` the route endpoint answers the generic
    upstream error.
    """
    app = web.Application(middlewares=[cors_middleware, error_middleware])
    app[STORE_KEY] = store
    app[CORS_ORIGIN_KEY] = cors_allow_origin
    if proxy is not None:
        app[PROXY_KEY] = proxy

    app.router.add_get("/api/buildings", get_buildings)
    app.router.add_get("/api/vehicles", get_vehicles)
    app.router.add_post("/api/routes/optimize", optimize_route)

    if simulator is not None:

        async def _simulator_ctx(_app: web.Application) -> AsyncIterator[None]:
            simulator.start()
            yield
            await simulator.stop()

        app.cleanup_ctx.append(_simulator_ctx)

    return app


def build_app(config: TwinConfig, store: EntityStore | None = None) -> web.Application:
    """Production wiring: demo store, MapmyIndia proxy and (optionally) the simulator."""
    store = store if store is not None else EntityStore.with_demo_data()
    simulator = None
    if config.simulator_enabled:
        simulator = VehicleMotionSimulator(
            store,
            interval=config.simulator_interval,
            max_offset=config.simulator_max_offset,
        )
    if not config.mapmyindia_api_key:
        _logger.warning("MAPMYINDIA_API_KEY not set; route optimization requests will fail")

    provider = MapmyIndiaProvider(config)
    app = create_app(
        store,
        proxy=RouteProxy(provider),
        simulator=simulator,
        cors_allow_origin=config.cors_allow_origin,
    )

    async def _provider_ctx(_app: web.Application) -> AsyncIterator[None]:
        async with provider:
            yield

    app.cleanup_ctx.append(_provider_ctx)
    return app


def run_server(config: TwinConfig) -> None:
    """Serve the facade until interrupted."""
    app = build_app(config)
    _logger.info("Server is running on http://%s:%d", config.host, config.port)
    web.run_app(app, host=config.host, port=config.port, print=None)
