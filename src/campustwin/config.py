"""Runtime configuration for campustwin."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from campustwin._constants import (
    DEFAULT_API_URL,
    DEFAULT_MAX_OFFSET,
    DEFAULT_PORT,
    DEFAULT_TICK_INTERVAL,
    ROUTING_BASE_URL,
)
from campustwin.exceptions import TwinConfigError

T = TypeVar("T")


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env: Mapping[str, str], key: str, cast: Callable[[str], T]) -> T | None:
    raw = env.get(key)
    if raw is None or not raw.strip():
        return None
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise TwinConfigError(f"{key} must be a number, got {raw!r}") from exc


@dataclasses.dataclass(frozen=True)
class TwinConfig:
    """Server and client configuration.

    Parameters
    ----------
    mapmyindia_api_key : str or None
        API key for the MapmyIndia directions API. Route requests fail with
        an upstream error while it is unset.
    host : str
        Interface the HTTP facade binds to.
    port : int
        Port the HTTP facade listens on.
    routing_base_url : str
        Base URL of the routing provider.
    routing_timeout : float
        Total timeout in seconds for one routing provider call.
    simulator_enabled : bool
        Run the vehicle motion simulator alongside the facade.
    simulator_interval : float
        Seconds between simulator ticks.
    simulator_max_offset : float
        Largest per-axis offset in degrees applied on one tick.
    cors_allow_origin : str
        Value of the ``Access-Control-Allow-Origin`` response header.
    api_base_url : str
        Facade URL used by the client-side sync loop.
    poll_interval : float
        Seconds between client vehicle polls.
    retire_after_misses : int
        Consecutive polls a vehicle may be absent before its marker is removed.
    """

    mapmyindia_api_key: str | None = None
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    routing_base_url: str = ROUTING_BASE_URL
    routing_timeout: float = 10.0
    simulator_enabled: bool = True
    simulator_interval: float = DEFAULT_TICK_INTERVAL
    simulator_max_offset: float = DEFAULT_MAX_OFFSET
    cors_allow_origin: str = "*"
    api_base_url: str = DEFAULT_API_URL
    poll_interval: float = DEFAULT_TICK_INTERVAL
    retire_after_misses: int = 1

    def __post_init__(self) -> None:
        if self.routing_timeout <= 0:
            raise TwinConfigError("routing_timeout must be positive")
        if self.simulator_interval <= 0 or self.poll_interval <= 0:
            raise TwinConfigError("intervals must be positive")
        if self.simulator_max_offset < 0:
            raise TwinConfigError("simulator_max_offset must not be negative")
        if self.retire_after_misses < 1:
            raise TwinConfigError("retire_after_misses must be at least 1")

    @classmethod
    def from_env(cls, **overrides: Any) -> TwinConfig:
        """Create configuration from environment variables.

        ``MAPMYINDIA_API_KEY`` and ``PORT`` keep the names the frontend
        tooling already uses; everything else is read from ``TWIN_*``
        variables. Explicit keyword arguments override environment values.

        Raises
        ------
        TwinConfigError
            If a numeric variable cannot be parsed or a value is out of range.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        _ENV_STR_MAP = {
            "MAPMYINDIA_API_KEY": "mapmyindia_api_key",
            "TWIN_HOST": "host",
            "TWIN_ROUTING_BASE_URL": "routing_base_url",
            "TWIN_CORS_ALLOW_ORIGIN": "cors_allow_origin",
            "TWIN_API_URL": "api_base_url",
        }
        for env_key, field_name in _ENV_STR_MAP.items():
            val = env.get(env_key)
            if val is not None and val.strip():
                config_kwargs[field_name] = val.strip()

        port = _env_number(env, "TWIN_PORT", int)
        if port is None:
            port = _env_number(env, "PORT", int)
        if port is not None:
            config_kwargs["port"] = port

        _ENV_NUMBER_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
            "TWIN_ROUTING_TIMEOUT": ("routing_timeout", float),
            "TWIN_SIMULATOR_INTERVAL": ("simulator_interval", float),
            "TWIN_SIMULATOR_MAX_OFFSET": ("simulator_max_offset", float),
            "TWIN_POLL_INTERVAL": ("poll_interval", float),
            "TWIN_RETIRE_AFTER_MISSES": ("retire_after_misses", int),
        }
        for env_key, (field_name, cast) in _ENV_NUMBER_MAP.items():
            parsed = _env_number(env, env_key, cast)
            if parsed is not None:
                config_kwargs[field_name] = parsed

        config_kwargs["simulator_enabled"] = _env_bool(env.get("TWIN_SIMULATOR_ENABLED"), True)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
