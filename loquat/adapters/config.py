"""Adapter configuration records."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_MISSING = object()


class ConfigError(ValueError):
    """Raised when a configuration is malformed or invalid."""


def _as_mapping(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ConfigError(f"{what} must be a mapping, got {type(data).__name__}")
    return data


def _check(value: Any, key: str, kind: str, what: str, optional: bool) -> Any:
    if value is None and optional:
        return None
    if kind == "str":
        ok = isinstance(value, str)
    elif kind == "bool":
        ok = isinstance(value, bool)
    elif kind == "uint":
        ok = isinstance(value, int) and not isinstance(value, bool) and value >= 0
    elif kind == "float":
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        if ok:
            value = float(value)
    else:
        ok = True
    if not ok:
        raise ConfigError(f"invalid value for `{key}` in {what}: {value!r}")
    return value


def _field(
    data: Mapping[str, Any],
    key: str,
    kind: str,
    what: str,
    default: Any = _MISSING,
    optional: bool = False,
) -> Any:
    if key not in data:
        if default is _MISSING:
            raise ConfigError(f"missing field `{key}` in {what}")
        return default
    return _check(data[key], key, kind, what, optional)


@dataclass
class ConnectionConfig:
    """How an adapter connects to its platform."""

    conn_type: str
    url: str
    timeout: int = 30
    use_tls: bool = False
    keep_alive: int | None = None
    max_reconnect: int = 5
    params: Any = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ConnectionConfig:
        what = "connection config"
        data = _as_mapping(data, what)
        return cls(
            conn_type=_field(data, "conn_type", "str", what),
            url=_field(data, "url", "str", what),
            timeout=_field(data, "timeout", "uint", what, 30),
            use_tls=_field(data, "use_tls", "bool", what, False),
            keep_alive=_field(data, "keep_alive", "uint", what, None, optional=True),
            max_reconnect=_field(data, "max_reconnect", "uint", what, 5),
            params=_field(data, "params", "any", what, None, optional=True),
        )

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass
class HeartbeatConfig:
    """Heartbeat settings; intervals in seconds."""

    interval: int
    timeout: int | None = None
    enabled: bool = True

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> HeartbeatConfig:
        what = "heartbeat config"
        data = _as_mapping(data, what)
        return cls(
            interval=_field(data, "interval", "uint", what),
            timeout=_field(data, "timeout", "uint", what, None, optional=True),
            enabled=_field(data, "enabled", "bool", what, True),
        )

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass
class RetryConfig:
    """Retry settings; delays in milliseconds."""

    max_attempts: int = 3
    initial_delay: int = 1000
    max_delay: int = 30000
    backoff_multiplier: float = 2.0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> RetryConfig:
        what = "retry config"
        data = _as_mapping(data, what)
        return cls(
            max_attempts=_field(data, "max_attempts", "uint", what, 3),
            initial_delay=_field(data, "initial_delay", "uint", what, 1000),
            max_delay=_field(data, "max_delay", "uint", what, 30000),
            backoff_multiplier=_field(data, "backoff_multiplier", "float", what, 2.0),
        )

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass
class AdapterConfig:
    """Configuration of one adapter instance."""

    adapter_type: str
    adapter_id: str
    connection: ConnectionConfig
    enabled: bool = True
    name: str | None = None
    heartbeat: HeartbeatConfig | None = None
    retry: RetryConfig | None = None
    platform: Any = field(default_factory=dict)
    extra: Any = field(default_factory=dict)

    @classmethod
    def new(cls, adapter_type: str, adapter_id: str, url: str) -> AdapterConfig:
        """A WebSocket adapter configuration with default settings."""
        return cls(
            adapter_type=adapter_type,
            adapter_id=adapter_id,
            connection=ConnectionConfig(conn_type="ws", url=url, params={}),
        )

    @classmethod
    def default(cls) -> AdapterConfig:
        return cls.new("unknown", "default", "ws://localhost")

    def with_name(self, name: str) -> AdapterConfig:
        return dataclasses.replace(self, name=name)

    def with_enabled(self, enabled: bool) -> AdapterConfig:
        return dataclasses.replace(self, enabled=enabled)

    def with_heartbeat(self, heartbeat: HeartbeatConfig) -> AdapterConfig:
        return dataclasses.replace(self, heartbeat=heartbeat)

    def with_retry(self, retry: RetryConfig) -> AdapterConfig:
        return dataclasses.replace(self, retry=retry)

    def with_platform_config(self, key: str, value: Any) -> AdapterConfig:
        """Return a copy with one platform-specific setting added.

        The value must be JSON-serializable; a non-object platform section is
        replaced by a fresh object.
        """
        try:
            converted = json.loads(json.dumps(value))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"cannot serialize platform value for {key!r}: {exc}") from exc
        platform = dict(self.platform) if isinstance(self.platform, Mapping) else {}
        platform[str(key)] = converted
        return dataclasses.replace(self, platform=platform)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AdapterConfig:
        what = "adapter config"
        data = _as_mapping(data, what)
        if "connection" not in data:
            raise ConfigError(f"missing field `connection` in {what}")
        heartbeat = data.get("heartbeat")
        retry = data.get("retry")
        return cls(
            adapter_type=_field(data, "adapter_type", "str", what),
            adapter_id=_field(data, "adapter_id", "str", what),
            connection=ConnectionConfig.from_dict(data["connection"]),
            enabled=_field(data, "enabled", "bool", what, True),
            name=_field(data, "name", "str", what, None, optional=True),
            heartbeat=None if heartbeat is None else HeartbeatConfig.from_dict(heartbeat),
            retry=None if retry is None else RetryConfig.from_dict(retry),
            platform=data.get("platform"),
            extra=data.get("extra"),
        )

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)