"""Records used by the channel manager: channel info, settings and counters."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import datetime, timezone

from loquat.channels.types import ChannelType


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ChannelInfo:
    """When a channel was created and last used."""

    channel_type: ChannelType
    created_at: datetime = field(default_factory=_now)
    last_used: datetime | None = None

    def __post_init__(self) -> None:
        if self.last_used is None:
            self.last_used = self.created_at

    def touch(self) -> None:
        """Mark the channel as used now."""
        self.last_used = _now()

    def age_seconds(self) -> int:
        """Whole seconds since creation."""
        return int((_now() - self.created_at).total_seconds())

    def idle_seconds(self) -> int:
        """Whole seconds since last use."""
        return int((_now() - self.last_used).total_seconds())


@dataclass(frozen=True)
class ChannelManagerConfig:
    """Channel manager settings; zero means unlimited or no timeout."""

    max_channels: int = 100
    channel_timeout: int = 300
    auto_create: bool = True
    cleanup_interval: int = 60

    def with_max_channels(self, maximum: int) -> ChannelManagerConfig:
        return dataclasses.replace(self, max_channels=maximum)

    def with_channel_timeout(self, timeout: int) -> ChannelManagerConfig:
        return dataclasses.replace(self, channel_timeout=timeout)

    def with_auto_create(self, enabled: bool) -> ChannelManagerConfig:
        return dataclasses.replace(self, auto_create=enabled)

    def with_cleanup_interval(self, interval: int) -> ChannelManagerConfig:
        return dataclasses.replace(self, cleanup_interval=interval)


@dataclass
class ChannelStats:
    """Counters of created and removed channels."""

    total_created: int = 0
    total_removed: int = 0
    active_channels: int = 0
    peak_channels: int = 0

    def record_created(self, current_count: int) -> None:
        self.total_created += 1
        self.active_channels = current_count
        self.peak_channels = max(self.peak_channels, current_count)

    def record_removed(self, current_count: int) -> None:
        self.total_removed += 1
        self.active_channels = current_count