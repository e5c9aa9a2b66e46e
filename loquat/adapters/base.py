"""Core adapter interface, message types and adapter records."""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from loquat.adapters.config import AdapterConfig
from loquat.adapters.status import AdapterStatus, StatusKind


class AdapterError(Exception):
    """Raised when an adapter operation fails."""


class TargetKind(Enum):
    USER = "user"
    GROUP = "group"
    CHANNEL = "channel"


@dataclass(frozen=True)
class Target:
    """Destination of an outgoing message."""

    kind: TargetKind
    id: str

    @classmethod
    def user(cls, user_id: str) -> Target:
        return cls(TargetKind.USER, user_id)

    @classmethod
    def group(cls, group_id: str) -> Target:
        return cls(TargetKind.GROUP, group_id)

    @classmethod
    def channel(cls, channel_id: str) -> Target:
        return cls(TargetKind.CHANNEL, channel_id)


@dataclass(frozen=True)
class TextMessage:
    content: str


@dataclass(frozen=True)
class ImageMessage:
    url: str
    caption: str | None = None


@dataclass(frozen=True)
class VoiceMessage:
    url: str
    duration: int


@dataclass(frozen=True)
class VideoMessage:
    url: str
    duration: int
    cover_url: str | None = None


@dataclass(frozen=True)
class StickerMessage:
    sticker_id: str


Message = Union[TextMessage, ImageMessage, VoiceMessage, VideoMessage, StickerMessage]


@dataclass
class AdapterStatistics:
    """Counters describing an adapter's activity."""

    events_received: int = 0
    events_sent: int = 0
    messages_sent: int = 0
    errors: int = 0
    uptime_seconds: int = 0
    last_activity: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return dataclasses.asdict(self)


@dataclass
class AdapterInfo:
    """Snapshot of a loaded adapter."""

    adapter_id: str
    name: str
    version: str
    status: AdapterStatus
    adapter_type: str
    config: AdapterConfig
    statistics: AdapterStatistics
    loaded_at: int


class Adapter(ABC):
    """Interface every platform adapter implements."""

    @abstractmethod
    def name(self) -> str:
        """Adapter name."""

    @abstractmethod
    def version(self) -> str:
        """Adapter version."""

    @abstractmethod
    def adapter_id(self) -> str:
        """Unique identifier of this adapter instance."""

    @abstractmethod
    def config(self) -> AdapterConfig:
        """The adapter's configuration."""

    @abstractmethod
    def status(self) -> AdapterStatus:
        """Current status."""

    def is_running(self) -> bool:
        return self.status().kind is StatusKind.RUNNING

    def is_connected(self) -> bool:
        return self.status().is_active()

    @abstractmethod
    def statistics(self) -> AdapterStatistics:
        """Activity counters."""