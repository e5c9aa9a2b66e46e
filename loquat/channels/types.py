"""Identification of conversation channels."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ChannelKind(Enum):
    """Kind of conversation a channel stands for."""

    GROUP = "group"
    PRIVATE = "private"
    CHANNEL = "channel"


_ID_KEYS = {
    ChannelKind.GROUP: "group_id",
    ChannelKind.PRIVATE: "user_id",
    ChannelKind.CHANNEL: "channel_id",
}


@dataclass(frozen=True)
class ChannelType:
    """A group chat, a private chat or a channel, with its identifier."""

    kind: ChannelKind
    identifier: str

    @classmethod
    def group(cls, group_id: str) -> ChannelType:
        return cls(ChannelKind.GROUP, group_id)

    @classmethod
    def private(cls, user_id: str) -> ChannelType:
        return cls(ChannelKind.PRIVATE, user_id)

    @classmethod
    def channel(cls, channel_id: str) -> ChannelType:
        return cls(ChannelKind.CHANNEL, channel_id)

    def id(self) -> str:
        """The group, user or channel identifier."""
        return self.identifier

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.identifier}"

    def to_dict(self) -> dict[str, str]:
        """Tagged form, e.g. ``{"type": "group", "group_id": "1"}``."""
        return {"type": self.kind.value, _ID_KEYS[self.kind]: self.identifier}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ChannelType:
        """Parse the tagged form; raises ValueError on malformed data."""
        if not isinstance(data, Mapping):
            raise ValueError(f"channel type must be a mapping, got {type(data).__name__}")
        tag = data.get("type")
        try:
            kind = ChannelKind(tag)
        except ValueError:
            raise ValueError(f"unknown channel type: {tag!r}") from None
        key = _ID_KEYS[kind]
        value = data.get(key)
        if not isinstance(value, str):
            raise ValueError(f"missing or invalid field `{key}` for channel type {tag}")
        return cls(kind, value)