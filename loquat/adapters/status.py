"""Lifecycle status of an adapter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar


class StatusKind(Enum):
    """The lifecycle states an adapter can be in."""

    UNINITIALIZED = "Uninitialized"
    INITIALIZING = "Initializing"
    READY = "Ready"
    RUNNING = "Running"
    PAUSED = "Paused"
    STOPPED = "Stopped"
    ERROR = "Error"


_ACTIVE_KINDS = frozenset({StatusKind.READY, StatusKind.RUNNING, StatusKind.PAUSED})


@dataclass(frozen=True)
class AdapterStatus:
    """Current state of an adapter; the error state carries a message."""

    kind: StatusKind = StatusKind.UNINITIALIZED
    message: str | None = None

    UNINITIALIZED: ClassVar[AdapterStatus]
    INITIALIZING: ClassVar[AdapterStatus]
    READY: ClassVar[AdapterStatus]
    RUNNING: ClassVar[AdapterStatus]
    PAUSED: ClassVar[AdapterStatus]
    STOPPED: ClassVar[AdapterStatus]

    def __post_init__(self) -> None:
        if self.kind is StatusKind.ERROR:
            if self.message is None:
                object.__setattr__(self, "message", "")
        elif self.message is not None:
            raise ValueError(f"status {self.kind.value} does not carry a message")

    @classmethod
    def error(cls, message: str) -> AdapterStatus:
        """Build an error status with the given message."""
        return cls(StatusKind.ERROR, message)

    def is_active(self) -> bool:
        """True when ready, running or paused."""
        return self.kind in _ACTIVE_KINDS

    def is_processing(self) -> bool:
        """True when the adapter is processing events."""
        return self.kind is StatusKind.RUNNING

    def is_error(self) -> bool:
        """True when the adapter is in the error state."""
        return self.kind is StatusKind.ERROR

    def error_message(self) -> str | None:
        """The error message, or None outside the error state."""
        return self.message if self.is_error() else None

    def __str__(self) -> str:
        if self.is_error():
            return f"Error: {self.message}"
        return self.kind.value


AdapterStatus.UNINITIALIZED = AdapterStatus(StatusKind.UNINITIALIZED)
AdapterStatus.INITIALIZING = AdapterStatus(StatusKind.INITIALIZING)
AdapterStatus.READY = AdapterStatus(StatusKind.READY)
AdapterStatus.RUNNING = AdapterStatus(StatusKind.RUNNING)
AdapterStatus.PAUSED = AdapterStatus(StatusKind.PAUSED)
AdapterStatus.STOPPED = AdapterStatus(StatusKind.STOPPED)