"""Tracking of an adapter's state, its transitions and its health."""

from __future__ import annotations

import logging
import threading
import time
from collections import Counter
from dataclasses import dataclass, field

from loquat.adapters.status import AdapterStatus, StatusKind

_HEALTH_LABELS = {
    StatusKind.RUNNING: "Healthy",
    StatusKind.READY: "Ready",
    StatusKind.PAUSED: "Paused",
    StatusKind.STOPPED: "Stopped",
    StatusKind.INITIALIZING: "Initializing",
    StatusKind.UNINITIALIZED: "Uninitialized",
}


def _debug_name(status: AdapterStatus) -> str:
    """Name of a status as used in logs and statistics keys."""
    if status.is_error():
        return f'Error("{status.message}")'
    return status.kind.value


@dataclass(frozen=True)
class StateTransition:
    """One change of state, with its time in milliseconds since the epoch."""

    from_state: AdapterStatus
    to_state: AdapterStatus
    timestamp: int
    reason: str


@dataclass
class AdapterStateStats:
    """Summary of the current state and the recorded transitions."""

    current_state: AdapterStatus
    transition_count: int
    state_counts: dict[str, int] = field(default_factory=dict)


class AdapterStateManager:
    """Holds an adapter's current state and a bounded history of changes."""

    def __init__(
        self,
        adapter_id: str,
        logger: logging.Logger | None = None,
        max_history_size: int = 100,
    ) -> None:
        self.adapter_id = adapter_id
        self.max_history_size = max_history_size
        self._logger = logger if logger is not None else logging.getLogger(__name__)
        self._state = AdapterStatus.UNINITIALIZED
        self._history: list[StateTransition] = []
        self._lock = threading.RLock()

    def get_state(self) -> AdapterStatus:
        with self._lock:
            return self._state

    def set_state(self, new_state: AdapterStatus, reason: str) -> None:
        """Change the state; a change to the same state is not recorded."""
        with self._lock:
            old_state = self._state
            if old_state == new_state:
                return
            self._state = new_state
            self._record_transition(
                StateTransition(
                    from_state=old_state,
                    to_state=new_state,
                    timestamp=int(time.time() * 1000),
                    reason=reason,
                )
            )
        self._logger.info(
            "Adapter %s state changed: %s -> %s",
            self.adapter_id,
            _debug_name(old_state),
            _debug_name(new_state),
            extra={
                "component": "AdapterStateManager",
                "adapter_id": self.adapter_id,
                "old_state": _debug_name(old_state),
                "new_state": _debug_name(new_state),
                "reason": reason,
            },
        )

    def is_state(self, status: AdapterStatus) -> bool:
        return self.get_state() == status

    def is_running(self) -> bool:
        return self.get_state().kind is StatusKind.RUNNING

    def is_ready(self) -> bool:
        return self.get_state().kind is StatusKind.READY

    def is_healthy(self) -> bool:
        return self.get_state().is_active()

    def get_history(self) -> list[StateTransition]:
        with self._lock:
            return list(self._history)

    def get_recent_history(self, limit: int) -> list[StateTransition]:
        """The last ``limit`` transitions, oldest first."""
        with self._lock:
            start = max(len(self._history) - limit, 0)
            return self._history[start:]

    def transition_count(self) -> int:
        with self._lock:
            return len(self._history)

    def health_check(self) -> bool:
        """Return whether the adapter is healthy, warning in the log if not."""
        state = self.get_state()
        if state.is_active():
            return True
        self._logger.warning(
            "Health check failed for adapter %s: not healthy",
            self.adapter_id,
            extra={
                "component": "AdapterStateManager",
                "adapter_id": self.adapter_id,
                "state": _debug_name(state),
            },
        )
        return False

    def health_status(self) -> str:
        state = self.get_state()
        if state.is_error():
            return f"Error: {state.message}"
        return _HEALTH_LABELS[state.kind]

    def reset(self) -> None:
        self.set_state(AdapterStatus.UNINITIALIZED, "State manager reset")

    def clear_history(self) -> None:
        with self._lock:
            self._history.clear()

    def get_stats(self) -> AdapterStateStats:
        with self._lock:
            counts = Counter(_debug_name(t.to_state) for t in self._history)
            return AdapterStateStats(
                current_state=self._state,
                transition_count=len(self._history),
                state_counts=dict(counts),
            )

    def _record_transition(self, transition: StateTransition) -> None:
        self._history.append(transition)
        excess = len(self._history) - self.max_history_size
        if excess > 0:
            del self._history[:excess]