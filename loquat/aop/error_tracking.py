"""An aspect that counts and logs errors of advised operations."""

from __future__ import annotations

import logging
import threading
import traceback

from loquat.adapters.config import ConfigError
from loquat.aop.base import AopError, Aspect


def _type_name(value: object) -> str:
    kind = type(value)
    return f"{kind.__module__}.{kind.__qualname__}"


class ErrorTrackingAspect(Aspect):
    """Counts failed operations and logs each one, alerting past a threshold."""

    def __init__(
        self,
        logger: logging.Logger,
        track_panics: bool = True,
        collect_stack_traces: bool = True,
        error_threshold: int | None = None,
    ) -> None:
        self.logger = logger
        self.track_panics = track_panics
        self.collect_stack_traces = collect_stack_traces
        self.error_threshold = error_threshold
        self._count = 0
        self._lock = threading.Lock()

    def _copy(self, **changes: object) -> ErrorTrackingAspect:
        settings = {
            "track_panics": self.track_panics,
            "collect_stack_traces": self.collect_stack_traces,
            "error_threshold": self.error_threshold,
        }
        settings.update(changes)
        copy = ErrorTrackingAspect(self.logger, **settings)  # type: ignore[arg-type]
        copy._count = self.error_count()
        return copy

    def with_panics(self, track: bool) -> ErrorTrackingAspect:
        return self._copy(track_panics=track)

    def with_stack_traces(self, collect: bool) -> ErrorTrackingAspect:
        return self._copy(collect_stack_traces=collect)

    def with_error_threshold(self, threshold: int) -> ErrorTrackingAspect:
        return self._copy(error_threshold=threshold)

    def error_count(self) -> int:
        with self._lock:
            return self._count

    def reset_error_count(self) -> None:
        with self._lock:
            self._count = 0

    @classmethod
    def production_tracker(cls, logger: logging.Logger) -> ErrorTrackingAspect:
        """No stack traces; alert after 100 errors."""
        return cls(logger, True, False, 100)

    @classmethod
    def development_tracker(cls, logger: logging.Logger) -> ErrorTrackingAspect:
        """Stack traces collected; no alert threshold."""
        return cls(logger, True, True, None)

    def _record(self, operation: str, error: AopError, default_message: str) -> None:
        with self._lock:
            self._count += 1
            count = self._count

        context: dict[str, object] = {
            "operation": operation,
            "error_type": _type_name(error),
            "error_message": str(error),
            "error_count": count,
        }
        if self.collect_stack_traces:
            context["stack_trace"] = "".join(traceback.format_stack())

        threshold = self.error_threshold
        if threshold is not None and count >= threshold:
            context["threshold_exceeded"] = True
            message = f"Error threshold exceeded in {operation}: {count}/{threshold}"
        else:
            message = default_message
        self.logger.log(logging.ERROR, message, extra=context)

    async def before(self, operation: str) -> None:
        """Nothing happens before an operation."""

    async def after(self, operation: str, error: AopError | None) -> None:
        if error is not None:
            self._record(operation, error, f"Error in operation {operation}: {error}")

    async def on_error(self, operation: str, error: AopError) -> None:
        self._record(operation, error, f"AOP error in operation {operation}: {error}")

    def __repr__(self) -> str:
        return (
            f"ErrorTrackingAspect(track_panics={self.track_panics!r}, "
            f"collect_stack_traces={self.collect_stack_traces!r}, "
            f"error_threshold={self.error_threshold!r}, "
            f"error_count={self.error_count()!r})"
        )


class ErrorTrackingAspectBuilder:
    """Step-by-step construction of an ErrorTrackingAspect."""

    def __init__(self) -> None:
        self._logger: logging.Logger | None = None
        self._track_panics = True
        self._collect_stack_traces = True
        self._error_threshold: int | None = None

    def logger(self, logger: logging.Logger) -> ErrorTrackingAspectBuilder:
        self._logger = logger
        return self

    def track_panics(self, track: bool) -> ErrorTrackingAspectBuilder:
        self._track_panics = track
        return self

    def collect_stack_traces(self, collect: bool) -> ErrorTrackingAspectBuilder:
        self._collect_stack_traces = collect
        return self

    def error_threshold(self, threshold: int) -> ErrorTrackingAspectBuilder:
        self._error_threshold = threshold
        return self

    def build(self) -> ErrorTrackingAspect:
        """Build the aspect; raises ConfigError when no logger was given."""
        if self._logger is None:
            raise ConfigError("Logger is required for error tracking aspect")
        return ErrorTrackingAspect(
            self._logger,
            self._track_panics,
            self._collect_stack_traces,
            self._error_threshold,
        )