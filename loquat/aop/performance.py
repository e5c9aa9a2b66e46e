"""An aspect that reports timing, memory and CPU figures of advised operations."""

from __future__ import annotations

import logging
import os
import subprocess
import time
from dataclasses import dataclass, field
from datetime import timedelta

from loquat.adapters.config import ConfigError
from loquat.aop.base import AopError, Aspect

_DEFAULT_SLOW_THRESHOLD = timedelta(milliseconds=1000)


def _type_name(value: object) -> str:
    kind = type(value)
    return f"{kind.__module__}.{kind.__qualname__}"


def _ps_lines(column: str) -> list[str] | None:
    """Output lines of ``ps`` for one column of the current process."""
    try:
        completed = subprocess.run(
            ["ps", "-o", column, "-p", str(os.getpid())],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError:
        return None
    return completed.stdout.splitlines()


class PerformanceAspect(Aspect):
    """Logs the start and completion of operations with resource figures."""

    def __init__(
        self,
        logger: logging.Logger,
        slow_threshold: timedelta = _DEFAULT_SLOW_THRESHOLD,
        track_memory: bool = False,
        track_cpu: bool = False,
        enable_metrics: bool = True,
    ) -> None:
        self.logger = logger
        self.slow_threshold = slow_threshold
        self.track_memory = track_memory
        self.track_cpu = track_cpu
        self.enable_metrics = enable_metrics

    def _copy(self, **changes: object) -> PerformanceAspect:
        settings = {
            "slow_threshold": self.slow_threshold,
            "track_memory": self.track_memory,
            "track_cpu": self.track_cpu,
            "enable_metrics": self.enable_metrics,
        }
        settings.update(changes)
        return PerformanceAspect(self.logger, **settings)  # type: ignore[arg-type]

    def with_slow_threshold(self, threshold: timedelta) -> PerformanceAspect:
        return self._copy(slow_threshold=threshold)

    def with_memory_tracking(self, track: bool) -> PerformanceAspect:
        return self._copy(track_memory=track)

    def with_cpu_tracking(self, track: bool) -> PerformanceAspect:
        return self._copy(track_cpu=track)

    def with_metrics(self, enable: bool) -> PerformanceAspect:
        return self._copy(enable_metrics=enable)

    @classmethod
    def web_request_monitor(cls, logger: logging.Logger) -> PerformanceAspect:
        return cls(logger, timedelta(milliseconds=500), True, False, True)

    @classmethod
    def database_monitor(cls, logger: logging.Logger) -> PerformanceAspect:
        return cls(logger, timedelta(milliseconds=200), False, False, True)

    @classmethod
    def background_job_monitor(cls, logger: logging.Logger) -> PerformanceAspect:
        return cls(logger, timedelta(seconds=30), True, True, True)

    def get_memory_usage(self) -> tuple[int, int] | None:
        """Virtual and resident memory in bytes, or None when not tracked or unknown."""
        if not self.track_memory:
            return None
        lines = _ps_lines("vsz,rss")
        if lines is None or len(lines) < 2:
            return None
        parts = lines[1].split()
        if len(parts) < 2:
            return None
        try:
            vsz, rss = int(parts[0]), int(parts[1])
        except ValueError:
            return None
        if vsz < 0 or rss < 0:
            return None
        return vsz * 1024, rss * 1024

    def get_cpu_usage(self) -> float | None:
        """CPU usage in percent, or None when not tracked or unknown."""
        if not self.track_cpu:
            return None
        lines = _ps_lines("%cpu")
        if lines is None or len(lines) < 2:
            return None
        try:
            return float(lines[1].strip())
        except ValueError:
            return None

    def _resource_context(self, suffix: str) -> dict[str, object]:
        context: dict[str, object] = {}
        memory = self.get_memory_usage()
        if memory is not None:
            context[f"memory_vsz_{suffix}"] = memory[0]
            context[f"memory_rss_{suffix}"] = memory[1]
        cpu = self.get_cpu_usage()
        if cpu is not None:
            context[f"cpu_{suffix}"] = cpu
        return context

    async def before(self, operation: str) -> None:
        if not self.enable_metrics:
            return
        context: dict[str, object] = {"operation": operation, "phase": "start"}
        context.update(self._resource_context("initial"))
        self.logger.log(
            logging.DEBUG,
            "Starting performance monitoring for %s",
            operation,
            extra=context,
        )

    async def after(self, operation: str, error: AopError | None) -> None:
        if not self.enable_metrics:
            return
        context: dict[str, object] = {"operation": operation, "success": error is None}
        context.update(self._resource_context("final"))
        level = logging.ERROR if error is not None else logging.INFO
        self.logger.log(
            level, "Completed performance monitoring for %s", operation, extra=context
        )

    async def on_error(self, operation: str, error: AopError) -> None:
        self.logger.log(
            logging.ERROR,
            "Performance monitoring error in %s",
            operation,
            extra={
                "operation": operation,
                "error_type": _type_name(error),
                "error_message": str(error),
            },
        )

    def __repr__(self) -> str:
        return (
            f"PerformanceAspect(slow_threshold={self.slow_threshold!r}, "
            f"track_memory={self.track_memory!r}, track_cpu={self.track_cpu!r}, "
            f"enable_metrics={self.enable_metrics!r})"
        )


@dataclass
class PerformanceMetrics:
    """Measurements taken for one operation."""

    operation: str
    start_time: float = field(default_factory=time.monotonic)
    end_time: float | None = None
    success: bool | None = None
    memory_initial: tuple[int, int] | None = None
    memory_final: tuple[int, int] | None = None
    cpu_initial: float | None = None
    cpu_final: float | None = None

    def complete(self, success: bool) -> None:
        """Mark the operation finished now."""
        self.end_time = time.monotonic()
        self.success = success

    def duration(self) -> timedelta | None:
        """Elapsed time, or None while the operation is unfinished."""
        if self.end_time is None:
            return None
        return timedelta(seconds=self.end_time - self.start_time)

    def memory_delta(self) -> tuple[int, int] | None:
        """Change in virtual and resident memory, when both readings exist."""
        if self.memory_initial is None or self.memory_final is None:
            return None
        return (
            self.memory_final[0] - self.memory_initial[0],
            self.memory_final[1] - self.memory_initial[1],
        )

    def cpu_delta(self) -> float | None:
        """Change in CPU usage, when both readings exist."""
        if self.cpu_initial is None or self.cpu_final is None:
            return None
        return self.cpu_final - self.cpu_initial


class PerformanceAspectBuilder:
    """Step-by-step construction of a PerformanceAspect."""

    def __init__(self) -> None:
        self._logger: logging.Logger | None = None
        self._slow_threshold = _DEFAULT_SLOW_THRESHOLD
        self._track_memory = False
        self._track_cpu = False
        self._enable_metrics = True

    def logger(self, logger: logging.Logger) -> PerformanceAspectBuilder:
        self._logger = logger
        return self

    def slow_threshold(self, threshold: timedelta) -> PerformanceAspectBuilder:
        self._slow_threshold = threshold
        return self

    def track_memory(self, track: bool) -> PerformanceAspectBuilder:
        self._track_memory = track
        return self

    def track_cpu(self, track: bool) -> PerformanceAspectBuilder:
        self._track_cpu = track
        return self

    def enable_metrics(self, enable: bool) -> PerformanceAspectBuilder:
        self._enable_metrics = enable
        return self

    def build(self) -> PerformanceAspect:
        """Build the aspect; raises ConfigError when no logger was given."""
        if self._logger is None:
            raise ConfigError("Logger is required for performance aspect")
        return PerformanceAspect(
            self._logger,
            self._slow_threshold,
            self._track_memory,
            self._track_cpu,
            self._enable_metrics,
        )