"""Coordination of aspects, and ready-made aspect setups."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from loquat.aop.base import AopError, Aspect
from loquat.aop.error_tracking import ErrorTrackingAspect
from loquat.aop.logging_aspect import LoggingAspect
from loquat.aop.performance import PerformanceAspect
from loquat.aop.proxy import AopProxy

T = TypeVar("T")


class AopManager:
    """Holds a list of aspects and applies them to operations."""

    def __init__(self) -> None:
        self._aspects: list[Aspect] = []

    def aspects(self) -> tuple[Aspect, ...]:
        """The registered aspects, in the order they run."""
        return tuple(self._aspects)

    def add_aspect(self, aspect: Aspect) -> None:
        self._aspects.append(aspect)

    def create_proxy(self, target: T) -> AopProxy[T]:
        """A proxy for ``target`` carrying all registered aspects."""
        return AopProxy(target, self._aspects)

    async def apply_aspects(self, operation: str, func: Callable[[], Any]) -> Any:
        """Call ``func()`` with every aspect's before and after advice.

        An exception from ``func`` is reported to the after advice as an
        AopError and then raised again.
        """
        for aspect in self._aspects:
            await aspect.before(operation)

        failure: BaseException | None = None
        result: Any = None
        try:
            result = func()
            if inspect.isawaitable(result):
                result = await result
        except Exception as exc:
            failure = exc

        error = None if failure is None else AopError(str(failure))
        for aspect in self._aspects:
            await aspect.after(operation, error)

        if failure is not None:
            raise failure
        return result


class AopFactory:
    """Ready-made AopManager setups."""

    @staticmethod
    def create_manager() -> AopManager:
        return AopManager()

    @staticmethod
    def create_with_logging(logger: logging.Logger) -> AopManager:
        manager = AopManager()
        manager.add_aspect(LoggingAspect(logger))
        return manager

    @staticmethod
    def create_with_error_tracking(logger: logging.Logger) -> AopManager:
        manager = AopManager()
        manager.add_aspect(ErrorTrackingAspect(logger))
        return manager

    @staticmethod
    def create_with_performance(logger: logging.Logger) -> AopManager:
        manager = AopManager()
        manager.add_aspect(PerformanceAspect(logger))
        return manager

    @staticmethod
    def create_full(logger: logging.Logger) -> AopManager:
        """Logging, error tracking and performance aspects, in that order."""
        manager = AopManager()
        manager.add_aspect(LoggingAspect(logger))
        manager.add_aspect(ErrorTrackingAspect(logger))
        manager.add_aspect(PerformanceAspect(logger))
        return manager