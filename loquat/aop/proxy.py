"""A proxy that runs aspects around operations on a wrapped object."""

from __future__ import annotations

import inspect
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from loquat.aop.base import AopError, Aspect

T = TypeVar("T")


class AopProxy(Generic[T]):
    """Wraps a target and weaves aspects around calls made through it."""

    def __init__(self, target: T, aspects: Iterable[Aspect] | None = None) -> None:
        self.target = target
        self._aspects: list[Aspect] = list(aspects) if aspects is not None else []

    def add_aspect(self, aspect: Aspect) -> None:
        self._aspects.append(aspect)

    def aspects(self) -> tuple[Aspect, ...]:
        """The proxy's aspects, in the order they run."""
        return tuple(self._aspects)

    async def execute_with_aspects(self, operation: str, func: Callable[[T], Any]) -> Any:
        """Call ``func(target)`` with every aspect's before and after advice.

        An exception from ``func`` is reported to the after advice as an
        AopError and then raised again.
        """
        for aspect in self._aspects:
            await aspect.before(operation)

        failure: BaseException | None = None
        result: Any = None
        try:
            result = func(self.target)
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