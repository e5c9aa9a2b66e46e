"""Core building blocks for aspects: advice interface, contexts, results and chains."""

from __future__ import annotations

import dataclasses
import json
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any


class AopError(Exception):
    """Raised when an aspect or an advised operation fails."""


class ExecutionResult(Enum):
    """Whether advice lets execution go on."""

    CONTINUE = "continue"
    STOP = "stop"


class JoinType(Enum):
    """Kind of join point."""

    CALL = "call"
    AROUND = "around"
    RETURN = "return"


@dataclass(frozen=True)
class JoinPoint:
    """A point in execution where advice can be applied."""

    operation: str
    join_type: JoinType = JoinType.CALL


def _to_json_value(value: Any) -> Any:
    try:
        return json.loads(json.dumps(value))
    except (TypeError, ValueError) as exc:
        raise AopError(str(exc)) from exc


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Aspect:
    """Cross-cutting behaviour run around an operation.

    Every piece of advice does nothing by default; subclasses override what
    they need.
    """

    async def before(self, operation: str) -> None:
        """Run before the operation."""

    async def after(self, operation: str, error: AopError | None) -> None:
        """Run after the operation; ``error`` is None when it succeeded."""

    async def on_error(self, operation: str, error: AopError) -> None:
        """Handle an error raised by the operation."""

    def name(self) -> str:
        """Name of this aspect."""
        return type(self).__name__

    def applies_to(self, operation: str) -> bool:
        """Whether this aspect applies to the operation."""
        return True


@dataclass
class AspectContext:
    """Information about one advised operation."""

    operation: str
    component: str | None = None
    start_time: datetime = field(default_factory=_now)
    metadata: dict[str, Any] = field(default_factory=dict)

    def with_component(self, component: str) -> AspectContext:
        return dataclasses.replace(self, component=component, metadata=dict(self.metadata))

    def with_metadata(self, key: str, value: Any) -> AspectContext:
        """Return a copy with a JSON-serializable metadata entry added."""
        metadata = dict(self.metadata)
        metadata[str(key)] = _to_json_value(value)
        return dataclasses.replace(self, metadata=metadata)

    def duration(self) -> timedelta:
        """Time elapsed since the operation started."""
        return _now() - self.start_time


@dataclass
class AspectResult:
    """Outcome of running an aspect chain."""

    context: AspectContext
    success: bool
    error: AopError | None
    duration: timedelta
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success_for(cls, context: AspectContext) -> AspectResult:
        return cls(context=context, success=True, error=None, duration=context.duration())

    @classmethod
    def failure_for(cls, context: AspectContext, error: AopError) -> AspectResult:
        return cls(context=context, success=False, error=error, duration=context.duration())

    def with_data(self, key: str, value: Any) -> AspectResult:
        """Return a copy with a JSON-serializable data entry added."""
        data = dict(self.data)
        data[str(key)] = _to_json_value(value)
        return dataclasses.replace(self, data=data)


class AspectChain(ABC):
    """An ordered group of aspects run together."""

    @abstractmethod
    def add_aspect(self, aspect: Aspect) -> None:
        """Append an aspect to the chain."""

    @abstractmethod
    async def execute(self, context: AspectContext) -> AspectResult:
        """Run the chain's advice for the context's operation."""


class SimpleAspectChain(AspectChain):
    """A chain that runs every aspect's advice in order."""

    def __init__(self, aspects: Iterable[Aspect] | None = None) -> None:
        self._aspects: list[Aspect] = list(aspects) if aspects is not None else []

    def __len__(self) -> int:
        return len(self._aspects)

    def is_empty(self) -> bool:
        return not self._aspects

    def get(self, index: int) -> Aspect | None:
        """The aspect at ``index``, or None when out of range."""
        if 0 <= index < len(self._aspects):
            return self._aspects[index]
        return None

    def remove(self, index: int) -> Aspect | None:
        """Remove and return the aspect at ``index``, or None when out of range."""
        if 0 <= index < len(self._aspects):
            return self._aspects.pop(index)
        return None

    def clear(self) -> None:
        self._aspects.clear()

    def add_aspect(self, aspect: Aspect) -> None:
        self._aspects.append(aspect)

    async def execute(self, context: AspectContext) -> AspectResult:
        for aspect in self._aspects:
            await aspect.before(context.operation)

        result = AspectResult.success_for(context)

        for aspect in self._aspects:
            if result.success:
                error = None
            else:
                error = result.error if result.error is not None else AopError("Unknown error")
            await aspect.after(result.context.operation, error)

        return result