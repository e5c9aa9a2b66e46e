"""An aspect with a name and an on/off switch."""

from __future__ import annotations

from loquat.aop.base import Aspect


class BaseAspect(Aspect):
    """Named aspect that can be switched off; its advice does nothing."""

    def __init__(self, name: str, enabled: bool = True) -> None:
        self._name = name
        self._enabled = enabled

    @classmethod
    def disabled(cls, name: str) -> BaseAspect:
        return cls(name, enabled=False)

    def set_enabled(self, enabled: bool) -> None:
        self._enabled = enabled

    def is_enabled(self) -> bool:
        return self._enabled

    def should_run(self, operation: str) -> bool:
        """True when enabled and applicable to the operation."""
        return self._enabled and self.applies_to(operation)

    def name(self) -> str:
        return self._name

    def __repr__(self) -> str:
        return f"BaseAspect(name={self._name!r}, enabled={self._enabled!r})"