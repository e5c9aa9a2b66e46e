"""Factories that build adapters from configuration, and a registry of them."""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod

from loquat.adapters.base import Adapter
from loquat.adapters.config import AdapterConfig, ConfigError


class AdapterFactory(ABC):
    """Creates adapter instances of one adapter type."""

    @abstractmethod
    def adapter_type(self) -> str:
        """The adapter type this factory supports."""

    @abstractmethod
    def create(self, config: AdapterConfig) -> Adapter:
        """Build an adapter from its configuration."""

    def validate_config(self, config: AdapterConfig) -> None:
        """Raise ConfigError if the configuration does not suit this factory."""
        expected = self.adapter_type()
        if config.adapter_type != expected:
            raise ConfigError(
                f"Invalid adapter type: expected {expected}, got {config.adapter_type}"
            )
        if not config.enabled:
            raise ConfigError(f"Adapter {config.adapter_id} is disabled")


class AdapterFactoryRegistry:
    """Holds one factory per adapter type."""

    def __init__(self) -> None:
        self._factories: dict[str, AdapterFactory] = {}
        self._lock = threading.Lock()

    def register(self, factory: AdapterFactory) -> None:
        """Register a factory, replacing any previous one for its type."""
        with self._lock:
            self._factories[factory.adapter_type()] = factory

    def unregister(self, adapter_type: str) -> AdapterFactory | None:
        """Remove and return the factory for a type, or None if absent."""
        with self._lock:
            return self._factories.pop(adapter_type, None)

    def is_registered(self, adapter_type: str) -> bool:
        with self._lock:
            return adapter_type in self._factories

    def registered_types(self) -> list[str]:
        with self._lock:
            return list(self._factories)

    def _factory_for(self, config: AdapterConfig) -> AdapterFactory:
        with self._lock:
            factory = self._factories.get(config.adapter_type)
        if factory is None:
            raise ConfigError(
                f"No factory registered for adapter type: {config.adapter_type}"
            )
        return factory

    def create(self, config: AdapterConfig) -> Adapter:
        """Validate the configuration and build an adapter from it."""
        factory = self._factory_for(config)
        factory.validate_config(config)
        return factory.create(config)

    def validate_config(self, config: AdapterConfig) -> None:
        """Raise ConfigError if no factory accepts the configuration."""
        self._factory_for(config).validate_config(config)