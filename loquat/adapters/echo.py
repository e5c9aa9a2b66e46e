"""An adapter that echoes messages back."""

from __future__ import annotations

import dataclasses
import time

from loquat.adapters.base import Adapter, AdapterError, AdapterStatistics
from loquat.adapters.config import AdapterConfig
from loquat.adapters.factory import AdapterFactory
from loquat.adapters.status import AdapterStatus


class EchoAdapter(Adapter):
    """Echoes every message it receives."""

    def __init__(self, config: AdapterConfig) -> None:
        self._config = config
        self._status = AdapterStatus.READY
        self._statistics = AdapterStatistics()
        self._running = False

    def name(self) -> str:
        return "EchoAdapter"

    def version(self) -> str:
        return "1.0.0"

    def adapter_id(self) -> str:
        return self._config.adapter_id

    def config(self) -> AdapterConfig:
        return dataclasses.replace(self._config)

    def status(self) -> AdapterStatus:
        return self._status

    def statistics(self) -> AdapterStatistics:
        return dataclasses.replace(self._statistics)

    async def echo(self, message: str) -> str:
        """Return the message prefixed with ``Echo: `` and count it."""
        self._statistics.events_received += 1
        self._statistics.messages_sent += 1
        self._statistics.last_activity = int(time.time())
        return f"Echo: {message}"

    async def start(self) -> None:
        if self._running:
            raise AdapterError("Adapter is already running")
        self._running = True
        self._status = AdapterStatus.RUNNING

    async def stop(self) -> None:
        self._running = False
        self._status = AdapterStatus.STOPPED


class EchoAdapterFactory(AdapterFactory):
    """Builds EchoAdapter instances."""

    def adapter_type(self) -> str:
        return "echo"

    def create(self, config: AdapterConfig) -> Adapter:
        return EchoAdapter(config)