"""An adapter that reads lines from an input stream and reports them."""

from __future__ import annotations

import asyncio
import dataclasses
import sys
import time
from typing import Any, TextIO

from loquat.adapters.base import Adapter, AdapterError, AdapterStatistics
from loquat.adapters.config import AdapterConfig
from loquat.adapters.factory import AdapterFactory
from loquat.adapters.status import AdapterStatus

_QUIT_WORDS = frozenset({"quit", "exit"})


class ConsoleAdapter(Adapter):
    """Reads messages line by line, by default from standard input."""

    def __init__(
        self,
        config: AdapterConfig,
        input_stream: TextIO | None = None,
        output_stream: TextIO | None = None,
    ) -> None:
        self._config = config
        self._input = input_stream
        self._output = output_stream
        self._status = AdapterStatus.READY
        self._statistics = AdapterStatistics()
        self._running = False
        self._event_sender: Any = None
        self._task: asyncio.Task[None] | None = None

    def name(self) -> str:
        return "ConsoleAdapter"

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

    def set_event_sender(self, sender: Any) -> None:
        """Attach the channel that events would be delivered to."""
        self._event_sender = sender

    def _say(self, text: str) -> None:
        out = self._output if self._output is not None else sys.stdout
        print(f"[{self._config.adapter_id}] {text}", file=out, flush=True)

    async def start(self) -> None:
        """Begin reading input in a background task."""
        if self._running:
            raise AdapterError("Adapter is already running")
        self._running = True
        self._status = AdapterStatus.RUNNING
        self._task = asyncio.create_task(self._read_loop())

    async def stop(self) -> None:
        self._running = False
        self._status = AdapterStatus.STOPPED

    async def wait_stopped(self) -> None:
        """Wait until the reading task has finished."""
        if self._task is not None:
            await self._task

    async def _read_loop(self) -> None:
        stream = self._input if self._input is not None else sys.stdin
        self._say("Console adapter started. Type messages and press Enter to send.")
        self._say("Type 'quit' or 'exit' to stop the adapter.")

        while self._running:
            try:
                raw = await asyncio.to_thread(stream.readline)
            except (OSError, ValueError) as exc:
                self._say(f"Error reading input: {exc}")
                self._statistics.errors += 1
                self._running = False
                self._status = AdapterStatus.error(str(exc))
                break

            if raw == "":
                self._say("End of input")
                self._running = False
                self._status = AdapterStatus.STOPPED
                break

            line = raw.strip()
            if line.lower() in _QUIT_WORDS:
                self._say("Stopping adapter...")
                self._running = False
                self._status = AdapterStatus.STOPPED
                break

            self._say(f"Received: {line}")
            self._statistics.events_received += 1
            self._statistics.last_activity = int(time.time())

            if self._event_sender is not None:
                self._say("Event would be sent to event system")

        self._say("Console adapter stopped")


class ConsoleAdapterFactory(AdapterFactory):
    """Builds ConsoleAdapter instances."""

    def adapter_type(self) -> str:
        return "console"

    def create(self, config: AdapterConfig) -> Adapter:
        return ConsoleAdapter(config)