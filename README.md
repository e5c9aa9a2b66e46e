# loquat

Building blocks for chat bots. The library has four parts.

- **Adapters** (`loquat.adapters`): a common interface for messaging platforms. This part holds:
  - adapter configuration, status and statistics;
  - factories and a factory registry;
  - two ready-made adapters, an echo adapter and a console adapter that reads lines from a stream.
- **Adapter state tracking** (`loquat.adapters.state_manager`): `AdapterStateManager` records state transitions, keeps a bounded history and runs health checks.
- **Channels** (`loquat.channels`): `ChannelType` identifies group, private and channel conversations. `ChannelInfo`, `ChannelManagerConfig` and `ChannelStats` hold the bookkeeping records.
- **Aspects** (`loquat.aop`): asynchronous before and after hooks around operations. Logging, error-tracking and performance aspects are included. `AopProxy` and `AopManager` weave aspects around calls.

The library has no dependencies outside the standard library. Logging goes through the standard `logging` module.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Adapters

```python
import asyncio

from loquat.adapters.config import AdapterConfig
from loquat.adapters.echo import EchoAdapterFactory
from loquat.adapters.factory import AdapterFactoryRegistry


async def main():
    registry = AdapterFactoryRegistry()
    registry.register(EchoAdapterFactory())

    config = AdapterConfig.new("echo", "echo-001", "echo://").with_name("Echo")
    adapter = registry.create(config)

    await adapter.start()
    print(await adapter.echo("hello"))   # Echo: hello
    print(adapter.status())              # Running
    await adapter.stop()
    print(adapter.statistics())          # events_received=1, messages_sent=1, ...


asyncio.run(main())
```

`AdapterFactoryRegistry.create` and `AdapterFactoryRegistry.validate_config` raise `loquat.adapters.config.ConfigError` in three cases:

- no factory is registered for the adapter type;
- the configuration's type does not match the factory;
- the adapter is disabled.

If you start an adapter that is already running, `start` raises `loquat.adapters.base.AdapterError`.

### Configuration

`AdapterConfig` and its parts (`ConnectionConfig`, `HeartbeatConfig`, `RetryConfig`) are dataclasses.

- **Dictionaries**: `from_dict` reads a dictionary and fills in the defaults. `to_dict` produces a plain dictionary. A missing or mistyped field raises `ConfigError`.
- **Builder methods**: the `with_*` methods return a modified copy. `with_platform_config` only accepts JSON-serializable values.

### Status

`AdapterStatus` has these values:

- `AdapterStatus.UNINITIALIZED`
- `AdapterStatus.INITIALIZING`
- `AdapterStatus.READY`
- `AdapterStatus.RUNNING`
- `AdapterStatus.PAUSED`
- `AdapterStatus.STOPPED`
- `AdapterStatus.error(message)`

A status counts as active when it is ready, running or paused.

### Console adapter

`ConsoleAdapter(config, input_stream=None, output_stream=None)` reads lines in a background task. By default it reads standard input and writes to standard output.

- **Each line**: the adapter reports the line as received and counts it as an event.
- **Stopping**: the input `quit` or `exit` stops the adapter, and so does the end of the input. Either way the status becomes `STOPPED`.
- **Read errors**: a read error sets an error status.
- **Waiting**: `wait_stopped()` waits for the reading task to finish.

### State tracking

```python
from loquat.adapters.state_manager import AdapterStateManager
from loquat.adapters.status import AdapterStatus

states = AdapterStateManager("qq-001", max_history_size=100)
states.set_state(AdapterStatus.RUNNING, "started")
states.health_status()        # "Healthy"
states.get_stats().state_counts  # {"Running": 1}
```

If you set the state to the value it already has, nothing is recorded. When the history grows past `max_history_size`, the oldest transitions are dropped.

## Channels

```python
from loquat.channels.types import ChannelType

group = ChannelType.group("123456")
group.id()        # "123456"
str(group)        # "group:123456"
group.to_dict()   # {"type": "group", "group_id": "123456"}
```

In `loquat.channels.manager_types`:

- `ChannelInfo` tracks when a channel was created and last used.
- `ChannelManagerConfig` defaults to 100 channels, a 300-second timeout and a 60-second cleanup interval.
- `ChannelStats` counts created and removed channels and records the peak number in use.

## Aspects

```python
import asyncio
import logging

from loquat.aop.manager import AopFactory

logger = logging.getLogger("bot")
manager = AopFactory.create_full(logger)
result = asyncio.run(manager.apply_aspects("add", lambda: 2 + 3))  # 5
```

`AopFactory.create_full` attaches three aspects, in this order: a `LoggingAspect`, an `ErrorTrackingAspect` and a `PerformanceAspect`.

- **Before the call**: every aspect's `before` hook runs.
- **After the call**: every `after` hook runs, whether the call returned or raised. A failure is passed to the hooks as an `AopError`, and then the original exception is raised again.

`AopProxy(target, aspects)` does the same for `func(target)` through `execute_with_aspects`.

Each aspect has a builder. The builders raise `ConfigError` when no logger is given.

- `LoggingAspect` logs calls and completions at a configurable level.
- `ErrorTrackingAspect` counts failures. It can attach a stack trace, and it marks when an error threshold is reached.
- `PerformanceAspect` logs the start and end of each operation. When enabled, it adds memory and CPU figures read through `ps`.
- `PerformanceMetrics` records the duration of an operation and the memory and CPU deltas.

## What this package does not do

- **No channel manager**: nothing creates, stores or expires channels. The channel types are records only.
- **No adapter manager**: adapters are not discovered or loaded from a directory, and they are not hot-reloaded.
- **No event system**: the console adapter only reports that an event would be sent.
- **No network connections**: no real platform adapters are included.
- **No command-line program or server.**