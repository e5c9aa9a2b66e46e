import logging

import pytest

from loquat.aop.base import AopError, Aspect
from loquat.aop.error_tracking import ErrorTrackingAspect
from loquat.aop.logging_aspect import LoggingAspect
from loquat.aop.manager import AopFactory, AopManager
from loquat.aop.performance import PerformanceAspect


@pytest.fixture
def logger():
    return logging.getLogger("loquat.tests.aop_manager")


class RecordingAspect(Aspect):
    def __init__(self, label, events):
        self.label = label
        self.events = events

    async def before(self, operation):
        self.events.append((self.label, "before", operation))

    async def after(self, operation, error):
        self.events.append((self.label, "after", operation, None if error is None else str(error)))


def test_aop_manager_creation():
    manager = AopManager()
    assert len(manager.aspects()) == 0


@pytest.mark.asyncio
async def test_aop_manager_add_aspect(logger):
    manager = AopManager()
    manager.add_aspect(LoggingAspect(logger))
    assert len(manager.aspects()) == 1
    result = await manager.apply_aspects("test_operation", lambda: 42)
    assert result == 42


def test_aop_factory(logger):
    assert len(AopFactory.create_manager().aspects()) == 0
    assert len(AopFactory.create_with_logging(logger).aspects()) == 1
    full = AopFactory.create_full(logger)
    kinds = [type(a) for a in full.aspects()]
    assert kinds == [LoggingAspect, ErrorTrackingAspect, PerformanceAspect]


def test_single_aspect_factories(logger):
    tracking = AopFactory.create_with_error_tracking(logger).aspects()
    performance = AopFactory.create_with_performance(logger).aspects()
    assert [type(a) for a in tracking] == [ErrorTrackingAspect]
    assert [type(a) for a in performance] == [PerformanceAspect]


@pytest.mark.asyncio
async def test_apply_aspects_order():
    events = []
    manager = AopManager()
    manager.add_aspect(RecordingAspect("a", events))
    manager.add_aspect(RecordingAspect("b", events))
    result = await manager.apply_aspects("op", lambda: "done")
    assert result == "done"
    assert events == [
        ("a", "before", "op"),
        ("b", "before", "op"),
        ("a", "after", "op", None),
        ("b", "after", "op", None),
    ]


@pytest.mark.asyncio
async def test_apply_aspects_reraises_and_reports_error():
    events = []
    manager = AopManager()
    manager.add_aspect(RecordingAspect("a", events))

    def failing():
        raise ValueError("Division by zero")

    with pytest.raises(ValueError, match="Division by zero"):
        await manager.apply_aspects("divide", failing)
    assert events[-1] == ("a", "after", "divide", "Division by zero")


@pytest.mark.asyncio
async def test_apply_aspects_awaits_coroutines():
    manager = AopManager()

    async def compute():
        return 5 + 3

    assert await manager.apply_aspects("manual_add", compute) == 8


@pytest.mark.asyncio
async def test_error_tracking_counts_failures_through_manager(logger):
    tracker = ErrorTrackingAspect(logger, collect_stack_traces=False)
    manager = AopManager()
    manager.add_aspect(tracker)

    def failing():
        raise AopError("bad")

    with pytest.raises(AopError):
        await manager.apply_aspects("op", failing)
    assert tracker.error_count() == 1


@pytest.mark.asyncio
async def test_create_proxy_carries_aspects():
    events = []
    manager = AopManager()
    aspect = RecordingAspect("a", events)
    manager.add_aspect(aspect)
    proxy = manager.create_proxy([1, 2, 3])
    assert proxy.aspects() == (aspect,)
    total = await proxy.execute_with_aspects("sum", sum)
    assert total == 6
    assert events == [("a", "before", "sum"), ("a", "after", "sum", None)]