import logging
import uuid

import pytest

from loquat.adapters.config import ConfigError
from loquat.aop.base import AopError
from loquat.aop.error_tracking import ErrorTrackingAspect, ErrorTrackingAspectBuilder


class _ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(logging.DEBUG)
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture
def captured():
    logger = logging.getLogger(f"test.error_tracking.{uuid.uuid4().hex}")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = _ListHandler()
    logger.addHandler(handler)
    return logger, handler


def test_error_tracking_aspect_creation(captured):
    logger, _ = captured
    aspect = ErrorTrackingAspect(logger)
    assert aspect.track_panics is True
    assert aspect.collect_stack_traces is True
    assert aspect.error_threshold is None
    assert aspect.error_count() == 0


def test_error_tracking_aspect_builder(captured):
    logger, _ = captured
    aspect = (
        ErrorTrackingAspectBuilder()
        .logger(logger)
        .track_panics(False)
        .collect_stack_traces(False)
        .error_threshold(50)
        .build()
    )
    assert aspect.track_panics is False
    assert aspect.collect_stack_traces is False
    assert aspect.error_threshold == 50


def test_error_tracking_aspect_builder_no_logger():
    with pytest.raises(ConfigError):
        ErrorTrackingAspectBuilder().build()


def test_error_count_tracking(captured):
    logger, _ = captured
    aspect = ErrorTrackingAspect(logger)
    assert aspect.error_count() == 0
    aspect.reset_error_count()
    assert aspect.error_count() == 0


def test_presets(captured):
    logger, _ = captured
    production = ErrorTrackingAspect.production_tracker(logger)
    assert production.collect_stack_traces is False
    assert production.error_threshold == 100
    development = ErrorTrackingAspect.development_tracker(logger)
    assert development.collect_stack_traces is True
    assert development.error_threshold is None


def test_with_methods(captured):
    logger, _ = captured
    aspect = (
        ErrorTrackingAspect(logger)
        .with_panics(False)
        .with_stack_traces(False)
        .with_error_threshold(7)
    )
    assert (aspect.track_panics, aspect.collect_stack_traces, aspect.error_threshold) == (
        False,
        False,
        7,
    )


@pytest.mark.asyncio
async def test_after_success_does_not_count(captured):
    logger, handler = captured
    aspect = ErrorTrackingAspect(logger)
    await aspect.after("op", None)
    assert aspect.error_count() == 0
    assert handler.records == []


@pytest.mark.asyncio
async def test_after_error_counts_and_logs(captured):
    logger, handler = captured
    aspect = ErrorTrackingAspect(logger)
    await aspect.after("op", AopError("boom"))
    assert aspect.error_count() == 1
    record = handler.records[0]
    assert record.levelno == logging.ERROR
    assert record.getMessage() == "Error in operation op: boom"
    assert record.error_count == 1
    assert isinstance(record.stack_trace, str) and record.stack_trace


@pytest.mark.asyncio
async def test_no_stack_trace_when_disabled(captured):
    logger, handler = captured
    aspect = ErrorTrackingAspect(logger, collect_stack_traces=False)
    await aspect.after("op", AopError("boom"))
    assert aspect.error_count() == 1
    assert aspect.collect_stack_traces is False
    assert len(handler.records) == 1
    assert not hasattr(handler.records[0], "stack_trace")


@pytest.mark.asyncio
async def test_threshold_exceeded(captured):
    logger, handler = captured
    aspect = ErrorTrackingAspect(logger, error_threshold=2)
    await aspect.after("op", AopError("first"))
    assert aspect.error_count() == 1
    await aspect.after("op", AopError("second"))
    assert aspect.error_count() == 2
    messages = [r.getMessage() for r in handler.records]
    assert messages == [
        "Error in operation op: first",
        "Error threshold exceeded in op: 2/2",
    ]
    assert handler.records[1].threshold_exceeded is True


@pytest.mark.asyncio
async def test_on_error_message_and_reset(captured):
    logger, handler = captured
    aspect = ErrorTrackingAspect(logger)
    await aspect.on_error("load", AopError("failed"))
    assert handler.records[0].getMessage() == "AOP error in operation load: failed"
    assert aspect.error_count() == 1
    aspect.reset_error_count()
    assert aspect.error_count() == 0