import pytest

from loquat.aop.base import AopError, Aspect
from loquat.aop.proxy import AopProxy


class RecordingAspect(Aspect):
    def __init__(self, label, log):
        self.label = label
        self.log = log

    async def before(self, operation):
        self.log.append((self.label, "before", operation))

    async def after(self, operation, error):
        self.log.append((self.label, "after", operation, error))


class FailingBefore(Aspect):
    async def before(self, operation):
        raise AopError("blocked")


@pytest.mark.asyncio
async def test_execute_returns_result_and_runs_advice_in_order():
    log = []
    target = object()
    proxy = AopProxy(target, [RecordingAspect("a", log), RecordingAspect("b", log)])
    result = await proxy.execute_with_aspects("op", lambda t: t)
    assert result is target
    assert log == [
        ("a", "before", "op"),
        ("b", "before", "op"),
        ("a", "after", "op", None),
        ("b", "after", "op", None),
    ]


@pytest.mark.asyncio
async def test_failure_is_reported_then_raised():
    log = []
    proxy = AopProxy("calc", [RecordingAspect("a", log)])

    def divide(_):
        raise ZeroDivisionError("Division by zero")

    with pytest.raises(ZeroDivisionError):
        await proxy.execute_with_aspects("divide", divide)

    assert log[-1][:3] == ("a", "after", "divide")
    reported = log[-1][3]
    assert isinstance(reported, AopError)
    assert str(reported) == "Division by zero"


@pytest.mark.asyncio
async def test_before_error_prevents_call():
    calls = []
    proxy = AopProxy("target", [FailingBefore()])
    with pytest.raises(AopError, match="blocked"):
        await proxy.execute_with_aspects("op", calls.append)
    assert calls == []


@pytest.mark.asyncio
async def test_awaitable_result_is_awaited():
    target = object()

    async def fetch(t):
        return t

    proxy = AopProxy(target)
    assert await proxy.execute_with_aspects("op", fetch) is target


def test_add_aspect_and_target():
    target = object()
    first = Aspect()
    second = Aspect()
    proxy = AopProxy(target, [first])
    proxy.add_aspect(second)
    assert proxy.aspects() == (first, second)
    assert proxy.target is target