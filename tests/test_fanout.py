import asyncio

import pytest

from hookrelay.core.context import RequestContext
from hookrelay.core.errors import (
    DeadlineExceededError,
    PublishError,
    RequestCancelledError,
)
from hookrelay.schemas.message import CanonicalMessage, PushMessage
from hookrelay.schemas.webhook import EventKind
from hookrelay.services.publishers import PublisherFanout
from tests.fakes import HangingSink, RecordingSink


@pytest.fixture
def message():
    return CanonicalMessage(
        delivery_id="d-1",
        kind=EventKind.PUSH,
        source_app="hookrelay",
        source_env="test",
        destination_topic="github:push",
        message_id="m-1",
        payload=PushMessage(
            ref="refs/heads/main", before="a" * 40, after="b" * 40, repo="r", owner="o"
        ),
    )


async def test_publish_to_all_sinks_in_order(two_sinks, sink_calls, message):
    fanout = PublisherFanout(two_sinks)

    report = await fanout.publish(RequestContext.background(), message)

    assert [name for name, _ in sink_calls] == ["topic", "bus"]
    assert all(sent is message for _, sent in sink_calls)
    assert report.message_id == "m-1"
    assert [(r.sink_id, r.ok) for r in report.results] == [("topic", True), ("bus", True)]
    assert report.lines() == ["message id: m-1", "published to topic", "published to bus"]


async def test_publish_with_no_sinks(message):
    report = await PublisherFanout([]).publish(RequestContext.background(), message)

    assert report.results == []


async def test_first_failure_aborts_remaining_sinks(sink_calls, message):
    boom = RuntimeError("topic unavailable")
    fanout = PublisherFanout(
        [RecordingSink("topic", sink_calls, error=boom), RecordingSink("bus", sink_calls)]
    )

    with pytest.raises(PublishError) as exc_info:
        await fanout.publish(RequestContext.background(), message)

    assert [name for name, _ in sink_calls] == ["topic"]
    assert exc_info.value.sink_id == "topic"
    assert exc_info.value.cause is boom
    assert exc_info.value.status_code == 500
    assert "topic unavailable" in str(exc_info.value)


async def test_later_failure_keeps_earlier_delivery(sink_calls, message):
    fanout = PublisherFanout(
        [
            RecordingSink("topic", sink_calls),
            RecordingSink("bus", sink_calls, error=RuntimeError("bus down")),
        ]
    )

    with pytest.raises(PublishError) as exc_info:
        await fanout.publish(RequestContext.background(), message)

    assert [name for name, _ in sink_calls] == ["topic", "bus"]
    assert exc_info.value.sink_id == "bus"


async def test_cancelled_context_skips_all_sinks(two_sinks, sink_calls, message):
    ctx = RequestContext.background()
    ctx.cancel()

    with pytest.raises(PublishError) as exc_info:
        await PublisherFanout(two_sinks).publish(ctx, message)

    assert sink_calls == []
    assert isinstance(exc_info.value.cause, RequestCancelledError)


async def test_cancel_mid_publish_fails_promptly(sink_calls, message):
    hanging = HangingSink("topic")
    fanout = PublisherFanout([hanging, RecordingSink("bus", sink_calls)])
    ctx = RequestContext.background()

    async def cancel_when_started():
        await hanging.started.wait()
        ctx.cancel()

    canceller = asyncio.ensure_future(cancel_when_started())
    with pytest.raises(PublishError) as exc_info:
        await asyncio.wait_for(fanout.publish(ctx, message), timeout=5)
    await canceller

    assert isinstance(exc_info.value.cause, RequestCancelledError)
    assert hanging.was_cancelled
    assert sink_calls == []


async def test_deadline_bounds_sink_call(sink_calls, message):
    hanging = HangingSink("topic")
    fanout = PublisherFanout([hanging, RecordingSink("bus", sink_calls)])

    with pytest.raises(PublishError) as exc_info:
        await asyncio.wait_for(fanout.publish(RequestContext(timeout=0.05), message), timeout=5)

    assert isinstance(exc_info.value.cause, DeadlineExceededError)
    assert hanging.was_cancelled
    assert sink_calls == []


async def test_context_is_passed_to_sinks(message):
    seen = []

    class ContextSink(RecordingSink):
        async def publish(self, ctx, message):
            seen.append(ctx)

    ctx = RequestContext(timeout=30)
    await PublisherFanout([ContextSink("topic", [])]).publish(ctx, message)

    assert seen == [ctx]


def test_sink_ids(two_sinks):
    assert PublisherFanout(two_sinks).sink_ids == ["topic", "bus"]
