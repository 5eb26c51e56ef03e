import asyncio
import logging
from typing import List, Sequence

from hookrelay.core.context import RequestContext
from hookrelay.core.errors import DeadlineExceededError, PublishError
from hookrelay.schemas.message import CanonicalMessage, PublishReport, PublishResult
from hookrelay.services.publishers.base import Sink


class PublisherFanout:
    """Delivers a message to every configured sink, in order.

    Delivery is fail-fast: the first sink error stops the remaining
    deliveries and is raised as ``PublishError``. Sinks before the failing
    one have already received the message and are not compensated.

    Giving up on a sink at the deadline does not guarantee it did not
    deliver: a blocking send running in a worker thread (the Celery sink)
    cannot be interrupted and may still complete after the request has
    answered 500. Delivery is therefore at-least-once; consumers dedupe
    on ``message_id``, which the Celery sink also uses as the task id.
    """

    def __init__(self, sinks: Sequence[Sink]):
        self.sinks: List[Sink] = list(sinks)
        self.logger = logging.getLogger(__name__)

    @property
    def sink_ids(self) -> List[str]:
        return [sink.sink_id for sink in self.sinks]

    async def publish(
        self, ctx: RequestContext, message: CanonicalMessage
    ) -> PublishReport:
        report = PublishReport(message_id=message.message_id)
        for sink in self.sinks:
            try:
                ctx.raise_if_done()
                await self._deliver(ctx, sink, message)
            except Exception as e:
                self.logger.error(
                    f"Failed to publish {message.message_id} to {sink.sink_id}: {e}"
                )
                raise PublishError(sink.sink_id, e) from e

            self.logger.info(f"Published {message.message_id} to {sink.sink_id}")
            report.results.append(PublishResult(sink_id=sink.sink_id, ok=True))
        return report

    async def _deliver(
        self, ctx: RequestContext, sink: Sink, message: CanonicalMessage
    ) -> None:
        publish = asyncio.ensure_future(sink.publish(ctx, message))
        cancelled = asyncio.ensure_future(ctx.wait_cancelled())
        try:
            done, _ = await asyncio.wait(
                {publish, cancelled},
                timeout=ctx.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancelled.cancel()
            if not publish.done():
                publish.cancel()
                await asyncio.gather(publish, return_exceptions=True)

        if publish in done:
            publish.result()
            return

        # Cancelled or out of time while the sink was still working
        ctx.raise_if_done()
        raise DeadlineExceededError()
