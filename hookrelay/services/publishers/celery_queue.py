import asyncio

from celery import Celery

from hookrelay.core.context import RequestContext
from hookrelay.schemas.message import CanonicalMessage

from .base import Sink


class CeleryQueueSink(Sink):
    """Publishes messages as Celery tasks on a named queue.

    The task id is the message id, so consumers can drop redeliveries of
    the same webhook.
    """

    def __init__(self, celery_app: Celery, queue: str, task_name: str):
        self.celery_app = celery_app
        self.queue = queue
        self.task_name = task_name

    @property
    def sink_id(self) -> str:
        return f"celery:{self.queue}"

    async def publish(self, ctx: RequestContext, message: CanonicalMessage) -> None:
        # send_task blocks on the broker connection
        await asyncio.to_thread(self._send, ctx, message)

    def _send(self, ctx: RequestContext, message: CanonicalMessage) -> None:
        ctx.raise_if_done()
        self.celery_app.send_task(
            self.task_name,
            args=[message.model_dump(mode="json")],
            queue=self.queue,
            task_id=message.message_id,
            headers={
                "destination_topic": message.destination_topic,
                "delivery_id": message.delivery_id,
            },
            retry=False,
        )
