import redis.asyncio as redis

from hookrelay.core.context import RequestContext
from hookrelay.schemas.message import CanonicalMessage

from .base import Sink


class RedisStreamSink(Sink):
    """Appends messages to a Redis Stream acting as the event bus"""

    def __init__(self, client: redis.Redis, stream: str, maxlen: int = 5000):
        self.client = client
        self.stream = stream
        self.maxlen = maxlen

    @classmethod
    def from_url(cls, url: str, stream: str, maxlen: int = 5000) -> "RedisStreamSink":
        return cls(redis.from_url(url, decode_responses=True), stream, maxlen)

    @property
    def sink_id(self) -> str:
        return f"redis-stream:{self.stream}"

    async def publish(self, ctx: RequestContext, message: CanonicalMessage) -> None:
        entry = {
            "msg_id": message.message_id,
            "msg_type": message.destination_topic,
            "source": f"{message.source_app}/{message.source_env}",
            "delivery_id": message.delivery_id,
            "payload": message.model_dump_json(),
        }
        await self.client.xadd(
            self.stream, entry, maxlen=self.maxlen, approximate=True
        )
