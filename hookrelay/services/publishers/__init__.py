from .base import Sink
from .celery_queue import CeleryQueueSink
from .fanout import PublisherFanout
from .redis_stream import RedisStreamSink

__all__ = ["Sink", "PublisherFanout", "CeleryQueueSink", "RedisStreamSink"]
