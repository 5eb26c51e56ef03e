from typing import List, Optional

from celery import Celery

from hookrelay.core.config import Settings, get_settings
from hookrelay.services.publishers import CeleryQueueSink, RedisStreamSink, Sink


class PublisherFactory:
    """Builds the ordered sink list from settings"""

    @classmethod
    def create_sinks(
        cls, settings: Optional[Settings] = None, celery_app: Optional[Celery] = None
    ) -> List[Sink]:
        settings = settings or get_settings()
        sinks: List[Sink] = []

        if settings.TARGET_QUEUE:
            if celery_app is None:
                from hookrelay.worker import celery

                celery_app = celery
            sinks.append(
                CeleryQueueSink(
                    celery_app, settings.TARGET_QUEUE, settings.TARGET_TASK_NAME
                )
            )

        if settings.TARGET_STREAM:
            sinks.append(
                RedisStreamSink.from_url(
                    settings.REDIS_URL, settings.TARGET_STREAM, settings.STREAM_MAXLEN
                )
            )

        return sinks
