from celery import Celery

from hookrelay.core.config import settings

# Producer side only: relayed messages are sent by task name and consumed
# by whichever service owns the target queue.
celery = Celery("hookrelay", broker=settings.REDIS_URL)
