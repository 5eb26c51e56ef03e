from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "hookrelay"
    LOG_LEVEL: str = "INFO"

    # GitHub webhook
    GITHUB_WEBHOOK_SECRET: str = ""

    # Stamped on every outbound message
    SOURCE_APP: str = "hookrelay"
    SOURCE_ENV: str = "local"

    # Publishing
    REDIS_URL: str = "redis://localhost:6379"  # Celery broker and Redis Streams
    TARGET_QUEUE: str = ""  # Empty disables the Celery queue sink
    TARGET_TASK_NAME: str = "hookrelay.relay_message"
    TARGET_STREAM: str = ""  # Empty disables the Redis stream sink
    STREAM_MAXLEN: int = 5000
    PUBLISH_TIMEOUT_SECONDS: float = 10.0

    model_config = {
        "env_file": ".env"
    }


@lru_cache
def get_settings():
    return Settings()


settings = get_settings()
