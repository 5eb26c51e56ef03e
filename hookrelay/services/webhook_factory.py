import logging
from typing import Optional

from hookrelay.core.config import Settings, get_settings
from hookrelay.schemas.message import SourceConfig
from hookrelay.services.publisher_factory import PublisherFactory
from hookrelay.services.publishers import PublisherFanout
from hookrelay.services.webhook_handlers.github import GitHubWebhookHandler


class WebhookHandlerFactory:
    _handler: Optional[GitHubWebhookHandler] = None

    @classmethod
    def initialize(cls, settings: Optional[Settings] = None, sinks=None):
        settings = settings or get_settings()
        if not settings.GITHUB_WEBHOOK_SECRET:
            raise ValueError("GITHUB_WEBHOOK_SECRET is required")

        if sinks is None:
            sinks = PublisherFactory.create_sinks(settings)
        if not sinks:
            logging.warning("No publish targets configured, webhooks will only be validated")

        cls._handler = GitHubWebhookHandler(
            settings.GITHUB_WEBHOOK_SECRET,
            SourceConfig(source_app=settings.SOURCE_APP, source_env=settings.SOURCE_ENV),
            PublisherFanout(sinks),
        )
        return cls._handler

    @classmethod
    def get_handler(cls) -> GitHubWebhookHandler:
        if cls._handler is None:
            return cls.initialize()
        return cls._handler

    @classmethod
    def reset(cls) -> None:
        cls._handler = None
