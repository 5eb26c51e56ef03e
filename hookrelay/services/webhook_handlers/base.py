from abc import ABC, abstractmethod

from hookrelay.core.context import RequestContext
from hookrelay.schemas.webhook import RawRequest, WebhookResponse


class WebhookHandler(ABC):
    @abstractmethod
    async def handle(self, ctx: RequestContext, request: RawRequest) -> WebhookResponse:
        """Verify, normalize and publish one webhook delivery"""
        pass
