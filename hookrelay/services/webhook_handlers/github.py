import logging
from typing import Union

from hookrelay.core.context import RequestContext
from hookrelay.core.errors import MalformedRequestError, PublishError, WebhookError
from hookrelay.schemas.message import CanonicalMessage, SourceConfig
from hookrelay.schemas.webhook import (
    CONTENT_TYPE_HEADER,
    DELIVERY_ID_HEADER,
    EVENT_TYPE_HEADER,
    RawRequest,
    WebhookResponse,
)
from hookrelay.services.publishers.fanout import PublisherFanout

from .base import WebhookHandler
from .decoder import decode
from .mapper import Skip, to_canonical
from .signature import decode_body, select_signature, verify_payload
from .validator import validate


class GitHubWebhookHandler(WebhookHandler):
    """Relays GitHub push and check_run deliveries to the configured sinks.

    Client mistakes (bad signature, malformed request, unsupported event,
    missing field) answer 400 and are never retried by GitHub. Publish
    failures answer 500 so GitHub redelivers the webhook.
    """

    def __init__(
        self, webhook_secret: str, source: SourceConfig, fanout: PublisherFanout
    ):
        self.webhook_secret = webhook_secret.encode()
        self.source = source
        self.fanout = fanout
        self.logger = logging.getLogger(__name__)

    def prepare(self, request: RawRequest) -> Union[CanonicalMessage, Skip]:
        """Authenticate, decode and validate a request into a message"""
        body = decode_body(request.body, request.is_base64_encoded)
        self.logger.debug(f"Received body: {body.decode(errors='replace')}")

        verified = verify_payload(
            body,
            select_signature(request),
            self.webhook_secret,
            request.header(CONTENT_TYPE_HEADER),
        )

        delivery_id = request.header(DELIVERY_ID_HEADER)
        if not delivery_id:
            raise MalformedRequestError(f"missing '{DELIVERY_ID_HEADER}' header")

        envelope = decode(request.header(EVENT_TYPE_HEADER), verified.data)
        event = validate(envelope)
        return to_canonical(event, delivery_id, self.source)

    async def handle(self, ctx: RequestContext, request: RawRequest) -> WebhookResponse:
        try:
            message = self.prepare(request)
        except WebhookError as e:
            self.logger.warning(f"Rejected webhook: {e}")
            return WebhookResponse(status_code=e.status_code, body=str(e))
        except Exception:
            self.logger.exception("Unexpected error preparing webhook")
            return WebhookResponse(status_code=500, body="internal error")

        if isinstance(message, Skip):
            self.logger.info(f"Skipped webhook: {message.reason}")
            return WebhookResponse(status_code=200, body=message.reason)

        try:
            report = await self.fanout.publish(ctx, message)
        except PublishError as e:
            return WebhookResponse(status_code=e.status_code, body=str(e))
        except Exception:
            self.logger.exception(f"Unexpected error publishing {message.message_id}")
            return WebhookResponse(status_code=500, body="internal error")

        return WebhookResponse(status_code=200, body="\n".join(["OK", *report.lines()]))
