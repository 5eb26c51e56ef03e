import asyncio

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from hookrelay.core.config import Settings, get_settings
from hookrelay.core.context import RequestContext
from hookrelay.schemas.webhook import RawRequest
from hookrelay.services.webhook_factory import WebhookHandlerFactory
from hookrelay.services.webhook_handlers.base import WebhookHandler

router = APIRouter()

DISCONNECT_POLL_SECONDS = 0.1


def get_webhook_handler() -> WebhookHandler:
    return WebhookHandlerFactory.get_handler()


async def cancel_on_disconnect(
    request: Request, ctx: RequestContext, interval: float = DISCONNECT_POLL_SECONDS
) -> None:
    """Cancel ``ctx`` once the client has gone away"""
    while not ctx.cancelled:
        if await request.is_disconnected():
            ctx.cancel()
            return
        await asyncio.sleep(interval)


@router.post("/webhooks/github", response_class=PlainTextResponse)
async def github_webhook(
    request: Request,
    handler: WebhookHandler = Depends(get_webhook_handler),
    settings: Settings = Depends(get_settings),
):
    # Raw body: the signature covers the bytes exactly as sent
    raw_request = RawRequest(
        headers=dict(request.headers),
        body=await request.body(),
    )
    ctx = RequestContext(timeout=settings.PUBLISH_TIMEOUT_SECONDS)

    watcher = asyncio.create_task(cancel_on_disconnect(request, ctx))
    try:
        response = await handler.handle(ctx, raw_request)
    finally:
        watcher.cancel()
    return PlainTextResponse(response.body, status_code=response.status_code)
