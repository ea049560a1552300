from fastapi import APIRouter, Request, Response
from fastapi.responses import PlainTextResponse

from hubdispatch.core.errors import WebhookError
from hubdispatch.services.pipeline import WebhookPipeline


def create_webhook_router(pipeline: WebhookPipeline, path: str | None = None) -> APIRouter:
    router = APIRouter(tags=["webhooks"])

    @router.post(path or pipeline.settings.WEBHOOK_PATH)
    async def webhook_handler(request: Request):
        try:
            await pipeline.process_request(request)
        except WebhookError as e:
            return PlainTextResponse(e.message, status_code=e.status_code)

        # The handler has run; nothing else to report to GitHub
        return Response(status_code=200)

    return router
