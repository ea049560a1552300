import logging
from typing import Mapping, Optional, Union

from fastapi import FastAPI

from hubdispatch.api.webhook_routes import create_webhook_router
from hubdispatch.core.config import Settings, get_settings
from hubdispatch.schemas.events import Event
from hubdispatch.services.pipeline import WebhookPipeline
from hubdispatch.services.registry import Handler, WebhookRegistry


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    registry: Optional[WebhookRegistry] = None,
    handlers: Optional[Mapping[Union[Event, str], Handler]] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Build the webhook receiver.

    Pass a ready registry, or handlers to build one from settings.
    """
    settings = settings or get_settings()
    configure_logging(settings.LOG_LEVEL)

    if registry is None:
        registry = WebhookRegistry.from_settings(settings, handlers)

    pipeline = WebhookPipeline(registry, settings)

    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.registry = registry
    app.state.pipeline = pipeline
    app.include_router(create_webhook_router(pipeline))

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app
