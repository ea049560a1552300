import inspect
import logging
from typing import Any, Awaitable, Callable, Mapping, Optional, Tuple, Union

from fastapi import Request
from fastapi.datastructures import Headers
from pydantic import BaseModel, ConfigDict

from hubdispatch.core.config import Settings, get_settings
from hubdispatch.core.errors import (
    MissingEventHeader,
    PayloadReadError,
    RequestCancelled,
    UnregisteredEvent,
    WebhookError,
)
from hubdispatch.schemas.events import Event, EventSubtype
from hubdispatch.services.payload_decoder import decode_payload
from hubdispatch.services.registry import Handler, WebhookRegistry
from hubdispatch.services.signature import verify_signature

BodyReader = Callable[[], Union[bytes, Awaitable[bytes]]]
DisconnectCheck = Callable[[], Awaitable[bool]]


class DispatchResult(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    event: Event
    delivery_id: str | None = None
    subtype: EventSubtype | None = EventSubtype.NONE
    payload: Any  # The decoded payload model handed to the handler


class WebhookPipeline:
    """Verifies one inbound GitHub hook and dispatches it to its handler.

    Steps run strictly in order and the first failure ends the request:
    event header, handler lookup, body capture, signature check, body
    check, decoding, handler call.
    """

    def __init__(self, registry: WebhookRegistry, settings: Optional[Settings] = None):
        self.registry = registry
        self.settings = settings or get_settings()
        self.logger = logging.getLogger(__name__)

    def get_event(self, headers: Headers) -> str:
        event = headers.get(self.settings.EVENT_HEADER, "")
        if not event:
            raise MissingEventHeader(f"Missing {self.settings.EVENT_HEADER} Header")
        self.logger.debug(f"{self.settings.EVENT_HEADER}:{event}")
        return event

    def get_handler(self, raw_event: str) -> Tuple[Event, Handler]:
        handler = self.registry.lookup(raw_event)
        if handler is None:
            raise UnregisteredEvent(raw_event)
        return Event(raw_event), handler

    async def read_payload(self, read_body: Union[bytes, BodyReader]) -> bytes:
        if isinstance(read_body, (bytes, bytearray)):
            return bytes(read_body)
        try:
            body = read_body()
            if inspect.isawaitable(body):
                body = await body
        except Exception as e:
            raise PayloadReadError(f"Issue reading Payload: {e}") from e
        return bytes(body or b"")

    def verify(self, headers: Headers, body: bytes) -> None:
        if not self.registry.secret:
            return
        self.logger.info("Checking secret")

        signature_256 = headers.get(self.settings.SIGNATURE_256_HEADER)
        if signature_256:
            self.logger.debug(f"{self.settings.SIGNATURE_256_HEADER}:{signature_256}")
            verify_signature(self.registry.secret, body, signature_256, "sha256")
            return

        signature = headers.get(self.settings.SIGNATURE_HEADER)
        self.logger.debug(f"{self.settings.SIGNATURE_HEADER}:{signature}")
        verify_signature(self.registry.secret, body, signature, "sha1")

    async def process(
        self,
        headers: Mapping[str, str],
        read_body: Union[bytes, BodyReader],
        is_disconnected: Optional[DisconnectCheck] = None,
    ) -> DispatchResult:
        """Run one request through the pipeline and call its handler.

        Raises a WebhookError subclass on any failure before dispatch.
        Exceptions raised by the handler itself propagate unchanged.
        """
        self.logger.info("Parsing Payload...")
        if not isinstance(headers, Headers):
            headers = Headers(headers=dict(headers))

        try:
            raw_event = self.get_event(headers)
            event, handler = self.get_handler(raw_event)

            body = await self.read_payload(read_body)
            self.verify(headers, body)
            if not body:
                raise PayloadReadError()
            if self.settings.LOG_PAYLOADS:
                self.logger.debug(f"Payload:{body.decode('utf-8', 'replace')}")

            payload = decode_payload(event, body)

            if is_disconnected is not None and await is_disconnected():
                raise RequestCancelled()
        except UnregisteredEvent as e:
            self.logger.info(e.message)
            raise
        except WebhookError as e:
            self.logger.error(e.message)
            raise

        result = DispatchResult(
            event=event,
            delivery_id=headers.get(self.settings.DELIVERY_HEADER),
            subtype=getattr(payload, "subtype", EventSubtype.NONE),
            payload=payload,
        )

        outcome = handler(payload, headers)
        if inspect.isawaitable(outcome):
            await outcome
        return result

    async def process_request(self, request: Request) -> DispatchResult:
        return await self.process(
            request.headers, request.body, request.is_disconnected
        )
