from .core.errors import (
    Forbidden,
    MalformedPayload,
    MissingEventHeader,
    MissingSignature,
    PayloadReadError,
    RequestCancelled,
    SignatureMismatch,
    UnregisteredEvent,
    WebhookError,
)
from .main import create_app
from .schemas.events import Event, EventSubtype, parse_event, parse_subtype
from .services.payload_decoder import PAYLOAD_SCHEMAS, decode_payload
from .services.pipeline import DispatchResult, WebhookPipeline
from .services.registry import WebhookRegistry
from .services.signature import sign_payload, verify_signature

__all__ = [
    "DispatchResult",
    "Event",
    "EventSubtype",
    "Forbidden",
    "MalformedPayload",
    "MissingEventHeader",
    "MissingSignature",
    "PAYLOAD_SCHEMAS",
    "PayloadReadError",
    "RequestCancelled",
    "SignatureMismatch",
    "UnregisteredEvent",
    "WebhookError",
    "WebhookPipeline",
    "WebhookRegistry",
    "create_app",
    "decode_payload",
    "parse_event",
    "parse_subtype",
    "sign_payload",
    "verify_signature",
]
