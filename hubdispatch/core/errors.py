"""Errors raised while verifying and dispatching a webhook request.

Every error is terminal for the request it belongs to and maps to the
HTTP status returned to the sender. Exceptions raised by registered
handlers are not part of this hierarchy and propagate unchanged.
"""


class WebhookError(Exception):
    """Base class for request-scoped webhook failures"""

    status_code: int = 500
    default_message: str = "Webhook processing failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingEventHeader(WebhookError):
    status_code = 400
    default_message = "Missing X-GitHub-Event Header"


class UnregisteredEvent(WebhookError):
    """The event is valid but nobody registered for it.

    This is a normal "not interested" outcome, so it is answered with a
    success status and logged at info level.
    """

    status_code = 200

    def __init__(self, event: str):
        self.event = event
        super().__init__(
            f"Webhook Event {event} not registered, it is recommended to setup "
            "only events in github that will be registered in the webhook to "
            "avoid unnecessary traffic and reduce potential attack vectors."
        )


class Forbidden(WebhookError):
    status_code = 403
    default_message = "Forbidden"


class MissingSignature(Forbidden):
    default_message = "Missing X-Hub-Signature required for HMAC verification"


class SignatureMismatch(Forbidden):
    default_message = "HMAC verification failed"


class PayloadReadError(WebhookError):
    status_code = 500
    default_message = "Issue reading Payload"


class MalformedPayload(WebhookError):
    status_code = 400
    default_message = "Malformed Payload"


class RequestCancelled(WebhookError):
    # nginx convention for "client closed request"
    status_code = 499
    default_message = "Client disconnected before dispatch"
