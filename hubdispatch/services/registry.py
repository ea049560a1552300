import logging
import threading
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Mapping, Optional, Union

from hubdispatch.core.config import Settings
from hubdispatch.schemas.events import Event, parse_event
from hubdispatch.services.signature import Secret, secret_bytes

# Handlers receive the decoded payload and the request headers. They may
# be plain functions or coroutine functions.
Handler = Callable[[Any, Mapping[str, str]], Any]


class WebhookRegistry:
    """Holds the hook secret and one handler per event.

    Registration publishes a fresh read-only mapping under a lock, so
    lookups from concurrent requests never need to lock.
    """

    def __init__(
        self,
        secret: Optional[Secret] = None,
        handlers: Optional[Mapping[Union[Event, str], Handler]] = None,
    ):
        self.logger = logging.getLogger(__name__)
        self._secret = secret_bytes(secret)
        self._lock = threading.Lock()
        self._handlers: Mapping[Event, Handler] = MappingProxyType({})

        if not self._secret:
            self.logger.warning(
                "No webhook secret configured, signature verification is disabled"
            )

        for event, handler in (handlers or {}).items():
            self.register(event, handler)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        handlers: Optional[Mapping[Union[Event, str], Handler]] = None,
    ) -> "WebhookRegistry":
        if not settings.WEBHOOK_SECRET and not settings.ALLOW_UNSIGNED:
            raise ValueError(
                "WEBHOOK_SECRET is not configured; set ALLOW_UNSIGNED=true "
                "to accept unsigned webhooks"
            )
        return cls(secret=settings.WEBHOOK_SECRET, handlers=handlers)

    def __repr__(self) -> str:
        secured = "secured" if self._secret else "unsecured"
        return f"<WebhookRegistry {secured} events={sorted(e.value for e in self.events)}>"

    @property
    def secret(self) -> bytes:
        return self._secret

    @property
    def events(self) -> FrozenSet[Event]:
        return frozenset(self._handlers)

    @staticmethod
    def _coerce(event: Union[Event, str]) -> Event:
        if isinstance(event, Event):
            return event
        parsed = parse_event(event)
        if parsed is None:
            raise ValueError(f"Unknown GitHub event: {event}")
        return parsed

    def register(self, event: Union[Event, str], handler: Handler) -> None:
        """Register ``handler`` for ``event``, replacing any previous handler"""
        event = self._coerce(event)
        with self._lock:
            handlers: Dict[Event, Handler] = dict(self._handlers)
            if event in handlers and handlers[event] is not handler:
                self.logger.warning(
                    f"Replacing handler for event {event.value}: "
                    f"{getattr(handlers[event], '__name__', handlers[event])} -> "
                    f"{getattr(handler, '__name__', handler)}"
                )
            handlers[event] = handler
            self._handlers = MappingProxyType(handlers)
        self.logger.debug(f"Registered handler for event {event.value}")

    def register_events(self, handler: Handler, *events: Union[Event, str]) -> None:
        """Register one handler for several events"""
        for event in events:
            self.register(event, handler)

    def on(self, *events: Union[Event, str]) -> Callable[[Handler], Handler]:
        """Decorator form of register_events"""
        def decorator(handler: Handler) -> Handler:
            self.register_events(handler, *events)
            return handler
        return decorator

    def unregister(self, event: Union[Event, str]) -> Optional[Handler]:
        event = self._coerce(event)
        with self._lock:
            handlers = dict(self._handlers)
            removed = handlers.pop(event, None)
            self._handlers = MappingProxyType(handlers)
        return removed

    def lookup(self, event: Union[Event, str]) -> Optional[Handler]:
        if not isinstance(event, Event):
            event = parse_event(event)
            if event is None:
                return None
        return self._handlers.get(event)
