"""
Signup events - observation points for external subscribers.

Subscribers (analytics, auto-login, ...) register callbacks per event.
They see the account after the transition has been persisted and
cannot influence the workflow: return values are ignored and raised
exceptions are logged, not propagated.
"""

import logging
import threading
from collections.abc import Callable
from enum import Enum

from .account import Account

logger = logging.getLogger(__name__)

Subscriber = Callable[[Account], object]


class SignupEvent(str, Enum):
    """Events published by the signup service."""

    POST_SIGNUP = "signup::post"  # new account created, signup email sent
    VERIFIED = "signup"  # email address verified


class EventHooks:
    """Registry of subscribers keyed by SignupEvent."""

    def __init__(self) -> None:
        self._subscribers: dict[SignupEvent, list[Subscriber]] = {}
        self._lock = threading.Lock()

    def subscribe(self, event: SignupEvent, callback: Subscriber) -> None:
        with self._lock:
            self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: SignupEvent, callback: Subscriber) -> None:
        with self._lock:
            callbacks = self._subscribers.get(event, [])
            if callback in callbacks:
                callbacks.remove(callback)

    def publish(self, event: SignupEvent, account: Account) -> None:
        """Call every subscriber of the event in registration order."""
        with self._lock:
            callbacks = list(self._subscribers.get(event, []))

        for callback in callbacks:
            try:
                callback(account)
            except Exception:
                logger.exception("Subscriber %r failed on %s", callback, event.value)
