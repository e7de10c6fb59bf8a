"""
Console notifier adapter - Implements Notifier protocol.

This module provides a console-based implementation of the domain's
notifier port, logging signup emails to stdout for demo purposes.
"""

import logging

logger = logging.getLogger(__name__)


class ConsoleNotifier:
    """
    Implements Notifier protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints verification links to stdout.

    Logging cannot fail, so this adapter never raises. A transport that
    can (SMTP, an HTTP mail API) must wrap its errors in DeliveryFailed;
    the routes map that to 503 and the saved account or new token stays
    in place.
    """

    def __init__(self, link_base: str = "/v1/signup") -> None:
        """
        Args:
            link_base: Path prefix the token is appended to in verification links
        """
        self._link_base = link_base.rstrip("/")

    def notify_signup(self, name: str, email: str, token: str) -> None:
        """
        Log the signup verification link (simulates email delivery).

        In production, this would be replaced with an SMTP adapter.
        Logged at INFO level to be visible in docker-compose logs.
        """
        logger.info("[SIGNUP] Name: %s Email: %s Link: %s", name, email, self._link(token))

    def notify_resend(self, name: str, email: str, token: str) -> None:
        """Log a reissued verification link."""
        logger.info("[RESEND] Name: %s Email: %s Link: %s", name, email, self._link(token))

    def notify_duplicate(self, name: str, email: str) -> None:
        """Log the "email already registered" notice sent to the owner."""
        logger.info("[TAKEN] Name: %s Email: %s", name, email)

    def _link(self, token: str) -> str:
        return f"{self._link_base}/{token}"
