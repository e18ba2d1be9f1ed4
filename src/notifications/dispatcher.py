"""Notification dispatcher, the core's only window onto outbound transport.

The identity context hands it codes to relay; the ordering context tells it
about state changes. Both calls return a plain success flag and never raise
for transport problems: delivery is best effort and retries, if any, are the
transport's business.
"""

from abc import ABC, abstractmethod

import structlog

from notifications.channel import EMAIL, MOBILE, get_channel
from notifications.templates import get_code_template, get_order_template

logger = structlog.get_logger(__name__)


class NotificationDispatcher(ABC):
    """Abstract interface for relaying codes and order updates."""

    @abstractmethod
    def send(self, channel: str, identifier: str, code: str, purpose: str = "login", ttl_minutes: int = 5) -> bool:
        """Relay a one-time code to `identifier` over `channel`."""
        ...

    @abstractmethod
    def order_state_changed(
        self,
        order_id: str,
        state: str,
        email: str | None = None,
        phone: str | None = None,
        context: dict | None = None,
    ) -> bool:
        """Announce that an order reached `state`. True when nothing needed sending."""
        ...


class ChannelDispatcher(NotificationDispatcher):
    """Dispatcher that renders templates and delivers through channel adapters."""

    def send(self, channel: str, identifier: str, code: str, purpose: str = "login", ttl_minutes: int = 5) -> bool:
        content = get_code_template().render({"code": code, "purpose": purpose, "ttl_minutes": ttl_minutes})
        return self._deliver(channel, identifier, content)

    def order_state_changed(
        self,
        order_id: str,
        state: str,
        email: str | None = None,
        phone: str | None = None,
        context: dict | None = None,
    ) -> bool:
        template = get_order_template(state)
        if template is None:
            return True
        if not email and not phone:
            logger.info("No contact on order, skipping state notification", order_id=order_id, state=state)
            return True

        content = template.render({"order_id": order_id, **(context or {})})
        delivered = True
        if email:
            delivered = self._deliver(EMAIL, email, content) and delivered
        if phone:
            delivered = self._deliver(MOBILE, phone, content) and delivered
        return delivered

    def _deliver(self, channel: str, to: str, content: dict) -> bool:
        try:
            adapter = get_channel(channel)
            if channel == MOBILE:
                result = adapter.send(to, content["sms"])
            else:
                result = adapter.send(to, content["subject"], content["body"])
        except Exception as e:
            logger.error("Notification transport raised", channel=channel, to=to, error=str(e))
            return False

        if result.get("status") != "sent":
            logger.warning(
                "Notification delivery failed",
                channel=channel,
                to=to,
                error=result.get("error", "Unknown dispatch error"),
            )
            return False

        logger.info("Notification delivered", channel=channel, to=to, message_id=result.get("message_id"))
        return True


_dispatcher_instance: NotificationDispatcher | None = None


def get_dispatcher() -> NotificationDispatcher:
    """Return the process-wide dispatcher (singleton)."""
    global _dispatcher_instance
    if _dispatcher_instance is None:
        _dispatcher_instance = ChannelDispatcher()
    return _dispatcher_instance


def reset_dispatcher():
    """Reset the dispatcher singleton (useful for testing)."""
    global _dispatcher_instance
    _dispatcher_instance = None
