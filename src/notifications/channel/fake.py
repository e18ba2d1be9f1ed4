"""In-memory channel adapters for tests and local development.

Messages are kept on the adapter so tests can assert on what would have
been delivered. Each adapter can be told to report failure, or to raise as
a crashed transport would.
"""

from uuid import uuid4

from notifications.channel.email_port import EmailPort
from notifications.channel.sms_port import SMSPort


class TransportError(Exception):
    """Raised by a fake adapter configured to simulate a transport crash."""


class _FakeOutbox:
    prefix = "msg"
    default_failure = "Delivery failed"

    def __init__(self):
        self.outbox: list[dict] = []
        self.should_succeed = True
        self.should_raise = False
        self.failure_reason = self.default_failure

    def configure(self, should_succeed: bool = True, should_raise: bool = False, failure_reason: str | None = None):
        """Configure the fake adapter behavior for testing."""
        self.should_succeed = should_succeed
        self.should_raise = should_raise
        self.failure_reason = failure_reason or self.default_failure

    def _record(self, **message) -> dict:
        if self.should_raise:
            raise TransportError(self.failure_reason)
        if not self.should_succeed:
            return {"message_id": None, "status": "failed", "error": self.failure_reason}

        message_id = f"{self.prefix}-{uuid4().hex[:12]}"
        self.outbox.append({"message_id": message_id, **message})
        return {"message_id": message_id, "status": "sent"}

    def messages_to(self, to: str) -> list[dict]:
        return [m for m in self.outbox if m["to"] == to]

    def reset(self):
        """Clear recorded messages and restore default behavior."""
        self.outbox.clear()
        self.configure()


class FakeEmailAdapter(_FakeOutbox, EmailPort):
    prefix = "email"
    default_failure = "Email delivery failed"

    def send(self, to: str, subject: str, body: str) -> dict:
        return self._record(to=to, subject=subject, body=body)


class FakeSMSAdapter(_FakeOutbox, SMSPort):
    prefix = "sms"
    default_failure = "SMS delivery failed"

    def send(self, to: str, body: str) -> dict:
        return self._record(to=to, body=body)
