"""Email channel port — transport for messages addressed to an inbox."""

from abc import ABC, abstractmethod


class EmailPort(ABC):
    """Abstract interface for email transport adapters."""

    channel = "email"

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> dict:
        """Hand one message to the transport.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
