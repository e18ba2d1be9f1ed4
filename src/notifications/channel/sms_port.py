"""SMS channel port — transport for text messages to a mobile number."""

from abc import ABC, abstractmethod


class SMSPort(ABC):
    """Abstract interface for SMS transport adapters.

    SMS has no subject line; adapters receive the rendered body only.
    """

    channel = "mobile"

    @abstractmethod
    def send(self, to: str, body: str) -> dict:
        """Hand one text message to the transport.

        Returns:
            dict with keys: message_id, status ("sent" or "failed"), error (optional)
        """
        ...
