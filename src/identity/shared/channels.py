"""Contact channels and identifier normalization shared by codes and accounts."""

from enum import Enum

from identity.shared.email import is_valid_email, normalize_email
from identity.shared.phone import is_valid_phone, normalize_phone


class Channel(Enum):
    EMAIL = "email"
    MOBILE = "mobile"


def parse_channel(value) -> Channel | None:
    """Return the Channel for a raw value, or None when it is not a known channel."""
    if isinstance(value, Channel):
        return value
    try:
        return Channel(value)
    except ValueError:
        return None


def normalize_identifier(identifier: str, channel: Channel) -> str:
    """Normalize a channel address and validate it.

    Raises:
        ValueError: if the identifier is empty or malformed for the channel.
    """
    if not isinstance(identifier, str) or not identifier.strip():
        raise ValueError("Identifier is required")

    if channel == Channel.EMAIL:
        normalized = normalize_email(identifier)
        if not is_valid_email(normalized):
            raise ValueError(f"Invalid email address: {identifier!r}")
    else:
        normalized = normalize_phone(identifier)
        if not is_valid_phone(normalized):
            raise ValueError(f"Invalid phone number: {identifier!r}")

    return normalized
