"""Domain events for the OneTimeCode aggregate.

Codes themselves are never carried on events; consumers only learn that a
code was issued, used, or replaced for an identifier.
"""

from protean.fields import DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="OneTimeCode")
class CodeIssued:
    """A fresh one-time code was issued for an identifier on a channel."""

    __version__ = 1

    code_id: Identifier(required=True)
    identifier: String(required=True)
    channel: String(required=True)
    purpose: String(required=True)
    issued_at: DateTime(required=True)
    expires_at: DateTime(required=True)


@identity.event(part_of="OneTimeCode")
class CodeSuperseded:
    """An unused code was invalidated because a newer one was issued."""

    __version__ = 1

    code_id: Identifier(required=True)
    identifier: String(required=True)
    channel: String(required=True)
    superseded_at: DateTime(required=True)


@identity.event(part_of="OneTimeCode")
class CodeVerified:
    """A code was matched within its validity window and consumed."""

    __version__ = 1

    code_id: Identifier(required=True)
    identifier: String(required=True)
    channel: String(required=True)
    purpose: String(required=True)
    verified_at: DateTime(required=True)
