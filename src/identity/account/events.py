"""Domain events for the Account aggregate."""

from protean.fields import DateTime, Identifier, String

from identity.domain import identity


@identity.event(part_of="Account")
class AccountRegistered:
    """An account was created on first login with a verified contact."""

    __version__ = 1

    account_id: Identifier(required=True)
    identifier: String(required=True)
    channel: String(required=True)
    role: String(required=True)
    registered_at: DateTime(required=True)


@identity.event(part_of="Account")
class ContactVerified:
    """An email address or mobile number was proven to belong to the account."""

    __version__ = 1

    account_id: Identifier(required=True)
    identifier: String(required=True)
    channel: String(required=True)
    verified_at: DateTime(required=True)


@identity.event(part_of="Account")
class LoggedIn:
    __version__ = 1

    account_id: Identifier(required=True)
    channel: String(required=True)
    logged_in_at: DateTime(required=True)
