"""Account aggregate: a person who signs in with a one-time code."""

from datetime import datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String

from identity.account.events import AccountRegistered, ContactVerified, LoggedIn
from identity.domain import identity
from identity.shared.channels import Channel


class AccountRole(Enum):
    CUSTOMER = "customer"
    WRITER = "writer"
    QC = "qc"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


@identity.aggregate
class Account:
    """A customer or staff member, reachable by email and/or mobile number.

    Contacts only ever land on an account after a code sent to them has been
    verified, so a stored contact is always marked verified.
    """

    email: String(max_length=254)
    phone: String(max_length=20)
    email_verified: Boolean(default=False)
    phone_verified: Boolean(default=False)
    role: String(choices=AccountRole, default=AccountRole.CUSTOMER.value)
    registered_at: DateTime()
    last_login_at: DateTime()

    @invariant.post
    def must_have_a_contact(self):
        if not self.email and not self.phone:
            raise ValidationError({"contact": ["An account needs an email address or a mobile number"]})

    @classmethod
    def register(cls, identifier: str, channel: Channel, now: datetime, role: str = AccountRole.CUSTOMER.value):
        account = cls(
            role=role,
            registered_at=now,
            **cls._contact_fields(identifier, channel),
        )
        account.raise_(
            AccountRegistered(
                account_id=account.id,
                identifier=identifier,
                channel=channel.value,
                role=role,
                registered_at=now,
            )
        )
        return account

    @staticmethod
    def _contact_fields(identifier: str, channel: Channel) -> dict:
        if channel == Channel.EMAIL:
            return {"email": identifier, "email_verified": True}
        return {"phone": identifier, "phone_verified": True}

    def contact_for(self, channel: Channel) -> str | None:
        return self.email if channel == Channel.EMAIL else self.phone

    def verify_contact(self, identifier: str, channel: Channel, now: datetime) -> None:
        """Attach `identifier` on `channel`, replacing any previous one, and mark it verified."""
        with atomic_change(self):
            for field, value in self._contact_fields(identifier, channel).items():
                setattr(self, field, value)
        self.raise_(
            ContactVerified(
                account_id=self.id,
                identifier=identifier,
                channel=channel.value,
                verified_at=now,
            )
        )

    def record_login(self, channel: Channel, now: datetime) -> None:
        self.last_login_at = now
        self.raise_(LoggedIn(account_id=self.id, channel=channel.value, logged_in_at=now))
