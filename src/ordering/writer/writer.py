"""WriterProfile aggregate — the roster of people who handwrite letters.

Lifecycle:
    PENDING → APPROVED ⇄ SUSPENDED
    PENDING → SUSPENDED

Only approved writers can be assigned to orders.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String

from ordering.domain import ordering


class WriterStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    SUSPENDED = "suspended"


@ordering.event(part_of="WriterProfile")
class WriterRegistered:
    __version__ = 1

    writer_id: Identifier(required=True)
    user_id: Identifier(required=True)
    display_name: String(required=True)
    registered_at: DateTime(required=True)


@ordering.event(part_of="WriterProfile")
class WriterApproved:
    __version__ = 1

    writer_id: Identifier(required=True)
    user_id: Identifier(required=True)
    approved_at: DateTime(required=True)


@ordering.event(part_of="WriterProfile")
class WriterSuspended:
    __version__ = 1

    writer_id: Identifier(required=True)
    user_id: Identifier(required=True)
    reason: String()
    suspended_at: DateTime(required=True)


@ordering.aggregate
class WriterProfile:
    """A user who may take on writing work once approved."""

    user_id = Identifier(required=True, unique=True)
    display_name = String(required=True, max_length=100)
    status = String(choices=WriterStatus, default=WriterStatus.PENDING.value)
    registered_at = DateTime()
    approved_at = DateTime()
    suspended_at = DateTime()
    suspension_reason = String(max_length=500)

    @classmethod
    def register(cls, user_id: str, display_name: str):
        now = datetime.now(UTC)
        profile = cls(
            user_id=user_id,
            display_name=display_name,
            status=WriterStatus.PENDING.value,
            registered_at=now,
        )
        profile.raise_(
            WriterRegistered(
                writer_id=str(profile.id),
                user_id=user_id,
                display_name=display_name,
                registered_at=now,
            )
        )
        return profile

    @property
    def is_approved(self) -> bool:
        return self.status == WriterStatus.APPROVED.value

    def approve(self) -> None:
        if self.is_approved:
            raise ValidationError({"status": ["Writer is already approved"]})
        now = datetime.now(UTC)
        self.status = WriterStatus.APPROVED.value
        self.approved_at = now
        self.suspended_at = None
        self.suspension_reason = None
        self.raise_(WriterApproved(writer_id=str(self.id), user_id=str(self.user_id), approved_at=now))

    def suspend(self, reason: str | None = None) -> None:
        if self.status == WriterStatus.SUSPENDED.value:
            raise ValidationError({"status": ["Writer is already suspended"]})
        now = datetime.now(UTC)
        self.status = WriterStatus.SUSPENDED.value
        self.suspended_at = now
        self.suspension_reason = reason
        self.raise_(
            WriterSuspended(
                writer_id=str(self.id),
                user_id=str(self.user_id),
                reason=reason,
                suspended_at=now,
            )
        )
