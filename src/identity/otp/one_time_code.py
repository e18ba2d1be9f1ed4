"""OneTimeCode aggregate (CQRS) — a single issued verification code.

Lifecycle:
    issued (consumed=False) → consumed (reason Verified)
    issued (consumed=False) → consumed (reason Superseded)

A record is never deleted; consumed records still count towards the
issuance rate limit.
"""

from datetime import UTC, datetime, timedelta
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, String

from identity.domain import identity
from identity.otp.events import CodeIssued, CodeSuperseded, CodeVerified
from identity.shared.channels import Channel
from shared.timestamps import as_utc


class Purpose(Enum):
    SIGNUP = "signup"
    LOGIN = "login"
    VERIFICATION = "verification"


class ConsumedReason(Enum):
    VERIFIED = "verified"
    SUPERSEDED = "superseded"


@identity.aggregate
class OneTimeCode:
    """A code bound to one identifier on one channel, valid for a short window."""

    identifier: String(required=True, max_length=254)
    channel: String(required=True, choices=Channel)
    code: String(required=True, max_length=32)
    purpose: String(choices=Purpose, default=Purpose.LOGIN.value)
    created_at: DateTime(required=True)
    expires_at: DateTime(required=True)
    consumed: Boolean(default=False)
    consumed_at: DateTime()
    consumed_reason: String(choices=ConsumedReason)
    ip_address: String(max_length=64)
    user_agent: String(max_length=255)

    @classmethod
    def issue(
        cls,
        identifier: str,
        channel: str,
        code: str,
        purpose: str,
        issued_at: datetime,
        ttl: timedelta,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ):
        """Create a new unconsumed code expiring `ttl` after `issued_at`."""
        otp = cls(
            identifier=identifier,
            channel=channel,
            code=code,
            purpose=purpose,
            created_at=issued_at,
            expires_at=issued_at + ttl,
            consumed=False,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        otp.raise_(
            CodeIssued(
                code_id=str(otp.id),
                identifier=identifier,
                channel=channel,
                purpose=purpose,
                issued_at=issued_at,
                expires_at=otp.expires_at,
            )
        )
        return otp

    def is_expired(self, now: datetime | None = None) -> bool:
        """A code is expired strictly after its expiry instant."""
        now = now or datetime.now(UTC)
        return as_utc(now) > as_utc(self.expires_at)

    def matches(self, submitted: str) -> bool:
        """Exact comparison of trimmed strings; leading zeros are significant."""
        return str(submitted).strip() == self.code.strip()

    def _consume(self, reason: ConsumedReason, now: datetime) -> None:
        if self.consumed:
            raise ValidationError({"consumed": ["Code has already been consumed"]})
        self.consumed = True
        self.consumed_at = now
        self.consumed_reason = reason.value

    def supersede(self, now: datetime | None = None) -> None:
        """Invalidate this code because a newer one was issued for the same pair."""
        now = now or datetime.now(UTC)
        self._consume(ConsumedReason.SUPERSEDED, now)
        self.raise_(
            CodeSuperseded(
                code_id=str(self.id),
                identifier=self.identifier,
                channel=self.channel,
                superseded_at=now,
            )
        )

    def mark_verified(self, now: datetime | None = None) -> None:
        """Consume the code after a successful match."""
        now = now or datetime.now(UTC)
        if self.is_expired(now):
            raise ValidationError({"expires_at": ["Code has expired"]})
        self._consume(ConsumedReason.VERIFIED, now)
        self.raise_(
            CodeVerified(
                code_id=str(self.id),
                identifier=self.identifier,
                channel=self.channel,
                purpose=self.purpose,
                verified_at=now,
            )
        )
