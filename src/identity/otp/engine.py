"""Identity verification engine: issues and verifies one-time codes.

Issuance:
    validate → normalize → rate limit (sliding window) → generate →
    supersede older unconsumed codes and persist in one commit → settle
    concurrent issuers down to one live code → dispatch

Verification:
    master code bypass → latest unconsumed code → exact match → expiry →
    consume (conditional on the record still being unconsumed)

Every outcome is returned as a result value; nothing is retried here.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from protean import UnitOfWork
from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain

from identity.otp.generator import CodeGenerator
from identity.otp.one_time_code import OneTimeCode, Purpose
from identity.otp.settings import OTPSettings
from identity.shared.channels import normalize_identifier, parse_channel
from identity.utils.logging import get_logger
from notifications.dispatcher import NotificationDispatcher, get_dispatcher
from shared.timestamps import utcnow

logger = get_logger(__name__)

_PURPOSES = {p.value for p in Purpose}


class IssueStatus(Enum):
    ISSUED = "issued"
    RATE_LIMITED = "rate_limited"
    DISPATCH_FAILED = "dispatch_failed"
    CONFLICT = "conflict"
    INVALID = "invalid"


class VerificationStatus(Enum):
    VERIFIED = "verified"
    INVALID = "invalid"
    EXPIRED = "expired"


@dataclass(frozen=True)
class IssueResult:
    status: IssueStatus
    identifier: str | None = None
    code: str | None = None
    expires_at: datetime | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == IssueStatus.ISSUED


@dataclass(frozen=True)
class VerificationResult:
    status: VerificationStatus
    identifier: str | None = None
    bypass: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == VerificationStatus.VERIFIED


class VerificationEngine:
    """Issues, rate-limits and verifies one-time codes.

    Must be used inside an active identity domain context; records are read
    and written through the OneTimeCode repository.

    Args:
        settings: Code length, lifetime, rate limit and optional master code.
            Defaults to ``OTPSettings.from_env()``.
        dispatcher: Transport used to relay issued codes.
        generator: Source of codes; built from `settings` when omitted.
        clock: Zero-argument callable returning the current aware datetime.
    """

    def __init__(
        self,
        settings: OTPSettings | None = None,
        dispatcher: NotificationDispatcher | None = None,
        generator: CodeGenerator | None = None,
        clock=None,
    ):
        self.settings = settings or OTPSettings.from_env()
        self.generator = generator or CodeGenerator(
            length=self.settings.code_length,
            master_code=self.settings.master_code,
        )
        self.dispatcher = dispatcher or get_dispatcher()
        self.clock = clock or utcnow

    @property
    def store(self):
        return current_domain.repository_for(OneTimeCode)

    # -------------------------------------------------------------------
    # Issuance
    # -------------------------------------------------------------------
    def request_code(
        self,
        identifier: str,
        channel: str,
        purpose: str = Purpose.LOGIN.value,
        ip_address: str | None = None,
        user_agent: str | None = None,
    ) -> IssueResult:
        """Issue a fresh code for (identifier, channel) and relay it."""
        channel_ = parse_channel(channel)
        if channel_ is None:
            return IssueResult(IssueStatus.INVALID, error=f"Unknown channel: {channel!r}")
        if purpose not in _PURPOSES:
            return IssueResult(IssueStatus.INVALID, error=f"Unknown purpose: {purpose!r}")
        try:
            normalized = normalize_identifier(identifier, channel_)
        except ValueError as exc:
            return IssueResult(IssueStatus.INVALID, error=str(exc))

        now = self.clock()
        store = self.store

        issued_recently = store.count_issued_since(normalized, channel_.value, now - self.settings.rate_window)
        if issued_recently >= self.settings.rate_limit:
            logger.warning(
                "Code request rate limited",
                identifier=normalized,
                channel=channel_.value,
                issued_recently=issued_recently,
            )
            return IssueResult(
                IssueStatus.RATE_LIMITED,
                identifier=normalized,
                error="Too many code requests. Try again later.",
            )

        stale_codes = store.unconsumed(normalized, channel_.value)
        code = self.generator.generate()
        otp = OneTimeCode.issue(
            identifier=normalized,
            channel=channel_.value,
            code=code,
            purpose=purpose,
            issued_at=now,
            ttl=self.settings.ttl,
            ip_address=ip_address,
            user_agent=user_agent,
        )

        # Older codes die in the same commit that creates the new one.
        try:
            with UnitOfWork():
                for stale in stale_codes:
                    stale.supersede(now)
                    store.add(stale)
                store.add(otp)
        except ExpectedVersionError:
            logger.warning("Concurrent code request won", identifier=normalized, channel=channel_.value)
            return IssueResult(
                IssueStatus.CONFLICT,
                identifier=normalized,
                error="Another code request is in progress. Try again.",
            )

        if not store.settle(otp, now):
            logger.warning("Code superseded by a concurrent request", identifier=normalized, channel=channel_.value)
            return IssueResult(
                IssueStatus.CONFLICT,
                identifier=normalized,
                error="Another code request is in progress. Try again.",
            )

        if self.generator.bypass:
            logger.info("Master code configured, skipping dispatch", identifier=normalized, channel=channel_.value)
            return IssueResult(IssueStatus.ISSUED, identifier=normalized, code=code, expires_at=otp.expires_at)

        try:
            sent = self.dispatcher.send(
                channel_.value,
                normalized,
                code,
                purpose=purpose,
                ttl_minutes=int(self.settings.ttl.total_seconds() // 60),
            )
        except Exception as e:
            logger.error("Code dispatch raised", identifier=normalized, channel=channel_.value, error=str(e))
            sent = False

        if not sent:
            # The record stays valid: the code may still reach the user.
            logger.error("Failed to send code", identifier=normalized, channel=channel_.value)
            return IssueResult(
                IssueStatus.DISPATCH_FAILED,
                identifier=normalized,
                code=code,
                expires_at=otp.expires_at,
                error="Failed to send code. Please try again.",
            )

        logger.info("Code issued", identifier=normalized, channel=channel_.value, purpose=purpose)
        return IssueResult(IssueStatus.ISSUED, identifier=normalized, code=code, expires_at=otp.expires_at)

    # -------------------------------------------------------------------
    # Verification
    # -------------------------------------------------------------------
    def verify_code(self, identifier: str, channel: str, submitted_code) -> VerificationResult:
        """Check a submitted code and consume it on success."""
        submitted = "" if submitted_code is None else str(submitted_code).strip()
        channel_ = parse_channel(channel)

        if self.settings.master_code is not None and submitted == self.settings.master_code:
            logger.info("Master code accepted", identifier=identifier, channel=channel)
            return VerificationResult(
                VerificationStatus.VERIFIED,
                identifier=self._best_effort_normalize(identifier, channel_),
                bypass=True,
            )

        if channel_ is None:
            return VerificationResult(VerificationStatus.INVALID, error=f"Unknown channel: {channel!r}")
        try:
            normalized = normalize_identifier(identifier, channel_)
        except ValueError as exc:
            return VerificationResult(VerificationStatus.INVALID, error=str(exc))
        if not submitted:
            return VerificationResult(VerificationStatus.INVALID, identifier=normalized, error="Code is required")

        store = self.store
        record = store.latest_unconsumed(normalized, channel_.value)

        # "Never issued", "already used" and "wrong code" look the same to the caller.
        if record is None or not record.matches(submitted):
            logger.info("Code rejected", identifier=normalized, channel=channel_.value)
            return VerificationResult(VerificationStatus.INVALID, identifier=normalized, error="Invalid code")

        now = self.clock()
        if record.is_expired(now):
            logger.info("Expired code submitted", identifier=normalized, channel=channel_.value)
            return VerificationResult(VerificationStatus.EXPIRED, identifier=normalized, error="Code has expired")

        record.mark_verified(now)
        if not store.claim(record):
            logger.warning("Code consumed concurrently", identifier=normalized, channel=channel_.value)
            return VerificationResult(VerificationStatus.INVALID, identifier=normalized, error="Invalid code")

        logger.info("Code verified", identifier=normalized, channel=channel_.value)
        return VerificationResult(VerificationStatus.VERIFIED, identifier=normalized)

    @staticmethod
    def _best_effort_normalize(identifier, channel_) -> str | None:
        if channel_ is None:
            return identifier
        try:
            return normalize_identifier(identifier, channel_)
        except ValueError:
            return identifier


_engine_instance: VerificationEngine | None = None


def get_engine() -> VerificationEngine:
    """Return the process-wide engine, configured from the environment (singleton)."""
    global _engine_instance
    if _engine_instance is None:
        _engine_instance = VerificationEngine()
    return _engine_instance


def set_engine(engine: VerificationEngine | None) -> None:
    """Install a specific engine, or clear it with None (useful for testing)."""
    global _engine_instance
    _engine_instance = engine
