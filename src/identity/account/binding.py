"""Binding a new email address or mobile number to an existing account."""

from dataclasses import dataclass
from enum import Enum

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from identity.account.account import Account
from identity.domain import identity
from identity.otp.engine import VerificationEngine, VerificationStatus, get_engine
from identity.shared.channels import normalize_identifier, parse_channel
from identity.utils.logging import get_logger

logger = get_logger(__name__)


class BindStatus(Enum):
    BOUND = "bound"
    INVALID = "invalid"
    EXPIRED = "expired"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class BindResult:
    status: BindStatus
    identifier: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == BindStatus.BOUND


def bind_contact(
    account_id: str,
    identifier: str,
    channel: str,
    code: str,
    engine: VerificationEngine | None = None,
) -> BindResult:
    """Attach a verified contact to `account_id`.

    The account and ownership checks run before the code is looked at, so a
    rejected binding never consumes the code.
    """
    engine = engine or get_engine()
    channel_ = parse_channel(channel)
    if channel_ is None:
        return BindResult(BindStatus.INVALID, error=f"Unknown channel: {channel!r}")
    try:
        normalized = normalize_identifier(identifier, channel_)
    except ValueError as exc:
        return BindResult(BindStatus.INVALID, error=str(exc))

    repo = current_domain.repository_for(Account)
    try:
        account = repo.get(account_id)
    except ObjectNotFoundError:
        return BindResult(BindStatus.NOT_FOUND, identifier=normalized, error=f"Account {account_id} not found")

    owner = repo.find_by_contact(normalized, channel_)
    if owner is not None and owner.id != account.id:
        logger.warning("Contact already bound to another account", account_id=account_id, channel=channel_.value)
        return BindResult(BindStatus.CONFLICT, identifier=normalized, error="Contact belongs to another account")

    verification = engine.verify_code(normalized, channel_.value, code)
    if verification.status == VerificationStatus.EXPIRED:
        return BindResult(BindStatus.EXPIRED, identifier=normalized, error=verification.error)
    if not verification.ok:
        return BindResult(BindStatus.INVALID, identifier=normalized, error=verification.error)

    account.verify_contact(normalized, channel_, engine.clock())
    repo.add(account)
    logger.info("Contact bound", account_id=account_id, channel=channel_.value)
    return BindResult(BindStatus.BOUND, identifier=normalized)


@identity.command(part_of="Account")
class BindContact:
    account_id: Identifier(required=True)
    identifier: String(required=True, max_length=254)
    channel: String(required=True, max_length=10)
    code: String(required=True, max_length=32)


@identity.command_handler(part_of=Account)
class BindContactHandler:
    @handle(BindContact)
    def bind(self, command):
        return bind_contact(command.account_id, command.identifier, command.channel, command.code)
