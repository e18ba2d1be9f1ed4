"""Sign-in with a one-time code: command, handler and the flow behind them.

A successful verification finds the account that owns the identifier on
that channel, or registers a new customer account for it.
"""

from dataclasses import dataclass
from enum import Enum

from protean import handle
from protean.fields import String
from protean.utils.globals import current_domain

from identity.account.account import Account
from identity.domain import identity
from identity.otp.engine import VerificationEngine, VerificationStatus, get_engine
from identity.shared.channels import normalize_identifier, parse_channel
from identity.utils.logging import get_logger

logger = get_logger(__name__)


class LoginStatus(Enum):
    LOGGED_IN = "logged_in"
    INVALID = "invalid"
    EXPIRED = "expired"


@dataclass(frozen=True)
class LoginResult:
    status: LoginStatus
    account_id: str | None = None
    created: bool = False
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == LoginStatus.LOGGED_IN


def login_with_code(identifier: str, channel: str, code: str, engine: VerificationEngine | None = None) -> LoginResult:
    engine = engine or get_engine()
    verification = engine.verify_code(identifier, channel, code)
    if verification.status == VerificationStatus.EXPIRED:
        return LoginResult(LoginStatus.EXPIRED, error=verification.error)
    if not verification.ok:
        return LoginResult(LoginStatus.INVALID, error=verification.error)

    channel_ = parse_channel(channel)
    if channel_ is None:
        return LoginResult(LoginStatus.INVALID, error=f"Unknown channel: {channel!r}")
    try:
        # The master code is accepted before the identifier is validated
        normalized = normalize_identifier(verification.identifier, channel_)
    except ValueError as exc:
        return LoginResult(LoginStatus.INVALID, error=str(exc))

    now = engine.clock()
    repo = current_domain.repository_for(Account)
    account = repo.find_by_contact(normalized, channel_)
    created = account is None
    if created:
        account = Account.register(normalized, channel_, now)
        logger.info("Account registered on first login", account_id=str(account.id), channel=channel_.value)
    else:
        account.verify_contact(normalized, channel_, now)

    account.record_login(channel_, now)
    repo.add(account)
    return LoginResult(LoginStatus.LOGGED_IN, account_id=str(account.id), created=created)


@identity.command(part_of="Account")
class LoginWithCode:
    """Sign in (or sign up) with a code previously sent to the identifier."""

    identifier: String(required=True, max_length=254)
    channel: String(required=True, max_length=10)
    code: String(required=True, max_length=32)


@identity.command_handler(part_of=Account)
class LoginHandler:
    @handle(LoginWithCode)
    def login(self, command):
        return login_with_code(command.identifier, command.channel, command.code)
