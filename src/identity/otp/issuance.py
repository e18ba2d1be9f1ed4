"""Code issuance: command and handler."""

from protean import handle
from protean.fields import String

from identity.domain import identity
from identity.otp.engine import get_engine
from identity.otp.one_time_code import OneTimeCode, Purpose


@identity.command(part_of="OneTimeCode")
class RequestCode:
    """Ask for a fresh one-time code to be sent to an email address or mobile number."""

    identifier: String(required=True, max_length=254)
    channel: String(required=True, max_length=10)
    purpose: String(max_length=20, default=Purpose.LOGIN.value)
    ip_address: String(max_length=64)
    user_agent: String(max_length=255)


@identity.command_handler(part_of=OneTimeCode)
class RequestCodeHandler:
    @handle(RequestCode)
    def request_code(self, command):
        return get_engine().request_code(
            command.identifier,
            command.channel,
            purpose=command.purpose,
            ip_address=command.ip_address,
            user_agent=command.user_agent,
        )
