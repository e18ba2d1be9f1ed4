"""Code verification: command and handler."""

from protean import handle
from protean.fields import String

from identity.domain import identity
from identity.otp.engine import get_engine
from identity.otp.one_time_code import OneTimeCode


@identity.command(part_of="OneTimeCode")
class VerifyCode:
    """Submit a code received on a channel for checking."""

    identifier: String(required=True, max_length=254)
    channel: String(required=True, max_length=10)
    code: String(required=True, max_length=32)


@identity.command_handler(part_of=OneTimeCode)
class VerifyCodeHandler:
    @handle(VerifyCode)
    def verify_code(self, command):
        return get_engine().verify_code(command.identifier, command.channel, command.code)
