"""Account lookups by contact address."""

from identity.account.account import Account
from identity.domain import identity
from identity.shared.channels import Channel


@identity.repository(part_of=Account)
class AccountRepository:
    def find_by_email(self, email: str) -> Account | None:
        return self._dao.query.filter(email=email).all().first

    def find_by_phone(self, phone: str) -> Account | None:
        return self._dao.query.filter(phone=phone).all().first

    def find_by_contact(self, identifier: str, channel: Channel) -> Account | None:
        if channel == Channel.EMAIL:
            return self.find_by_email(identifier)
        return self.find_by_phone(identifier)
