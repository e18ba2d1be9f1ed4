"""OTP store — query surface over persisted OneTimeCode records."""

from datetime import datetime

from protean.exceptions import ExpectedVersionError

from identity.domain import identity
from identity.otp.one_time_code import OneTimeCode
from shared.timestamps import as_utc


@identity.repository(part_of=OneTimeCode)
class OneTimeCodeRepository:
    def latest_unconsumed(self, identifier: str, channel: str) -> OneTimeCode | None:
        """Most recently created code for the pair that is still usable, if any."""
        return (
            self._dao.query.filter(identifier=identifier, channel=channel, consumed=False)
            .order_by("-created_at")
            .all()
            .first
        )

    def unconsumed(self, identifier: str, channel: str) -> list[OneTimeCode]:
        return self._dao.query.filter(identifier=identifier, channel=channel, consumed=False).all().items

    def count_issued_since(self, identifier: str, channel: str, since: datetime) -> int:
        """Number of codes created for the pair at or after `since`, consumed or not."""
        return self._dao.query.filter(identifier=identifier, channel=channel, created_at__gte=since).all().total

    def history(self, identifier: str, channel: str) -> list[OneTimeCode]:
        return self._dao.query.filter(identifier=identifier, channel=channel).order_by("-created_at").all().items

    def claim(self, otp: OneTimeCode) -> bool:
        """Persist a consumed code only if nobody wrote it since it was read.

        Returns False when another verification consumed it first.
        """
        try:
            self.add(otp)
        except ExpectedVersionError:
            return False
        return True

    def settle(self, otp: OneTimeCode, now: datetime) -> bool:
        """Leave exactly one unconsumed code for `otp`'s pair.

        Concurrent issuers can each commit a fresh code before seeing the
        other's. The newest code (ties broken by id) survives and the rest are
        superseded. Returns True when `otp` is the survivor.
        """
        live = self.unconsumed(otp.identifier, otp.channel)
        if not live:
            return False

        survivor = max(live, key=lambda record: (as_utc(record.created_at), str(record.id)))
        for record in live:
            if record.id == survivor.id:
                continue
            record.supersede(now)
            try:
                self.add(record)
            except ExpectedVersionError:
                # Another issuer already superseded it
                continue
        return survivor.id == otp.id
