from datetime import UTC, datetime, timedelta

import pytest
from identity.otp.events import CodeIssued, CodeSuperseded, CodeVerified
from identity.otp.one_time_code import ConsumedReason, OneTimeCode
from protean.exceptions import ValidationError

ISSUED_AT = datetime(2025, 3, 14, 9, 0, tzinfo=UTC)


def _issue(code="482913", purpose="login"):
    return OneTimeCode.issue(
        identifier="user@example.com",
        channel="email",
        code=code,
        purpose=purpose,
        issued_at=ISSUED_AT,
        ttl=timedelta(minutes=5),
    )


class TestIssue:
    def test_expires_five_minutes_after_issuance(self):
        otp = _issue()
        assert otp.created_at == ISSUED_AT
        assert otp.expires_at == ISSUED_AT + timedelta(minutes=5)

    def test_starts_unconsumed(self):
        otp = _issue()
        assert otp.consumed is False
        assert otp.consumed_at is None
        assert otp.consumed_reason is None

    def test_raises_code_issued_without_the_code(self):
        otp = _issue()
        assert len(otp._events) == 1
        event = otp._events[0]
        assert isinstance(event, CodeIssued)
        assert event.identifier == "user@example.com"
        assert not hasattr(event, "code")

    def test_rejects_unknown_channel(self):
        with pytest.raises(ValidationError):
            OneTimeCode.issue(
                identifier="user@example.com",
                channel="carrier-pigeon",
                code="123456",
                purpose="login",
                issued_at=ISSUED_AT,
                ttl=timedelta(minutes=5),
            )

    def test_rejects_unknown_purpose(self):
        with pytest.raises(ValidationError):
            _issue(purpose="password_reset")


class TestExpiry:
    def test_not_expired_at_the_expiry_instant(self):
        otp = _issue()
        assert not otp.is_expired(otp.expires_at)

    def test_expired_just_after_expiry(self):
        otp = _issue()
        assert otp.is_expired(otp.expires_at + timedelta(seconds=1))

    def test_expiry_read_back_without_timezone_is_utc(self):
        # SQL providers hand timestamps back naive
        otp = OneTimeCode.issue(
            identifier="user@example.com",
            channel="email",
            code="482913",
            purpose="login",
            issued_at=ISSUED_AT.replace(tzinfo=None),
            ttl=timedelta(minutes=5),
        )

        assert not otp.is_expired(ISSUED_AT + timedelta(minutes=5))
        assert otp.is_expired(ISSUED_AT + timedelta(minutes=5, seconds=1))


class TestMatching:
    def test_exact_match(self):
        assert _issue().matches("482913")

    def test_surrounding_whitespace_is_ignored(self):
        assert _issue().matches("  482913\n")

    def test_leading_zeros_are_significant(self):
        otp = _issue(code="012345")
        assert otp.matches("012345")
        assert not otp.matches("12345")

    def test_different_code_does_not_match(self):
        assert not _issue().matches("482914")


class TestConsumption:
    def test_supersede_marks_consumed(self):
        otp = _issue()
        otp._events.clear()
        later = ISSUED_AT + timedelta(minutes=1)

        otp.supersede(later)

        assert otp.consumed is True
        assert otp.consumed_at == later
        assert otp.consumed_reason == ConsumedReason.SUPERSEDED.value
        assert isinstance(otp._events[-1], CodeSuperseded)

    def test_mark_verified_marks_consumed(self):
        otp = _issue()
        otp._events.clear()
        later = ISSUED_AT + timedelta(minutes=2)

        otp.mark_verified(later)

        assert otp.consumed is True
        assert otp.consumed_reason == ConsumedReason.VERIFIED.value
        assert isinstance(otp._events[-1], CodeVerified)

    def test_cannot_be_consumed_twice(self):
        otp = _issue()
        otp.mark_verified(ISSUED_AT + timedelta(minutes=1))
        with pytest.raises(ValidationError) as exc:
            otp.mark_verified(ISSUED_AT + timedelta(minutes=2))
        assert "consumed" in exc.value.messages

    def test_expired_code_cannot_be_verified(self):
        otp = _issue()
        with pytest.raises(ValidationError):
            otp.mark_verified(ISSUED_AT + timedelta(minutes=6))
        assert otp.consumed is False
