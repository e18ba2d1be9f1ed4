"""Shared BDD fixtures and step definitions for one-time codes."""

import pytest
from identity.otp.one_time_code import OneTimeCode
from notifications.channel import get_channel
from protean import current_domain
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def outcome():
    """Container for the latest engine results."""
    return {"issue": None, "verify": None, "sent_before": 0}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a code "{code}" was issued to "{identifier}" by {channel}'))
def code_was_issued(engine, monkeypatch, code, identifier, channel):
    monkeypatch.setattr("identity.otp.generator.secrets.randbelow", lambda upper: int(code))
    result = engine.request_code(identifier, channel)
    assert result.code == code


@given(parsers.cfparse('{count:d} codes were requested for "{identifier}" by {channel}'))
def codes_were_requested(engine, count, identifier, channel):
    for _ in range(count):
        assert engine.request_code(identifier, channel).ok


@given(parsers.cfparse("{minutes:d} minutes pass"))
def minutes_pass(clock, minutes):
    clock.advance(minutes=minutes)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('"{code}" is submitted for "{identifier}" by {channel}'))
def code_is_submitted(engine, outcome, code, identifier, channel):
    outcome["verify"] = engine.verify_code(identifier, channel, code)


@when(parsers.cfparse('another code is requested for "{identifier}" by {channel}'))
def another_code_is_requested(engine, outcome, identifier, channel):
    outcome["sent_before"] = len(get_channel(channel).outbox)
    outcome["issue"] = engine.request_code(identifier, channel)


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the verification outcome is "{status}"'))
def verification_outcome_is(outcome, status):
    assert outcome["verify"].status.value == status


@then(parsers.cfparse('the request outcome is "{status}"'))
def request_outcome_is(outcome, status):
    assert outcome["issue"].status.value == status


@then("no message was sent for the refused request")
def no_message_sent(outcome):
    assert len(get_channel("email").outbox) == outcome["sent_before"]


@then(parsers.cfparse('the latest code for "{identifier}" by {channel} is unconsumed'))
def latest_code_unconsumed(identifier, channel):
    record = current_domain.repository_for(OneTimeCode).latest_unconsumed(identifier, channel)
    assert record is not None
    assert record.consumed is False
