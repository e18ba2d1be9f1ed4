import pytest


@pytest.fixture(autouse=True)
def run_around_tests(identity_domain):
    """Push domain context before each test, cleanup after."""
    ctx = identity_domain.domain_context()
    ctx.push()

    yield

    from protean import current_domain

    for _, provider in current_domain.providers.items():
        provider._data_reset()

    for _, broker in current_domain.brokers.items():
        broker._data_reset()

    current_domain.event_store.store._data_reset()
    ctx.pop()


@pytest.fixture()
def settings():
    from identity.otp.settings import OTPSettings

    return OTPSettings()


@pytest.fixture()
def engine(settings, clock):
    """Engine on the fake clock, relaying through the in-memory channel adapters."""
    from identity.otp.engine import VerificationEngine, set_engine

    engine = VerificationEngine(settings=settings, clock=clock)
    set_engine(engine)
    return engine


@pytest.fixture()
def email_outbox():
    from notifications.channel import EMAIL, get_channel

    return get_channel(EMAIL)


@pytest.fixture()
def sms_outbox():
    from notifications.channel import MOBILE, get_channel

    return get_channel(MOBILE)
