import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_configure(config):
    """Select the protean config overlay before any domain module is imported."""
    os.environ["PROTEAN_ENV"] = config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def identity_domain():
    """Initialize the identity domain and its schema once per session."""
    from identity.domain import identity
    from shared.db import drop_db, setup_db

    identity.init()
    setup_db(identity)

    yield identity

    drop_db(identity)


@pytest.fixture(scope="session")
def ordering_domain():
    """Initialize the ordering domain and its schema once per session."""
    from ordering.domain import ordering
    from shared.db import drop_db, setup_db

    ordering.init()
    setup_db(ordering)

    yield ordering

    drop_db(ordering)


@pytest.fixture(autouse=True)
def _isolated_transports(monkeypatch):
    """Give every test fresh fake channel adapters and no master code."""
    monkeypatch.delenv("MASTER_OTP", raising=False)
    monkeypatch.delenv("EMAIL_ADAPTER", raising=False)
    monkeypatch.delenv("SMS_ADAPTER", raising=False)

    from identity.otp.engine import set_engine
    from notifications.channel import reset_channels
    from notifications.dispatcher import reset_dispatcher

    reset_channels()
    reset_dispatcher()
    set_engine(None)

    yield

    reset_channels()
    reset_dispatcher()
    set_engine(None)


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **delta):
        from datetime import timedelta

        self.now += timedelta(**delta)


@pytest.fixture()
def clock():
    from datetime import UTC, datetime

    return FakeClock(datetime(2025, 3, 14, 9, 0, tzinfo=UTC))
