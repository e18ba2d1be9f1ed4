"""Channel adapter registry — one transport adapter per contact channel.

Adapters are chosen by the EMAIL_ADAPTER and SMS_ADAPTER environment
variables. Only the in-memory "fake" adapters ship with the core; real
transports are provided by the deployment.
"""

import os

EMAIL = "email"
MOBILE = "mobile"

_ENV_KEYS = {EMAIL: "EMAIL_ADAPTER", MOBILE: "SMS_ADAPTER"}

_channel_instances: dict[str, object] = {}


def _build(channel: str):
    adapter = os.environ.get(_ENV_KEYS[channel], "fake")
    if adapter != "fake":
        raise ValueError(f"Unknown {channel} adapter: {adapter}")

    from notifications.channel.fake import FakeEmailAdapter, FakeSMSAdapter

    return FakeEmailAdapter() if channel == EMAIL else FakeSMSAdapter()


def get_channel(channel: str):
    """Return the configured adapter for a channel (singleton per channel).

    Args:
        channel: "email" or "mobile"
    """
    if channel not in _ENV_KEYS:
        raise ValueError(f"Unknown channel type: {channel}")
    if channel not in _channel_instances:
        _channel_instances[channel] = _build(channel)
    return _channel_instances[channel]


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
