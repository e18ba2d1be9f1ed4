"""Tunables for code issuance and verification."""

import os
from dataclasses import dataclass
from datetime import timedelta


@dataclass(frozen=True)
class OTPSettings:
    code_length: int = 6
    ttl: timedelta = timedelta(minutes=5)
    rate_limit: int = 5
    rate_window: timedelta = timedelta(minutes=60)
    master_code: str | None = None

    @classmethod
    def from_env(cls, environ=None) -> "OTPSettings":
        """Build settings from environment variables, falling back to defaults.

        Recognised variables: MASTER_OTP, OTP_CODE_LENGTH, OTP_TTL_SECONDS,
        OTP_RATE_LIMIT, OTP_RATE_WINDOW_SECONDS.
        """
        env = os.environ if environ is None else environ
        defaults = cls()
        return cls(
            code_length=int(env.get("OTP_CODE_LENGTH", defaults.code_length)),
            ttl=timedelta(seconds=int(env.get("OTP_TTL_SECONDS", defaults.ttl.total_seconds()))),
            rate_limit=int(env.get("OTP_RATE_LIMIT", defaults.rate_limit)),
            rate_window=timedelta(
                seconds=int(env.get("OTP_RATE_WINDOW_SECONDS", defaults.rate_window.total_seconds()))
            ),
            master_code=(env.get("MASTER_OTP") or "").strip() or None,
        )
