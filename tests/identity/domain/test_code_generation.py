from datetime import timedelta

import pytest
from identity.otp.generator import CodeGenerator
from identity.otp.settings import OTPSettings


class TestCodeGenerator:
    def test_codes_are_six_digits_by_default(self):
        generator = CodeGenerator()
        for _ in range(50):
            code = generator.generate()
            assert len(code) == 6
            assert code.isdigit()

    def test_leading_zeros_are_kept(self, monkeypatch):
        monkeypatch.setattr("identity.otp.generator.secrets.randbelow", lambda upper: 42)
        assert CodeGenerator().generate() == "000042"

    def test_master_code_replaces_generation(self):
        generator = CodeGenerator(master_code="000000")
        assert generator.bypass
        assert generator.generate() == "000000"

    def test_empty_master_code_means_no_bypass(self):
        assert not CodeGenerator(master_code="").bypass

    def test_length_must_be_positive(self):
        with pytest.raises(ValueError):
            CodeGenerator(length=0)


class TestOTPSettings:
    def test_defaults(self):
        settings = OTPSettings()
        assert settings.code_length == 6
        assert settings.ttl == timedelta(minutes=5)
        assert settings.rate_limit == 5
        assert settings.rate_window == timedelta(minutes=60)
        assert settings.master_code is None

    def test_from_env_with_nothing_set(self):
        assert OTPSettings.from_env({}) == OTPSettings()

    def test_from_env_overrides(self):
        settings = OTPSettings.from_env(
            {
                "MASTER_OTP": " 999999 ",
                "OTP_TTL_SECONDS": "120",
                "OTP_RATE_LIMIT": "3",
                "OTP_RATE_WINDOW_SECONDS": "600",
                "OTP_CODE_LENGTH": "8",
            }
        )
        assert settings.master_code == "999999"
        assert settings.ttl == timedelta(minutes=2)
        assert settings.rate_limit == 3
        assert settings.rate_window == timedelta(minutes=10)
        assert settings.code_length == 8

    def test_blank_master_code_is_ignored(self):
        assert OTPSettings.from_env({"MASTER_OTP": "  "}).master_code is None
