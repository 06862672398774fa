"""Unit tests for application and fraud configuration."""

import pytest

from txnguard.config import Settings
from txnguard.domains.fraud.config import FraudConfig, StatusThresholds


class TestSettings:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        settings = Settings(_env_file=None)
        assert settings.app_name == "txnguard"
        assert settings.log_level == "INFO"
        assert settings.history_default_limit == 20
        assert settings.history_max_limit == 100
        assert settings.db_pool_size == 10
        assert settings.db_max_overflow == 20

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("HISTORY_MAX_LIMIT", "50")
        monkeypatch.setenv("DB_POOL_SIZE", "4")
        settings = Settings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.history_max_limit == 50
        assert settings.db_pool_size == 4


class TestFraudConfig:
    def test_defaults(self):
        config = FraudConfig()
        assert config.points.high_amount == 30
        assert config.points.unusual_country == 25
        assert config.points.unusual_time == 15
        assert config.points.high_frequency_large_amounts == 30
        assert config.status.flag_min == 40
        assert config.status.reject_min == 70
        assert config.frequency.large_amount_multiplier == 1.5
        assert config.frequency.min_large_recent == 2
        assert config.profile_defaults.high_amount_threshold == 1000.0
        assert config.hour_timezone == "UTC"

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("FRAUD_POINTS_UNUSUAL_TIME", "20")
        monkeypatch.setenv("FRAUD_REJECT_THRESHOLD", "80")
        monkeypatch.setenv("FRAUD_LARGE_AMOUNT_MULTIPLIER", "2.0")
        monkeypatch.setenv("FRAUD_DEFAULT_FREQUENCY_COUNT", "5")
        monkeypatch.setenv("FRAUD_HOUR_TIMEZONE", "America/Port-au-Prince")

        config = FraudConfig.from_env()

        assert config.points.unusual_time == 20
        assert config.status.reject_min == 80
        assert config.status.flag_min == 40
        assert config.frequency.large_amount_multiplier == 2.0
        assert config.profile_defaults.frequency_count == 5
        assert config.hour_timezone == "America/Port-au-Prince"

    def test_from_env_inverted_thresholds(self, monkeypatch):
        monkeypatch.setenv("FRAUD_FLAG_THRESHOLD", "90")
        with pytest.raises(ValueError):
            FraudConfig.from_env()

    def test_instances_are_independent(self):
        a = FraudConfig()
        a.points.high_amount = 1
        assert FraudConfig().points.high_amount == 30

    def test_equal_thresholds_allowed(self):
        status = StatusThresholds(flag_min=50, reject_min=50)
        assert status.flag_min == status.reject_min

    @pytest.mark.parametrize("zone", ["Mars/Olympus_Mons", "", "../etc/passwd"])
    def test_unknown_timezone_rejected(self, zone):
        with pytest.raises(ValueError, match="unknown hour timezone"):
            FraudConfig(hour_timezone=zone)

    def test_from_env_unknown_timezone(self, monkeypatch):
        monkeypatch.setenv("FRAUD_HOUR_TIMEZONE", "Not/AZone")
        with pytest.raises(ValueError, match="unknown hour timezone"):
            FraudConfig.from_env()
