"""
测试系统设置
"""

import os

import pytest
from pydantic import ValidationError

from page_estimate.config.settings import ConfigManager, Settings


@pytest.fixture
def manager(monkeypatch):
    for name in list(os.environ):
        if name.upper().startswith("PAGE_ESTIMATE_"):
            monkeypatch.delenv(name)
    return ConfigManager()


class TestSettings:
    """测试设置默认值与校验"""

    def test_defaults(self):
        settings = Settings()
        assert settings.rtt_ms == 150
        assert settings.throughput_kbps == pytest.approx(1638.4)
        assert settings.cpu_slowdown_multiplier == 4
        assert settings.log_level == "WARNING"
        assert len(settings.default_metrics) == 4

    @pytest.mark.parametrize("field, value", [
        ("rtt_ms", -1),
        ("throughput_kbps", 0),
        ("cpu_slowdown_multiplier", 0),
    ])
    def test_invalid_throttling(self, field, value):
        with pytest.raises(ValidationError):
            Settings(**{field: value})


class TestConfigManager:
    """测试配置管理器"""

    def test_singleton(self, manager):
        assert manager.get_settings() is manager.get_settings()

    def test_environment_overrides(self, manager, monkeypatch):
        monkeypatch.setenv("PAGE_ESTIMATE_RTT_MS", "40")
        monkeypatch.setenv("PAGE_ESTIMATE_DEFAULT_METRICS", '["interactive", "speed-index"]')

        settings = manager.get_settings()

        assert settings.rtt_ms == 40
        assert settings.default_metrics == ["interactive", "speed-index"]

    def test_invalid_environment_value(self, manager, monkeypatch):
        monkeypatch.setenv("PAGE_ESTIMATE_THROUGHPUT_KBPS", "-5")
        with pytest.raises(ValidationError):
            manager.get_settings()

    def test_update_settings(self, manager):
        manager.update_settings(rtt_ms=300, log_level="DEBUG")

        settings = manager.get_settings()
        assert settings.rtt_ms == 300
        assert settings.log_level == "DEBUG"

    def test_update_unknown_setting(self, manager):
        with pytest.raises(ValueError, match="Unknown setting"):
            manager.update_settings(bandwidth=10)

    def test_update_is_validated(self, manager):
        with pytest.raises(ValidationError):
            manager.update_settings(rtt_ms=-10)
        assert manager.get_settings().rtt_ms == 150

    def test_reset_reloads_environment(self, manager, monkeypatch):
        manager.update_settings(rtt_ms=300)
        monkeypatch.setenv("PAGE_ESTIMATE_RTT_MS", "75")

        manager.reset()

        assert manager.get_settings().rtt_ms == 75

    def test_environment_scalars_and_case(self, manager, monkeypatch):
        monkeypatch.setenv("page_estimate_cpu_slowdown_multiplier", "2.5")
        monkeypatch.setenv("PAGE_ESTIMATE_LOG_LEVEL", "debug")

        settings = manager.get_settings()

        assert settings.cpu_slowdown_multiplier == 2.5
        assert settings.log_level == "DEBUG"

    def test_invalid_log_level(self, manager):
        with pytest.raises(ValidationError):
            manager.update_settings(log_level="verbose")
