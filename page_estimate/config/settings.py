"""
全局系统设置

定义系统级配置参数和默认值。
支持通过 PAGE_ESTIMATE_ 前缀的环境变量覆盖默认值，列表类型使用 JSON 编码。
"""

from typing import List, Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """系统设置类"""

    model_config = SettingsConfigDict(env_prefix="PAGE_ESTIMATE_", case_sensitive=False)

    # 日志配置
    log_level: str = Field(default="WARNING", description="日志级别")
    log_file: Optional[str] = Field(default=None, description="日志文件路径")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="日志格式",
    )
    log_file_max_bytes: int = Field(default=10 * 1024 * 1024, gt=0, description="单个日志文件大小上限")
    log_file_backup_count: int = Field(default=5, ge=0, description="保留的日志文件数量")

    # 输出配置
    default_output_format: str = Field(default="table", description="默认输出格式")

    # 模拟器节流配置（默认对应慢速 4G 移动网络）
    rtt_ms: float = Field(default=150.0, ge=0, description="往返时延(ms)")
    throughput_kbps: float = Field(default=1638.4, gt=0, description="下行吞吐量(Kbps)")
    cpu_slowdown_multiplier: float = Field(default=4.0, gt=0, description="CPU减速倍数")

    # 默认估算的指标
    default_metrics: List[str] = Field(
        default_factory=lambda: [
            "first-contentful-paint",
            "first-meaningful-paint",
            "interactive",
            "speed-index",
        ],
        description="默认估算的指标列表",
    )

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {value}")
        return level


class ConfigManager:
    """配置管理器"""

    def __init__(self):
        self._settings: Optional[Settings] = None

    def get_settings(self) -> Settings:
        """获取设置实例（单例模式）"""
        if self._settings is None:
            self._settings = Settings()
        return self._settings

    def update_settings(self, **kwargs) -> None:
        """更新设置"""
        settings = self.get_settings()
        for key in kwargs:
            if key not in Settings.model_fields:
                raise ValueError(f"Unknown setting: {key}")
        # 重新校验，避免写入非法值
        self._settings = Settings(**{**settings.model_dump(), **kwargs})

    def reset(self) -> None:
        """丢弃已加载的设置，下次访问时重新读取环境变量"""
        self._settings = None


# 全局配置管理器实例
config_manager = ConfigManager()


def get_settings() -> Settings:
    """获取全局设置"""
    return config_manager.get_settings()
