"""配置管理器模块."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from src.models.api_config import AIConfig
from src.models.app_settings import Settings
from src.utils.constants import APP_DATA_DIR
from src.utils.exceptions import ConfigError
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

# 用户偏好文件（最近打开/导出目录等）
USER_CONFIG_FILE = APP_DATA_DIR / "config.json"


class ConfigManager:
    """配置管理器.

    负责应用设置的加载，以及用户偏好的读写。

    Attributes:
        settings: 应用设置
        ai_config: 当前服务商的 AI 配置
    """

    _instance: Optional["ConfigManager"] = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "ConfigManager":
        """单例模式."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, user_config_file: Optional[Path] = None) -> None:
        """初始化配置管理器.

        Args:
            user_config_file: 用户偏好文件路径，仅首次创建实例时生效
        """
        if self._initialized:
            return

        self._settings: Optional[Settings] = None
        self._user_config_file = user_config_file or USER_CONFIG_FILE
        self._initialized = True

        logger.debug("配置管理器初始化完成")

    @property
    def settings(self) -> Settings:
        """获取应用设置."""
        if self._settings is None:
            self._settings = self._load_settings()
        return self._settings

    @property
    def ai_config(self) -> AIConfig:
        """根据当前设置构建 AI 配置."""
        return AIConfig.from_settings(self.settings)

    @property
    def user_config_file(self) -> Path:
        return self._user_config_file

    def _load_settings(self) -> Settings:
        """加载应用设置.

        环境变量优先，其次是 .env 文件。

        Raises:
            ConfigError: 设置值无效
        """
        try:
            settings = Settings()
            logger.debug(
                f"应用设置加载完成: log_level={settings.log_level}, "
                f"ai_provider={settings.ai_provider}"
            )
            return settings
        except ValidationError as e:
            logger.error(f"加载应用设置失败: {e}")
            raise ConfigError(f"加载应用设置失败: {e}") from e

    def save_user_config(self, config: dict[str, Any]) -> None:
        """保存用户配置，与已有内容合并.

        Args:
            config: 配置字典

        Raises:
            ConfigError: 写入失败
        """
        try:
            existing = self._load_user_config()
            existing.update(config)

            self._user_config_file.parent.mkdir(parents=True, exist_ok=True)
            self._user_config_file.write_text(
                json.dumps(existing, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            logger.debug("用户配置已保存")
        except OSError as e:
            logger.error(f"保存用户配置失败: {e}")
            raise ConfigError(f"保存用户配置失败: {e}") from e

    def _load_user_config(self) -> dict[str, Any]:
        """加载用户配置文件，损坏时返回空字典."""
        if self._user_config_file.exists():
            try:
                content = self._user_config_file.read_text(encoding="utf-8")
                data = json.loads(content)
                if isinstance(data, dict):
                    return data
                logger.warning("用户配置文件格式无效，已忽略")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"加载用户配置文件失败: {e}")
        return {}

    def get_user_config(self, key: str, default: Any = None) -> Any:
        """获取用户配置项.

        Args:
            key: 配置键
            default: 默认值

        Returns:
            配置值
        """
        return self._load_user_config().get(key, default)

    def set_user_config(self, key: str, value: Any) -> None:
        """设置用户配置项."""
        self.save_user_config({key: value})


def get_config() -> ConfigManager:
    """获取配置管理器实例.

    Returns:
        ConfigManager 单例实例
    """
    return ConfigManager()
