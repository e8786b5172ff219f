"""应用设置模型."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.utils.constants import (
    API_TIMEOUT,
    DEFAULT_API_BASE,
    DEFAULT_EXPORT_QUALITY,
)


class Settings(BaseSettings):
    """应用设置.

    支持从环境变量和 .env 文件加载配置。

    Attributes:
        log_level: 日志级别
        ai_provider: 布局分析与肖像生成使用的 AI 服务商
        gemini_api_key: Gemini API 密钥（也读取 API_KEY）
        openai_api_key: OpenAI API 密钥
        openai_api_base: OpenAI API 基础 URL
        layout_model: 布局分析模型，为空时使用服务商默认值
        portrait_model: 肖像生成模型，为空时使用服务商默认值
        api_timeout: 请求超时（秒）
        card_font_path: 证件文字字体文件
        default_base_image: 启动时载入的底图文件
        export_quality: 导出 JPEG 质量
        debug: 调试模式
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="INFO", description="日志级别")

    ai_provider: Literal["gemini", "openai"] = Field(
        default="gemini",
        description="AI 服务商",
    )
    gemini_api_key: Optional[SecretStr] = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "api_key"),
        description="Gemini API 密钥",
    )
    openai_api_key: Optional[SecretStr] = Field(default=None, description="OpenAI API 密钥")
    openai_api_base: str = Field(default=DEFAULT_API_BASE, description="OpenAI API 基础 URL")
    layout_model: Optional[str] = Field(default=None, description="布局分析模型")
    portrait_model: Optional[str] = Field(default=None, description="肖像生成模型")
    api_timeout: int = Field(default=API_TIMEOUT, ge=10, le=300, description="请求超时 (秒)")

    card_font_path: Optional[Path] = Field(default=None, description="证件文字字体文件")
    default_base_image: Optional[Path] = Field(default=None, description="启动底图文件")
    export_quality: int = Field(
        default=DEFAULT_EXPORT_QUALITY,
        ge=1,
        le=100,
        description="导出 JPEG 质量",
    )

    debug: bool = Field(default=False, description="调试模式")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """验证日志级别."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"无效的日志级别: {v}，有效值: {valid_levels}")
        return upper_v

    @property
    def effective_log_level(self) -> str:
        """调试模式下强制使用 DEBUG."""
        return "DEBUG" if self.debug else self.log_level
