"""AI 服务配置模型."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field, SecretStr, field_validator

from src.models.app_settings import Settings
from src.utils.constants import (
    API_MAX_RETRIES,
    API_RETRY_DELAY,
    API_TIMEOUT,
    DEFAULT_API_BASE,
)


class AIConfig(BaseModel):
    """AI 服务配置.

    Attributes:
        provider: 服务商标识（gemini / openai）
        api_key: API 密钥（敏感信息）
        base_url: API 基础 URL（仅 OpenAI 兼容服务使用）
        layout_model: 布局分析模型，None 使用服务商默认值
        portrait_model: 肖像生成模型，None 使用服务商默认值
        timeout: 请求超时时间
        max_retries: 瞬时错误最大重试次数
        retry_delay: 初始重试延迟
    """

    provider: str = Field(default="gemini", description="AI 服务商")
    api_key: Optional[SecretStr] = Field(default=None, description="API 密钥")
    base_url: str = Field(default=DEFAULT_API_BASE, description="API 基础 URL")
    layout_model: Optional[str] = Field(default=None, description="布局分析模型")
    portrait_model: Optional[str] = Field(default=None, description="肖像生成模型")
    timeout: int = Field(default=API_TIMEOUT, ge=10, le=300, description="请求超时 (秒)")
    max_retries: int = Field(default=API_MAX_RETRIES, ge=0, le=10, description="最大重试次数")
    retry_delay: float = Field(
        default=API_RETRY_DELAY,
        ge=0.1,
        le=10.0,
        description="重试延迟 (秒)",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """验证 API URL."""
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("API URL 必须以 http:// 或 https:// 开头")
        return v

    @property
    def has_api_key(self) -> bool:
        """检查是否配置了 API 密钥."""
        return self.api_key is not None and len(self.api_key.get_secret_value()) > 0

    def get_api_key_value(self) -> Optional[str]:
        """获取 API 密钥明文值.

        注意: 仅在创建客户端时调用，不要记录日志。
        """
        if self.api_key:
            return self.api_key.get_secret_value()
        return None

    def to_safe_dict(self) -> dict:
        """转换为不含密钥的字典，可用于日志."""
        return {
            "provider": self.provider,
            "base_url": self.base_url,
            "has_api_key": self.has_api_key,
            "layout_model": self.layout_model,
            "portrait_model": self.portrait_model,
            "timeout": self.timeout,
            "max_retries": self.max_retries,
        }

    @classmethod
    def from_settings(cls, settings: Settings) -> "AIConfig":
        """按应用设置中选定的服务商构建配置."""
        key = settings.gemini_api_key if settings.ai_provider == "gemini" else settings.openai_api_key
        return cls(
            provider=settings.ai_provider,
            api_key=key,
            base_url=settings.openai_api_base,
            layout_model=settings.layout_model,
            portrait_model=settings.portrait_model,
            timeout=settings.api_timeout,
        )
