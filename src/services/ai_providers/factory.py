"""AI 提供者工厂.

提供创建 AI 提供者实例的工厂函数。
"""

from __future__ import annotations

from typing import Optional

from src.services.ai_providers.base import AIProviderType, BaseAIProvider
from src.services.ai_providers.gemini_provider import GeminiProvider
from src.services.ai_providers.openai_provider import OpenAIProvider
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

# 提供者类型到类的映射
_PROVIDER_CLASSES: dict[AIProviderType, type[BaseAIProvider]] = {
    AIProviderType.GEMINI: GeminiProvider,
    AIProviderType.OPENAI: OpenAIProvider,
}


def get_available_providers() -> list[AIProviderType]:
    """获取可用的提供者类型列表."""
    return list(_PROVIDER_CLASSES.keys())


def create_ai_provider(
    provider_type: AIProviderType | str,
    api_key: str,
    layout_model: Optional[str] = None,
    portrait_model: Optional[str] = None,
    **kwargs,
) -> BaseAIProvider:
    """创建 AI 提供者实例.

    Args:
        provider_type: 提供者类型
        api_key: API 密钥
        layout_model: 布局分析模型
        portrait_model: 肖像生成模型
        **kwargs: 其他配置参数（timeout、base_url 等）

    Returns:
        AI 提供者实例

    Raises:
        ValueError: 当提供者类型不支持时
    """
    if isinstance(provider_type, str):
        try:
            provider_type = AIProviderType(provider_type.lower())
        except ValueError:
            raise ValueError(f"不支持的 AI 提供者类型: {provider_type}")

    provider_class = _PROVIDER_CLASSES.get(provider_type)
    if provider_class is None:
        raise ValueError(f"不支持的 AI 提供者类型: {provider_type}")

    logger.info(f"创建 AI 提供者: {provider_type.value}")
    return provider_class(
        api_key=api_key,
        layout_model=layout_model,
        portrait_model=portrait_model,
        **kwargs,
    )
