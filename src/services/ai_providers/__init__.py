"""AI 提供者模块.

提供布局分析与肖像生成的可扩展服务架构。
"""

from src.services.ai_providers.base import (
    AIProviderType,
    BaseAIProvider,
    build_portrait_prompt,
)
from src.services.ai_providers.gemini_provider import GeminiProvider
from src.services.ai_providers.openai_provider import OpenAIProvider
from src.services.ai_providers.factory import create_ai_provider, get_available_providers

__all__ = [
    "AIProviderType",
    "BaseAIProvider",
    "build_portrait_prompt",
    "GeminiProvider",
    "OpenAIProvider",
    "create_ai_provider",
    "get_available_providers",
]
