"""AI 服务模块.

封装布局分析与肖像生成，连接 AI 提供者和证件卡片合成器。

Features:
    - 布局分析：快照 → 模型 → 布局建议
    - 肖像生成：姓名 → 提示词 → 解码后的肖像图片
    - 可切换服务商（Gemini / OpenAI）
    - 自动重试

请求方法（``request_*``）只做网络请求与解码，不修改合成状态，可以在工作线程的
事件循环中运行；结果由调用方在界面线程上应用。``analyze_layout`` 与
``generate_portrait`` 把两步合并，供同线程调用。
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from PIL import Image

from src.models.api_config import AIConfig
from src.models.layout_suggestion import LayoutSuggestion
from src.services.ai_providers import (
    BaseAIProvider,
    build_portrait_prompt,
    create_ai_provider,
)
from src.utils.exceptions import AIServiceError, APIKeyNotFoundError
from src.utils.image_utils import bytes_to_image
from src.utils.logger import setup_logger

if TYPE_CHECKING:
    from src.core.composer import CardComposer

logger = setup_logger(__name__)


class AIService:
    """AI 服务封装.

    Attributes:
        config: AI 配置
        provider: 当前提供者（延迟创建）

    Example:
        >>> service = AIService(AIConfig(api_key="xxx"))
        >>> suggestion = await service.analyze_layout(composer)
    """

    def __init__(self, config: Optional[AIConfig] = None) -> None:
        """初始化 AI 服务.

        Args:
            config: AI 配置，如果为 None 则使用默认配置
        """
        self._config = config or AIConfig()
        self._provider: Optional[BaseAIProvider] = None

    @property
    def config(self) -> AIConfig:
        """获取 AI 配置."""
        return self._config

    @config.setter
    def config(self, value: AIConfig) -> None:
        """设置 AI 配置并重置提供者."""
        self._config = value
        self._provider = None

    def clone(self) -> "AIService":
        """创建使用相同配置的新实例.

        提供者连接不共享，每个后台任务的客户端只在自己的事件循环中使用。
        """
        return AIService(self._config)

    @property
    def provider(self) -> BaseAIProvider:
        """获取或创建 AI 提供者.

        Raises:
            APIKeyNotFoundError: 当 API 密钥未配置时
        """
        if self._provider is None:
            if not self._config.has_api_key:
                raise APIKeyNotFoundError(self._config.provider)

            logger.debug(f"初始化 AI 提供者: {self._config.to_safe_dict()}")
            self._provider = create_ai_provider(
                self._config.provider,
                api_key=self._config.get_api_key_value(),
                layout_model=self._config.layout_model,
                portrait_model=self._config.portrait_model,
                timeout=self._config.timeout,
                base_url=self._config.base_url,
            )
        return self._provider

    # ========================
    # 请求（不修改合成状态）
    # ========================

    async def request_layout(self, snapshot: bytes) -> Optional[LayoutSuggestion]:
        """请求布局建议.

        Args:
            snapshot: 当前合成图的 JPEG 快照

        Returns:
            布局建议；模型没有给出可用坐标时返回 None
        """
        return await self.provider.analyze_layout(snapshot)

    async def request_portrait(self, name: str) -> Image.Image:
        """按姓名生成并解码肖像.

        Args:
            name: 证件上的姓名

        Returns:
            解码后的肖像图片

        Raises:
            AIServiceError: 请求失败或服务没有返回图片
            ImageCorruptedError: 返回的数据无法解码
        """
        prompt = build_portrait_prompt(name)
        data = await self.provider.generate_portrait(prompt)
        return bytes_to_image(data, source="AI 肖像")

    # ========================
    # 请求并应用
    # ========================

    async def analyze_layout(self, composer: "CardComposer") -> Optional[LayoutSuggestion]:
        """分析当前合成图并把建议应用到文字图层.

        未加载底图时不发起请求。

        Args:
            composer: 证件卡片合成器

        Returns:
            已应用的布局建议，没有可用结果时为 None
        """
        snapshot = composer.snapshot_for_analysis()
        if snapshot is None:
            logger.warning("未加载底图，跳过布局分析")
            return None

        suggestion = await self.request_layout(snapshot)
        if suggestion is None:
            return None

        composer.apply_suggestion(suggestion)
        return suggestion

    async def generate_portrait(
        self,
        composer: "CardComposer",
        name: Optional[str] = None,
    ) -> Image.Image:
        """生成肖像并设置到肖像图层.

        任何失败都不会修改肖像图层。

        Args:
            composer: 证件卡片合成器
            name: 提示词中的姓名，默认使用姓名图层的当前文字

        Returns:
            新的肖像图片
        """
        if name is None:
            name = composer.store.name_layer.text
        try:
            image = await self.request_portrait(name)
        except AIServiceError:
            logger.error("肖像生成失败，肖像图层保持不变")
            raise
        composer.set_portrait_image(image)
        return image

    async def close(self) -> None:
        """关闭提供者连接."""
        if self._provider:
            await self._provider.close()
            self._provider = None
            logger.debug("AI 提供者已关闭")

    async def __aenter__(self) -> "AIService":
        """异步上下文管理器入口."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """异步上下文管理器出口."""
        await self.close()


# 单例实例
_ai_service_instance: Optional[AIService] = None


def get_ai_service(config: Optional[AIConfig] = None) -> AIService:
    """获取 AI 服务单例.

    Args:
        config: AI 配置；传入时替换现有配置

    Returns:
        AIService 实例
    """
    global _ai_service_instance

    if _ai_service_instance is None:
        _ai_service_instance = AIService(config)
    elif config is not None:
        _ai_service_instance.config = config

    return _ai_service_instance


async def reset_ai_service() -> None:
    """重置 AI 服务单例."""
    global _ai_service_instance

    if _ai_service_instance:
        await _ai_service_instance.close()
        _ai_service_instance = None
