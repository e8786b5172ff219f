"""AI 提供者抽象基类.

定义布局分析与肖像生成的统一接口，便于扩展不同服务商。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from src.models.layout_suggestion import LayoutSuggestion
from src.utils.constants import API_TIMEOUT
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

# 布局分析提示词，坐标以百分比 (0-100) 表示文字起点
LAYOUT_ANALYSIS_PROMPT = (
    'Analyze this ID card image. I need to overlay text for a "Name" and an "ID Number".\n'
    "Find the best coordinates (x, y) as percentages (0-100) for where the text values "
    "should start.\n"
    'Look for labels like "Nombre", "Name", "Nom" for the name field.\n'
    'Look for labels like "Identificación", "ID", "Cedula" for the ID field.\n'
    "The text should be placed slightly to the right of these labels.\n"
    "\n"
    "Return JSON matching this schema:\n"
    "{\n"
    '  "namePosition": { "x": number, "y": number },\n'
    '  "idPosition": { "x": number, "y": number }\n'
    "}"
)

PORTRAIT_PROMPT_TEMPLATE = (
    "A professional ID card portrait photo of a person named {name}, neutral background, "
    "realistic, passport style, high quality, facing camera."
)


def build_portrait_prompt(name: str) -> str:
    """根据姓名生成肖像提示词."""
    return PORTRAIT_PROMPT_TEMPLATE.format(name=name)


class AIProviderType(str, Enum):
    """AI 提供者类型."""

    GEMINI = "gemini"  # Google Gemini / Imagen
    OPENAI = "openai"  # OpenAI 及兼容服务


class BaseAIProvider(ABC):
    """AI 提供者抽象基类.

    所有服务商需实现布局分析和肖像生成两个接口。

    Attributes:
        provider_type: 提供者类型标识
        layout_model: 布局分析模型
        portrait_model: 肖像生成模型
    """

    provider_type: AIProviderType

    def __init__(
        self,
        api_key: str,
        layout_model: Optional[str] = None,
        portrait_model: Optional[str] = None,
        timeout: int = API_TIMEOUT,
        **kwargs,
    ) -> None:
        """初始化提供者.

        Args:
            api_key: API 密钥
            layout_model: 布局分析模型，为 None 时使用默认模型
            portrait_model: 肖像生成模型，为 None 时使用默认模型
            timeout: 请求超时时间 (秒)
            **kwargs: 其他配置参数
        """
        self._api_key = api_key
        self._layout_model = layout_model or self.default_layout_model
        self._portrait_model = portrait_model or self.default_portrait_model
        self._timeout = timeout
        self._extra_config = kwargs

    @property
    @abstractmethod
    def default_layout_model(self) -> str:
        """默认布局分析模型."""

    @property
    @abstractmethod
    def default_portrait_model(self) -> str:
        """默认肖像生成模型."""

    @property
    def layout_model(self) -> str:
        return self._layout_model

    @property
    def portrait_model(self) -> str:
        return self._portrait_model

    @abstractmethod
    async def analyze_layout(self, image: bytes) -> Optional[LayoutSuggestion]:
        """分析证件底图，给出姓名与证件号的建议位置.

        Args:
            image: JPEG 快照字节数据

        Returns:
            布局建议；模型没有给出任何可用字段时返回 None
        """

    @abstractmethod
    async def generate_portrait(self, prompt: str) -> bytes:
        """生成一张 1:1 证件肖像.

        Args:
            prompt: 生成提示词

        Returns:
            编码后的图片字节数据

        Raises:
            EmptyAIResultError: 服务没有返回图片
        """

    async def close(self) -> None:
        """关闭连接，释放资源.

        子类可重写此方法释放特定资源。
        """

    async def __aenter__(self) -> "BaseAIProvider":
        """异步上下文管理器入口."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """异步上下文管理器出口."""
        await self.close()

    @staticmethod
    def _parse_layout_text(text: Optional[str]) -> Optional[LayoutSuggestion]:
        """把模型返回的 JSON 文本解析为布局建议，空结果返回 None."""
        if not text:
            logger.warning("布局分析返回空文本")
            return None
        suggestion = LayoutSuggestion.from_payload(text)
        if suggestion.is_empty:
            logger.warning("布局分析结果不包含可用坐标")
            return None
        return suggestion
