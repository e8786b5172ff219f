"""OpenAI AI 提供者.

使用 OpenAI API（或兼容服务）实现布局分析与肖像生成。
"""

from __future__ import annotations

import base64
from typing import Any, Optional

from openai import (
    AsyncOpenAI,
    APIConnectionError,
    APITimeoutError as OpenAITimeoutError,
    RateLimitError,
    APIStatusError,
)

from src.models.layout_suggestion import LayoutSuggestion
from src.services.ai_providers.base import (
    AIProviderType,
    BaseAIProvider,
    LAYOUT_ANALYSIS_PROMPT,
)
from src.utils.constants import (
    DEFAULT_API_BASE,
    DEFAULT_OPENAI_LAYOUT_MODEL,
    DEFAULT_OPENAI_PORTRAIT_MODEL,
)
from src.utils.exceptions import (
    APIRequestError,
    APITimeoutError,
    EmptyAIResultError,
)
from src.utils.image_utils import decode_base64_image
from src.utils.logger import setup_logger
from src.utils.retry import async_retry

logger = setup_logger(__name__)


class OpenAIProvider(BaseAIProvider):
    """OpenAI 提供者.

    Features:
        - 视觉模型 + JSON 模式的布局分析
        - GPT-Image / DALL-E 肖像生成
    """

    provider_type = AIProviderType.OPENAI

    def __init__(
        self,
        api_key: str,
        layout_model: Optional[str] = None,
        portrait_model: Optional[str] = None,
        timeout: int = 60,
        base_url: Optional[str] = None,
        **kwargs,
    ) -> None:
        """初始化 OpenAI 提供者.

        Args:
            api_key: OpenAI API 密钥
            layout_model: 视觉模型，默认 gpt-4o-mini
            portrait_model: 图片模型，默认 gpt-image-1
            timeout: 请求超时时间 (秒)
            base_url: API 基础 URL
        """
        super().__init__(api_key, layout_model, portrait_model, timeout, **kwargs)
        self._base_url = base_url or DEFAULT_API_BASE
        self._client: Optional[AsyncOpenAI] = None

    @property
    def default_layout_model(self) -> str:
        return DEFAULT_OPENAI_LAYOUT_MODEL

    @property
    def default_portrait_model(self) -> str:
        return DEFAULT_OPENAI_PORTRAIT_MODEL

    @property
    def client(self) -> AsyncOpenAI:
        """获取 OpenAI 异步客户端."""
        if self._client is None:
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout,
                max_retries=0,  # 使用自己的重试机制
            )
        return self._client

    async def analyze_layout(self, image: bytes) -> Optional[LayoutSuggestion]:
        """分析证件底图布局."""
        logger.info(f"开始布局分析: model={self._layout_model}, 快照大小: {len(image)} bytes")
        data_uri = "data:image/jpeg;base64," + base64.b64encode(image).decode("ascii")
        response = await self._call("analyze_layout", self._chat_layout, data_uri)

        choices = response.choices or []
        text = choices[0].message.content if choices else None
        return self._parse_layout_text(text)

    async def generate_portrait(self, prompt: str) -> bytes:
        """生成肖像图片."""
        logger.info(f"开始生成肖像: model={self._portrait_model}")
        response = await self._call("generate_portrait", self._generate_image, prompt)

        if response.data:
            b64_data = response.data[0].b64_json
            if b64_data:
                result = decode_base64_image(b64_data)
                logger.info(f"肖像生成完成, 输出大小: {len(result)} bytes")
                return result

        raise EmptyAIResultError("generate_portrait")

    async def _call(self, operation: str, func, *args) -> Any:
        """执行请求并把 SDK 异常映射为应用异常."""
        try:
            return await func(*args)

        except OpenAITimeoutError as e:
            logger.error(f"AI 请求超时: {operation}")
            raise APITimeoutError(self._timeout) from e

        except APIStatusError as e:
            logger.error(f"AI API 错误: {operation}, status={e.status_code}, message={e.message}")
            raise APIRequestError(e.message, e.status_code) from e

        except APIConnectionError as e:
            logger.error(f"AI 连接错误: {operation}, {e}")
            raise APIRequestError(f"无法连接到 AI 服务: {e}") from e

    @async_retry(
        max_retries=3,
        delay=1.0,
        backoff=2.0,
        exceptions=(APIConnectionError, RateLimitError),
    )
    async def _chat_layout(self, data_uri: str) -> Any:
        return await self.client.chat.completions.create(
            model=self._layout_model,
            messages=[
                {
                    "role": "user",
                    "content": [
                        {"type": "image_url", "image_url": {"url": data_uri}},
                        {"type": "text", "text": LAYOUT_ANALYSIS_PROMPT},
                    ],
                }
            ],
            response_format={"type": "json_object"},
        )

    @async_retry(
        max_retries=3,
        delay=1.0,
        backoff=2.0,
        exceptions=(APIConnectionError, RateLimitError),
    )
    async def _generate_image(self, prompt: str) -> Any:
        params: dict[str, Any] = {
            "model": self._portrait_model,
            "prompt": prompt,
            "n": 1,
            "size": "1024x1024",
        }
        # DALL-E 默认返回 URL，GPT-Image 只返回 base64
        if self._portrait_model.startswith("dall-e"):
            params["response_format"] = "b64_json"
        return await self.client.images.generate(**params)

    async def close(self) -> None:
        """关闭客户端连接."""
        if self._client:
            await self._client.close()
            self._client = None
            logger.debug("OpenAI 客户端已关闭")
