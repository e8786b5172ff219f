"""Gemini AI 提供者.

使用 google-genai SDK：Gemini 负责布局分析，Imagen 负责肖像生成。
"""

from __future__ import annotations

from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from src.models.layout_suggestion import LayoutSuggestion
from src.services.ai_providers.base import (
    AIProviderType,
    BaseAIProvider,
    LAYOUT_ANALYSIS_PROMPT,
)
from src.utils.constants import DEFAULT_LAYOUT_MODEL, DEFAULT_PORTRAIT_MODEL
from src.utils.exceptions import (
    AIServiceError,
    APIRequestError,
    APITimeoutError,
    EmptyAIResultError,
)
from src.utils.logger import setup_logger
from src.utils.retry import async_retry

logger = setup_logger(__name__)

# 瞬时错误：服务端 5xx 与网络传输错误
_TRANSIENT_ERRORS = (genai_errors.ServerError, httpx.TransportError)


def _percent_point_schema() -> types.Schema:
    return types.Schema(
        type=types.Type.OBJECT,
        properties={
            "x": types.Schema(type=types.Type.NUMBER, description="X percentage (0-100)"),
            "y": types.Schema(type=types.Type.NUMBER, description="Y percentage (0-100)"),
        },
    )


LAYOUT_RESPONSE_SCHEMA = types.Schema(
    type=types.Type.OBJECT,
    properties={
        "namePosition": _percent_point_schema(),
        "idPosition": _percent_point_schema(),
    },
)


class GeminiProvider(BaseAIProvider):
    """Gemini 提供者.

    Features:
        - 结构化 JSON 输出的布局分析
        - Imagen 1:1 JPEG 肖像生成
    """

    provider_type = AIProviderType.GEMINI

    def __init__(
        self,
        api_key: str,
        layout_model: Optional[str] = None,
        portrait_model: Optional[str] = None,
        timeout: int = 60,
        **kwargs,
    ) -> None:
        super().__init__(api_key, layout_model, portrait_model, timeout, **kwargs)
        self._client: Optional[genai.Client] = None

    @property
    def default_layout_model(self) -> str:
        return DEFAULT_LAYOUT_MODEL

    @property
    def default_portrait_model(self) -> str:
        return DEFAULT_PORTRAIT_MODEL

    @property
    def client(self) -> genai.Client:
        """获取 Gemini 客户端（延迟创建）."""
        if self._client is None:
            self._client = genai.Client(
                api_key=self._api_key,
                http_options=types.HttpOptions(timeout=self._timeout * 1000),
            )
        return self._client

    async def analyze_layout(self, image: bytes) -> Optional[LayoutSuggestion]:
        """分析证件底图布局."""
        logger.info(f"开始布局分析: model={self._layout_model}, 快照大小: {len(image)} bytes")
        response = await self._call("analyze_layout", self._generate_layout, image)
        return self._parse_layout_text(response.text)

    async def generate_portrait(self, prompt: str) -> bytes:
        """使用 Imagen 生成肖像."""
        logger.info(f"开始生成肖像: model={self._portrait_model}")
        response = await self._call("generate_portrait", self._generate_images, prompt)

        generated = response.generated_images or []
        image = generated[0].image if generated else None
        if image is None or not image.image_bytes:
            raise EmptyAIResultError("generate_portrait")

        logger.info(f"肖像生成完成, 输出大小: {len(image.image_bytes)} bytes")
        return image.image_bytes

    async def _call(self, operation: str, func, *args):
        """执行请求并把 SDK 异常映射为应用异常."""
        try:
            return await func(*args)

        except httpx.TimeoutException as e:
            logger.error(f"AI 请求超时: {operation}")
            raise APITimeoutError(self._timeout) from e

        except genai_errors.APIError as e:
            logger.error(f"AI API 错误: {operation}, status={e.code}, message={e.message}")
            raise APIRequestError(e.message or str(e), e.code) from e

        except httpx.TransportError as e:
            logger.error(f"AI 连接错误: {operation}, {e}")
            raise APIRequestError(f"无法连接到 AI 服务: {e}") from e

        except ValueError as e:
            logger.exception(f"AI 响应无法解析: {operation}")
            raise AIServiceError(f"AI 处理失败: {e}") from e

    @async_retry(max_retries=3, delay=1.0, backoff=2.0, exceptions=_TRANSIENT_ERRORS)
    async def _generate_layout(self, image: bytes) -> types.GenerateContentResponse:
        return await self.client.aio.models.generate_content(
            model=self._layout_model,
            contents=[
                types.Part.from_bytes(data=image, mime_type="image/jpeg"),
                LAYOUT_ANALYSIS_PROMPT,
            ],
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=LAYOUT_RESPONSE_SCHEMA,
            ),
        )

    @async_retry(max_retries=3, delay=1.0, backoff=2.0, exceptions=_TRANSIENT_ERRORS)
    async def _generate_images(self, prompt: str) -> types.GenerateImagesResponse:
        return await self.client.aio.models.generate_images(
            model=self._portrait_model,
            prompt=prompt,
            config=types.GenerateImagesConfig(
                number_of_images=1,
                output_mime_type="image/jpeg",
                aspect_ratio="1:1",
            ),
        )

    async def close(self) -> None:
        """释放客户端."""
        if self._client is not None:
            self._client = None
            logger.debug("Gemini 客户端已释放")
