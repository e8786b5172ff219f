"""集成测试配置和共享 fixtures."""

import io
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from PIL import Image, ImageDraw
from pydantic import SecretStr

from src.models.api_config import AIConfig
from src.models.layout_suggestion import LayoutSuggestion
from src.services.ai_service import AIService


@pytest.fixture
def sample_card_image(tmp_path: Path) -> Path:
    """创建示例证件底图."""
    img = Image.new("RGB", (1000, 630), color=(241, 245, 249))
    draw = ImageDraw.Draw(img)
    draw.rectangle((0, 0, 1000, 100), fill=(15, 118, 110))
    draw.rectangle((60, 190, 310, 500), outline=(203, 213, 225), width=3)
    path = tmp_path / "card.png"
    img.save(path)
    return path


@pytest.fixture
def sample_portrait_bytes() -> bytes:
    """创建示例肖像 JPEG 数据."""
    img = Image.new("RGB", (256, 256), color=(180, 140, 120))
    buffer = io.BytesIO()
    img.save(buffer, format="JPEG")
    return buffer.getvalue()


@pytest.fixture
def mock_provider(sample_portrait_bytes: bytes) -> MagicMock:
    """模拟 AI 提供者：固定布局建议与肖像."""
    provider = MagicMock()
    provider.analyze_layout = AsyncMock(
        return_value=LayoutSuggestion.from_payload(
            {"namePosition": {"x": 40, "y": 35}, "idPosition": {"x": 42, "y": 50}}
        )
    )
    provider.generate_portrait = AsyncMock(return_value=sample_portrait_bytes)
    provider.close = AsyncMock()
    return provider


@pytest.fixture
def ai_service(mock_provider: MagicMock) -> AIService:
    """注入模拟提供者的 AI 服务."""
    service = AIService(AIConfig(api_key=SecretStr("integration-key")))
    service._provider = mock_provider
    return service
