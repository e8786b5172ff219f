"""服务层模块."""

from src.services.card_renderer import CardRenderer, render_card
from src.services.ai_service import (
    AIService,
    get_ai_service,
    reset_ai_service,
)
from src.services.randomizer import Randomizer

__all__ = [
    # 渲染
    "CardRenderer",
    "render_card",
    # AI 服务
    "AIService",
    "get_ai_service",
    "reset_ai_service",
    # 随机数据
    "Randomizer",
]
