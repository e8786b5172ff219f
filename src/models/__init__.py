"""数据模型模块."""

from src.models.layers import (
    # 枚举与常量
    LayerId,
    TEXT_LAYER_ORDER,
    HIT_TEST_ORDER,
    # 图层类
    CanvasFrame,
    TextLayer,
    PortraitLayer,
    SharedParams,
    DragSession,
)
from src.models.layout_suggestion import LayoutSuggestion, PercentPoint

__all__ = [
    # 枚举与常量
    "LayerId",
    "TEXT_LAYER_ORDER",
    "HIT_TEST_ORDER",
    # 图层类
    "CanvasFrame",
    "TextLayer",
    "PortraitLayer",
    "SharedParams",
    "DragSession",
    # 布局建议
    "LayoutSuggestion",
    "PercentPoint",
]
