"""核心业务逻辑模块."""

from src.core.layer_store import LayerStore
from src.core.hit_tester import find_hit_layer, hit_test_portrait, hit_test_text
from src.core.drag_controller import DragController
from src.core.suggestion_adapter import apply_layout_suggestion

__all__ = [
    # 图层存储
    "LayerStore",
    # 命中测试
    "find_hit_layer",
    "hit_test_portrait",
    "hit_test_text",
    # 拖拽
    "DragController",
    # 布局建议
    "apply_layout_suggestion",
]
