"""UI 组件模块."""

from src.ui.widgets.card_canvas import CardCanvas, pil_to_qimage
from src.ui.widgets.control_panel import ControlPanel, LabeledSlider

__all__ = [
    "CardCanvas",
    "pil_to_qimage",
    "ControlPanel",
    "LabeledSlider",
]
