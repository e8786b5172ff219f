"""坐标模型.

归一化坐标（相对画布宽高的比例）与画布像素坐标之间的换算。
不做钳制也不做校验，取值范围由调用方负责。
"""

from __future__ import annotations

from src.models.layers import CanvasFrame, Point
from src.utils.constants import REFERENCE_WIDTH


def to_pixels(normalized: Point, frame: CanvasFrame) -> Point:
    """归一化坐标 → 像素坐标.

    Args:
        normalized: (x, y) 归一化坐标
        frame: 画布帧

    Returns:
        (x, y) 像素坐标
    """
    x, y = normalized
    return (x * frame.width, y * frame.height)


def to_normalized(pixels: Point, frame: CanvasFrame) -> Point:
    """像素坐标 → 归一化坐标，是 ``to_pixels`` 的逆运算.

    同样适用于位移量：像素位移换算为归一化位移。

    Args:
        pixels: (x, y) 像素坐标或位移
        frame: 画布帧

    Returns:
        (x, y) 归一化坐标
    """
    x, y = pixels
    return (x / frame.width, y / frame.height)


def font_scale(frame: CanvasFrame) -> float:
    """字号缩放系数：画布宽度 / 参考宽度."""
    return frame.width / REFERENCE_WIDTH


def scaled_font_size(font_size: float, frame: CanvasFrame) -> float:
    """逻辑字号换算为画布像素字号.

    不同分辨率的底图上文字比例保持一致。

    Args:
        font_size: 逻辑字号
        frame: 画布帧

    Returns:
        像素字号
    """
    return font_size * font_scale(frame)
