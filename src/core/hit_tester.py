"""命中测试.

判断画布像素坐标下的指针落在哪个图层上。只读取图层存储的快照和画布帧，
不持有任何状态。

两类图层对旋转的处理不同：
    - 文字：在未旋转空间里测试 ``[x, x+文字宽] × [y, y+像素字号]``，忽略文字旋转。
    - 肖像：指针先绕肖像中心反向旋转，再与未旋转的包围盒比较，对矩形是精确的。
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING, Optional

from src.core.coordinates import scaled_font_size, to_pixels
from src.core.text_metrics import measure_text_width
from src.models.layers import (
    CanvasFrame,
    HIT_TEST_ORDER,
    LayerId,
    Point,
    PortraitLayer,
    SharedParams,
    TextLayer,
)

if TYPE_CHECKING:
    from src.core.layer_store import LayerStore


def text_bounds(
    layer: TextLayer,
    shared: SharedParams,
    frame: CanvasFrame,
) -> tuple[float, float, float, float]:
    """文字图层在未旋转空间中的像素包围盒.

    Args:
        layer: 文字图层
        shared: 共享视觉参数
        frame: 画布帧

    Returns:
        (left, top, right, bottom)
    """
    x, y = to_pixels(layer.position, frame)
    size = scaled_font_size(shared.font_size, frame)
    width = measure_text_width(layer.text, size)
    return (x, y, x + width, y + size)


def hit_test_text(
    layer: TextLayer,
    shared: SharedParams,
    pointer: Point,
    frame: CanvasFrame,
) -> bool:
    """文字图层命中测试.

    使用当前文字内容与字体测量宽度；空文字永远不命中。
    """
    if not layer.text:
        return False
    left, top, right, bottom = text_bounds(layer, shared, frame)
    px, py = pointer
    return left <= px <= right and top <= py <= bottom


def hit_test_portrait(
    layer: PortraitLayer,
    pointer: Point,
    frame: CanvasFrame,
) -> bool:
    """肖像图层命中测试.

    指针绕肖像中心旋转 ``-rotation`` 度后，与半宽/半高的未旋转包围盒比较。
    没有肖像图片时永远不命中。
    """
    size = layer.pixel_size(frame)
    if size is None:
        return False
    pw, ph = size
    px, py = to_pixels(layer.position, frame)
    cx = px + pw / 2
    cy = py + ph / 2

    dx = pointer[0] - cx
    dy = pointer[1] - cy
    angle = math.radians(-layer.rotation)
    rx = dx * math.cos(angle) - dy * math.sin(angle)
    ry = dx * math.sin(angle) + dy * math.cos(angle)
    return -pw / 2 <= rx <= pw / 2 and -ph / 2 <= ry <= ph / 2


def find_hit_layer(
    store: "LayerStore",
    pointer: Point,
    frame: CanvasFrame,
) -> Optional[LayerId]:
    """按优先级（姓名、证件号、肖像）返回第一个命中的图层.

    文字图层绘制在肖像之上，但无论叠放顺序如何都优先命中。

    Args:
        store: 图层存储
        pointer: 画布像素坐标
        frame: 画布帧

    Returns:
        命中的图层标识，未命中返回 None
    """
    for layer_id in HIT_TEST_ORDER:
        if layer_id is LayerId.PORTRAIT:
            if hit_test_portrait(store.portrait, pointer, frame):
                return layer_id
        elif hit_test_text(store.text_layer(layer_id), store.shared, pointer, frame):
            return layer_id
    return None
