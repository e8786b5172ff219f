"""证件卡片渲染引擎.

每次调用都从图层存储读取最新状态并完整重绘，不做增量或差异更新。

绘制顺序:
    1. 清空画布
    2. 底图拉伸铺满画布帧
    3. 肖像（若有图片）：保持宽高比缩放，绕自身中心旋转；选中时叠加边框和角点
    4. 文字图层（姓名、证件号）：以锚点为中心按共享角度旋转；选中时叠加边框
"""

from __future__ import annotations

import math
from typing import Optional

from PIL import Image, ImageColor, ImageDraw, ImageFont

from src.core.coordinates import scaled_font_size, to_pixels
from src.core.layer_store import LayerStore
from src.core.text_metrics import font_for_size, measure_text_width
from src.models.layers import CanvasFrame, PortraitLayer, SharedParams, TextLayer
from src.utils.constants import (
    PORTRAIT_HANDLE_SIZE,
    PORTRAIT_SELECTION_WIDTH,
    SELECTION_COLOR,
    TEXT_SELECTION_HEIGHT_RATIO,
    TEXT_SELECTION_PADDING,
    TEXT_SELECTION_WIDTH,
)
from src.utils.image_utils import ensure_rgba
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

_SELECTION_RGBA = (*ImageColor.getrgb(SELECTION_COLOR)[:3], 255)

# 肖像贴图四周的留白，容纳超出边缘的角点
_PORTRAIT_MARGIN = PORTRAIT_HANDLE_SIZE


class CardRenderer:
    """证件卡片渲染器.

    无状态：所有输入来自调用参数。

    Example:
        >>> renderer = CardRenderer()
        >>> composite = renderer.render(base_image, store)
    """

    def render(
        self,
        base_image: Optional[Image.Image],
        store: LayerStore,
        frame: Optional[CanvasFrame] = None,
        show_selection: bool = True,
    ) -> Optional[Image.Image]:
        """渲染完整合成图.

        Args:
            base_image: 底图；为 None 时不绘制任何内容
            store: 图层存储
            frame: 画布帧，默认取底图尺寸
            show_selection: 是否绘制选中框（导出时关闭）

        Returns:
            RGBA 合成图；没有底图时返回 None
        """
        if base_image is None:
            return None
        if frame is None:
            frame = CanvasFrame.from_image(base_image)

        canvas = Image.new("RGBA", frame.size, (0, 0, 0, 0))

        base = ensure_rgba(base_image)
        if base.size != frame.size:
            base = base.resize(frame.size, Image.Resampling.LANCZOS)
        canvas = Image.alpha_composite(canvas, base)

        canvas = self._render_portrait(canvas, store.portrait, frame, show_selection)

        for layer in store.text_layers():
            canvas = self._render_text_layer(canvas, layer, store.shared, frame, show_selection)

        return canvas

    def _render_portrait(
        self,
        canvas: Image.Image,
        layer: PortraitLayer,
        frame: CanvasFrame,
        show_selection: bool,
    ) -> Image.Image:
        """渲染肖像图层.

        像素宽 = 归一化宽 × 画布宽，像素高由图片原始宽高比推导，不会单独拉伸。
        """
        size = layer.pixel_size(frame)
        if size is None:
            return canvas
        pw, ph = size
        tile_w, tile_h = max(1, round(pw)), max(1, round(ph))

        overlay = ensure_rgba(layer.image).resize((tile_w, tile_h), Image.Resampling.LANCZOS)

        margin = _PORTRAIT_MARGIN
        tile = Image.new("RGBA", (tile_w + 2 * margin, tile_h + 2 * margin), (0, 0, 0, 0))
        tile.paste(overlay, (margin, margin), overlay)

        if show_selection and layer.is_selected:
            self._draw_portrait_selection(tile, margin, tile_w, tile_h)

        # 贴图中心即肖像中心，expand 旋转后中心不变
        if layer.rotation:
            tile = tile.rotate(-layer.rotation, resample=Image.Resampling.BICUBIC, expand=True)

        px, py = to_pixels(layer.position, frame)
        cx, cy = px + pw / 2, py + ph / 2

        temp = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        temp.paste(tile, (round(cx - tile.width / 2), round(cy - tile.height / 2)), tile)
        return Image.alpha_composite(canvas, temp)

    def _draw_portrait_selection(
        self,
        tile: Image.Image,
        margin: int,
        width: int,
        height: int,
    ) -> None:
        """绘制肖像选中框与左上、右下两个角点（仅视觉，不参与命中）."""
        draw = ImageDraw.Draw(tile)
        half_line = PORTRAIT_SELECTION_WIDTH // 2
        draw.rectangle(
            [
                margin - half_line,
                margin - half_line,
                margin + width + half_line - 1,
                margin + height + half_line - 1,
            ],
            outline=_SELECTION_RGBA,
            width=PORTRAIT_SELECTION_WIDTH,
        )

        half = PORTRAIT_HANDLE_SIZE // 2
        for hx, hy in ((margin, margin), (margin + width, margin + height)):
            draw.rectangle(
                [hx - half, hy - half, hx + half - 1, hy + half - 1],
                fill=_SELECTION_RGBA,
            )

    def _render_text_layer(
        self,
        canvas: Image.Image,
        layer: TextLayer,
        shared: SharedParams,
        frame: CanvasFrame,
        show_selection: bool,
    ) -> Image.Image:
        """渲染文字图层.

        文字画在以锚点为中心的方形贴图上，绕锚点旋转后贴回画布，基线为文字顶部。
        """
        selected = show_selection and layer.is_selected
        if not layer.text and not selected:
            return canvas

        size = scaled_font_size(shared.font_size, frame)
        font = font_for_size(size)
        text_width = measure_text_width(layer.text, size)
        box_height = size * TEXT_SELECTION_HEIGHT_RATIO
        pad = TEXT_SELECTION_PADDING

        # 半径覆盖文字与选中框的最远角
        radius = math.ceil(math.hypot(text_width + 2 * pad, box_height + 2 * pad)) + 2
        tile = Image.new("RGBA", (2 * radius, 2 * radius), (0, 0, 0, 0))
        draw = ImageDraw.Draw(tile)

        if layer.text:
            fill = (*shared.text_rgb, 255)
            if isinstance(font, ImageFont.FreeTypeFont):
                draw.text((radius, radius), layer.text, font=font, fill=fill, anchor="la")
            else:
                draw.text((radius, radius), layer.text, font=font, fill=fill)

        if selected:
            draw.rectangle(
                [
                    radius - pad,
                    radius - pad,
                    radius + text_width + pad,
                    radius + box_height + pad,
                ],
                outline=_SELECTION_RGBA,
                width=TEXT_SELECTION_WIDTH,
            )

        if shared.text_rotation:
            tile = tile.rotate(
                -shared.text_rotation,
                resample=Image.Resampling.BICUBIC,
                center=(radius, radius),
            )

        ax, ay = to_pixels(layer.position, frame)
        temp = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        temp.paste(tile, (round(ax) - radius, round(ay) - radius), tile)
        return Image.alpha_composite(canvas, temp)


# ===================
# 便捷函数
# ===================


def render_card(
    base_image: Optional[Image.Image],
    store: LayerStore,
    show_selection: bool = True,
) -> Optional[Image.Image]:
    """渲染证件卡片（便捷函数）.

    Args:
        base_image: 底图
        store: 图层存储
        show_selection: 是否绘制选中框

    Returns:
        合成图，没有底图时返回 None
    """
    return CardRenderer().render(base_image, store, show_selection=show_selection)
