"""证件卡片合成器.

组合图层存储、拖拽控制器与渲染器，是宿主界面和外部协作方使用的入口：

    指针事件 → 拖拽控制器 → 图层存储变更 → 重绘 → 渲染监听者

合成器订阅图层存储，任何变更都会立即触发一次完整重绘。
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

from PIL import Image

from src.core.drag_controller import DragController
from src.core.layer_store import LayerStore
from src.core.suggestion_adapter import apply_layout_suggestion
from src.models.layers import CanvasFrame, LayerId, Point
from src.services.card_renderer import CardRenderer
from src.utils.constants import ANALYSIS_SNAPSHOT_QUALITY, DEFAULT_EXPORT_QUALITY
from src.utils.exceptions import ExportError
from src.utils.image_utils import image_to_bytes, load_image, save_image
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

RenderListener = Callable[[Optional[Image.Image]], None]


class CardComposer:
    """证件卡片合成器.

    Attributes:
        store: 图层存储
        drag: 拖拽控制器
        frame: 当前画布帧，未加载底图时为 None

    Example:
        >>> composer = CardComposer()
        >>> composer.load_base_image(Image.new("RGB", (800, 500), "white"))
        >>> composer.pointer_down((410, 222))
        <LayerId.NAME: 'name'>
    """

    def __init__(
        self,
        store: Optional[LayerStore] = None,
        renderer: Optional[CardRenderer] = None,
    ) -> None:
        self._store = store or LayerStore()
        self._renderer = renderer or CardRenderer()
        self._base_image: Optional[Image.Image] = None
        self._frame: Optional[CanvasFrame] = None
        self._last_render: Optional[Image.Image] = None
        self._listeners: list[RenderListener] = []
        self._drag = DragController(self._store, lambda: self._frame)
        self._store.subscribe(self.redraw)

    # ========================
    # 属性
    # ========================

    @property
    def store(self) -> LayerStore:
        return self._store

    @property
    def drag(self) -> DragController:
        return self._drag

    @property
    def frame(self) -> Optional[CanvasFrame]:
        return self._frame

    @property
    def base_image(self) -> Optional[Image.Image]:
        return self._base_image

    @property
    def has_base_image(self) -> bool:
        """是否已加载底图."""
        return self._base_image is not None

    @property
    def last_render(self) -> Optional[Image.Image]:
        """最近一次重绘的结果."""
        return self._last_render

    # ========================
    # 渲染
    # ========================

    def add_render_listener(self, listener: RenderListener) -> None:
        """注册重绘监听者，每次重绘后收到合成图（无底图时为 None）."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_render_listener(self, listener: RenderListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def redraw(self) -> Optional[Image.Image]:
        """完整重绘并通知监听者.

        Returns:
            合成图；未加载底图时为 None
        """
        self._last_render = self._renderer.render(self._base_image, self._store, self._frame)
        for listener in list(self._listeners):
            listener(self._last_render)
        return self._last_render

    # ========================
    # 底图
    # ========================

    def load_base_image(self, image: Image.Image) -> None:
        """载入底图.

        画布帧设为图片原始尺寸，两个文字图层回到默认位置。

        Args:
            image: 已解码的底图
        """
        self._base_image = image.copy()
        self._frame = CanvasFrame.from_image(image)
        logger.info(f"底图已载入: {self._frame.width}x{self._frame.height}")
        self._store.reset_text_positions()

    def load_base_image_file(self, path: Path | str) -> None:
        """从文件载入底图.

        Raises:
            ImageProcessError: 文件不存在、格式不支持或无法解码，此时状态不变
        """
        self.load_base_image(load_image(path))

    # ========================
    # 指针事件
    # ========================

    def pointer_down(self, pointer: Point) -> Optional[LayerId]:
        """指针按下（画布像素坐标）."""
        return self._drag.pointer_down(pointer)

    def pointer_move(self, pointer: Point) -> bool:
        """指针移动（画布像素坐标）."""
        return self._drag.pointer_move(pointer)

    def pointer_up(self) -> None:
        """指针释放."""
        self._drag.pointer_up()

    # ========================
    # 外部协作方
    # ========================

    def apply_suggestion(self, suggestion: Any) -> list[LayerId]:
        """应用 AI 布局建议，返回实际更新的图层."""
        return apply_layout_suggestion(self._store, suggestion)

    def set_portrait_image(self, image: Optional[Image.Image]) -> None:
        """替换或清除肖像图片."""
        self._store.set_portrait_image(image)

    def coords_display(self) -> dict[LayerId, tuple[int, int]]:
        """文字图层位置的整数百分比，用于界面显示."""
        return {
            layer.id: (round(layer.x * 100), round(layer.y * 100))
            for layer in self._store.text_layers()
        }

    def snapshot_for_analysis(self) -> Optional[bytes]:
        """当前合成图的 JPEG 快照，供布局分析使用.

        Returns:
            JPEG 字节数据；未加载底图时为 None
        """
        image = self.export_image()
        if image is None:
            return None
        return image_to_bytes(image, "JPEG", ANALYSIS_SNAPSHOT_QUALITY)

    # ========================
    # 导出
    # ========================

    def export_image(self) -> Optional[Image.Image]:
        """以当前画布帧分辨率输出不含选中框的合成图."""
        return self._renderer.render(
            self._base_image,
            self._store,
            self._frame,
            show_selection=False,
        )

    def default_export_name(self) -> str:
        """默认导出文件名."""
        return f"id-card-{self._store.id_layer.text}.png"

    def export_to_file(
        self,
        path: Path | str,
        quality: int = DEFAULT_EXPORT_QUALITY,
    ) -> Path:
        """导出合成图到文件，格式由扩展名决定.

        Raises:
            ExportError: 未加载底图或写入失败
        """
        image = self.export_image()
        if image is None:
            raise ExportError("尚未载入底图")
        try:
            saved = save_image(image, path, quality=quality)
        except (OSError, ValueError, KeyError) as e:
            logger.error(f"导出失败: {path}, {e}")
            raise ExportError(str(e)) from e
        logger.info(f"合成图已导出: {saved}")
        return saved
