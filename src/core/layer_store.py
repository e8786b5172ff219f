"""图层存储.

持有全部图层记录（姓名、证件号两个文字图层和一个肖像图层）与共享视觉参数。
存储本身不依赖渲染：每个变更方法结束时通知已订阅的观察者，由宿主在回调中
触发重绘。所有变更方法都是全函数，不会抛出异常。
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from PIL import Image

from src.models.layers import (
    LayerId,
    PortraitLayer,
    SharedParams,
    TEXT_LAYER_ORDER,
    TextLayer,
)
from src.utils.constants import (
    DEFAULT_ID_POSITION,
    DEFAULT_ID_TEXT,
    DEFAULT_NAME_POSITION,
    DEFAULT_NAME_TEXT,
)
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

StoreObserver = Callable[[], None]


class LayerStore:
    """图层存储.

    Example:
        >>> store = LayerStore()
        >>> store.subscribe(lambda: print("redraw"))
        >>> store.set_text(LayerId.NAME, "MARIE CURIE")
        redraw
    """

    def __init__(
        self,
        name_text: str = DEFAULT_NAME_TEXT,
        id_text: str = DEFAULT_ID_TEXT,
    ) -> None:
        self._text_layers: dict[LayerId, TextLayer] = {
            LayerId.NAME: TextLayer(
                id=LayerId.NAME,
                text=name_text,
                x=DEFAULT_NAME_POSITION[0],
                y=DEFAULT_NAME_POSITION[1],
            ),
            LayerId.ID: TextLayer(
                id=LayerId.ID,
                text=id_text,
                x=DEFAULT_ID_POSITION[0],
                y=DEFAULT_ID_POSITION[1],
            ),
        }
        self._shared = SharedParams()
        self._portrait = PortraitLayer(width=self._shared.portrait_scale / 100)
        self._observers: list[StoreObserver] = []
        self._batch_depth = 0
        self._pending_notify = False

    # ========================
    # 读取
    # ========================

    @property
    def shared(self) -> SharedParams:
        """共享视觉参数."""
        return self._shared

    @property
    def portrait(self) -> PortraitLayer:
        """肖像图层."""
        return self._portrait

    @property
    def name_layer(self) -> TextLayer:
        return self._text_layers[LayerId.NAME]

    @property
    def id_layer(self) -> TextLayer:
        return self._text_layers[LayerId.ID]

    def text_layer(self, layer_id: LayerId) -> Optional[TextLayer]:
        """按标识获取文字图层，肖像标识返回 None."""
        return self._text_layers.get(layer_id)

    def text_layers(self) -> list[TextLayer]:
        """按绘制顺序（姓名、证件号）返回文字图层."""
        return [self._text_layers[layer_id] for layer_id in TEXT_LAYER_ORDER]

    def position_of(self, layer_id: LayerId) -> tuple[float, float]:
        """图层的归一化位置."""
        if layer_id is LayerId.PORTRAIT:
            return self._portrait.position
        return self._text_layers[layer_id].position

    def is_selected(self, layer_id: LayerId) -> bool:
        if layer_id is LayerId.PORTRAIT:
            return self._portrait.is_selected
        return self._text_layers[layer_id].is_selected

    def selected_layers(self) -> list[LayerId]:
        """当前处于选中状态的图层."""
        return [layer_id for layer_id in LayerId if self.is_selected(layer_id)]

    # ========================
    # 观察者
    # ========================

    def subscribe(self, observer: StoreObserver) -> None:
        """订阅变更通知.

        Args:
            observer: 无参回调，每次变更后调用一次
        """
        if observer not in self._observers:
            self._observers.append(observer)

    def unsubscribe(self, observer: StoreObserver) -> None:
        """取消订阅."""
        if observer in self._observers:
            self._observers.remove(observer)

    @contextmanager
    def batch(self) -> Iterator["LayerStore"]:
        """合并多次变更为一次通知.

        Example:
            >>> with store.batch():
            ...     store.set_text_position(LayerId.NAME, 0.5, 0.4)
            ...     store.set_text_position(LayerId.ID, 0.5, 0.5)
        """
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._pending_notify:
                self._pending_notify = False
                self._notify()

    def _changed(self) -> None:
        if self._batch_depth > 0:
            self._pending_notify = True
            return
        self._notify()

    def _notify(self) -> None:
        for observer in list(self._observers):
            observer()

    # ========================
    # 变更
    # ========================

    def set_text(self, layer_id: LayerId, value: str) -> None:
        """设置文字图层内容.

        Args:
            layer_id: NAME 或 ID；传入 PORTRAIT 时忽略
            value: 新的文字内容
        """
        layer = self._text_layers.get(layer_id)
        if layer is None:
            logger.debug(f"忽略对非文字图层的文字设置: {layer_id.value}")
            return
        layer.text = value
        self._changed()

    def set_shared_color(self, color: str) -> None:
        """设置文字颜色（CSS 颜色字符串）."""
        self._shared.text_color = color
        self._changed()

    def set_shared_font_size(self, size: float) -> None:
        """设置逻辑字号."""
        self._shared.font_size = size
        self._changed()

    def set_shared_text_rotation(self, degrees: float) -> None:
        """设置两个文字图层共用的旋转角度."""
        self._shared.text_rotation = degrees
        self._changed()

    def set_portrait_scale(self, percent: float) -> None:
        """设置肖像宽度百分比，归一化宽度 = percent / 100."""
        self._shared.portrait_scale = percent
        self._portrait.width = percent / 100
        self._changed()

    def set_portrait_rotation(self, degrees: float) -> None:
        """设置肖像旋转角度."""
        self._shared.portrait_rotation = degrees
        self._portrait.rotation = degrees
        self._changed()

    def translate(self, layer_id: LayerId, dx: float, dy: float) -> None:
        """按归一化位移平移图层，结果不做钳制.

        Args:
            layer_id: 目标图层
            dx: X 方向归一化位移
            dy: Y 方向归一化位移
        """
        layer = self._portrait if layer_id is LayerId.PORTRAIT else self._text_layers[layer_id]
        layer.x += dx
        layer.y += dy
        self._changed()

    def set_text_position(self, layer_id: LayerId, x: float, y: float) -> None:
        """直接设置文字图层的归一化位置，肖像标识忽略."""
        layer = self._text_layers.get(layer_id)
        if layer is None:
            logger.debug(f"忽略对非文字图层的位置设置: {layer_id.value}")
            return
        layer.x = x
        layer.y = y
        self._changed()

    def reset_text_positions(self) -> None:
        """文字图层回到默认位置（载入新底图时调用）."""
        with self.batch():
            self.set_text_position(LayerId.NAME, *DEFAULT_NAME_POSITION)
            self.set_text_position(LayerId.ID, *DEFAULT_ID_POSITION)

    def set_selected(self, layer_id: LayerId, selected: bool) -> None:
        """设置拖拽高亮标志.

        同一时刻最多一个图层被选中，该约束由拖拽控制器保证。
        """
        if layer_id is LayerId.PORTRAIT:
            self._portrait.is_selected = selected
        else:
            self._text_layers[layer_id].is_selected = selected
        self._changed()

    def set_portrait_image(self, image: Optional[Image.Image]) -> None:
        """替换或清除肖像图片.

        位置、缩放和旋转在更换图片时保持不变。

        Args:
            image: 已解码的图片，None 表示清除
        """
        self._portrait.image = image
        if image is None:
            logger.debug("肖像图片已清除")
        else:
            logger.debug(f"肖像图片已更新: {image.size}")
        self._changed()
