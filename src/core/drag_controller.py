"""拖拽控制器.

把指针按下/移动/释放事件转换为图层位置的增量更新。

状态机:
    Idle --按下且命中--> Dragging(layer, last_pointer)
    Dragging --移动--> Dragging（平移图层，更新 last_pointer）
    Dragging --释放--> Idle（清除选中标志）

跟踪是增量式的：每次移动只换算相对上一次指针位置的位移，在两次事件之间
画布帧变化也不会产生漂移。控制器只在单一事件分发线程上运行，不加锁。
"""

from __future__ import annotations

from typing import Callable, Optional

from src.core.coordinates import to_normalized
from src.core.hit_tester import find_hit_layer
from src.core.layer_store import LayerStore
from src.models.layers import CanvasFrame, DragSession, LayerId, Point
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

FrameProvider = Callable[[], Optional[CanvasFrame]]


class DragController:
    """拖拽控制器.

    Attributes:
        session: 当前拖拽会话，空闲时为 None

    Example:
        >>> controller = DragController(store, lambda: frame)
        >>> controller.pointer_down((410, 222))
        <LayerId.NAME: 'name'>
        >>> controller.pointer_move((430, 222))
        True
        >>> controller.pointer_up()
    """

    def __init__(self, store: LayerStore, frame_provider: FrameProvider) -> None:
        """初始化控制器.

        Args:
            store: 图层存储
            frame_provider: 返回当前画布帧的回调；未加载底图时返回 None
        """
        self._store = store
        self._frame_provider = frame_provider
        self._session: Optional[DragSession] = None

    @property
    def session(self) -> Optional[DragSession]:
        return self._session

    @property
    def is_dragging(self) -> bool:
        """是否处于 Dragging 状态."""
        return self._session is not None

    @property
    def active_layer(self) -> Optional[LayerId]:
        return self._session.layer_id if self._session else None

    def pointer_down(self, pointer: Point) -> Optional[LayerId]:
        """处理指针按下.

        仅在已加载底图时进行命中测试；命中则选中该图层并进入拖拽状态，
        未命中时保持空闲且不创建会话。

        Args:
            pointer: 画布像素坐标

        Returns:
            命中的图层，未命中返回 None
        """
        frame = self._frame_provider()
        if frame is None:
            return None

        # 缺失释放事件时先结束旧会话，保证选中唯一
        if self._session is not None:
            self.pointer_up()

        layer_id = find_hit_layer(self._store, pointer, frame)
        if layer_id is None:
            logger.debug(f"指针按下未命中图层: {pointer}")
            return None

        self._session = DragSession(layer_id=layer_id, last_pointer=pointer)
        self._store.set_selected(layer_id, True)
        logger.debug(f"开始拖拽图层: {layer_id.value}")
        return layer_id

    def pointer_move(self, pointer: Point) -> bool:
        """处理指针移动.

        Args:
            pointer: 画布像素坐标

        Returns:
            是否移动了图层；没有会话时为空操作并返回 False
        """
        if self._session is None:
            return False
        frame = self._frame_provider()
        if frame is None:
            return False

        last_x, last_y = self._session.last_pointer
        dx, dy = to_normalized((pointer[0] - last_x, pointer[1] - last_y), frame)
        self._session.last_pointer = pointer
        self._store.translate(self._session.layer_id, dx, dy)
        return True

    def pointer_up(self) -> None:
        """处理指针释放：清除选中标志并丢弃会话."""
        if self._session is None:
            return
        layer_id = self._session.layer_id
        self._session = None
        self._store.set_selected(layer_id, False)
        logger.debug(f"结束拖拽图层: {layer_id.value}")
