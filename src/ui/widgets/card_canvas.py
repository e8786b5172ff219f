"""证件卡片画布组件.

显示合成结果，并把鼠标事件换算为画布像素坐标后交给合成器的拖拽控制器。

Features:
    - 保持宽高比居中缩放显示
    - 控件坐标与画布像素坐标互相换算
    - 拖放图片文件作为底图
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PIL import Image
from PyQt6.QtCore import QPointF, QRectF, Qt, pyqtSignal
from PyQt6.QtGui import (
    QColor,
    QDragEnterEvent,
    QDropEvent,
    QImage,
    QMouseEvent,
    QPainter,
    QPaintEvent,
    QPixmap,
)
from PyQt6.QtWidgets import QSizePolicy, QWidget

from src.core.composer import CardComposer
from src.models.layers import Point
from src.utils.constants import SUPPORTED_IMAGE_FORMATS
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


def pil_to_qimage(image: Image.Image) -> QImage:
    """PIL 图片转换为独立持有数据的 QImage."""
    rgba = image if image.mode == "RGBA" else image.convert("RGBA")
    data = rgba.tobytes("raw", "RGBA")
    qimage = QImage(data, rgba.width, rgba.height, rgba.width * 4, QImage.Format.Format_RGBA8888)
    return qimage.copy()


class CardCanvas(QWidget):
    """证件卡片画布.

    Signals:
        file_dropped: 拖入图片文件信号，参数为文件路径
        layer_moved: 拖拽移动了图层

    Example:
        >>> canvas = CardCanvas(composer)
        >>> canvas.map_to_canvas(QPointF(100, 50))
        (200.0, 100.0)
    """

    file_dropped = pyqtSignal(str)
    layer_moved = pyqtSignal()

    def __init__(
        self,
        composer: CardComposer,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._composer = composer
        self._pixmap: Optional[QPixmap] = None

        self.setMinimumSize(480, 300)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setAcceptDrops(True)

        composer.add_render_listener(self._on_rendered)
        if composer.last_render is not None:
            self._on_rendered(composer.last_render)

    @property
    def has_image(self) -> bool:
        return self._pixmap is not None

    def _on_rendered(self, image: Optional[Image.Image]) -> None:
        self._pixmap = QPixmap.fromImage(pil_to_qimage(image)) if image is not None else None
        self.update()

    # ========================
    # 坐标换算
    # ========================

    def display_rect(self) -> Optional[QRectF]:
        """合成图在控件中的显示区域，未加载底图时为 None."""
        frame = self._composer.frame
        if frame is None:
            return None
        scale = min(self.width() / frame.width, self.height() / frame.height)
        w = frame.width * scale
        h = frame.height * scale
        return QRectF((self.width() - w) / 2, (self.height() - h) / 2, w, h)

    def map_to_canvas(self, pos: QPointF) -> Optional[Point]:
        """控件坐标转换为画布像素坐标.

        显示区域外的点同样换算，拖拽可以越过画布边缘。
        """
        rect = self.display_rect()
        frame = self._composer.frame
        if rect is None or frame is None or rect.width() <= 0:
            return None
        scale = frame.width / rect.width()
        return ((pos.x() - rect.x()) * scale, (pos.y() - rect.y()) * scale)

    # ========================
    # 事件
    # ========================

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), QColor("#1f2937"))

        rect = self.display_rect()
        if self._pixmap is None or rect is None:
            painter.setPen(QColor("#9ca3af"))
            painter.drawText(
                self.rect(),
                Qt.AlignmentFlag.AlignCenter,
                "拖入或打开一张证件底图",
            )
        else:
            painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
            painter.drawPixmap(rect, self._pixmap, QRectF(self._pixmap.rect()))
        painter.end()

    def mousePressEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pointer = self.map_to_canvas(event.position())
        if pointer is None:
            return
        if self._composer.pointer_down(pointer) is not None:
            self.setCursor(Qt.CursorShape.ClosedHandCursor)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:
        pointer = self.map_to_canvas(event.position())
        if pointer is None:
            return
        if self._composer.pointer_move(pointer):
            self.layer_moved.emit()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:
        if event.button() != Qt.MouseButton.LeftButton:
            super().mouseReleaseEvent(event)
            return
        self._composer.pointer_up()
        self.unsetCursor()

    def dragEnterEvent(self, event: QDragEnterEvent) -> None:
        if self._dropped_file(event) is not None:
            event.acceptProposedAction()
        else:
            event.ignore()

    def dropEvent(self, event: QDropEvent) -> None:
        path = self._dropped_file(event)
        if path is None:
            event.ignore()
            return
        event.acceptProposedAction()
        logger.debug(f"拖入底图文件: {path}")
        self.file_dropped.emit(path)

    @staticmethod
    def _dropped_file(event) -> Optional[str]:
        mime = event.mimeData()
        if not mime.hasUrls():
            return None
        for url in mime.urls():
            path = url.toLocalFile()
            if path and Path(path).suffix.lower() in SUPPORTED_IMAGE_FORMATS:
                return path
        return None
