"""控制面板.

编辑证件文字与共享视觉参数，并提供底图、随机数据、AI 与导出操作入口。
字段修改直接调用图层存储的变更方法；按钮操作通过信号交给主窗口。
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import Qt, pyqtSignal
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QColorDialog,
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSlider,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from src.core.layer_store import LayerStore
from src.models.layers import LayerId
from src.utils.constants import (
    FONT_SIZE_RANGE,
    PORTRAIT_ROTATION_RANGE,
    PORTRAIT_SCALE_RANGE,
    TEXT_ROTATION_RANGE,
)
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


class LabeledSlider(QWidget):
    """带数值显示的滑块."""

    value_changed = pyqtSignal(int)

    def __init__(
        self,
        minimum: int,
        maximum: int,
        suffix: str = "",
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._suffix = suffix

        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(8)

        self._slider = QSlider(Qt.Orientation.Horizontal)
        self._slider.setRange(minimum, maximum)
        layout.addWidget(self._slider, 1)

        self._value_label = QLabel()
        self._value_label.setMinimumWidth(44)
        self._value_label.setAlignment(Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter)
        layout.addWidget(self._value_label)

        self._slider.valueChanged.connect(self._on_value_changed)
        self._update_label(self._slider.value())

    def value(self) -> int:
        return self._slider.value()

    def set_value(self, value: int) -> None:
        """设置数值，不发出信号."""
        self._slider.blockSignals(True)
        self._slider.setValue(value)
        self._slider.blockSignals(False)
        self._update_label(self._slider.value())

    def _on_value_changed(self, value: int) -> None:
        self._update_label(value)
        self.value_changed.emit(value)

    def _update_label(self, value: int) -> None:
        self._value_label.setText(f"{value}{self._suffix}")


class ControlPanel(QWidget):
    """控制面板.

    Signals:
        open_image_requested: 打开底图
        randomize_requested: 随机生成姓名与证件号
        analyze_requested: AI 布局分析
        portrait_requested: AI 生成肖像
        load_portrait_requested: 从文件载入肖像
        clear_portrait_requested: 清除肖像
        export_requested: 导出合成图
    """

    open_image_requested = pyqtSignal()
    randomize_requested = pyqtSignal()
    analyze_requested = pyqtSignal()
    portrait_requested = pyqtSignal()
    load_portrait_requested = pyqtSignal()
    clear_portrait_requested = pyqtSignal()
    export_requested = pyqtSignal()

    def __init__(
        self,
        store: LayerStore,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._store = store
        self._setup_ui()
        self._connect_signals()
        self.sync_from_store()

    # ========================
    # 界面
    # ========================

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        layout.setContentsMargins(12, 12, 12, 12)
        layout.setSpacing(12)

        # 底图
        self._open_btn = QPushButton("打开底图...")
        layout.addWidget(self._open_btn)

        # 证件数据
        data_group = QGroupBox("证件数据")
        data_form = QFormLayout(data_group)

        self._name_edit = QLineEdit()
        data_form.addRow("姓名", self._name_edit)

        self._id_edit = QLineEdit()
        data_form.addRow("证件号", self._id_edit)

        self._randomize_btn = QPushButton("随机生成")
        data_form.addRow(self._randomize_btn)

        self._coords_label = QLabel()
        self._coords_label.setProperty("hint", True)
        data_form.addRow(self._coords_label)
        layout.addWidget(data_group)

        # 文字样式
        style_group = QGroupBox("文字样式")
        style_form = QFormLayout(style_group)

        color_layout = QHBoxLayout()
        self._color_edit = QLineEdit()
        self._color_edit.setMaxLength(32)
        color_layout.addWidget(self._color_edit, 1)
        self._color_btn = QPushButton("选择...")
        color_layout.addWidget(self._color_btn)
        style_form.addRow("颜色", color_layout)

        self._font_size_spin = QSpinBox()
        self._font_size_spin.setRange(*FONT_SIZE_RANGE)
        self._font_size_spin.setSuffix(" px")
        style_form.addRow("字号", self._font_size_spin)

        self._text_rotation_slider = LabeledSlider(*TEXT_ROTATION_RANGE, suffix="°")
        style_form.addRow("旋转", self._text_rotation_slider)
        layout.addWidget(style_group)

        # 肖像
        portrait_group = QGroupBox("肖像")
        portrait_form = QFormLayout(portrait_group)

        self._portrait_scale_slider = LabeledSlider(*PORTRAIT_SCALE_RANGE, suffix="%")
        portrait_form.addRow("宽度", self._portrait_scale_slider)

        self._portrait_rotation_slider = LabeledSlider(*PORTRAIT_ROTATION_RANGE, suffix="°")
        portrait_form.addRow("旋转", self._portrait_rotation_slider)

        portrait_btns = QHBoxLayout()
        self._load_portrait_btn = QPushButton("载入...")
        portrait_btns.addWidget(self._load_portrait_btn)
        self._clear_portrait_btn = QPushButton("清除")
        portrait_btns.addWidget(self._clear_portrait_btn)
        portrait_form.addRow(portrait_btns)
        layout.addWidget(portrait_group)

        # AI
        ai_group = QGroupBox("AI 辅助")
        ai_layout = QVBoxLayout(ai_group)

        self._analyze_btn = QPushButton("AI 布局分析")
        ai_layout.addWidget(self._analyze_btn)

        self._portrait_btn = QPushButton("AI 生成肖像")
        ai_layout.addWidget(self._portrait_btn)
        layout.addWidget(ai_group)

        layout.addStretch()

        self._export_btn = QPushButton("导出 PNG...")
        self._export_btn.setProperty("primary", True)
        layout.addWidget(self._export_btn)

    def _connect_signals(self) -> None:
        self._name_edit.textEdited.connect(
            lambda text: self._store.set_text(LayerId.NAME, text)
        )
        self._id_edit.textEdited.connect(
            lambda text: self._store.set_text(LayerId.ID, text)
        )
        self._color_edit.editingFinished.connect(self._on_color_edited)
        self._color_btn.clicked.connect(self._on_pick_color)
        self._font_size_spin.valueChanged.connect(self._store.set_shared_font_size)
        self._text_rotation_slider.value_changed.connect(self._store.set_shared_text_rotation)
        self._portrait_scale_slider.value_changed.connect(self._store.set_portrait_scale)
        self._portrait_rotation_slider.value_changed.connect(self._store.set_portrait_rotation)

        self._open_btn.clicked.connect(self.open_image_requested)
        self._randomize_btn.clicked.connect(self.randomize_requested)
        self._analyze_btn.clicked.connect(self.analyze_requested)
        self._portrait_btn.clicked.connect(self.portrait_requested)
        self._load_portrait_btn.clicked.connect(self.load_portrait_requested)
        self._clear_portrait_btn.clicked.connect(self.clear_portrait_requested)
        self._export_btn.clicked.connect(self.export_requested)

    # ========================
    # 同步
    # ========================

    def sync_from_store(self) -> None:
        """用图层存储的当前值刷新全部字段，不触发变更."""
        shared = self._store.shared

        for edit, text in (
            (self._name_edit, self._store.name_layer.text),
            (self._id_edit, self._store.id_layer.text),
            (self._color_edit, shared.text_color),
        ):
            if edit.text() != text:
                edit.setText(text)

        self._font_size_spin.blockSignals(True)
        self._font_size_spin.setValue(round(shared.font_size))
        self._font_size_spin.blockSignals(False)

        self._text_rotation_slider.set_value(round(shared.text_rotation))
        self._portrait_scale_slider.set_value(round(shared.portrait_scale))
        self._portrait_rotation_slider.set_value(round(shared.portrait_rotation))
        self._clear_portrait_btn.setEnabled(self._store.portrait.has_image)

    def update_coords(self, coords: dict[LayerId, tuple[int, int]]) -> None:
        """显示文字图层的百分比坐标."""
        name = coords.get(LayerId.NAME, (0, 0))
        id_ = coords.get(LayerId.ID, (0, 0))
        self._coords_label.setText(
            f"姓名 ({name[0]}%, {name[1]}%)    证件号 ({id_[0]}%, {id_[1]}%)"
        )

    def set_base_loaded(self, loaded: bool) -> None:
        """底图载入状态决定分析与导出是否可用."""
        self._analyze_btn.setEnabled(loaded and not self._analyze_btn.property("busy"))
        self._export_btn.setEnabled(loaded)

    def set_busy(self, operation: str, busy: bool) -> None:
        """设置 AI 操作的忙碌状态.

        Args:
            operation: "analyze" 或 "portrait"
            busy: 是否忙碌
        """
        if operation == "analyze":
            button, idle_text, busy_text = self._analyze_btn, "AI 布局分析", "分析中..."
        elif operation == "portrait":
            button, idle_text, busy_text = self._portrait_btn, "AI 生成肖像", "生成中..."
        else:
            logger.warning(f"未知的 AI 操作: {operation}")
            return
        button.setProperty("busy", busy)
        button.setEnabled(not busy)
        button.setText(busy_text if busy else idle_text)

    # ========================
    # 颜色
    # ========================

    def _on_color_edited(self) -> None:
        text = self._color_edit.text().strip()
        if text and text != self._store.shared.text_color:
            self._store.set_shared_color(text)

    def _on_pick_color(self) -> None:
        color = QColorDialog.getColor(QColor(self._store.shared.text_color), self, "文字颜色")
        if color.isValid():
            self._color_edit.setText(color.name())
            self._store.set_shared_color(color.name())
