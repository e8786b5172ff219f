"""主窗口模块.

布局结构:
    ┌──────────────────────────────────────────────┬───────────────┐
    │                                              │               │
    │                证件卡片画布                   │   控制面板     │
    │                                              │               │
    ├──────────────────────────────────────────────┴───────────────┤
    │                           状态栏                              │
    └──────────────────────────────────────────────────────────────┘

所有合成状态的修改都在界面线程上进行；AI 请求在 ``AIWorker`` 线程中执行，
结果通过信号回到界面线程后再应用。
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from PyQt6.QtGui import QAction, QCloseEvent, QKeySequence
from PyQt6.QtWidgets import (
    QApplication,
    QFileDialog,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QScrollArea,
    QStatusBar,
    QWidget,
)

from src.core.ai_worker import AIWorker
from src.core.composer import CardComposer
from src.core.config_manager import ConfigManager, get_config
from src.models.layers import LayerId
from src.models.layout_suggestion import LayoutSuggestion
from src.services.ai_service import AIService
from src.services.randomizer import Randomizer
from src.ui.widgets.card_canvas import CardCanvas
from src.ui.widgets.control_panel import ControlPanel
from src.utils.constants import (
    APP_NAME,
    APP_VERSION,
    DEFAULT_EXPORT_QUALITY,
    SUPPORTED_IMAGE_FORMATS,
    WINDOW_MIN_HEIGHT,
    WINDOW_MIN_WIDTH,
)
from src.utils.exceptions import AppException, ConfigError, ImageProcessError
from src.utils.image_utils import load_image
from src.utils.logger import setup_logger

logger = setup_logger(__name__)

_IMAGE_FILTER = "图片文件 ({})".format(
    " ".join(f"*{ext}" for ext in sorted(SUPPORTED_IMAGE_FORMATS))
)


class MainWindow(QMainWindow):
    """应用主窗口.

    Attributes:
        composer: 证件卡片合成器
        canvas: 画布组件
        control_panel: 控制面板
    """

    def __init__(
        self,
        composer: CardComposer,
        ai_service: AIService,
        randomizer: Optional[Randomizer] = None,
        config_manager: Optional[ConfigManager] = None,
        export_quality: int = DEFAULT_EXPORT_QUALITY,
    ) -> None:
        """初始化主窗口.

        Args:
            composer: 证件卡片合成器
            ai_service: AI 服务
            randomizer: 随机数据生成器
            config_manager: 配置管理器，用于记住最近目录
            export_quality: 导出 JPEG 质量
        """
        super().__init__()
        self._composer = composer
        self._ai_service = ai_service
        self._randomizer = randomizer or Randomizer()
        self._config = config_manager or get_config()
        self._export_quality = export_quality

        # 运行中的 AI 任务: operation -> worker
        self._workers: dict[str, AIWorker] = {}
        self._action_export: Optional[QAction] = None

        self._setup_window()
        self._setup_central_widget()
        self._setup_menubar()
        self._setup_statusbar()
        self._connect_signals()
        self._on_store_changed()

        logger.debug("主窗口初始化完成")

    # ========================
    # 属性
    # ========================

    @property
    def composer(self) -> CardComposer:
        return self._composer

    @property
    def canvas(self) -> CardCanvas:
        return self._canvas

    @property
    def control_panel(self) -> ControlPanel:
        return self._control_panel

    def is_busy(self, operation: str) -> bool:
        """指定 AI 操作是否正在运行."""
        return operation in self._workers

    # ========================
    # 初始化方法
    # ========================

    def _setup_window(self) -> None:
        """设置窗口属性."""
        self.setWindowTitle(f"{APP_NAME} v{APP_VERSION}")
        self.setMinimumSize(WINDOW_MIN_WIDTH, WINDOW_MIN_HEIGHT)
        self.resize(1280, 800)

        screen = QApplication.primaryScreen()
        if screen:
            geometry = self.frameGeometry()
            geometry.moveCenter(screen.availableGeometry().center())
            self.move(geometry.topLeft())

    def _setup_central_widget(self) -> None:
        central = QWidget()
        layout = QHBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(0)

        self._canvas = CardCanvas(self._composer)
        layout.addWidget(self._canvas, 1)

        self._control_panel = ControlPanel(self._composer.store)
        scroll = QScrollArea()
        scroll.setWidget(self._control_panel)
        scroll.setWidgetResizable(True)
        scroll.setFixedWidth(340)
        layout.addWidget(scroll)

        self.setCentralWidget(central)

    def _setup_menubar(self) -> None:
        """设置菜单栏."""
        menubar = self.menuBar()
        if menubar is None:
            return

        file_menu = menubar.addMenu("文件(&F)")
        if file_menu:
            open_action = QAction("打开底图(&O)...", self)
            open_action.setShortcut(QKeySequence.StandardKey.Open)
            open_action.triggered.connect(self._on_open_image)
            file_menu.addAction(open_action)

            self._action_export = QAction("导出(&E)...", self)
            self._action_export.setShortcut(QKeySequence.StandardKey.Save)
            self._action_export.triggered.connect(self._on_export)
            file_menu.addAction(self._action_export)

            file_menu.addSeparator()

            quit_action = QAction("退出(&Q)", self)
            quit_action.setShortcut(QKeySequence.StandardKey.Quit)
            quit_action.triggered.connect(self.close)
            file_menu.addAction(quit_action)

        help_menu = menubar.addMenu("帮助(&H)")
        if help_menu:
            about_action = QAction("关于(&A)", self)
            about_action.triggered.connect(self._on_about)
            help_menu.addAction(about_action)

    def _setup_statusbar(self) -> None:
        """设置状态栏."""
        self._statusbar = QStatusBar()
        self.setStatusBar(self._statusbar)

        self._frame_label = QLabel()
        self._statusbar.addPermanentWidget(self._frame_label)

    def _connect_signals(self) -> None:
        self._composer.store.subscribe(self._on_store_changed)

        self._canvas.file_dropped.connect(self.load_base_file)

        panel = self._control_panel
        panel.open_image_requested.connect(self._on_open_image)
        panel.randomize_requested.connect(self.randomize_data)
        panel.analyze_requested.connect(self.start_layout_analysis)
        panel.portrait_requested.connect(self.start_portrait_generation)
        panel.load_portrait_requested.connect(self._on_load_portrait)
        panel.clear_portrait_requested.connect(lambda: self._composer.set_portrait_image(None))
        panel.export_requested.connect(self._on_export)

    # ========================
    # 公共操作
    # ========================

    def show_status_message(self, message: str, timeout: int = 3000) -> None:
        """在状态栏显示临时消息."""
        self._statusbar.showMessage(message, timeout)

    def load_base_file(self, path: str) -> bool:
        """载入底图文件，失败时提示并保持当前状态.

        Returns:
            是否载入成功
        """
        try:
            self._composer.load_base_image_file(path)
        except ImageProcessError as e:
            logger.warning(f"底图载入失败: {e}")
            QMessageBox.warning(self, "无法打开底图", e.message)
            return False

        self._remember("last_open_dir", str(Path(path).parent))
        self.show_status_message(f"已载入底图: {Path(path).name}")
        self._on_store_changed()
        return True

    def randomize_data(self) -> None:
        """随机生成姓名（大写）与证件号."""
        store = self._composer.store
        with store.batch():
            store.set_text(LayerId.NAME, self._randomizer.random_name().upper())
            store.set_text(LayerId.ID, self._randomizer.random_id())

    def start_layout_analysis(self) -> None:
        """后台运行 AI 布局分析."""
        snapshot = self._composer.snapshot_for_analysis()
        if snapshot is None:
            self.show_status_message("请先载入底图")
            return
        service = self._ai_service.clone()
        self._start_worker(
            "analyze",
            service,
            lambda: service.request_layout(snapshot),
            self._on_layout_ready,
        )

    def start_portrait_generation(self) -> None:
        """后台运行 AI 肖像生成."""
        name = self._composer.store.name_layer.text
        service = self._ai_service.clone()
        self._start_worker(
            "portrait",
            service,
            lambda: service.request_portrait(name),
            self._on_portrait_ready,
        )

    # ========================
    # AI 任务
    # ========================

    def _start_worker(
        self,
        operation: str,
        service: AIService,
        task_factory,
        on_success,
    ) -> None:
        if operation in self._workers:
            logger.debug(f"AI 任务仍在运行，忽略重复请求: {operation}")
            return

        worker = AIWorker(operation, task_factory, service, self)
        worker.succeeded.connect(on_success)
        worker.failed.connect(lambda error: self._on_ai_failed(operation, error))
        worker.finished.connect(lambda: self._on_worker_finished(operation))

        self._workers[operation] = worker
        self._control_panel.set_busy(operation, True)
        worker.start()

    def _on_worker_finished(self, operation: str) -> None:
        worker = self._workers.pop(operation, None)
        if worker is not None:
            worker.deleteLater()
        self._control_panel.set_busy(operation, False)
        self._control_panel.set_base_loaded(self._composer.has_base_image)

    def _on_layout_ready(self, suggestion: Optional[LayoutSuggestion]) -> None:
        if suggestion is None:
            self.show_status_message("AI 未找到合适的文字位置")
            return
        applied = self._composer.apply_suggestion(suggestion)
        self.show_status_message(f"已应用布局建议: {len(applied)} 个图层")

    def _on_portrait_ready(self, image) -> None:
        self._composer.set_portrait_image(image)
        self.show_status_message("肖像已生成")

    def _on_ai_failed(self, operation: str, error: Exception) -> None:
        title = "AI 布局分析失败" if operation == "analyze" else "AI 肖像生成失败"
        message = error.message if isinstance(error, AppException) else str(error)
        QMessageBox.warning(self, title, f"{message}\n\n请检查 API 密钥与网络连接。")

    # ========================
    # 槽函数
    # ========================

    def _on_store_changed(self) -> None:
        self._control_panel.sync_from_store()
        self._control_panel.update_coords(self._composer.coords_display())
        self._control_panel.set_base_loaded(self._composer.has_base_image)
        if self._action_export is not None:
            self._action_export.setEnabled(self._composer.has_base_image)

        frame = self._composer.frame
        self._frame_label.setText(f"{frame.width} × {frame.height}" if frame else "未载入底图")

    def _on_open_image(self) -> None:
        start_dir = self._config.get_user_config("last_open_dir", "")
        path, _ = QFileDialog.getOpenFileName(self, "打开底图", start_dir, _IMAGE_FILTER)
        if path:
            self.load_base_file(path)

    def _on_load_portrait(self) -> None:
        start_dir = self._config.get_user_config("last_open_dir", "")
        path, _ = QFileDialog.getOpenFileName(self, "载入肖像", start_dir, _IMAGE_FILTER)
        if not path:
            return
        try:
            image = load_image(path)
        except ImageProcessError as e:
            QMessageBox.warning(self, "无法载入肖像", e.message)
            return
        self._composer.set_portrait_image(image)

    def _on_export(self) -> None:
        if not self._composer.has_base_image:
            return
        start_dir = Path(self._config.get_user_config("last_export_dir", str(Path.home())))
        default_path = start_dir / self._composer.default_export_name()
        path, _ = QFileDialog.getSaveFileName(
            self,
            "导出证件卡片",
            str(default_path),
            "PNG 图片 (*.png);;JPEG 图片 (*.jpg *.jpeg)",
        )
        if not path:
            return
        try:
            saved = self._composer.export_to_file(path, quality=self._export_quality)
        except AppException as e:
            QMessageBox.critical(self, "导出失败", e.message)
            return
        self._remember("last_export_dir", str(saved.parent))
        self.show_status_message(f"已导出: {saved}")

    def _remember(self, key: str, value: str) -> None:
        try:
            self._config.set_user_config(key, value)
        except ConfigError as e:
            logger.warning(f"无法保存用户偏好 {key}: {e}")

    def _on_about(self) -> None:
        QMessageBox.about(
            self,
            f"关于 {APP_NAME}",
            f"<h3>{APP_NAME}</h3>"
            f"<p>版本: {APP_VERSION}</p>"
            "<p>在证件底图上排布姓名、证件号与肖像，并导出合成图片。</p>",
        )

    # ========================
    # 事件处理
    # ========================

    def closeEvent(self, event: QCloseEvent) -> None:
        """窗口关闭事件，等待运行中的 AI 任务结束."""
        for operation, worker in list(self._workers.items()):
            logger.info(f"等待 AI 任务结束: {operation}")
            worker.wait(5000)
        self._composer.store.unsubscribe(self._on_store_changed)
        logger.info("主窗口关闭")
        event.accept()
