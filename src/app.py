"""应用初始化和管理."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from src.utils.logger import setup_logger

if TYPE_CHECKING:
    from src.core.composer import CardComposer
    from src.models.app_settings import Settings
    from src.services.ai_service import AIService
    from src.ui.main_window import MainWindow

logger = setup_logger(__name__)


class Application:
    """应用管理类.

    负责应用的初始化、配置加载和资源管理。

    Attributes:
        settings: 应用设置
        composer: 证件卡片合成器
        main_window: 主窗口实例
    """

    def __init__(self) -> None:
        """初始化应用管理器."""
        self._main_window: Optional["MainWindow"] = None
        self._composer: Optional["CardComposer"] = None
        self._ai_service: Optional["AIService"] = None
        self.settings: Optional["Settings"] = None
        self._initialized: bool = False

    def initialize(self) -> None:
        """初始化应用.

        执行以下初始化步骤:
        1. 确保应用数据目录存在
        2. 加载配置
        3. 初始化服务
        4. 载入启动底图与随机数据
        """
        if self._initialized:
            logger.warning("应用已初始化，跳过重复初始化")
            return

        logger.info("开始初始化应用...")

        self._ensure_data_directory()
        self._load_settings()
        self._init_services()
        self._init_composer()

        self._initialized = True
        logger.info("应用初始化完成")

    def _ensure_data_directory(self) -> None:
        """确保应用数据目录存在."""
        from src.utils.constants import APP_DATA_DIR

        APP_DATA_DIR.mkdir(parents=True, exist_ok=True)
        logger.debug(f"数据目录: {APP_DATA_DIR}")

    def _load_settings(self) -> None:
        """加载应用设置并应用日志级别与字体."""
        from src.core.config_manager import get_config
        from src.core.text_metrics import set_font_override
        from src.utils.logger import set_log_level

        self.settings = get_config().settings
        set_log_level(self.settings.effective_log_level)
        if self.settings.card_font_path:
            set_font_override(str(self.settings.card_font_path))
        logger.debug(f"日志级别: {self.settings.effective_log_level}")

    def _init_services(self) -> None:
        """初始化 AI 服务."""
        from src.core.config_manager import get_config
        from src.services.ai_service import get_ai_service

        config = get_config().ai_config
        self._ai_service = get_ai_service(config)
        if not config.has_api_key:
            logger.warning(f"未配置 {config.provider} API 密钥，AI 功能不可用")
        logger.debug("服务初始化完成")

    def _init_composer(self) -> None:
        """创建合成器，载入启动底图并随机生成证件数据."""
        from src.core.composer import CardComposer
        from src.models.layers import LayerId
        from src.services.randomizer import Randomizer
        from src.utils.exceptions import ImageProcessError
        from src.utils.image_utils import create_placeholder_card

        self._composer = CardComposer()

        randomizer = Randomizer()
        store = self._composer.store
        with store.batch():
            store.set_text(LayerId.NAME, randomizer.random_name().upper())
            store.set_text(LayerId.ID, randomizer.random_id())

        base_path = self.settings.default_base_image if self.settings else None
        if base_path:
            try:
                self._composer.load_base_image_file(base_path)
                return
            except ImageProcessError as e:
                logger.warning(f"启动底图载入失败，使用占位底图: {e}")

        self._composer.load_base_image(create_placeholder_card())

    def show_main_window(self) -> None:
        """显示主窗口."""
        from src.core.config_manager import get_config
        from src.ui.main_window import MainWindow

        if self._main_window is None:
            self._main_window = MainWindow(
                self._composer,
                self._ai_service,
                config_manager=get_config(),
                export_quality=self.settings.export_quality,
            )

        self._main_window.show()
        logger.info("主窗口已显示")

    def cleanup(self) -> None:
        """清理应用资源."""
        logger.info("开始清理应用资源...")
        self._main_window = None
        logger.info("应用资源清理完成")

    @property
    def is_initialized(self) -> bool:
        """返回应用是否已初始化."""
        return self._initialized

    @property
    def composer(self) -> Optional["CardComposer"]:
        """返回合成器实例."""
        return self._composer

    @property
    def main_window(self) -> Optional["MainWindow"]:
        return self._main_window
