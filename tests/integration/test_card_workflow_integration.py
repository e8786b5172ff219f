"""证件卡片合成流程集成测试.

测试底图载入、拖拽、AI 布局与肖像、导出的完整流程。
"""

from pathlib import Path
from unittest.mock import patch

import pytest
from PIL import Image

from src.core.composer import CardComposer
from src.models.layers import LayerId
from src.ui.main_window import MainWindow


class TestComposerWorkflow:
    """合成器完整流程测试."""

    @pytest.mark.asyncio
    async def test_full_workflow(self, sample_card_image: Path, ai_service, tmp_path: Path):
        """测试载入 → AI 布局 → 拖拽 → AI 肖像 → 导出."""
        composer = CardComposer()
        composer.load_base_image_file(sample_card_image)
        assert composer.frame.size == (1000, 630)

        await ai_service.analyze_layout(composer)
        assert composer.coords_display() == {LayerId.NAME: (40, 35), LayerId.ID: (42, 50)}

        # 姓名锚点 (400, 220.5)，向右拖 50 像素 = 0.05
        assert composer.pointer_down((402, 224)) is LayerId.NAME
        composer.pointer_move((452, 224))
        composer.pointer_up()
        assert composer.store.name_layer.x == pytest.approx(0.45)

        portrait = await ai_service.generate_portrait(composer)
        assert composer.store.portrait.image is portrait

        output = composer.export_to_file(tmp_path / "out" / "card.jpg", quality=90)
        exported = Image.open(output)
        assert exported.format == "JPEG"
        assert exported.size == (1000, 630)

    @pytest.mark.asyncio
    async def test_new_base_resets_text_only(
        self, sample_card_image: Path, ai_service, tmp_path: Path
    ):
        """测试载入新底图只重置文字位置，肖像保持."""
        composer = CardComposer()
        composer.load_base_image_file(sample_card_image)
        await ai_service.analyze_layout(composer)
        portrait = await ai_service.generate_portrait(composer)
        composer.store.translate(LayerId.PORTRAIT, 0.1, 0.0)

        other = tmp_path / "other.png"
        Image.new("RGB", (640, 400), "white").save(other)
        composer.load_base_image_file(other)

        assert composer.store.name_layer.position == pytest.approx((0.51, 0.44))
        assert composer.store.id_layer.position == pytest.approx((0.54, 0.49))
        assert composer.store.portrait.image is portrait
        assert composer.store.portrait.x == pytest.approx(0.2)


class TestMainWindowWorkflow:
    """主窗口流程测试."""

    def test_worker_applies_layout(
        self, qtbot, sample_card_image: Path, ai_service, mock_provider, config_manager
    ):
        """测试后台线程完成布局分析后在界面线程应用结果."""
        composer = CardComposer()
        window = MainWindow(composer, ai_service, config_manager=config_manager)
        qtbot.addWidget(window)

        assert window.load_base_file(str(sample_card_image))
        with patch("src.services.ai_service.create_ai_provider", return_value=mock_provider):
            window.start_layout_analysis()
            assert window.is_busy("analyze")
            qtbot.waitUntil(lambda: not window.is_busy("analyze"), timeout=5000)

        assert composer.coords_display()[LayerId.NAME] == (40, 35)
        assert window.control_panel._analyze_btn.isEnabled()
        mock_provider.close.assert_awaited_once()

    def test_worker_generates_portrait(
        self, qtbot, sample_card_image: Path, ai_service, mock_provider, config_manager
    ):
        """测试后台线程生成肖像."""
        composer = CardComposer()
        window = MainWindow(composer, ai_service, config_manager=config_manager)
        qtbot.addWidget(window)
        window.load_base_file(str(sample_card_image))

        with patch("src.services.ai_service.create_ai_provider", return_value=mock_provider):
            window.start_portrait_generation()
            qtbot.waitUntil(lambda: not window.is_busy("portrait"), timeout=5000)

        assert composer.store.portrait.image.size == (256, 256)
        mock_provider.generate_portrait.assert_awaited_once()
