"""证件卡片合成器单元测试."""

import io

import pytest
from PIL import Image

from src.core.composer import CardComposer
from src.models.layers import CanvasFrame, LayerId
from src.utils.constants import DEFAULT_ID_POSITION, DEFAULT_NAME_POSITION
from src.utils.exceptions import ExportError, ImageCorruptedError, ImageNotFoundError


class TestBaseImage:
    """底图载入测试."""

    def test_no_base_image(self):
        """测试未载入底图时的状态."""
        composer = CardComposer()
        assert not composer.has_base_image
        assert composer.frame is None
        assert composer.redraw() is None
        assert composer.export_image() is None
        assert composer.snapshot_for_analysis() is None

    def test_load_sets_frame(self, composer):
        """测试画布帧取底图原始尺寸."""
        assert composer.has_base_image
        assert composer.frame == CanvasFrame(width=800, height=500)
        assert composer.last_render.size == (800, 500)

    def test_load_resets_text_positions(self, composer):
        """测试载入新底图时文字回到默认位置."""
        composer.store.set_text_position(LayerId.NAME, 0.1, 0.1)
        composer.store.set_text_position(LayerId.ID, 0.2, 0.2)

        composer.load_base_image(Image.new("RGB", (1600, 1000), "white"))

        assert composer.frame.size == (1600, 1000)
        assert composer.store.position_of(LayerId.NAME) == DEFAULT_NAME_POSITION
        assert composer.store.position_of(LayerId.ID) == DEFAULT_ID_POSITION

    def test_load_file(self, tmp_path):
        """测试从文件载入底图."""
        path = tmp_path / "card.png"
        Image.new("RGB", (640, 400), "white").save(path)

        composer = CardComposer()
        composer.load_base_image_file(path)
        assert composer.frame.size == (640, 400)

    def test_load_missing_file_keeps_state(self, composer, tmp_path):
        """测试文件不存在时状态不变."""
        with pytest.raises(ImageNotFoundError):
            composer.load_base_image_file(tmp_path / "missing.png")
        assert composer.frame.size == (800, 500)

    def test_load_corrupted_file_keeps_state(self, composer, tmp_path):
        """测试文件损坏时状态不变."""
        path = tmp_path / "broken.png"
        path.write_bytes(b"not an image")
        with pytest.raises(ImageCorruptedError):
            composer.load_base_image_file(path)
        assert composer.frame.size == (800, 500)


class TestRedraw:
    """重绘触发测试."""

    def test_mutation_triggers_redraw(self, composer):
        """测试每次变更都通知渲染监听者."""
        renders = []
        composer.add_render_listener(renders.append)
        composer.store.set_text(LayerId.NAME, "MARIE CURIE")
        composer.store.set_shared_font_size(20)
        assert len(renders) == 2
        assert all(image.size == (800, 500) for image in renders)

    def test_remove_listener(self, composer):
        """测试移除监听者."""
        renders = []
        composer.add_render_listener(renders.append)
        composer.remove_render_listener(renders.append)
        composer.store.set_text(LayerId.NAME, "X")
        assert renders == []

    def test_listener_receives_none_without_base(self):
        """测试未载入底图时监听者收到 None."""
        composer = CardComposer()
        renders = []
        composer.add_render_listener(renders.append)
        composer.store.set_text(LayerId.NAME, "X")
        assert renders == [None]


class TestEndToEnd:
    """端到端拖拽场景."""

    def test_drag_name_layer(self, composer):
        """测试在 800x500 底图上拖动姓名 20 像素."""
        assert composer.pointer_down((410, 222)) is LayerId.NAME
        assert composer.store.selected_layers() == [LayerId.NAME]

        assert composer.pointer_move((430, 222)) is True
        composer.pointer_up()

        x, y = composer.store.position_of(LayerId.NAME)
        assert x == pytest.approx(0.535)
        assert y == pytest.approx(0.44)
        assert composer.store.selected_layers() == []

    def test_pointer_ignored_without_base(self):
        """测试未载入底图时忽略指针事件."""
        composer = CardComposer()
        assert composer.pointer_down((410, 222)) is None
        assert composer.pointer_move((430, 222)) is False


class TestCollaborators:
    """外部协作接口测试."""

    def test_apply_suggestion(self, composer):
        """测试应用布局建议."""
        applied = composer.apply_suggestion({"namePosition": {"x": 52.0, "y": 40.0}})
        assert applied == [LayerId.NAME]
        assert composer.store.position_of(LayerId.NAME) == (0.52, 0.40)

    def test_coords_display(self, composer):
        """测试整数百分比坐标."""
        composer.store.set_text_position(LayerId.ID, 0.546, 0.494)
        coords = composer.coords_display()
        assert coords[LayerId.NAME] == (51, 44)
        assert coords[LayerId.ID] == (55, 49)

    def test_snapshot_is_jpeg(self, composer):
        """测试分析快照为 JPEG."""
        data = composer.snapshot_for_analysis()
        assert data[:2] == b"\xff\xd8"
        with Image.open(io.BytesIO(data)) as img:
            assert img.format == "JPEG"
            assert img.size == (800, 500)

    def test_set_portrait_image(self, composer, portrait_image):
        """测试设置肖像."""
        composer.set_portrait_image(portrait_image)
        assert composer.store.portrait.has_image


class TestExport:
    """导出测试."""

    def test_export_without_selection(self, composer):
        """测试导出图不包含选中框."""
        composer.store.set_shared_text_rotation(0)
        composer.pointer_down((410, 222))

        preview = composer.last_render
        exported = composer.export_image()

        assert preview.getpixel((403, 230))[:3] == (16, 185, 129)
        assert exported.getpixel((403, 230))[:3] == (255, 255, 255)

    def test_default_export_name(self, composer):
        """测试默认导出文件名包含证件号."""
        composer.store.set_text(LayerId.ID, "87654321-B")
        assert composer.default_export_name() == "id-card-87654321-B.png"

    def test_export_png(self, composer, tmp_path):
        """测试导出 PNG."""
        saved = composer.export_to_file(tmp_path / "card.png")
        with Image.open(saved) as img:
            assert img.format == "PNG"
            assert img.size == (800, 500)

    def test_export_jpeg(self, composer, tmp_path):
        """测试按扩展名导出 JPEG."""
        saved = composer.export_to_file(tmp_path / "card.jpg", quality=80)
        with Image.open(saved) as img:
            assert img.format == "JPEG"

    def test_export_without_base_image(self, tmp_path):
        """测试未载入底图时导出失败."""
        with pytest.raises(ExportError):
            CardComposer().export_to_file(tmp_path / "card.png")

    def test_export_unknown_extension(self, composer, tmp_path):
        """测试未知扩展名导出失败."""
        with pytest.raises(ExportError):
            composer.export_to_file(tmp_path / "card.unknown")
