"""布局建议模型单元测试."""

import pytest

from src.models.layout_suggestion import LayoutSuggestion, PercentPoint


class TestPercentPoint:
    """百分比坐标测试."""

    def test_to_normalized(self):
        """测试换算为归一化坐标."""
        assert PercentPoint(x=52.0, y=40.0).to_normalized() == (0.52, 0.40)


class TestLayoutSuggestionParsing:
    """宽松解析测试."""

    def test_full_payload(self):
        """测试完整数据."""
        suggestion = LayoutSuggestion.from_payload(
            {"namePosition": {"x": 52, "y": 40}, "idPosition": {"x": 55, "y": 50}}
        )
        assert suggestion.name_position == PercentPoint(x=52, y=40)
        assert suggestion.id_position == PercentPoint(x=55, y=50)
        assert not suggestion.is_empty

    def test_json_string(self):
        """测试 JSON 字符串."""
        suggestion = LayoutSuggestion.from_payload('{"namePosition": {"x": 1.5, "y": 2.5}}')
        assert suggestion.name_position == PercentPoint(x=1.5, y=2.5)
        assert suggestion.id_position is None

    def test_json_bytes(self):
        """测试 JSON 字节数据."""
        suggestion = LayoutSuggestion.from_payload(b'{"idPosition": {"x": 3, "y": 4}}')
        assert suggestion.id_position == PercentPoint(x=3, y=4)

    def test_snake_case_keys(self):
        """测试 snake_case 键名."""
        suggestion = LayoutSuggestion.from_payload({"name_position": {"x": 5, "y": 6}})
        assert suggestion.name_position == PercentPoint(x=5, y=6)

    @pytest.mark.parametrize("payload", [None, "", "not json", "[1, 2]", 42, [], {}])
    def test_unusable_payloads_are_empty(self, payload):
        """测试无法使用的数据得到空建议."""
        assert LayoutSuggestion.from_payload(payload).is_empty

    def test_missing_coordinate_skips_field(self):
        """测试缺少坐标分量的字段被跳过."""
        suggestion = LayoutSuggestion.from_payload(
            {"namePosition": {"x": 10}, "idPosition": {"x": 20, "y": 30}}
        )
        assert suggestion.name_position is None
        assert suggestion.id_position == PercentPoint(x=20, y=30)

    def test_non_numeric_skips_field(self):
        """测试非数值坐标被跳过."""
        suggestion = LayoutSuggestion.from_payload({"idPosition": {"x": "a", "y": "b"}})
        assert suggestion.is_empty

    def test_null_field(self):
        """测试字段为 null 时视为缺省."""
        suggestion = LayoutSuggestion.from_payload({"namePosition": None, "idPosition": {"x": 1, "y": 1}})
        assert suggestion.name_position is None
        assert suggestion.id_position is not None

    def test_extra_keys_ignored(self):
        """测试忽略多余字段."""
        suggestion = LayoutSuggestion.from_payload(
            {"namePosition": {"x": 1, "y": 2, "confidence": 0.9}, "photo": {"x": 0}}
        )
        assert suggestion.name_position == PercentPoint(x=1, y=2)

    def test_range_not_validated(self):
        """测试不校验取值范围."""
        suggestion = LayoutSuggestion.from_payload({"namePosition": {"x": -20, "y": 250}})
        assert suggestion.name_position.to_normalized() == (-0.2, 2.5)

    def test_alias_model_validate(self):
        """测试按别名直接校验."""
        suggestion = LayoutSuggestion.model_validate({"namePosition": {"x": 1, "y": 2}})
        assert suggestion.name_position == PercentPoint(x=1, y=2)
