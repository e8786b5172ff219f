"""AI 布局建议数据模型.

布局分析服务返回 ``{"namePosition": {"x", "y"}, "idPosition": {"x", "y"}}``，
坐标为 0-100 的百分比。两个字段都可缺省；解析按字段进行，某个字段格式错误
只会跳过该字段。取值范围不做校验。
"""

from __future__ import annotations

import json
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from src.utils.logger import setup_logger

logger = setup_logger(__name__)

# 字段名（含 snake_case 写法）到模型属性的映射
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name_position": ("namePosition", "name_position"),
    "id_position": ("idPosition", "id_position"),
}


class PercentPoint(BaseModel):
    """百分比坐标点.

    Attributes:
        x: X 百分比（0-100）
        y: Y 百分比（0-100）
    """

    x: float
    y: float

    def to_normalized(self) -> tuple[float, float]:
        """转换为 0-1 的归一化坐标."""
        return (self.x / 100, self.y / 100)


class LayoutSuggestion(BaseModel):
    """布局建议.

    Attributes:
        name_position: 姓名起始位置（百分比），可缺省
        id_position: 证件号起始位置（百分比），可缺省
    """

    model_config = ConfigDict(populate_by_name=True)

    name_position: Optional[PercentPoint] = Field(default=None, alias="namePosition")
    id_position: Optional[PercentPoint] = Field(default=None, alias="idPosition")

    @property
    def is_empty(self) -> bool:
        """两个字段都缺省."""
        return self.name_position is None and self.id_position is None

    @classmethod
    def from_payload(cls, payload: Any) -> "LayoutSuggestion":
        """宽松解析外部返回的布局建议.

        Args:
            payload: dict、JSON 字符串或 None

        Returns:
            LayoutSuggestion，无法识别的字段被跳过
        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.warning(f"布局建议不是有效的 JSON: {e}")
                return cls()

        if not isinstance(payload, dict):
            if payload is not None:
                logger.warning(f"布局建议格式无效: {type(payload).__name__}")
            return cls()

        fields: dict[str, PercentPoint] = {}
        for attr, keys in _FIELD_ALIASES.items():
            raw = next((payload[k] for k in keys if payload.get(k) is not None), None)
            if raw is None:
                continue
            try:
                fields[attr] = PercentPoint.model_validate(raw)
            except ValidationError as e:
                logger.warning(f"跳过格式错误的布局字段 {keys[0]}: {e.error_count()} 个错误")

        return cls.model_validate(fields)
