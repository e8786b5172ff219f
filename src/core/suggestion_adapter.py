"""外部布局建议适配.

把 AI 布局分析返回的百分比坐标写入文字图层：存在的字段覆盖位置（除以 100），
缺省的字段保持不变。不做任何校验。
"""

from __future__ import annotations

from typing import Any, Union

from src.core.layer_store import LayerStore
from src.models.layers import LayerId
from src.models.layout_suggestion import LayoutSuggestion
from src.utils.logger import setup_logger

logger = setup_logger(__name__)


def apply_layout_suggestion(
    store: LayerStore,
    suggestion: Union[LayoutSuggestion, dict[str, Any], str, None],
) -> list[LayerId]:
    """应用布局建议.

    所有字段在一次批量变更中写入，观察者只收到一次通知。

    Args:
        store: 图层存储
        suggestion: LayoutSuggestion 或可被宽松解析的原始数据

    Returns:
        实际更新了位置的图层
    """
    if not isinstance(suggestion, LayoutSuggestion):
        suggestion = LayoutSuggestion.from_payload(suggestion)

    applied: list[LayerId] = []
    with store.batch():
        for layer_id, point in (
            (LayerId.NAME, suggestion.name_position),
            (LayerId.ID, suggestion.id_position),
        ):
            if point is None:
                continue
            store.set_text_position(layer_id, *point.to_normalized())
            applied.append(layer_id)

    if applied:
        logger.info(f"已应用布局建议: {[layer_id.value for layer_id in applied]}")
    else:
        logger.info("布局建议为空，未做修改")
    return applied
