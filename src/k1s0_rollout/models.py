"""rollout データモデル"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)


@dataclass
class FeatureState:
    """1 フィーチャーの永続化された属性。"""

    name: str
    percentage: float = 0.0
    users: set[str] = field(default_factory=set)
    groups: set[str] = field(default_factory=set)
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_raw(
        cls,
        name: str,
        percentage: str | None,
        users: set[str],
        groups: set[str],
        data: str | None,
    ) -> FeatureState:
        """ストアの生の値から FeatureState を組み立てる。"""
        return cls(
            name=name,
            percentage=decode_percentage(percentage, feature=name),
            users=set(users),
            groups=set(groups),
            data=decode_data(data, feature=name),
        )

    @property
    def is_fully_active(self) -> bool:
        return self.percentage == 100

    def to_dict(self) -> dict[str, Any]:
        """辞書形式に変換する。users / groups はソート済みリスト。"""
        return {
            "percentage": self.percentage,
            "users": sorted(self.users),
            "groups": sorted(self.groups),
            "data": dict(self.data),
        }


def encode_percentage(percentage: float) -> str:
    """パーセンテージを 10 進文字列に変換する。整数値は小数点なし。"""
    value = float(percentage)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def decode_percentage(raw: str | None, feature: str = "") -> float:
    """保存値をパーセンテージに変換する。欠損・不正値は 0。"""
    if raw is None or not raw.strip():
        return 0.0
    try:
        return float(raw)
    except ValueError:
        logger.warning(
            "Unparsable percentage, treating as 0",
            extra={"feature": feature, "raw": raw},
        )
        return 0.0


def encode_data(data: dict[str, Any]) -> str:
    return json.dumps(data)


def decode_data(raw: str | None, feature: str = "") -> dict[str, Any]:
    """保存値をメタデータに変換する。欠損・空白・不正値は空辞書。"""
    if raw is None or not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning(
            "Unparsable feature data, treating as empty",
            extra={"feature": feature},
        )
        return {}
    if not isinstance(data, dict):
        logger.warning(
            "Feature data is not a JSON object, treating as empty",
            extra={"feature": feature},
        )
        return {}
    return data
