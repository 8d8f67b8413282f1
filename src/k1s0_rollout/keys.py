"""ストアのキー配置"""

from __future__ import annotations

from dataclasses import dataclass

PERCENTAGE = "percentage"
USERS = "users"
GROUPS = "groups"
DATA = "data"
ATTRIBUTES = (PERCENTAGE, USERS, GROUPS, DATA)


@dataclass(frozen=True)
class KeySchema:
    """フィーチャーの属性キーとカタログキーを組み立てる。

    キーはデプロイ済みストアの寿命の間は固定でなければならない。
    """

    prefix: str = "feature"

    @property
    def catalog_key(self) -> str:
        return f"{self.prefix}:__features__"

    def key(self, feature: str, attribute: str) -> str:
        return f"{self.prefix}:{feature}:{attribute}"

    def percentage_key(self, feature: str) -> str:
        return self.key(feature, PERCENTAGE)

    def users_key(self, feature: str) -> str:
        return self.key(feature, USERS)

    def groups_key(self, feature: str) -> str:
        return self.key(feature, GROUPS)

    def data_key(self, feature: str) -> str:
        return self.key(feature, DATA)

    def attribute_keys(self, feature: str) -> tuple[str, ...]:
        """フィーチャーの全属性キー。"""
        return tuple(self.key(feature, attribute) for attribute in ATTRIBUTES)
