"""FeatureStore 抽象基底クラスとバッチ操作"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass


@dataclass(frozen=True)
class SetValue:
    """スカラー値の設定。"""

    key: str
    value: str


@dataclass(frozen=True)
class AddMembers:
    """集合へのメンバー追加。"""

    key: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class RemoveMembers:
    """集合からのメンバー削除。"""

    key: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class DeleteKeys:
    """キーの削除。"""

    keys: tuple[str, ...]


StoreOp = SetValue | AddMembers | RemoveMembers | DeleteKeys


class FeatureStore(ABC):
    """フィーチャー状態を保存するキーバリューストアの抽象基底クラス。"""

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """キーに対応する値を取得する。存在しなければ None。"""
        ...

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """キーと値を保存する。"""
        ...

    @abstractmethod
    async def add_members(self, key: str, values: Sequence[str]) -> None:
        """集合にメンバーを追加する。"""
        ...

    @abstractmethod
    async def remove_members(self, key: str, values: Sequence[str]) -> None:
        """集合からメンバーを削除する。"""
        ...

    @abstractmethod
    async def members(self, key: str) -> set[str]:
        """集合のメンバーを取得する。存在しなければ空集合。"""
        ...

    @abstractmethod
    async def delete(self, *keys: str) -> None:
        """キーを削除する。存在しないキーは無視する。"""
        ...

    @abstractmethod
    async def atomically(self, ops: Sequence[StoreOp]) -> None:
        """複数の操作を不可分な 1 単位として適用する。

        他のクライアントからは全操作の適用前か適用後の状態しか見えない。
        """
        ...

    async def snapshot(
        self, value_keys: Sequence[str], set_keys: Sequence[str]
    ) -> tuple[dict[str, str | None], dict[str, set[str]]]:
        """複数キーをまとめて読み出す。

        デフォルト実装は逐次読み出し。一貫した読み出しを提供できる
        ストアはオーバーライドする。
        """
        values = {key: await self.get(key) for key in value_keys}
        sets = {key: await self.members(key) for key in set_keys}
        return values, sets
