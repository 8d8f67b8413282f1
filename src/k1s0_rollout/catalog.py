"""FeatureCatalog: 状態を持つフィーチャー名の集合"""

from __future__ import annotations

from .keys import KeySchema
from .store import AddMembers, DeleteKeys, FeatureStore, RemoveMembers


class FeatureCatalog:
    """永続化された状態を持つ全フィーチャー名のレジストリ。

    add_op / remove_op は状態変更と同じアトミックバッチに
    カタログ更新を含めるための操作を返す。
    """

    def __init__(self, store: FeatureStore, keys: KeySchema) -> None:
        self._store = store
        self._keys = keys

    async def all(self) -> list[str]:
        """カタログ内のフィーチャー名をソートして返す。"""
        return sorted(await self._store.members(self._keys.catalog_key))

    async def add(self, name: str) -> None:
        await self._store.atomically([self.add_op(name)])

    async def remove(self, name: str) -> None:
        await self._store.atomically([self.remove_op(name)])

    async def clear(self) -> None:
        await self._store.atomically([self.clear_op()])

    def add_op(self, name: str) -> AddMembers:
        return AddMembers(self._keys.catalog_key, (name,))

    def remove_op(self, name: str) -> RemoveMembers:
        return RemoveMembers(self._keys.catalog_key, (name,))

    def clear_op(self) -> DeleteKeys:
        return DeleteKeys((self._keys.catalog_key,))
