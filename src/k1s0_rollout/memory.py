"""InMemoryFeatureStore 実装"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from .store import AddMembers, DeleteKeys, FeatureStore, RemoveMembers, SetValue, StoreOp


class InMemoryFeatureStore(FeatureStore):
    """テスト用インメモリフィーチャーストア。"""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}
        self._sets: dict[str, set[str]] = {}
        self._lock = asyncio.Lock()

    async def get(self, key: str) -> str | None:
        return self._values.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self._values[key] = value

    async def add_members(self, key: str, values: Sequence[str]) -> None:
        await self.atomically([AddMembers(key, tuple(values))])

    async def remove_members(self, key: str, values: Sequence[str]) -> None:
        await self.atomically([RemoveMembers(key, tuple(values))])

    async def members(self, key: str) -> set[str]:
        return set(self._sets.get(key, ()))

    async def delete(self, *keys: str) -> None:
        await self.atomically([DeleteKeys(tuple(keys))])

    async def atomically(self, ops: Sequence[StoreOp]) -> None:
        async with self._lock:
            values = dict(self._values)
            sets = {key: set(members) for key, members in self._sets.items()}
            for op in ops:
                _apply(op, values, sets)
            self._values = values
            self._sets = sets

    async def snapshot(
        self, value_keys: Sequence[str], set_keys: Sequence[str]
    ) -> tuple[dict[str, str | None], dict[str, set[str]]]:
        async with self._lock:
            values = {key: self._values.get(key) for key in value_keys}
            sets = {key: set(self._sets.get(key, ())) for key in set_keys}
        return values, sets

    def keys(self) -> list[str]:
        """保存されている全キーを返す。"""
        return sorted([*self._values, *self._sets])


def _apply(op: StoreOp, values: dict[str, str], sets: dict[str, set[str]]) -> None:
    if isinstance(op, SetValue):
        values[op.key] = op.value
    elif isinstance(op, AddMembers):
        if op.values:
            sets.setdefault(op.key, set()).update(op.values)
    elif isinstance(op, RemoveMembers):
        members = sets.get(op.key)
        if members is not None:
            members.difference_update(op.values)
            # 空になった集合はキーごと消える
            if not members:
                del sets[op.key]
    elif isinstance(op, DeleteKeys):
        for key in op.keys:
            values.pop(key, None)
            sets.pop(key, None)
    else:
        raise TypeError(f"Unsupported store operation: {op!r}")
