"""グループ述語とレジストリ"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

ALL_GROUP = "all"


class GroupPredicate(ABC):
    """アクターがグループに属するか判定する述語。"""

    @abstractmethod
    def matches(self, actor: Any) -> bool:
        """アクターがグループに属するなら True。"""
        ...


class CallableGroup(GroupPredicate):
    """関数をラップしたグループ述語。"""

    def __init__(self, func: Callable[[Any], bool]) -> None:
        self._func = func

    def matches(self, actor: Any) -> bool:
        return bool(self._func(actor))


class _AllGroup(GroupPredicate):
    def matches(self, actor: Any) -> bool:
        return True


class GroupRegistry:
    """グループ名から述語へのプロセスローカルなマッピング。

    組み込みグループ "all" は常に True を返す。
    """

    def __init__(self) -> None:
        self._groups: dict[str, GroupPredicate] = {ALL_GROUP: _AllGroup()}

    def define(
        self, name: str, predicate: GroupPredicate | Callable[[Any], bool]
    ) -> None:
        """グループを登録する。同名のグループは上書きする。"""
        if not isinstance(predicate, GroupPredicate):
            predicate = CallableGroup(predicate)
        self._groups[name] = predicate

    def get(self, name: str) -> GroupPredicate | None:
        return self._groups.get(name)

    def matches(self, name: str, actor: Any) -> bool:
        """登録済みグループの判定結果。未登録のグループは False。"""
        predicate = self.get(name)
        return predicate is not None and predicate.matches(actor)
