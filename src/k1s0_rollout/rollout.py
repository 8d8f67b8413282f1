"""Rollout: フィーチャーの有効判定と状態変更"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from .actor import ActorIdResolver, IdExtractor
from .bucketing import in_percentage
from .catalog import FeatureCatalog
from .config import RolloutConfig
from .exceptions import RolloutError, RolloutErrorCodes
from .groups import GroupPredicate, GroupRegistry
from .keys import KeySchema
from .models import FeatureState, decode_data, encode_data, encode_percentage
from .redis_store import RedisFeatureStore
from .store import AddMembers, DeleteKeys, FeatureStore, RemoveMembers, SetValue, StoreOp

logger = logging.getLogger(__name__)


class Rollout:
    """フィーチャーフラグの判定エンジン。

    状態はすべて FeatureStore 上にあり、プロセス内ロックは持たない。
    状態変更は 1 回のアトミックバッチで属性とカタログを同時に更新する。
    """

    def __init__(
        self,
        store: FeatureStore,
        config: RolloutConfig | None = None,
        id_extractor: IdExtractor | None = None,
    ) -> None:
        self._store = store
        self._config = config or RolloutConfig()
        self._keys = KeySchema(prefix=self._config.key_prefix)
        self._catalog = FeatureCatalog(store, self._keys)
        self._groups = GroupRegistry()
        self._actors = ActorIdResolver(id_extractor)

    @classmethod
    def from_config(
        cls, config: RolloutConfig, id_extractor: IdExtractor | None = None
    ) -> Rollout:
        """設定の redis セクションから RedisFeatureStore を使うインスタンスを生成する。"""
        if config.redis is None:
            raise RolloutError(
                code=RolloutErrorCodes.VALIDATION,
                message="redis section is required to build a Redis-backed Rollout",
            )
        return cls(RedisFeatureStore.from_config(config.redis), config, id_extractor)

    @property
    def catalog(self) -> FeatureCatalog:
        return self._catalog

    @property
    def groups(self) -> GroupRegistry:
        return self._groups

    # --- 状態変更 ---

    async def activate(self, feature: str) -> None:
        """全アクターに対して有効化する。"""
        await self.activate_percentage(feature, 100)

    async def deactivate(self, feature: str) -> None:
        """パーセンテージ・ユーザー・グループ・メタデータをすべて消去する。

        カタログのエントリは残る。
        """
        await self._commit(
            feature, [DeleteKeys(self._keys.attribute_keys(feature))], "deactivate"
        )

    async def delete(self, feature: str) -> None:
        """フィーチャーをカタログと全属性ごと削除する。存在しなければ何もしない。"""
        await self._store.atomically(
            [
                self._catalog.remove_op(feature),
                DeleteKeys(self._keys.attribute_keys(feature)),
            ]
        )
        logger.debug("Feature deleted", extra={"feature": feature})

    async def set(self, feature: str, desired_state: bool) -> None:
        if desired_state:
            await self.activate(feature)
        else:
            await self.deactivate(feature)

    async def activate_percentage(self, feature: str, percentage: float) -> None:
        await self._commit(
            feature,
            [SetValue(self._keys.percentage_key(feature), encode_percentage(percentage))],
            "activate_percentage",
        )

    async def deactivate_percentage(self, feature: str) -> None:
        await self.activate_percentage(feature, 0)

    async def activate_group(self, feature: str, group: str) -> None:
        await self._commit(
            feature, [AddMembers(self._keys.groups_key(feature), (group,))], "activate_group"
        )

    async def deactivate_group(self, feature: str, group: str) -> None:
        await self._commit(
            feature,
            [RemoveMembers(self._keys.groups_key(feature), (group,))],
            "deactivate_group",
        )

    async def activate_user(self, feature: str, actor: Any) -> None:
        await self.activate_users(feature, [actor])

    async def deactivate_user(self, feature: str, actor: Any) -> None:
        await self.deactivate_users(feature, [actor])

    async def activate_users(self, feature: str, actors: Iterable[Any]) -> None:
        ids = tuple(self._actors.resolve_many(actors))
        await self._commit(
            feature, [AddMembers(self._keys.users_key(feature), ids)], "activate_users"
        )

    async def deactivate_users(self, feature: str, actors: Iterable[Any]) -> None:
        ids = tuple(self._actors.resolve_many(actors))
        await self._commit(
            feature, [RemoveMembers(self._keys.users_key(feature), ids)], "deactivate_users"
        )

    async def set_feature_data(self, feature: str, data: Any) -> None:
        """メタデータを浅くマージする。マッピング以外は無視する。

        読み出しとマージ結果の書き込みの間に他の書き込みがあった場合、
        後からコミットされた方が残る。
        """
        if not isinstance(data, Mapping):
            logger.debug(
                "Ignoring non-mapping feature data",
                extra={"feature": feature, "type": type(data).__name__},
            )
            return
        data_key = self._keys.data_key(feature)
        current = decode_data(await self._store.get(data_key), feature=feature)
        current.update(data)
        await self._commit(
            feature, [SetValue(data_key, encode_data(current))], "set_feature_data"
        )

    async def clear_feature_data(self, feature: str) -> None:
        await self._commit(
            feature,
            [SetValue(self._keys.data_key(feature), encode_data({}))],
            "clear_feature_data",
        )

    async def clear(self) -> None:
        """カタログにある全フィーチャーの状態とカタログ自体を削除する。

        カタログの読み出しと削除バッチは別操作のため、その間に初めて書き込まれた
        フィーチャーは状態が残りカタログからは消える。
        """
        features = await self._catalog.all()
        keys = [key for feature in features for key in self._keys.attribute_keys(feature)]
        await self._store.atomically([DeleteKeys(tuple(keys)), self._catalog.clear_op()])
        logger.debug("All features cleared", extra={"count": len(features)})

    # --- グループ ---

    def define_group(
        self, group: str, predicate: GroupPredicate | Callable[[Any], bool]
    ) -> None:
        self._groups.define(group, predicate)

    def active_in_group(self, group: str, actor: Any) -> bool:
        return self._groups.matches(group, actor)

    # --- 読み出しと判定 ---

    async def get(self, feature: str) -> FeatureState:
        """フィーチャーの状態を読み出す。未保存なら空の状態を返す。"""
        value_keys = (self._keys.percentage_key(feature), self._keys.data_key(feature))
        set_keys = (self._keys.users_key(feature), self._keys.groups_key(feature))
        values, sets = await self._store.snapshot(value_keys, set_keys)
        return FeatureState.from_raw(
            name=feature,
            percentage=values[value_keys[0]],
            users=sets[set_keys[0]],
            groups=sets[set_keys[1]],
            data=values[value_keys[1]],
        )

    async def multi_get(self, *features: str) -> list[FeatureState]:
        return [await self.get(feature) for feature in features]

    async def is_active(self, feature: str, actor: Any = None) -> bool:
        return self.evaluate(await self.get(feature), actor)

    async def is_inactive(self, feature: str, actor: Any = None) -> bool:
        return not await self.is_active(feature, actor)

    async def user_in_active_users(self, feature: str, actor: Any = None) -> bool:
        """アクター ID がユーザー許可リストにあるか。パーセンテージとグループは見ない。"""
        if actor is None:
            return False
        state = await self.get(feature)
        return self._actors.resolve(actor) in state.users

    def evaluate(self, state: FeatureState, actor: Any = None) -> bool:
        """読み出し済みの状態に対してアクターの有効判定を行う。"""
        # 100% はアクター ID を導出できなくても有効
        if state.is_fully_active:
            return True
        if actor is None:
            return False
        actor_id = self._actors.resolve(actor)
        return (
            in_percentage(
                actor_id,
                state.name,
                state.percentage,
                salted=self._config.randomize_percentage,
            )
            or actor_id in state.users
            or any(self._groups.matches(group, actor) for group in state.groups)
        )

    async def features(self) -> list[str]:
        return await self._catalog.all()

    async def feature_states(self, actor: Any = None) -> dict[str, bool]:
        """カタログの全フィーチャーについて判定結果を返す。"""
        features = await self.features()
        results = await asyncio.gather(
            *(self.is_active(feature, actor) for feature in features)
        )
        return dict(zip(features, results))

    async def active_features(self, actor: Any = None) -> list[str]:
        states = await self.feature_states(actor)
        return [feature for feature, active in states.items() if active]

    async def _commit(self, feature: str, ops: Sequence[StoreOp], action: str) -> None:
        await self._store.atomically([*ops, self._catalog.add_op(feature)])
        logger.debug("Feature updated", extra={"feature": feature, "action": action})
