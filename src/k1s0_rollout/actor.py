"""アクター ID の解決"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .exceptions import RolloutError, RolloutErrorCodes

IdExtractor = Callable[[Any], str | int | None]


class ActorIdResolver:
    """アクターから正規化済みの文字列 ID を導出する。

    str / int のアクターはそのまま ID として扱う。
    それ以外は構築時に渡された id_extractor で ID を取り出す。
    """

    def __init__(self, id_extractor: IdExtractor | None = None) -> None:
        self._id_extractor = id_extractor

    def resolve(self, actor: Any) -> str:
        """アクターの ID を返す。導出できなければ RolloutError。"""
        if isinstance(actor, (str, int)) and not isinstance(actor, bool):
            return str(actor)
        if self._id_extractor is None:
            raise RolloutError(
                code=RolloutErrorCodes.INVALID_ACTOR,
                message=f"Cannot derive actor id from {type(actor).__name__} without id_extractor",
            )
        try:
            actor_id = self._id_extractor(actor)
        except Exception as e:
            raise RolloutError(
                code=RolloutErrorCodes.INVALID_ACTOR,
                message=f"id_extractor failed for {type(actor).__name__}: {e}",
                cause=e,
            ) from e
        if actor_id is None:
            raise RolloutError(
                code=RolloutErrorCodes.INVALID_ACTOR,
                message=f"id_extractor returned None for {type(actor).__name__}",
            )
        return str(actor_id)

    def resolve_many(self, actors: Any) -> list[str]:
        """複数アクターの ID をまとめて返す。"""
        return [self.resolve(actor) for actor in actors]
