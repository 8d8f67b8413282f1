"""RedisFeatureStore 実装"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import redis.asyncio as redis
from redis.exceptions import RedisError

from .config import RedisSection
from .exceptions import RolloutError, RolloutErrorCodes
from .store import AddMembers, DeleteKeys, FeatureStore, RemoveMembers, SetValue, StoreOp

logger = logging.getLogger(__name__)


class RedisFeatureStore(FeatureStore):
    """redis.asyncio を使うフィーチャーストア。

    クライアントの decode_responses 設定に関わらず、読み出した bytes は UTF-8 で文字列に戻す。
    Redis のエラーは RolloutError(STORE_ERROR) として呼び出し元に伝播する。
    """

    def __init__(self, client: redis.Redis) -> None:
        self._client = client

    @classmethod
    def from_config(cls, config: RedisSection) -> RedisFeatureStore:
        """接続設定からクライアントを生成する。"""
        client = redis.Redis(
            host=config.host,
            port=config.port,
            password=config.password or None,
            db=config.db,
            decode_responses=True,
        )
        return cls(client)

    async def close(self) -> None:
        await self._client.aclose()

    async def get(self, key: str) -> str | None:
        try:
            return _decode(await self._client.get(key))
        except RedisError as e:
            raise _store_error("GET", e) from e

    async def set(self, key: str, value: str) -> None:
        try:
            await self._client.set(key, value)
        except RedisError as e:
            raise _store_error("SET", e) from e

    async def add_members(self, key: str, values: Sequence[str]) -> None:
        if not values:
            return
        try:
            await self._client.sadd(key, *values)
        except RedisError as e:
            raise _store_error("SADD", e) from e

    async def remove_members(self, key: str, values: Sequence[str]) -> None:
        if not values:
            return
        try:
            await self._client.srem(key, *values)
        except RedisError as e:
            raise _store_error("SREM", e) from e

    async def members(self, key: str) -> set[str]:
        try:
            return _decode_set(await self._client.smembers(key))
        except RedisError as e:
            raise _store_error("SMEMBERS", e) from e

    async def delete(self, *keys: str) -> None:
        if not keys:
            return
        try:
            await self._client.delete(*keys)
        except RedisError as e:
            raise _store_error("DEL", e) from e

    async def atomically(self, ops: Sequence[StoreOp]) -> None:
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                for op in ops:
                    _queue(pipe, op)
                await pipe.execute()
        except RedisError as e:
            raise _store_error("MULTI/EXEC", e) from e

    async def snapshot(
        self, value_keys: Sequence[str], set_keys: Sequence[str]
    ) -> tuple[dict[str, str | None], dict[str, set[str]]]:
        try:
            async with self._client.pipeline(transaction=True) as pipe:
                for key in value_keys:
                    pipe.get(key)
                for key in set_keys:
                    pipe.smembers(key)
                results = await pipe.execute()
        except RedisError as e:
            raise _store_error("MULTI/EXEC", e) from e
        values = {
            key: _decode(value)
            for key, value in zip(value_keys, results[: len(value_keys)])
        }
        sets = {
            key: _decode_set(members)
            for key, members in zip(set_keys, results[len(value_keys) :])
        }
        return values, sets


def _queue(pipe: redis.client.Pipeline, op: StoreOp) -> None:
    # SADD / SREM / DEL は引数が空だとエラーになるため積まない
    if isinstance(op, SetValue):
        pipe.set(op.key, op.value)
    elif isinstance(op, AddMembers):
        if op.values:
            pipe.sadd(op.key, *op.values)
    elif isinstance(op, RemoveMembers):
        if op.values:
            pipe.srem(op.key, *op.values)
    elif isinstance(op, DeleteKeys):
        if op.keys:
            pipe.delete(*op.keys)
    else:
        raise TypeError(f"Unsupported store operation: {op!r}")


def _store_error(command: str, cause: RedisError) -> RolloutError:
    logger.error("Redis command failed", extra={"command": command, "error": str(cause)})
    return RolloutError(
        code=RolloutErrorCodes.STORE_ERROR,
        message=f"Redis {command} failed: {cause}",
        cause=cause,
    )


def _decode(value: str | bytes | None) -> str | None:
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return value


def _decode_set(members: set[str | bytes] | None) -> set[str]:
    return {_decode(member) for member in members or ()}  # type: ignore[misc]
