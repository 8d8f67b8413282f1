"""パーセンテージロールアウトのバケット判定"""

from __future__ import annotations

import zlib

# CRC-32 の値域 [0, 2^32 - 1] を 100 等分した幅
RAND_BASE: float = (2**32 - 1) / 100.0


def bucket_key(actor_id: str, feature: str, salted: bool = False) -> str:
    """CRC-32 を計算する対象文字列を返す。

    salted が True の場合はフィーチャー名を連結し、
    同じアクターが全フィーチャーで同じバケットに入らないようにする。
    """
    if salted:
        return actor_id + feature
    return actor_id


def in_percentage(
    actor_id: str,
    feature: str,
    percentage: float,
    salted: bool = False,
) -> bool:
    """アクターがパーセンテージの範囲に含まれるか判定する。

    Args:
        actor_id: アクターの正規化済み ID
        feature: フィーチャー名
        percentage: ロールアウト率 (0-100)
        salted: フィーチャー名をバケットキーに混ぜるか

    Returns:
        CRC-32(バケットキー) < percentage * RAND_BASE なら True
    """
    checksum = zlib.crc32(bucket_key(actor_id, feature, salted).encode("utf-8"))
    return checksum < percentage * RAND_BASE
