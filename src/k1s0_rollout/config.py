"""rollout 設定（pydantic BaseModel）と読み込み"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from .exceptions import RolloutError, RolloutErrorCodes


class RedisSection(BaseModel):
    """Redis 接続設定。"""

    host: str = "localhost"
    port: int = Field(default=6379, ge=1, le=65535)
    password: str = ""
    db: int = Field(default=0, ge=0)


class RolloutConfig(BaseModel):
    """rollout 設定全体。"""

    key_prefix: str = Field(default="feature", min_length=1)
    randomize_percentage: bool = False
    redis: RedisSection | None = None


def load_config(path: Path) -> RolloutConfig:
    """YAML ファイルを読み込んで RolloutConfig を返す。

    トップレベルに rollout セクションがあればそれを、
    なければファイル全体を設定として扱う。
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise RolloutError(
            code=RolloutErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data: dict[str, Any] = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise RolloutError(
            code=RolloutErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if isinstance(data, dict) and "rollout" in data:
        data = data["rollout"] or {}
    try:
        return RolloutConfig.model_validate(data)
    except ValidationError as e:
        raise RolloutError(
            code=RolloutErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
