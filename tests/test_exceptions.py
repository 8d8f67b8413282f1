"""RolloutError / RolloutErrorCodes のユニットテスト"""

from k1s0_rollout import RolloutError, RolloutErrorCodes


def test_rollout_error_str() -> None:
    """RolloutError の str 表現が 'CODE: message' 形式であること。"""
    err = RolloutError(code=RolloutErrorCodes.STORE_ERROR, message="redis down")
    assert str(err) == "STORE_ERROR: redis down"
    assert err.code == RolloutErrorCodes.STORE_ERROR


def test_rollout_error_with_cause() -> None:
    """cause を指定すると __cause__ が設定されること。"""
    cause = ValueError("original error")
    err = RolloutError(code=RolloutErrorCodes.INVALID_ACTOR, message="bad", cause=cause)
    assert err.__cause__ is cause


def test_rollout_error_codes_constants() -> None:
    """RolloutErrorCodes の定数が正しい値を持つこと。"""
    assert RolloutErrorCodes.STORE_ERROR == "STORE_ERROR"
    assert RolloutErrorCodes.INVALID_ACTOR == "INVALID_ACTOR"
    assert RolloutErrorCodes.READ_FILE == "READ_FILE_ERROR"
    assert RolloutErrorCodes.PARSE_YAML == "PARSE_YAML_ERROR"
    assert RolloutErrorCodes.VALIDATION == "VALIDATION_ERROR"
