"""rollout モデルのユニットテスト"""

import logging

from k1s0_rollout.models import (
    FeatureState,
    decode_data,
    decode_percentage,
    encode_data,
    encode_percentage,
)


def test_feature_state_defaults() -> None:
    """FeatureState のデフォルト値。"""
    state = FeatureState(name="f")
    assert state.percentage == 0.0
    assert state.users == set()
    assert state.groups == set()
    assert state.data == {}
    assert state.is_fully_active is False


def test_from_raw_absent_values() -> None:
    """欠損値は 0 と空辞書になること。"""
    state = FeatureState.from_raw("f", None, set(), set(), None)
    assert state.percentage == 0.0
    assert state.data == {}


def test_from_raw_values() -> None:
    """保存値から状態が組み立てられること。"""
    state = FeatureState.from_raw("f", "12.5", {"1", "2"}, {"beta"}, '{"a": 1}')
    assert state.name == "f"
    assert state.percentage == 12.5
    assert state.users == {"1", "2"}
    assert state.groups == {"beta"}
    assert state.data == {"a": 1}


def test_to_dict_sorts_sets() -> None:
    """to_dict は users / groups をソート済みリストで返すこと。"""
    state = FeatureState("f", 100, {"b", "a"}, {"z", "y"}, {"k": "v"})
    assert state.to_dict() == {
        "percentage": 100,
        "users": ["a", "b"],
        "groups": ["y", "z"],
        "data": {"k": "v"},
    }


def test_encode_percentage_integer() -> None:
    """整数値は小数点なしで保存されること。"""
    assert encode_percentage(100) == "100"
    assert encode_percentage(10.0) == "10"


def test_encode_percentage_fraction() -> None:
    """小数値はそのまま保存されること。"""
    assert encode_percentage(12.5) == "12.5"


def test_decode_percentage_invalid(caplog) -> None:
    """不正なパーセンテージは 0 として扱い警告を出すこと。"""
    with caplog.at_level(logging.WARNING):
        assert decode_percentage("abc", feature="f") == 0.0
    assert "Unparsable percentage" in caplog.text


def test_decode_percentage_blank() -> None:
    """空白のパーセンテージは 0。"""
    assert decode_percentage("  ") == 0.0


def test_decode_data_blank() -> None:
    """空白のメタデータは空辞書。"""
    assert decode_data("   ") == {}


def test_decode_data_invalid_json() -> None:
    """不正な JSON は空辞書。"""
    assert decode_data("{not json") == {}


def test_decode_data_non_object() -> None:
    """JSON オブジェクト以外は空辞書。"""
    assert decode_data("[1, 2]") == {}


def test_data_round_trip() -> None:
    """メタデータのエンコードとデコード。"""
    data = {"a": 1, "b": [1, 2], "c": {"d": None}}
    assert decode_data(encode_data(data)) == data
