from __future__ import annotations

from relbook.core.structured import (
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_str,
    get_str_map,
    is_str_dict,
)


def test_str_dict_narrowing() -> None:
    assert is_str_dict({"a": 1})
    assert not is_str_dict({1: "a"})
    assert as_str_dict(["a"]) is None
    assert as_obj_list({"a": 1}) is None
    assert as_obj_list([1, "x"]) == [1, "x"]


def test_scalar_getters() -> None:
    table: dict[str, object] = {"name": "  api ", "blank": "  ", "n": 3, "flag": True}
    assert get_str(table, "name") == "api"
    assert get_str(table, "blank") is None
    assert get_str(table, "n") is None
    assert get_int(table, "n") == 3
    assert get_int(table, "flag") is None
    assert get_bool(table, "flag") is True
    assert get_bool(table, "missing") is None


def test_get_str_map_stringifies_numbers() -> None:
    table: dict[str, object] = {
        "env": {"K8S_VERSION": 1.30, "REPLICAS": 2, "NAME": "x", "SKIP": None, "ON": True, "L": []}
    }
    assert get_str_map(table, "env") == {"K8S_VERSION": "1.3", "REPLICAS": "2", "NAME": "x"}
    assert get_str_map(table, "missing") == {}
