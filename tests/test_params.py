import pytest

from ddnskit.params import copy_url_params

SRC = {"a": ["1", "2"], "b": [""], "c": "3"}


@pytest.mark.parametrize("keys", [None, []])
def test_copy_all_keys(keys):
    dest = {"a": ["old"], "z": ["keep"]}
    copy_url_params(SRC, dest, keys)
    assert dest == {"a": ["1"], "b": [""], "c": ["3"], "z": ["keep"]}


def test_copy_selected_keys_skips_empty_and_missing():
    dest = {}
    copy_url_params(SRC, dest, ["a", "b", "missing"])
    assert dest == {"a": ["1"]}


def test_selected_key_replaces_existing():
    dest = {"c": ["x", "y"]}
    copy_url_params(SRC, dest, ["c"])
    assert dest == {"c": ["3"]}