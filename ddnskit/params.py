"""Copying of URL query parameters between multi-value mappings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping

__all__ = ["copy_url_params"]


def _first(values: "str | Iterable[str]") -> str:
    if isinstance(values, str):
        return values
    return next(iter(values), "")


def copy_url_params(
    src: Mapping[str, "str | Iterable[str]"],
    dest: MutableMapping[str, list[str]],
    keys: Iterable[str] | None,
) -> None:
    """Copy the first value of each key into ``dest``.

    With no keys every key is copied; with keys only those having a
    non-empty value are.
    """
    keys = list(keys) if keys else []
    if not keys:
        for key, values in src.items():
            dest[key] = [_first(values)]
        return
    for key in keys:
        value = _first(src.get(key, ()))
        if value:
            dest[key] = [value]