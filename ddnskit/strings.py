"""Small string helpers: concatenation, host names, lines, ordinals, escaping."""

from __future__ import annotations

__all__ = [
    "write_string",
    "to_hostname",
    "split_lines",
    "ordinal",
    "should_escape",
    "escape",
]

_HEX = "0123456789ABCDEF"
_UNRESERVED = frozenset(
    b"ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789_-~."
)


def write_string(*args: str) -> str:
    """Concatenate the given strings."""
    return "".join(args)


def to_hostname(url: str) -> str:
    """Strip an https scheme and any path, leaving the host name."""
    stripped = url.removeprefix("https://")
    return stripped.split("/")[0]


def split_lines(s: str) -> list[str]:
    """Split on CRLF when the text contains any, else on LF."""
    if "\r\n" in s:
        return s.split("\r\n")
    return s.split("\n")


def _trunc_mod(a: int, b: int) -> int:
    r = abs(a) % b
    return -r if a < 0 else r


def ordinal(x: int, lang: str) -> str:
    """Return ``x`` with an English ordinal suffix; Chinese takes none."""
    s = str(x)
    if lang == "zh":
        return s
    suffix = "th"
    last, last_two = _trunc_mod(x, 10), _trunc_mod(x, 100)
    if last == 1 and last_two != 11:
        suffix = "st"
    elif last == 2 and last_two != 12:
        suffix = "nd"
    elif last == 3 and last_two != 13:
        suffix = "rd"
    return s + suffix


def should_escape(c: int) -> bool:
    """Whether the byte ``c`` must be percent-encoded."""
    return c not in _UNRESERVED


def escape(s: str) -> str:
    """Percent-encode every byte of ``s`` outside the unreserved set."""
    out = []
    for c in s.encode("utf-8"):
        if should_escape(c):
            out.append("%" + _HEX[c >> 4] + _HEX[c & 15])
        else:
            out.append(chr(c))
    return "".join(out)