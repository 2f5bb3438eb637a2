"""Parsing and comparison of semantic version numbers (major.minor.patch)."""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["SemverError", "Version"]

_SEMVER = re.compile(
    r"v?([0-9]+)(\.[0-9]+)?(\.[0-9]+)?"
    r"(-([0-9A-Za-z\-]+(\.[0-9A-Za-z\-]+)*))?"
    r"(\+([0-9A-Za-z\-]+(\.[0-9A-Za-z\-]+)*))?"
)

_UINT64_MAX = 2**64 - 1


class SemverError(ValueError):
    """Raised when a string is not a semantic version."""


def _segment(text: str) -> int:
    value = int(text)
    if value > _UINT64_MAX:
        raise SemverError(f"error parsing version number: {text} is out of range")
    return value


@dataclass(frozen=True, order=True)
class Version:
    """A semantic version; pre-release and build metadata are ignored."""

    major: int
    minor: int = 0
    patch: int = 0

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``text``, accepting an optional leading "v" and missing parts."""
        match = _SEMVER.fullmatch(text)
        if match is None:
            raise SemverError(f"the {text}, it's not a semantic version")
        major = _segment(match.group(1))
        minor = _segment(match.group(2)[1:]) if match.group(2) else 0
        patch = _segment(match.group(3)[1:]) if match.group(3) else 0
        return cls(major, minor, patch)

    def compare(self, other: "Version") -> int:
        """Return -1, 0 or 1 as this version is below, equal to or above ``other``."""
        mine = (self.major, self.minor, self.patch)
        theirs = (other.major, other.minor, other.patch)
        return (mine > theirs) - (mine < theirs)

    def greater_than(self, other: "Version") -> bool:
        return self.compare(other) > 0

    def greater_than_or_equal(self, other: "Version") -> bool:
        return self.compare(other) >= 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"