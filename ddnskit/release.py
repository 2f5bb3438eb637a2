"""Discovery of the newest published release and its asset for this platform."""

from __future__ import annotations

import logging
import platform
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import requests

from ddnskit.http import HttpStatusError, create_http_client, get_http_response
from ddnskit.messages import log
from ddnskit.semver import SemverError, Version

__all__ = [
    "Asset",
    "Release",
    "Latest",
    "get_latest",
    "detect_latest",
    "find_asset",
    "find_asset_for_arch",
    "find_asset_from_release",
    "asset_match_suffixes",
    "get_suffixes",
    "generate_additional_arch",
]

_logger = logging.getLogger(__name__)

_MIN_ARM = 5
_MAX_ARM = 7
_EXTENSIONS = (".zip", ".tar.gz")
_LATEST_RELEASE_URL = "https://api.github.com/repos/{}/releases/latest"

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "x64": "amd64",
    "i386": "386",
    "i486": "386",
    "i586": "386",
    "i686": "386",
    "x86": "386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "aarch64_be": "arm64",
    "mips": "mips",
    "mipsel": "mipsle",
    "mips64": "mips64",
    "mips64el": "mips64le",
    "ppc64le": "ppc64le",
    "ppc64": "ppc64",
    "riscv64": "riscv64",
    "s390x": "s390x",
    "loongarch64": "loong64",
}
_ARM_VERSION = re.compile(r"armv(\d+)")


def _goos() -> str:
    return platform.system().lower() or "unknown"


def _machine() -> str:
    return platform.machine().lower()


def _goarch() -> str:
    machine = _machine()
    if machine.startswith("arm") and machine not in _ARCH_ALIASES:
        return "arm"
    return _ARCH_ALIASES.get(machine, machine)


def _goarm() -> int:
    match = _ARM_VERSION.match(_machine())
    return int(match.group(1)) if match else 0


@dataclass(frozen=True)
class Asset:
    """A downloadable file attached to a release."""

    name: str
    url: str


@dataclass(frozen=True)
class Release:
    """A tagged release and its assets."""

    tag_name: str
    assets: list[Asset] = field(default_factory=list)

    @classmethod
    def from_response(cls, data: Mapping[str, Any] | None) -> "Release":
        """Build a release from the decoded JSON of the releases API."""
        if data is None:
            data = {}
        if not isinstance(data, Mapping):
            raise ValueError("release data must be a JSON object")
        assets = [
            Asset(item.get("name", ""), item.get("browser_download_url", ""))
            for item in data.get("assets") or []
        ]
        return cls(data.get("tag_name", ""), assets)


@dataclass(frozen=True)
class Latest:
    """The newest release asset for the running system and architecture."""

    name: str
    url: str
    version: Version


def get_latest(repo: str) -> Release:
    """Fetch the latest release of ``repo`` ("owner/name")."""
    client = create_http_client()
    response = client.get(_LATEST_RELEASE_URL.format(repo))
    try:
        return Release.from_response(get_http_response(response))
    except (HttpStatusError, ValueError, requests.RequestException) as err:
        log("异常信息: %s", err)
        raise


def detect_latest(repo: str) -> Latest | None:
    """Return the latest asset for this platform, or None when there is none."""
    found = find_asset(get_latest(repo))
    if found is None:
        return None
    asset, version = found
    return Latest(asset.name, asset.url, version)


def find_asset(release: Release | None) -> tuple[Asset, Version] | None:
    """Try the specific architectures first, then the generic one."""
    for arch in [*generate_additional_arch(), _goarch()]:
        found = find_asset_for_arch(arch, release)
        if found is not None:
            return found
    return None


def find_asset_for_arch(arch: str, release: Release | None) -> tuple[Asset, Version] | None:
    """Return the asset of ``release`` built for ``arch`` and its version."""
    found = find_asset_from_release(release, get_suffixes(arch))
    if found is None:
        _logger.info("Cannot find any release for %s/%s", _goos(), _goarch())
    return found


def find_asset_from_release(
    release: Release | None, suffixes: Iterable[str]
) -> tuple[Asset, Version] | None:
    """Return the first asset whose name ends with one of ``suffixes``."""
    if release is None:
        _logger.info("There is no source release information")
        return None
    try:
        version = Version.parse(release.tag_name)
    except SemverError:
        _logger.info("Cannot parse semantic version: %s", release.tag_name)
        return None
    suffixes = list(suffixes)
    for asset in release.assets:
        if asset_match_suffixes(asset.name, suffixes):
            return asset, version
    _logger.info("Can't find suitable asset in release %s", release.tag_name)
    return None


def asset_match_suffixes(name: str, suffixes: Iterable[str]) -> bool:
    """Whether ``name`` ends with any of ``suffixes``."""
    return any(name.endswith(suffix) for suffix in suffixes)


def get_suffixes(arch: str) -> list[str]:
    """Return the asset name endings to look for on this system and ``arch``."""
    goos = _goos()
    return [f"{goos}_{arch}{ext}" for ext in _EXTENSIONS]


def generate_additional_arch() -> list[str]:
    """Return more specific architecture names to try before the generic one."""
    arch = _goarch()
    goarm = _goarm()
    if arch == "arm" and _MIN_ARM <= goarm <= _MAX_ARM:
        return [f"armv{v}" for v in range(goarm, _MIN_ARM - 1, -1)]
    if arch == "amd64":
        return ["x86_64"]
    return []