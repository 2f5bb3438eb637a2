"""Updating the running program to the newest published release."""

from __future__ import annotations

import logging
import os
import sys
from contextlib import closing
from typing import BinaryIO

import requests

from ddnskit.apply import decompress_and_update
from ddnskit.http import create_http_client
from ddnskit.release import _goarch, _goos, detect_latest
from ddnskit.semver import SemverError, Version

__all__ = ["RELEASE_REPO", "self_update", "update_to", "download_asset_from_url"]

RELEASE_REPO = "jeessy2/ddns-go"

_logger = logging.getLogger(__name__)


def _executable_path() -> str:
    if getattr(sys, "frozen", False):
        return sys.executable
    if sys.argv and sys.argv[0]:
        return os.path.abspath(sys.argv[0])
    return ""


def self_update(version: str) -> Version | None:
    """Update to the latest release if it is newer; return the installed version."""
    try:
        current = Version.parse(version)
    except SemverError as err:
        _logger.info("Cannot update because: %s", err)
        return None

    try:
        latest = detect_latest(RELEASE_REPO)
    except Exception as err:  # noqa: BLE001 - any failure only skips the update
        _logger.info("Error happened when detecting latest version: %s", err)
        return None
    if latest is None:
        _logger.info("Cannot find any release for %s/%s", _goos(), _goarch())
        return None
    if current.greater_than_or_equal(latest.version):
        _logger.info("Current version (%s) is the latest", version)
        return None

    exe = _executable_path()
    if not exe:
        _logger.info("Cannot find executable path")
        return None

    try:
        update_to(latest.url, latest.name, exe)
    except Exception as err:  # noqa: BLE001 - reported, the old binary stays
        _logger.info("Error happened when updating binary: %s", err)
        return None

    _logger.info("Success update to v%s", latest.version)
    return latest.version


def update_to(asset_url: str, asset_file_name: str, cmd_path: str) -> None:
    """Download ``asset_url`` and replace the executable at ``cmd_path`` with it."""
    with closing(download_asset_from_url(asset_url)) as src:
        decompress_and_update(src, asset_file_name, cmd_path)


def download_asset_from_url(url: str) -> BinaryIO:
    """Open a streaming download of ``url``; raise ConnectionError on failure."""
    client = create_http_client()
    try:
        response = client.get(url, stream=True)
    except requests.RequestException as err:
        raise ConnectionError(f"could not download release from {url}: {err}") from err
    if response.status_code >= 300:
        response.close()
        raise ConnectionError(
            f"could not download release from {url}. Response code: {response.status_code}"
        )
    raw = response.raw
    if hasattr(raw, "decode_content"):
        raw.decode_content = True
    return raw