"""Detection of the runtime environment and default file locations."""

from __future__ import annotations

import os
import subprocess
import time
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

__all__ = [
    "DOCKER_ENV_FILE",
    "CONFIG_FILE_PATH_ENV",
    "is_run_in_docker",
    "is_termux",
    "get_config_file_path",
    "get_config_file_path_default",
    "fix_timezone",
]

DOCKER_ENV_FILE = "/.dockerenv"
CONFIG_FILE_PATH_ENV = "DDNS_CONFIG_FILE_PATH"
_TERMUX_PREFIX = "/data/data/com.termux/files/usr"
_CONFIG_FILE_NAME = ".ddns_go_config.yaml"
_GETPROP = "/system/bin/getprop"


def is_run_in_docker() -> bool:
    """Whether the process runs inside a Docker container."""
    return os.path.exists(DOCKER_ENV_FILE)


def is_termux() -> bool:
    """Whether the process runs inside Termux."""
    return os.environ.get("PREFIX") == _TERMUX_PREFIX


def get_config_file_path() -> str:
    """Return the config path from the environment, else the default one."""
    return os.environ.get(CONFIG_FILE_PATH_ENV) or get_config_file_path_default()


def get_config_file_path_default() -> str:
    """Return the config file in the home directory, or a relative fallback."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError):
        return "../" + _CONFIG_FILE_NAME
    return str(home) + os.sep + _CONFIG_FILE_NAME


def fix_timezone() -> str | None:
    """Adopt the Android system time zone; return its name, or None if unavailable."""
    try:
        result = subprocess.run(
            [_GETPROP, "persist.sys.timezone"], capture_output=True, check=True
        )
    except (OSError, subprocess.CalledProcessError):
        return None
    name = result.stdout.decode(errors="replace").strip()
    if name in ("", "UTC"):
        name = "UTC"
    else:
        try:
            ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            return None
    os.environ["TZ"] = name
    if hasattr(time, "tzset"):
        time.tzset()
    return name