"""Safe in-place replacement of an executable file."""

from __future__ import annotations

import contextlib
import os
import subprocess
import sys
from typing import BinaryIO

from ddnskit.decompress import decompress_command

__all__ = ["apply_update", "decompress_and_update"]


def apply_update(update: BinaryIO | bytes, target_path: str | os.PathLike) -> None:
    """Replace ``target_path`` with the contents of ``update``.

    The new contents go to "<target>.new", the target is moved to
    "<target>.old", the new file is moved into place and the old one
    removed. If the final move fails the old file is moved back.
    """
    new_bytes = update.read() if hasattr(update, "read") else bytes(update)
    target = os.fspath(target_path)
    directory, filename = os.path.split(target)

    new_path = os.path.join(directory, f"{filename}.new")
    fd = os.open(new_path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o755)
    with os.fdopen(fd, "wb") as fp:
        fp.write(new_bytes)

    old_path = os.path.join(directory, f"{filename}.old")
    with contextlib.suppress(OSError):
        os.remove(old_path)

    os.rename(target, old_path)
    try:
        os.rename(new_path, target)
    except OSError:
        with contextlib.suppress(OSError):
            os.rename(old_path, target)
        raise

    try:
        os.remove(old_path)
    except OSError:
        if sys.platform == "win32":
            # A running executable cannot be deleted; remove it once this process exits.
            subprocess.Popen(
                ["cmd.exe", "/c", f"ping 127.0.0.1 -n 2 > NUL & del {old_path}"]
            )
            return
        raise


def decompress_and_update(src: BinaryIO, asset_name: str, cmd_path: str | os.PathLike) -> None:
    """Extract the executable named like ``cmd_path`` from ``src`` and install it there."""
    cmd = os.path.basename(os.fspath(cmd_path))
    asset = decompress_command(src, asset_name, cmd)
    apply_update(asset, cmd_path)