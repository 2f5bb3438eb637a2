"""Extraction of the program executable from a downloaded release archive."""

from __future__ import annotations

import io
import logging
import tarfile
import zipfile
import zlib
from typing import BinaryIO, Callable

__all__ = [
    "CannotDecompressFileError",
    "ExecutableNotFoundInArchiveError",
    "decompress_command",
    "unzip",
    "untar",
    "match_executable_name",
]

_logger = logging.getLogger(__name__)

_ARCHIVE_ERRORS = (zipfile.BadZipFile, tarfile.TarError, OSError, EOFError, zlib.error,
                   NotImplementedError, ValueError)


class CannotDecompressFileError(Exception):
    """Raised when an archive cannot be read."""

    def __init__(self, kind: str, reason: object) -> None:
        super().__init__(f"failed to decompress {kind} file: {reason}")


class ExecutableNotFoundInArchiveError(Exception):
    """Raised when an archive holds no file named like the executable."""

    def __init__(self, kind: str, cmd: str) -> None:
        self.cmd = cmd
        super().__init__(f'executable not found in {kind} file: "{cmd}"')


def _basename(name: str) -> str:
    return name.rsplit("/", 1)[-1]


def match_executable_name(cmd: str, target: str) -> bool:
    """Whether ``target`` is ``cmd`` or ``cmd`` with an ".exe" ending."""
    return target in (cmd, cmd + ".exe")


def unzip(src: BinaryIO, cmd: str) -> BinaryIO:
    """Return the contents of the file named ``cmd`` in the zip archive ``src``."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(src.read()))
    except _ARCHIVE_ERRORS as err:
        raise CannotDecompressFileError("zip", err) from err
    with archive:
        for info in archive.infolist():
            if info.is_dir() or not match_executable_name(cmd, _basename(info.filename)):
                continue
            try:
                return io.BytesIO(archive.read(info))
            except _ARCHIVE_ERRORS as err:
                raise CannotDecompressFileError("zip", err) from err
    raise ExecutableNotFoundInArchiveError("zip", cmd)


def untar(src: BinaryIO, cmd: str) -> BinaryIO:
    """Return the contents of the file named ``cmd`` in the tar.gz archive ``src``."""
    try:
        with tarfile.open(fileobj=src, mode="r|gz") as archive:
            for member in archive:
                if member.isdir() or not match_executable_name(cmd, _basename(member.name)):
                    continue
                extracted = archive.extractfile(member)
                return io.BytesIO(extracted.read() if extracted is not None else b"")
    except _ARCHIVE_ERRORS as err:
        raise CannotDecompressFileError("tar.gz", err) from err
    raise ExecutableNotFoundInArchiveError("tar.gz", cmd)


_FILE_TYPES: dict[str, Callable[[BinaryIO, str], BinaryIO]] = {
    ".zip": unzip,
    ".tar.gz": untar,
}


def decompress_command(src: BinaryIO, url: str, cmd: str) -> BinaryIO:
    """Pick the archive format from ``url``'s ending and extract ``cmd``.

    Sources that are not archives are returned unchanged.
    """
    for ext, extract in _FILE_TYPES.items():
        if url.endswith(ext):
            return extract(src, cmd)
    _logger.info("It's not a compressed file, skip decompressing")
    return src