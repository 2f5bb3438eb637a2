import io
import tarfile

import pytest

from ddnskit.apply import apply_update, decompress_and_update
from ddnskit.decompress import ExecutableNotFoundInArchiveError

OLD_FILE = bytes([0xDE, 0xAD, 0xBE, 0xEF])
NEW_FILE = bytes([0x01, 0x02, 0x03, 0x04, 0x05, 0x06])


def _write_old_file(path):
    path.write_bytes(OLD_FILE)
    assert path.exists()


def _tar_gz(members):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for name, data in members.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


def test_apply(tmp_path):
    target = tmp_path / "TestApply"
    _write_old_file(target)
    apply_update(io.BytesIO(NEW_FILE), target)
    assert target.read_bytes() == NEW_FILE


def test_apply_leaves_no_side_files(tmp_path):
    target = tmp_path / "prog"
    _write_old_file(target)
    apply_update(NEW_FILE, str(target))
    assert sorted(p.name for p in tmp_path.iterdir()) == ["prog"]


def test_apply_missing_target_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        apply_update(io.BytesIO(NEW_FILE), tmp_path / "absent")


def test_decompress_and_update(tmp_path):
    target = tmp_path / "prog"
    _write_old_file(target)
    archive = _tar_gz({"dist/prog": NEW_FILE})
    decompress_and_update(io.BytesIO(archive), "prog_linux_amd64.tar.gz", target)
    assert target.read_bytes() == NEW_FILE


def test_decompress_and_update_plain_file(tmp_path):
    target = tmp_path / "prog"
    _write_old_file(target)
    decompress_and_update(io.BytesIO(NEW_FILE), "prog", target)
    assert target.read_bytes() == NEW_FILE


def test_decompress_and_update_missing_executable_keeps_old(tmp_path):
    target = tmp_path / "prog"
    _write_old_file(target)
    archive = _tar_gz({"other": NEW_FILE})
    with pytest.raises(ExecutableNotFoundInArchiveError):
        decompress_and_update(io.BytesIO(archive), "prog.tar.gz", target)
    assert target.read_bytes() == OLD_FILE