# SPDX-FileCopyrightText: 2025 Weibo, Inc.
#
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for everywhere/archive.py module."""

import os
import zipfile
from pathlib import Path

import pytest

from everywhere.archive import (
    TEMP_PREFIX,
    create_zip_from_dir,
    create_zip_from_file,
    detect_format,
    is_archive,
    new_temp_archive,
    staged_archive,
)
from everywhere.errors import FilesystemError


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "myproject"
    (root / "src" / "pkg").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "README.md").write_text("# readme\n")
    (root / "src" / "main.py").write_text("print('hi')\n")
    (root / "src" / "pkg" / "data.bin").write_bytes(bytes(range(256)))
    return root


def _walk_relative(root: Path) -> set:
    names = set()
    for path in root.rglob("*"):
        rel = path.relative_to(root).as_posix()
        names.add(rel + "/" if path.is_dir() else rel)
    return names


class TestArchiveNames:
    """Tests for is_archive and detect_format."""

    @pytest.mark.parametrize(
        "path", ["a.zip", "b.tar.gz", "c.tgz", "D.ZIP", "dir/e.TAR.GZ"]
    )
    def test_recognized_archives(self, path):
        assert is_archive(path)

    @pytest.mark.parametrize("path", ["a.py", "b.tar", "c.gz", "zip", "archive"])
    def test_non_archives(self, path):
        assert not is_archive(path)

    def test_detect_format(self):
        assert detect_format("/tmp/x.tar.gz") == "tar.gz"
        assert detect_format("/tmp/x.TGZ") == "tar.gz"
        assert detect_format("/tmp/x.zip") == "zip"
        assert detect_format("/tmp/everywhere-upload-123.zip") == "zip"


class TestCreateZipFromDir:
    """Tests for create_zip_from_dir function."""

    def test_entries_match_tree(self, project: Path, tmp_path: Path):
        """Every file and sub-directory appears once, relative to the root."""
        dest = str(tmp_path / "out.zip")
        result = create_zip_from_dir(str(project), dest)

        assert result == dest
        with zipfile.ZipFile(result) as zf:
            names = zf.namelist()

        assert len(names) == len(set(names))
        assert set(names) == _walk_relative(project)
        assert set(names) == {
            "README.md",
            "empty/",
            "src/",
            "src/main.py",
            "src/pkg/",
            "src/pkg/data.bin",
        }

    def test_no_root_entry(self, project: Path, tmp_path: Path):
        dest = create_zip_from_dir(str(project), str(tmp_path / "out.zip"))
        with zipfile.ZipFile(dest) as zf:
            names = zf.namelist()
        assert "" not in names
        assert "/" not in names
        assert "./" not in names
        assert not any(name.startswith("myproject") for name in names)

    def test_files_deflated_with_same_bytes(self, project: Path, tmp_path: Path):
        dest = create_zip_from_dir(str(project), str(tmp_path / "out.zip"))
        with zipfile.ZipFile(dest) as zf:
            info = zf.getinfo("src/pkg/data.bin")
            assert info.compress_type == zipfile.ZIP_DEFLATED
            assert zf.read("src/pkg/data.bin") == bytes(range(256))
            assert zf.read("src/main.py") == b"print('hi')\n"

    def test_directory_entries_are_empty(self, project: Path, tmp_path: Path):
        dest = create_zip_from_dir(str(project), str(tmp_path / "out.zip"))
        with zipfile.ZipFile(dest) as zf:
            info = zf.getinfo("src/")
            assert info.is_dir()
            assert info.file_size == 0

    def test_sorted_entry_order(self, project: Path, tmp_path: Path):
        first = create_zip_from_dir(str(project), str(tmp_path / "a.zip"))
        second = create_zip_from_dir(str(project), str(tmp_path / "b.zip"))
        with zipfile.ZipFile(first) as a, zipfile.ZipFile(second) as b:
            assert a.namelist() == b.namelist()

    def test_default_destination_is_temp_file(self, project: Path):
        result = create_zip_from_dir(str(project))
        try:
            assert os.path.basename(result).startswith(TEMP_PREFIX)
            assert result.endswith(".zip")
            assert zipfile.is_zipfile(result)
        finally:
            os.remove(result)

    def test_missing_directory_raises(self, tmp_path: Path):
        with pytest.raises(FilesystemError):
            create_zip_from_dir(str(tmp_path / "missing"), str(tmp_path / "out.zip"))

    def test_pre_1980_mtime_is_clamped(self, tmp_path: Path):
        src = tmp_path / "old"
        src.mkdir()
        old_file = src / "legacy.txt"
        old_file.write_text("old")
        os.utime(old_file, (0, 0))

        dest = create_zip_from_dir(str(src), str(tmp_path / "out.zip"))

        with zipfile.ZipFile(dest) as zf:
            assert zf.read("legacy.txt") == b"old"
            assert zf.getinfo("legacy.txt").date_time[0] == 1980


class TestCreateZipFromFile:
    """Tests for create_zip_from_file function."""

    def test_single_entry_named_by_basename(self, project: Path, tmp_path: Path):
        dest = create_zip_from_file(
            str(project / "src" / "main.py"), str(tmp_path / "out.zip")
        )
        with zipfile.ZipFile(dest) as zf:
            assert zf.namelist() == ["main.py"]
            assert zf.getinfo("main.py").compress_type == zipfile.ZIP_DEFLATED
            assert zf.read("main.py") == b"print('hi')\n"

    def test_missing_file_raises(self, tmp_path: Path):
        with pytest.raises(FilesystemError):
            create_zip_from_file(str(tmp_path / "nope.txt"), str(tmp_path / "out.zip"))

    def test_pre_1980_mtime_is_clamped(self, tmp_path: Path):
        old_file = tmp_path / "legacy.txt"
        old_file.write_text("old")
        os.utime(old_file, (0, 0))

        dest = create_zip_from_file(str(old_file), str(tmp_path / "out.zip"))

        with zipfile.ZipFile(dest) as zf:
            assert zf.namelist() == ["legacy.txt"]
            assert zf.getinfo("legacy.txt").date_time[0] == 1980


class TestStagedArchive:
    """Tests for the staged_archive context manager."""

    def test_directory_is_zipped_and_removed(self, project: Path):
        with staged_archive(str(project)) as archive_path:
            assert os.path.basename(archive_path).startswith(TEMP_PREFIX)
            with zipfile.ZipFile(archive_path) as zf:
                assert "src/main.py" in zf.namelist()
        assert not os.path.exists(archive_path)

    def test_temp_archive_removed_on_failure(self, project: Path):
        seen = []
        with pytest.raises(RuntimeError):
            with staged_archive(str(project)) as archive_path:
                seen.append(archive_path)
                raise RuntimeError("upload failed")
        assert seen
        assert not os.path.exists(seen[0])

    def test_plain_file_is_zipped(self, project: Path):
        with staged_archive(str(project / "README.md")) as archive_path:
            assert archive_path.endswith(".zip")
            with zipfile.ZipFile(archive_path) as zf:
                assert zf.namelist() == ["README.md"]
        assert not os.path.exists(archive_path)

    def test_existing_archive_passed_through(self, tmp_path: Path):
        tarball = tmp_path / "bundle.tar.gz"
        tarball.write_bytes(b"not really a tarball")

        with staged_archive(str(tarball)) as archive_path:
            assert archive_path == str(tarball)
        assert tarball.exists()

    def test_new_temp_archive(self):
        path = new_temp_archive()
        try:
            assert os.path.exists(path)
            assert os.path.basename(path).startswith(TEMP_PREFIX)
        finally:
            os.remove(path)
