"""Tests for the build tree scanner."""

import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

from hdcpush.exceptions import ScanError
from hdcpush.sync.scanner import BuildFile, BuildTreeScanner, walk_files


def _write(path: Path, content: str = "data", mtime: int = 1_700_000_000) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    os.utime(path, (mtime, mtime))
    return path


class TestBuildTreeScanner:
    """Tests for BuildTreeScanner."""

    @pytest.fixture
    def temp_dir(self):
        """Create a temporary directory for testing."""
        with tempfile.TemporaryDirectory() as tmpdir:
            yield Path(tmpdir)

    def test_scan_only_configured_subtrees(self, temp_dir):
        """Files outside the configured subtrees are ignored."""
        _write(temp_dir / "out" / "a.so")
        _write(temp_dir / "base" / "deep" / "nested" / "b.so")
        _write(temp_dir / "docs" / "c.md")
        _write(temp_dir / "top.txt")

        scanner = BuildTreeScanner(subdirs=["out", "base"])
        files = scanner.scan(temp_dir)

        names = sorted(f.name for f in files)
        assert names == ["a.so", "b.so"]

    def test_missing_subtree_is_skipped(self, temp_dir):
        """Subtrees that don't exist are not an error."""
        _write(temp_dir / "out" / "a.so")

        scanner = BuildTreeScanner(subdirs=["kernel", "out", "vendor"])
        files = scanner.scan(temp_dir)

        assert [f.name for f in files] == ["a.so"]

    def test_subtree_that_is_a_file_is_skipped(self, temp_dir):
        """A regular file named like a subtree is not scanned."""
        _write(temp_dir / "out")

        files = BuildTreeScanner(subdirs=["out"]).scan(temp_dir)

        assert files == []

    def test_empty_tree(self, temp_dir):
        """Scanning a tree without any subtree returns nothing."""
        assert BuildTreeScanner().scan(temp_dir) == []

    def test_returns_absolute_paths_and_mtime(self, temp_dir):
        """Scanned files carry absolute paths and UTC modification times."""
        _write(temp_dir / "out" / "a.so", mtime=1_700_000_123)

        files = BuildTreeScanner(subdirs=["out"]).scan(temp_dir)

        assert len(files) == 1
        assert files[0].path.is_absolute()
        assert files[0].path == (temp_dir / "out" / "a.so").absolute()
        assert files[0].mtime == datetime.fromtimestamp(
            1_700_000_123, tz=timezone.utc
        )

    def test_symlinks_are_excluded(self, temp_dir):
        """Symlinks to files and directories are neither returned nor followed."""
        real = _write(temp_dir / "elsewhere" / "real.so")
        _write(temp_dir / "out" / "a.so")
        os.symlink(real, temp_dir / "out" / "link.so")
        os.symlink(temp_dir / "elsewhere", temp_dir / "out" / "linkdir")

        files = BuildTreeScanner(subdirs=["out"]).scan(temp_dir)

        assert [f.name for f in files] == ["a.so"]

    def test_unreadable_directory_is_fatal(self, temp_dir, monkeypatch):
        """A filesystem error during the walk aborts the scan."""
        _write(temp_dir / "out" / "a.so")

        def broken_scandir(path):
            raise PermissionError(13, "Permission denied", str(path))

        monkeypatch.setattr("hdcpush.sync.scanner.os.scandir", broken_scandir)

        with pytest.raises(ScanError, match="Cannot read directory"):
            BuildTreeScanner(subdirs=["out"]).scan(temp_dir)


class TestBuildFile:
    """Tests for BuildFile."""

    def test_name(self):
        """The name is the base name of the path."""
        build_file = BuildFile(
            path=Path("/work/out/lib/libfoo.z.so"),
            mtime=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert build_file.name == "libfoo.z.so"


class TestWalkFiles:
    """Tests for walk_files."""

    def test_walk_files_recursive(self, tmp_path):
        """All regular files below the root are listed."""
        _write(tmp_path / "a" / "b" / "c.txt")
        _write(tmp_path / "d.txt")

        paths = sorted(p.relative_to(tmp_path).as_posix() for p in walk_files(tmp_path))

        assert paths == ["a/b/c.txt", "d.txt"]
