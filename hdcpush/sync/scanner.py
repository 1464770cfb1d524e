"""Build tree scanning utilities."""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from ..config import SCAN_DIRS
from ..exceptions import ScanError
from ..utils import mtime_from_ns

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildFile:
    """Represents a regular file in the build tree."""

    path: Path
    """Absolute path to the file"""

    mtime: datetime
    """Last modification time (UTC, microsecond precision)"""

    @property
    def name(self) -> str:
        """Base name of the file."""
        return self.path.name

    @classmethod
    def from_entry(cls, entry: os.DirEntry) -> "BuildFile":
        """Create BuildFile from a directory entry.

        Args:
            entry: Entry returned by ``os.scandir``

        Returns:
            BuildFile instance

        Raises:
            ScanError: If the file can't be stat'ed
        """
        try:
            stat = entry.stat(follow_symlinks=False)
        except OSError as e:
            raise ScanError(f"Cannot stat {entry.path}: {e}", Path(entry.path)) from e
        return cls(path=Path(entry.path), mtime=mtime_from_ns(stat.st_mtime_ns))


class BuildTreeScanner:
    """Enumerates regular files under a fixed set of build subtrees.

    Symlinks are neither returned nor followed. Any filesystem error aborts
    the scan, since an incomplete view would corrupt the watermark.

    Examples:
        >>> scanner = BuildTreeScanner()
        >>> files = scanner.scan(Path("/work/openharmony"))
        >>> # Only applications/, base/, out/, ... are walked
    """

    def __init__(self, subdirs: Iterable[str] = SCAN_DIRS):
        """Initialize build tree scanner.

        Args:
            subdirs: Names of subdirectories of the build root to walk
        """
        self.subdirs = list(subdirs)

    def scan(self, build_dir: Path) -> list[BuildFile]:
        """Scan every configured subtree that exists under the build root.

        Args:
            build_dir: Build root directory

        Returns:
            List of BuildFile objects

        Raises:
            ScanError: If a directory or file can't be read
        """
        build_dir = build_dir.absolute()
        files: list[BuildFile] = []

        for name in self.subdirs:
            subtree = build_dir / name
            if not subtree.is_dir():
                logger.debug(f"Skipping missing subtree: {subtree}")
                continue
            files.extend(self.scan_directory(subtree))

        logger.debug(f"Scanned {len(files)} file(s) under {build_dir}")
        return files

    def scan_directory(self, directory: Path) -> list[BuildFile]:
        """Recursively scan a single directory.

        Args:
            directory: Directory to scan

        Returns:
            List of BuildFile objects found below the directory
        """
        files: list[BuildFile] = []

        for entry in _iter_entries(directory):
            if entry.is_dir(follow_symlinks=False):
                files.extend(self.scan_directory(Path(entry.path)))
            elif entry.is_file(follow_symlinks=False):
                files.append(BuildFile.from_entry(entry))

        return files


def _iter_entries(directory: Path) -> list[os.DirEntry]:
    """List a directory, turning OS errors into ScanError."""
    try:
        with os.scandir(directory) as it:
            return list(it)
    except OSError as e:
        raise ScanError(f"Cannot read directory {directory}: {e}", directory) from e


def walk_files(root: Path) -> list[Path]:
    """Recursively list the regular files below a directory.

    Args:
        root: Directory to walk

    Returns:
        Paths of all regular files (symlinks excluded)

    Raises:
        ScanError: If a directory can't be read
    """
    paths: list[Path] = []
    for entry in _iter_entries(root):
        if entry.is_dir(follow_symlinks=False):
            paths.extend(walk_files(Path(entry.path)))
        elif entry.is_file(follow_symlinks=False):
            paths.append(Path(entry.path))
    return paths
