"""Resolution of build files to their install location on the device."""

import logging
from pathlib import Path
from typing import Optional

from .scanner import walk_files

logger = logging.getLogger(__name__)


class DevicePathResolver:
    """Maps build file names to paths inside the package mirror.

    The package mirror is a directory of the build tree whose layout mirrors
    the device filesystem (e.g. ``packages/phone/system/lib/libfoo.z.so`` is
    installed as ``/system/lib/libfoo.z.so``). The mirror is indexed by base
    name on first lookup.
    """

    def __init__(self, package_root: Path):
        """Initialize resolver.

        Args:
            package_root: Root of the package mirror
        """
        self.package_root = package_root
        self._index: Optional[dict[str, list[str]]] = None

    def _build_index(self) -> dict[str, list[str]]:
        index: dict[str, list[str]] = {}

        if not self.package_root.is_dir():
            logger.warning(f"Package directory does not exist: {self.package_root}")
            return index

        for path in walk_files(self.package_root):
            relative_path = path.relative_to(self.package_root).as_posix()
            index.setdefault(path.name, []).append(relative_path)

        for candidates in index.values():
            candidates.sort()

        logger.debug(f"Indexed {len(index)} name(s) under {self.package_root}")
        return index

    def resolve(self, file_name: str) -> list[str]:
        """Find every mirror path whose base name equals ``file_name``.

        Args:
            file_name: Base name of a build file

        Returns:
            Sorted relative POSIX paths; empty when there is no match
        """
        if self._index is None:
            self._index = self._build_index()
        return list(self._index.get(file_name, []))
