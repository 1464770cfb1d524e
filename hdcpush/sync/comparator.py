"""Change detection against a per-device watermark."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..utils import MIN_WATERMARK
from .scanner import BuildFile


@dataclass
class ChangeSet:
    """Files selected as changed since the watermark."""

    files: list[BuildFile] = field(default_factory=list)
    """Selected files, in scan order"""

    latest: Optional[datetime] = None
    """Maximum modification time among the selected files (None if empty)"""

    def __len__(self) -> int:
        return len(self.files)

    def __bool__(self) -> bool:
        return bool(self.files)


class ChangeDetector:
    """Selects build files modified after a watermark."""

    def __init__(self, force: bool = False):
        """Initialize change detector.

        Args:
            force: Select files modified at or after the watermark instead of
                strictly after it, so files stamped exactly at the previous
                watermark are sent again
        """
        self.force = force

    def is_changed(self, build_file: BuildFile, watermark: datetime) -> bool:
        """Check whether a single file counts as changed."""
        if self.force:
            return build_file.mtime >= watermark
        return build_file.mtime > watermark

    def detect(
        self, files: Iterable[BuildFile], watermark: Optional[datetime]
    ) -> ChangeSet:
        """Select the changed files.

        Args:
            files: Scanned build files
            watermark: Last synced modification time (None if never synced)

        Returns:
            ChangeSet with the selected files and their latest mtime
        """
        if watermark is None:
            watermark = MIN_WATERMARK

        selected = [f for f in files if self.is_changed(f, watermark)]
        latest = max((f.mtime for f in selected), default=None)
        return ChangeSet(files=selected, latest=latest)
