"""Exceptions raised by hdcpush."""

from pathlib import Path
from typing import Optional


class HdcPushError(Exception):
    """Base exception for all hdcpush errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigError(HdcPushError):
    """The working directory could not be resolved or created."""


class RecordStoreError(HdcPushError):
    """The persisted record file is unreadable or malformed."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class ScanError(HdcPushError):
    """A filesystem error occurred while scanning the build tree."""

    def __init__(self, message: str, path: Optional[Path] = None):
        super().__init__(message)
        self.path = path


class AmbiguousDevicePathError(HdcPushError):
    """One or more build files matched several locations in the package mirror."""

    def __init__(self, ambiguous: dict[Path, list[str]]):
        lines = [
            f"{build_file}: {', '.join(candidates)}"
            for build_file, candidates in ambiguous.items()
        ]
        super().__init__(
            "Ambiguous device path for "
            f"{len(ambiguous)} file(s):\n  " + "\n  ".join(lines)
        )
        self.ambiguous = ambiguous


class TransferError(HdcPushError):
    """The device agent failed to remount the device or send a file."""

    def __init__(
        self,
        message: str,
        device_id: str,
        command: Optional[list[str]] = None,
        returncode: Optional[int] = None,
    ):
        super().__init__(message)
        self.device_id = device_id
        self.command = command or []
        self.returncode = returncode
