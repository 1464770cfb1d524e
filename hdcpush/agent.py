"""Wrapper around the hdc device agent."""

import logging
import subprocess
from pathlib import Path, PurePosixPath

from .config import DEFAULT_HDC
from .exceptions import TransferError

logger = logging.getLogger(__name__)


class HdcAgent:
    """Runs hdc commands against a single device.

    Every command is synchronous. A spawn failure or a non-zero exit status
    raises TransferError.
    """

    def __init__(self, connect_key: str, hdc_path: str = DEFAULT_HDC):
        """Initialize device agent.

        Args:
            connect_key: Connection key of the target device
            hdc_path: hdc executable (name on PATH or absolute path)
        """
        self.connect_key = connect_key
        self.hdc_path = hdc_path

    def _command(self, *args: str) -> list[str]:
        return [self.hdc_path, "-t", self.connect_key, *args]

    def run(self, args: list[str], action: str) -> subprocess.CompletedProcess:
        """Run an hdc command for the target device.

        Args:
            args: Arguments following ``-t <connect_key>``
            action: Short description used in error messages

        Returns:
            The completed process

        Raises:
            TransferError: If hdc can't be started or exits non-zero
        """
        cmd = self._command(*args)
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            raise TransferError(
                f"Failed to {action} on {self.connect_key}: cannot run "
                f"{self.hdc_path}: {e}",
                device_id=self.connect_key,
                command=cmd,
            ) from e

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            message = (
                f"Failed to {action} on {self.connect_key}: "
                f"hdc exited with status {result.returncode}"
            )
            if detail:
                message += f": {detail}"
            raise TransferError(
                message,
                device_id=self.connect_key,
                command=cmd,
                returncode=result.returncode,
            )

        return result

    def remount(self) -> None:
        """Remount the device root filesystem read-write."""
        self.run(["shell", "mount", "-o", "remount,rw", "/"], "remount /")

    def send_file(self, source: Path, device_path: str) -> None:
        """Send a local file to the device.

        Args:
            source: Local file
            device_path: Path relative to the device root (e.g. ``system/lib/a.so``)
        """
        destination = str(PurePosixPath("/") / device_path)
        self.run(
            ["file", "send", str(source.absolute()), destination],
            f"send {source} to {destination}",
        )
