"""Core push engine for incremental device sync."""

import logging
from pathlib import Path
from typing import Callable, Optional

from rich.progress import Progress, SpinnerColumn, TextColumn

from ..agent import HdcAgent
from ..exceptions import AmbiguousDevicePathError, ScanError
from ..output import OutputFormatter
from ..utils import EPOCH, format_rfc3339
from .comparator import ChangeDetector, ChangeSet
from .resolver import DevicePathResolver
from .scanner import BuildTreeScanner
from .state import SyncRecordStore
from .target import PushTarget

logger = logging.getLogger(__name__)

CONFIRM_PROMPT = "Do you want to proceed?"


class PushEngine:
    """Pushes build files changed since the last sync to a device.

    A run scans the build tree, selects files newer than the device's
    watermark, maps them into the package mirror, optionally sends them and
    finally advances the watermark. The watermark only moves when every file
    was sent, or when the device is seen for the first time (baseline).
    """

    def __init__(
        self,
        store: SyncRecordStore,
        agent: HdcAgent,
        output: Optional[OutputFormatter] = None,
        confirm: Optional[Callable[[str], bool]] = None,
        scanner: Optional[BuildTreeScanner] = None,
    ):
        """Initialize push engine.

        Args:
            store: Loaded record store
            agent: Device agent for the target device
            output: Output formatter for displaying progress/status
            confirm: Callback asking the user a yes/no question; without one,
                sending requires ``PushTarget.push``
            scanner: Build tree scanner (defaults to the standard subtrees)
        """
        self.store = store
        self.agent = agent
        self.output = output or OutputFormatter()
        self.confirm = confirm
        self.scanner = scanner or BuildTreeScanner()

    def run(self, target: PushTarget) -> dict:
        """Run one incremental sync for a target.

        Args:
            target: Build tree and device to sync

        Returns:
            Dictionary with run statistics

        Raises:
            ScanError: If the build tree can't be scanned
            AmbiguousDevicePathError: If a file maps to several device paths
            TransferError: If remounting or sending fails
            RecordStoreError: If the record file can't be written

        Examples:
            >>> engine = PushEngine(store, HdcAgent("127.0.0.1:8710"))
            >>> stats = engine.run(PushTarget("127.0.0.1:8710", "/work/oh"))
            >>> print(f"Sent {stats['sent']} file(s)")
        """
        build_dir = Path(target.build_dir)
        if not build_dir.is_dir():
            raise ScanError(f"Build directory does not exist: {build_dir}", build_dir)

        logger.debug(f"Device ID: {target.connect_key}")
        logger.debug(f"Build Directory: {build_dir}")

        record = self.store.get(target.connect_key)
        first_run = record is None
        watermark = None if record is None else record.watermark

        # Step 1: Scan and filter
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
            disable=self.output.quiet,
        ) as progress:
            task = progress.add_task("Scanning build directory...", total=None)
            all_files = self.scanner.scan(build_dir)
            progress.update(task, description=f"Found {len(all_files)} file(s)")

        changes = ChangeDetector(force=target.force).detect(all_files, watermark)
        logger.debug(f"len of all files: {len(all_files)}")
        logger.debug(f"len of new files: {len(changes)}")

        # Step 2: Map to device paths
        plan, unmapped = self._build_plan(
            changes, target.package_root, strict=not first_run
        )
        logger.debug(f"len of push plan: {len(plan)}")

        stats = {
            "scanned": len(all_files),
            "new": len(changes),
            "unmapped": len(unmapped),
            "planned": len(plan),
            "sent": 0,
            "first_run": first_run,
            "record_updated": False,
            "watermark": watermark,
        }

        # Step 3: Decide and send
        send = False
        if plan and not first_run:
            self._display_plan(plan, always=not target.push)
            send = target.push or self._ask()
            if send:
                self._send(plan)
                stats["sent"] = len(plan)
            else:
                self.output.warning("Push declined, record left unchanged.")
        elif not first_run:
            if not changes:
                self.output.info("No new files since last check.")
            else:
                self.output.info("No pushable new files since last check.")

        # Step 4: Advance watermark
        if send or first_run:
            new_watermark = changes.latest or watermark or EPOCH
            self.store.upsert(target.connect_key, new_watermark)
            stats["record_updated"] = True
            stats["watermark"] = new_watermark
            if first_run:
                self.output.info(
                    f"First run for device {target.connect_key}: "
                    f"recorded baseline {format_rfc3339(new_watermark)}."
                )

        if self.store.dirty:
            self.store.flush()
            logger.info("Updated record file")

        if send:
            self.output.success(
                f"Pushed {stats['sent']} file(s) to {target.connect_key}"
            )

        return stats

    def _build_plan(
        self, changes: ChangeSet, package_root: Path, strict: bool = True
    ) -> tuple[dict[Path, str], list[Path]]:
        """Map changed files to device paths.

        Args:
            changes: Selected build files
            package_root: Root of the package mirror
            strict: Raise on ambiguous files instead of dropping them

        Returns:
            Tuple of (plan mapping build file to device path, unmapped files)

        Raises:
            AmbiguousDevicePathError: If strict and any file matched more than
                one path
        """
        resolver = DevicePathResolver(package_root)
        plan: dict[Path, str] = {}
        unmapped: list[Path] = []
        ambiguous: dict[Path, list[str]] = {}

        for build_file in changes.files:
            candidates = resolver.resolve(build_file.name)
            if not candidates:
                logger.debug(f"No device path for {build_file.path}, skipping")
                unmapped.append(build_file.path)
            elif len(candidates) > 1:
                ambiguous[build_file.path] = candidates
            else:
                plan[build_file.path] = candidates[0]

        if ambiguous:
            if strict:
                raise AmbiguousDevicePathError(ambiguous)
            for path, candidates in ambiguous.items():
                logger.warning(
                    f"Ambiguous device path for {path}: {', '.join(candidates)}"
                )

        return plan, unmapped

    def _display_plan(self, plan: dict[Path, str], always: bool = False) -> None:
        """Show the files about to be pushed.

        With ``always`` the list is printed even in quiet mode, so a
        confirmation prompt is never shown without it.
        """
        self.output.print("Found the following new files:", always=always)
        for build_file, device_path in plan.items():
            self.output.print(f"{build_file} -> {device_path}", always=always)

    def _ask(self) -> bool:
        if self.confirm is None:
            return False
        return self.confirm(CONFIRM_PROMPT)

    def _send(self, plan: dict[Path, str]) -> None:
        """Remount the device and send every planned file.

        Stops at the first failure; the caller must not advance the
        watermark in that case.
        """
        self.agent.remount()

        with Progress(disable=self.output.quiet) as progress:
            task = progress.add_task("Pushing files...", total=len(plan))
            for build_file, device_path in plan.items():
                logger.debug(f"Sending {build_file} -> {device_path}")
                self.agent.send_file(build_file, device_path)
                progress.advance(task)
