"""Persistent per-device sync records.

Each device (identified by its hdc connection key) has a single watermark:
the modification time of the newest build file known to be on the device.
Records are kept in one JSON file, read once per run and rewritten in full
when changed.
"""

import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..exceptions import RecordStoreError
from ..utils import format_rfc3339, parse_rfc3339

logger = logging.getLogger(__name__)


@dataclass
class SyncRecord:
    """Watermark of the last successful sync for one device."""

    device_id: str
    """Connection key of the device"""

    watermark: datetime
    """Newest modification time already synced (UTC)"""

    def to_dict(self) -> dict:
        """Convert record to dictionary for JSON serialization."""
        return {
            "connectkey": self.device_id,
            "last_modified_date": format_rfc3339(self.watermark),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SyncRecord":
        """Create SyncRecord from dictionary.

        Raises:
            ValueError: If the dictionary doesn't match the record schema
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")

        device_id = data.get("connectkey")
        if not isinstance(device_id, str):
            raise ValueError("missing or invalid 'connectkey'")

        raw_date = data.get("last_modified_date")
        watermark = parse_rfc3339(raw_date)
        if watermark is None:
            raise ValueError(
                f"invalid 'last_modified_date' for {device_id}: {raw_date!r}"
            )

        return cls(device_id=device_id, watermark=watermark)


class SyncRecordStore:
    """Loads, updates and writes back the device record file."""

    def __init__(self, path: Path):
        """Initialize record store.

        Args:
            path: Location of the JSON record file
        """
        self.path = path
        self.records: list[SyncRecord] = []
        self.dirty = False

    def load(self) -> list[SyncRecord]:
        """Read records from disk.

        A missing file means no device has synced yet.

        Returns:
            Loaded records

        Raises:
            RecordStoreError: If the file can't be read or is malformed
        """
        self.records = []
        self.dirty = False

        if not self.path.exists():
            logger.debug(f"No record file at {self.path}")
            return self.records

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise RecordStoreError(
                f"Cannot read record file {self.path}: {e}", self.path
            ) from e
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise RecordStoreError(
                f"Record file {self.path} is not valid JSON: {e}", self.path
            ) from e

        if not isinstance(data, list):
            raise RecordStoreError(
                f"Record file {self.path} must contain a JSON array", self.path
            )

        records: list[SyncRecord] = []
        seen: set[str] = set()
        for position, item in enumerate(data):
            try:
                record = SyncRecord.from_dict(item)
            except ValueError as e:
                raise RecordStoreError(
                    f"Record file {self.path} entry {position} is invalid: {e}",
                    self.path,
                ) from e
            if record.device_id in seen:
                raise RecordStoreError(
                    f"Record file {self.path} has duplicate entries "
                    f"for {record.device_id}",
                    self.path,
                )
            seen.add(record.device_id)
            records.append(record)
            logger.debug(
                f"connectkey: {record.device_id}, "
                f"last_modified_date: {format_rfc3339(record.watermark)}"
            )

        self.records = records
        return self.records

    def get(self, device_id: str) -> Optional[SyncRecord]:
        """Get the record for a device, or None if it never synced."""
        for record in self.records:
            if record.device_id == device_id:
                return record
        return None

    def upsert(self, device_id: str, watermark: datetime) -> SyncRecord:
        """Set the watermark for a device, adding a record if needed.

        Args:
            device_id: Connection key of the device
            watermark: New watermark

        Returns:
            The updated or created record
        """
        record = self.get(device_id)
        if record is None:
            record = SyncRecord(device_id=device_id, watermark=watermark)
            self.records.append(record)
        else:
            record.watermark = watermark
        self.dirty = True
        return record

    def flush(self) -> None:
        """Write all records back, replacing the file contents.

        Raises:
            RecordStoreError: If the file can't be written
        """
        data = [record.to_dict() for record in self.records]
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            raise RecordStoreError(
                f"Cannot write record file {self.path}: {e}", self.path
            ) from e
        self.dirty = False
        logger.debug(f"Saved {len(data)} record(s) to {self.path}")
