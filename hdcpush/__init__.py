"""hdcpush - push changed OpenHarmony build files to a device through hdc."""

from .agent import HdcAgent
from .exceptions import (
    AmbiguousDevicePathError,
    ConfigError,
    HdcPushError,
    RecordStoreError,
    ScanError,
    TransferError,
)
from .sync import PushEngine, PushTarget, SyncRecordStore

__version__ = "0.1.0"

__all__ = [
    "HdcAgent",
    "PushEngine",
    "PushTarget",
    "SyncRecordStore",
    "HdcPushError",
    "AmbiguousDevicePathError",
    "ConfigError",
    "RecordStoreError",
    "ScanError",
    "TransferError",
]
