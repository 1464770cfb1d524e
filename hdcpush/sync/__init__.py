"""Incremental sync engine for hdcpush - scan, detect, resolve and push."""

from .comparator import ChangeDetector, ChangeSet
from .engine import PushEngine
from .resolver import DevicePathResolver
from .scanner import BuildFile, BuildTreeScanner
from .state import SyncRecord, SyncRecordStore
from .target import PushTarget

__all__ = [
    "PushEngine",
    "PushTarget",
    "BuildTreeScanner",
    "BuildFile",
    "ChangeDetector",
    "ChangeSet",
    "DevicePathResolver",
    "SyncRecord",
    "SyncRecordStore",
]
