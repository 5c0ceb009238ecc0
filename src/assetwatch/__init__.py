"""
Asset Watcher Package

Snapshot-and-diff change detection for a managed asset folder, with
dispatch to independently scoped watchers.

Features:
- Identity-based diffing: CREATED, DELETED, MODIFIED, RENAMED, MOVED
- Moved and renamed reported independently when both happen at once
- Per-watcher folder scope, recursion and category filter
- Suspension when a watched root disappears, recovery when it returns
- Coalesced periodic scans and host-pushed change batches
"""

from .categories import (
    AssetCategory,
    CategoryFilter,
    category_of,
    extensions_of,
)

from .models import (
    AssetIdentity,
    Snapshot,
    ChangeKind,
    ChangeRecord,
    ChangeSet,
    normalize_path,
)

from .config import EngineConfig

from .exceptions import (
    WatcherError,
    RootError,
    RootNotFoundError,
    InvalidScopeError,
    WatcherDisabledError,
    SchedulerAlreadyRunningError,
    SchedulerNotRunningError,
    BatchShapeError,
)

from .identity import IdentityResolver, InodeIdentityResolver, MappingIdentityResolver
from .scanner import SnapshotScanner, ScanResult
from .classifier import classify, classify_batch, link_relocations, HostBatch
from .watcher import Watcher, WatcherState, WatcherScope
from .registry import WatcherRegistry
from .scheduler import Scheduler


__all__ = [
    # Categories
    "AssetCategory",
    "CategoryFilter",
    "category_of",
    "extensions_of",
    # Models
    "AssetIdentity",
    "Snapshot",
    "ChangeKind",
    "ChangeRecord",
    "ChangeSet",
    "normalize_path",
    # Config
    "EngineConfig",
    # Exceptions
    "WatcherError",
    "RootError",
    "RootNotFoundError",
    "InvalidScopeError",
    "WatcherDisabledError",
    "SchedulerAlreadyRunningError",
    "SchedulerNotRunningError",
    "BatchShapeError",
    # Components
    "IdentityResolver",
    "InodeIdentityResolver",
    "MappingIdentityResolver",
    "SnapshotScanner",
    "ScanResult",
    "classify",
    "classify_batch",
    "link_relocations",
    "HostBatch",
    "Watcher",
    "WatcherState",
    "WatcherScope",
    "WatcherRegistry",
    # Main driver
    "Scheduler",
]

__version__ = "0.1.0"
