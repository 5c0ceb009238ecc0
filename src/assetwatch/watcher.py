"""A single scoped observer of asset changes."""

import logging
import threading
from enum import Enum
from pathlib import PurePosixPath, PureWindowsPath
from typing import TYPE_CHECKING, Callable, Dict, List, NamedTuple, Optional

from .categories import CategoryFilter
from .exceptions import InvalidScopeError, WatcherDisabledError
from .models import AssetIdentity, ChangeKind, ChangeRecord, ChangeSet, Snapshot, normalize_path

if TYPE_CHECKING:
    from .registry import WatcherRegistry


logger = logging.getLogger(__name__)

IdentityCallback = Callable[[AssetIdentity], None]
PairCallback = Callable[[Optional[AssetIdentity], Optional[AssetIdentity]], None]
ErrorHandler = Callable[["Watcher", ChangeRecord, Exception], None]

_PAIR_KINDS = (ChangeKind.RENAMED, ChangeKind.MOVED)


class WatcherState(Enum):
    """Lifecycle states of a watcher."""
    ACTIVE = "active"
    SUSPENDED = "suspended"
    DISABLED = "disabled"


class WatcherScope(NamedTuple):
    """The (root, recursive, filter) triple that determines what a watcher scans."""
    root: str
    recursive: bool
    category_filter: CategoryFilter


class Watcher:
    """
    Observer for changes under one root folder.
    
    The scope is fixed at construction. Listeners are kept in explicit
    per-kind lists; ``disable()`` detaches them all and removes the
    watcher from its registry. Use the watcher as a context manager to
    guarantee it is disabled on every exit path.
    """

    def __init__(
        self,
        root: str = "",
        recursive: bool = False,
        category_filter: CategoryFilter = CategoryFilter.MATCH_ALL,
        baseline: Optional[Snapshot] = None,
    ):
        """
        Initialize the watcher.
        
        Args:
            root: Folder relative to the engine's base path ("" for the base)
            recursive: Include the whole subtree instead of direct children
            category_filter: Categories to observe
            baseline: Snapshot to diff the first scan against; when None the
                first successful scan becomes the baseline
            
        Raises:
            InvalidScopeError: If root is absolute or escapes the base path
        """
        root = normalize_path(root)
        posix_root = PurePosixPath(root)
        if posix_root.is_absolute() or PureWindowsPath(root).drive or ".." in posix_root.parts:
            raise InvalidScopeError(f"Watcher root must stay inside the base path: {root!r}")
        
        self._scope = WatcherScope(root, recursive, category_filter)
        self._listeners: Dict[ChangeKind, List[Callable]] = {kind: [] for kind in ChangeKind}
        self._snapshot = baseline
        self._state = WatcherState.ACTIVE
        self._registry: Optional["WatcherRegistry"] = None
        self._lock = threading.RLock()

    @property
    def scope(self) -> WatcherScope:
        return self._scope

    @property
    def root(self) -> str:
        return self._scope.root

    @property
    def recursive(self) -> bool:
        return self._scope.recursive

    @property
    def category_filter(self) -> CategoryFilter:
        return self._scope.category_filter

    @property
    def state(self) -> WatcherState:
        return self._state

    @property
    def is_disabled(self) -> bool:
        return self._state is WatcherState.DISABLED

    @property
    def snapshot(self) -> Optional[Snapshot]:
        """Last stored snapshot, or None before the first successful scan."""
        return self._snapshot

    # Listener registration

    def _add_listener(self, kind: ChangeKind, callback: Callable) -> Callable:
        with self._lock:
            if self.is_disabled:
                raise WatcherDisabledError("Cannot add listeners to a disabled watcher")
            self._listeners[kind].append(callback)
        return callback

    def on_created(self, callback: IdentityCallback) -> IdentityCallback:
        """Register a callback for entries that appear in scope."""
        return self._add_listener(ChangeKind.CREATED, callback)

    def on_deleted(self, callback: IdentityCallback) -> IdentityCallback:
        """Register a callback for entries that disappear."""
        return self._add_listener(ChangeKind.DELETED, callback)

    def on_modified(self, callback: IdentityCallback) -> IdentityCallback:
        """Register a callback for entries whose content or metadata changed in place."""
        return self._add_listener(ChangeKind.MODIFIED, callback)

    def on_renamed(self, callback: PairCallback) -> PairCallback:
        """Register a ``(before, after)`` callback for renamed entries."""
        return self._add_listener(ChangeKind.RENAMED, callback)

    def on_moved(self, callback: PairCallback) -> PairCallback:
        """Register a ``(before, after)`` callback for entries moved to another folder."""
        return self._add_listener(ChangeKind.MOVED, callback)

    def remove_listener(self, callback: Callable) -> bool:
        """
        Detach a callback from every change kind.
        
        Returns:
            True if the callback was registered
        """
        removed = False
        with self._lock:
            for listeners in self._listeners.values():
                while callback in listeners:
                    listeners.remove(callback)
                    removed = True
        return removed

    def wants(self, kind: ChangeKind) -> bool:
        """True if at least one listener is registered for ``kind``."""
        with self._lock:
            return bool(self._listeners[kind])

    # Predicates

    def in_scope(self, path: str) -> bool:
        """Check whether a base-relative path lies in this watcher's folder scope."""
        path = normalize_path(path)
        root = self._scope.root
        if self._scope.recursive:
            if not root:
                return True
            return path == root or path.startswith(root + "/")
        return PurePosixPath(path).parent.as_posix() == (root or ".")

    def accepts(self, identity: Optional[AssetIdentity]) -> bool:
        """Check both the folder scope and the category filter."""
        if identity is None:
            return False
        return self.in_scope(identity.path) and self._scope.category_filter.matches(identity.category)

    # Dispatch

    def dispatch(self, changes: ChangeSet, on_error: Optional[ErrorHandler] = None) -> int:
        """
        Deliver a change set to the registered listeners.
        
        Single-entry records are delivered only if the entry passes
        ``accepts``. For renamed/moved pairs each side is checked on its
        own; a side that fails is passed as None, and the pair is dropped
        only if both sides fail. Callback exceptions are logged and passed
        to ``on_error``; they never stop the remaining deliveries.
        
        Args:
            changes: Classified changes
            on_error: Optional hook receiving (watcher, record, exception)
            
        Returns:
            Number of callbacks invoked successfully
        """
        delivered = 0
        
        for record in changes.records():
            if self.is_disabled:
                break
            
            with self._lock:
                listeners = tuple(self._listeners[record.kind])
            if not listeners:
                continue
            
            if record.kind in _PAIR_KINDS:
                before = record.before if self.accepts(record.before) else None
                after = record.after if self.accepts(record.after) else None
                if before is None and after is None:
                    continue
                args = (before, after)
            else:
                if not self.accepts(record.identity):
                    continue
                args = (record.identity,)
            
            for listener in listeners:
                if self.is_disabled:
                    break
                try:
                    listener(*args)
                    delivered += 1
                except Exception as e:
                    logger.exception(
                        f"Listener failed for {record.kind.value} {record.identity.path!r} "
                        f"in watcher '{self.root}'"
                    )
                    self._report_error(on_error, record, e)
        
        return delivered

    def _report_error(self, on_error: Optional[ErrorHandler], record: ChangeRecord, error: Exception) -> None:
        if on_error is None:
            return
        try:
            on_error(self, record, error)
        except Exception:
            logger.exception("Error handler failed")

    # State transitions, driven by the registry and scheduler

    def _attach(self, registry: "WatcherRegistry") -> None:
        with self._lock:
            if self.is_disabled:
                raise WatcherDisabledError("Cannot register a disabled watcher")
            self._registry = registry

    def _store_snapshot(self, snapshot: Snapshot) -> None:
        with self._lock:
            if self._state is WatcherState.ACTIVE:
                self._snapshot = snapshot

    def _mark_suspended(self) -> bool:
        """Move ACTIVE → SUSPENDED. Returns True if the state changed."""
        with self._lock:
            if self._state is not WatcherState.ACTIVE:
                return False
            self._state = WatcherState.SUSPENDED
            return True

    def _mark_active(self) -> bool:
        """Move SUSPENDED → ACTIVE. Returns True if the state changed."""
        with self._lock:
            if self._state is not WatcherState.SUSPENDED:
                return False
            self._state = WatcherState.ACTIVE
            return True

    def _shutdown(self) -> bool:
        """Enter the terminal DISABLED state. Returns True on the first call."""
        with self._lock:
            if self.is_disabled:
                return False
            self._state = WatcherState.DISABLED
            for listeners in self._listeners.values():
                listeners.clear()
            self._registry = None
            self._snapshot = None
            return True

    def disable(self) -> None:
        """
        Detach all listeners and leave the registry.
        
        Idempotent. Callbacks already running finish, but no further
        callbacks fire for this watcher.
        """
        registry = self._registry
        if registry is not None:
            registry.unregister(self)
        else:
            self._shutdown()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disable()
        return False

    def __repr__(self) -> str:
        return (
            f"Watcher(root={self.root!r}, recursive={self.recursive}, "
            f"filter={self.category_filter!r}, state={self._state.value})"
        )
