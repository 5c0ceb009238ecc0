"""Thread-safe registry of active watchers."""

import logging
import threading
from typing import Iterator, List, Optional, Tuple

from .categories import CategoryFilter
from .exceptions import WatcherDisabledError
from .models import Snapshot
from .watcher import Watcher


logger = logging.getLogger(__name__)


class WatcherRegistry:
    """
    Thread-safe collection of registered watchers.
    
    ``lock`` is held by the scheduler for the whole dispatch section of a
    cycle, so registration and unregistration never interleave with
    dispatch. It is re-entrant: callbacks running under it may register
    or disable watchers on the same thread.
    """

    def __init__(self):
        """Initialize an empty registry."""
        self._watchers: List[Watcher] = []
        self._lock = threading.RLock()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def register(self, watcher: Watcher) -> Watcher:
        """
        Add a watcher to the registry.
        
        Args:
            watcher: Watcher to register
            
        Returns:
            The same watcher, for chaining
            
        Raises:
            WatcherDisabledError: If the watcher has been disabled
        """
        with self._lock:
            if watcher in self._watchers:
                return watcher
            if watcher.is_disabled:
                raise WatcherDisabledError("Cannot register a disabled watcher")
            watcher._attach(self)
            self._watchers.append(watcher)
        
        logger.info(f"Registered {watcher!r}")
        return watcher

    def watch(
        self,
        path: str = "",
        category_filter: CategoryFilter = CategoryFilter.MATCH_ALL,
        recursive: Optional[bool] = None,
        baseline: Optional[Snapshot] = None,
    ) -> Watcher:
        """
        Create and register a watcher.
        
        With no path the whole base folder is watched recursively; with a
        path the default is to watch only its direct children.
        
        Args:
            path: Folder relative to the base path
            category_filter: Categories to observe
            recursive: Override the default recursion for ``path``
            baseline: Optional snapshot to diff the first scan against
            
        Returns:
            The registered watcher
        """
        if recursive is None:
            recursive = not path
        return self.register(Watcher(path, recursive, category_filter, baseline))

    def unregister(self, watcher: Watcher) -> bool:
        """
        Remove a watcher and disable it.
        
        Args:
            watcher: Watcher to remove
            
        Returns:
            True if the watcher was registered
        """
        with self._lock:
            removed = watcher in self._watchers
            if removed:
                self._watchers.remove(watcher)
            watcher._shutdown()
        
        if removed:
            logger.info(f"Unregistered watcher '{watcher.root}'")
        return removed

    def get_watchers(self) -> Tuple[Watcher, ...]:
        """
        Get the registered watchers.
        
        Returns:
            Tuple copy, safe to iterate while the registry changes
        """
        with self._lock:
            return tuple(self._watchers)

    def clear(self) -> int:
        """
        Disable and remove every watcher.
        
        Returns:
            Number of watchers removed
        """
        with self._lock:
            watchers = list(self._watchers)
            for watcher in watchers:
                self.unregister(watcher)
            return len(watchers)

    def __len__(self) -> int:
        """Return the number of registered watchers."""
        with self._lock:
            return len(self._watchers)

    def __contains__(self, watcher: Watcher) -> bool:
        with self._lock:
            return watcher in self._watchers

    def __iter__(self) -> Iterator[Watcher]:
        return iter(self.get_watchers())
