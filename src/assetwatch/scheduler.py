"""Periodic scan → classify → dispatch cycles over the registered watchers."""

import logging
import threading
from typing import Optional

from .categories import CategoryFilter
from .classifier import HostBatch, classify, classify_batch, link_relocations
from .config import EngineConfig
from .exceptions import (
    RootNotFoundError,
    SchedulerAlreadyRunningError,
    SchedulerNotRunningError,
)
from .models import Snapshot
from .registry import WatcherRegistry
from .scanner import SnapshotScanner
from .watcher import ErrorHandler, Watcher, WatcherState


logger = logging.getLogger(__name__)


class Scheduler:
    """
    Drives scan cycles for every registered watcher.
    
    A cycle scans the base folder once, filters the listing down to each
    watcher's view, then classifies and dispatches for all watchers while
    holding the registry lock. Cycles never overlap: a tick that arrives
    while a cycle is running is dropped rather than queued.
    """

    def __init__(
        self,
        scanner: SnapshotScanner,
        registry: Optional[WatcherRegistry] = None,
        config: Optional[EngineConfig] = None,
        on_error: Optional[ErrorHandler] = None,
    ):
        """
        Initialize the scheduler.
        
        Args:
            scanner: Scanner for the base folder
            registry: Registry of watchers (a new one if omitted)
            config: Engine configuration (defaults to the scanner's)
            on_error: Hook called with (watcher, record, exception) when a
                listener raises
        """
        self.scanner = scanner
        self.registry = registry if registry is not None else WatcherRegistry()
        self.config = config or scanner.config
        self.on_error = on_error
        
        self._cycle_lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._lock = threading.Lock()
        self._running = False
        self._last_scan: Optional[Snapshot] = None
        
        self.cycles_completed = 0
        self.ticks_dropped = 0

    def watch(
        self,
        path: str = "",
        category_filter: CategoryFilter = CategoryFilter.MATCH_ALL,
        recursive: Optional[bool] = None,
        baseline: Optional[Snapshot] = None,
    ) -> Watcher:
        """Create and register a watcher; see ``WatcherRegistry.watch``."""
        return self.registry.watch(path, category_filter, recursive, baseline)

    # Cycles

    def run_cycle(self) -> bool:
        """
        Run one scan cycle unless another is already in flight.
        
        Returns:
            True if the cycle ran, False if the tick was coalesced
        """
        if not self._cycle_lock.acquire(blocking=False):
            with self._lock:
                self.ticks_dropped += 1
            logger.debug("Scan cycle still in flight, dropping tick")
            return False
        try:
            self._cycle()
            self.cycles_completed += 1
            return True
        finally:
            self._cycle_lock.release()

    def _cycle(self) -> None:
        watchers = [w for w in self.registry.get_watchers() if not w.is_disabled]
        if not watchers:
            return
        
        # Scanning is the slow part and runs without the registry lock.
        current: Optional[Snapshot] = None
        missing: Optional[RootNotFoundError] = None
        try:
            current = self.scanner.scan("", recursive=True)
        except RootNotFoundError as e:
            missing = e
        except OSError as e:
            logger.error(f"Scan of {self.config.base_path} failed: {e}")
            return
        
        dispatched = 0
        with self.registry.lock:
            for watcher in watchers:
                if watcher.is_disabled or watcher not in self.registry:
                    continue
                if current is None or not self.scanner.root_exists(watcher.root):
                    reason = missing if current is None else f"root '{watcher.root}' not found"
                    if watcher._mark_suspended():
                        logger.warning(f"Suspending watcher '{watcher.root}': {reason}")
                    continue
                if watcher._mark_active():
                    logger.info(f"Watcher '{watcher.root}' root is back, resuming")
                dispatched += self._process(watcher, current)
        
        if current is not None:
            self._last_scan = current
        
        logger.debug(
            f"Cycle finished: {len(watchers)} watcher(s), "
            f"{len(current or ())} entries, {dispatched} callback(s)"
        )

    def _process(self, watcher: Watcher, current: Snapshot) -> int:
        view = Snapshot(identity for identity in current if watcher.accepts(identity))
        previous = watcher.snapshot
        if previous is None and not self.config.report_existing:
            watcher._store_snapshot(view)
            return 0
        
        changes = classify(previous or Snapshot.EMPTY, view)
        delivered = 0
        if not changes.is_empty:
            changes = link_relocations(changes, current, self._last_scan)
            delivered = watcher.dispatch(changes, self.on_error)
        watcher._store_snapshot(view)
        return delivered

    def notify_batch(self, batch: HostBatch) -> int:
        """
        Dispatch a host-pushed batch of changes.
        
        Waits for any running cycle, then classifies the batch against
        each watcher's stored snapshot and advances that snapshot. Watchers
        without a baseline yet are skipped; their next scan establishes it.
        Suspended watchers are skipped and keep their last-known snapshot.
        
        Args:
            batch: Paths imported, deleted and moved by the host
            
        Returns:
            Number of callbacks invoked
        """
        resolve = self.scanner.resolver
        delivered = 0
        with self._cycle_lock:
            reference = self._last_scan
            with self.registry.lock:
                for watcher in self.registry.get_watchers():
                    previous = watcher.snapshot
                    if watcher.state is not WatcherState.ACTIVE or previous is None:
                        continue
                    changes = classify_batch(batch, previous, resolve, reference)
                    if changes.is_empty:
                        continue
                    delivered += watcher.dispatch(changes, self.on_error)
                    advanced = previous.apply(changes)
                    watcher._store_snapshot(Snapshot(i for i in advanced if watcher.accepts(i)))
            if reference is not None:
                self._last_scan = reference.apply(classify_batch(batch, reference, resolve))
        return delivered

    # Loop control

    def _loop(self) -> None:
        """Worker loop that runs a cycle every scan interval."""
        interval = self.config.scan_interval
        logger.debug(f"Scheduler loop started, interval={interval}s")
        
        while not self._stop_event.is_set():
            try:
                self.run_cycle()
            except Exception:
                logger.exception("Scan cycle failed")
            
            self._stop_event.wait(timeout=interval)

    def start(self) -> None:
        """
        Run the scheduler loop on the calling thread until stop() is called.
        
        Raises:
            SchedulerAlreadyRunningError: If already running
        """
        self._begin()
        try:
            self._loop()
        except KeyboardInterrupt:
            pass
        finally:
            with self._lock:
                self._running = False

    def start_async(self) -> None:
        """
        Start the scheduler loop in a background thread.
        
        Raises:
            SchedulerAlreadyRunningError: If already running
        """
        self._begin()
        self._thread = threading.Thread(target=self._loop, name="AssetScanScheduler", daemon=True)
        self._thread.start()

    def _begin(self) -> None:
        with self._lock:
            if self._running:
                raise SchedulerAlreadyRunningError("Scheduler is already running")
            self._running = True
            self._stop_event.clear()
        logger.info(f"Scheduler started for {self.config.base_path}")

    def stop(self) -> None:
        """
        Stop the scheduler loop and wait for the current cycle to finish.
        
        Raises:
            SchedulerNotRunningError: If the scheduler is not running
        """
        with self._lock:
            if not self._running:
                raise SchedulerNotRunningError("Scheduler is not running")
            self._running = False
        
        self._stop_event.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self.config.join_timeout_s)
        self._thread = None
        logger.info("Scheduler stopped")

    @property
    def is_running(self) -> bool:
        return self._running

    def close(self) -> None:
        """Stop the loop if running and disable every watcher."""
        if self._running:
            self.stop()
        self.registry.clear()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
