"""Custom exceptions for the asset watcher package."""


class WatcherError(Exception):
    """Base exception for all asset watcher errors."""
    pass


class RootError(WatcherError):
    """Error related to a watcher's root folder."""
    pass


class RootNotFoundError(RootError):
    """Watched root folder does not exist at scan time."""
    pass


class InvalidScopeError(RootError):
    """Watcher root is absolute or escapes the base path."""
    pass


class WatcherDisabledError(WatcherError):
    """Operation attempted on a watcher that has been disabled."""
    pass


class SchedulerAlreadyRunningError(WatcherError):
    """Scheduler loop is already running."""
    pass


class SchedulerNotRunningError(WatcherError):
    """Scheduler loop is not running."""
    pass


class BatchShapeError(WatcherError, ValueError):
    """Host batch has mismatched moved_to / moved_from lists."""
    pass
