"""Configuration for the asset watcher package."""

import fnmatch
from dataclasses import dataclass, field
from pathlib import Path
from typing import List


@dataclass
class EngineConfig:
    """
    Configuration options for the scan-and-diff engine.
    
    Attributes:
        base_path: Folder that every watcher root is relative to
        scan_interval_ms: Period between scheduled scan cycles
        ignore_patterns: Glob patterns for entries the scanner skips
        follow_symlinks: Whether symlinked entries are scanned
        report_existing: Dispatch a watcher's first scan as CREATED events
            instead of silently using it as the baseline
        join_timeout_s: How long stop() waits for the scheduler thread
    """
    base_path: Path = field(default_factory=lambda: Path("Assets"))
    scan_interval_ms: int = 1000
    ignore_patterns: List[str] = field(default_factory=lambda: [
        "*.tmp",
        "*.swp",
        "*.swo",
        "*~",
        "*.meta",
        ".git/*",
        ".git",
        "__pycache__/*",
        "__pycache__",
        ".DS_Store",
        "Thumbs.db",
    ])
    follow_symlinks: bool = False
    report_existing: bool = False
    join_timeout_s: float = 5.0

    def __post_init__(self):
        self.base_path = Path(self.base_path)
        if self.scan_interval_ms <= 0:
            raise ValueError(f"scan_interval_ms must be positive: {self.scan_interval_ms}")

    @property
    def scan_interval(self) -> float:
        """Scan interval in seconds."""
        return self.scan_interval_ms / 1000.0

    def should_ignore(self, path: Path) -> bool:
        """
        Check if a path should be ignored based on ignore patterns.
        
        Args:
            path: Path to check
            
        Returns:
            True if the path should be ignored
        """
        path = Path(path)
        path_str = path.as_posix()
        name = path.name
        
        for pattern in self.ignore_patterns:
            if fnmatch.fnmatch(name, pattern):
                return True
            if fnmatch.fnmatch(path_str, f"*/{pattern}"):
                return True
            if fnmatch.fnmatch(path_str, pattern):
                return True
        
        return False
