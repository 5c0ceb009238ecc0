"""Snapshot scanning of a watched folder using watchdog's directory listing."""

import logging
import os
import stat
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import List, Optional

from watchdog.utils.dirsnapshot import DirectorySnapshot

from .categories import CategoryFilter
from .config import EngineConfig
from .exceptions import RootNotFoundError
from .identity import IdentityResolver
from .models import AssetIdentity, Snapshot, normalize_path


logger = logging.getLogger(__name__)


@dataclass
class ScanResult:
    """
    Outcome of one scan.
    
    Attributes:
        snapshot: Tracked entries found under the root
        unresolved: Paths that matched the scope but have no identity yet
        ignored: Number of entries skipped by ignore patterns
    """
    snapshot: Snapshot
    unresolved: List[str] = field(default_factory=list)
    ignored: int = 0


class SnapshotScanner:
    """
    Enumerates the entries under a root and resolves them to identities.
    
    Directory walking is delegated to ``watchdog.utils.dirsnapshot``; the
    identity authority decides which paths are tracked.
    """

    def __init__(self, resolver: IdentityResolver, config: Optional[EngineConfig] = None):
        """
        Initialize the scanner.
        
        Args:
            resolver: Maps a base-relative path to an identity, or None
            config: Engine configuration (base path, ignore patterns)
        """
        self.resolver = resolver
        self.config = config or EngineConfig()

    @property
    def base_path(self) -> Path:
        return self.config.base_path

    def root_exists(self, root: str) -> bool:
        return self._root_dir(root).is_dir()

    def _root_dir(self, root: str) -> Path:
        return self.base_path.joinpath(*PurePosixPath(normalize_path(root)).parts)

    def scan(
        self,
        root: str = "",
        recursive: bool = True,
        category_filter: CategoryFilter = CategoryFilter.MATCH_ALL,
    ) -> Snapshot:
        """
        Scan a root and return the snapshot of tracked entries.
        
        Raises:
            RootNotFoundError: If the root folder does not exist
        """
        return self.scan_detailed(root, recursive, category_filter).snapshot

    def scan_detailed(
        self,
        root: str = "",
        recursive: bool = True,
        category_filter: CategoryFilter = CategoryFilter.MATCH_ALL,
    ) -> ScanResult:
        """
        Scan a root, also reporting unresolved and ignored entries.
        
        Args:
            root: Base-relative folder to scan
            recursive: Scan the full subtree instead of immediate children
            category_filter: Categories to keep; MATCH_ALL keeps files and folders
            
        Returns:
            ScanResult for the root
            
        Raises:
            RootNotFoundError: If the root folder does not exist
        """
        root_dir = self._root_dir(root)
        if not root_dir.is_dir():
            raise RootNotFoundError(f"Watched root does not exist: {root_dir}")
        
        stat_fn = os.stat if self.config.follow_symlinks else os.lstat
        try:
            listing = DirectorySnapshot(str(root_dir), recursive=recursive, stat=stat_fn)
        except FileNotFoundError as e:
            raise RootNotFoundError(f"Watched root disappeared during scan: {root_dir}") from e
        
        extensions = category_filter.extensions()
        identities: List[AssetIdentity] = []
        unresolved: List[str] = []
        ignored = 0
        
        for full_path in sorted(listing.paths):
            if full_path == str(root_dir):
                continue
            
            mode = listing.stat_info(full_path).st_mode
            if stat.S_ISLNK(mode):
                continue
            
            rel_path = normalize_path(os.path.relpath(full_path, self.base_path))
            if self.config.should_ignore(Path(rel_path)):
                ignored += 1
                continue
            
            if stat.S_ISDIR(mode):
                if not category_filter.includes_folders:
                    continue
            elif not category_filter.is_match_all:
                if PurePosixPath(rel_path).suffix.lower() not in extensions:
                    continue
            
            identity = self.resolver(rel_path)
            if identity is None or not identity.id:
                unresolved.append(rel_path)
                continue
            identities.append(identity)
        
        if unresolved:
            logger.debug(f"Scan of '{root}' skipped {len(unresolved)} unresolved path(s)")
        
        return ScanResult(Snapshot(identities), unresolved, ignored)
