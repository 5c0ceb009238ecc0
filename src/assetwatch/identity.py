"""Identity authorities that map base-relative paths to tracked identities."""

import logging
import os
import stat
import threading
from pathlib import Path, PurePosixPath
from typing import Callable, Dict, Optional

from .models import AssetIdentity, normalize_path


logger = logging.getLogger(__name__)

IdentityResolver = Callable[[str], Optional[AssetIdentity]]
"""``resolve(path) -> AssetIdentity | None`` for a base-relative path."""


def _stat(base_path: Path, path: str, follow_symlinks: bool) -> Optional[os.stat_result]:
    full_path = base_path.joinpath(*PurePosixPath(path).parts)
    try:
        return os.stat(full_path, follow_symlinks=follow_symlinks)
    except (FileNotFoundError, NotADirectoryError, PermissionError):
        return None


class InodeIdentityResolver:
    """
    Uses the filesystem's device and inode numbers as the stable id.
    
    An inode survives a rename or a move within one filesystem, so this
    authority recognises moved entries without any external database.
    Paths on filesystems that report no inode are left unresolved.
    """

    def __init__(self, base_path: Path, follow_symlinks: bool = False):
        self.base_path = Path(base_path)
        self.follow_symlinks = follow_symlinks

    def resolve(self, path: str) -> Optional[AssetIdentity]:
        path = normalize_path(path)
        st = _stat(self.base_path, path, self.follow_symlinks)
        if st is None or st.st_ino == 0:
            return None
        return AssetIdentity.from_stat(
            f"{st.st_dev:x}:{st.st_ino:x}",
            path,
            st,
            is_directory=stat.S_ISDIR(st.st_mode),
        )

    __call__ = resolve


class MappingIdentityResolver:
    """
    Explicit path-to-id table, standing in for a host's asset database.
    
    Paths that have not been registered resolve to None. The host keeps
    the table current with ``register``, ``move`` and ``forget``.
    """

    def __init__(self, base_path: Path, ids: Optional[Dict[str, str]] = None):
        self.base_path = Path(base_path)
        self._ids: Dict[str, str] = {}
        self._lock = threading.Lock()
        for path, asset_id in (ids or {}).items():
            self.register(path, asset_id)

    def register(self, path: str, asset_id: str) -> None:
        """Assign an id to a path."""
        with self._lock:
            self._ids[normalize_path(path)] = asset_id

    def move(self, old_path: str, new_path: str) -> bool:
        """
        Carry an id from one path to another.
        
        Returns:
            True if ``old_path`` was registered
        """
        with self._lock:
            asset_id = self._ids.pop(normalize_path(old_path), None)
            if asset_id is None:
                return False
            self._ids[normalize_path(new_path)] = asset_id
            return True

    def forget(self, path: str) -> bool:
        """Drop the id for a path. Returns True if it was registered."""
        with self._lock:
            return self._ids.pop(normalize_path(path), None) is not None

    def id_for(self, path: str) -> Optional[str]:
        with self._lock:
            return self._ids.get(normalize_path(path))

    def resolve(self, path: str) -> Optional[AssetIdentity]:
        path = normalize_path(path)
        asset_id = self.id_for(path)
        if not asset_id:
            return None
        st = _stat(self.base_path, path, follow_symlinks=True)
        if st is None:
            logger.debug(f"Registered path is missing on disk: {path}")
            return None
        return AssetIdentity.from_stat(
            asset_id, path, st, is_directory=stat.S_ISDIR(st.st_mode),
        )

    __call__ = resolve

    def __len__(self) -> int:
        with self._lock:
            return len(self._ids)
