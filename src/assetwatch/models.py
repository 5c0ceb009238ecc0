"""Data models for the asset watcher package."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path, PurePosixPath
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Iterator, List, Optional, Tuple
import os
import posixpath

from .categories import AssetCategory, category_of


def normalize_path(path) -> str:
    """
    Normalize a root-relative path to the POSIX form used in identities.
    
    ``"textures\\sub\\a.png"``, ``"./textures/sub/a.png"`` and
    ``"textures/sub/a.png/"`` all become ``"textures/sub/a.png"``;
    the base itself is ``""``.
    """
    text = str(path).replace("\\", "/")
    normalized = posixpath.normpath(text) if text else ""
    if normalized == ".":
        return ""
    return normalized


class ChangeKind(Enum):
    """Types of asset change."""
    CREATED = "created"
    DELETED = "deleted"
    MODIFIED = "modified"
    RENAMED = "renamed"
    MOVED = "moved"


@dataclass(frozen=True, eq=False)
class AssetIdentity:
    """
    An observable entry as seen at snapshot time.
    
    Equality and hashing use ``id`` only, so the same logical entry is
    recognised after it moves or is renamed.
    
    Attributes:
        id: Stable identifier assigned by the identity authority
        path: Base-relative POSIX path at snapshot time
        category: Category derived from the extension (FOLDER for directories)
        mod_time: Last modification time (seconds since epoch)
        create_time: Creation / metadata change time
        size: Size in bytes
        attributes: Mode bits of the entry
    """
    id: str
    path: str
    category: AssetCategory = AssetCategory.UNKNOWN
    mod_time: float = 0.0
    create_time: float = 0.0
    size: int = 0
    attributes: int = 0

    def __post_init__(self):
        object.__setattr__(self, "path", normalize_path(self.path))

    @classmethod
    def from_stat(
        cls,
        asset_id: str,
        path: str,
        stat_result: os.stat_result,
        is_directory: bool = False,
    ) -> "AssetIdentity":
        """Build an identity from an ``os.stat`` result."""
        path = normalize_path(path)
        extension = posixpath.splitext(path)[1]
        if is_directory:
            category = AssetCategory.FOLDER
        elif extension:
            category = category_of(extension)
        else:
            category = AssetCategory.UNKNOWN
        create_time = getattr(stat_result, "st_birthtime", stat_result.st_ctime)
        return cls(
            id=asset_id,
            path=path,
            category=category,
            mod_time=stat_result.st_mtime,
            create_time=create_time,
            size=stat_result.st_size,
            attributes=stat_result.st_mode,
        )

    @property
    def name(self) -> str:
        return posixpath.basename(self.path)

    @property
    def directory(self) -> str:
        return posixpath.dirname(self.path)

    @property
    def extension(self) -> str:
        return posixpath.splitext(self.path)[1]

    @property
    def fingerprint(self) -> Tuple[float, int, float, int]:
        """Fields compared to detect a modification."""
        return (self.mod_time, self.attributes, self.create_time, self.size)

    def relative_to(self, root: str) -> Optional[str]:
        """
        Return this entry's path relative to a watcher root.
        
        Returns:
            The relative path, or None if the entry is not under ``root``
        """
        root = normalize_path(root)
        if not root:
            return self.path
        if self.path == root:
            return ""
        if self.path.startswith(root + "/"):
            return self.path[len(root) + 1:]
        return None

    def absolute(self, base_path: Path) -> Path:
        """Resolve this entry against the base folder on disk."""
        return Path(base_path).joinpath(*PurePosixPath(self.path).parts)

    def __eq__(self, other) -> bool:
        if not isinstance(other, AssetIdentity):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "path": self.path,
            "category": self.category.value,
            "mod_time": self.mod_time,
            "create_time": self.create_time,
            "size": self.size,
            "attributes": self.attributes,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AssetIdentity":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            path=data["path"],
            category=AssetCategory(data.get("category", AssetCategory.UNKNOWN.value)),
            mod_time=data.get("mod_time", 0.0),
            create_time=data.get("create_time", 0.0),
            size=data.get("size", 0),
            attributes=data.get("attributes", 0),
        )


class Snapshot:
    """
    Immutable set of identities observed by one scan, keyed by id.
    
    Iteration follows scan order. Entries with an empty id are dropped,
    and later duplicates of an id are ignored.
    """

    __slots__ = ("_entries", "_by_path")

    EMPTY: "Snapshot"

    def __init__(self, identities: Iterable[AssetIdentity] = ()):
        entries: Dict[str, AssetIdentity] = {}
        for identity in identities:
            if not identity.id or identity.id in entries:
                continue
            entries[identity.id] = identity
        self._entries = MappingProxyType(entries)
        self._by_path: Optional[Dict[str, AssetIdentity]] = None

    def ids(self) -> FrozenSet[str]:
        return frozenset(self._entries)

    def get(self, asset_id: str) -> Optional[AssetIdentity]:
        return self._entries.get(asset_id)

    def by_path(self, path: str) -> Optional[AssetIdentity]:
        """Look up the entry recorded at a base-relative path."""
        if self._by_path is None:
            self._by_path = {identity.path: identity for identity in self._entries.values()}
        return self._by_path.get(normalize_path(path))

    def paths(self) -> FrozenSet[str]:
        return frozenset(identity.path for identity in self._entries.values())

    def apply(self, changes: "ChangeSet") -> "Snapshot":
        """
        Return a new snapshot with a change set applied.
        
        Deleted ids are removed; created, modified, moved and renamed
        entries replace whatever was stored under their id.
        """
        entries = dict(self._entries)
        for identity in changes.deleted:
            entries.pop(identity.id, None)
        for identity in changes.created:
            entries[identity.id] = identity
        for identity in changes.modified:
            entries[identity.id] = identity
        for before, after in changes.moved + changes.renamed:
            entries.pop(before.id, None)
            entries[after.id] = after
        return Snapshot(entries.values())

    def __iter__(self) -> Iterator[AssetIdentity]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, item) -> bool:
        if isinstance(item, AssetIdentity):
            return item.id in self._entries
        return item in self._entries

    def __eq__(self, other) -> bool:
        if not isinstance(other, Snapshot):
            return NotImplemented
        if self.ids() != other.ids():
            return False
        return all(
            identity.path == other._entries[identity.id].path
            and identity.fingerprint == other._entries[identity.id].fingerprint
            for identity in self
        )

    __hash__ = None

    def __repr__(self) -> str:
        return f"Snapshot({len(self)} entries)"


Snapshot.EMPTY = Snapshot()


@dataclass(frozen=True)
class ChangeRecord:
    """
    A single classified change.
    
    CREATED carries only ``after``, DELETED only ``before``. MODIFIED,
    RENAMED and MOVED carry both; after scope filtering a watcher may see
    one side of a RENAMED/MOVED pair as None when that side lies outside
    its scope.
    """
    kind: ChangeKind
    before: Optional[AssetIdentity] = None
    after: Optional[AssetIdentity] = None

    @property
    def identity(self) -> AssetIdentity:
        """The most recent known side of the change."""
        return self.after if self.after is not None else self.before

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "kind": self.kind.value,
            "before": self.before.to_dict() if self.before else None,
            "after": self.after.to_dict() if self.after else None,
        }


@dataclass
class ChangeSet:
    """
    The five disjoint change classes produced by one classification.
    
    Attributes:
        created: Entries present only in the new snapshot
        deleted: Entries present only in the old snapshot
        modified: New state of entries whose fingerprint changed in place
        renamed: (before, after) pairs whose name changed
        moved: (before, after) pairs whose directory changed
    """
    created: List[AssetIdentity] = field(default_factory=list)
    deleted: List[AssetIdentity] = field(default_factory=list)
    modified: List[AssetIdentity] = field(default_factory=list)
    renamed: List[Tuple[AssetIdentity, AssetIdentity]] = field(default_factory=list)
    moved: List[Tuple[AssetIdentity, AssetIdentity]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.created or self.deleted or self.modified or self.renamed or self.moved)

    def __len__(self) -> int:
        return (
            len(self.created) + len(self.deleted) + len(self.modified)
            + len(self.renamed) + len(self.moved)
        )

    def records(self) -> Iterator[ChangeRecord]:
        """Yield records in dispatch order: created, modified, renamed, moved, deleted."""
        for identity in self.created:
            yield ChangeRecord(ChangeKind.CREATED, after=identity)
        for identity in self.modified:
            yield ChangeRecord(ChangeKind.MODIFIED, before=identity, after=identity)
        for before, after in self.renamed:
            yield ChangeRecord(ChangeKind.RENAMED, before=before, after=after)
        for before, after in self.moved:
            yield ChangeRecord(ChangeKind.MOVED, before=before, after=after)
        for identity in self.deleted:
            yield ChangeRecord(ChangeKind.DELETED, before=identity)

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "created": [i.to_dict() for i in self.created],
            "deleted": [i.to_dict() for i in self.deleted],
            "modified": [i.to_dict() for i in self.modified],
            "renamed": [[b.to_dict(), a.to_dict()] for b, a in self.renamed],
            "moved": [[b.to_dict(), a.to_dict()] for b, a in self.moved],
        }
