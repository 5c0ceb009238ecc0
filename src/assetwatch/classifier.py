"""Classification of snapshot differences into created/deleted/modified/renamed/moved."""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .exceptions import BatchShapeError
from .identity import IdentityResolver
from .models import AssetIdentity, ChangeSet, Snapshot, normalize_path


logger = logging.getLogger(__name__)


def _add_relocation(changes: ChangeSet, before: AssetIdentity, after: AssetIdentity) -> bool:
    """Record moved and/or renamed for a pair. Returns False if neither applies."""
    relocated = False
    if before.directory != after.directory:
        changes.moved.append((before, after))
        relocated = True
    if before.name != after.name:
        changes.renamed.append((before, after))
        relocated = True
    return relocated


def classify(old: Snapshot, new: Snapshot) -> ChangeSet:
    """
    Diff two snapshots by identity.
    
    Rules:
    - id only in ``new`` → created; id only in ``old`` → deleted
    - directory changed → moved (before, after)
    - name changed → renamed (before, after); both fire when both changed
    - same directory and name but a different fingerprint → modified (new state)
    
    Within each list, entries keep scan order.
    
    Args:
        old: Previously stored snapshot
        new: Freshly scanned snapshot
        
    Returns:
        The classified ChangeSet (all lists empty if nothing changed)
    """
    changes = ChangeSet()
    new_ids = new.ids()
    
    for after in new:
        before = old.get(after.id)
        if before is None:
            changes.created.append(after)
            continue
        if not _add_relocation(changes, before, after) and before.fingerprint != after.fingerprint:
            changes.modified.append(after)
    
    for before in old:
        if before.id not in new_ids:
            changes.deleted.append(before)
    
    return changes


def link_relocations(
    changes: ChangeSet,
    current: Snapshot,
    previous: Optional[Snapshot] = None,
) -> ChangeSet:
    """
    Turn scope crossings back into moved/renamed pairs.
    
    A watcher diffs only the part of the tree it can see, so an entry
    that moves out of its view shows up as deleted and one that moves in
    shows up as created. Looking the id up in the full current (and
    previous) listing restores the pair; dispatch then reports the side
    outside the watcher's view as None.
    
    Args:
        changes: Result of ``classify`` on a filtered view
        current: Unfiltered listing the view was taken from
        previous: Unfiltered listing from the cycle before, if any
        
    Returns:
        A new ChangeSet with crossings expressed as pairs
    """
    linked = ChangeSet(
        modified=list(changes.modified),
        renamed=list(changes.renamed),
        moved=list(changes.moved),
    )
    
    for before in changes.deleted:
        after = current.get(before.id)
        if after is None or not _add_relocation(linked, before, after):
            linked.deleted.append(before)
    
    for after in changes.created:
        before = previous.get(after.id) if previous is not None else None
        if before is None or not _add_relocation(linked, before, after):
            linked.created.append(after)
    
    return linked


@dataclass
class HostBatch:
    """
    One batch of change notifications pushed by the host.
    
    ``moved_to[i]`` and ``moved_from[i]`` describe the same move.
    
    Attributes:
        imported: Paths the host (re)imported this batch
        deleted: Paths the host removed
        moved_to: Destination path of each move
        moved_from: Source path of each move
    """
    imported: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    moved_to: List[str] = field(default_factory=list)
    moved_from: List[str] = field(default_factory=list)

    def __post_init__(self):
        if len(self.moved_to) != len(self.moved_from):
            raise BatchShapeError(
                f"moved_to has {len(self.moved_to)} entries but "
                f"moved_from has {len(self.moved_from)}"
            )
        self.imported = [normalize_path(p) for p in self.imported]
        self.deleted = [normalize_path(p) for p in self.deleted]
        self.moved_to = [normalize_path(p) for p in self.moved_to]
        self.moved_from = [normalize_path(p) for p in self.moved_from]

    def __len__(self) -> int:
        return len(self.imported) + len(self.deleted) + len(self.moved_to)


def classify_batch(
    batch: HostBatch,
    previous: Snapshot,
    resolve: IdentityResolver,
    reference: Optional[Snapshot] = None,
) -> ChangeSet:
    """
    Classify a host-pushed batch against a stored snapshot.
    
    Imported paths whose identity is unknown to ``previous`` are created;
    known ones at the same path are modified. Deleted paths are looked up
    in ``previous``. The source of a move is looked up in ``previous``,
    then in ``reference``; a move whose source is unknown to both becomes
    a creation, and a move whose destination cannot be resolved becomes a
    deletion. Otherwise the directory/name rules of ``classify`` apply.
    
    Args:
        batch: The host notification
        previous: Snapshot the batch is relative to
        resolve: Identity authority for paths that exist after the batch
        reference: Wider listing used to find move sources outside ``previous``
        
    Returns:
        The classified ChangeSet
    """
    changes = ChangeSet()
    
    for path in batch.imported:
        after = resolve(path)
        if after is None or not after.id:
            logger.debug(f"Imported path has no identity yet: {path}")
            continue
        before = previous.get(after.id)
        if before is None:
            changes.created.append(after)
        elif before.path == after.path:
            changes.modified.append(after)
    
    for path in batch.deleted:
        before = previous.by_path(path)
        if before is None:
            logger.debug(f"Deleted path was not tracked: {path}")
            continue
        changes.deleted.append(before)
    
    for to_path, from_path in zip(batch.moved_to, batch.moved_from):
        before = previous.by_path(from_path)
        if before is None and reference is not None:
            before = reference.by_path(from_path)
        after = resolve(to_path)
        if after is not None and not after.id:
            after = None
        
        if before is None and after is None:
            continue
        if before is None:
            changes.created.append(after)
        elif after is None:
            if before in previous:
                changes.deleted.append(before)
        else:
            _add_relocation(changes, before, after)
    
    return changes
