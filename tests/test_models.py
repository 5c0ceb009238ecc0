"""Tests for models module."""

import os

import pytest

from src.assetwatch.categories import AssetCategory
from src.assetwatch.models import (
    AssetIdentity,
    ChangeKind,
    ChangeRecord,
    ChangeSet,
    Snapshot,
    normalize_path,
)


class TestNormalizePath:
    """Tests for normalize_path."""

    def test_posix_form(self):
        assert normalize_path("textures\\sub\\a.png") == "textures/sub/a.png"
        assert normalize_path("./textures/a.png") == "textures/a.png"
        assert normalize_path("textures/") == "textures"

    def test_base_is_empty(self):
        assert normalize_path("") == ""
        assert normalize_path(".") == ""


class TestAssetIdentity:
    """Tests for AssetIdentity."""

    def test_name_and_directory(self):
        identity = AssetIdentity("1", "Assets/textures/a.png")
        assert identity.name == "a.png"
        assert identity.directory == "Assets/textures"
        assert identity.extension == ".png"

    def test_top_level_directory_is_empty(self):
        assert AssetIdentity("1", "a.mat").directory == ""

    def test_equality_uses_id_only(self):
        a = AssetIdentity("1", "a/x.png", mod_time=1.0)
        b = AssetIdentity("1", "b/y.png", mod_time=2.0)
        c = AssetIdentity("2", "a/x.png", mod_time=1.0)
        assert a == b
        assert hash(a) == hash(b)
        assert a != c

    def test_immutable(self):
        identity = AssetIdentity("1", "a.png")
        with pytest.raises(AttributeError):
            identity.path = "b.png"

    def test_from_stat_file(self, tmp_path):
        target = tmp_path / "a.wav"
        target.write_bytes(b"12345")
        identity = AssetIdentity.from_stat("7", "sounds/a.wav", os.stat(target))
        assert identity.category is AssetCategory.AUDIO
        assert identity.size == 5
        assert identity.mod_time == os.stat(target).st_mtime

    def test_from_stat_directory(self, tmp_path):
        identity = AssetIdentity.from_stat("7", "sounds", os.stat(tmp_path), is_directory=True)
        assert identity.category is AssetCategory.FOLDER

    def test_from_stat_file_without_extension_is_unknown(self, tmp_path):
        target = tmp_path / "README"
        target.write_text("x")
        identity = AssetIdentity.from_stat("7", "README", os.stat(target))
        assert identity.category is AssetCategory.UNKNOWN

    def test_relative_to(self):
        identity = AssetIdentity("1", "textures/sub/a.png")
        assert identity.relative_to("textures") == "sub/a.png"
        assert identity.relative_to("") == "textures/sub/a.png"
        assert identity.relative_to("text") is None

    def test_absolute(self, tmp_path):
        identity = AssetIdentity("1", "textures/a.png")
        assert identity.absolute(tmp_path) == tmp_path / "textures" / "a.png"

    def test_to_dict_from_dict(self):
        identity = AssetIdentity("1", "a.png", AssetCategory.TEXTURE, 1.5, 1.0, 10, 0o644)
        restored = AssetIdentity.from_dict(identity.to_dict())
        assert restored == identity
        assert restored.path == identity.path
        assert restored.category is AssetCategory.TEXTURE
        assert restored.fingerprint == identity.fingerprint


class TestSnapshot:
    """Tests for Snapshot."""

    def test_drops_empty_ids(self):
        snapshot = Snapshot([AssetIdentity("", "a.png"), AssetIdentity("1", "b.png")])
        assert len(snapshot) == 1
        assert "1" in snapshot

    def test_deduplicates_by_id_keeping_first(self):
        snapshot = Snapshot([AssetIdentity("1", "a.png"), AssetIdentity("1", "b.png")])
        assert len(snapshot) == 1
        assert snapshot.get("1").path == "a.png"

    def test_preserves_scan_order(self):
        paths = ["c.png", "a.png", "b.png"]
        snapshot = Snapshot(AssetIdentity(str(i), p) for i, p in enumerate(paths))
        assert [i.path for i in snapshot] == paths

    def test_by_path(self):
        snapshot = Snapshot([AssetIdentity("1", "textures/a.png")])
        assert snapshot.by_path("textures/a.png").id == "1"
        assert snapshot.by_path("./textures/a.png").id == "1"
        assert snapshot.by_path("missing.png") is None

    def test_contains_identity_or_id(self):
        identity = AssetIdentity("1", "a.png")
        snapshot = Snapshot([identity])
        assert identity in snapshot
        assert "1" in snapshot
        assert "2" not in snapshot

    def test_apply(self):
        a = AssetIdentity("1", "a.png")
        b = AssetIdentity("2", "b.png", size=1)
        c = AssetIdentity("3", "dir/c.png")
        snapshot = Snapshot([a, b, c])
        changes = ChangeSet(
            created=[AssetIdentity("4", "d.png")],
            deleted=[a],
            modified=[AssetIdentity("2", "b.png", size=2)],
            moved=[(c, AssetIdentity("3", "other/c.png"))],
        )
        result = snapshot.apply(changes)
        assert result.ids() == {"2", "3", "4"}
        assert result.get("2").size == 2
        assert result.get("3").path == "other/c.png"
        assert snapshot.ids() == {"1", "2", "3"}

    def test_equality_compares_content(self):
        assert Snapshot([AssetIdentity("1", "a.png")]) == Snapshot([AssetIdentity("1", "a.png")])
        assert Snapshot([AssetIdentity("1", "a.png")]) != Snapshot([AssetIdentity("1", "b.png")])
        assert Snapshot.EMPTY == Snapshot()


class TestChangeSet:
    """Tests for ChangeSet and ChangeRecord."""

    def test_empty(self):
        changes = ChangeSet()
        assert changes.is_empty
        assert len(changes) == 0
        assert list(changes.records()) == []

    def test_records_order(self):
        before = AssetIdentity("5", "a/x.png")
        after = AssetIdentity("5", "b/y.png")
        changes = ChangeSet(
            created=[AssetIdentity("1", "c.png")],
            deleted=[AssetIdentity("2", "d.png")],
            modified=[AssetIdentity("3", "m.png")],
            renamed=[(before, after)],
            moved=[(before, after)],
        )
        kinds = [r.kind for r in changes.records()]
        assert kinds == [
            ChangeKind.CREATED,
            ChangeKind.MODIFIED,
            ChangeKind.RENAMED,
            ChangeKind.MOVED,
            ChangeKind.DELETED,
        ]
        assert len(changes) == 5

    def test_record_identity(self):
        before = AssetIdentity("1", "a.png")
        assert ChangeRecord(ChangeKind.DELETED, before=before).identity is before
        after = AssetIdentity("1", "b.png")
        assert ChangeRecord(ChangeKind.RENAMED, before, after).identity is after

    def test_to_dict(self):
        before = AssetIdentity("5", "a/x.png")
        after = AssetIdentity("5", "b/x.png")
        data = ChangeSet(moved=[(before, after)]).to_dict()
        assert data["moved"][0][0]["path"] == "a/x.png"
        assert data["moved"][0][1]["path"] == "b/x.png"
        assert data["created"] == []
        record = ChangeRecord(ChangeKind.MOVED, before, None).to_dict()
        assert record["kind"] == "moved"
        assert record["after"] is None
