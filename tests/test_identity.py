"""Tests for identity resolvers."""

from pathlib import Path

from src.assetwatch.categories import AssetCategory
from src.assetwatch.identity import InodeIdentityResolver, MappingIdentityResolver


class TestInodeIdentityResolver:
    """Tests for InodeIdentityResolver."""

    def test_resolves_existing_file(self, tmp_path):
        (tmp_path / "a.png").write_bytes(b"x")
        resolver = InodeIdentityResolver(tmp_path)
        identity = resolver.resolve("a.png")
        assert identity is not None
        assert identity.path == "a.png"
        assert identity.category is AssetCategory.TEXTURE
        assert identity.id

    def test_missing_path_is_unresolved(self, tmp_path):
        resolver = InodeIdentityResolver(tmp_path)
        assert resolver("missing.png") is None

    def test_id_survives_rename(self, tmp_path):
        (tmp_path / "dir").mkdir()
        (tmp_path / "a.png").write_bytes(b"x")
        resolver = InodeIdentityResolver(tmp_path)
        before = resolver("a.png")
        (tmp_path / "a.png").rename(tmp_path / "dir" / "b.png")
        after = resolver("dir/b.png")
        assert before == after
        assert after.path == "dir/b.png"

    def test_directory_category(self, tmp_path):
        (tmp_path / "dir").mkdir()
        assert InodeIdentityResolver(tmp_path)("dir").category is AssetCategory.FOLDER


class TestMappingIdentityResolver:
    """Tests for MappingIdentityResolver."""

    def test_unregistered_path_is_unresolved(self, tmp_path):
        (tmp_path / "a.png").write_bytes(b"x")
        resolver = MappingIdentityResolver(tmp_path)
        assert resolver("a.png") is None

    def test_registered_path(self, tmp_path):
        (tmp_path / "a.png").write_bytes(b"xyz")
        resolver = MappingIdentityResolver(tmp_path, {"a.png": "guid-1"})
        identity = resolver("a.png")
        assert identity.id == "guid-1"
        assert identity.size == 3

    def test_registered_but_missing_on_disk(self, tmp_path):
        resolver = MappingIdentityResolver(tmp_path, {"gone.png": "guid-1"})
        assert resolver("gone.png") is None

    def test_move_and_forget(self, tmp_path):
        resolver = MappingIdentityResolver(tmp_path, {"a.png": "guid-1"})
        assert resolver.move("a.png", "b/a.png") is True
        assert resolver.id_for("b/a.png") == "guid-1"
        assert resolver.id_for("a.png") is None
        assert resolver.move("nothing.png", "x.png") is False
        assert resolver.forget("b/a.png") is True
        assert resolver.forget("b/a.png") is False
        assert len(resolver) == 0

    def test_paths_are_normalized(self, tmp_path):
        resolver = MappingIdentityResolver(Path(tmp_path), {"./dir\\a.png": "guid-1"})
        assert resolver.id_for("dir/a.png") == "guid-1"
