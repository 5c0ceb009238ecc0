"""Tests for categories module."""

import pytest

from src.assetwatch.categories import (
    AssetCategory,
    CategoryFilter,
    category_of,
    extensions_of,
)


class TestCategoryOf:
    """Tests for extension → category lookup."""

    def test_known_extensions(self):
        assert category_of(".png") is AssetCategory.TEXTURE
        assert category_of(".wav") is AssetCategory.AUDIO
        assert category_of(".mat") is AssetCategory.MATERIAL
        assert category_of(".cs") is AssetCategory.SCRIPT
        assert category_of(".prefab") is AssetCategory.PREFAB

    def test_empty_extension_is_folder(self):
        assert category_of("") is AssetCategory.FOLDER

    def test_unknown_extension_does_not_raise(self):
        assert category_of(".xyz") is AssetCategory.UNKNOWN

    def test_lookup_is_case_insensitive(self):
        assert category_of(".PNG") is AssetCategory.TEXTURE
        assert category_of(".physicMaterial") is AssetCategory.PHYSIC_MATERIAL


class TestExtensionsOf:
    """Tests for category → extensions lookup."""

    def test_texture_extensions(self):
        assert {".png", ".jpg", ".psd"} <= extensions_of(AssetCategory.TEXTURE)

    def test_round_trip_for_every_mapped_extension(self):
        for category in AssetCategory:
            for ext in extensions_of(category):
                assert category_of(ext) is category

    def test_unknown_has_no_extensions(self):
        assert extensions_of(AssetCategory.UNKNOWN) == frozenset()


class TestCategoryFilter:
    """Tests for CategoryFilter bitsets."""

    def test_match_all_matches_everything(self):
        for category in AssetCategory:
            assert CategoryFilter.MATCH_ALL.matches(category)
        assert CategoryFilter.MATCH_ALL.is_match_all

    def test_single_category(self):
        audio = CategoryFilter.of(AssetCategory.AUDIO)
        assert audio.matches(AssetCategory.AUDIO)
        assert not audio.matches(AssetCategory.TEXTURE)
        assert not audio.includes_folders

    def test_union_of_categories(self):
        combined = AssetCategory.CUBEMAP | AssetCategory.FLARE
        assert isinstance(combined, CategoryFilter)
        assert combined.categories == {AssetCategory.CUBEMAP, AssetCategory.FLARE}

    def test_union_with_match_all_is_match_all(self):
        combined = CategoryFilter.of(AssetCategory.AUDIO) | CategoryFilter.MATCH_ALL
        assert combined == CategoryFilter.MATCH_ALL

    def test_empty_filter_matches_nothing(self):
        empty = CategoryFilter()
        assert not any(empty.matches(c) for c in AssetCategory)

    def test_category_without_extensions_never_matches(self):
        unknown = CategoryFilter.of(AssetCategory.UNKNOWN, AssetCategory.FOLDER)
        assert not unknown.matches(AssetCategory.UNKNOWN)
        assert unknown.matches(AssetCategory.FOLDER)
        assert AssetCategory.UNKNOWN in unknown.categories

    def test_extensions_exclude_folder_marker(self):
        with_folders = CategoryFilter.of(AssetCategory.FOLDER, AssetCategory.AUDIO)
        assert "" not in with_folders.extensions()
        assert ".wav" in with_folders.extensions()
        assert with_folders.includes_folders

    def test_equality_and_hash(self):
        a = CategoryFilter.of(AssetCategory.AUDIO, AssetCategory.VIDEO)
        b = AssetCategory.VIDEO | AssetCategory.AUDIO
        assert a == b
        assert hash(a) == hash(b)
        assert a != CategoryFilter.of(AssetCategory.AUDIO)

    def test_contains(self):
        assert AssetCategory.TEXTURE in CategoryFilter.of(AssetCategory.TEXTURE)

    def test_parse_names(self):
        parsed = CategoryFilter.parse(["texture", "Audio"])
        assert parsed == CategoryFilter.of(AssetCategory.TEXTURE, AssetCategory.AUDIO)

    def test_parse_empty_or_all(self):
        assert CategoryFilter.parse(None) is CategoryFilter.MATCH_ALL
        assert CategoryFilter.parse([]) is CategoryFilter.MATCH_ALL
        assert CategoryFilter.parse(["all"]) is CategoryFilter.MATCH_ALL

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError):
            CategoryFilter.parse(["sprites"])
