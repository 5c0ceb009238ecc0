"""Asset categories derived from file extensions, and filters over them."""

from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional


class AssetCategory(Enum):
    """The type of a single asset entry."""
    FOLDER = "folder"
    ASSET = "asset"
    SCENE = "scene"
    MATERIAL = "material"
    SHADER = "shader"
    SCRIPT = "script"
    MODEL = "model"
    TEXT = "text"
    TEXTURE = "texture"
    AUDIO = "audio"
    VIDEO = "video"
    CUBEMAP = "cubemap"
    ANIMATION = "animation"
    FLARE = "flare"
    GUI_SKIN = "gui_skin"
    PHYSIC_MATERIAL = "physic_material"
    FONT = "font"
    PREFAB = "prefab"
    UNKNOWN = "unknown"

    @property
    def bit(self) -> int:
        """Bit used for this category inside a CategoryFilter mask."""
        return _BITS[self]

    def __or__(self, other):
        return CategoryFilter.of(self) | other


_BITS: Dict[AssetCategory, int] = {
    category: 1 << index for index, category in enumerate(AssetCategory)
}

_EXTENSIONS: Dict[AssetCategory, FrozenSet[str]] = {
    AssetCategory.FOLDER: frozenset({""}),
    AssetCategory.ASSET: frozenset({".asset"}),
    AssetCategory.SCENE: frozenset({".unity"}),
    AssetCategory.MATERIAL: frozenset({".mat"}),
    AssetCategory.SHADER: frozenset({".shader"}),
    AssetCategory.SCRIPT: frozenset({".cs", ".js", ".boo"}),
    AssetCategory.MODEL: frozenset({
        ".ma", ".mb", ".fbx", ".max", ".jas", ".c4d", ".blend",
        ".lwo", ".skp", ".3ds", ".obj", ".dxf",
    }),
    AssetCategory.TEXTURE: frozenset({
        ".psd", ".jpg", ".jpeg", ".png", ".exr", ".tif", ".tiff",
        ".gif", ".bmp", ".tga", ".iff", ".pict",
    }),
    AssetCategory.AUDIO: frozenset({".wav", ".aif", ".aiff", ".mp3", ".ogg"}),
    AssetCategory.VIDEO: frozenset({".mov", ".avi", ".asf", ".mpg", ".mpeg", ".mp4"}),
    AssetCategory.TEXT: frozenset({".txt", ".xml"}),
    AssetCategory.CUBEMAP: frozenset({".cubemap"}),
    AssetCategory.ANIMATION: frozenset({".anim"}),
    AssetCategory.GUI_SKIN: frozenset({".guiskin"}),
    AssetCategory.PHYSIC_MATERIAL: frozenset({".physicmaterial"}),
    AssetCategory.FLARE: frozenset({".flare"}),
    AssetCategory.FONT: frozenset({".fontsettings"}),
    AssetCategory.PREFAB: frozenset({".prefab"}),
}

_BY_EXTENSION: Dict[str, AssetCategory] = {
    ext: category
    for category, extensions in _EXTENSIONS.items()
    for ext in extensions
}


def category_of(extension: str) -> AssetCategory:
    """
    Map a file extension to its category.
    
    Args:
        extension: Extension with leading dot (``".png"``), or ``""`` for folders
        
    Returns:
        The matching category; UNKNOWN for extensions not in the table
    """
    return _BY_EXTENSION.get(extension.lower(), AssetCategory.UNKNOWN)


def extensions_of(category: AssetCategory) -> FrozenSet[str]:
    """Return the extensions mapped to a category (empty for UNKNOWN)."""
    return _EXTENSIONS.get(category, frozenset())


class CategoryFilter:
    """
    Set of categories a watcher wants to observe.
    
    Kept distinct from AssetCategory: a category describes one entry,
    a filter is a bitset over many. ``CategoryFilter.MATCH_ALL`` disables
    filtering entirely.
    """

    __slots__ = ("_mask", "_match_all")

    MATCH_ALL: "CategoryFilter"

    def __init__(self, categories: Iterable[AssetCategory] = (), match_all: bool = False):
        mask = 0
        for category in categories:
            mask |= category.bit
        self._mask = mask
        self._match_all = match_all

    @classmethod
    def of(cls, *categories: AssetCategory) -> "CategoryFilter":
        """Build a filter from one or more categories."""
        return cls(categories)

    @classmethod
    def parse(cls, names: Optional[Iterable[str]]) -> "CategoryFilter":
        """
        Build a filter from category names such as ``["texture", "audio"]``.
        
        An empty or missing list, or the name ``"all"``, yields MATCH_ALL.
        
        Raises:
            ValueError: If a name is not a known category
        """
        names = [n.strip().lower() for n in (names or []) if n.strip()]
        if not names or "all" in names:
            return cls.MATCH_ALL
        return cls(AssetCategory(name) for name in names)

    @property
    def is_match_all(self) -> bool:
        return self._match_all

    @property
    def categories(self) -> FrozenSet[AssetCategory]:
        """Categories covered by this filter (every category for MATCH_ALL)."""
        if self._match_all:
            return frozenset(AssetCategory)
        return frozenset(c for c in AssetCategory if self._mask & c.bit)

    @property
    def includes_folders(self) -> bool:
        return self.matches(AssetCategory.FOLDER)

    def matches(self, category: AssetCategory) -> bool:
        """
        True if the filter is MATCH_ALL or the category's bit is set.

        A category with no mapped extensions (other than FOLDER) never
        matches under an explicit filter, the same as for the scanner.
        """
        if self._match_all:
            return True
        if (self._mask & category.bit) == 0:
            return False
        return category is AssetCategory.FOLDER or bool(extensions_of(category))

    def extensions(self) -> FrozenSet[str]:
        """
        File extensions a scanner should look for under this filter.
        
        The folder marker ``""`` is never included; folders are governed
        by ``includes_folders``.
        """
        found = set()
        for category in self.categories:
            if category is AssetCategory.FOLDER:
                continue
            found.update(extensions_of(category))
        return frozenset(found)

    def __or__(self, other):
        if isinstance(other, AssetCategory):
            other = CategoryFilter.of(other)
        if not isinstance(other, CategoryFilter):
            return NotImplemented
        if self._match_all or other._match_all:
            return CategoryFilter.MATCH_ALL
        result = CategoryFilter()
        result._mask = self._mask | other._mask
        return result

    __ror__ = __or__

    def __contains__(self, category: AssetCategory) -> bool:
        return self.matches(category)

    def __eq__(self, other) -> bool:
        if not isinstance(other, CategoryFilter):
            return NotImplemented
        return self._match_all == other._match_all and (
            self._match_all or self._mask == other._mask
        )

    def __hash__(self) -> int:
        return hash((self._match_all, 0 if self._match_all else self._mask))

    def __repr__(self) -> str:
        if self._match_all:
            return "CategoryFilter.MATCH_ALL"
        names = ", ".join(sorted(c.value for c in self.categories))
        return f"CategoryFilter({names})"


CategoryFilter.MATCH_ALL = CategoryFilter(match_all=True)
