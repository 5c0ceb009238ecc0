"""Shared fixtures for asset watcher tests."""

import pytest

from src.assetwatch.config import EngineConfig
from src.assetwatch.identity import MappingIdentityResolver
from src.assetwatch.scanner import SnapshotScanner


@pytest.fixture
def base(tmp_path):
    """An asset folder with a small tree."""
    root = tmp_path / "Assets"
    (root / "textures" / "sub").mkdir(parents=True)
    (root / "audio").mkdir()
    (root / "textures" / "wall.png").write_bytes(b"wall")
    (root / "textures" / "sub" / "floor.png").write_bytes(b"floor")
    (root / "audio" / "step.wav").write_bytes(b"step")
    (root / "readme.txt").write_text("hello")
    return root


@pytest.fixture
def resolver(base):
    """Identity table covering every entry of the ``base`` tree."""
    return MappingIdentityResolver(base, {
        "textures": "d-textures",
        "textures/sub": "d-sub",
        "audio": "d-audio",
        "textures/wall.png": "wall",
        "textures/sub/floor.png": "floor",
        "audio/step.wav": "step",
        "readme.txt": "readme",
    })


@pytest.fixture
def config(base):
    return EngineConfig(base_path=base, scan_interval_ms=20)


@pytest.fixture
def scanner(resolver, config):
    return SnapshotScanner(resolver, config)
