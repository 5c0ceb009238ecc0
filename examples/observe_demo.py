#!/usr/bin/env python3
"""
Asset watcher demo.

This example demonstrates:
1. A recursive watcher over the whole asset folder
2. A non-recursive texture-only watcher on one subfolder
3. Created, modified, renamed, moved and deleted events

Usage:
    python examples/observe_demo.py
"""

import logging
import sys
import tempfile
import time
from pathlib import Path

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.assetwatch import (
    AssetCategory,
    CategoryFilter,
    EngineConfig,
    InodeIdentityResolver,
    Scheduler,
    SnapshotScanner,
)


logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")
logger = logging.getLogger("demo")


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        base = Path(tmp) / "Assets"
        (base / "textures").mkdir(parents=True)
        (base / "audio").mkdir()

        config = EngineConfig(base_path=base, scan_interval_ms=200)
        scanner = SnapshotScanner(InodeIdentityResolver(base), config)

        with Scheduler(scanner, config=config) as scheduler:
            everything = scheduler.watch()
            textures = scheduler.watch("textures", CategoryFilter.of(AssetCategory.TEXTURE))

            everything.on_created(lambda a: logger.info(f"[all] created {a.path}"))
            everything.on_deleted(lambda a: logger.info(f"[all] deleted {a.path}"))
            everything.on_modified(lambda a: logger.info(f"[all] modified {a.path}"))
            everything.on_renamed(lambda b, a: logger.info(f"[all] renamed {b.name} -> {a.name}"))
            everything.on_moved(lambda b, a: logger.info(f"[all] moved {b.path} -> {a.path}"))

            textures.on_created(lambda a: logger.info(f"[textures] created {a.name}"))
            textures.on_moved(
                lambda b, a: logger.info(f"[textures] moved {b.path if b else None} -> {a.path if a else None}")
            )

            scheduler.run_cycle()

            steps = [
                ("create", lambda: (base / "textures" / "wall.png").write_bytes(b"png")),
                ("modify", lambda: (base / "textures" / "wall.png").write_bytes(b"png, larger")),
                ("rename", lambda: (base / "textures" / "wall.png").rename(base / "textures" / "brick.png")),
                ("move", lambda: (base / "textures" / "brick.png").rename(base / "audio" / "brick.png")),
                ("delete", lambda: (base / "audio" / "brick.png").unlink()),
            ]
            for label, action in steps:
                logger.info(f"--- {label}")
                action()
                time.sleep(0.05)
                scheduler.run_cycle()

            textures.disable()
            everything.disable()


if __name__ == "__main__":
    main()
