#!/usr/bin/env python3
"""
CLI for watching an asset folder for changes.

Usage:
    python -m src.cli watch --base ./Assets
    python -m src.cli watch --base ./Assets --root textures --recursive --types texture
    python -m src.cli watch --base ./Assets --once
"""

import argparse
import logging
import os
import signal
import sys
import time
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Add repository root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

_env_file = Path(__file__).parent.parent / ".env"
if _env_file.exists():
    load_dotenv(_env_file)
else:
    load_dotenv()

from src.assetwatch import (
    CategoryFilter,
    EngineConfig,
    InodeIdentityResolver,
    Scheduler,
    SnapshotScanner,
    Watcher,
)


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("cli")


class GracefulShutdown:
    """Handle graceful shutdown on SIGINT/SIGTERM."""
    
    def __init__(self):
        self.should_exit = False
        signal.signal(signal.SIGINT, self._handler)
        signal.signal(signal.SIGTERM, self._handler)
    
    def _handler(self, signum, frame):
        logger.info("Received shutdown signal, stopping...")
        self.should_exit = True


def attach_logging_listeners(watcher: Watcher) -> None:
    """Log every change the watcher sees."""

    def created(asset):
        logger.info(f"Created asset '{asset.name}' of type {asset.category.value}")

    def deleted(asset):
        logger.info(f"Deleted asset '{asset.name}' of type {asset.category.value}")

    def modified(asset):
        logger.info(f"Modified asset '{asset.name}' of type {asset.category.value}")

    def moved(before, after):
        source = before.directory if before else "<outside>"
        target = after.directory if after else "<outside>"
        name = (after or before).name
        logger.info(f"Moved asset '{name}' from '{source}' to '{target}'")

    def renamed(before, after):
        old_name = before.name if before else "<outside>"
        new_name = after.name if after else "<outside>"
        logger.info(f"Renamed asset from '{old_name}' to '{new_name}'")

    watcher.on_created(created)
    watcher.on_deleted(deleted)
    watcher.on_modified(modified)
    watcher.on_moved(moved)
    watcher.on_renamed(renamed)


def build_config(args) -> EngineConfig:
    """Build the engine config from arguments, falling back to the environment."""
    base = args.base or os.environ.get("ASSETWATCH_BASE_PATH", "Assets")
    interval = args.interval or int(os.environ.get("ASSETWATCH_SCAN_INTERVAL_MS", "1000"))
    return EngineConfig(
        base_path=Path(base).resolve(),
        scan_interval_ms=interval,
        follow_symlinks=args.follow_symlinks,
        report_existing=args.report_existing,
    )


def cmd_watch(args) -> int:
    """Run the scan scheduler with one logging watcher."""
    config = build_config(args)
    
    if not config.base_path.is_dir():
        logger.error(f"Base path is not a directory: {config.base_path}")
        return 1
    
    try:
        category_filter = CategoryFilter.parse(args.types)
    except ValueError as e:
        logger.error(f"Unknown asset type: {e}")
        return 1
    
    scanner = SnapshotScanner(InodeIdentityResolver(config.base_path, config.follow_symlinks), config)
    
    with Scheduler(scanner, config=config) as scheduler:
        recursive = True if args.recursive else None
        with scheduler.watch(args.root, category_filter, recursive) as watcher:
            attach_logging_listeners(watcher)
            logger.info(
                f"Began watching '{config.base_path / watcher.root}' for changes "
                f"to assets of type {category_filter!r}"
            )
            
            if args.once:
                scheduler.run_cycle()
                time.sleep(config.scan_interval)
                scheduler.run_cycle()
                return 0
            
            shutdown = GracefulShutdown()
            scheduler.start_async()
            logger.info("Press Ctrl+C to stop")
            while not shutdown.should_exit:
                time.sleep(0.5)
    
    logger.info("Watcher stopped")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Watch an asset folder and report created, deleted, modified, renamed and moved assets",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    
    subparsers = parser.add_subparsers(dest="command")
    
    watch = subparsers.add_parser("watch", help="Watch a folder for asset changes")
    watch.add_argument("--base", help="Base asset folder (env: ASSETWATCH_BASE_PATH)")
    watch.add_argument("--root", default="", help="Folder to watch, relative to the base")
    watch.add_argument("--recursive", action="store_true", help="Include subfolders of --root")
    watch.add_argument(
        "--types",
        nargs="*",
        default=None,
        help="Asset types to report, e.g. texture audio (default: all)",
    )
    watch.add_argument(
        "--interval",
        type=int,
        default=None,
        help="Scan interval in ms (env: ASSETWATCH_SCAN_INTERVAL_MS)",
    )
    watch.add_argument("--follow-symlinks", action="store_true", help="Scan symlinked entries")
    watch.add_argument(
        "--report-existing",
        action="store_true",
        help="Report assets present at startup as created",
    )
    watch.add_argument("--once", action="store_true", help="Run two scan cycles and exit")
    watch.set_defaults(func=cmd_watch)
    
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    
    if not getattr(args, "func", None):
        parser.print_help()
        return 1
    
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
