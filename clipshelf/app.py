"""
Command-line front end for the categorized clipboard.

Usage::

    clipshelf categories
    clipshelf list [CATEGORY]
    clipshelf add CATEGORY PATH [PATH ...]
    clipshelf remove CATEGORY PATH [PATH ...]
    clipshelf sort CATEGORY
    clipshelf clear CATEGORY
    clipshelf add-category NAME
    clipshelf remove-category NAME
"""

import argparse
import sys
from typing import List, Optional
from loguru import logger

from clipshelf.core.clipboard import ClipboardRegistry
from clipshelf.core.resources import FileResolver, FileResource
from clipshelf.core.storage import DatabaseManager, DatabasePreferenceStore, InMemoryPreferenceStore
from clipshelf.utils import ConfigManager
from clipshelf.utils.config_manager import app_data_dir


class ClipShelfApp:
    """Wires configuration, storage and the clipboard registry together"""

    def __init__(self, config_path: Optional[str] = None, db_path: Optional[str] = None,
                 setup_logging: bool = True):
        """
        Initialize application

        Args:
            config_path: Optional path of the user settings file
            db_path: Optional database path overriding the configuration
            setup_logging: Configure loguru sinks
        """
        self.config_path = config_path
        self.db_path = db_path
        self.config_manager = None
        self.database_manager = None
        self.store = None
        self.resolver = None
        self.registry = None

        self._setup_logging_enabled = setup_logging

    def _setup_logging(self):
        """Configure logging"""
        level = str(self.config_manager.get('logging.level', 'INFO')).upper()

        logger.remove()  # Remove default handler

        # Console logging
        logger.add(
            sys.stderr,
            level=level,
            format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}"
        )

        # File logging
        if self.config_manager.get('logging.file_logging'):
            log_dir = app_data_dir() / 'logs'
            # Create logs directory
            log_dir.mkdir(parents=True, exist_ok=True)
            logger.add(
                log_dir / "clipshelf_{time:YYYY-MM-DD}.log",
                rotation="1 day",
                retention="7 days",
                level="DEBUG",
                format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
            )

    def initialize(self) -> bool:
        """Initialize all components"""
        # Load configuration
        self.config_manager = ConfigManager(self.config_path)

        if self._setup_logging_enabled:
            self._setup_logging()

        if not self.config_manager.validate():
            logger.error("Invalid configuration")
            return False

        # Initialize storage
        try:
            if self.config_manager.get('storage.backend') == 'memory':
                self.store = InMemoryPreferenceStore()
            else:
                db_path = self.db_path or self.config_manager.get('storage.database_path')
                self.database_manager = DatabaseManager(db_path)
                self.store = DatabasePreferenceStore(self.database_manager)

        except Exception as e:
            logger.error(f"Failed to initialize storage: {e}")
            return False

        # Initialize clipboard registry
        self.resolver = FileResolver(self.config_manager.get('clipboard.resource_root'))
        self.registry = ClipboardRegistry(
            self.store,
            self.resolver,
            default_category=self.config_manager.get('clipboard.default_category'),
            key_prefix=self.config_manager.get('clipboard.key_prefix'),
            auto_save=bool(self.config_manager.get('clipboard.auto_save')),
        )
        self.registry.initialize()

        logger.debug("Application initialized successfully")
        return True

    def shutdown(self):
        """Persist clipboard state and release storage"""
        # Persist dirty categories
        if self.registry:
            self.registry.dispose()

        # Close database
        if self.database_manager:
            self.database_manager.close()


def _require_category(registry: ClipboardRegistry, name: str):
    collection = registry.get(name)
    if collection is None:
        print(f"Error: unknown category '{name}'", file=sys.stderr)
    return collection


def cmd_categories(app: ClipShelfApp, args) -> int:
    for collection in app.registry:
        suffix = " (folded)" if collection.folded else ""
        print(f"{collection.name}\t{len(collection)}{suffix}")
    return 0


def cmd_list(app: ClipShelfApp, args) -> int:
    names = [args.category] if args.category else app.registry.category_names
    for name in names:
        collection = _require_category(app.registry, name)
        if collection is None:
            return 1

        print(f"[{collection.name}]")
        for ref in collection:
            print(f"  {app.resolver.identifier_of(ref) or ref.name}")
    return 0


def cmd_add(app: ClipShelfApp, args) -> int:
    collection = _require_category(app.registry, args.category)
    if collection is None:
        return 1

    candidates = [FileResource(path) for path in args.paths]
    missing = [str(ref.path) for ref in candidates if not ref.alive]
    for path in missing:
        print(f"Warning: not found: {path}", file=sys.stderr)

    added = collection.add(candidates)
    print(f"Added {added} item(s) to '{collection.name}'")
    return 0


def cmd_remove(app: ClipShelfApp, args) -> int:
    collection = _require_category(app.registry, args.category)
    if collection is None:
        return 1

    for path in args.paths:
        collection.stage_remove(FileResource(path))

    removed = collection.commit_removals()
    print(f"Removed {removed} item(s) from '{collection.name}'")
    return 0


def cmd_sort(app: ClipShelfApp, args) -> int:
    if _require_category(app.registry, args.category) is None:
        return 1

    app.registry.selected_category = args.category
    app.registry.sort_selected_category()
    return 0


def cmd_clear(app: ClipShelfApp, args) -> int:
    collection = _require_category(app.registry, args.category)
    if collection is None:
        return 1

    collection.clear()
    return 0


def cmd_add_category(app: ClipShelfApp, args) -> int:
    if not app.registry.add_category(args.name):
        print(f"Error: cannot add category '{args.name}'", file=sys.stderr)
        return 1
    return 0


def cmd_remove_category(app: ClipShelfApp, args) -> int:
    if not app.registry.remove_category(args.name):
        print(f"Error: unknown category '{args.name}'", file=sys.stderr)
        return 1
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clipshelf",
        description="Keep categorized references to files across sessions.",
    )
    parser.add_argument("--config", help="Path of the settings file")
    parser.add_argument("--db", help="Path of the preference database")

    subparsers = parser.add_subparsers(dest="command", required=True)

    p = subparsers.add_parser("categories", help="List categories")
    p.set_defaults(func=cmd_categories)

    p = subparsers.add_parser("list", help="List items")
    p.add_argument("category", nargs="?")
    p.set_defaults(func=cmd_list)

    p = subparsers.add_parser("add", help="Add files to a category")
    p.add_argument("category")
    p.add_argument("paths", nargs="+")
    p.set_defaults(func=cmd_add)

    p = subparsers.add_parser("remove", help="Remove files from a category")
    p.add_argument("category")
    p.add_argument("paths", nargs="+")
    p.set_defaults(func=cmd_remove)

    p = subparsers.add_parser("sort", help="Sort a category by name")
    p.add_argument("category")
    p.set_defaults(func=cmd_sort)

    p = subparsers.add_parser("clear", help="Remove every item of a category")
    p.add_argument("category")
    p.set_defaults(func=cmd_clear)

    p = subparsers.add_parser("add-category", help="Create a category")
    p.add_argument("name")
    p.set_defaults(func=cmd_add_category)

    p = subparsers.add_parser("remove-category", help="Delete a category")
    p.add_argument("name")
    p.set_defaults(func=cmd_remove_category)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)

    # Create application
    app = ClipShelfApp(config_path=args.config, db_path=args.db)
    if not app.initialize():
        logger.error("Failed to initialize application")
        return 1

    try:
        return args.func(app, args)
    finally:
        app.shutdown()


if __name__ == "__main__":
    sys.exit(main())
