"""Registry of clipboard categories"""

from typing import Any, Dict, Iterator, List, Optional
from loguru import logger

from ..resources.base import ReferenceResolver
from ..storage.preferences import PreferenceStore, PreferenceNotFoundError
from . import codec
from .collection import CategoryCollection, KEY_PREFIX, RESERVED_PREFIX
from .selection import SelectionHost, SelectionTracker

DEFAULT_CATEGORY = "Default"


class ClipboardRegistry:
    """Owns the category list, its collections and the current selection"""

    def __init__(self, store: PreferenceStore, resolver: ReferenceResolver,
                 default_category: str = DEFAULT_CATEGORY, key_prefix: str = KEY_PREFIX,
                 auto_save: bool = False, selection_host: Optional[SelectionHost] = None):
        """
        Initialize registry

        Args:
            store: Preference store for categories and items
            resolver: Resolver mapping resources to identifiers
            default_category: Category seeded when nothing is persisted
            key_prefix: Prefix of every persistence key
            auto_save: Save after each removal commit
            selection_host: Optional host notified of selection changes
        """
        self._store = store
        self._resolver = resolver
        self.default_category = default_category
        self.key_prefix = key_prefix
        self.auto_save = auto_save
        self.selection = SelectionTracker(selection_host)

        self._category_names: List[str] = []
        self._collections: Dict[str, CategoryCollection] = {}
        self._selected_category = ""

    @property
    def categories_key(self) -> str:
        return f"{self.key_prefix}:{RESERVED_PREFIX}categories"

    @property
    def folded_key(self) -> str:
        return f"{self.key_prefix}:{RESERVED_PREFIX}folded"

    @property
    def category_names(self) -> List[str]:
        return list(self._category_names)

    @property
    def selected_category(self) -> str:
        return self._selected_category

    @selected_category.setter
    def selected_category(self, name: Optional[str]) -> None:
        name = name or ""
        if name != self._selected_category:
            self.selection.clear()
        self._selected_category = name

    def __len__(self) -> int:
        return len(self._category_names)

    def __iter__(self) -> Iterator[CategoryCollection]:
        return iter([self._collections[name] for name in self._category_names])

    def __contains__(self, name: str) -> bool:
        return name in self._collections

    def __getitem__(self, index: int) -> Optional[CategoryCollection]:
        if 0 <= index < len(self._category_names):
            return self._collections[self._category_names[index]]
        return None

    def get(self, name: str) -> Optional[CategoryCollection]:
        return self._collections.get(name)

    def initialize(self) -> None:
        """Load category names and construct their collections"""
        self._category_names = self._load_category_names()
        self._collections = {name: self._create_collection(name) for name in self._category_names}
        self._selected_category = ""

        for name in codec.decode_names(self._read(self.folded_key)):
            if name in self._collections:
                self._collections[name].folded = True

        logger.info(f"ClipboardRegistry initialized ({len(self._category_names)} categories)")

    def dispose(self) -> None:
        self.save()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()
        return False

    def save(self, force: bool = False) -> None:
        """
        Persist dirty collections and the category list

        Args:
            force: Save every collection regardless of its dirty flag
        """
        for name in self._category_names:
            self._collections[name].save(force)

        self._save_category_names()

        folded = [name for name in self._category_names if self._collections[name].folded]
        self._write(self.folded_key, codec.encode_names(folded))

    @staticmethod
    def is_valid_category_name(name: str) -> bool:
        """Check that a name can be stored in the category list without clashing"""
        if not name or not name.strip():
            return False
        return codec.DELIMITER not in name and not name.startswith(RESERVED_PREFIX)

    def add_category(self, name: str) -> bool:
        """
        Register a new empty category

        Returns:
            True if added, False if the name is taken or can't be persisted
        """
        if name in self._category_names:
            logger.error(f"Category '{name}' already exists")
            return False

        if not self.is_valid_category_name(name):
            logger.error(f"Invalid category name: {name!r}")
            return False

        self._category_names.append(name)
        self._collections[name] = self._create_collection(name)
        self.save()

        logger.info(f"Added category '{name}'")
        return True

    def remove_category(self, name: str) -> bool:
        """
        Delete a category together with its persisted items

        Returns:
            True if the category existed
        """
        if name not in self._collections:
            logger.warning(f"Cannot remove unknown category '{name}'")
            return False

        self._category_names.remove(name)
        collection = self._collections.pop(name)
        collection.remove_all_and_unpersist()

        if self._selected_category == name:
            self._selected_category = ""

        self._save_category_names()

        logger.info(f"Removed category '{name}'")
        return True

    def toggle_category_selection(self, name: str) -> None:
        """Select a category, or deselect it when already selected"""
        if name not in self._collections:
            return
        self.selected_category = "" if self._selected_category == name else name

    def sort_selected_category(self) -> None:
        if not self._selected_category:
            return

        collection = self._collections.get(self._selected_category)
        if collection is None:
            return

        collection.sort()

    def select(self, ref: Any, additive: bool = False) -> None:
        """Select an item; item selection always deselects the category"""
        self._selected_category = ""
        self.selection.select(ref, additive)

    def is_selected(self, ref: Any) -> bool:
        return self.selection.is_selected(ref)

    def clear_selection(self) -> None:
        self.selection.clear()

    def remove_selected(self) -> int:
        """
        Stage removal of the selected items from every category holding them

        Returns:
            Number of removals staged
        """
        staged = 0
        for ref in self.selection.selected:
            for collection in self._collections.values():
                if ref in collection:
                    collection.stage_remove(ref)
                    staged += 1

        self.selection.clear()
        return staged

    def commit_removals(self) -> int:
        """
        Apply staged removals in every category

        Returns:
            Number of items removed
        """
        removed = sum(self._collections[name].commit_removals() for name in self._category_names)

        if self.auto_save and any(c.dirty for c in self._collections.values()):
            self.save()

        return removed

    def _create_collection(self, name: str) -> CategoryCollection:
        return CategoryCollection(name, self._store, self._resolver, key_prefix=self.key_prefix)

    def _load_category_names(self) -> List[str]:
        names = []
        for name in codec.decode_names(self._read(self.categories_key)):
            if self.is_valid_category_name(name):
                names.append(name)
            else:
                logger.warning(f"Ignoring reserved category name: {name!r}")

        if not names:
            names = [self.default_category]
            self._write(self.categories_key, codec.encode_names(names))
            logger.info(f"Seeded default category '{self.default_category}'")
        return names

    def _save_category_names(self) -> None:
        self._write(self.categories_key, codec.encode_names(self._category_names))

    def _read(self, key: str) -> str:
        try:
            if not self._store.has(key):
                return ""
            return self._store.get(key)
        except PreferenceNotFoundError:
            return ""
        except Exception as e:
            logger.error(f"Failed to read {key}: {e}")
            return ""

    def _write(self, key: str, value: str) -> None:
        try:
            written = self._store.set(key, value)
        except Exception as e:
            logger.error(f"Failed to write {key}: {e}")
            return

        if written is False:
            logger.warning(f"Preference store rejected write: {key}")
