"""Per-category collection of resource references"""

from typing import Any, Iterable, Iterator, List, Optional
from loguru import logger

from ..resources.base import ReferenceResolver, is_valid_ref
from ..storage.preferences import PreferenceStore, PreferenceNotFoundError
from . import codec

KEY_PREFIX = "clipshelf:clipboard"

# Names starting with this prefix are reserved for registry bookkeeping keys
RESERVED_PREFIX = "___"


class CategoryCollection:
    """Ordered, deduplicated references of one category with deferred saving"""

    def __init__(self, name: str, store: PreferenceStore, resolver: ReferenceResolver,
                 key_prefix: str = KEY_PREFIX):
        """
        Initialize collection, loading persisted items if present

        Args:
            name: Category name
            store: Preference store holding the persisted identifiers
            resolver: Resolver mapping resources to identifiers
            key_prefix: Prefix of the persistence key
        """
        self._name = name
        self._store = store
        self._resolver = resolver
        self._key_prefix = key_prefix
        self._items: List[Any] = []
        self._pending_removal: List[Any] = []
        self._dirty = False
        self.folded = False

        if self._has_persisted():
            self.load()
        else:
            self._dirty = True

    @property
    def name(self) -> str:
        return self._name

    @property
    def key(self) -> str:
        return f"{self._key_prefix}:{self._name}"

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def items(self) -> List[Any]:
        """Copy of the current items"""
        return list(self._items)

    @property
    def pending_removal(self) -> tuple:
        return tuple(self._pending_removal)

    @property
    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._items))

    def __contains__(self, ref: Any) -> bool:
        return ref in self._items

    def __getitem__(self, index: int) -> Optional[Any]:
        if 0 <= index < len(self._items):
            return self._items[index]
        return None

    def __repr__(self):
        return f"CategoryCollection({self._name!r}, items={len(self._items)}, dirty={self._dirty})"

    def add(self, candidates: Iterable[Any]) -> int:
        """
        Append resources that are valid and not already present

        Args:
            candidates: Resources to add, in order

        Returns:
            Number of resources added
        """
        added = 0
        for ref in candidates:
            if not is_valid_ref(ref) or ref in self._items:
                continue

            self._items.append(ref)
            added += 1

        if added:
            self._dirty = True
            logger.debug(f"Added {added} item(s) to '{self._name}'")

        return added

    def stage_remove(self, ref: Any) -> None:
        """Queue a resource for removal on the next commit"""
        if ref in self._pending_removal:
            return

        self._pending_removal.append(ref)
        self._dirty = True

    def commit_removals(self) -> int:
        """
        Apply staged removals

        Returns:
            Number of items removed
        """
        if not self._pending_removal:
            return 0

        before = len(self._items)
        self._items = [ref for ref in self._items if ref not in self._pending_removal]
        self._pending_removal.clear()

        removed = before - len(self._items)
        if removed:
            logger.debug(f"Removed {removed} item(s) from '{self._name}'")
        return removed

    def clear(self) -> None:
        """Drop all items, keeping the persisted entry until the next save"""
        self._items.clear()
        self._pending_removal.clear()
        self._dirty = True

    def remove_all_and_unpersist(self) -> None:
        """Drop all items and delete the persisted entry"""
        self._items.clear()
        self._pending_removal.clear()
        try:
            self._store.delete(self.key)
        except Exception as e:
            logger.error(f"Failed to delete {self.key}: {e}")
        self._dirty = True
        logger.info(f"Category '{self._name}' unpersisted")

    def sort(self) -> None:
        """Order items by display name (stable)"""
        self._items.sort(key=lambda ref: getattr(ref, 'name', ''))
        self._dirty = True

    def load(self) -> None:
        """Append persisted items that still resolve"""
        if not self._has_persisted():
            return

        try:
            value = self._store.get(self.key)
        except PreferenceNotFoundError:
            return

        loaded = 0
        for ref in codec.decode_references(value, self._resolver):
            if ref in self._items:
                continue
            self._items.append(ref)
            loaded += 1

        logger.debug(f"Loaded {loaded} item(s) into '{self._name}'")

    def save(self, force: bool = False) -> bool:
        """
        Persist items if dirty

        Args:
            force: Write even when nothing changed

        Returns:
            True if the store was written
        """
        if not self._name or (not self._dirty and not force):
            return False

        self.commit_removals()

        value = codec.encode_references(self._items, self._resolver)
        try:
            written = self._store.set(self.key, value)
        except Exception as e:
            logger.error(f"Failed to save '{self._name}': {e}")
            return False

        if written is False:
            return False

        self._dirty = False
        logger.debug(f"Saved '{self._name}' ({len(codec.split_tokens(value))} identifiers)")
        return True

    def save_if_dirty(self) -> bool:
        return self.save(force=False)

    def _has_persisted(self) -> bool:
        try:
            return self._store.has(self.key)
        except Exception as e:
            logger.error(f"Preference store unavailable for {self.key}: {e}")
            return False
