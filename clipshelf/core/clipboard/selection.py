"""Cross-category selection of clipboard items"""

from typing import Any, Iterator, List, Optional, Protocol, Sequence
from loguru import logger

from ..resources.base import is_valid_ref


class SelectionHost(Protocol):
    """Host environment receiving selection changes"""

    def set_active(self, ref: Any) -> None:
        """Focus a single resource"""
        ...

    def set_selection(self, refs: Sequence[Any]) -> None:
        """Replace the host multi-selection"""
        ...


class SelectionTracker:
    """Ordered set of selected resources with toggle semantics"""

    def __init__(self, host: Optional[SelectionHost] = None):
        """
        Initialize tracker

        Args:
            host: Optional host notified of selection changes
        """
        self.host = host
        self._selected: List[Any] = []

    @property
    def selected(self) -> tuple:
        return tuple(self._selected)

    def __len__(self) -> int:
        return len(self._selected)

    def __iter__(self) -> Iterator[Any]:
        return iter(tuple(self._selected))

    def select(self, ref: Any, additive: bool = False) -> None:
        """
        Select a resource

        Args:
            ref: Resource to select
            additive: Toggle membership instead of replacing the selection
        """
        if not additive:
            self._selected.clear()
            if is_valid_ref(ref):
                self._publish_active(ref)
            return

        if ref in self._selected:
            self._selected.remove(ref)
        elif is_valid_ref(ref):
            self._selected.append(ref)

        self._prune_stale()
        self._publish_selection()

    def is_selected(self, ref: Any) -> bool:
        return ref in self._selected

    def clear(self) -> None:
        """Empty the selection, notifying the host only if it changed"""
        if not self._selected:
            return

        self._selected.clear()
        self._publish_selection()

    def prune(self) -> int:
        """
        Drop resources that no longer exist

        Returns:
            Number of entries pruned
        """
        pruned = self._prune_stale()
        if pruned:
            self._publish_selection()
        return pruned

    def _prune_stale(self) -> int:
        before = len(self._selected)
        self._selected = [ref for ref in self._selected if is_valid_ref(ref)]
        pruned = before - len(self._selected)
        if pruned:
            logger.debug(f"Pruned {pruned} stale selection entries")
        return pruned

    def _publish_active(self, ref: Any) -> None:
        if self.host is None:
            return
        try:
            self.host.set_active(ref)
        except Exception as e:
            logger.error(f"Error publishing active resource: {e}")

    def _publish_selection(self) -> None:
        if self.host is None:
            return
        try:
            self.host.set_selection(tuple(self._selected))
        except Exception as e:
            logger.error(f"Error publishing selection: {e}")
