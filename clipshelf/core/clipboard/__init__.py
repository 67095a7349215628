"""Clipboard categories, collections and selection"""

from .collection import CategoryCollection
from .registry import ClipboardRegistry
from .selection import SelectionTracker, SelectionHost

__all__ = ['CategoryCollection', 'ClipboardRegistry', 'SelectionTracker', 'SelectionHost']
