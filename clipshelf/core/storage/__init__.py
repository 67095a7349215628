"""Preference persistence"""

from .database import DatabaseManager
from .preferences import (
    PreferenceStore,
    PreferenceNotFoundError,
    InMemoryPreferenceStore,
    NullPreferenceStore,
    DatabasePreferenceStore,
)

__all__ = [
    'DatabaseManager',
    'PreferenceStore',
    'PreferenceNotFoundError',
    'InMemoryPreferenceStore',
    'NullPreferenceStore',
    'DatabasePreferenceStore',
]
