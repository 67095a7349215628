"""Key-value preference stores used to persist clipboard state"""

from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Optional, Protocol, runtime_checkable
from sqlalchemy.exc import SQLAlchemyError
from loguru import logger

from .database import DatabaseManager, PreferenceDB


class PreferenceNotFoundError(KeyError):
    """Raised by ``get`` when a key has no persisted value"""


@runtime_checkable
class PreferenceStore(Protocol):
    """Persistent string store keyed by string"""

    def has(self, key: str) -> bool:
        ...

    def get(self, key: str) -> str:
        ...

    def set(self, key: str, value: str) -> Optional[bool]:
        ...

    def delete(self, key: str) -> None:
        ...


class InMemoryPreferenceStore:
    """Dictionary backed store, lost at process exit"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._values: Dict[str, str] = dict(initial or {})

    def has(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str) -> str:
        try:
            return self._values[key]
        except KeyError:
            raise PreferenceNotFoundError(key) from None

    def set(self, key: str, value: str) -> bool:
        self._values[key] = value
        return True

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class NullPreferenceStore:
    """Store for hosts without persistence; everything reads as absent"""

    def has(self, key: str) -> bool:
        return False

    def get(self, key: str) -> str:
        raise PreferenceNotFoundError(key)

    def set(self, key: str, value: str) -> bool:
        logger.debug(f"Preference store unavailable, dropped write: {key}")
        return False

    def delete(self, key: str) -> None:
        pass


class DatabasePreferenceStore:
    """Preference store persisted in the SQLite ``settings`` table"""

    def __init__(self, database_manager: DatabaseManager):
        """
        Initialize store

        Args:
            database_manager: DatabaseManager instance
        """
        self.db_manager = database_manager

    @contextmanager
    def get_session(self):
        """Get a new database session with proper cleanup"""
        session = self.db_manager.get_session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def has(self, key: str) -> bool:
        try:
            with self.get_session() as session:
                return session.get(PreferenceDB, key) is not None

        except SQLAlchemyError as e:
            logger.error(f"Failed to query preference {key}: {e}")
            return False

    def get(self, key: str) -> str:
        try:
            with self.get_session() as session:
                preference = session.get(PreferenceDB, key)
                value = preference.value if preference is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Failed to read preference {key}: {e}")
            value = None

        if value is None:
            raise PreferenceNotFoundError(key)

        return value

    def set(self, key: str, value: str) -> bool:
        """
        Write a preference value

        Returns:
            True if successful
        """
        try:
            with self.get_session() as session:
                preference = session.get(PreferenceDB, key)

                if preference:
                    preference.value = value
                    preference.updated_at = datetime.now()
                else:
                    session.add(PreferenceDB(key=key, value=value, updated_at=datetime.now()))

            logger.debug(f"Saved preference: {key}")
            return True

        except SQLAlchemyError as e:
            logger.error(f"Failed to save preference {key}: {e}")
            return False

    def delete(self, key: str) -> None:
        try:
            with self.get_session() as session:
                deleted = session.query(PreferenceDB).filter_by(key=key).delete()

            if deleted:
                logger.debug(f"Deleted preference: {key}")

        except SQLAlchemyError as e:
            logger.error(f"Failed to delete preference {key}: {e}")
