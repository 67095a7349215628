"""Database management using SQLAlchemy"""

import os
from pathlib import Path
from typing import Optional
from sqlalchemy import create_engine, Column, String, DateTime, Text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from loguru import logger

Base = declarative_base()


class PreferenceDB(Base):
    """Database model for persisted preference strings"""
    __tablename__ = 'settings'

    key = Column(String(255), primary_key=True)
    value = Column(Text, nullable=False, default='')
    updated_at = Column(DateTime)


class DatabaseManager:
    """Manages database connections and operations"""

    def __init__(self, db_path: Optional[str] = None):
        """
        Initialize database manager

        Args:
            db_path: Path to database file (defaults to app data directory)
        """
        if db_path is None:
            app_data = Path(os.environ.get('APPDATA', '.')) / 'ClipShelf'
            app_data.mkdir(parents=True, exist_ok=True)
            db_path = str(app_data / 'clipshelf.db')

        self.db_path = db_path
        self.engine = None
        self.SessionLocal = None

        self._initialize_database()

    def _initialize_database(self):
        """Initialize database connection and create tables"""
        try:
            self.engine = create_engine(f'sqlite:///{self.db_path}')

            Base.metadata.create_all(bind=self.engine)

            self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

            logger.info(f"Database initialized at: {self.db_path}")

        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            raise

    def get_session(self) -> Session:
        """
        Get database session

        Returns:
            SQLAlchemy session
        """
        if self.SessionLocal is None:
            raise RuntimeError("Database not initialized")

        return self.SessionLocal()

    def close(self):
        """Close database connection"""
        if self.engine:
            self.engine.dispose()
            logger.info("Database connection closed")
