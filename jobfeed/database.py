"""
SQLite key-value backend.

Stores the same string slots as the JSON file store in a single table,
using SQLAlchemy.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from sqlalchemy import create_engine, Column, String, Text, DateTime
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from .errors import PersistenceError

Base = declarative_base()


class KeyValue(Base):
    """One persisted slot."""

    __tablename__ = "key_value"

    key = Column(String, primary_key=True)
    value = Column(Text, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    engine.dispose()


class SqlKeyValueStore:
    """Key-value slots in the key_value table of a SQLite file."""

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        init_database(self.db_path)
        self._engine = create_engine(f"sqlite:///{self.db_path}")
        self._Session = sessionmaker(bind=self._engine)

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self._Session() as session:
                row = session.get(KeyValue, key)
                return row.value if row is not None else None
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not read {key!r} from {self.db_path}: {e}") from e

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._Session() as session:
                row = session.get(KeyValue, key)
                if row is None:
                    session.add(KeyValue(key=key, value=value))
                else:
                    row.value = value
                session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not write {key!r} to {self.db_path}: {e}") from e

    def remove_item(self, key: str) -> None:
        try:
            with self._Session() as session:
                row = session.get(KeyValue, key)
                if row is not None:
                    session.delete(row)
                    session.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Could not delete {key!r} from {self.db_path}: {e}") from e

    def close(self) -> None:
        self._engine.dispose()
