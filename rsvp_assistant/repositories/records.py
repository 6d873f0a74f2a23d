from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from sqlmodel import Session, select

from ..infrastructure.database.connection import get_engine
from ..infrastructure.database.tables import RecordDBModel

ATTENDEES = "attendees"
QUESTIONS = "questions"


class RecordStore(ABC):
    """
    Key-value access to committed records of one collection.
    The dialog engine never reads these; only the commitment commands do.
    """

    def __init__(self, collection: str):
        self.collection = collection

    @abstractmethod
    def upsert(self, key: str, record: Dict[str, Any]) -> None:
        """Creates or fully overwrites the record stored under `key`."""
        pass

    @abstractmethod
    def read(self, key: str) -> Optional[Dict[str, Any]]:
        """Returns the record stored under `key`, or None."""
        pass

    @abstractmethod
    def replace(self, key: str, record: Dict[str, Any]) -> None:
        """
        Overwrites an existing record.
        Raises ValueError if nothing is stored under `key`.
        """
        pass


class InMemoryRecordStore(RecordStore):
    """
    Uses in-memory dictionary for record storage for testing/dev purposes.
    """

    def __init__(self, collection: str):
        super().__init__(collection)
        self._store: Dict[str, Dict[str, Any]] = {}

    def upsert(self, key: str, record: Dict[str, Any]) -> None:
        self._store[key] = dict(record)

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        record = self._store.get(key)
        return dict(record) if record is not None else None

    def replace(self, key: str, record: Dict[str, Any]) -> None:
        if key not in self._store:
            raise ValueError(f"Record '{key}' does not exist in '{self.collection}'.")
        self._store[key] = dict(record)

    def all(self) -> Dict[str, Dict[str, Any]]:
        return {key: dict(record) for key, record in self._store.items()}


class PostgresRecordStore(RecordStore):
    """
    PostgreSQL + JSONB storage for records.
    """

    def _find(self, db: Session, key: str) -> Optional[RecordDBModel]:
        statement = select(RecordDBModel).where(
            RecordDBModel.collection == self.collection,
            RecordDBModel.key == key,
        )
        return db.exec(statement).first()

    def upsert(self, key: str, record: Dict[str, Any]) -> None:
        with Session(get_engine()) as db:
            existing = self._find(db, key)
            if existing:
                existing.data = dict(record)
                existing.updated_at = datetime.utcnow()
                db.add(existing)
            else:
                db.add(RecordDBModel(collection=self.collection, key=key, data=dict(record)))
            db.commit()

    def read(self, key: str) -> Optional[Dict[str, Any]]:
        with Session(get_engine()) as db:
            result = self._find(db, key)
            return dict(result.data) if result else None

    def replace(self, key: str, record: Dict[str, Any]) -> None:
        with Session(get_engine()) as db:
            result = self._find(db, key)
            if not result:
                raise ValueError(f"Record '{key}' does not exist in '{self.collection}'.")
            result.data = dict(record)
            result.updated_at = datetime.utcnow()
            db.add(result)
            db.commit()
