import uuid
from abc import ABC, abstractmethod
from typing import Optional, Dict
from datetime import datetime

from sqlmodel import Session, select

# Domain & Infra Imports
from ..state.models import DialogStack
from ..infrastructure.database.tables import DialogSessionDBModel
from ..infrastructure.database.connection import get_engine


class SessionRepository(ABC):
    """
    Defines how the application persists dialog stacks between turns.
    This allows us change how data is accessed (Memory -> SQL -> API) later
    without changing the DialogEngine code.
    """

    @abstractmethod
    def create(self) -> DialogStack:
        """Creates a new empty stack with a unique session ID."""
        pass

    @abstractmethod
    def get(self, session_id: str) -> Optional[DialogStack]:
        """Retrieves a stack by session ID, or None if nothing is persisted."""
        pass

    @abstractmethod
    def save(self, stack: DialogStack):
        """Persists the stack (insert or update)."""
        pass

    @abstractmethod
    def delete(self, session_id: str) -> bool:
        """Deletes a session. Returns True if found and deleted."""
        pass

    def load(self, session_id: str) -> DialogStack:
        """Returns the persisted stack, or an empty one if none exists yet."""
        return self.get(session_id) or DialogStack(session_id=session_id)


class InMemorySessionRepository(SessionRepository):
    """
    Uses in-memory dictionary for session storage for testing/dev purposes.
    Stacks are stored serialized so callers never share a live object.
    """

    def __init__(self):
        self._store: Dict[str, dict] = {}

    def create(self) -> DialogStack:
        new_id = str(uuid.uuid4())
        stack = DialogStack(session_id=new_id)
        self.save(stack)
        return stack

    def get(self, session_id: str) -> Optional[DialogStack]:
        data = self._store.get(session_id)
        if data is None:
            return None
        return DialogStack.model_validate(data)

    def save(self, stack: DialogStack):
        stack.updated_at = datetime.utcnow()
        self._store[stack.session_id] = stack.model_dump(mode="json")

    def delete(self, session_id: str) -> bool:
        if session_id in self._store:
            del self._store[session_id]
            return True
        return False


class PostgresSessionRepository(SessionRepository):
    """
    PostgreSQL + JSONB storage for dialog stacks.
    """

    def create(self) -> DialogStack:
        # Create the (Domain) Python object
        new_id = str(uuid.uuid4())
        stack = DialogStack(session_id=new_id)

        # Save to DB
        db_model = DialogSessionDBModel(
            session_id=new_id, state=stack.model_dump(mode="json")
        )

        with Session(get_engine()) as db:
            db.add(db_model)
            db.commit()

        return stack

    def get(self, session_id: str) -> Optional[DialogStack]:
        with Session(get_engine()) as db:
            statement = select(DialogSessionDBModel).where(
                DialogSessionDBModel.session_id == session_id
            )
            result = db.exec(statement).first()

            if not result:
                return None

            # Deserialize JSONB back into Pydantic Domain Model
            stack = DialogStack.model_validate(result.state)

            # Inject the timestamp from the SQL column
            stack.updated_at = result.updated_at

            return stack

    def save(self, stack: DialogStack):
        with Session(get_engine()) as db:
            statement = select(DialogSessionDBModel).where(
                DialogSessionDBModel.session_id == stack.session_id
            )
            result = db.exec(statement).first()
            now = datetime.utcnow()

            if result:
                # Update the JSON blob and the timestamp
                result.state = stack.model_dump(mode="json")
                result.updated_at = now
                db.add(result)
            else:
                # First turn of a session nobody created explicitly
                db.add(
                    DialogSessionDBModel(
                        session_id=stack.session_id,
                        state=stack.model_dump(mode="json"),
                    )
                )
            db.commit()
            stack.updated_at = now

    def delete(self, session_id: str) -> bool:
        with Session(get_engine()) as db:
            statement = select(DialogSessionDBModel).where(
                DialogSessionDBModel.session_id == session_id
            )
            result = db.exec(statement).first()

            if result:
                db.delete(result)
                db.commit()
                return True
            return False
