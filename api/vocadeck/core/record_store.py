"""
Keyed record store used by the services.

Services never talk to a database session directly. They load, mutate and
write back bounded units through this interface, which keeps the ordering,
review and session logic independent of the hosted database behind it.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import update as sa_update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from vocadeck.core.exceptions import ConflictError, NotFoundError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=SQLModel)


@dataclass
class BatchOp:
    """One write inside an all-or-nothing batch."""
    kind: str  # 'insert', 'update' or 'delete'
    model: Optional[Type[SQLModel]] = None
    record_id: Any = None
    record: Optional[SQLModel] = None
    patch: Dict[str, Any] = field(default_factory=dict)
    expected_version: Optional[int] = None

    @classmethod
    def insert(cls, record: SQLModel) -> "BatchOp":
        return cls(kind="insert", model=type(record), record=record)

    @classmethod
    def update(
        cls,
        model: Type[SQLModel],
        record_id: Any,
        patch: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> "BatchOp":
        return cls(kind="update", model=model, record_id=record_id, patch=patch, expected_version=expected_version)

    @classmethod
    def delete(cls, model: Type[SQLModel], record_id: Any) -> "BatchOp":
        return cls(kind="delete", model=model, record_id=record_id)


class RecordStore(ABC):
    """Abstract keyed record store."""

    @abstractmethod
    def get(self, model: Type[ModelT], record_id: Any) -> Optional[ModelT]:
        """Return the record or None."""

    @abstractmethod
    def list(
        self,
        model: Type[ModelT],
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[Sequence[str]] = None
    ) -> List[ModelT]:
        """
        Return records matching every filter.

        A filter value that is a list/tuple/set matches any of its members.
        order_by entries are column names, prefixed with '-' for descending.
        """

    @abstractmethod
    def insert(self, record: ModelT) -> ModelT:
        """Insert and return the stored record. Duplicate keys raise ConflictError."""

    @abstractmethod
    def update(
        self,
        model: Type[ModelT],
        record_id: Any,
        patch: Dict[str, Any],
        expected_version: Optional[int] = None
    ) -> ModelT:
        """
        Apply patch and return the stored record.

        For versioned models the version is bumped on every write; when
        expected_version is given and no longer matches, ConflictError is raised.
        """

    @abstractmethod
    def delete(self, model: Type[SQLModel], record_id: Any) -> None:
        """Delete the record. Unknown ids raise NotFoundError."""

    @abstractmethod
    def batch(self, ops: Sequence[BatchOp]) -> None:
        """Apply every op or none of them."""


class SqlRecordStore(RecordStore):
    """RecordStore over a SQLAlchemy engine. Each call is its own transaction."""

    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)

    def get(self, model, record_id):
        with self._session() as session:
            return session.get(model, record_id)

    def list(self, model, filters=None, order_by=None):
        statement = select(model)
        for name, value in (filters or {}).items():
            column = getattr(model, name)
            if isinstance(value, (list, tuple, set)):
                statement = statement.where(column.in_(list(value)))  # type: ignore[attr-defined]
            else:
                statement = statement.where(column == value)
        for key in order_by or []:
            if key.startswith("-"):
                statement = statement.order_by(getattr(model, key[1:]).desc())
            else:
                statement = statement.order_by(getattr(model, key).asc())
        with self._session() as session:
            return list(session.exec(statement).all())

    def insert(self, record):
        with self._session() as session:
            try:
                with session.begin():
                    self._apply_insert(session, record)
            except IntegrityError as e:
                raise ConflictError(f"{type(record).__name__} violates a unique constraint") from e
            return record

    def update(self, model, record_id, patch, expected_version=None):
        with self._session() as session:
            try:
                with session.begin():
                    record = self._apply_update(session, model, record_id, patch, expected_version)
            except IntegrityError as e:
                raise ConflictError(f"Update of {model.__name__} {record_id} violates a constraint") from e
            return record

    def delete(self, model, record_id):
        with self._session() as session:
            with session.begin():
                self._apply_delete(session, model, record_id)

    def batch(self, ops):
        if not ops:
            return
        with self._session() as session:
            try:
                with session.begin():
                    for op in ops:
                        if op.kind == "insert":
                            self._apply_insert(session, op.record)
                        elif op.kind == "update":
                            self._apply_update(session, op.model, op.record_id, op.patch, op.expected_version)
                        elif op.kind == "delete":
                            self._apply_delete(session, op.model, op.record_id)
                        else:
                            raise ValueError(f"Unknown batch operation: {op.kind}")
            except SQLAlchemyError as e:
                logger.error(f"Batch of {len(ops)} operation(s) rolled back: {e}")
                raise ConflictError(f"Batch of {len(ops)} operation(s) rolled back") from e
        logger.debug(f"Applied batch of {len(ops)} operation(s)")

    # Helpers run inside an open transaction

    def _apply_insert(self, session: Session, record: SQLModel) -> None:
        session.add(record)
        session.flush()

    def _apply_update(self, session, model, record_id, patch, expected_version):
        values = dict(patch)
        statement = sa_update(model).where(model.id == record_id)  # type: ignore[attr-defined]
        if hasattr(model, "version"):
            values["version"] = model.version + 1  # type: ignore[attr-defined]
            if expected_version is not None:
                statement = statement.where(model.version == expected_version)  # type: ignore[attr-defined]
        result = session.execute(statement.values(**values))
        if result.rowcount == 0:
            if session.get(model, record_id) is None:
                raise NotFoundError(f"{model.__name__} with id {record_id} not found")
            raise ConflictError(
                f"{model.__name__} {record_id} changed concurrently (expected version {expected_version})"
            )
        return session.get(model, record_id, populate_existing=True)

    def _apply_delete(self, session, model, record_id):
        record = session.get(model, record_id)
        if record is None:
            raise NotFoundError(f"{model.__name__} with id {record_id} not found")
        session.delete(record)
        session.flush()
