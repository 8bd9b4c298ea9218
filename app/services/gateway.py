# app/services/gateway.py
"""
Data Access Gateway: CRUD over named relations plus the identity bound to the request.

Every service talks to the store through this class only. It owns no state besides
the SQLAlchemy session, the bound identity and the identity-change listeners.
Store failures are classified ONCE here into a PersistenceError with an ErrorKind,
so callers never inspect driver messages themselves.
"""

from contextlib import contextmanager
from typing import Callable, Iterable, Optional, Union

from sqlalchemy import select as sa_select, update as sa_update, delete as sa_delete
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.exceptions import ErrorKind, NotFoundError, PersistenceError
from app.models import (
    Booking, Profile, Review, ServiceListing, Vehicle, VendorProfile, VendorServiceArea,
)
from app.services.identity_provider import Identity
from app.utils.logger import get_logger

logger = get_logger(__name__)

RELATIONS = {
    "profiles": Profile,
    "vendor_profiles": VendorProfile,
    "vehicles": Vehicle,
    "services": ServiceListing,
    "vendor_service_areas": VendorServiceArea,
    "bookings": Booking,
    "reviews": Review,
}

_DIALECT_INSERTS = {
    "postgresql": pg_insert,
    "sqlite": sqlite_insert,
}

# PostgreSQL SQLSTATEs for a missing table / column
_PG_SCHEMA_MISSING = {"42P01", "42703"}

IdentityListener = Callable[[Optional[Identity]], None]


def classify_error(exc: SQLAlchemyError) -> ErrorKind:
    """Map a SQLAlchemy exception to an ErrorKind."""
    if isinstance(exc, IntegrityError):
        return ErrorKind.CONSTRAINT
    orig = getattr(exc, "orig", None)
    if getattr(orig, "pgcode", None) in _PG_SCHEMA_MISSING:
        return ErrorKind.SCHEMA_MISSING
    if isinstance(exc, (OperationalError, ProgrammingError)) and "no such table" in str(orig or exc):
        return ErrorKind.SCHEMA_MISSING
    if isinstance(exc, OperationalError):
        return ErrorKind.UNAVAILABLE
    return ErrorKind.UNKNOWN


class DataGateway:
    def __init__(self, db: Session, identity: Optional[Identity] = None):
        self.db = db
        self._identity = identity
        self._listeners: list[IdentityListener] = []

    # ── Reads ─────────────────────────────────────────────────────────────
    def select(self, relation: str, filters: Optional[dict] = None, order_by: Optional[str] = None,
               descending: bool = False, limit: Optional[int] = None) -> list:
        model = self._model(relation)
        stmt = sa_select(model).where(*self._conditions(relation, filters))
        if order_by:
            column = self._column(relation, order_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        with self._translate_errors("select", relation):
            return list(self.db.scalars(stmt).all())

    def select_one(self, relation: str, filters: dict):
        """Exactly one row or NotFoundError."""
        rows = self.select(relation, filters, limit=1)
        if not rows:
            raise NotFoundError(f"No {relation} row matches {filters}")
        return rows[0]

    # ── Writes ────────────────────────────────────────────────────────────
    def insert(self, relation: str, record: dict):
        model = self._model(relation)
        row = model(**record)
        with self._translate_errors("insert", relation):
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
        return row

    def upsert(self, relation: str, record: dict, conflict_key: Union[str, Iterable[str]] = "id",
               ignore_duplicates: bool = False):
        """
        INSERT ... ON CONFLICT on the conflict key.
        ignore_duplicates=True leaves an existing row untouched (do nothing);
        otherwise the non-key fields of `record` overwrite it.
        Returns the row as stored after the statement.
        """
        model = self._model(relation)
        keys = [conflict_key] if isinstance(conflict_key, str) else list(conflict_key)
        dialect = self.db.get_bind().dialect.name
        insert_fn = _DIALECT_INSERTS.get(dialect)
        if insert_fn is None:
            raise PersistenceError(f"Upsert is not supported on the '{dialect}' dialect")

        stmt = insert_fn(model).values(**record)
        changes = {k: v for k, v in record.items() if k not in keys}
        if ignore_duplicates or not changes:
            stmt = stmt.on_conflict_do_nothing(index_elements=keys)
        else:
            stmt = stmt.on_conflict_do_update(index_elements=keys, set_=changes)

        with self._translate_errors("upsert", relation):
            self.db.execute(stmt)
            self.db.commit()
        return self.select_one(relation, {k: record[k] for k in keys})

    def update(self, relation: str, patch: dict, filters: dict) -> int:
        """Apply `patch` to every row matching `filters`. Returns affected row count."""
        if not filters:
            raise ValueError("update() refuses to run without filters")
        model = self._model(relation)
        stmt = (
            sa_update(model)
            .where(*self._conditions(relation, filters))
            .values(**patch)
            .execution_options(synchronize_session=False)
        )
        with self._translate_errors("update", relation):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount

    def delete(self, relation: str, filters: dict) -> int:
        if not filters:
            raise ValueError("delete() refuses to run without filters")
        model = self._model(relation)
        stmt = (
            sa_delete(model)
            .where(*self._conditions(relation, filters))
            .execution_options(synchronize_session=False)
        )
        with self._translate_errors("delete", relation):
            result = self.db.execute(stmt)
            self.db.commit()
        return result.rowcount

    # ── Identity ──────────────────────────────────────────────────────────
    def current_identity(self) -> Optional[Identity]:
        return self._identity

    def on_identity_change(self, callback: IdentityListener) -> Callable[[], None]:
        """Register a listener for login/logout transitions. Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def bind_identity(self, identity: Optional[Identity]):
        """Switch the bound identity. Listeners fire once per actual transition."""
        previous_id = self._identity.id if self._identity else None
        new_id = identity.id if identity else None
        self._identity = identity
        if previous_id == new_id:
            return
        logger.debug(f"Identity changed: {previous_id} → {new_id}")
        for listener in list(self._listeners):
            listener(identity)

    # ── Internals ─────────────────────────────────────────────────────────
    def _model(self, relation: str):
        try:
            return RELATIONS[relation]
        except KeyError:
            raise ValueError(f"Unknown relation '{relation}'") from None

    def _column(self, relation: str, name: str):
        table = self._model(relation).__table__
        if name not in table.c:
            raise ValueError(f"Unknown column '{relation}.{name}'")
        return table.c[name]

    def _conditions(self, relation: str, filters: Optional[dict]) -> list:
        conditions = []
        for name, value in (filters or {}).items():
            column = self._column(relation, name)
            if isinstance(value, (list, tuple, set, frozenset)):
                conditions.append(column.in_(list(value)))
            elif value is None:
                conditions.append(column.is_(None))
            else:
                conditions.append(column == value)
        return conditions

    @contextmanager
    def _translate_errors(self, action: str, relation: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            kind = classify_error(exc)
            detail = str(getattr(exc, "orig", None) or exc)
            if kind == ErrorKind.SCHEMA_MISSING:
                message = (f"The {relation} table does not exist in the database. "
                           f"Run scripts/setup/init_db.py to create it.")
            elif kind == ErrorKind.CONSTRAINT:
                message = f"Failed to {action} {relation}: a constraint was violated"
            elif kind == ErrorKind.UNAVAILABLE:
                message = "The database is unavailable. Please try again."
            else:
                message = f"Failed to {action} {relation}: {detail}"
            logger.error(f"[Gateway] {action} {relation} failed ({kind.value}): {detail}")
            raise PersistenceError(message, kind=kind, detail=detail) from exc
