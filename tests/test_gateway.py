# tests/test_gateway.py
"""Unit tests for the data access gateway and its error classification."""

import pytest
from unittest.mock import MagicMock
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError
from app.database import Base
from app.exceptions import ErrorKind, NotFoundError, PersistenceError
from app.services.gateway import DataGateway, classify_error
from app.services.identity_provider import Identity


class _PgError(Exception):
    def __init__(self, pgcode):
        super().__init__(f"pg error {pgcode}")
        self.pgcode = pgcode


class TestClassifyError:
    def test_integrity_error_is_constraint(self):
        exc = IntegrityError("INSERT", {}, Exception("duplicate key value"))
        assert classify_error(exc) == ErrorKind.CONSTRAINT

    def test_postgres_undefined_table(self):
        exc = ProgrammingError("SELECT", {}, _PgError("42P01"))
        assert classify_error(exc) == ErrorKind.SCHEMA_MISSING

    def test_postgres_undefined_column(self):
        exc = ProgrammingError("SELECT", {}, _PgError("42703"))
        assert classify_error(exc) == ErrorKind.SCHEMA_MISSING

    def test_sqlite_missing_table(self):
        exc = OperationalError("SELECT", {}, Exception("no such table: bookings"))
        assert classify_error(exc) == ErrorKind.SCHEMA_MISSING

    def test_connection_failure_is_unavailable(self):
        exc = OperationalError("SELECT", {}, Exception("could not connect to server"))
        assert classify_error(exc) == ErrorKind.UNAVAILABLE

    def test_anything_else_is_unknown(self):
        exc = ProgrammingError("SELECT", {}, _PgError("42601"))
        assert classify_error(exc) == ErrorKind.UNKNOWN


class TestGatewayCrud:
    def test_select_with_in_filter_and_order(self, gateway):
        for zip_code in ("94110", "94107", "10001"):
            gateway.insert("vendor_service_areas", {"vendor_id": "vend-0001", "zip_code": zip_code})

        rows = gateway.select("vendor_service_areas", {"zip_code": ["94107", "94110"]}, order_by="zip_code")

        assert [r.zip_code for r in rows] == ["94107", "94110"]

    def test_select_one_missing_row(self, gateway):
        with pytest.raises(NotFoundError):
            gateway.select_one("profiles", {"id": "ghost"})

    def test_unknown_relation_and_column(self, gateway):
        with pytest.raises(ValueError):
            gateway.select("invoices")
        with pytest.raises(ValueError):
            gateway.select("profiles", {"nickname": "x"})

    def test_update_and_delete_refuse_empty_filters(self, gateway):
        with pytest.raises(ValueError):
            gateway.update("profiles", {"full_name": "x"}, {})
        with pytest.raises(ValueError):
            gateway.delete("profiles", {})

    def test_upsert_overwrites_without_ignore_duplicates(self, gateway):
        gateway.insert("profiles", {"id": "u-1", "full_name": "Old"})
        row = gateway.upsert("profiles", {"id": "u-1", "full_name": "New"})
        assert row.full_name == "New"

    def test_duplicate_insert_is_constraint_error(self, gateway):
        gateway.insert("vendor_service_areas", {"vendor_id": "vend-0001", "zip_code": "94107"})
        with pytest.raises(PersistenceError) as exc_info:
            gateway.insert("vendor_service_areas", {"vendor_id": "vend-0001", "zip_code": "94107"})
        assert exc_info.value.kind == ErrorKind.CONSTRAINT

    def test_missing_table_points_at_setup_script(self, engine, gateway):
        Base.metadata.tables["reviews"].drop(engine)

        with pytest.raises(PersistenceError) as exc_info:
            gateway.select("reviews", {"vendor_id": "vend-0001"})

        assert exc_info.value.kind == ErrorKind.SCHEMA_MISSING
        assert "init_db.py" in exc_info.value.message


class TestIdentityListeners:
    def test_listener_fires_once_per_transition(self, db):
        gateway = DataGateway(db)
        listener = MagicMock()
        gateway.on_identity_change(listener)
        alice = Identity(id="alice")

        gateway.bind_identity(alice)
        gateway.bind_identity(Identity(id="alice", email="alice@example.com"))
        gateway.bind_identity(None)

        assert listener.call_count == 2
        listener.assert_any_call(alice)
        listener.assert_called_with(None)
        assert gateway.current_identity() is None

    def test_unsubscribe(self, db):
        gateway = DataGateway(db)
        listener = MagicMock()
        unsubscribe = gateway.on_identity_change(listener)

        unsubscribe()
        unsubscribe()
        gateway.bind_identity(Identity(id="bob"))

        listener.assert_not_called()
