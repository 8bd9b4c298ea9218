# tests/test_api.py
"""HTTP-level tests: routing, dependency wiring and error-to-status mapping."""

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from app.config import settings
from app.database import Base, get_db
from app.dependencies import get_session_context
from app.main import app
from app.services.identity_provider import Identity


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def login_as(session):
    app.dependency_overrides[get_session_context] = lambda: session


class TestVehiclesApi:
    def test_anonymous_caller_gets_login_hint(self, client):
        login_as(None)
        resp = client.get("/api/v1/vehicles")
        assert resp.status_code == 401
        assert resp.json()["login"] == "/auth/login"

    def test_add_and_list_vehicle(self, client, customer):
        login_as(customer)
        resp = client.post("/api/v1/vehicles", json={
            "make": "Toyota", "model": "Camry", "year": 2024, "color": "Blue", "license_plate": "abc123",
        })
        assert resp.status_code == 201
        assert resp.json()["license_plate"] == "ABC123"

        listed = client.get("/api/v1/vehicles").json()
        assert [v["model"] for v in listed] == ["Camry"]

    def test_invalid_year_is_400(self, client, customer):
        login_as(customer)
        resp = client.post("/api/v1/vehicles", json={
            "make": "Ford", "model": "T", "year": 1850, "color": "Black", "license_plate": "OLD1",
        })
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Please enter a valid year."

    def test_delete_needs_confirm(self, client, customer, vehicle):
        login_as(customer)
        assert client.delete(f"/api/v1/vehicles/{vehicle.id}").status_code == 400
        assert client.delete(f"/api/v1/vehicles/{vehicle.id}?confirm=true").status_code == 200

    def test_foreign_vehicle_is_404(self, client, other_customer, vehicle):
        login_as(other_customer)
        assert client.delete(f"/api/v1/vehicles/{vehicle.id}?confirm=true").status_code == 404


class TestSearchAndBookingApi:
    def test_unknown_zip_returns_empty_list(self, client, vendor, listing):
        resp = client.get("/api/v1/search", params={"zip_code": "10001"})
        assert resp.status_code == 200
        assert resp.json() == []

    def test_search_lists_vendor_services(self, client, vendor, listing):
        results = client.get("/api/v1/search", params={"zip_code": "94107"}).json()
        assert results[0]["vendor"]["business_name"] == "Spotless Mobile Wash"
        assert results[0]["services"][0]["price"] == 49.99

    def test_book_a_service(self, client, customer, vendor, listing, vehicle):
        login_as(customer)
        resp = client.post("/api/v1/bookings", json={
            "vendor_id": vendor.identity_id, "service_id": listing.id, "vehicle_id": vehicle.id,
            "booking_date": "2026-11-02", "start_time": "23:00",
        })

        assert resp.status_code == 201
        body = resp.json()
        assert body["status"] == "pending"
        assert body["end_time"] == "00:30"
        assert body["total_price"] == 49.99

    def test_booking_with_someone_elses_vehicle_is_404(self, client, customer, vendor, listing, other_vehicle):
        login_as(customer)
        resp = client.post("/api/v1/bookings", json={
            "vendor_id": vendor.identity_id, "service_id": listing.id, "vehicle_id": other_vehicle.id,
            "booking_date": "2026-11-02", "start_time": "10:00",
        })
        assert resp.status_code == 404

    def test_booking_without_service_is_400(self, client, customer, vendor, vehicle):
        login_as(customer)
        resp = client.post("/api/v1/bookings", json={"vendor_id": vendor.identity_id, "vehicle_id": vehicle.id})
        assert resp.status_code == 400


class TestVendorApi:
    def test_edit_of_deactivated_listing_keeps_it_hidden(self, client, vendor, listing):
        login_as(vendor)
        assert client.patch(f"/api/v1/vendor/services/{listing.id}/active",
                            json={"is_active": False}).status_code == 200

        resp = client.put(f"/api/v1/vendor/services/{listing.id}", json={
            "name": "Premium Wash", "description": "Now with ceramic spray", "service_type": "premium_wash",
            "price": "59.99", "duration": 90,
        })

        assert resp.status_code == 200
        assert resp.json()["is_active"] is False
        assert client.get("/api/v1/search", params={"zip_code": "94107"}).json() == []

    def test_vendor_bookings_name_customer_and_service(self, client, customer, vendor, listing, vehicle):
        login_as(customer)
        client.get("/api/v1/profile")
        client.post("/api/v1/bookings", json={
            "vendor_id": vendor.identity_id, "service_id": listing.id, "vehicle_id": vehicle.id,
            "booking_date": "2026-11-02", "start_time": "10:00",
        })

        login_as(vendor)
        [booking] = client.get("/api/v1/vendor/bookings").json()

        assert booking["customer"]["email"] == "carol@example.com"
        assert booking["service"] == {"name": "Premium Wash", "price": 49.99}


class TestBearerAuth:
    def test_bearer_token_resolves_identity_and_bootstraps_profile(self, client):
        identity = Identity(id="u-77", email="new@example.com")
        with patch("app.dependencies.fetch_identity", return_value=identity) as fetch:
            resp = client.get("/api/v1/profile", headers={"Authorization": "Bearer tok-77"})

        assert resp.status_code == 200
        assert resp.json()["email"] == "new@example.com"
        fetch.assert_called_once_with("tok-77")

    def test_other_schemes_are_anonymous(self, client):
        with patch("app.dependencies.fetch_identity") as fetch:
            resp = client.get("/api/v1/profile", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert resp.status_code == 401
        fetch.assert_not_called()

    def test_missing_header_is_anonymous(self, client):
        assert client.get("/api/v1/vehicles").status_code == 401


class TestErrorMapping:
    def test_missing_table_is_503_with_kind(self, client, engine):
        Base.metadata.tables["vendor_service_areas"].drop(engine)

        resp = client.get("/api/v1/search", params={"zip_code": "94107"})

        assert resp.status_code == 503
        assert resp.json()["kind"] == "schema_missing"


class TestMiscApi:
    def test_reference_years(self, client):
        years = client.get("/api/v1/reference/years", params={"from_year": 2020, "to_year": 2023}).json()
        assert years == [2023, 2022, 2021, 2020]

    def test_health(self, client):
        body = client.get("/api/v1/health").json()
        assert body["database"] == "ok"

    def test_webhook_rejects_bad_secret(self, client):
        with patch.object(settings, "WEBHOOK_SECRET", "s3cret"):
            resp = client.post("/api/v1/webhooks/new-user", json={"record": {"id": "u", "email": "e@x.io"}},
                               headers={"X-Webhook-Secret": "wrong"})
        assert resp.status_code == 401

    def test_webhook_rejects_invalid_payload(self, client):
        with patch.object(settings, "WEBHOOK_SECRET", None):
            resp = client.post("/api/v1/webhooks/new-user", content=b"not json")
        assert resp.status_code == 400
