"""Tests for the HTTP API."""
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from apps.api.deps import get_db, get_dispatcher
from apps.api.main import app
from core.config import WhatsAppConfig
from integrations.whatsapp.client import WhatsAppClient
from services.notification_service import NotificationDispatcher


class GatewayStub:
    """Records requests sent to the fake WhatsApp gateway."""

    def __init__(self, status_code=200):
        self.status_code = status_code
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, json={"code": "SUCCESS"})


@pytest.fixture(scope="function")
def gateway():
    return GatewayStub()


@pytest.fixture(scope="function")
def dispatcher_config():
    """Configuration handed to the dispatcher; tests may replace it."""
    return {"config": WhatsAppConfig()}


@pytest.fixture(scope="function")
def client(db_session, gateway, dispatcher_config):
    """Test client on the in-memory database with a fake gateway."""
    def override_get_db():
        yield db_session

    def override_get_dispatcher():
        config = dispatcher_config["config"]
        http_client = httpx.Client(transport=httpx.MockTransport(gateway))
        return NotificationDispatcher(config, client=WhatsAppClient(config, http_client=http_client))

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dispatcher] = override_get_dispatcher
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def configured(dispatcher_config, whatsapp_config):
    dispatcher_config["config"] = whatsapp_config
    return whatsapp_config


class TestHealth:
    """Tests for service endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        assert client.get("/health").json()["status"] == "healthy"


class TestBookingEndpoints:
    """Tests for the booking API."""

    def test_submit_booking(self, client, booking_form):
        response = client.post("/api/bookings", json=booking_form)

        assert response.status_code == 201
        body = response.json()
        assert body["success"] is True
        assert body["data"]["booking_id"].startswith("RT-")
        assert body["data"]["status"] == "pending_review"

    def test_submit_notifies_applicant(self, client, booking_form, configured, gateway):
        response = client.post("/api/bookings", json=booking_form)

        assert response.status_code == 201
        assert len(gateway.requests) == 1
        assert json.loads(gateway.requests[0].content)["phone"] == "6281234567890"

    def test_submit_succeeds_when_gateway_fails(self, client, booking_form, configured, gateway):
        gateway.status_code = 500
        response = client.post("/api/bookings", json=booking_form)
        assert response.status_code == 201

    def test_submit_invalid_form(self, client, booking_form):
        booking_form["terms_of_service"] = False
        response = client.post("/api/bookings", json=booking_form)

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["errors"] == ["Anda harus menyetujui syarat dan ketentuan"]

    def test_submit_malformed_values_are_field_errors(self, client, booking_form):
        booking_form["gender"] = []
        booking_form["umrah_package"] = "²"
        response = client.post("/api/bookings", json=booking_form)

        assert response.status_code == 422
        assert response.json()["errors"] == ["Jenis kelamin wajib dipilih", "Paket umroh tidak valid"]

    def test_submit_duplicate(self, client, booking_form):
        assert client.post("/api/bookings", json=booking_form).status_code == 201
        response = client.post("/api/bookings", json=booking_form)

        assert response.status_code == 409
        assert response.json()["success"] is False

    def test_get_and_list(self, client, create_booking):
        record = create_booking()

        assert client.get(f"/api/bookings/{record.booking_id}").json()["name"] == "Ahmad Sulaiman"
        listed = client.get("/api/bookings", params={"status": "pending_review"}).json()
        assert [b["booking_id"] for b in listed] == [record.booking_id]

    def test_get_unknown(self, client):
        assert client.get("/api/bookings/RT-NONE").status_code == 404

    def test_patch_booking(self, client, create_booking):
        record = create_booking()
        response = client.patch(f"/api/bookings/{record.booking_id}", json={"occupation": "Guru"})

        assert response.status_code == 200
        assert response.json()["occupation"] == "Guru"

    def test_patch_invalid(self, client, create_booking):
        record = create_booking()
        response = client.patch(f"/api/bookings/{record.booking_id}", json={"email": "bukan-email"})

        assert response.status_code == 422
        assert response.json()["errors"] == ["Format email tidak valid"]

    def test_status_transition(self, client, create_booking):
        record = create_booking()
        url = f"/api/bookings/{record.booking_id}/status"

        assert client.patch(url, json={"status": "approved"}).status_code == 409
        response = client.patch(url, json={"status": "processing"})
        assert response.status_code == 200
        assert response.json()["status"] == "processing"

    def test_delete_booking(self, client, create_booking):
        record = create_booking()
        assert client.delete(f"/api/bookings/{record.booking_id}").status_code == 204
        assert client.get(f"/api/bookings/{record.booking_id}").status_code == 404

    def test_download_pdf(self, client, create_booking):
        record = create_booking()
        response = client.get(f"/api/bookings/{record.booking_id}/pdf")

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert f"confirmation-{record.booking_id}.pdf" in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")


class TestPackageEndpoints:
    """Tests for the package catalog API."""

    def test_create_and_options(self, client):
        response = client.post("/api/packages", json={"name": "Paket Plus Turki", "price": 45000000})
        assert response.status_code == 201
        package_id = response.json()["id"]

        options = client.get("/api/packages/options").json()
        assert {"value": package_id, "label": "Paket Plus Turki"} in options

    def test_update_package(self, client, umrah_package):
        response = client.patch(f"/api/packages/{umrah_package.id}", json={"price": 30000000})
        assert response.status_code == 200
        assert response.json()["price"] == 30000000
        assert response.json()["name"] == umrah_package.name

    def test_unknown_package(self, client):
        assert client.get("/api/packages/999").status_code == 404


class TestSendFile:
    """Tests for PDF delivery over WhatsApp."""

    def test_phone_required(self, client, configured):
        response = client.post("/api/send-file", data={"umrahFormData": "{}"})
        assert response.status_code == 400

    def test_missing_configuration(self, client):
        response = client.post("/api/send-file", data={"phone": "6281234567890", "umrahFormData": "{}"})
        assert response.status_code == 500

    def test_invalid_json(self, client, configured):
        response = client.post("/api/send-file", data={"phone": "6281234567890", "umrahFormData": "{oops"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid umrahFormData format"

    def test_payload_required(self, client, configured):
        response = client.post("/api/send-file", data={"phone": "6281234567890"})
        assert response.status_code == 400

    def test_send_full_form(self, client, configured, gateway, valid_form_data):
        response = client.post("/api/send-file", data={
            "phone": "6281234567890",
            "umrahFormData": json.dumps(valid_form_data),
            "bookingId": "RT-AB12",
            "duration": "120",
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["bookingId"] == "RT-AB12"
        assert b"confirmation-RT-AB12.pdf" in gateway.requests[0].content

    def test_send_legacy_payload(self, client, configured, gateway):
        legacy = {
            "customerName": "Siti Aminah",
            "email": "siti@example.com",
            "whatsappNumber": "081234567890",
            "phoneNumber": "081234567890",
            "packageName": "Paket Reguler",
            "paymentMethod": "Lunas",
        }
        response = client.post("/api/send-file", data={
            "phone": "6281234567890",
            "bookingData": json.dumps(legacy),
        })

        assert response.status_code == 200
        assert response.json()["bookingId"].startswith("RT-")

    def test_gateway_status_passed_through(self, client, configured, gateway, valid_form_data):
        gateway.status_code = 401
        response = client.post("/api/send-file", data={
            "phone": "6281234567890",
            "umrahFormData": json.dumps(valid_form_data),
        })
        assert response.status_code == 401

    def test_usage(self, client):
        assert client.get("/api/send-file").json()["usage"]["method"] == "POST"

    def test_unsafe_booking_id_rejected(self, client, configured, gateway, valid_form_data):
        response = client.post("/api/send-file", data={
            "phone": "6281234567890",
            "umrahFormData": json.dumps(valid_form_data),
            "bookingId": 'RT-1"; x=y',
        })
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid bookingId format"
        assert gateway.requests == []


class TestTestPdf:
    """Tests for the PDF preview endpoints."""

    def test_sample(self, client):
        response = client.get("/api/test-pdf")
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")

    def test_post(self, client, valid_form_data):
        response = client.post("/api/test-pdf", json={"formData": valid_form_data, "bookingId": "RT-AB12"})
        assert response.status_code == 200
        assert 'filename="confirmation-RT-AB12.pdf"' in response.headers["content-disposition"]

    def test_post_missing_booking_id(self, client, valid_form_data):
        response = client.post("/api/test-pdf", json={"formData": valid_form_data})
        assert response.status_code == 400

    def test_post_missing_field(self, client, valid_form_data):
        valid_form_data["email"] = ""
        response = client.post("/api/test-pdf", json={"formData": valid_form_data, "bookingId": "RT-AB12"})
        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required field: email"

    @pytest.mark.parametrize("booking_id", ['RT-1"x', "RT 1", "RT-ÄB12", "RT-1\n"])
    def test_post_unsafe_booking_id(self, client, valid_form_data, booking_id):
        response = client.post("/api/test-pdf", json={"formData": valid_form_data, "bookingId": booking_id})
        assert response.status_code == 400
        assert response.json()["detail"] == "Invalid bookingId format"
