"""Pytest configuration and fixtures for Umrah registration tests."""
from datetime import date
from typing import List, Tuple
from unittest.mock import patch

import pytest
from sqlalchemy.orm import Session, sessionmaker

from core.config import WhatsAppConfig
from db.session import create_engine, drop_db, init_db
from domain.enums import BookingOperation
from domain.models import BookingRecord, UmrahPackageCreate
from services.booking_service import BookingService
from services.package_service import PackageService


# Every date rule is evaluated against this day (Asia/Jakarta)
FIXED_TODAY = date(2026, 10, 18)


@pytest.fixture(autouse=True)
def fixed_today():
    """Pin "today" for validation rules."""
    with patch("services.booking_validation.get_today", return_value=FIXED_TODAY):
        yield FIXED_TODAY


@pytest.fixture(scope="function")
def db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine("sqlite://", echo=False)
    init_db(bind=engine)
    yield engine
    drop_db(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for testing."""
    SessionLocal = sessionmaker(bind=db_engine, class_=Session, expire_on_commit=False)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def package_service(db_session):
    return PackageService(db_session)


@pytest.fixture(scope="function")
def umrah_package(package_service):
    """A package to book."""
    return package_service.create_package(UmrahPackageCreate(
        name="Paket Umroh Reguler 12 Hari",
        price=32500000,
        description="Umroh reguler dengan hotel bintang 4",
        duration="12 Hari",
        includes=["Tiket pesawat", "Visa", "Hotel", "Makan 3x sehari"],
    ))


class RecordingHook:
    """Post-commit hook that remembers every call."""

    def __init__(self):
        self.calls: List[Tuple[BookingRecord, BookingOperation]] = []

    def __call__(self, record: BookingRecord, operation: BookingOperation):
        self.calls.append((record, operation))

    @property
    def operations(self) -> List[BookingOperation]:
        return [operation for _, operation in self.calls]


@pytest.fixture(scope="function")
def recording_hook():
    return RecordingHook()


@pytest.fixture(scope="function")
def booking_service(db_session, recording_hook):
    """Create a booking service instance for testing."""
    return BookingService(db_session, after_change_hooks=[recording_hook])


@pytest.fixture(scope="function")
def unconfigured_whatsapp():
    """WhatsApp settings with the endpoint and credentials missing."""
    return WhatsAppConfig()


@pytest.fixture(scope="function")
def whatsapp_config():
    return WhatsAppConfig(
        endpoint="https://wa.example.com/",
        username="rehla",
        password="secret",
        default_duration=3600,
        timeout=5.0,
    )


@pytest.fixture(scope="function")
def valid_form_data():
    """A complete registration form that passes every rule on FIXED_TODAY."""
    return {
        # Personal Information
        "name": "Ahmad Sulaiman",
        "register_date": "2026-10-20",
        "gender": "male",
        "place_of_birth": "Jakarta",
        "birth_date": "1985-03-20",
        "father_name": "Sulaiman Rahman",
        "mother_name": "Siti Aminah",
        "marital_status": "married",
        # Address Information
        "address": "Jl. Merdeka No. 123 Kebayoran Baru",
        "city": "Jakarta Selatan",
        "province": "DKI Jakarta",
        "postal_code": "12345",
        "occupation": "Wiraswasta",
        # Health Information
        "specific_disease": False,
        "illness": "",
        "special_needs": False,
        "wheelchair": False,
        # Document Information
        "nik_number": "3171012003850001",
        "passport_number": "A1234567",
        "date_of_issue": "2024-01-01",
        "expiry_date": "2029-01-01",
        "place_of_issue": "Jakarta",
        # Contact Information
        "phone_number": "081234567890",
        "whatsapp_number": "081234567890",
        "email": "ahmad.sulaiman@example.com",
        # Pilgrimage History
        "has_performed_umrah": False,
        "has_performed_hajj": False,
        # Emergency Contact
        "emergency_contact_name": "Fatimah Sulaiman",
        "relationship": "spouse",
        "emergency_contact_phone": "081298765432",
        # Package & Payment
        "umrah_package": "1",
        "payment_method": "lunas",
        "terms_of_service": True,
    }


@pytest.fixture(scope="function")
def booking_form(valid_form_data, umrah_package):
    """Valid form pointing at a stored package."""
    data = dict(valid_form_data)
    data["umrah_package"] = str(umrah_package.id)
    return data


@pytest.fixture(scope="function")
def create_booking(booking_service, booking_form):
    """Factory fixture to submit a booking with overrides."""
    def _create(**overrides):
        data = dict(booking_form)
        data.update(overrides)
        response = booking_service.submit_booking_form(data)
        assert response.success, response.errors
        return response.data
    return _create
