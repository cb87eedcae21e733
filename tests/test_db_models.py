"""Tests for database constraints."""
import pytest
from sqlalchemy.exc import IntegrityError

from db.models_sqlalchemy import Booking, UmrahPackage


class TestDatabaseConstraints:
    """Tests for CHECK constraints on the registration tables."""

    def test_negative_package_price_rejected(self, db_session):
        db_session.add(UmrahPackage(name="Paket Rusak", price=-1, includes=[]))

        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()

    def test_unknown_booking_status_rejected(self, db_session, create_booking):
        record = create_booking()
        booking = db_session.query(Booking).filter(Booking.booking_id == record.booking_id).one()

        booking.status = "archived"
        with pytest.raises(IntegrityError):
            db_session.commit()
        db_session.rollback()
