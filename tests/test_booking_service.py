"""Tests for the booking service."""
import re
from datetime import date
from unittest.mock import patch

import pytest

from domain.enums import BookingOperation, BookingStatus
from services.booking_service import (
    BookingIdCollisionError,
    BookingNotFoundError,
    BookingService,
    BookingValidationError,
    DuplicateBookingError,
    InvalidStatusTransitionError,
    generate_booking_id,
    generate_legacy_booking_id,
)
from services.booking_validation import validate_booking_form
from services.package_service import PackageNotFoundError


BOOKING_ID_PATTERN = re.compile(r"^RT-[A-Z0-9]{4}$")


class TestBookingIdGeneration:
    """Tests for booking code generators."""

    def test_booking_id_format(self):
        for _ in range(200):
            assert BOOKING_ID_PATTERN.match(generate_booking_id())

    def test_legacy_booking_id_format(self):
        assert re.match(r"^RT-\d+-\d+$", generate_legacy_booking_id())


class TestSubmitBookingForm:
    """Tests for applicant submissions."""

    def test_valid_submission_is_stored(self, booking_service, booking_form, umrah_package):
        response = booking_service.submit_booking_form(booking_form)

        assert response.success
        record = response.data
        assert BOOKING_ID_PATTERN.match(record.booking_id)
        assert record.status == BookingStatus.PENDING_REVIEW
        assert record.submission_date is not None
        assert record.umrah_package_id == umrah_package.id
        assert record.package_name == "Paket Umroh Reguler 12 Hari"
        assert record.register_date == date(2026, 10, 20)

    def test_submission_is_normalized(self, booking_service, booking_form):
        booking_form.update({
            "name": "  Ahmad   Sulaiman ",
            "email": "AHMAD.SULAIMAN@EXAMPLE.COM",
            "passport_number": "a1234567",
            "whatsapp_number": "0812 3456 7890",
        })
        record = booking_service.submit_booking_form(booking_form).data

        assert record.name == "Ahmad Sulaiman"
        assert record.email == "ahmad.sulaiman@example.com"
        assert record.passport_number == "A1234567"
        assert record.whatsapp_number == "081234567890"

    def test_terms_not_accepted_is_not_persisted(self, booking_service, booking_form):
        booking_form["terms_of_service"] = False
        response = booking_service.submit_booking_form(booking_form)

        assert not response.success
        assert response.errors == ["Anda harus menyetujui syarat dan ketentuan"]
        assert booking_service.list_bookings() == []

    def test_invalid_submission_reports_all_errors(self, booking_service, booking_form):
        booking_form.update({"name": "Ahmad", "nik_number": "1111111111111111"})
        response = booking_service.submit_booking_form(booking_form)

        assert response.errors == [
            "Nama harus terdiri dari minimal 2 kata",
            "NIK tidak valid - tidak boleh semua digit sama",
        ]
        assert response.error == "; ".join(response.errors)

    def test_unknown_package(self, booking_service, booking_form):
        booking_form["umrah_package"] = "999"
        response = booking_service.submit_booking_form(booking_form)

        assert not response.success
        assert response.errors == ["Paket umroh yang dipilih tidak ditemukan"]

    def test_duplicate_nik_rejected(self, booking_service, booking_form, create_booking):
        create_booking()
        duplicate = {
            **booking_form,
            "passport_number": "B7654321",
            "email": "lain@example.com",
        }

        with pytest.raises(DuplicateBookingError):
            booking_service.submit_booking_form(duplicate)

        assert len(booking_service.list_bookings()) == 1

    def test_duplicate_passport_rejected_after_normalization(self, booking_service, booking_form, create_booking):
        create_booking()
        duplicate = {
            **booking_form,
            "nik_number": "3171012003850002",
            "passport_number": " a1234567 ",
            "email": "lain@example.com",
        }

        with pytest.raises(DuplicateBookingError):
            booking_service.submit_booking_form(duplicate)

        assert len(booking_service.list_bookings()) == 1

    def test_duplicate_email_rejected_after_normalization(self, booking_service, booking_form, create_booking):
        create_booking()
        duplicate = {
            **booking_form,
            "nik_number": "3171012003850002",
            "passport_number": "B7654321",
            "email": " Ahmad.SULAIMAN@Example.com ",
        }

        with pytest.raises(DuplicateBookingError):
            booking_service.submit_booking_form(duplicate)

        assert len(booking_service.list_bookings()) == 1

    def test_hook_called_after_create(self, create_booking, recording_hook):
        record = create_booking()

        assert recording_hook.operations == [BookingOperation.CREATE]
        assert recording_hook.calls[0][0].booking_id == record.booking_id

    def test_failing_hook_does_not_fail_submission(self, db_session, booking_form):
        def broken_hook(record, operation):
            raise RuntimeError("gateway down")

        service = BookingService(db_session, after_change_hooks=[broken_hook])
        response = service.submit_booking_form(booking_form)

        assert response.success
        assert service.get_booking(response.data.booking_id).name == "Ahmad Sulaiman"


class TestCreateBooking:
    """Tests for booking id and submission date assignment."""

    def test_supplied_booking_id_kept(self, booking_service, booking_form):
        data = validate_booking_form(booking_form).data
        data["booking_id"] = "RT-AB12"
        record = booking_service.create_booking(data)
        assert record.booking_id == "RT-AB12"

    def test_taken_booking_id_is_regenerated(self, booking_service, booking_form, create_booking):
        existing = create_booking()
        data = validate_booking_form({
            **booking_form,
            "nik_number": "3171012003850002",
            "passport_number": "B7654321",
            "email": "kedua@example.com",
        }).data

        with patch(
            "services.booking_service.generate_booking_id",
            side_effect=[existing.booking_id, "RT-ZZ99"],
        ):
            record = booking_service.create_booking(data)

        assert record.booking_id == "RT-ZZ99"

    def test_booking_id_attempts_exhausted(self, db_session, booking_form, create_booking):
        existing = create_booking()
        service = BookingService(db_session, max_id_attempts=3)
        data = validate_booking_form({
            **booking_form,
            "nik_number": "3171012003850002",
            "passport_number": "B7654321",
            "email": "kedua@example.com",
        }).data

        with patch("services.booking_service.generate_booking_id", return_value=existing.booking_id):
            with pytest.raises(BookingIdCollisionError):
                service.create_booking(data)

    def test_missing_package(self, booking_service, booking_form):
        data = validate_booking_form(booking_form).data
        data["umrah_package"] = 404
        with pytest.raises(PackageNotFoundError):
            booking_service.create_booking(data)


class TestUpdateBooking:
    """Tests for partial updates."""

    def test_update_single_field(self, booking_service, create_booking, recording_hook):
        record = create_booking()
        updated = booking_service.update_booking(record.booking_id, {"city": "  Kota   Bandung "})

        assert updated.city == "Kota Bandung"
        assert updated.name == record.name
        assert recording_hook.operations == [BookingOperation.CREATE, BookingOperation.UPDATE]

    def test_booking_id_and_submission_date_immutable(self, booking_service, create_booking):
        record = create_booking()
        updated = booking_service.update_booking(record.booking_id, {
            "booking_id": "RT-HACK",
            "submission_date": "2020-01-01T00:00:00",
            "occupation": "Guru",
        })

        assert updated.booking_id == record.booking_id
        assert updated.submission_date == record.submission_date
        assert updated.occupation == "Guru"

    def test_invalid_update_rejected(self, booking_service, create_booking):
        record = create_booking()

        with pytest.raises(BookingValidationError) as exc_info:
            booking_service.update_booking(record.booking_id, {"postal_code": "12"})

        assert exc_info.value.errors == ["Kode pos harus terdiri dari 5-6 digit angka"]
        assert booking_service.get_booking(record.booking_id).postal_code == "12345"

    def test_declaring_disease_requires_illness(self, booking_service, create_booking):
        record = create_booking()

        with pytest.raises(BookingValidationError):
            booking_service.update_booking(record.booking_id, {"specific_disease": True})

        updated = booking_service.update_booking(
            record.booking_id, {"specific_disease": True, "illness": "Asma"}
        )
        assert updated.illness == "Asma"

    def test_clearing_disease_clears_illness(self, booking_service, create_booking):
        record = create_booking(specific_disease=True, illness="Asma")
        updated = booking_service.update_booking(record.booking_id, {"specific_disease": False})

        assert updated.specific_disease is False
        assert updated.illness is None

    def test_update_without_form_fields_is_noop(self, booking_service, create_booking, recording_hook):
        record = create_booking()
        unchanged = booking_service.update_booking(record.booking_id, {"status": "approved"})

        assert unchanged.status == BookingStatus.PENDING_REVIEW
        assert recording_hook.operations == [BookingOperation.CREATE]

    def test_update_unknown_booking(self, booking_service):
        with pytest.raises(BookingNotFoundError):
            booking_service.update_booking("RT-NONE", {"city": "Bandung"})

    def test_unknown_package_leaves_booking_untouched(self, booking_service, create_booking):
        record = create_booking()

        with pytest.raises(PackageNotFoundError):
            booking_service.update_booking(record.booking_id, {"name": "Budi Santoso", "umrah_package": 999})

        booking_service.change_status(record.booking_id, BookingStatus.PROCESSING)
        stored = booking_service.get_booking(record.booking_id)
        assert stored.name == "Ahmad Sulaiman"
        assert stored.status == BookingStatus.PROCESSING


class TestStatusTransitions:
    """Tests for the admin review workflow."""

    def test_full_happy_path(self, booking_service, create_booking):
        record = create_booking()
        for status in (BookingStatus.PROCESSING, BookingStatus.APPROVED, BookingStatus.COMPLETED):
            record = booking_service.change_status(record.booking_id, status)
            assert record.status == status

    def test_reject_from_processing(self, booking_service, create_booking):
        record = create_booking()
        booking_service.change_status(record.booking_id, BookingStatus.PROCESSING)
        rejected = booking_service.change_status(record.booking_id, BookingStatus.REJECTED)
        assert rejected.status == BookingStatus.REJECTED

    def test_skipping_review_rejected(self, booking_service, create_booking):
        record = create_booking()
        with pytest.raises(InvalidStatusTransitionError):
            booking_service.change_status(record.booking_id, BookingStatus.APPROVED)

    def test_rejected_is_final(self, booking_service, create_booking):
        record = create_booking()
        booking_service.change_status(record.booking_id, BookingStatus.PROCESSING)
        booking_service.change_status(record.booking_id, BookingStatus.REJECTED)
        with pytest.raises(InvalidStatusTransitionError):
            booking_service.change_status(record.booking_id, BookingStatus.PROCESSING)

    def test_same_status_is_noop(self, booking_service, create_booking, recording_hook):
        record = create_booking()
        same = booking_service.change_status(record.booking_id, BookingStatus.PENDING_REVIEW)

        assert same.status == BookingStatus.PENDING_REVIEW
        assert recording_hook.operations == [BookingOperation.CREATE]

    def test_status_change_notifies(self, booking_service, create_booking, recording_hook):
        record = create_booking()
        booking_service.change_status(record.booking_id, BookingStatus.PROCESSING)

        last_record, operation = recording_hook.calls[-1]
        assert operation == BookingOperation.UPDATE
        assert last_record.status == BookingStatus.PROCESSING


class TestQueries:
    """Tests for listing, reading and deleting."""

    def test_list_filters_by_status(self, booking_service, create_booking):
        first = create_booking()
        create_booking(
            nik_number="3171012003850002",
            passport_number="B7654321",
            email="kedua@example.com",
        )
        booking_service.change_status(first.booking_id, BookingStatus.PROCESSING)

        processing = booking_service.list_bookings(status=BookingStatus.PROCESSING)
        assert [r.booking_id for r in processing] == [first.booking_id]
        assert len(booking_service.list_bookings()) == 2

    def test_list_pagination(self, booking_service, create_booking):
        create_booking()
        create_booking(
            nik_number="3171012003850002",
            passport_number="B7654321",
            email="kedua@example.com",
        )
        assert len(booking_service.list_bookings(limit=1)) == 1
        assert len(booking_service.list_bookings(limit=1, offset=1)) == 1
        assert booking_service.list_bookings(offset=2) == []

    def test_delete(self, booking_service, create_booking):
        record = create_booking()
        booking_service.delete_booking(record.booking_id)

        with pytest.raises(BookingNotFoundError):
            booking_service.get_booking(record.booking_id)

    def test_form_data_uses_package_name(self, create_booking):
        form_data = create_booking().to_form_data()
        assert form_data["umrah_package"] == "Paket Umroh Reguler 12 Hari"
        assert form_data["register_date"] == "2026-10-20"
