"""
Booking service for managing Umrah registrations.
Handles booking id assignment, persistence, admin status changes and post-commit hooks.
"""
import logging
import random
import string
from typing import Any, Callable, Dict, Iterable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.config import settings
from core.utils_datetime import get_current_datetime
from db.models_sqlalchemy import Booking, UmrahPackage
from domain.enums import STATUS_TRANSITIONS, BookingOperation, BookingStatus
from domain.models import BookingRecord, SubmissionResponse
from services.booking_validation import FIELD_ALIASES, FORM_FIELDS, validate_booking_form
from services.package_service import PackageNotFoundError


logger = logging.getLogger(__name__)


BOOKING_ID_PREFIX = "RT-"
BOOKING_ID_ALPHABET = string.ascii_uppercase + string.digits
BOOKING_ID_LENGTH = 4

DUPLICATE_BOOKING_MESSAGE = (
    "Data pendaftaran sudah terdaftar. Periksa kembali NIK, nomor paspor, atau email Anda."
)
PACKAGE_NOT_FOUND_MESSAGE = "Paket umroh yang dipilih tidak ditemukan"

# Never written after creation
IMMUTABLE_FIELDS = {"id", "booking_id", "submission_date", "created_at", "updated_at"}

AfterChangeHook = Callable[[BookingRecord, BookingOperation], Any]


class BookingServiceError(Exception):
    """Base class for booking service errors."""
    pass


class BookingNotFoundError(BookingServiceError):
    """Raised when a booking is not found."""
    pass


class DuplicateBookingError(BookingServiceError):
    """Raised when a booking violates a uniqueness constraint."""
    pass


class BookingIdCollisionError(DuplicateBookingError):
    """Raised when no free booking id was found within the allowed attempts."""
    pass


class InvalidStatusTransitionError(BookingServiceError):
    """Raised when a status change is not allowed from the current status."""
    pass


class BookingValidationError(BookingServiceError):
    """Raised when booking changes fail form validation."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__("; ".join(errors))


def generate_booking_id() -> str:
    """Booking code: "RT-" followed by 4 random characters from A-Z and 0-9."""
    suffix = "".join(random.choice(BOOKING_ID_ALPHABET) for _ in range(BOOKING_ID_LENGTH))
    return f"{BOOKING_ID_PREFIX}{suffix}"


def generate_legacy_booking_id() -> str:
    """Booking code used by older clients: "RT-<0..9999>-<epoch milliseconds>"."""
    millis = int(get_current_datetime().timestamp() * 1000)
    return f"{BOOKING_ID_PREFIX}{random.randint(0, 9999)}-{millis}"


class BookingService:
    """Service for managing Umrah bookings."""

    def __init__(
        self,
        db_session: Session,
        after_change_hooks: Optional[Iterable[AfterChangeHook]] = None,
        max_id_attempts: Optional[int] = None,
    ):
        """
        Initialize the booking service.

        Args:
            db_session: SQLAlchemy database session
            after_change_hooks: Callables invoked with (record, operation) after
                every committed create or update
            max_id_attempts: How many booking ids to try before giving up
        """
        self.db = db_session
        self.after_change_hooks: List[AfterChangeHook] = list(after_change_hooks or [])
        self.max_id_attempts = max_id_attempts or settings.booking_id_max_attempts

    # ------------------------------------------------------------------
    # Applicant submission
    # ------------------------------------------------------------------

    def submit_booking_form(self, raw_data: Dict[str, Any]) -> SubmissionResponse:
        """
        Validate, normalize and persist a registration form.

        Validation problems are returned, not raised, so the form can show
        every message at once.

        Raises:
            DuplicateBookingError: If NIK, passport number, email or booking id is taken
        """
        result = validate_booking_form(raw_data)
        if not result.is_valid:
            errors = result.get_error_messages()
            return SubmissionResponse(success=False, errors=errors, error="; ".join(errors))

        try:
            record = self.create_booking(result.data)
        except PackageNotFoundError:
            return SubmissionResponse(
                success=False,
                errors=[PACKAGE_NOT_FOUND_MESSAGE],
                error=PACKAGE_NOT_FOUND_MESSAGE,
            )

        return SubmissionResponse(success=True, data=record)

    # ------------------------------------------------------------------
    # Record lifecycle
    # ------------------------------------------------------------------

    def create_booking(self, data: Dict[str, Any]) -> BookingRecord:
        """
        Persist an already validated and normalized booking.

        ``booking_id`` and ``submission_date`` are assigned only when absent.

        Args:
            data: Form data as produced by ``validate_booking_form``

        Returns:
            Stored BookingRecord

        Raises:
            PackageNotFoundError: If the referenced package does not exist
            BookingIdCollisionError: If no free booking id could be generated
            DuplicateBookingError: If a uniqueness constraint is violated
        """
        values = dict(data)
        if "umrah_package" in values:
            values["umrah_package_id"] = values.pop("umrah_package")

        self._ensure_package_exists(values.get("umrah_package_id"))

        if not values.get("booking_id"):
            values["booking_id"] = self._generate_unique_booking_id()
        if not values.get("submission_date"):
            values["submission_date"] = get_current_datetime()
        values.setdefault("status", BookingStatus.PENDING_REVIEW.value)

        columns = set(Booking.__table__.columns.keys())
        booking = Booking(**{key: value for key, value in values.items() if key in columns})

        self.db.add(booking)
        self._commit(booking.booking_id)
        self.db.refresh(booking)

        logger.info(
            f"Created booking {booking.booking_id}",
            extra={"booking_id": booking.booking_id, "operation": BookingOperation.CREATE},
        )

        record = BookingRecord.model_validate(booking)
        self._run_after_change(record, BookingOperation.CREATE)
        return record

    def update_booking(self, booking_id: str, changes: Dict[str, Any]) -> BookingRecord:
        """
        Partially update a booking.

        Only the supplied fields (and the fields whose rules depend on them)
        are validated, against the stored record merged with the changes.

        Raises:
            BookingNotFoundError: If booking not found
            BookingValidationError: If the changes are invalid
            PackageNotFoundError: If a new package id does not exist
            DuplicateBookingError: If a uniqueness constraint is violated
        """
        booking = self._get_model(booking_id)

        changes = {
            key: value for key, value in (changes or {}).items()
            if key not in IMMUTABLE_FIELDS
        }
        for canonical, alias in FIELD_ALIASES.items():
            if alias in changes and canonical not in changes:
                changes[canonical] = changes.pop(alias)

        form_changes = [key for key in changes if key in FORM_FIELDS]
        if not form_changes:
            return BookingRecord.model_validate(booking)

        snapshot = self._form_snapshot(booking)
        snapshot.update(changes)

        result = validate_booking_form(snapshot, fields=form_changes)
        if not result.is_valid:
            raise BookingValidationError(result.get_error_messages())

        if "umrah_package" in result.data:
            self._ensure_package_exists(result.data["umrah_package"])

        for key, value in result.data.items():
            if key == "umrah_package":
                booking.umrah_package_id = value
            else:
                setattr(booking, key, value)

        self._commit(booking.booking_id)
        self.db.refresh(booking)

        logger.info(f"Updated booking {booking.booking_id} ({', '.join(sorted(result.data))})")

        record = BookingRecord.model_validate(booking)
        self._run_after_change(record, BookingOperation.UPDATE)
        return record

    def change_status(self, booking_id: str, status: BookingStatus) -> BookingRecord:
        """
        Move a booking to another status (admin action).

        Setting the current status again is a no-op.

        Raises:
            BookingNotFoundError: If booking not found
            InvalidStatusTransitionError: If the move is not allowed
        """
        booking = self._get_model(booking_id)
        current = BookingStatus(booking.status)
        target = BookingStatus(status)

        if target == current:
            return BookingRecord.model_validate(booking)

        if target not in STATUS_TRANSITIONS[current]:
            raise InvalidStatusTransitionError(
                f"Cannot change booking {booking_id} from {current.value} to {target.value}"
            )

        booking.status = target.value
        self._commit(booking.booking_id)
        self.db.refresh(booking)

        logger.info(
            f"Booking {booking_id} status {current.value} -> {target.value}",
            extra={"booking_id": booking_id, "operation": BookingOperation.UPDATE},
        )

        record = BookingRecord.model_validate(booking)
        self._run_after_change(record, BookingOperation.UPDATE)
        return record

    def get_booking(self, booking_id: str) -> BookingRecord:
        """
        Get a booking by its booking code.

        Raises:
            BookingNotFoundError: If booking not found
        """
        return BookingRecord.model_validate(self._get_model(booking_id))

    def list_bookings(
        self,
        status: Optional[BookingStatus] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[BookingRecord]:
        """
        List bookings, newest submission first.

        Args:
            status: Only bookings in this status (optional)
            limit: Page size
            offset: Number of bookings to skip

        Returns:
            List of BookingRecord objects
        """
        query = self.db.query(Booking)

        if status is not None:
            query = query.filter(Booking.status == BookingStatus(status).value)

        bookings = (
            query.order_by(Booking.submission_date.desc(), Booking.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )
        return [BookingRecord.model_validate(booking) for booking in bookings]

    def delete_booking(self, booking_id: str) -> None:
        """
        Permanently delete a booking.

        Raises:
            BookingNotFoundError: If booking not found
        """
        booking = self._get_model(booking_id)
        self.db.delete(booking)
        self.db.commit()
        logger.info(f"Deleted booking {booking_id}")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_model(self, booking_id: str) -> Booking:
        booking = self.db.query(Booking).filter(Booking.booking_id == booking_id).first()

        if not booking:
            raise BookingNotFoundError(f"Booking {booking_id} not found")

        return booking

    def _ensure_package_exists(self, package_id: Optional[int]) -> None:
        if package_id is None or self.db.get(UmrahPackage, package_id) is None:
            raise PackageNotFoundError(f"Package {package_id} not found")

    def _generate_unique_booking_id(self) -> str:
        """Draw booking codes until one is not stored yet."""
        for attempt in range(1, self.max_id_attempts + 1):
            candidate = generate_booking_id()
            taken = self.db.query(Booking.id).filter(Booking.booking_id == candidate).first()
            if taken is None:
                return candidate
            logger.warning(f"Booking id {candidate} already taken (attempt {attempt})")

        raise BookingIdCollisionError(
            f"No free booking id after {self.max_id_attempts} attempts"
        )

    def _commit(self, booking_id: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Uniqueness conflict for booking {booking_id}: {e.orig}")
            raise DuplicateBookingError(DUPLICATE_BOOKING_MESSAGE) from e

    @staticmethod
    def _form_snapshot(booking: Booking) -> Dict[str, Any]:
        """Current stored values in form-data shape."""
        snapshot = {}
        for name in FORM_FIELDS:
            if name == "umrah_package":
                snapshot[name] = booking.umrah_package_id
            else:
                snapshot[name] = getattr(booking, name)
        return snapshot

    def _run_after_change(self, record: BookingRecord, operation: BookingOperation) -> None:
        """Invoke post-commit hooks; their failures never reach the caller."""
        for hook in self.after_change_hooks:
            try:
                hook(record, operation)
            except Exception:
                logger.exception(
                    f"After-change hook failed for booking {record.booking_id} ({operation.value})"
                )
