"""Domain layer for the Umrah registration form."""

from .enums import (
    BookingStatus,
    BookingOperation,
    Gender,
    MaritalStatus,
    Relationship,
    PaymentMethod,
    STATUS_TRANSITIONS,
)
from .models import (
    UmrahPackageBase,
    UmrahPackageCreate,
    UmrahPackageUpdate,
    UmrahPackageRecord,
    PackageOption,
    BookingRecord,
    BookingStatusUpdate,
    SubmissionResponse,
    LegacyBookingData,
    default_form_data,
)

__all__ = [
    # Enums
    "BookingStatus",
    "BookingOperation",
    "Gender",
    "MaritalStatus",
    "Relationship",
    "PaymentMethod",
    "STATUS_TRANSITIONS",
    # Models
    "UmrahPackageBase",
    "UmrahPackageCreate",
    "UmrahPackageUpdate",
    "UmrahPackageRecord",
    "PackageOption",
    "BookingRecord",
    "BookingStatusUpdate",
    "SubmissionResponse",
    "LegacyBookingData",
    "default_form_data",
]
