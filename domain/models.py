"""Domain models using Pydantic v2 for the Umrah registration form."""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.utils_datetime import get_today
from .enums import (
    BookingStatus,
    Gender,
    MaritalStatus,
    PaymentMethod,
    Relationship,
)


# ============================================================================
# Umrah Package
# ============================================================================

class UmrahPackageBase(BaseModel):
    """Base package model with common fields."""

    name: str = Field(..., min_length=1, max_length=200, description="Package name")
    price: Optional[int] = Field(None, ge=0, description="Package price in Rupiah")
    description: Optional[str] = Field(None, description="Package description")
    duration: Optional[str] = Field(None, max_length=100, description="Trip duration, e.g. '12 Hari'")
    includes: List[str] = Field(default_factory=list, description="Included facilities")

    model_config = ConfigDict(
        str_strip_whitespace=True,
        from_attributes=True,
    )


class UmrahPackageCreate(UmrahPackageBase):
    """Model for creating a new package."""

    pass


class UmrahPackageUpdate(BaseModel):
    """Model for updating an existing package."""

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[int] = Field(None, ge=0)
    description: Optional[str] = None
    duration: Optional[str] = Field(None, max_length=100)
    includes: Optional[List[str]] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class UmrahPackageRecord(UmrahPackageBase):
    """Complete package record from database."""

    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PackageOption(BaseModel):
    """Select option for the package dropdown."""

    value: int
    label: str


# ============================================================================
# Booking
# ============================================================================

class BookingRecord(BaseModel):
    """Complete booking record from database."""

    id: int
    booking_id: str
    status: BookingStatus
    submission_date: Optional[datetime] = None

    # Personal Information
    name: str
    register_date: date
    gender: Gender
    place_of_birth: str
    birth_date: date
    father_name: str
    mother_name: str
    marital_status: MaritalStatus

    # Address Information
    address: str
    city: str
    province: str
    postal_code: str
    occupation: str

    # Health Information
    specific_disease: bool = False
    illness: Optional[str] = None
    special_needs: bool = False
    wheelchair: bool = False

    # Document Information
    nik_number: str
    passport_number: str
    date_of_issue: date
    expiry_date: date
    place_of_issue: str

    # Contact Information
    phone_number: str
    whatsapp_number: Optional[str] = None
    email: str

    # Pilgrimage History
    has_performed_umrah: bool = False
    has_performed_hajj: bool = False

    # Emergency Contact
    emergency_contact_name: str
    relationship: Relationship
    emergency_contact_phone: str

    # Package & Payment
    umrah_package_id: int
    package_name: Optional[str] = None
    payment_method: PaymentMethod
    terms_of_service: bool

    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def shows_illness(self) -> bool:
        """Illness details are only relevant when a specific disease is declared."""
        return self.specific_disease

    def to_form_data(self) -> Dict[str, Any]:
        """Flatten into the form/PDF data shape."""
        data = self.model_dump(mode="json")
        data["umrah_package"] = self.package_name or str(self.umrah_package_id)
        return data


class BookingStatusUpdate(BaseModel):
    """Request to move a booking to another status."""

    status: BookingStatus


class SubmissionResponse(BaseModel):
    """Outcome of a form submission."""

    success: bool
    data: Optional[BookingRecord] = None
    errors: List[str] = Field(default_factory=list)
    error: Optional[str] = None


# ============================================================================
# Form data helpers
# ============================================================================

def default_form_data(**overrides: Any) -> Dict[str, Any]:
    """
    Build a complete form data dict, filling every field with its default.

    Args:
        **overrides: Field values to use instead of defaults

    Returns:
        Form data dict
    """
    data: Dict[str, Any] = {
        # Personal Information
        "name": "",
        "register_date": get_today().isoformat(),
        "gender": Gender.MALE.value,
        "place_of_birth": "",
        "birth_date": "",
        "father_name": "",
        "mother_name": "",
        "marital_status": MaritalStatus.SINGLE.value,
        # Address Information
        "address": "",
        "city": "",
        "province": "",
        "postal_code": "",
        "occupation": "",
        # Health Information
        "specific_disease": False,
        "illness": "",
        "special_needs": False,
        "wheelchair": False,
        # Document Information
        "nik_number": "",
        "passport_number": "",
        "date_of_issue": "",
        "expiry_date": "",
        "place_of_issue": "",
        # Contact Information
        "phone_number": "",
        "whatsapp_number": "",
        "email": "",
        # Pilgrimage History
        "has_performed_umrah": False,
        "has_performed_hajj": False,
        # Emergency Contact
        "emergency_contact_name": "",
        "relationship": Relationship.PARENTS.value,
        "emergency_contact_phone": "",
        # Package & Payment
        "umrah_package": "",
        "payment_method": PaymentMethod.LUNAS.value,
        "terms_of_service": True,
    }
    for key, value in overrides.items():
        if value is not None:
            data[key] = value
    return data


class LegacyBookingData(BaseModel):
    """Booking payload used by older clients of the send-file endpoint."""

    booking_id: Optional[str] = Field(None, alias="bookingId")
    customer_name: str = Field("", alias="customerName")
    email: str = ""
    whatsapp_number: str = Field("", alias="whatsappNumber")
    phone_number: str = Field("", alias="phoneNumber")
    package_name: str = Field("", alias="packageName")
    payment_method: str = Field("", alias="paymentMethod")

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_form_data(self) -> Dict[str, Any]:
        """Convert to the full form data shape with defaults for everything else."""
        if self.payment_method.lower() == PaymentMethod.LUNAS.value:
            payment = PaymentMethod.LUNAS.value
        else:
            payment = PaymentMethod.SIXTY_PERCENT.value

        return default_form_data(
            name=self.customer_name,
            email=self.email,
            phone_number=self.phone_number,
            whatsapp_number=self.whatsapp_number,
            umrah_package=self.package_name,
            payment_method=payment,
        )
