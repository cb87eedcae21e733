"""Domain enums for the Umrah registration form."""

from enum import Enum


class BookingStatus(str, Enum):
    """Booking status enumeration."""

    PENDING_REVIEW = "pending_review"
    PROCESSING = "processing"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class BookingOperation(str, Enum):
    """Kind of mutation reported to post-commit hooks."""

    CREATE = "create"
    UPDATE = "update"


class Gender(str, Enum):
    """Applicant gender."""

    MALE = "male"
    FEMALE = "female"


class MaritalStatus(str, Enum):
    """Applicant marital status."""

    SINGLE = "single"
    MARRIED = "married"
    DIVORCED = "divorced"


class Relationship(str, Enum):
    """Relationship of the emergency contact to the applicant."""

    PARENTS = "parents"
    SPOUSE = "spouse"
    CHILDREN = "children"
    SIBLING = "sibling"
    RELATIVE = "relative"


class PaymentMethod(str, Enum):
    """Payment scheme chosen for the package."""

    LUNAS = "lunas"  # Paid in full
    SIXTY_PERCENT = "60_percent"  # 60% down payment first


# Allowed status moves, driven by the admin only
STATUS_TRANSITIONS = {
    BookingStatus.PENDING_REVIEW: {BookingStatus.PROCESSING},
    BookingStatus.PROCESSING: {BookingStatus.APPROVED, BookingStatus.REJECTED},
    BookingStatus.APPROVED: {BookingStatus.COMPLETED},
    BookingStatus.REJECTED: set(),
    BookingStatus.COMPLETED: set(),
}


# Human-readable labels (Bahasa Indonesia)
STATUS_LABELS = {
    BookingStatus.PENDING_REVIEW: "Menunggu Review",
    BookingStatus.PROCESSING: "Sedang Diproses",
    BookingStatus.APPROVED: "Diterima",
    BookingStatus.REJECTED: "Ditolak",
    BookingStatus.COMPLETED: "Selesai",
}

# Phrase used inside notification sentences
STATUS_PHRASES = {
    BookingStatus.PENDING_REVIEW: "sedang dalam tahap review",
    BookingStatus.PROCESSING: "sedang diproses",
    BookingStatus.APPROVED: "telah disetujui",
    BookingStatus.REJECTED: "telah ditolak",
    BookingStatus.COMPLETED: "telah selesai",
}

GENDER_LABELS = {
    Gender.MALE: "Laki-Laki",
    Gender.FEMALE: "Perempuan",
}

MARITAL_STATUS_LABELS = {
    MaritalStatus.SINGLE: "Belum Menikah",
    MaritalStatus.MARRIED: "Menikah",
    MaritalStatus.DIVORCED: "Janda/Duda",
}

RELATIONSHIP_LABELS = {
    Relationship.PARENTS: "Orang Tua",
    Relationship.SPOUSE: "Suami/Istri",
    Relationship.CHILDREN: "Anak",
    Relationship.SIBLING: "Saudara",
    Relationship.RELATIVE: "Kerabat",
}

PAYMENT_METHOD_LABELS = {
    PaymentMethod.LUNAS: "Lunas",
    PaymentMethod.SIXTY_PERCENT: "Cicilan 60% pertama",
}


def enum_label(enum_cls, value, labels, default: str = "-") -> str:
    """Map a raw enum value (or member) to its label, falling back to the raw value."""
    if value is None or value == "":
        return default
    try:
        member = enum_cls(value)
    except ValueError:
        return str(value)
    return labels.get(member, member.value)
