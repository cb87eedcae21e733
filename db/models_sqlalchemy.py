"""SQLAlchemy models for the Umrah registration database tables."""

from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    JSON,
    String,
    Text,
)
from sqlalchemy import orm
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, enum_check
from domain.enums import BookingStatus


class UmrahPackage(Base, TimestampMixin):
    """Umrah package catalog table model."""

    __tablename__ = "umrah_packages"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(
        String(200),
        nullable=False,
        index=True,
    )

    price: Mapped[Optional[int]] = mapped_column(
        Integer,
        nullable=True,
    )

    description: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
    )

    duration: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
    )

    includes: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
    )

    bookings: Mapped[List["Booking"]] = orm.relationship(back_populates="package")

    __table_args__ = (
        CheckConstraint("price IS NULL OR price >= 0", name="price_non_negative"),
    )

    def __repr__(self) -> str:
        """String representation of UmrahPackage."""
        return f"<UmrahPackage(id={self.id}, name='{self.name}', price={self.price})>"


class Booking(Base, TimestampMixin):
    """Umrah booking (registration form submission) table model."""

    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    booking_id: Mapped[str] = mapped_column(String(30), nullable=False, unique=True, index=True)

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=BookingStatus.PENDING_REVIEW.value,
        index=True,
    )

    submission_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    # Personal Information
    name: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    register_date: Mapped[date] = mapped_column(Date, nullable=False)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    place_of_birth: Mapped[str] = mapped_column(String(50), nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    father_name: Mapped[str] = mapped_column(String(100), nullable=False)
    mother_name: Mapped[str] = mapped_column(String(100), nullable=False)
    marital_status: Mapped[str] = mapped_column(String(10), nullable=False)

    # Address Information
    address: Mapped[str] = mapped_column(String(300), nullable=False)
    city: Mapped[str] = mapped_column(String(50), nullable=False)
    province: Mapped[str] = mapped_column(String(50), nullable=False)
    postal_code: Mapped[str] = mapped_column(String(6), nullable=False)
    occupation: Mapped[str] = mapped_column(String(100), nullable=False)

    # Health Information
    specific_disease: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    illness: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    special_needs: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    wheelchair: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Document Information
    nik_number: Mapped[str] = mapped_column(String(16), nullable=False, unique=True)
    passport_number: Mapped[str] = mapped_column(String(15), nullable=False, unique=True)
    date_of_issue: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False)
    place_of_issue: Mapped[str] = mapped_column(String(50), nullable=False)

    # Contact Information
    phone_number: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    whatsapp_number: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    # Pilgrimage History
    has_performed_umrah: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    has_performed_hajj: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    # Emergency Contact
    emergency_contact_name: Mapped[str] = mapped_column(String(100), nullable=False)
    relationship: Mapped[str] = mapped_column(String(20), nullable=False)
    emergency_contact_phone: Mapped[str] = mapped_column(String(20), nullable=False)

    # Package & Payment
    umrah_package_id: Mapped[int] = mapped_column(
        ForeignKey("umrah_packages.id"),
        nullable=False,
        index=True,
    )
    payment_method: Mapped[str] = mapped_column(String(20), nullable=False)
    terms_of_service: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    package: Mapped[UmrahPackage] = orm.relationship(back_populates="bookings", lazy="joined")

    __table_args__ = (
        Index("ix_bookings_status_submission", "status", "submission_date"),
        enum_check("status", BookingStatus, "status_valid"),
    )

    @property
    def package_name(self) -> Optional[str]:
        """Name of the chosen package, if loaded."""
        return self.package.name if self.package is not None else None

    def __repr__(self) -> str:
        """String representation of Booking."""
        return (
            f"<Booking(id={self.id}, booking_id='{self.booking_id}', "
            f"name='{self.name}', status='{self.status}')>"
        )
