"""FastAPI dependencies: database session, services and the notification dispatcher."""

from typing import Generator

from fastapi import Depends
from sqlalchemy.orm import Session

from core.config import WhatsAppConfig, settings
from db.session import get_session
from services.booking_service import BookingService
from services.notification_service import NotificationDispatcher
from services.package_service import PackageService


def get_db() -> Generator[Session, None, None]:
    """Request-scoped database session."""
    yield from get_session()


def get_whatsapp_config() -> WhatsAppConfig:
    return WhatsAppConfig.from_settings(settings)


def get_dispatcher(config: WhatsAppConfig = Depends(get_whatsapp_config)) -> NotificationDispatcher:
    return NotificationDispatcher(config)


def get_booking_service(
    db: Session = Depends(get_db),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
) -> BookingService:
    """Booking service that notifies the applicant after every committed change."""
    return BookingService(db, after_change_hooks=[dispatcher.notify_booking_change])


def get_package_service(db: Session = Depends(get_db)) -> PackageService:
    return PackageService(db)
