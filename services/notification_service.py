"""
Notification dispatcher.
Sends booking confirmations to applicants over WhatsApp after a booking is stored.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from core.config import WhatsAppConfig, settings
from core.logging import mask_phone
from core.utils_datetime import format_date_id
from domain.enums import STATUS_PHRASES, BookingOperation, BookingStatus
from domain.models import BookingRecord
from integrations.whatsapp.client import WhatsAppAPIError, WhatsAppClient
from services.pdf_service import build_confirmation_pdf


logger = logging.getLogger(__name__)


NON_DIGITS = re.compile(r'[^0-9]')

DEFAULT_STATUS_PHRASE = "diproses"
DEFAULT_PDF_CAPTION = (
    "Terima kasih atas pemesanan Anda. Berikut adalah konfirmasi pemesanan Anda."
)
NOT_CONFIGURED_ERROR = "WhatsApp API configuration missing"

BookingData = Union[BookingRecord, Dict[str, Any]]


@dataclass
class NotificationResult:
    """Outcome of one dispatch attempt."""
    success: bool
    error: Optional[str] = None
    status_code: Optional[int] = None
    response: Optional[Dict[str, Any]] = None


def _as_dict(data: BookingData) -> Dict[str, Any]:
    if isinstance(data, BookingRecord):
        return data.to_form_data()
    return dict(data)


def normalize_phone_number(phone: str) -> str:
    """
    Convert a phone number to the bare international digits the gateway expects.

    Examples:
        "0812-3456-7890" -> "6281234567890"
        "+62 812 3456 7890" -> "6281234567890"
        "81234567890" -> "6281234567890"
    """
    cleaned = NON_DIGITS.sub('', phone or '')

    if cleaned.startswith('0'):
        return f"62{cleaned[1:]}"
    if cleaned.startswith('62'):
        return cleaned
    if cleaned.startswith('8'):
        return f"62{cleaned}"

    return cleaned


def select_target_phone(data: BookingData) -> str:
    """WhatsApp number when present, otherwise the phone number."""
    values = _as_dict(data)
    return values.get('whatsapp_number') or values.get('phone_number') or ''


def status_phrase(status: Any) -> str:
    try:
        return STATUS_PHRASES[BookingStatus(status)]
    except ValueError:
        return DEFAULT_STATUS_PHRASE


class NotificationDispatcher:
    """
    Best-effort WhatsApp notifications for booking changes.

    Every public send method returns a NotificationResult and never raises:
    a notification problem must not undo or fail the booking change.
    """

    def __init__(
        self,
        config: WhatsAppConfig,
        client: Optional[WhatsAppClient] = None,
        company_name: Optional[str] = None,
        company_phone: Optional[str] = None,
        company_website: Optional[str] = None,
    ):
        """
        Initialize the dispatcher.

        Args:
            config: WhatsApp gateway settings
            client: Gateway client (default: built from config)
            company_name: Signature shown under each message
            company_phone: Contact phone shown under each message
            company_website: Website shown under each message
        """
        self.config = config
        self.client = client or WhatsAppClient(config)
        self.company_name = company_name or settings.company_name
        self.company_phone = company_phone or settings.company_phone
        self.company_website = company_website or settings.company_website

        if not config.is_configured:
            logger.warning("WhatsApp API configuration missing, notifications are disabled")

    @property
    def enabled(self) -> bool:
        return self.config.is_configured

    def build_confirmation_message(
        self,
        data: BookingData,
        operation: BookingOperation = BookingOperation.CREATE
    ) -> str:
        """
        Render the confirmation text for a created or updated booking.

        Args:
            data: Booking record or form data with booking_id and status
            operation: Which mutation triggered the message

        Returns:
            Message text (WhatsApp markdown)
        """
        values = _as_dict(data)
        phrase = status_phrase(values.get('status'))

        if BookingOperation(operation) == BookingOperation.CREATE:
            opening = "Terima kasih telah mendaftar"
            subject = "Pendaftaran Anda"
        else:
            opening = "Update pendaftaran Anda"
            subject = "Status pendaftaran Anda"

        registered_on = format_date_id(values.get('register_date') or values.get('submission_date'))

        return (
            f"*Assalamualaikum {values.get('name', '')}*\n"
            f"\n"
            f"{opening} Umroh bersama {self.company_name}.\n"
            f"\n"
            f"*Detail Pendaftaran:*\n"
            f"📋 ID Pemesanan: {values.get('booking_id', '-')}\n"
            f"📅 Tanggal Pendaftaran: {registered_on}\n"
            f"👤 Nama: {values.get('name', '')}\n"
            f"📱 WhatsApp: {select_target_phone(values)}\n"
            f"📧 Email: {values.get('email', '')}\n"
            f"🏷️ Status: {phrase}\n"
            f"\n"
            f"{subject} {phrase}. Kami akan menghubungi Anda kembali untuk informasi selanjutnya.\n"
            f"\n"
            f"*{self.company_name}*\n"
            f"📞 {self.company_phone}\n"
            f"🌐 {self.company_website}"
        )

    def send_message(
        self,
        phone: str,
        message: str,
        reply_message_id: Optional[str] = None,
        is_forwarded: bool = False,
        duration: Optional[int] = None,
    ) -> NotificationResult:
        """Send a text message to an already normalized phone number."""
        if not self.enabled:
            return NotificationResult(success=False, error=NOT_CONFIGURED_ERROR)

        try:
            response = self.client.send_message(
                phone,
                message,
                reply_message_id=reply_message_id,
                is_forwarded=is_forwarded,
                duration=duration,
            )
        except WhatsAppAPIError as e:
            logger.error(
                f"Failed to send WhatsApp message to {mask_phone(phone)}: {e} "
                f"(status={e.status_code}, body={e.response_body})"
            )
            return NotificationResult(success=False, error=str(e), status_code=e.status_code)
        except Exception as e:
            logger.exception(f"Unexpected error sending WhatsApp message to {mask_phone(phone)}")
            return NotificationResult(success=False, error=str(e))

        logger.info(f"WhatsApp message sent to {mask_phone(phone)}")
        return NotificationResult(success=True, response=response)

    def notify_booking_change(
        self,
        record: BookingRecord,
        operation: BookingOperation = BookingOperation.CREATE
    ) -> NotificationResult:
        """
        Post-commit hook: send the confirmation for a created or updated booking.

        Never raises and never retries.
        """
        try:
            target = select_target_phone(record)
            if not target:
                logger.warning(
                    f"Booking {record.booking_id} has no phone number to notify",
                    extra={"booking_id": record.booking_id},
                )
                return NotificationResult(success=False, error="No target phone number")

            message = self.build_confirmation_message(record, operation)
            result = self.send_message(normalize_phone_number(target), message)
        except Exception as e:
            logger.exception(
                f"Notification for booking {record.booking_id} failed",
                extra={"booking_id": record.booking_id, "operation": operation},
            )
            return NotificationResult(success=False, error=str(e))

        if result.success:
            logger.info(
                f"Confirmation sent for booking {record.booking_id} ({BookingOperation(operation).value})",
                extra={"booking_id": record.booking_id, "operation": operation},
            )
        return result

    def __call__(self, record: BookingRecord, operation: BookingOperation) -> NotificationResult:
        return self.notify_booking_change(record, operation)

    def send_confirmation_pdf(
        self,
        data: BookingData,
        booking_id: Optional[str] = None,
        phone: Optional[str] = None,
        caption: Optional[str] = None,
        is_forwarded: bool = False,
        duration: Optional[int] = None,
    ) -> NotificationResult:
        """
        Render the confirmation PDF and send it as a file attachment.

        Args:
            data: Booking record or form data
            booking_id: Code printed on the document (default: data's booking_id)
            phone: Target as given by the caller; default is the applicant's
                normalized WhatsApp-or-phone number
            caption: Attachment caption
            is_forwarded: Mark the message as forwarded
            duration: Retention duration in seconds (default from config)

        Returns:
            NotificationResult
        """
        if not self.enabled:
            return NotificationResult(success=False, error=NOT_CONFIGURED_ERROR)

        values = _as_dict(data)
        booking_id = booking_id or values.get('booking_id') or '-'
        target = phone or normalize_phone_number(select_target_phone(values))

        try:
            pdf_bytes = build_confirmation_pdf(values, booking_id)
            response = self.client.send_file(
                target,
                caption or DEFAULT_PDF_CAPTION,
                pdf_bytes,
                f"confirmation-{booking_id}.pdf",
                is_forwarded=is_forwarded,
                duration=duration,
            )
        except WhatsAppAPIError as e:
            logger.error(
                f"Failed to send confirmation PDF for {booking_id} to {mask_phone(target)}: {e} "
                f"(status={e.status_code}, body={e.response_body})",
                extra={"booking_id": booking_id, "status_code": e.status_code},
            )
            return NotificationResult(success=False, error=str(e), status_code=e.status_code)
        except Exception as e:
            logger.exception(f"Unexpected error sending confirmation PDF for {booking_id}")
            return NotificationResult(success=False, error=str(e))

        logger.info(
            f"Confirmation PDF for {booking_id} sent to {mask_phone(target)}",
            extra={"booking_id": booking_id},
        )
        return NotificationResult(success=True, response=response)
