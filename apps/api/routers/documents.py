"""Confirmation document endpoints: PDF preview and PDF delivery over WhatsApp."""

import json
import logging
import re
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Form, HTTPException, Response
from fastapi.responses import JSONResponse

from apps.api.deps import get_dispatcher
from core.utils_datetime import get_current_datetime
from domain.models import LegacyBookingData
from services.booking_service import generate_legacy_booking_id
from services.notification_service import NotificationDispatcher
from services.pdf_service import build_confirmation_pdf


logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


TEST_PDF_REQUIRED_FIELDS = ("name", "email", "phone_number")

# Booking ids end up in attachment filenames
BOOKING_ID_PATTERN = re.compile(r"[A-Za-z0-9-]{1,64}")

SAMPLE_FORM_DATA: Dict[str, Any] = {
    "name": "Ahmad Abdullah",
    "register_date": "2024-01-15",
    "gender": "male",
    "place_of_birth": "Jakarta",
    "birth_date": "1985-03-20",
    "father_name": "Abdullah Rahman",
    "mother_name": "Siti Aminah",
    "marital_status": "married",
    "address": "Jl. Merdeka No. 123",
    "city": "Jakarta",
    "province": "DKI Jakarta",
    "postal_code": "12345",
    "occupation": "Software Engineer",
    "specific_disease": False,
    "illness": "",
    "special_needs": False,
    "wheelchair": False,
    "nik_number": "3171012003850001",
    "passport_number": "A1234567",
    "date_of_issue": "2023-01-01",
    "expiry_date": "2028-01-01",
    "place_of_issue": "Jakarta",
    "phone_number": "+6281234567890",
    "whatsapp_number": "+6281234567890",
    "email": "ahmad.abdullah@email.com",
    "has_performed_umrah": False,
    "has_performed_hajj": False,
    "emergency_contact_name": "Fatimah Abdullah",
    "relationship": "spouse",
    "emergency_contact_phone": "+6281987654321",
    "umrah_package": "Paket Umrah Premium 14 Hari",
    "payment_method": "lunas",
    "terms_of_service": True,
}


def _pdf_response(pdf_bytes: bytes, booking_id: str) -> Response:
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'attachment; filename="confirmation-{booking_id}.pdf"',
            "Cache-Control": "no-cache",
        },
    )


def _check_booking_id(booking_id: str) -> str:
    if not BOOKING_ID_PATTERN.fullmatch(booking_id):
        raise HTTPException(status_code=400, detail="Invalid bookingId format")
    return booking_id


def _parse_duration(value: Optional[str]) -> Optional[int]:
    try:
        return int(value) if value else None
    except ValueError:
        return None


@router.post("/send-file")
def send_confirmation_file(
    phone: Optional[str] = Form(None),
    umrahFormData: Optional[str] = Form(None),
    bookingId: Optional[str] = Form(None),
    bookingData: Optional[str] = Form(None),
    caption: Optional[str] = Form(None),
    is_forwarded: Optional[str] = Form(None),
    duration: Optional[str] = Form(None),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """
    Render a confirmation PDF and send it over WhatsApp.

    Accepts the full form (``umrahFormData`` + ``bookingId``) or the legacy
    ``bookingData`` payload with a reduced field set.
    """
    if not phone:
        raise HTTPException(status_code=400, detail="Phone number is required")

    if not dispatcher.enabled:
        logger.error("WhatsApp API configuration missing")
        raise HTTPException(status_code=500, detail="WhatsApp API configuration missing")

    if umrahFormData:
        try:
            form_data = json.loads(umrahFormData)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid umrahFormData format")
        if not isinstance(form_data, dict):
            raise HTTPException(status_code=400, detail="Invalid umrahFormData format")
        booking_id = _check_booking_id(bookingId) if bookingId else generate_legacy_booking_id()
    elif bookingData:
        try:
            legacy = LegacyBookingData.model_validate(json.loads(bookingData))
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid bookingData format")
        form_data = legacy.to_form_data()
        booking_id = _check_booking_id(legacy.booking_id) if legacy.booking_id else generate_legacy_booking_id()
    else:
        raise HTTPException(status_code=400, detail="Either umrahFormData or bookingData is required")

    result = dispatcher.send_confirmation_pdf(
        form_data,
        booking_id,
        phone=phone,
        caption=caption,
        is_forwarded=(is_forwarded == "true"),
        duration=_parse_duration(duration),
    )

    if not result.success:
        return JSONResponse(
            status_code=result.status_code or 502,
            content={"error": "Failed to send WhatsApp message", "details": result.error},
        )

    return {
        "success": True,
        "message": "PDF confirmation sent successfully",
        "bookingId": booking_id,
        "phone": phone,
        "timestamp": get_current_datetime().isoformat(),
        "whatsappResponse": result.response,
    }


@router.get("/send-file")
async def send_file_usage():
    """Describe the send-file payload."""
    return {
        "message": "Send PDF Confirmation API",
        "usage": {
            "method": "POST",
            "endpoint": "/api/send-file",
            "body": {
                "phone": "6289685028129@s.whatsapp.net",
                "umrahFormData": "JSON string of the registration form",
                "bookingId": "string",
                "bookingData": {
                    "bookingId": "string",
                    "customerName": "string",
                    "email": "string",
                    "whatsappNumber": "string",
                    "phoneNumber": "string",
                    "packageName": "string",
                    "paymentMethod": "string",
                },
                "caption": "string (optional)",
                "is_forwarded": "boolean (optional)",
                "duration": "number (optional)",
            },
        },
    }


@router.get("/test-pdf")
def test_pdf_sample():
    """Render the confirmation PDF for built-in sample data."""
    booking_id = f"RT-TEST-{int(get_current_datetime().timestamp() * 1000)}"
    return _pdf_response(build_confirmation_pdf(SAMPLE_FORM_DATA, booking_id), booking_id)


@router.post("/test-pdf")
def test_pdf(payload: Dict[str, Any] = Body(...)):
    """Render the confirmation PDF for posted ``formData`` and ``bookingId``."""
    form_data = payload.get("formData")
    booking_id = payload.get("bookingId")

    if not isinstance(form_data, dict) or not booking_id:
        raise HTTPException(status_code=400, detail="Missing required data: formData and bookingId")

    for field_name in TEST_PDF_REQUIRED_FIELDS:
        if not form_data.get(field_name):
            raise HTTPException(status_code=400, detail=f"Missing required field: {field_name}")

    booking_id = _check_booking_id(str(booking_id))
    return _pdf_response(build_confirmation_pdf(form_data, booking_id), booking_id)
