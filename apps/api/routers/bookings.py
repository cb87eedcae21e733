"""Booking endpoints: applicant submission and admin management."""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Response, status
from fastapi.responses import JSONResponse

from apps.api.deps import get_booking_service
from domain.enums import BookingStatus
from domain.models import BookingRecord, BookingStatusUpdate, SubmissionResponse
from services.booking_service import (
    BookingNotFoundError,
    BookingService,
    BookingValidationError,
    DuplicateBookingError,
    InvalidStatusTransitionError,
)
from services.package_service import PackageNotFoundError
from services.pdf_service import build_confirmation_pdf


router = APIRouter(prefix="/bookings", tags=["bookings"])


def _failure(status_code: int, errors: List[str]) -> JSONResponse:
    body = SubmissionResponse(success=False, errors=errors, error="; ".join(errors))
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


@router.post("", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def submit_booking(
    form_data: Dict[str, Any] = Body(...),
    service: BookingService = Depends(get_booking_service),
):
    """
    Submit the registration form.

    Returns every validation message at once (422) or the stored booking (201).
    """
    try:
        result = service.submit_booking_form(form_data)
    except DuplicateBookingError as e:
        return _failure(status.HTTP_409_CONFLICT, [str(e)])

    if not result.success:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content=result.model_dump(mode="json"),
        )

    return result


@router.get("", response_model=List[BookingRecord])
def list_bookings(
    status_filter: Optional[BookingStatus] = Query(None, alias="status", description="Filter by booking status"),
    limit: int = Query(50, ge=1, le=200, description="Number of bookings to return"),
    offset: int = Query(0, ge=0, description="Number of bookings to skip"),
    service: BookingService = Depends(get_booking_service),
):
    """List bookings, newest submission first."""
    return service.list_bookings(status=status_filter, limit=limit, offset=offset)


@router.get("/{booking_id}", response_model=BookingRecord)
def get_booking(booking_id: str, service: BookingService = Depends(get_booking_service)):
    try:
        return service.get_booking(booking_id)
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found")


@router.patch("/{booking_id}", response_model=BookingRecord)
def update_booking(
    booking_id: str,
    changes: Dict[str, Any] = Body(...),
    service: BookingService = Depends(get_booking_service),
):
    """
    Partially update a booking.

    Booking id and submission date are never changed.
    """
    try:
        return service.update_booking(booking_id, changes)
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found")
    except PackageNotFoundError:
        raise HTTPException(status_code=404, detail="Package not found")
    except BookingValidationError as e:
        return _failure(status.HTTP_422_UNPROCESSABLE_ENTITY, e.errors)
    except DuplicateBookingError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.patch("/{booking_id}/status", response_model=BookingRecord)
def change_booking_status(
    booking_id: str,
    update: BookingStatusUpdate,
    service: BookingService = Depends(get_booking_service),
):
    """Move a booking through the review workflow."""
    try:
        return service.change_status(booking_id, update.status)
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found")
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_booking(booking_id: str, service: BookingService = Depends(get_booking_service)):
    try:
        service.delete_booking(booking_id)
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{booking_id}/pdf")
def download_booking_pdf(booking_id: str, service: BookingService = Depends(get_booking_service)):
    """Download the confirmation PDF of a stored booking."""
    try:
        record = service.get_booking(booking_id)
    except BookingNotFoundError:
        raise HTTPException(status_code=404, detail="Booking not found")

    pdf_bytes = build_confirmation_pdf(record.to_form_data(), record.booking_id)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="confirmation-{record.booking_id}.pdf"'},
    )
