"""Booking submission, lookup and status endpoints."""

from uuid import UUID

from fastapi import APIRouter, Query, Request
from pydantic import BaseModel

from api.base import success_response
from core.draft import BookingDraft
from core.exceptions import BookingNotFoundError
from core.models import BookingStatus, PaymentStatus


class BookingStatusUpdate(BaseModel):
    status: BookingStatus


class PaymentStatusUpdate(BaseModel):
    status: PaymentStatus


def create_bookings_router(services: dict) -> APIRouter:
    router = APIRouter()

    catalog_svc = services["catalog"]
    pricing_svc = services["pricing"]
    booking_svc = services["booking"]

    @router.post("/bookings", status_code=201)
    async def submit_booking(request: Request, draft: BookingDraft):
        """
        Submit a signed draft.

        The posted draft is always repriced against the current catalog.
        Any breakdown the client sends along is discarded. A selected
        package must still be offered; its name is taken from the catalog.
        """
        if draft.selected_package_id:
            package = catalog_svc.get_package(draft.selected_package_id)
            if package is None:
                raise ValueError(f"Selected package {draft.selected_package_id} is no longer offered")
            draft.select_package(package)

        draft.confirm_configuration()
        pricing_svc.price(draft)
        booking = booking_svc.submit_draft(draft)
        return success_response(booking.model_dump(mode="json"), request).model_dump(mode="json")

    @router.get("/bookings")
    async def list_bookings(
        request: Request,
        phone: str | None = Query(None, min_length=1),
        limit: int = Query(50, ge=1, le=500),
        offset: int = Query(0, ge=0),
    ):
        if phone:
            bookings = booking_svc.list_by_phone(phone)
        else:
            bookings = booking_svc.list_all(limit, offset)
        return success_response(
            [b.model_dump(mode="json") for b in bookings], request
        ).model_dump(mode="json")

    @router.get("/bookings/{reference}")
    async def get_booking(request: Request, reference: str):
        booking = booking_svc.get_by_reference(reference)
        if booking is None:
            raise BookingNotFoundError(reference)
        return success_response(booking.model_dump(mode="json"), request).model_dump(mode="json")

    @router.post("/bookings/{booking_id}/status")
    async def update_booking_status(request: Request, booking_id: UUID, body: BookingStatusUpdate):
        booking = booking_svc.update_booking_status(booking_id, body.status)
        return success_response(booking.model_dump(mode="json"), request).model_dump(mode="json")

    @router.post("/bookings/{booking_id}/payment-status")
    async def update_payment_status(request: Request, booking_id: UUID, body: PaymentStatusUpdate):
        booking = booking_svc.update_payment_status(booking_id, body.status)
        return success_response(booking.model_dump(mode="json"), request).model_dump(mode="json")

    return router
