"""
Handler for PaymentStatusChanged events.

A pending booking is confirmed once the client has paid the advance (or
paid in full). Bookings already confirmed, completed or cancelled are
left alone.
"""

import logging
from typing import Callable

from core.events import PaymentStatusChanged
from core.models import BookingStatus, PaymentStatus

logger = logging.getLogger(__name__)

_CONFIRMING_PAYMENTS = {PaymentStatus.ADVANCE_PAID, PaymentStatus.FULLY_PAID}


def handle_payment_received(booking_service) -> Callable:
    """
    Factory that returns a PaymentStatusChanged handler.

    Args:
        booking_service: BookingService instance

    Returns:
        Handler callable that confirms pending bookings on payment
    """

    def handler(event: PaymentStatusChanged):
        booking = event.booking

        if booking.payment_status not in _CONFIRMING_PAYMENTS:
            return
        if booking.booking_status != BookingStatus.PENDING:
            return

        logger.info(
            f"Confirming booking {booking.booking_reference} "
            f"after payment ({booking.payment_status.value})"
        )
        booking_service.update_booking_status(booking.id, BookingStatus.CONFIRMED, actor="system")

    return handler
