"""
Handler for booking lifecycle events.

Writes one line per booking event to the studio activity log, so staff
can follow new requests and status changes without querying the table.
"""

import logging
from typing import Callable

from core.events import BookingEvent, BookingStatusChanged, BookingSubmitted, PaymentStatusChanged

logger = logging.getLogger("studio.activity")


def handle_booking_activity() -> Callable:
    """
    Factory that returns a handler for every BookingEvent.

    Returns:
        Handler callable that logs the event for staff
    """

    def handler(event: BookingEvent):
        booking = event.booking

        if isinstance(event, BookingSubmitted):
            logger.info(
                f"New booking {booking.booking_reference}: {booking.client_name} "
                f"({booking.client_phone}), {booking.booking_type} on {booking.event_date}, "
                f"total {booking.total_price}, advance {booking.advance_amount}"
            )
        elif isinstance(event, BookingStatusChanged):
            logger.info(
                f"Booking {booking.booking_reference} {event.previous_status} -> "
                f"{booking.booking_status.value}"
            )
        elif isinstance(event, PaymentStatusChanged):
            logger.info(
                f"Booking {booking.booking_reference} payment {event.previous_status} -> "
                f"{booking.payment_status.value}, {booking.amount_due} due"
            )

    return handler
