"""
Domain events for studio bookings.

Immutable records of things that happened. Services publish them on the
EventBus; handlers in core/handlers subscribe without the publisher
knowing about them.

Events carry the domain object so handlers don't need to re-fetch it.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from uuid import uuid4

from utils.dates import now_utc


@dataclass(frozen=True, kw_only=True)
class StudioEvent:
    """Base class for all booking domain events."""
    event_id: str = field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = field(default_factory=now_utc)


# =============================================================================
# BOOKING EVENTS
# =============================================================================


@dataclass(frozen=True)
class BookingEvent(StudioEvent):
    """Events related to booking lifecycle."""
    booking: Any = None  # Booking, Any avoids a circular import


@dataclass(frozen=True)
class BookingSubmitted(BookingEvent):
    """A client submitted a booking request."""

    @classmethod
    def create(cls, booking: Any) -> "BookingSubmitted":
        return cls(booking=booking)


@dataclass(frozen=True)
class BookingStatusChanged(BookingEvent):
    """Booking moved to a new lifecycle status."""
    previous_status: str = ""

    @classmethod
    def create(cls, booking: Any, previous_status: str) -> "BookingStatusChanged":
        return cls(booking=booking, previous_status=previous_status)


@dataclass(frozen=True)
class PaymentStatusChanged(BookingEvent):
    """Booking payment moved to a new status."""
    previous_status: str = ""

    @classmethod
    def create(cls, booking: Any, previous_status: str) -> "PaymentStatusChanged":
        return cls(booking=booking, previous_status=previous_status)
