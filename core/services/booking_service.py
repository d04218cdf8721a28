"""
Booking service: the persisted record of submitted wizard drafts.

A booking stores the draft's selections together with the pricing
breakdown frozen at submission. Later catalog changes never reprice it.
After creation a booking only changes through status transitions.

Bookings are looked up by a short reference code the client can share,
or by the phone number they booked with.
"""

import logging
import secrets
from datetime import date
from uuid import UUID, uuid4

from psycopg2.extras import Json

from clients.postgres_client import PostgresClient
from core.audit import AuditLogger, AuditAction
from core.config import BookingConfig
from core.draft import BookingDraft
from core.event_bus import EventBus
from core.events import BookingSubmitted, BookingStatusChanged, PaymentStatusChanged
from core.exceptions import BookingNotFoundError, InvalidStatusTransitionError
from core.models import Booking, BookingCreate, BookingStatus, PaymentStatus
from utils.dates import now_utc

logger = logging.getLogger(__name__)

# No 0/O or 1/I so codes survive being read out over the phone
REFERENCE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

_JSON_COLUMNS = {"selected_functions", "additional_functions", "video_addons", "pricing_breakdown"}

_BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

_PAYMENT_TRANSITIONS: dict[PaymentStatus, set[PaymentStatus]] = {
    PaymentStatus.UNPAID: {PaymentStatus.ADVANCE_PAID, PaymentStatus.FULLY_PAID},
    PaymentStatus.ADVANCE_PAID: {PaymentStatus.FULLY_PAID, PaymentStatus.REFUNDED},
    PaymentStatus.FULLY_PAID: {PaymentStatus.REFUNDED},
    PaymentStatus.REFUNDED: set(),
}


class BookingService:
    """Service for booking record operations."""

    def __init__(
        self,
        postgres: PostgresClient,
        audit: AuditLogger,
        event_bus: EventBus,
        config: BookingConfig | None = None
    ):
        self.postgres = postgres
        self.audit = audit
        self.event_bus = event_bus
        self.config = config or BookingConfig()

    def _new_reference(self) -> str:
        """
        Generate an unused reference code.

        Format: SB-YYMMDD-XXXXXX (prefix and length from config).

        Raises:
            RuntimeError: If every attempt collided with an existing code
        """
        today = now_utc().strftime("%y%m%d")
        for _ in range(self.config.reference_max_attempts):
            token = "".join(
                secrets.choice(REFERENCE_ALPHABET) for _ in range(self.config.reference_length)
            )
            reference = f"{self.config.reference_prefix}-{today}-{token}"
            taken = self.postgres.execute_scalar(
                "SELECT 1 FROM bookings WHERE booking_reference = %s",
                (reference,)
            )
            if taken is None:
                return reference
            logger.warning(f"Booking reference collision on {reference}, retrying")

        raise RuntimeError(
            f"Could not generate a unique booking reference in "
            f"{self.config.reference_max_attempts} attempts"
        )

    def create(self, data: BookingCreate, actor: str = "client") -> Booking:
        """
        Persist a new booking in PENDING / UNPAID status.

        Args:
            data: Booking creation data, including the frozen breakdown
            actor: Audit actor label

        Returns:
            Created booking
        """
        booking_id = uuid4()
        reference = self._new_reference()
        now = now_utc()

        values = data.model_dump(mode="json")
        for column in _JSON_COLUMNS:
            values[column] = Json(values[column])
        values.update(
            id=booking_id,
            booking_reference=reference,
            booking_status=BookingStatus.PENDING.value,
            payment_status=PaymentStatus.UNPAID.value,
            terms_accepted_at=now,
            created_at=now,
            updated_at=now,
        )

        columns = list(values)
        row = self.postgres.execute_returning(
            f"""
            INSERT INTO bookings ({', '.join(columns)})
            VALUES ({', '.join(['%s'] * len(columns))})
            RETURNING *
            """,
            tuple(values[c] for c in columns)
        )[0]

        booking = Booking.model_validate(row)

        self.audit.log_change(
            entity_type="booking",
            entity_id=booking.id,
            action=AuditAction.CREATE,
            changes={
                "created": {
                    "booking_reference": booking.booking_reference,
                    "client_phone": booking.client_phone,
                    "event_date": booking.event_date.isoformat(),
                    "total_price": booking.total_price,
                    "advance_amount": booking.advance_amount,
                }
            },
            actor=actor,
        )

        logger.info(f"Booking {booking.booking_reference} created (total={booking.total_price})")

        self.event_bus.publish(BookingSubmitted.create(booking=booking))

        return booking

    def submit_draft(self, draft: BookingDraft) -> Booking:
        """
        Submit a priced, signed draft.

        The draft is marked submitted only after the booking is stored, so a
        failed insert leaves it editable for a retry.

        Raises:
            DraftStateError: If the draft is not priced, signed and accepted
        """
        data = draft.to_booking_create()
        booking = self.create(data)
        draft.mark_submitted(booking.booking_reference)
        return booking

    def get_by_id(self, booking_id: UUID) -> Booking | None:
        """
        Get booking by ID.

        Returns:
            Booking if found and not deleted, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM bookings WHERE id = %s AND deleted_at IS NULL",
            (booking_id,)
        )

        if row is None:
            return None

        return Booking.model_validate(row)

    def get_by_reference(self, reference: str) -> Booking | None:
        """
        Get booking by its shareable reference code (case-insensitive).

        Returns:
            Booking if found and not deleted, None otherwise.
        """
        row = self.postgres.execute_single(
            "SELECT * FROM bookings WHERE booking_reference = %s AND deleted_at IS NULL",
            (reference.strip().upper(),)
        )

        if row is None:
            return None

        return Booking.model_validate(row)

    def list_by_phone(self, phone: str) -> list[Booking]:
        """
        List bookings made with a phone number.

        Returns:
            Bookings ordered by creation time DESC
        """
        rows = self.postgres.execute(
            """
            SELECT * FROM bookings
            WHERE client_phone = %s AND deleted_at IS NULL
            ORDER BY created_at DESC
            """,
            (phone.strip(),)
        )

        return [Booking.model_validate(row) for row in rows]

    def list_all(self, limit: int | None = None, offset: int = 0) -> list[Booking]:
        """
        List bookings, newest first.

        Args:
            limit: Maximum results (config default if omitted)
            offset: Rows to skip
        """
        rows = self.postgres.execute(
            """
            SELECT * FROM bookings
            WHERE deleted_at IS NULL
            ORDER BY created_at DESC
            LIMIT %s OFFSET %s
            """,
            (limit or self.config.default_list_limit, offset)
        )

        return [Booking.model_validate(row) for row in rows]

    def list_by_event_date_range(self, start: date, end: date) -> list[Booking]:
        """
        List bookings whose event falls within [start, end].

        Returns:
            Bookings ordered by event date ASC

        Raises:
            ValueError: If start is after end
        """
        if start > end:
            raise ValueError(f"Start date {start} is after end date {end}")

        rows = self.postgres.execute(
            """
            SELECT * FROM bookings
            WHERE event_date >= %s AND event_date <= %s AND deleted_at IS NULL
            ORDER BY event_date ASC
            """,
            (start, end)
        )

        return [Booking.model_validate(row) for row in rows]

    def update_booking_status(self, booking_id: UUID, status: BookingStatus, actor: str = "staff") -> Booking:
        """
        Move a booking through its lifecycle.

        pending -> confirmed | cancelled, confirmed -> completed | cancelled.
        Setting the current status again is a no-op.

        Raises:
            BookingNotFoundError: If booking not found
            InvalidStatusTransitionError: If the transition is not allowed
        """
        current = self.get_by_id(booking_id)
        if current is None:
            raise BookingNotFoundError(str(booking_id))

        if status == current.booking_status:
            return current
        if status not in _BOOKING_TRANSITIONS[current.booking_status]:
            raise InvalidStatusTransitionError(
                "booking status", current.booking_status.value, status.value
            )

        updated = self._set_column(booking_id, "booking_status", status.value)

        self.audit.log_change(
            entity_type="booking",
            entity_id=booking_id,
            action=AuditAction.UPDATE,
            changes={"booking_status": {"old": current.booking_status.value, "new": status.value}},
            actor=actor,
        )

        self.event_bus.publish(
            BookingStatusChanged.create(booking=updated, previous_status=current.booking_status.value)
        )

        return updated

    def update_payment_status(self, booking_id: UUID, status: PaymentStatus, actor: str = "staff") -> Booking:
        """
        Record payment progress.

        unpaid -> advance_paid | fully_paid, advance_paid -> fully_paid | refunded,
        fully_paid -> refunded. Setting the current status again is a no-op.

        Raises:
            BookingNotFoundError: If booking not found
            InvalidStatusTransitionError: If the transition is not allowed
        """
        current = self.get_by_id(booking_id)
        if current is None:
            raise BookingNotFoundError(str(booking_id))

        if status == current.payment_status:
            return current
        if status not in _PAYMENT_TRANSITIONS[current.payment_status]:
            raise InvalidStatusTransitionError(
                "payment status", current.payment_status.value, status.value
            )

        updated = self._set_column(booking_id, "payment_status", status.value)

        self.audit.log_change(
            entity_type="booking",
            entity_id=booking_id,
            action=AuditAction.UPDATE,
            changes={"payment_status": {"old": current.payment_status.value, "new": status.value}},
            actor=actor,
        )

        self.event_bus.publish(
            PaymentStatusChanged.create(booking=updated, previous_status=current.payment_status.value)
        )

        return updated

    def _set_column(self, booking_id: UUID, column: str, value: str) -> Booking:
        # column is always one of the two status columns, never caller input
        row = self.postgres.execute_returning(
            f"""
            UPDATE bookings
            SET {column} = %s, updated_at = %s
            WHERE id = %s
            RETURNING *
            """,
            (value, now_utc(), booking_id)
        )[0]

        return Booking.model_validate(row)

    def delete(self, booking_id: UUID, actor: str = "staff") -> bool:
        """
        Soft delete a booking.

        Returns:
            True if deleted, False if not found
        """
        current = self.get_by_id(booking_id)
        if current is None:
            return False

        now = now_utc()
        self.postgres.execute_returning(
            """
            UPDATE bookings
            SET deleted_at = %s, updated_at = %s
            WHERE id = %s
            RETURNING id
            """,
            (now, now, booking_id)
        )

        self.audit.log_change(
            entity_type="booking",
            entity_id=booking_id,
            action=AuditAction.DELETE,
            changes={"deleted": current.model_dump(mode="json")},
            actor=actor,
        )

        return True
