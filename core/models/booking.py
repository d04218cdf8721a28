"""Booking record models.

A booking is a submitted draft plus its frozen pricing breakdown.
Amounts are whole currency units.
"""

from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, computed_field, model_validator

from core.models.draft import AlbumType, SelectedFunction
from core.models.pricing import PricingBreakdown


class BookingStatus(str, Enum):
    """Booking lifecycle status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentStatus(str, Enum):
    """Payment progress."""

    UNPAID = "unpaid"
    ADVANCE_PAID = "advance_paid"
    FULLY_PAID = "fully_paid"
    REFUNDED = "refunded"


class BookingCreate(BaseModel):
    """Data required to create a booking (always from a priced draft)."""

    client_name: str = Field(..., min_length=2, max_length=255)
    client_phone: str = Field(..., min_length=10, max_length=50, pattern=r"^[0-9+\-\s()]+$")
    client_whatsapp: str | None = Field(None, max_length=50)
    client_email: EmailStr | None = None
    client_home_address: str | None = Field(None, max_length=500)
    client_current_location: str | None = Field(None, max_length=500)

    booking_type: str = Field(..., min_length=1, max_length=100)
    event_location: str | None = Field(None, max_length=500)
    event_date: date
    guest_count: str | None = Field(None, max_length=50)
    budget_range: str | None = Field(None, max_length=50)

    selected_functions: list[SelectedFunction] = Field(..., min_length=1)
    additional_functions: list[SelectedFunction] = Field(default_factory=list)

    total_photographers: int = Field(0, ge=0)
    total_cinematographers: int = Field(0, ge=0)
    main_event_start_time: str | None = None
    main_event_end_time: str | None = None

    album_type: AlbumType
    album_pages: int = Field(..., ge=0)

    video_addons: list[str] = Field(default_factory=list)
    complimentary_item: str | None = None

    selected_package: str | None = Field(None, max_length=255)
    selected_package_id: str | None = Field(None, max_length=50)

    total_price: int = Field(..., ge=0)
    advance_amount: int = Field(..., ge=0)
    balance_amount: int = Field(..., ge=0)
    pricing_breakdown: PricingBreakdown

    digital_signature: str = Field(..., min_length=2, max_length=255)
    terms_accepted: bool

    @model_validator(mode="after")
    def validate_submission(self) -> "BookingCreate":
        """Terms must be accepted and the amounts must match the frozen breakdown."""
        if not self.terms_accepted:
            raise ValueError("Terms and conditions must be accepted")
        if self.advance_amount + self.balance_amount != self.total_price:
            raise ValueError("advance_amount + balance_amount must equal total_price")
        if self.total_price != self.pricing_breakdown.total:
            raise ValueError("total_price does not match pricing_breakdown total")
        if self.advance_amount != self.pricing_breakdown.advance:
            raise ValueError("advance_amount does not match pricing_breakdown advance")
        return self


class Booking(BookingCreate):
    """Full booking entity as stored."""

    id: UUID
    booking_reference: str
    booking_status: BookingStatus
    payment_status: PaymentStatus
    terms_accepted_at: datetime
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None

    model_config = {"from_attributes": True}

    @computed_field(return_type=int)
    @property
    def amount_due(self) -> int:
        """What the client still owes given the payment status."""
        if self.payment_status == PaymentStatus.UNPAID:
            return self.total_price
        if self.payment_status == PaymentStatus.ADVANCE_PAID:
            return self.balance_amount
        return 0
