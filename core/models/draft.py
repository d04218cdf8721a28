"""Booking draft building blocks.

These are the pieces a client fills in across the wizard steps. The draft
object that owns them (and its lifecycle) lives in core/draft.py.
"""

from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator

from utils.dates import duration_hours, parse_clock_time


class FunctionGroup(str, Enum):
    """Display group of a selected function. Pricing ignores it."""

    MAIN = "main"
    ADDITIONAL = "additional"


class AlbumType(str, Enum):
    """Album layout."""

    ONE_PHOTOBOOK = "one-photobook"
    TWO_INDIVIDUAL_PHOTOBOOKS = "two-individual-photobooks"

    @property
    def is_dual(self) -> bool:
        return self is AlbumType.TWO_INDIVIDUAL_PHOTOBOOKS


class DraftStage(str, Enum):
    """Wizard progress of a draft, in order."""

    EMPTY = "empty"
    CLIENT_INFO_SET = "client_info_set"
    FUNCTIONS_SELECTED = "functions_selected"
    CONFIGURED = "configured"
    PRICED = "priced"
    SUBMITTED = "submitted"

    @property
    def rank(self) -> int:
        return _STAGE_ORDER.index(self)

    def at_least(self, other: "DraftStage") -> bool:
        return self.rank >= other.rank


_STAGE_ORDER = list(DraftStage)


class ClientInfo(BaseModel):
    """Step 1: who is booking."""

    full_name: str = Field("", max_length=255)
    phone: str = Field("", max_length=50)
    whatsapp: str = Field("", max_length=50)
    email: str = Field("", max_length=255)
    home_address: str = Field("", max_length=500)
    current_location: str = Field("", max_length=500)

    model_config = {"validate_assignment": True}

    @property
    def is_complete(self) -> bool:
        """Name and phone are the minimum to move past step 1."""
        return bool(self.full_name.strip()) and bool(self.phone.strip())


class EventDetails(BaseModel):
    """Step 1: what the event is."""

    booking_type: str = Field("", max_length=100)
    event_location: str = Field("", max_length=500)
    event_date: str = ""
    guest_count: str = ""
    budget_range: str = ""

    model_config = {"validate_assignment": True}


class CrewSelection(BaseModel):
    """Step 2: crew and main-event window."""

    photographers: int = Field(2, ge=0)
    cinematographers: int = Field(2, ge=0)
    main_event_start_time: str = "07:00"
    main_event_end_time: str = "15:30"

    model_config = {"validate_assignment": True}

    @field_validator("main_event_start_time", "main_event_end_time")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        parse_clock_time(value)
        return value


class SelectedFunction(BaseModel):
    """
    One function the client has added to their event.

    `id` identifies this selection; `function_id` points at the catalog
    definition. The same definition may be selected more than once.
    """

    id: str = Field(default_factory=lambda: uuid4().hex)
    function_id: str = Field(..., min_length=1)
    name: str = ""
    group: FunctionGroup = FunctionGroup.MAIN
    date: str = ""
    start_time: str = ""
    end_time: str = ""
    duration: float | None = Field(None, ge=0, allow_inf_nan=False)
    photographers: int = Field(0, ge=0)
    cinematographers: int = Field(0, ge=0)

    model_config = {"validate_assignment": True}

    @field_validator("start_time", "end_time")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        if value:
            parse_clock_time(value)
        return value

    @property
    def resolved_duration(self) -> float:
        """
        Hours used for pricing.

        An explicit duration wins. Otherwise it is derived from the start
        and end times, and is 0 when those are not filled in yet.
        """
        if self.duration is not None:
            return self.duration
        if self.start_time and self.end_time:
            return duration_hours(self.start_time, self.end_time)
        return 0.0


class AlbumSelection(BaseModel):
    """Step 3: album pages and layout."""

    pages: int = Field(60, ge=0)
    album_type: AlbumType = AlbumType.ONE_PHOTOBOOK

    model_config = {"validate_assignment": True}
