"""
Booking draft: the in-progress state of one wizard session.

A draft is owned by the caller (the wizard session). There is no global
store and no concurrent editing. Each wizard step updates its own part of
the draft; going back to an earlier step never clears later steps.

Stage is derived from the data, not stored:

    EMPTY -> CLIENT_INFO_SET -> FUNCTIONS_SELECTED -> CONFIGURED -> PRICED -> SUBMITTED

Pricing is never patched. Any change to a pricing input drops the
attached breakdown and the draft has to be priced again from scratch.
SUBMITTED is terminal: every mutation raises DraftSubmittedError.
"""

import logging
from typing import Any

from pydantic import BaseModel, Field

from core.exceptions import DraftStateError, DraftSubmittedError
from core.models import (
    AlbumConfiguration,
    AlbumSelection,
    BookingCreate,
    ClientInfo,
    CrewSelection,
    DraftStage,
    EventDetails,
    EventFunctionDefinition,
    FunctionGroup,
    Package,
    PricingBreakdown,
    SelectedFunction,
)
from utils.dates import duration_hours, end_time_after, parse_event_date

logger = logging.getLogger(__name__)

DEFAULT_FUNCTION_START = "07:30"


def _merge(model: BaseModel, changes: dict[str, Any], label: str) -> BaseModel:
    """Return a validated copy of `model` with `changes` applied. Unknown keys are dropped."""
    known = type(model).model_fields
    for field in changes:
        if field not in known:
            logger.warning(f"Ignoring unknown field '{field}' on {label}")
    valid = {k: v for k, v in changes.items() if k in known}
    return type(model).model_validate({**model.model_dump(), **valid})


class BookingDraft(BaseModel):
    """Accumulated wizard selections for one booking."""

    client_info: ClientInfo = Field(default_factory=ClientInfo)
    event_details: EventDetails = Field(default_factory=EventDetails)
    crew: CrewSelection = Field(default_factory=CrewSelection)
    functions: list[SelectedFunction] = Field(default_factory=list)
    album: AlbumSelection = Field(default_factory=AlbumSelection)
    video_addons: list[str] = Field(default_factory=list)
    complimentary_item: str | None = None
    configured: bool = False
    selected_package: str | None = None
    selected_package_id: str | None = None
    pricing: PricingBreakdown | None = None
    digital_signature: str = ""
    terms_accepted: bool = False
    submitted_reference: str | None = None

    model_config = {"validate_assignment": True}

    # -------------------------------------------------------------------------
    # Derived state
    # -------------------------------------------------------------------------

    @property
    def stage(self) -> DraftStage:
        if self.submitted_reference is not None:
            return DraftStage.SUBMITTED
        if self.pricing is not None:
            return DraftStage.PRICED
        if not self.client_info.is_complete:
            return DraftStage.EMPTY
        if not self.functions:
            return DraftStage.CLIENT_INFO_SET
        if not self.configured:
            return DraftStage.FUNCTIONS_SELECTED
        return DraftStage.CONFIGURED

    @property
    def selected_functions(self) -> list[SelectedFunction]:
        """Main/other functions, in selection order."""
        return [f for f in self.functions if f.group == FunctionGroup.MAIN]

    @property
    def additional_functions(self) -> list[SelectedFunction]:
        """Additional functions (haldi, mehendi, ...), in selection order."""
        return [f for f in self.functions if f.group == FunctionGroup.ADDITIONAL]

    def get_function(self, selection_id: str) -> SelectedFunction | None:
        for selected in self.functions:
            if selected.id == selection_id:
                return selected
        return None

    # -------------------------------------------------------------------------
    # Internal guards
    # -------------------------------------------------------------------------

    def _ensure_open(self) -> None:
        if self.submitted_reference is not None:
            raise DraftSubmittedError(self.submitted_reference)

    def _pricing_inputs_changed(self) -> None:
        if self.pricing is not None:
            logger.debug("Pricing input changed, discarding attached breakdown")
            self.pricing = None

    # -------------------------------------------------------------------------
    # Step 1: client and event
    # -------------------------------------------------------------------------

    def update_client_info(self, **changes: Any) -> ClientInfo:
        self._ensure_open()
        self.client_info = _merge(self.client_info, changes, "client info")
        return self.client_info

    def update_event_details(self, **changes: Any) -> EventDetails:
        self._ensure_open()
        self.event_details = _merge(self.event_details, changes, "event details")
        return self.event_details

    # -------------------------------------------------------------------------
    # Step 2: functions and crew
    # -------------------------------------------------------------------------

    def update_crew_selection(self, **changes: Any) -> CrewSelection:
        self._ensure_open()
        self.crew = _merge(self.crew, changes, "crew selection")
        return self.crew

    def add_function(self, selected: SelectedFunction) -> SelectedFunction:
        """Append a selection. Selection ids must be unique within the draft."""
        self._ensure_open()
        if self.get_function(selected.id) is not None:
            raise DraftStateError(f"Function selection {selected.id} already exists")
        self.functions = [*self.functions, selected]
        self._pricing_inputs_changed()
        return selected

    def toggle_function(
        self,
        definition: EventFunctionDefinition,
        group: FunctionGroup = FunctionGroup.MAIN,
    ) -> SelectedFunction | None:
        """
        Toggle a catalog function on or off within a display group.

        Toggling on seeds the selection from the definition: its label,
        included hours, included crew, and a default 07:30 start.
        Returns the new selection, or None if it was toggled off.
        """
        self._ensure_open()
        for selected in self.functions:
            if selected.function_id == definition.id and selected.group == group:
                self.remove_function(selected.id)
                return None

        selected = SelectedFunction(
            function_id=definition.id,
            name=definition.label,
            group=group,
            start_time=DEFAULT_FUNCTION_START,
            end_time=end_time_after(DEFAULT_FUNCTION_START, definition.included_hours),
            duration=definition.included_hours,
            photographers=definition.included_photographers,
            cinematographers=definition.included_cinematographers,
        )
        return self.add_function(selected)

    def update_function(self, selection_id: str, **changes: Any) -> SelectedFunction:
        """
        Edit a selection's date, times or crew.

        Changing start or end time re-derives the duration (to one decimal)
        unless a duration is passed explicitly in the same call.

        Raises:
            DraftStateError: If the selection does not exist
        """
        self._ensure_open()
        current = self.get_function(selection_id)
        if current is None:
            raise DraftStateError(f"Function selection {selection_id} not found")

        changes.pop("id", None)
        updated = _merge(current, changes, "selected function")

        times_changed = "start_time" in changes or "end_time" in changes
        if times_changed and "duration" not in changes and updated.start_time and updated.end_time:
            updated.duration = round(duration_hours(updated.start_time, updated.end_time), 1)

        self.functions = [updated if f.id == selection_id else f for f in self.functions]
        self._pricing_inputs_changed()
        return updated

    def remove_function(self, selection_id: str) -> bool:
        """Remove a selection. Returns False if it was not there."""
        self._ensure_open()
        remaining = [f for f in self.functions if f.id != selection_id]
        if len(remaining) == len(self.functions):
            return False
        self.functions = remaining
        self._pricing_inputs_changed()
        return True

    # -------------------------------------------------------------------------
    # Step 3: album and add-ons
    # -------------------------------------------------------------------------

    def update_album(self, **changes: Any) -> AlbumSelection:
        self._ensure_open()
        self.album = _merge(self.album, changes, "album")
        self.configured = True
        self._pricing_inputs_changed()
        return self.album

    def adjust_album_pages(self, steps: int, configuration: AlbumConfiguration) -> int:
        """
        Add (or with negative steps, remove) page increments.

        Pages snap to the base + k * increment grid and never drop below
        the base page count.
        """
        self._ensure_open()
        current_step = max(0, self.album.pages - configuration.base_pages) // configuration.pages_increment
        pages = configuration.pages_for_step(current_step + steps)
        self.update_album(pages=pages)
        return pages

    def toggle_video_addon(self, addon_id: str) -> bool:
        """Toggle an add-on. Returns True if it is now selected."""
        self._ensure_open()
        if addon_id in self.video_addons:
            self.video_addons = [a for a in self.video_addons if a != addon_id]
            selected = False
        else:
            self.video_addons = [*self.video_addons, addon_id]
            selected = True
        self.configured = True
        self._pricing_inputs_changed()
        return selected

    def set_complimentary_item(self, item_id: str | None) -> None:
        self._ensure_open()
        self.complimentary_item = item_id or None
        self.configured = True

    def confirm_configuration(self) -> DraftStage:
        """Accept the album and add-on step as-is (defaults included)."""
        self._ensure_open()
        self.configured = True
        return self.stage

    # -------------------------------------------------------------------------
    # Step 4: package and pricing
    # -------------------------------------------------------------------------

    def select_package(self, package: Package | None) -> None:
        """
        Record the package the client picked, or clear it with None.

        The package is kept for the studio's reference. It is not a
        pricing input, so an attached breakdown stays valid.
        """
        self._ensure_open()
        if package is None:
            self.selected_package = None
            self.selected_package_id = None
            return
        self.selected_package = package.name
        self.selected_package_id = package.id

    def attach_pricing(self, breakdown: PricingBreakdown) -> None:
        """
        Attach a freshly computed breakdown.

        Raises:
            DraftStateError: If the draft has not reached CONFIGURED
        """
        self._ensure_open()
        if self.pricing is None and not self.stage.at_least(DraftStage.CONFIGURED):
            raise DraftStateError(
                f"Draft must be configured before pricing (stage: {self.stage.value})"
            )
        self.pricing = breakdown

    # -------------------------------------------------------------------------
    # Step 5: review, sign and submit
    # -------------------------------------------------------------------------

    def sign(self, signature: str, terms_accepted: bool) -> None:
        self._ensure_open()
        self.digital_signature = signature.strip()
        self.terms_accepted = terms_accepted

    def _event_date(self) -> str:
        if self.event_details.event_date:
            return self.event_details.event_date
        dates = sorted(parse_event_date(f.date) for f in self.functions if f.date)
        if not dates:
            raise DraftStateError("An event date is required before submitting")
        return dates[0].isoformat()

    def to_booking_create(self) -> BookingCreate:
        """
        Freeze the draft into booking creation data.

        Raises:
            DraftStateError: If not priced, unsigned, or terms not accepted
            pydantic.ValidationError: If contact details fail validation
        """
        self._ensure_open()
        if self.pricing is None:
            raise DraftStateError(f"Draft must be priced before submitting (stage: {self.stage.value})")
        if not self.terms_accepted:
            raise DraftStateError("Terms and conditions must be accepted")
        if len(self.digital_signature) < 2:
            raise DraftStateError("A digital signature is required")

        client = self.client_info
        details = self.event_details
        return BookingCreate(
            client_name=client.full_name.strip(),
            client_phone=client.phone.strip(),
            client_whatsapp=client.whatsapp or None,
            client_email=client.email or None,
            client_home_address=client.home_address or None,
            client_current_location=client.current_location or None,
            booking_type=details.booking_type,
            event_location=details.event_location or None,
            event_date=self._event_date(),
            guest_count=details.guest_count or None,
            budget_range=details.budget_range or None,
            selected_functions=self.selected_functions,
            additional_functions=self.additional_functions,
            total_photographers=self.crew.photographers,
            total_cinematographers=self.crew.cinematographers,
            main_event_start_time=self.crew.main_event_start_time,
            main_event_end_time=self.crew.main_event_end_time,
            album_type=self.album.album_type,
            album_pages=self.album.pages,
            video_addons=list(self.video_addons),
            complimentary_item=self.complimentary_item,
            selected_package=self.selected_package,
            selected_package_id=self.selected_package_id,
            total_price=self.pricing.total,
            advance_amount=self.pricing.advance,
            balance_amount=self.pricing.balance,
            pricing_breakdown=self.pricing,
            digital_signature=self.digital_signature,
            terms_accepted=self.terms_accepted,
        )

    def mark_submitted(self, reference: str) -> None:
        """Record the booking reference. The draft is read-only from here on."""
        self._ensure_open()
        self.submitted_reference = reference
