"""Typed exceptions for booking and pricing failures."""


class BookingError(Exception):
    """Base class for booking domain errors."""


class InvalidPricingInputError(BookingError, ValueError):
    """
    A pricing input is negative, non-finite, or otherwise unpriceable.

    These values must be rejected before pricing. There is no sane
    degraded value for a negative duration or an infinite page count.
    """


class CatalogUnavailableError(BookingError):
    """
    Reference catalog data could not be loaded.

    Pricing is never attempted on partial catalog data. The caller should
    surface a retryable error to the client.
    """

    retryable = True

    def __init__(self, message: str = "Catalog data is unavailable"):
        super().__init__(message)


class DraftStateError(BookingError, ValueError):
    """Operation not allowed in the draft's current stage."""


class DraftSubmittedError(DraftStateError):
    """Draft has already been submitted and can no longer change."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Draft already submitted as {reference}")


class InvalidStatusTransitionError(BookingError, ValueError):
    """Requested booking or payment status change is not permitted."""

    def __init__(self, kind: str, current: str, requested: str):
        self.kind = kind
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change {kind} from '{current}' to '{requested}'")


class BookingNotFoundError(BookingError, ValueError):
    """Booking does not exist (or was deleted)."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Booking {key} not found")
