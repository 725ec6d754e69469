class ShuttleRoutingError(Exception):
    """Base class for errors raised by the optimization pipeline."""


class InvalidRequestError(ShuttleRoutingError, ValueError):
    """The inbound request is missing data; rejected before any solver call."""


class CredentialsError(ShuttleRoutingError, RuntimeError):
    """Solver credentials are not configured."""


class BookingNotFoundError(ShuttleRoutingError, LookupError):
    """A solver visit references a shipment label that is not in the submitted bookings."""

    def __init__(self, label: str):
        super().__init__(f"No booking found with label: {label}")
        self.label = label


class AmbiguousBookingError(ShuttleRoutingError, LookupError):
    def __init__(self, label: str, count: int):
        super().__init__(f"{count} bookings share the label: {label}")
        self.label = label
        self.count = count


class InvalidBookingLabelError(ShuttleRoutingError, ValueError):
    def __init__(self, label: str):
        super().__init__(f"Booking label does not contain a numeric booking id: {label!r}")
        self.label = label
