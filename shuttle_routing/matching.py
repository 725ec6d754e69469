"""Resolve solver visits back to the bookings they were built from."""

from typing import List, Optional

from .errors import AmbiguousBookingError, BookingNotFoundError, InvalidBookingLabelError
from .models import Booking, BookingMatch, Visit

DEFAULT_BOOKING_TOKEN = "Booking"


def booking_id_from_label(label: str, token: str = DEFAULT_BOOKING_TOKEN) -> int:
    """
    Extract the numeric booking id from a shipment label.

    ``"Booking 42"`` and ``"42"`` both give ``42``. Anything else left after
    the token is stripped raises ``InvalidBookingLabelError``.
    """
    remainder = label.replace(token, "", 1) if token and token in label else label
    try:
        return int(remainder.strip())
    except ValueError:
        raise InvalidBookingLabelError(label) from None


def booking_id_from_visit(visit: Optional[Visit], token: str = DEFAULT_BOOKING_TOKEN) -> int:
    if visit is None:
        return -1
    return booking_id_from_label(visit.shipment_label, token)


def find_booking(bookings: List[Booking], visit: Visit) -> BookingMatch:
    matches = [b for b in bookings if b.label == visit.shipment_label]

    if not matches:
        raise BookingNotFoundError(visit.shipment_label)
    if len(matches) > 1:
        raise AmbiguousBookingError(visit.shipment_label, len(matches))

    booking = matches[0]
    return BookingMatch(booking=booking, origin=booking.pickup, destination=booking.delivery)
