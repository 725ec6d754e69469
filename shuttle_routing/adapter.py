"""Translate the customer request format into the solver model."""

from datetime import datetime, timedelta, timezone
import math
from typing import Dict, List, Optional, Tuple

from .config import OptimizerConfig
from .errors import InvalidBookingLabelError, InvalidRequestError
from .matching import booking_id_from_label
from .models import (
    Booking, Coordinates, OptimizationModel, OptimizationRequest, Vehicle,
)

# --- KNOWN LOCATIONS ---
# Named pickup/start points customers may send instead of coordinates
KNOWN_LOCATIONS: Dict[str, Coordinates] = {
    "AMB Terminal 1": Coordinates(latitude=-33.39733755598884, longitude=-70.79438713103244),
    "AMB Terminal 2": Coordinates(latitude=-33.39312201984877, longitude=-70.79180431908104),
}

# Dwell time used when the request does not say
REQUEST_STOP_TIME_MINUTES = 2


def to_epoch_seconds(moment: datetime) -> int:
    """Whole seconds since the Unix epoch. The solver rejects sub-second values."""
    return math.floor(moment.timestamp())


def resolve_location(name: Optional[str], coordinates: Optional[Coordinates]) -> Optional[Coordinates]:
    if name and name in KNOWN_LOCATIONS:
        return KNOWN_LOCATIONS[name]
    return coordinates


def booking_label(job_id, index: int) -> str:
    # job_id 0 counts as unset, like an empty string
    if not job_id:
        return f"Booking {index + 1}"
    return str(job_id)


def vehicle_label(vehicle_number, index: int) -> str:
    if not vehicle_number:
        return f"Vehicle {index + 1}"
    return str(vehicle_number)


def validate_request(request: OptimizationRequest, config: OptimizerConfig) -> None:
    """Reject requests the solver cannot be asked about."""
    if not request.bookings:
        raise InvalidRequestError("At least one booking is required")
    if not request.vehicles:
        raise InvalidRequestError("At least one vehicle is required")

    seen = set()
    for index, booking in enumerate(request.bookings):
        label = booking_label(booking.job_id, index)
        if label in seen:
            raise InvalidRequestError(f"Duplicate booking label: {label}")
        seen.add(label)

        try:
            booking_id_from_label(label, config.booking_token)
        except InvalidBookingLabelError as e:
            raise InvalidRequestError(str(e)) from e

        if resolve_location(booking.origin, booking.origin_coordinates) is None:
            raise InvalidRequestError(f"Booking {label} has no known origin")

    for index, vehicle in enumerate(request.vehicles):
        if resolve_location(vehicle.start_location, vehicle.start_coordinates) is None:
            label = vehicle_label(vehicle.vehicle_number, index)
            raise InvalidRequestError(f"Vehicle {label} has no known start location")


def transform_request(
    request: OptimizationRequest, config: OptimizerConfig
) -> Tuple[List[Booking], List[Vehicle]]:
    """Build solver bookings and vehicles from a validated request."""
    params = request.parameters
    stop_minutes = params.STOP_TIME_IN_MINUTES or REQUEST_STOP_TIME_MINUTES
    max_route_minutes = params.MAX_ROUTE_TIME_IN_MINUTES or config.max_route_time_minutes

    bookings = [
        Booking(
            label=booking_label(b.job_id, i),
            pickup=resolve_location(b.origin, b.origin_coordinates),
            delivery=b.destination,
            pax_count=b.pax_count,
            stop_seconds=int(stop_minutes * 60),
        )
        for i, b in enumerate(request.bookings)
    ]

    vehicles = [
        Vehicle(
            label=vehicle_label(v.vehicle_number, i),
            start=resolve_location(v.start_location, v.start_coordinates),
            capacity=v.vehicle_capacity or config.vehicle_capacity,
            max_route_seconds=int(max_route_minutes * 60),
            cost_per_hour=config.cost_per_hour,
            cost_per_kilometer=config.cost_per_kilometer,
        )
        for i, v in enumerate(request.vehicles)
    ]

    return bookings, vehicles


def build_model(
    bookings: List[Booking],
    vehicles: List[Vehicle],
    config: OptimizerConfig,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
) -> OptimizationModel:
    """Wrap bookings and vehicles with the global time window (default: now + horizon)."""
    start = start or datetime.now(timezone.utc)
    end = end or start + timedelta(hours=config.horizon_hours)

    return OptimizationModel(
        bookings=bookings,
        vehicles=vehicles,
        global_start=to_epoch_seconds(start),
        global_end=to_epoch_seconds(end),
    )
