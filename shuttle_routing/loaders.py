"""Load optimization requests from files for command-line runs."""

import csv
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .models import BookingRequest, Coordinates, OptimizationRequest, VehicleRequest

logger = logging.getLogger(__name__)


def load_json(filepath: Union[str, Path]) -> Dict[str, Any]:
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"File not found: {filepath}")

    with open(filepath, "r", encoding="utf-8") as f:
        return json.load(f)


def save_json(data: Any, filepath: Union[str, Path]) -> None:
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def _optional_point(row: Dict[str, str], lat_key: str, lng_key: str) -> Optional[Coordinates]:
    if not row.get(lat_key) or not row.get(lng_key):
        return None
    return Coordinates(latitude=float(row[lat_key]), longitude=float(row[lng_key]))


def load_bookings_csv(filepath: Union[str, Path]) -> list:
    """
    Parse a bookings CSV.

    Expected header: ``job_id,pax_count,origin,destination_latitude,destination_longitude``
    with optional ``origin_latitude,origin_longitude`` columns. Blank lines are skipped.
    """
    bookings = []
    with open(filepath, "r", encoding="utf-8", newline="") as f:
        for row in csv.DictReader(f):
            row = {k.strip(): (v or "").strip() for k, v in row.items() if k}
            if not any(row.values()):
                continue
            bookings.append(BookingRequest(
                job_id=row.get("job_id") or None,
                pax_count=int(row.get("pax_count") or 1),
                origin=row.get("origin") or None,
                origin_coordinates=_optional_point(row, "origin_latitude", "origin_longitude"),
                destination=_optional_point(row, "destination_latitude", "destination_longitude"),
            ))
    logger.debug("Loaded %d bookings from %s", len(bookings), filepath)
    return bookings


def load_request(
    filepath: Union[str, Path],
    vehicle_count: int = 1,
    start_location: Optional[str] = None,
    vehicle_capacity: Optional[int] = None,
) -> OptimizationRequest:
    """
    Load a request from a JSON body (same shape as the API) or a bookings CSV.

    CSV files carry bookings only; the fleet is built from the remaining arguments.
    """
    filepath = Path(filepath)
    if filepath.suffix.lower() != ".csv":
        return OptimizationRequest.model_validate(load_json(filepath))

    vehicles = [
        VehicleRequest(
            vehicle_number=f"V{i + 1:03d}",
            start_location=start_location,
            vehicle_capacity=vehicle_capacity,
        )
        for i in range(vehicle_count)
    ]
    return OptimizationRequest(bookings=load_bookings_csv(filepath), vehicles=vehicles)
