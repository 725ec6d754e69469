"""Projections of solved routes into the response formats consumers read.

All builders are pure: they take the submitted bookings and the solver's
routes and return plain dicts ready for JSON encoding.
"""

from decimal import ROUND_HALF_UP, Decimal
from itertools import accumulate
import logging
import math
from typing import Any, Dict, List, Optional

from .config import OptimizerConfig
from .distances import cumulative_distances, distance_for
from .matching import DEFAULT_BOOKING_TOKEN, booking_id_from_visit, find_booking
from .models import Booking, Route, RouteListing, RouteVisit, SolveResult, Vehicle, Visit

logger = logging.getLogger(__name__)


def _point(coordinates) -> Dict[str, float]:
    return {"lat": coordinates.latitude, "lng": coordinates.longitude}


def travel_time_minutes(visit: Visit) -> int:
    # halves round up: a visit at 150s is 3 minutes, not 2
    return math.floor(visit.start_time / 60 + 0.5)


def dropoffs(route: Route) -> List[Visit]:
    return [v for v in route.visits if not v.is_pickup]


def pickups(route: Route) -> List[Visit]:
    return [v for v in route.visits if v.is_pickup]


def passenger_loads(route: Route) -> List[int]:
    """Load aboard after each visit, as partial sums of the signed deltas."""
    return list(accumulate(v.passengers for v in route.visits))


def total_passengers(route: Route) -> int:
    """Passengers boarded along the route (pickups only)."""
    return sum(v.passengers for v in route.visits if v.passengers > 0)


# --- Detailed visits ---

def visits_detail(
    bookings: List[Booking],
    routes: List[Route],
    pickup: bool = False,
    token: str = DEFAULT_BOOKING_TOKEN,
) -> List[Dict[str, Any]]:
    """Per-visit breakdown with cumulative distances, pickups or drop-offs only."""
    detail = []

    for index, route in enumerate(routes):
        dropoff_visits = dropoffs(route)
        selected = pickups(route) if pickup else dropoff_visits
        distances = cumulative_distances(dropoff_visits, route.transitions, token)

        visits = []
        for visit_index, visit in enumerate(selected):
            match = find_booking(bookings, visit)
            booking_id = booking_id_from_visit(visit, token)

            visits.append({
                "route_number": index + 1,
                "visit_index": visit_index,
                "booking_id": booking_id,
                "origin": _point(match.origin),
                "destination": _point(match.destination),
                "distance": distance_for(distances, booking_id),
                "travel_time": travel_time_minutes(visit),
                "pax_count": visit.passengers,
            })

        detail.append({
            "vehicle": route.vehicle_label,
            "visits": visits,
            "polyline": route.polyline or None,
        })

    return detail


# --- Flat legacy response ---

def _legacy_records(
    bookings: List[Booking], route: Route, route_number: int, token: str
) -> List[Dict[str, Any]]:
    start_element = {
        "num_ruta": route_number,
        "num_viaje": route_number,
        "posicion_en_ruta": -1,
        "cod_cliente": 0,
        "lat": 0,
        "lng": 0,
        "distancia": 0,
        "tiempo_viaje": 0,
    }

    dropoff_visits = dropoffs(route)
    distances = cumulative_distances(dropoff_visits, route.transitions, token)

    if dropoff_visits:
        origin = find_booking(bookings, dropoff_visits[0]).origin
        start_element["lat"] = origin.latitude
        start_element["lng"] = origin.longitude

    records = [start_element]
    for visit_index, visit in enumerate(dropoff_visits):
        destination = find_booking(bookings, visit).destination
        booking_id = booking_id_from_visit(visit, token)
        records.append({
            "num_ruta": route_number,
            "num_viaje": route_number,
            "posicion_en_ruta": visit_index,
            "cod_cliente": booking_id,
            "lat": destination.latitude,
            "lng": destination.longitude,
            "distancia": distance_for(distances, booking_id),
            "tiempo_viaje": travel_time_minutes(visit),
        })
    return records


def visits_api_response(
    bookings: List[Booking],
    routes: List[Route],
    token: str = DEFAULT_BOOKING_TOKEN,
) -> Dict[str, Any]:
    """
    Flat per-stop response consumed by the legacy client.

    ``responde`` holds a single route's records: each route overwrites the
    previous one, so with several routes only the last survives. Legacy
    clients depend on that shape. ``responde_por_ruta`` keeps every route,
    keyed by route number.
    """
    results = {"status": "Ok", "responde_por_ruta": {}}

    for index, route in enumerate(routes):
        records = _legacy_records(bookings, route, index + 1, token)
        results["responde"] = records
        results["responde_por_ruta"][index + 1] = records

    return results


# --- Summary ---

def _minutes(seconds: int) -> float:
    """Seconds to minutes, two decimals, halves rounded up."""
    minutes = (Decimal(seconds) / 60).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return float(minutes)


def _route_capacity(route: Route, vehicles: Optional[List[Vehicle]], config: OptimizerConfig) -> int:
    if vehicles and 0 <= route.vehicle_index < len(vehicles):
        return vehicles[route.vehicle_index].capacity
    return config.vehicle_capacity


def build_summary(
    result: SolveResult,
    config: OptimizerConfig,
    vehicles: Optional[List[Vehicle]] = None,
) -> Dict[str, Any]:
    """
    Route statistics. Routes the solver left without metrics are skipped.

    Loads are checked against the capacity of the vehicle each route was
    assigned to (``vehicles`` as submitted to the solver); the reported
    ``vehicle_capacity`` stays the configured constant.
    """
    routes = result.routes
    output = {"total_routes": len(routes), "routes": []}

    for index, route in enumerate(routes):
        if route.metrics is None:
            continue

        loads = passenger_loads(route)
        max_load = max(loads, default=0)
        capacity = _route_capacity(route, vehicles, config)
        if max_load > capacity or min(loads, default=0) < 0:
            logger.warning(
                "Route %d (%s) load leaves [0, %d]: peak %d",
                index + 1, route.vehicle_label, capacity, max_load,
            )

        dropoff_count = len(dropoffs(route))
        metrics = route.metrics
        output["routes"].append({
            "route_number": index + 1,
            "total_stops": dropoff_count,
            "total_pickups": len(pickups(route)),
            "total_dropoffs": dropoff_count,
            "vehicle_label": route.vehicle_label,
            "total_passengers": total_passengers(route),
            "max_passenger_load": max_load,
            "vehicle_capacity": config.vehicle_capacity,
            "stats": {
                "total_travel_time_minutes": _minutes(metrics.travel_duration),
                "total_stops_time_minutes": _minutes(metrics.visit_duration),
                "total_route_time_minutes": _minutes(metrics.total_duration),
                "total_route_distance_mts": metrics.travel_distance_meters,
                "max_route_time_minutes": config.max_route_time_minutes,
            },
        })

    return output


# --- Route listing ---

def route_listing(bookings: List[Booking], routes: List[Route]) -> List[RouteListing]:
    listing = []
    for route in routes:
        visits = [
            RouteVisit(
                booking_id=find_booking(bookings, visit).booking.label,
                sequence=sequence,
                start_time=visit.start_time,
                location="pickup" if visit.is_pickup else "delivery",
            )
            for sequence, visit in enumerate(route.visits)
        ]
        listing.append(RouteListing(vehicle=route.vehicle_label, visits=visits))
    return listing
