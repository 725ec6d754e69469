import pytest
from typing import List

from shuttle_routing.config import OptimizerConfig
from shuttle_routing.models import (
    Booking, Coordinates, Route, RouteMetrics, SolveResult, Transition, Visit,
)

TERMINAL_1 = Coordinates(latitude=-33.39733755598884, longitude=-70.79438713103244)


def make_booking(label: str, pax: int = 2, dest_lat: float = -33.43, dest_lng: float = -70.65) -> Booking:
    return Booking(
        label=label,
        pickup=TERMINAL_1,
        delivery=Coordinates(latitude=dest_lat, longitude=dest_lng),
        pax_count=pax,
        stop_seconds=180,
    )


def serial_route(bookings: List[Booking], vehicle_label: str = "V001",
                 leg_seconds: int = 600, leg_meters: float = 1000.0) -> Route:
    """
    All pickups first, then all drop-offs, each reached by one fixed-size leg.
    Drop-offs dwell ``stop_seconds`` before the next leg starts.
    """
    visits, transitions = [], []
    clock = 0
    legs = 0
    dwell = 0

    for is_pickup in (True, False):
        for b in bookings:
            transitions.append(Transition(
                start_time=clock, total_duration=leg_seconds,
                travel_duration=leg_seconds, travel_distance_meters=leg_meters,
            ))
            clock += leg_seconds
            legs += 1
            visits.append(Visit(
                shipment_label=b.label,
                is_pickup=is_pickup,
                start_time=clock,
                passengers=b.pax_count if is_pickup else -b.pax_count,
            ))
            if not is_pickup:
                clock += b.stop_seconds
                dwell += b.stop_seconds

    return Route(
        vehicle_label=vehicle_label,
        visits=visits,
        transitions=transitions,
        metrics=RouteMetrics(
            travel_duration=legs * leg_seconds,
            visit_duration=dwell,
            total_duration=clock,
            travel_distance_meters=legs * leg_meters,
        ),
        polyline="encoded_polyline",
    )


class FakeSolver:
    """Returns one serial route over every booking for the first vehicle."""
    def __init__(self):
        self.calls = []

    async def solve(self, model, consider_road_traffic=None):
        self.calls.append(model)
        route = serial_route(model.bookings, vehicle_label=model.vehicles[0].label)
        return SolveResult(routes=[route], metrics={"total_cost": 12.5})


class FailingSolver:
    def __init__(self, error: Exception):
        self.error = error

    async def solve(self, model, consider_road_traffic=None):
        raise self.error


@pytest.fixture
def config():
    return OptimizerConfig()


@pytest.fixture
def bookings():
    return [
        make_booking("Booking 1", pax=2, dest_lat=-33.4315, dest_lng=-70.7845),
        make_booking("Booking 2", pax=3, dest_lat=-33.4191, dest_lng=-70.5971),
    ]


@pytest.fixture
def route(bookings):
    """
    Pickups at 0s and 60s, drop-offs at 660s and 1500s.
    Arriving legs for the drop-offs are 4000m and 6000m.
    """
    return Route(
        vehicle_label="V001",
        visits=[
            Visit(shipment_label="Booking 1", is_pickup=True, start_time=0, passengers=2),
            Visit(shipment_label="Booking 2", is_pickup=True, start_time=60, passengers=3),
            Visit(shipment_label="Booking 1", is_pickup=False, start_time=660, passengers=-2),
            Visit(shipment_label="Booking 2", is_pickup=False, start_time=1500, passengers=-3),
        ],
        transitions=[
            Transition(start_time=0, total_duration=0, travel_distance_meters=0),
            Transition(start_time=0, total_duration=60, travel_distance_meters=500),
            Transition(start_time=60, total_duration=600, travel_distance_meters=4000),
            Transition(start_time=840, total_duration=660, travel_distance_meters=6000),
            Transition(start_time=1680, total_duration=0, travel_distance_meters=0),
        ],
        metrics=RouteMetrics(
            travel_duration=1260, visit_duration=360, total_duration=1680,
            travel_distance_meters=10500,
        ),
        polyline="abc~xyz",
    )
