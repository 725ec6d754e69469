from datetime import timedelta

from google.api_core import retry_async
from google.maps import routeoptimization_v1
from google.protobuf import duration_pb2, timestamp_pb2

from shuttle_routing.config import RetryPolicy
from shuttle_routing.models import OptimizationModel, Vehicle
from shuttle_routing.solver import (
    build_request, build_retry, convert_response, convert_route, limit_attempts,
)

from conftest import TERMINAL_1, make_booking

START = 1714550400


def make_model():
    vehicle = Vehicle(
        label="V001", start=TERMINAL_1, capacity=7, max_route_seconds=5400,
        cost_per_hour=40.0, cost_per_kilometer=10.0,
    )
    return OptimizationModel(
        bookings=[make_booking("Booking 1", pax=2)],
        vehicles=[vehicle],
        global_start=START,
        global_end=START + 86400,
    )


def ts(offset):
    return timestamp_pb2.Timestamp(seconds=START + offset)


def dur(seconds):
    return duration_pb2.Duration(seconds=seconds)


def test_build_request(config):
    request = build_request(make_model(), "demo-project", config)

    assert request.parent == "projects/demo-project"
    assert request.populate_polylines is True
    assert request.populate_transition_polylines is True
    assert request.consider_road_traffic is False

    shipment, = request.model.shipments
    assert shipment.label == "Booking 1"
    assert shipment.pickups[0].arrival_location.latitude == TERMINAL_1.latitude
    assert shipment.deliveries[0].duration == timedelta(seconds=180)
    assert shipment.load_demands["passengers"].amount == 2

    vehicle, = request.model.vehicles
    assert vehicle.label == "V001"
    assert vehicle.travel_mode == routeoptimization_v1.Vehicle.TravelMode.DRIVING
    assert vehicle.cost_per_hour == 40.0
    assert vehicle.route_duration_limit.max_duration == timedelta(seconds=5400)
    assert vehicle.load_limits["passengers"].max_load == 7

    assert request.model.global_start_time.timestamp() == START
    assert request.model.global_end_time.timestamp() == START + 86400


def test_build_request_traffic_override(config):
    request = build_request(make_model(), "demo-project", config, consider_road_traffic=True)
    assert request.consider_road_traffic is True


def make_route(**extra):
    Visit = routeoptimization_v1.ShipmentRoute.Visit
    Transition = routeoptimization_v1.ShipmentRoute.Transition
    Load = routeoptimization_v1.Shipment.Load

    return routeoptimization_v1.ShipmentRoute(
        vehicle_index=0,
        vehicle_label="V001",
        visits=[
            Visit(shipment_index=0, shipment_label="Booking 1", is_pickup=True,
                  start_time=ts(60), load_demands={"passengers": Load(amount=2)}),
            Visit(shipment_index=0, shipment_label="Booking 1", is_pickup=False,
                  start_time=ts(660), load_demands={"passengers": Load(amount=-2)}),
        ],
        transitions=[
            Transition(start_time=ts(0), total_duration=dur(60), travel_duration=dur(60),
                       travel_distance_meters=300.0),
            Transition(start_time=ts(60), total_duration=dur(600), travel_duration=dur(600),
                       travel_distance_meters=4200.0),
        ],
        **extra,
    )


def test_convert_route():
    route = convert_route(make_route(
        metrics=routeoptimization_v1.AggregatedMetrics(
            travel_duration=dur(660), visit_duration=dur(120), total_duration=dur(780),
            travel_distance_meters=4500.0,
        ),
        route_polyline={"points": "abc"},
    ), START)

    assert route.vehicle_label == "V001"
    pickup, dropoff = route.visits
    assert (pickup.start_time, pickup.passengers, pickup.is_pickup) == (60, 2, True)
    assert (dropoff.start_time, dropoff.passengers, dropoff.is_pickup) == (660, -2, False)

    assert route.transitions[1].start_time == 60
    assert route.transitions[1].total_duration == 600
    assert route.transitions[1].travel_distance_meters == 4200.0

    assert route.metrics.travel_duration == 660
    assert route.metrics.total_duration == 780
    assert route.metrics.travel_distance_meters == 4500.0
    assert route.polyline == "abc"


def test_convert_route_without_metrics_or_polyline():
    route = convert_route(make_route(), START)

    assert route.metrics is None
    assert route.polyline is None


def test_convert_response():
    response = routeoptimization_v1.OptimizeToursResponse(routes=[make_route()])

    result = convert_response(response, START)

    assert len(result.routes) == 1
    assert result.metrics == {}


def test_limit_attempts_caps_retries():
    should_retry = limit_attempts(lambda error: True, max_attempts=3)
    error = RuntimeError("unavailable")

    assert [should_retry(error) for _ in range(4)] == [True, True, False, False]


def test_limit_attempts_respects_predicate():
    should_retry = limit_attempts(lambda error: False, max_attempts=5)
    assert should_retry(RuntimeError("bad request")) is False


def test_build_retry():
    retry = build_retry(RetryPolicy(), timeout=60.0)
    assert isinstance(retry, retry_async.AsyncRetry)
