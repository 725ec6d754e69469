"""Route solver capability.

The optimization itself runs in Google Maps Route Optimization. This module
only builds the ``OptimizeToursRequest``, makes the single awaited call, and
converts the answer back into our own models.
"""

import itertools
import logging
import math
from typing import Callable, Optional, Protocol

from google.api_core import exceptions as core_exceptions
from google.api_core import retry as retries
from google.api_core import retry_async
from google.api_core.client_options import ClientOptions
from google.maps import routeoptimization_v1
from google.oauth2 import service_account
from google.protobuf import duration_pb2, timestamp_pb2
from google.type import latlng_pb2

from .config import OptimizerConfig, RetryPolicy, SolverCredentials
from .models import (
    Booking, Coordinates, OptimizationModel, Route, RouteMetrics, SolveResult,
    Transition, Vehicle, Visit,
)

logger = logging.getLogger(__name__)

LOAD_TYPE = "passengers"
SCOPES = ["https://www.googleapis.com/auth/cloud-platform"]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class RouteSolver(Protocol):
    async def solve(
        self, model: OptimizationModel, consider_road_traffic: Optional[bool] = None
    ) -> SolveResult:
        ...


# --- REQUEST BUILDING ---

def _latlng(point: Coordinates) -> latlng_pb2.LatLng:
    return latlng_pb2.LatLng(latitude=point.latitude, longitude=point.longitude)


def _duration(seconds: int) -> duration_pb2.Duration:
    return duration_pb2.Duration(seconds=seconds)


def _timestamp(seconds: int) -> timestamp_pb2.Timestamp:
    return timestamp_pb2.Timestamp(seconds=seconds)


def build_shipment(booking: Booking) -> routeoptimization_v1.Shipment:
    return routeoptimization_v1.Shipment(
        label=booking.label,
        pickups=[
            routeoptimization_v1.Shipment.VisitRequest(arrival_location=_latlng(booking.pickup)),
        ],
        deliveries=[
            routeoptimization_v1.Shipment.VisitRequest(
                arrival_location=_latlng(booking.delivery),
                duration=_duration(booking.stop_seconds),
            ),
        ],
        load_demands={LOAD_TYPE: routeoptimization_v1.Shipment.Load(amount=booking.pax_count)},
    )


def build_vehicle(vehicle: Vehicle) -> routeoptimization_v1.Vehicle:
    return routeoptimization_v1.Vehicle(
        label=vehicle.label,
        travel_mode=routeoptimization_v1.Vehicle.TravelMode.DRIVING,
        cost_per_hour=vehicle.cost_per_hour,
        cost_per_kilometer=vehicle.cost_per_kilometer,
        start_location=_latlng(vehicle.start),
        route_duration_limit=routeoptimization_v1.Vehicle.DurationLimit(
            max_duration=_duration(vehicle.max_route_seconds),
        ),
        load_limits={LOAD_TYPE: routeoptimization_v1.Vehicle.LoadLimit(max_load=vehicle.capacity)},
    )


def build_request(
    model: OptimizationModel,
    project_id: str,
    config: OptimizerConfig,
    consider_road_traffic: Optional[bool] = None,
) -> routeoptimization_v1.OptimizeToursRequest:
    if consider_road_traffic is None:
        consider_road_traffic = config.consider_road_traffic

    return routeoptimization_v1.OptimizeToursRequest(
        parent=f"projects/{project_id}",
        model=routeoptimization_v1.ShipmentModel(
            shipments=[build_shipment(b) for b in model.bookings],
            vehicles=[build_vehicle(v) for v in model.vehicles],
            global_start_time=_timestamp(model.global_start),
            global_end_time=_timestamp(model.global_end),
        ),
        populate_polylines=config.populate_polylines,
        populate_transition_polylines=config.populate_transition_polylines,
        consider_road_traffic=consider_road_traffic,
    )


# --- RESPONSE CONVERSION ---

def _seconds(value) -> int:
    """timedelta (or unset) to whole seconds."""
    return int(value.total_seconds()) if value else 0


def _offset(moment, global_start: int) -> int:
    """Absolute timestamp to seconds since the model's global start."""
    if moment is None:
        return 0
    return math.floor(moment.timestamp()) - global_start


def convert_visit(visit, global_start: int) -> Visit:
    amount = 0
    if LOAD_TYPE in visit.load_demands:
        amount = abs(visit.load_demands[LOAD_TYPE].amount)

    return Visit(
        shipment_index=visit.shipment_index,
        shipment_label=visit.shipment_label,
        is_pickup=visit.is_pickup,
        start_time=_offset(visit.start_time, global_start),
        passengers=amount if visit.is_pickup else -amount,
    )


def convert_transition(transition, global_start: int) -> Transition:
    return Transition(
        start_time=_offset(transition.start_time, global_start),
        total_duration=_seconds(transition.total_duration),
        travel_duration=_seconds(transition.travel_duration),
        travel_distance_meters=transition.travel_distance_meters,
    )


def convert_route(route, global_start: int) -> Route:
    metrics = None
    if "metrics" in route:
        metrics = RouteMetrics(
            travel_duration=_seconds(route.metrics.travel_duration),
            visit_duration=_seconds(route.metrics.visit_duration),
            total_duration=_seconds(route.metrics.total_duration),
            travel_distance_meters=route.metrics.travel_distance_meters,
        )

    return Route(
        vehicle_index=route.vehicle_index,
        vehicle_label=route.vehicle_label,
        visits=[convert_visit(v, global_start) for v in route.visits],
        transitions=[convert_transition(t, global_start) for t in route.transitions],
        metrics=metrics,
        polyline=route.route_polyline.points or None,
    )


def convert_response(response, global_start: int) -> SolveResult:
    metrics = {}
    if "metrics" in response:
        metrics = type(response.metrics).to_dict(response.metrics)

    return SolveResult(
        routes=[convert_route(r, global_start) for r in response.routes],
        metrics=metrics,
    )


# --- RETRY POLICY ---

def limit_attempts(predicate: Callable[[Exception], bool], max_attempts: int) -> Callable[[Exception], bool]:
    """Wrap a retry predicate so it stops approving retries after ``max_attempts`` calls."""
    failures = itertools.count(1)

    def should_retry(error: Exception) -> bool:
        return next(failures) < max_attempts and predicate(error)

    return should_retry


def _log_retry(error: Exception) -> None:
    logger.warning("Transient solver error, retrying: %s", error)


def build_retry(policy: RetryPolicy, timeout: float) -> retry_async.AsyncRetry:
    # One instance per call: the attempt counter is not shared across requests
    return retry_async.AsyncRetry(
        predicate=limit_attempts(retries.if_transient_error, policy.max_attempts),
        initial=policy.initial_delay_seconds,
        maximum=policy.max_delay_seconds,
        multiplier=policy.multiplier,
        timeout=timeout,
        on_error=_log_retry,
    )


# --- SOLVER ---

class GoogleRouteOptimizationSolver:
    """
    Solves shipment models with Google Maps Route Optimization ``optimizeTours``.
    """
    def __init__(self, credentials: SolverCredentials, config: OptimizerConfig):
        self.project_id = credentials.project_id
        self.config = config
        self.credentials = service_account.Credentials.from_service_account_info(
            {
                "project_id": credentials.project_id,
                "client_email": credentials.client_email,
                "private_key": credentials.private_key,
                "token_uri": TOKEN_URI,
            },
            scopes=SCOPES,
        )

    def create_client(self) -> routeoptimization_v1.RouteOptimizationAsyncClient:
        return routeoptimization_v1.RouteOptimizationAsyncClient(
            credentials=self.credentials,
            client_options=ClientOptions(api_endpoint=self.config.api_endpoint),
        )

    async def solve(
        self, model: OptimizationModel, consider_road_traffic: Optional[bool] = None
    ) -> SolveResult:
        request = build_request(model, self.project_id, self.config, consider_road_traffic)
        client = self.create_client()

        logger.info(
            "Requesting optimization: %d shipments, %d vehicles",
            len(model.bookings), len(model.vehicles),
        )
        try:
            response = await client.optimize_tours(
                request=request,
                retry=build_retry(self.config.retry, self.config.timeout_seconds),
                timeout=self.config.timeout_seconds,
            )
        except core_exceptions.GoogleAPIError as error:
            logger.error(
                "Error in route optimization: code=%s message=%s details=%s",
                getattr(error, "code", None),
                getattr(error, "message", str(error)),
                getattr(error, "details", None),
                exc_info=True,
            )
            raise

        result = convert_response(response, model.global_start)
        logger.info("Solver returned %d routes", len(result.routes))
        return result
