"""Optimize-and-format pipeline: model in, solver call, response views out."""

from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Any, Dict, List, Optional

from .adapter import build_model, transform_request, validate_request
from .config import OptimizerConfig
from .models import Booking, OptimizationModel, OptimizationRequest, SolveResult, Vehicle
from .solver import RouteSolver
from .views import build_summary, route_listing, visits_api_response, visits_detail

logger = logging.getLogger(__name__)


@dataclass
class OptimizationResult:
    """Solver output together with every view built from it."""
    response: SolveResult
    bookings: List[Booking]
    visits_detail: List[Dict[str, Any]]
    visits_api_response: Dict[str, Any]
    summary: Dict[str, Any]

    @property
    def routes(self):
        return self.response.routes


async def optimize_route_with_model(
    model: OptimizationModel,
    solver: RouteSolver,
    config: OptimizerConfig,
    include_pickups: bool = False,
    consider_road_traffic: Optional[bool] = None,
) -> OptimizationResult:
    response = await solver.solve(model, consider_road_traffic=consider_road_traffic)
    token = config.booking_token

    return OptimizationResult(
        response=response,
        bookings=model.bookings,
        visits_detail=visits_detail(model.bookings, response.routes, include_pickups, token),
        visits_api_response=visits_api_response(model.bookings, response.routes, token),
        summary=build_summary(response, config, model.vehicles),
    )


async def optimize_route(
    bookings: List[Booking],
    vehicles: List[Vehicle],
    solver: RouteSolver,
    config: OptimizerConfig,
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    include_pickups: bool = False,
    consider_road_traffic: Optional[bool] = None,
) -> OptimizationResult:
    model = build_model(bookings, vehicles, config, start=start, end=end)
    return await optimize_route_with_model(
        model, solver, config,
        include_pickups=include_pickups,
        consider_road_traffic=consider_road_traffic,
    )


def format_response(result: OptimizationResult) -> Dict[str, Any]:
    """Outbound body returned to API callers."""
    return {
        "status": "success",
        "metrics": result.response.metrics,
        "summary": result.summary,
        "routes": [r.model_dump() for r in route_listing(result.bookings, result.routes)],
        "detailed_visits": result.visits_detail,
        "api_response": result.visits_api_response,
    }


async def optimize_request(
    request: OptimizationRequest,
    solver: RouteSolver,
    config: OptimizerConfig,
    include_pickups: bool = False,
) -> Dict[str, Any]:
    """Validate a customer request, run the optimization, and format the response."""
    validate_request(request, config)
    bookings, vehicles = transform_request(request, config)
    logger.info("Optimizing %d bookings across %d vehicles", len(bookings), len(vehicles))

    result = await optimize_route(
        bookings, vehicles, solver, config, include_pickups=include_pickups
    )
    return format_response(result)
