from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict, Field

# --- Inbound request (customer format) ---

class Coordinates(BaseModel):
    latitude: float
    longitude: float

class BookingRequest(BaseModel):
    job_id: Optional[Union[str, int]] = None
    pax_count: int = Field(default=1, ge=1)
    origin: Optional[str] = None
    origin_coordinates: Optional[Coordinates] = None
    destination: Coordinates

class VehicleRequest(BaseModel):
    vehicle_number: Optional[Union[str, int]] = None
    start_location: Optional[str] = None
    start_coordinates: Optional[Coordinates] = None
    vehicle_capacity: Optional[int] = Field(default=None, ge=1)

class RequestParameters(BaseModel):
    STOP_TIME_IN_MINUTES: Optional[float] = None
    MAX_ROUTE_TIME_IN_MINUTES: Optional[float] = None

class OptimizationRequest(BaseModel):
    bookings: Optional[List[BookingRequest]] = None
    vehicles: Optional[List[VehicleRequest]] = None
    parameters: RequestParameters = Field(default_factory=RequestParameters)

# --- Solver model (immutable once submitted) ---

class Booking(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    pickup: Coordinates
    delivery: Coordinates
    pax_count: int
    stop_seconds: int

class Vehicle(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    start: Coordinates
    capacity: int
    max_route_seconds: int
    cost_per_hour: float
    cost_per_kilometer: float

class OptimizationModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    bookings: List[Booking]
    vehicles: List[Vehicle]
    global_start: int  # seconds since the Unix epoch
    global_end: int

# --- Solver output ---

class Visit(BaseModel):
    """One scheduled stop. ``start_time`` is in seconds since the model's global start."""
    shipment_index: int = 0
    shipment_label: str
    is_pickup: bool
    start_time: int
    passengers: int

class Transition(BaseModel):
    start_time: int
    total_duration: int
    travel_duration: int = 0
    travel_distance_meters: float = 0.0

class RouteMetrics(BaseModel):
    travel_duration: int
    visit_duration: int
    total_duration: int
    travel_distance_meters: float

class Route(BaseModel):
    vehicle_index: int = 0
    vehicle_label: str
    visits: List[Visit] = Field(default_factory=list)
    transitions: List[Transition] = Field(default_factory=list)
    metrics: Optional[RouteMetrics] = None
    polyline: Optional[str] = None

class SolveResult(BaseModel):
    routes: List[Route]
    metrics: Dict[str, Any] = Field(default_factory=dict)

# --- Derived views ---

class BookingMatch(BaseModel):
    booking: Booking
    origin: Coordinates
    destination: Coordinates

class VisitDistance(BaseModel):
    visit_index: int
    distance_meters: float

class RouteVisit(BaseModel):
    booking_id: str
    sequence: int
    start_time: int
    location: Literal['pickup', 'delivery']

class RouteListing(BaseModel):
    vehicle: str
    visits: List[RouteVisit]
